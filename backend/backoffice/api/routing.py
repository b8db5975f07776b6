"""
Route class turning request validation failures into a plain 400

Every resource router is built with its own message, e.g.
APIRouter(route_class=invalid_data_route("Invalid vendor data")).
FastAPI keeps the route class when routers are included into each other.
"""
from typing import Callable, Type

from fastapi import HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute

from backoffice.core.logging_config import get_logger

logger = get_logger(__name__)


def invalid_data_route(message: str) -> Type[APIRoute]:
    """APIRoute subclass answering 400 `message` on bad input"""

    class InvalidDataRoute(APIRoute):
        def get_route_handler(self) -> Callable:
            original_handler = super().get_route_handler()

            async def handler(request: Request) -> Response:
                try:
                    return await original_handler(request)
                except RequestValidationError as exc:
                    logger.warning(f"{request.method} {request.url.path}: {message} {exc.errors()}")
                    raise HTTPException(status_code=400, detail=message)

            return handler

    return InvalidDataRoute
