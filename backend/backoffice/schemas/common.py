"""Shared schema types"""
from decimal import Decimal
from typing import Any
from typing_extensions import Annotated
from pydantic import BeforeValidator


def _decimal_to_float(v: Any) -> Any:
    """DECIMAL columns come back as Decimal, the API speaks float"""
    if isinstance(v, Decimal):
        return float(v)
    return v


Amount = Annotated[float, BeforeValidator(_decimal_to_float)]
