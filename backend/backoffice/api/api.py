"""API router aggregation"""
from fastapi import APIRouter

from backoffice.api.endpoints import (
    vendors, customers, vehicles, vehicle_inventory, products, stock_movements,
    purchases, invoices, payments, vendor_returns, halal_cash, company_settings,
    reports
)

api_router = APIRouter()

# Master data
api_router.include_router(vendors.router, prefix="/vendors", tags=["Vendors"])
api_router.include_router(customers.router, prefix="/customers", tags=["Customers"])
api_router.include_router(vehicles.router, prefix="/vehicles", tags=["Vehicles"])
api_router.include_router(vehicle_inventory.router, tags=["Vehicle inventory"])
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(stock_movements.router, prefix="/stock-movements", tags=["Stock"])

# Documents
api_router.include_router(purchases.router, prefix="/purchases", tags=["Purchases"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["Invoices"])
api_router.include_router(invoices.item_router, prefix="/invoice-items", tags=["Invoices"])
api_router.include_router(vendor_returns.router, prefix="/vendor-returns", tags=["Vendor returns"])

# Money
api_router.include_router(payments.vendor_router, prefix="/vendor-payments", tags=["Payments"])
api_router.include_router(payments.customer_router, prefix="/customer-payments", tags=["Payments"])
api_router.include_router(halal_cash.router, prefix="/halal-cash", tags=["Halal cash"])

# System
api_router.include_router(company_settings.router, prefix="/company-settings", tags=["Company settings"])
api_router.include_router(reports.router, prefix="/reports", tags=["Reports"])
