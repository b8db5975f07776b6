# Data models
# Parties -> documents (purchase / invoice / return) -> stock and vehicle ledgers

from backoffice.models.party import Vendor, Customer
from backoffice.models.vehicle import Vehicle, VehicleInventory, VehicleInventoryMovement
from backoffice.models.product import Product, StockMovement
from backoffice.models.purchase import Purchase, PurchaseItem
from backoffice.models.invoice import Invoice, InvoiceItem
from backoffice.models.vendor_return import VendorReturn, VendorReturnItem
from backoffice.models.payment import VendorPayment, CustomerPayment, HalalCashPayment
from backoffice.models.company_settings import CompanySettings

__all__ = [
    "Vendor",
    "Customer",
    "Vehicle",
    "VehicleInventory",
    "VehicleInventoryMovement",
    "Product",
    "StockMovement",
    "Purchase",
    "PurchaseItem",
    "Invoice",
    "InvoiceItem",
    "VendorReturn",
    "VendorReturnItem",
    "VendorPayment",
    "CustomerPayment",
    "HalalCashPayment",
    "CompanySettings",
]
