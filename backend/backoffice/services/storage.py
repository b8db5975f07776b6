"""
Storage - repository over one AsyncSession

Every public coroutine is one unit of work and commits before returning.
Underscored helpers only stage changes so documents can combine them
(a purchase line touches product stock, the stock log and the vehicle
inventory in the same transaction).

Missing rows come back as None / False, the HTTP layer decides the status.
"""

import datetime as dt
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func, delete, and_, or_, cast, Integer
from sqlalchemy.ext.asyncio import AsyncSession

from backoffice.core.config import settings
from backoffice.core.logging_config import get_logger
from backoffice.models import (
    Vendor, Customer, Vehicle, VehicleInventory, VehicleInventoryMovement,
    Product, StockMovement, Purchase, PurchaseItem, Invoice, InvoiceItem,
    VendorReturn, VendorReturnItem, VendorPayment, CustomerPayment,
    HalalCashPayment, CompanySettings
)
from backoffice.schemas.purchase import PurchaseCreate
from backoffice.schemas.invoice import InvoiceCreate
from backoffice.schemas.vendor_return import VendorReturnCreate

logger = get_logger(__name__)

CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """float / int / str / None -> Decimal"""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value: Any) -> Decimal:
    """Round to cents"""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity: Any, unit_price: Any, total: Any = None) -> Decimal:
    """Line total as given, else quantity * unit price"""
    if total is not None:
        return money(total)
    return money(to_decimal(quantity) * to_decimal(unit_price))


def compute_halal_charge(
    subtotal: Any,
    include: bool,
    percent: Any = None,
    rate_per_kg: Any = None,
    total_kg_weight: Any = None) -> Decimal:
    """
    Halal charge for an invoice

    - not included: 0
    - weight known: rate per kg * kg
    - otherwise: percent of the subtotal
    """
    if not include:
        return Decimal("0.00")

    weight = to_decimal(total_kg_weight)
    if weight > 0:
        rate = to_decimal(rate_per_kg if rate_per_kg is not None else settings.DEFAULT_HALAL_RATE_PER_KG)
        return money(rate * weight)

    pct = to_decimal(percent if percent is not None else settings.DEFAULT_HALAL_CHARGE_PERCENT)
    return money(to_decimal(subtotal) * pct / Decimal("100"))


def compute_grand_total(subtotal: Any, halal_amount: Any, paid_by_cash: bool) -> Decimal:
    """Charge paid in cash is collected outside the bill"""
    if paid_by_cash:
        return money(subtotal)
    return money(to_decimal(subtotal) + to_decimal(halal_amount))


class Storage:
    """Repository for every back-office entity"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ==================== Generic helpers ====================

    async def _get(self, model, obj_id: int):
        return await self.db.get(model, obj_id)

    async def _page(
        self,
        model,
        conditions: List[Any],
        order_by: List[Any],
        page: int,
        limit: int) -> Tuple[list, int]:
        query = select(model)
        count_query = select(func.count(model.id))
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        total = (await self.db.execute(count_query)).scalar() or 0

        query = query.order_by(*order_by).offset((page - 1) * limit).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def _all(self, model, *conditions, order_by=None) -> list:
        query = select(model)
        if conditions:
            query = query.where(and_(*conditions))
        if order_by is not None:
            query = query.order_by(*order_by)
        else:
            query = query.order_by(model.id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _create(self, model, data: Dict[str, Any]):
        obj = model(**data)
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def _update(self, model, obj_id: int, data: Dict[str, Any]):
        obj = await self.db.get(model, obj_id)
        if not obj:
            return None
        for field, value in data.items():
            setattr(obj, field, value)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def _delete(self, model, obj_id: int) -> bool:
        obj = await self.db.get(model, obj_id)
        if not obj:
            return False
        await self.db.delete(obj)
        await self.db.commit()
        return True

    async def _count(self, column, value) -> int:
        result = await self.db.execute(
            select(func.count()).where(column == value)
        )
        return result.scalar() or 0

    async def _references(self, checks: List[Tuple[str, Any]], value: int) -> Dict[str, int]:
        """{label: count} for every referencing table with rows"""
        found = {}
        for label, column in checks:
            count = await self._count(column, value)
            if count:
                found[label] = count
        return found

    async def _sum(self, column, *conditions) -> Decimal:
        result = await self.db.execute(
            select(func.coalesce(func.sum(column), 0)).where(*conditions)
        )
        return to_decimal(result.scalar() or 0)

    async def _generate_no(self, column, prefix: str, on_date: Optional[dt.date] = None) -> str:
        """Document number: prefix + yyyymmdd + sequence (3 digits, more past 999)"""
        date_str = (on_date or dt.date.today()).strftime("%Y%m%d")
        pattern = f"{prefix}{date_str}%"
        # compare the sequence as a number, "1000" sorts below "999" as text
        seq_expr = cast(func.substr(column, len(prefix) + 9), Integer)
        result = await self.db.execute(select(func.max(seq_expr)).where(column.like(pattern)))
        max_seq = result.scalar()

        seq = (max_seq or 0) + 1
        return f"{prefix}{date_str}{seq:03d}"

    # ==================== Vendors ====================

    async def list_vendors(self, search: Optional[str] = None, page: int = 1, limit: int = 100) -> Tuple[List[Vendor], int]:
        conditions = []
        if search:
            conditions.append(or_(Vendor.name.contains(search), Vendor.phone.contains(search)))
        return await self._page(Vendor, conditions, [Vendor.name, Vendor.id], page, limit)

    async def get_vendors(self) -> List[Vendor]:
        return await self._all(Vendor, order_by=[Vendor.name, Vendor.id])

    async def get_vendor(self, vendor_id: int) -> Optional[Vendor]:
        return await self._get(Vendor, vendor_id)

    async def create_vendor(self, data: Dict[str, Any]) -> Vendor:
        return await self._create(Vendor, data)

    async def update_vendor(self, vendor_id: int, data: Dict[str, Any]) -> Optional[Vendor]:
        return await self._update(Vendor, vendor_id, data)

    async def delete_vendor(self, vendor_id: int) -> bool:
        return await self._delete(Vendor, vendor_id)

    async def vendor_references(self, vendor_id: int) -> Dict[str, int]:
        return await self._references([
            ("purchases", Purchase.vendor_id),
            ("payments", VendorPayment.vendor_id),
            ("returns", VendorReturn.vendor_id),
        ], vendor_id)

    async def get_vendor_balance(self, vendor_id: int) -> Dict[str, Decimal]:
        total_purchases = await self._sum(Purchase.total_amount, Purchase.vendor_id == vendor_id)
        total_payments = await self._sum(VendorPayment.amount, VendorPayment.vendor_id == vendor_id)
        total_returns = await self._sum(VendorReturn.total_amount, VendorReturn.vendor_id == vendor_id)
        return {
            "total_purchases": total_purchases,
            "total_payments": total_payments,
            "total_returns": total_returns,
            "balance": total_purchases - total_payments - total_returns,
        }

    # ==================== Customers ====================

    async def list_customers(self, search: Optional[str] = None, page: int = 1, limit: int = 100) -> Tuple[List[Customer], int]:
        conditions = []
        if search:
            conditions.append(or_(Customer.name.contains(search), Customer.phone.contains(search)))
        return await self._page(Customer, conditions, [Customer.name, Customer.id], page, limit)

    async def get_customers(self) -> List[Customer]:
        return await self._all(Customer, order_by=[Customer.name, Customer.id])

    async def get_customer(self, customer_id: int) -> Optional[Customer]:
        return await self._get(Customer, customer_id)

    async def create_customer(self, data: Dict[str, Any]) -> Customer:
        return await self._create(Customer, data)

    async def update_customer(self, customer_id: int, data: Dict[str, Any]) -> Optional[Customer]:
        return await self._update(Customer, customer_id, data)

    async def delete_customer(self, customer_id: int) -> bool:
        return await self._delete(Customer, customer_id)

    async def customer_references(self, customer_id: int) -> Dict[str, int]:
        return await self._references([
            ("invoices", Invoice.customer_id),
            ("payments", CustomerPayment.customer_id),
            ("halal cash payments", HalalCashPayment.customer_id),
        ], customer_id)

    async def get_customer_balance(self, customer_id: int) -> Dict[str, Decimal]:
        total_invoices = await self._sum(Invoice.grand_total, Invoice.customer_id == customer_id)
        total_payments = await self._sum(CustomerPayment.amount, CustomerPayment.customer_id == customer_id)
        return {
            "total_invoices": total_invoices,
            "total_payments": total_payments,
            "balance": total_invoices - total_payments,
        }

    # ==================== Vehicles ====================

    async def list_vehicles(self, page: int = 1, limit: int = 100) -> Tuple[List[Vehicle], int]:
        return await self._page(Vehicle, [], [Vehicle.number, Vehicle.id], page, limit)

    async def get_vehicles(self) -> List[Vehicle]:
        return await self._all(Vehicle, order_by=[Vehicle.number, Vehicle.id])

    async def get_vehicle(self, vehicle_id: int) -> Optional[Vehicle]:
        return await self._get(Vehicle, vehicle_id)

    async def create_vehicle(self, data: Dict[str, Any]) -> Vehicle:
        return await self._create(Vehicle, data)

    async def update_vehicle(self, vehicle_id: int, data: Dict[str, Any]) -> Optional[Vehicle]:
        return await self._update(Vehicle, vehicle_id, data)

    async def delete_vehicle(self, vehicle_id: int) -> bool:
        """Delete a vehicle together with its inventory and movement log"""
        vehicle = await self.db.get(Vehicle, vehicle_id)
        if not vehicle:
            return False
        await self.db.execute(delete(VehicleInventory).where(VehicleInventory.vehicle_id == vehicle_id))
        await self.db.execute(delete(VehicleInventoryMovement).where(VehicleInventoryMovement.vehicle_id == vehicle_id))
        await self.db.delete(vehicle)
        await self.db.commit()
        return True

    async def vehicle_references(self, vehicle_id: int) -> Dict[str, int]:
        return await self._references([
            ("purchases", Purchase.vehicle_id),
            ("invoices", Invoice.vehicle_id),
            ("vendor returns", VendorReturn.vehicle_id),
        ], vehicle_id)

    # ==================== Products ====================

    async def list_products(self, search: Optional[str] = None, page: int = 1, limit: int = 100) -> Tuple[List[Product], int]:
        conditions = []
        if search:
            conditions.append(Product.name.contains(search))
        return await self._page(Product, conditions, [Product.name, Product.id], page, limit)

    async def get_products(self) -> List[Product]:
        return await self._all(Product, order_by=[Product.name, Product.id])

    async def get_product(self, product_id: int) -> Optional[Product]:
        return await self._get(Product, product_id)

    async def create_product(self, data: Dict[str, Any]) -> Product:
        data = dict(data)
        if data.get("current_stock") is None:
            data["current_stock"] = Decimal("0")
        if data.get("reorder_level") is None:
            data["reorder_level"] = to_decimal(settings.DEFAULT_REORDER_LEVEL)
        return await self._create(Product, data)

    async def update_product(self, product_id: int, data: Dict[str, Any]) -> Optional[Product]:
        return await self._update(Product, product_id, data)

    async def delete_product(self, product_id: int) -> bool:
        return await self._delete(Product, product_id)

    async def product_references(self, product_id: int) -> Dict[str, int]:
        return await self._references([
            ("purchase lines", PurchaseItem.product_id),
            ("invoice lines", InvoiceItem.product_id),
            ("vendor return lines", VendorReturnItem.product_id),
            ("stock movements", StockMovement.product_id),
            ("vehicle inventory rows", VehicleInventory.product_id),
        ], product_id)

    async def missing_products(self, product_ids: List[int]) -> List[int]:
        """Ids among product_ids that have no product"""
        wanted = set(product_ids)
        if not wanted:
            return []
        result = await self.db.execute(select(Product.id).where(Product.id.in_(wanted)))
        found = set(result.scalars().all())
        return sorted(wanted - found)

    async def _apply_product_stock(self, product_id: int, quantity: Any, movement_type: str) -> Optional[Product]:
        """in adds, out subtracts, stock never drops below zero"""
        product = await self.db.get(Product, product_id)
        if not product:
            return None

        current = product.current_stock or Decimal("0")
        if movement_type == "in":
            new_stock = current + to_decimal(quantity)
        else:
            new_stock = current - to_decimal(quantity)
        product.current_stock = max(Decimal("0"), new_stock)
        return product

    # ==================== Stock movements ====================

    async def get_stock_movements(
        self,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
        product_id: Optional[int] = None) -> List[StockMovement]:
        conditions = []
        if start_date:
            conditions.append(StockMovement.date >= start_date)
        if end_date:
            conditions.append(StockMovement.date <= end_date)
        if product_id:
            conditions.append(StockMovement.product_id == product_id)
        return await self._all(
            StockMovement, *conditions,
            order_by=[StockMovement.date.desc(), StockMovement.id.desc()]
        )

    def _log_stock_movement(
        self,
        product_id: int,
        movement_type: str,
        quantity: Any,
        reason: str,
        movement_date: dt.date,
        reference_id: Optional[int] = None) -> StockMovement:
        movement = StockMovement(
            product_id=product_id,
            type=movement_type,
            quantity=to_decimal(quantity),
            reason=reason,
            date=movement_date,
            reference_id=reference_id
        )
        self.db.add(movement)
        return movement

    async def create_stock_movement(self, data: Dict[str, Any]) -> StockMovement:
        """Record a manual movement and apply it to the product stock"""
        movement = self._log_stock_movement(
            product_id=data["product_id"],
            movement_type=data["type"],
            quantity=data["quantity"],
            reason=data["reason"],
            movement_date=data["date"],
            reference_id=data.get("reference_id")
        )
        await self._apply_product_stock(data["product_id"], data["quantity"], data["type"])
        await self.db.commit()
        await self.db.refresh(movement)
        return movement

    # ==================== Vehicle inventory ====================

    async def get_vehicle_inventory(self, vehicle_id: int) -> List[VehicleInventory]:
        return await self._all(VehicleInventory, VehicleInventory.vehicle_id == vehicle_id)

    async def get_all_vehicle_inventories(self) -> Dict[int, List[VehicleInventory]]:
        """{vehicle_id: rows}, vehicles without stock map to an empty list"""
        grouped: Dict[int, List[VehicleInventory]] = {v.id: [] for v in await self.get_vehicles()}
        for row in await self._all(VehicleInventory):
            grouped.setdefault(row.vehicle_id, []).append(row)
        return grouped

    async def get_vehicle_product_inventory(self, vehicle_id: int, product_id: int) -> Optional[VehicleInventory]:
        result = await self.db.execute(
            select(VehicleInventory).where(
                VehicleInventory.vehicle_id == vehicle_id,
                VehicleInventory.product_id == product_id
            )
        )
        return result.scalar_one_or_none()

    def _log_vehicle_movement(
        self,
        vehicle_id: int,
        product_id: int,
        movement_type: str,
        quantity: Any,
        reference_id: Optional[int] = None,
        reference_type: Optional[str] = None,
        movement_date: Optional[dt.date] = None,
        notes: Optional[str] = None) -> VehicleInventoryMovement:
        movement = VehicleInventoryMovement(
            vehicle_id=vehicle_id,
            product_id=product_id,
            type=movement_type,
            quantity=to_decimal(quantity),
            reference_id=reference_id,
            reference_type=reference_type if reference_id else None,
            date=movement_date or dt.date.today(),
            notes=notes
        )
        self.db.add(movement)
        return movement

    async def _load_vehicle_inventory(
        self,
        vehicle_id: int,
        product_id: int,
        quantity: Any,
        reference_id: Optional[int] = None,
        reference_type: Optional[str] = None,
        movement_date: Optional[dt.date] = None,
        notes: Optional[str] = None) -> VehicleInventory:
        inventory = await self.get_vehicle_product_inventory(vehicle_id, product_id)
        if inventory:
            inventory.quantity = (inventory.quantity or Decimal("0")) + to_decimal(quantity)
        else:
            inventory = VehicleInventory(
                vehicle_id=vehicle_id,
                product_id=product_id,
                quantity=to_decimal(quantity)
            )
            self.db.add(inventory)
            # the session does not autoflush, the next lookup must see this row
            await self.db.flush()

        self._log_vehicle_movement(
            vehicle_id, product_id, "load", quantity,
            reference_id, reference_type, movement_date, notes
        )
        return inventory

    async def _deduct_vehicle_inventory(
        self,
        vehicle_id: int,
        product_id: int,
        quantity: Any,
        reference_id: Optional[int] = None,
        reference_type: Optional[str] = None,
        movement_type: str = "sale",
        movement_date: Optional[dt.date] = None,
        notes: Optional[str] = None) -> Optional[VehicleInventory]:
        """None when the vehicle does not carry enough of the product"""
        inventory = await self.get_vehicle_product_inventory(vehicle_id, product_id)
        requested = to_decimal(quantity)

        if not inventory:
            logger.warning(f"Vehicle {vehicle_id} has no inventory for product {product_id}")
            return None

        if inventory.quantity < requested:
            logger.warning(
                f"Insufficient stock: vehicle {vehicle_id} has {inventory.quantity} "
                f"of product {product_id}, requested {requested}"
            )
            return None

        inventory.quantity = max(Decimal("0"), inventory.quantity - requested)
        self._log_vehicle_movement(
            vehicle_id, product_id, movement_type, requested,
            reference_id, reference_type, movement_date, notes
        )
        return inventory

    async def load_vehicle_inventory(
        self,
        vehicle_id: int,
        product_id: int,
        quantity: Any,
        purchase_id: Optional[int] = None,
        movement_date: Optional[dt.date] = None,
        notes: Optional[str] = None) -> VehicleInventory:
        inventory = await self._load_vehicle_inventory(
            vehicle_id, product_id, quantity,
            reference_id=purchase_id, reference_type="purchase",
            movement_date=movement_date, notes=notes
        )
        await self.db.commit()
        await self.db.refresh(inventory)
        return inventory

    async def deduct_vehicle_inventory(
        self,
        vehicle_id: int,
        product_id: int,
        quantity: Any,
        invoice_id: Optional[int] = None) -> Optional[VehicleInventory]:
        inventory = await self._deduct_vehicle_inventory(
            vehicle_id, product_id, quantity,
            reference_id=invoice_id, reference_type="invoice"
        )
        if inventory is None:
            return None
        await self.db.commit()
        await self.db.refresh(inventory)
        return inventory

    async def set_vehicle_inventory(
        self,
        vehicle_id: int,
        product_id: int,
        quantity: Any,
        notes: Optional[str] = None) -> Optional[VehicleInventory]:
        """Overwrite the quantity on board, the delta is logged as an adjustment"""
        inventory = await self.get_vehicle_product_inventory(vehicle_id, product_id)
        if not inventory:
            return None

        new_quantity = to_decimal(quantity)
        delta = new_quantity - (inventory.quantity or Decimal("0"))
        inventory.quantity = new_quantity
        if delta != 0:
            self._log_vehicle_movement(vehicle_id, product_id, "adjustment", delta, notes=notes)

        await self.db.commit()
        await self.db.refresh(inventory)
        return inventory

    async def record_vehicle_movement(self, data: Dict[str, Any]) -> Optional[VehicleInventoryMovement]:
        """
        Record a movement and apply it to the vehicle inventory

        load adds, sale / return deduct (None when stock is short),
        adjustment applies the signed quantity and floors at zero.
        """
        vehicle_id = data["vehicle_id"]
        product_id = data["product_id"]
        movement_type = data["type"]
        quantity = to_decimal(data["quantity"])
        inventory = await self.get_vehicle_product_inventory(vehicle_id, product_id)

        if movement_type == "load":
            if inventory:
                inventory.quantity = (inventory.quantity or Decimal("0")) + quantity
            else:
                self.db.add(VehicleInventory(vehicle_id=vehicle_id, product_id=product_id, quantity=quantity))
        elif movement_type in ("sale", "return"):
            if not inventory or inventory.quantity < quantity:
                logger.warning(
                    f"Rejected {movement_type} of {quantity} for product {product_id} "
                    f"on vehicle {vehicle_id}: insufficient stock"
                )
                return None
            inventory.quantity = inventory.quantity - quantity
        else:
            current = inventory.quantity if inventory else Decimal("0")
            if inventory:
                inventory.quantity = max(Decimal("0"), current + quantity)
            else:
                self.db.add(VehicleInventory(
                    vehicle_id=vehicle_id, product_id=product_id,
                    quantity=max(Decimal("0"), quantity)
                ))

        movement = self._log_vehicle_movement(
            vehicle_id, product_id, movement_type, quantity,
            data.get("reference_id"), data.get("reference_type"),
            data.get("date"), data.get("notes")
        )
        await self.db.commit()
        await self.db.refresh(movement)
        return movement

    async def get_vehicle_inventory_movements(self, vehicle_id: Optional[int] = None) -> List[VehicleInventoryMovement]:
        conditions = []
        if vehicle_id:
            conditions.append(VehicleInventoryMovement.vehicle_id == vehicle_id)
        return await self._all(
            VehicleInventoryMovement, *conditions,
            order_by=[VehicleInventoryMovement.date.desc(), VehicleInventoryMovement.id.desc()]
        )

    # ==================== Purchases ====================

    async def list_purchases(self, vendor_id: Optional[int] = None, page: int = 1, limit: int = 100) -> Tuple[List[Purchase], int]:
        conditions = []
        if vendor_id:
            conditions.append(Purchase.vendor_id == vendor_id)
        return await self._page(Purchase, conditions, [Purchase.date.desc(), Purchase.id.desc()], page, limit)

    async def get_purchases(
        self,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None) -> List[Purchase]:
        conditions = []
        if start_date:
            conditions.append(Purchase.date >= start_date)
        if end_date:
            conditions.append(Purchase.date <= end_date)
        return await self._all(Purchase, *conditions)

    async def get_purchase(self, purchase_id: int) -> Optional[Purchase]:
        return await self._get(Purchase, purchase_id)

    async def get_purchase_items(self, purchase_id: int) -> List[PurchaseItem]:
        return await self._all(PurchaseItem, PurchaseItem.purchase_id == purchase_id)

    async def create_purchase(self, purchase_in: PurchaseCreate) -> Purchase:
        """
        Create a purchase with its lines

        Per line: product stock in, stock log, and the vehicle gets loaded
        when the purchase names one.
        """
        totals = [line_total(i.quantity, i.unit_price, i.total) for i in purchase_in.items]
        total_amount = money(purchase_in.total_amount) if purchase_in.total_amount is not None else sum(totals, Decimal("0.00"))

        purchase = Purchase(
            purchase_no=await self._generate_no(Purchase.purchase_no, "PO", purchase_in.date),
            vendor_id=purchase_in.vendor_id,
            vehicle_id=purchase_in.vehicle_id,
            date=purchase_in.date,
            total_amount=total_amount,
            status=purchase_in.status or "completed"
        )
        self.db.add(purchase)
        await self.db.flush()

        for item, total in zip(purchase_in.items, totals):
            self.db.add(PurchaseItem(
                purchase_id=purchase.id,
                product_id=item.product_id,
                quantity=to_decimal(item.quantity),
                unit_price=to_decimal(item.unit_price),
                total=total
            ))

            await self._apply_product_stock(item.product_id, item.quantity, "in")
            self._log_stock_movement(
                item.product_id, "in", item.quantity,
                f"Purchase order {purchase.purchase_no}",
                purchase_in.date, purchase.id
            )

            if purchase_in.vehicle_id:
                await self._load_vehicle_inventory(
                    purchase_in.vehicle_id, item.product_id, item.quantity,
                    reference_id=purchase.id, reference_type="purchase",
                    movement_date=purchase_in.date
                )

        await self.db.commit()
        await self.db.refresh(purchase)
        logger.info(f"Purchase {purchase.purchase_no} created: vendor {purchase.vendor_id}, {len(totals)} lines, {total_amount}")
        return purchase

    # ==================== Invoices ====================

    async def list_invoices(
        self,
        customer_id: Optional[int] = None,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None,
        page: int = 1,
        limit: int = 100) -> Tuple[List[Invoice], int]:
        conditions = []
        if customer_id:
            conditions.append(Invoice.customer_id == customer_id)
        if start_date:
            conditions.append(Invoice.date >= start_date)
        if end_date:
            conditions.append(Invoice.date <= end_date)
        return await self._page(Invoice, conditions, [Invoice.date.desc(), Invoice.id.desc()], page, limit)

    async def get_invoices(
        self,
        customer_id: Optional[int] = None,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None) -> List[Invoice]:
        conditions = []
        if customer_id:
            conditions.append(Invoice.customer_id == customer_id)
        if start_date:
            conditions.append(Invoice.date >= start_date)
        if end_date:
            conditions.append(Invoice.date <= end_date)
        return await self._all(Invoice, *conditions)

    async def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        return await self._get(Invoice, invoice_id)

    async def get_invoice_items(self, invoice_id: int) -> List[InvoiceItem]:
        return await self._all(InvoiceItem, InvoiceItem.invoice_id == invoice_id)

    async def get_invoice_item(self, item_id: int) -> Optional[InvoiceItem]:
        return await self._get(InvoiceItem, item_id)

    async def create_invoice(self, invoice_in: InvoiceCreate) -> Invoice:
        """
        Create an invoice with its lines

        Per line: product stock out, stock log, and when the invoice names a
        vehicle the quantity is taken off it. A vehicle short on stock only
        logs a warning, the sale still goes through.
        """
        totals = [line_total(i.quantity, i.unit_price, i.total) for i in invoice_in.items]
        subtotal = money(invoice_in.subtotal) if invoice_in.subtotal is not None else sum(totals, Decimal("0.00"))

        percent = invoice_in.halal_charge_percent
        if percent is None:
            percent = settings.DEFAULT_HALAL_CHARGE_PERCENT
        rate_per_kg = invoice_in.halal_rate_per_kg
        if rate_per_kg is None:
            rate_per_kg = settings.DEFAULT_HALAL_RATE_PER_KG

        if not invoice_in.include_halal_charge:
            halal_amount = Decimal("0.00")
        elif invoice_in.halal_charge_amount is not None:
            halal_amount = money(invoice_in.halal_charge_amount)
        else:
            halal_amount = compute_halal_charge(
                subtotal, True, percent, rate_per_kg, invoice_in.total_kg_weight
            )

        if invoice_in.grand_total is not None:
            grand_total = money(invoice_in.grand_total)
        else:
            grand_total = compute_grand_total(subtotal, halal_amount, invoice_in.halal_paid_by_cash)

        invoice_number = invoice_in.invoice_number or await self._generate_no(
            Invoice.invoice_number, "INV", invoice_in.date
        )

        invoice = Invoice(
            invoice_number=invoice_number,
            customer_id=invoice_in.customer_id,
            vehicle_id=invoice_in.vehicle_id,
            date=invoice_in.date,
            subtotal=subtotal,
            include_halal_charge=invoice_in.include_halal_charge,
            halal_charge_percent=to_decimal(percent),
            halal_charge_amount=halal_amount,
            halal_rate_per_kg=to_decimal(rate_per_kg),
            halal_paid_by_cash=invoice_in.halal_paid_by_cash,
            total_kg_weight=to_decimal(invoice_in.total_kg_weight),
            grand_total=grand_total,
            status=invoice_in.status or "pending",
            notes=invoice_in.notes
        )
        self.db.add(invoice)
        await self.db.flush()

        for item, total in zip(invoice_in.items, totals):
            self.db.add(InvoiceItem(
                invoice_id=invoice.id,
                product_id=item.product_id,
                quantity=to_decimal(item.quantity),
                unit_price=to_decimal(item.unit_price),
                total=total
            ))

            await self._apply_product_stock(item.product_id, item.quantity, "out")
            self._log_stock_movement(
                item.product_id, "out", item.quantity,
                f"Invoice {invoice_number}",
                invoice_in.date, invoice.id
            )

            if invoice_in.vehicle_id:
                deducted = await self._deduct_vehicle_inventory(
                    invoice_in.vehicle_id, item.product_id, item.quantity,
                    reference_id=invoice.id, reference_type="invoice",
                    movement_date=invoice_in.date
                )
                if deducted is None:
                    logger.warning(
                        f"Failed to deduct {item.quantity} of product {item.product_id} "
                        f"from vehicle {invoice_in.vehicle_id} for invoice {invoice_number}"
                    )

        await self.db.commit()
        await self.db.refresh(invoice)
        logger.info(f"Invoice {invoice_number} created: customer {invoice.customer_id}, {len(totals)} lines, {grand_total}")
        return invoice

    async def update_invoice(self, invoice_id: int, data: Dict[str, Any]) -> Optional[Invoice]:
        return await self._update(Invoice, invoice_id, data)

    async def update_invoice_item(self, item_id: int, unit_price: Any, total: Any = None) -> Optional[InvoiceItem]:
        item = await self.db.get(InvoiceItem, item_id)
        if not item:
            return None
        item.unit_price = to_decimal(unit_price)
        item.total = line_total(item.quantity, unit_price, total)
        await self.db.commit()
        await self.db.refresh(item)
        return item

    # ==================== Vendor returns ====================

    async def get_vendor_returns(
        self,
        vendor_id: Optional[int] = None,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None) -> List[VendorReturn]:
        conditions = []
        if vendor_id:
            conditions.append(VendorReturn.vendor_id == vendor_id)
        if start_date:
            conditions.append(VendorReturn.date >= start_date)
        if end_date:
            conditions.append(VendorReturn.date <= end_date)
        return await self._all(
            VendorReturn, *conditions,
            order_by=[VendorReturn.date.desc(), VendorReturn.id.desc()]
        )

    async def get_vendor_return(self, return_id: int) -> Optional[VendorReturn]:
        return await self._get(VendorReturn, return_id)

    async def get_vendor_return_items(self, return_id: int) -> List[VendorReturnItem]:
        return await self._all(VendorReturnItem, VendorReturnItem.return_id == return_id)

    async def create_vendor_return(self, return_in: VendorReturnCreate) -> VendorReturn:
        """
        Create a vendor return with its lines

        Per line: product stock out, stock log, and the vehicle inventory is
        reduced when the return names a vehicle.
        """
        totals = [line_total(i.quantity, i.unit_price, i.total) for i in return_in.items]
        total_amount = money(return_in.total_amount) if return_in.total_amount is not None else sum(totals, Decimal("0.00"))

        vendor_return = VendorReturn(
            return_no=await self._generate_no(VendorReturn.return_no, "RT", return_in.date),
            vendor_id=return_in.vendor_id,
            purchase_id=return_in.purchase_id,
            vehicle_id=return_in.vehicle_id,
            date=return_in.date,
            total_amount=total_amount,
            status=return_in.status or "completed",
            notes=return_in.notes
        )
        self.db.add(vendor_return)
        await self.db.flush()

        for item, total in zip(return_in.items, totals):
            self.db.add(VendorReturnItem(
                return_id=vendor_return.id,
                product_id=item.product_id,
                quantity=to_decimal(item.quantity),
                unit_price=to_decimal(item.unit_price),
                total=total,
                reason=item.reason
            ))

            await self._apply_product_stock(item.product_id, item.quantity, "out")
            self._log_stock_movement(
                item.product_id, "out", item.quantity,
                f"Vendor return: {item.reason}",
                return_in.date, vendor_return.id
            )

            if return_in.vehicle_id:
                deducted = await self._deduct_vehicle_inventory(
                    return_in.vehicle_id, item.product_id, item.quantity,
                    reference_id=vendor_return.id, reference_type="vendor_return",
                    movement_type="return", movement_date=return_in.date
                )
                if deducted is None:
                    logger.warning(
                        f"Failed to deduct {item.quantity} of product {item.product_id} "
                        f"from vehicle {return_in.vehicle_id} for return {vendor_return.return_no}"
                    )

        await self.db.commit()
        await self.db.refresh(vendor_return)
        logger.info(f"Vendor return {vendor_return.return_no} created: vendor {vendor_return.vendor_id}, {total_amount}")
        return vendor_return

    # ==================== Payments ====================

    async def get_vendor_payments(self, vendor_id: Optional[int] = None) -> List[VendorPayment]:
        conditions = []
        if vendor_id:
            conditions.append(VendorPayment.vendor_id == vendor_id)
        return await self._all(
            VendorPayment, *conditions,
            order_by=[VendorPayment.date.desc(), VendorPayment.id.desc()]
        )

    async def create_vendor_payment(self, data: Dict[str, Any]) -> VendorPayment:
        data = dict(data, amount=money(data["amount"]))
        payment = await self._create(VendorPayment, data)
        logger.info(f"Vendor payment {payment.id}: vendor {payment.vendor_id} {payment.amount}")
        return payment

    async def get_customer_payments(self, customer_id: Optional[int] = None) -> List[CustomerPayment]:
        conditions = []
        if customer_id:
            conditions.append(CustomerPayment.customer_id == customer_id)
        return await self._all(
            CustomerPayment, *conditions,
            order_by=[CustomerPayment.date.desc(), CustomerPayment.id.desc()]
        )

    async def create_customer_payment(self, data: Dict[str, Any]) -> CustomerPayment:
        data = dict(data, amount=money(data["amount"]))
        payment = await self._create(CustomerPayment, data)
        logger.info(f"Customer payment {payment.id}: customer {payment.customer_id} {payment.amount}")
        return payment

    # ==================== Halal cash payments ====================

    async def get_halal_cash_payments(
        self,
        start_date: Optional[dt.date] = None,
        end_date: Optional[dt.date] = None) -> List[HalalCashPayment]:
        conditions = []
        if start_date:
            conditions.append(HalalCashPayment.date >= start_date)
        if end_date:
            conditions.append(HalalCashPayment.date <= end_date)
        return await self._all(
            HalalCashPayment, *conditions,
            order_by=[HalalCashPayment.date.desc(), HalalCashPayment.id.desc()]
        )

    async def create_halal_cash_payment(self, data: Dict[str, Any], invoice: Optional[Invoice] = None) -> HalalCashPayment:
        """Snapshot number, bill total and customer of a linked invoice"""
        data = dict(data, amount=money(data["amount"]))
        if invoice is not None:
            if not data.get("invoice_number"):
                data["invoice_number"] = invoice.invoice_number
            if data.get("total_bill_amount") is None:
                data["total_bill_amount"] = invoice.grand_total
            if data.get("customer_id") is None:
                data["customer_id"] = invoice.customer_id
        return await self._create(HalalCashPayment, data)

    async def delete_halal_cash_payment(self, payment_id: int) -> bool:
        return await self._delete(HalalCashPayment, payment_id)

    # ==================== Company settings ====================

    async def get_company_settings(self) -> Optional[CompanySettings]:
        result = await self.db.execute(select(CompanySettings).order_by(CompanySettings.id).limit(1))
        return result.scalar_one_or_none()

    async def upsert_company_settings(self, data: Dict[str, Any]) -> CompanySettings:
        existing = await self.get_company_settings()
        if existing:
            return await self._update(CompanySettings, existing.id, data)
        return await self._create(CompanySettings, data)
