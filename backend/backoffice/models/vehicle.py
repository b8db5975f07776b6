"""
Vehicle model

Structure:
- Vehicle
  └── VehicleInventory (one row per product carried)
      └── VehicleInventoryMovement (load / sale / return / adjustment log)

Stock bought with a vehicle attached is loaded onto it, invoices and
vendor returns raised against the vehicle take it off again.
"""
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, UniqueConstraint, DECIMAL
from backoffice.db.base import Base


class Vehicle(Base):
    """Delivery/route vehicle"""
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    number = Column(String(30), nullable=False, index=True, comment="Registration number")
    type = Column(String(50), nullable=False, comment="Vehicle type (truck, tempo, ...)")
    capacity = Column(String(50), comment="Capacity")
    driver_name = Column(String(100), comment="Driver name")
    driver_phone = Column(String(30), comment="Driver phone")

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Vehicle {self.id}: {self.number} ({self.type})>"


class VehicleInventory(Base):
    """Quantity of one product currently on one vehicle"""
    __tablename__ = "vehicle_inventory"

    # one row per vehicle + product, loads add to the existing row
    __table_args__ = (
        UniqueConstraint('vehicle_id', 'product_id', name='uq_vehicle_product'),
    )

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(DECIMAL(12, 2), nullable=False, default=Decimal("0.00"), comment="Quantity on board")

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<VehicleInventory {self.vehicle_id}:{self.product_id} = {self.quantity}>"


class VehicleInventoryMovement(Base):
    """Vehicle stock log

    type:
    - load: stock put on the vehicle (purchase or manual load)
    - sale: sold from the vehicle (invoice)
    - return: sent back to a vendor from the vehicle
    - adjustment: manual correction, quantity is the signed delta
    """
    __tablename__ = "vehicle_inventory_movements"

    id = Column(Integer, primary_key=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False, comment="load / sale / return / adjustment")
    quantity = Column(DECIMAL(12, 2), nullable=False, comment="Quantity moved")
    reference_id = Column(Integer, comment="Purchase / invoice / vendor return id")
    reference_type = Column(String(20), comment="purchase / invoice / vendor_return")
    date = Column(Date, nullable=False, default=date.today, comment="Business date")
    notes = Column(Text, comment="Notes")

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<VehicleInventoryMovement {self.type} {self.vehicle_id}:{self.product_id} {self.quantity}>"
