"""
modules/inventory/models.py — ORM model for the inventory domain.

Owns tables: inventory_records
"""

from sqlalchemy import (
    CheckConstraint, Column, Date, DateTime, Enum as SQLEnum, Float, ForeignKey, Integer, String,
)
from sqlalchemy.sql import func

from core.base import Base, SpoolStatus, SpoolType, _ENUM_VALUES


class InventoryRecord(Base):
    """One physical spool of filament, owned by exactly one user.

    Category columns (manufacturer, material, color, diameter, storage
    location) hold the category value as text, not a foreign key. For
    material the text is the materials.id the UI submits.
    """
    __tablename__ = "inventory_records"
    __table_args__ = (
        CheckConstraint(
            "remaining_percentage >= 0 AND remaining_percentage <= 100",
            name="ck_record_remaining_percentage",
        ),
        CheckConstraint("total_weight >= 0", name="ck_record_total_weight"),
    )

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    manufacturer = Column(String(100))
    material = Column(String(100), nullable=False)
    color_name = Column(String(100))
    color_code = Column(String(9))
    diameter = Column(Float)
    print_temp = Column(String(50))

    # Weight in kg, remaining as a percentage of it
    total_weight = Column(Float, nullable=False)
    remaining_percentage = Column(Float, nullable=False, default=100)

    purchase_date = Column(Date)
    purchase_price = Column(Float)
    status = Column(SQLEnum(SpoolStatus, values_callable=_ENUM_VALUES), nullable=True)
    spool_type = Column(SQLEnum(SpoolType, values_callable=_ENUM_VALUES), nullable=True)

    dryer_count = Column(Integer, nullable=False, default=0)
    last_drying_date = Column(Date)
    storage_location = Column(String(100))

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
