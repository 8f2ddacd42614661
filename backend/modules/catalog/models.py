"""
modules/catalog/models.py — ORM models for the shared category lists.

Owns tables: manufacturers, materials, colors, diameters, storage_locations

Categories are global (not owner-scoped). Inventory records refer to them
by value, not by foreign key.
"""

from sqlalchemy import Column, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from core.base import Base

DEFAULT_SORT_ORDER = 999


class Manufacturer(Base):
    __tablename__ = "manufacturers"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    sort_order = Column(Integer, default=DEFAULT_SORT_ORDER, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Material(Base):
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    sort_order = Column(Integer, default=DEFAULT_SORT_ORDER, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Color(Base):
    __tablename__ = "colors"
    __table_args__ = (
        UniqueConstraint("name", "code", name="uq_color_name_code"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(150), nullable=False)
    code = Column(String(9), nullable=False)  # #RRGGBB or #RGB
    created_at = Column(DateTime, server_default=func.now())


class Diameter(Base):
    __tablename__ = "diameters"

    id = Column(Integer, primary_key=True)
    value = Column(Float, unique=True, nullable=False)  # mm
    created_at = Column(DateTime, server_default=func.now())


class StorageLocation(Base):
    __tablename__ = "storage_locations"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    sort_order = Column(Integer, default=DEFAULT_SORT_ORDER, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
