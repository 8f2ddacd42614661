"""
core/base.py — Declarative Base and shared enums.

All ORM models import Base from here.
Enums used by more than one module live here to avoid circular imports.
"""

from enum import Enum
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# SQLAlchemy 2.x defaults to using enum member NAMES as DB values.
# We want member VALUES (lowercase strings) instead.
_ENUM_VALUES = lambda x: [e.value for e in x]


class SpoolStatus(str, Enum):
    SEALED = "sealed"
    OPENED = "opened"


class SpoolType(str, Enum):
    SPOOLED = "spooled"
    SPOOLLESS = "spoolless"


class ImportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"


class CategoryKind(str, Enum):
    """Shared reference lists. Values double as URL path segments."""
    MANUFACTURERS = "manufacturers"
    MATERIALS = "materials"
    COLORS = "colors"
    DIAMETERS = "diameters"
    STORAGE_LOCATIONS = "storage-locations"
