"""
modules/inventory/schemas.py — Pydantic schemas for the inventory domain.

Wire format is camelCase (CamelModel). Imported CSV rows go through the same
RecordCreate validation as single creates, with blank cells read as absent.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from core.base import SpoolStatus, SpoolType
from core.schemas import CamelModel, HexColor, blank_to_none

# Fields a patch may change but never clear
_REQUIRED_ON_PATCH = ("name", "material", "total_weight", "remaining_percentage", "dryer_count")


# ============== Records ==============

class RecordFields(CamelModel):
    manufacturer: Optional[str] = Field(default=None, max_length=100)
    color_name: Optional[str] = Field(default=None, max_length=100)
    color_code: Optional[HexColor] = None
    diameter: Optional[float] = Field(default=None, gt=0)
    print_temp: Optional[str] = Field(default=None, max_length=50)
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = Field(default=None, ge=0)
    status: Optional[SpoolStatus] = None
    spool_type: Optional[SpoolType] = None
    last_drying_date: Optional[date] = None
    storage_location: Optional[str] = Field(default=None, max_length=100)

    @field_validator("name", "material", check_fields=False)
    @classmethod
    def _strip_required_text(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("must not be empty")
        return value


class RecordCreate(RecordFields):
    name: str = Field(max_length=200)
    material: str = Field(max_length=100)
    total_weight: float = Field(gt=0)
    remaining_percentage: float = Field(ge=0, le=100)
    dryer_count: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _blank_cells(cls, data: Any) -> Any:
        return blank_to_none(data)

    @field_validator("material", mode="before")
    @classmethod
    def _material_as_text(cls, value):
        # The UI sends the material id as a number
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class RecordPatch(RecordFields):
    """Partial update. Only fields present in the request are applied."""
    name: Optional[str] = Field(default=None, max_length=200)
    material: Optional[str] = Field(default=None, max_length=100)
    total_weight: Optional[float] = Field(default=None, gt=0)
    remaining_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    dryer_count: Optional[int] = Field(default=None, ge=0)

    @field_validator("material", mode="before")
    @classmethod
    def _material_as_text(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator(*_REQUIRED_ON_PATCH)
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("cannot be cleared")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class RecordResponse(CamelModel):
    id: int
    name: str
    manufacturer: Optional[str] = None
    material: str
    color_name: Optional[str] = None
    color_code: Optional[str] = None
    diameter: Optional[float] = None
    print_temp: Optional[str] = None
    total_weight: float
    remaining_percentage: float
    purchase_date: Optional[date] = None
    purchase_price: Optional[float] = None
    status: Optional[SpoolStatus] = None
    spool_type: Optional[SpoolType] = None
    dryer_count: int = 0
    last_drying_date: Optional[date] = None
    storage_location: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============== Batch ==============

class BatchUpdateRequest(CamelModel):
    # Raw ids; coerced to ints (and filtered) by modules.inventory.batch
    ids: list[Any]
    updates: RecordPatch


class BatchDeleteRequest(CamelModel):
    ids: list[Any]


class BatchUpdateResponse(CamelModel):
    updated_count: int


class BatchDeleteResponse(CamelModel):
    deleted_count: int


# ============== Public view ==============

class PublicOwner(CamelModel):
    id: int
    name: str


class PublicRecordsResponse(CamelModel):
    records: list[RecordResponse]
    owner: PublicOwner
