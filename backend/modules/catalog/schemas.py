"""
modules/catalog/schemas.py — Pydantic schemas for category entries.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator, model_validator

from core.schemas import CamelModel, HexColor, blank_to_none


class CategoryInput(CamelModel):
    @model_validator(mode="before")
    @classmethod
    def _blank_cells(cls, data: Any) -> Any:
        return blank_to_none(data)


class NamedCreate(CategoryInput):
    """Manufacturer, material or storage location."""
    name: str = Field(max_length=100)
    sort_order: Optional[int] = None

    @field_validator("name")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()


class ColorCreate(CategoryInput):
    name: str = Field(max_length=150)
    code: HexColor

    @field_validator("name")
    @classmethod
    def _strip(cls, value: str) -> str:
        return value.strip()

    @field_validator("code", mode="before")
    @classmethod
    def _hash_prefix(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value and not value.startswith("#"):
                value = "#" + value
        return value


class DiameterCreate(CategoryInput):
    value: float = Field(gt=0, le=10)


class NamedResponse(CamelModel):
    id: int
    name: str
    sort_order: int
    created_at: Optional[datetime] = None


class ColorResponse(CamelModel):
    id: int
    name: str
    code: str
    created_at: Optional[datetime] = None


class DiameterResponse(CamelModel):
    id: int
    value: float
    created_at: Optional[datetime] = None
