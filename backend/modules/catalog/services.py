"""
catalog/services.py — Category listing, creation, deletion, CSV import and export.

Each category is described once by a CategorySpec: its table, schemas,
duplicate key, CSV layout and the in-use check that guards deletes. Routes
and imports read that one description instead of keeping per-category copies.
"""

import csv
import io
import logging
from dataclasses import dataclass
from typing import Callable, Iterator

from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.base import CategoryKind
from core.bulk_import import ImportOutcome, import_rows
from core.dedup import DuplicateKey, color_key, diameter_key, existing_keys, name_key
from core.errors import ConflictError, InUseError, NotFoundError, ValidationError
from core.line_parser import Field, ParsedRow, parse_lines, parse_triples
from modules.catalog.models import Color, Diameter, Manufacturer, Material, StorageLocation
from modules.catalog.schemas import (
    ColorCreate, ColorResponse, DiameterCreate, DiameterResponse, NamedCreate, NamedResponse,
)
from modules.inventory.models import InventoryRecord

log = logging.getLogger("spoolvault.api")


@dataclass(frozen=True)
class CategorySpec:
    kind: CategoryKind
    label: str
    model: type
    create_schema: type
    response_schema: type
    key: DuplicateKey
    export_columns: tuple
    parse: Callable[[str], Iterator[ParsedRow]]
    project: Callable[[dict], dict]
    in_use: Callable[[Session, object], int]


# ============== CSV layouts ==============

def _single_column(name: str, *aliases: str) -> Callable[[str], Iterator[ParsedRow]]:
    fields = [Field(name, 0, aliases)]
    return lambda text: parse_lines(text, fields)


_COLOR_FIELDS = [
    Field("brand", 0),
    Field("colorName", 1, ("name",)),
    Field("code", 2, ("hex",)),
]


def _parse_colors(text: str) -> Iterator[ParsedRow]:
    """"brand,name,code" or "name,code" per line."""
    return parse_triples(text, _COLOR_FIELDS)


def _project_color(values: dict) -> dict:
    brand, color_name = values.get("brand", ""), values.get("colorName", "")
    name = f"{color_name} ({brand})" if brand and color_name else color_name
    return {"name": name, "code": values.get("code", "")}


def _project_name(values: dict) -> dict:
    return {"name": values.get("name", "")}


def _project_value(values: dict) -> dict:
    return {"value": values.get("value", "")}


# ============== In-use checks ==============
# Categories are shared, so these look at every owner's records.

def _records_where(db: Session, *criteria) -> int:
    return db.query(InventoryRecord.id).filter(*criteria).count()


def _manufacturer_in_use(db: Session, entry: Manufacturer) -> int:
    return _records_where(db, InventoryRecord.manufacturer == entry.name)


def _material_in_use(db: Session, entry: Material) -> int:
    # Records store the material id (as text); older rows may hold the name
    return _records_where(db, InventoryRecord.material.in_([entry.name, str(entry.id)]))


def _color_in_use(db: Session, entry: Color) -> int:
    return _records_where(
        db, or_(InventoryRecord.color_name == entry.name, InventoryRecord.color_code == entry.code)
    )


def _diameter_in_use(db: Session, entry: Diameter) -> int:
    return _records_where(db, InventoryRecord.diameter == entry.value)


def _storage_location_in_use(db: Session, entry: StorageLocation) -> int:
    return _records_where(db, InventoryRecord.storage_location == entry.name)


CATEGORIES: dict[CategoryKind, CategorySpec] = {
    CategoryKind.MANUFACTURERS: CategorySpec(
        CategoryKind.MANUFACTURERS, "manufacturer", Manufacturer, NamedCreate, NamedResponse,
        name_key, ("name",), _single_column("name", "hersteller", "vendor"),
        _project_name, _manufacturer_in_use,
    ),
    CategoryKind.MATERIALS: CategorySpec(
        CategoryKind.MATERIALS, "material", Material, NamedCreate, NamedResponse,
        name_key, ("name",), _single_column("name", "material", "type"),
        _project_name, _material_in_use,
    ),
    CategoryKind.COLORS: CategorySpec(
        CategoryKind.COLORS, "color", Color, ColorCreate, ColorResponse,
        color_key, ("name", "code"), _parse_colors,
        _project_color, _color_in_use,
    ),
    CategoryKind.DIAMETERS: CategorySpec(
        CategoryKind.DIAMETERS, "diameter", Diameter, DiameterCreate, DiameterResponse,
        diameter_key, ("value",), _single_column("value"),
        _project_value, _diameter_in_use,
    ),
    CategoryKind.STORAGE_LOCATIONS: CategorySpec(
        CategoryKind.STORAGE_LOCATIONS, "storage location", StorageLocation, NamedCreate, NamedResponse,
        name_key, ("name",), _single_column("name"),
        _project_name, _storage_location_in_use,
    ),
}


# ============== Operations ==============

def list_entries(db: Session, spec: CategorySpec) -> list:
    model = spec.model
    if hasattr(model, "sort_order"):
        order = (model.sort_order, model.name)
    elif hasattr(model, "value"):
        order = (model.value,)
    else:
        order = (model.name, model.code)
    return db.query(model).order_by(*order).all()


def _insert(db: Session, spec: CategorySpec, data) -> object:
    entry = spec.model(**data.model_dump(exclude_none=True))
    db.add(entry)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(entry)
    return entry


def create_entry(db: Session, spec: CategorySpec, data) -> object:
    """Single create. ConflictError when the duplicate key is already taken."""
    if spec.key(data) in existing_keys(list_entries(db, spec), spec.key):
        raise ConflictError(f"This {spec.label} already exists")
    entry = _insert(db, spec, data)
    log.info(f"Created {spec.label} {entry.id}")
    return entry


def delete_entry(db: Session, spec: CategorySpec, entry_id: int) -> object:
    """Delete one entry unless any inventory record still uses it."""
    entry = db.get(spec.model, entry_id)
    if entry is None:
        raise NotFoundError(f"{spec.label.capitalize()} not found")
    in_use = spec.in_use(db, entry)
    if in_use:
        raise InUseError(f"Cannot delete {spec.label} that is in use by {in_use} record(s)")
    db.delete(entry)
    db.commit()
    return entry


def import_csv(db: Session, spec: CategorySpec, text: str) -> ImportOutcome:
    if not isinstance(text, str) or not text.strip():
        raise ValidationError("No CSV data provided")
    existing = existing_keys(list_entries(db, spec), spec.key)
    return import_rows(
        spec.parse(text),
        project=spec.project,
        schema=spec.create_schema,
        key=spec.key,
        existing=existing,
        create=lambda data: _insert(db, spec, data),
        label=spec.label,
    )


def _cell(value) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return "" if value is None else str(value)


def export_csv(db: Session, spec: CategorySpec) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(spec.export_columns)
    for entry in list_entries(db, spec):
        writer.writerow([_cell(getattr(entry, column)) for column in spec.export_columns])
    return buf.getvalue()
