"""
modules/inventory/transfer.py — CSV/JSON import and export of inventory records.

Import runs the text through the line parser once, classifies each row with
the dedup resolver against the owner's record names as they were when the
import started, and creates the survivors through the RecordStore. Export
writes the owner's full record set with a fixed column order.
"""

import csv
import io
import json
import logging
from typing import Any, Union

from pydantic.alias_generators import to_snake

from core.base import ImportFormat
from core.bulk_import import ImportOutcome, import_rows, rows_from_items
from core.dedup import existing_keys, record_key
from core.errors import TransportError, ValidationError
from core.line_parser import Field, parse_lines
from core.scope import Scope
from modules.inventory.schemas import RecordCreate, RecordResponse
from modules.inventory.store import RecordStore

log = logging.getLogger("spoolvault.import")

EXPORT_COLUMNS = [
    "name", "manufacturer", "material", "colorName", "colorCode",
    "diameter", "printTemp", "totalWeight", "remainingPercentage",
    "purchaseDate", "purchasePrice", "status", "spoolType",
    "dryerCount", "lastDryingDate", "storageLocation",
]

# Header words that only bind columns; data cells such as "Location A" carry them too
_BIND_ALIASES = {
    "manufacturer": ("vendor", "brand"),
    "storageLocation": ("location",),
}

RECORD_FIELDS = [
    Field(name, position, bind_aliases=_BIND_ALIASES.get(name, ()))
    for position, name in enumerate(EXPORT_COLUMNS)
]

# Applied when an imported row leaves these empty
IMPORT_DEFAULTS = {
    "totalWeight": 1,
    "remainingPercentage": 100,
    "dryerCount": 0,
}


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _with_defaults(values: Any) -> Any:
    if not isinstance(values, dict):
        return values
    row = dict(values)
    for field, default in IMPORT_DEFAULTS.items():
        # JSON items may spell a field either way; the schema accepts both
        given = [row.pop(key) for key in (field, to_snake(field)) if key in row]
        row[field] = next((v for v in given if not _blank(v)), default)
    return row


def decode_json_items(raw: Union[str, list]) -> list:
    """jsonData may be a JSON document in a string or an already-decoded array."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise TransportError(f"Invalid JSON: {exc.msg}")
    if not isinstance(raw, list):
        raise TransportError("jsonData must be an array")
    return raw


def import_batch(store: RecordStore, raw: Union[str, list], fmt: ImportFormat, scope: Scope) -> ImportOutcome:
    """Import CSV text or a JSON array of records for one owner."""
    if fmt is ImportFormat.CSV:
        if not isinstance(raw, str) or not raw.strip():
            raise ValidationError("No CSV data provided")
        rows = parse_lines(raw, RECORD_FIELDS)
    else:
        rows = rows_from_items(decode_json_items(raw))

    existing = existing_keys(store.list(scope), record_key)
    log.info(f"Importing records ({fmt.value}) for owner {scope.owner_id}, {len(existing)} existing names")

    return import_rows(
        rows,
        project=_with_defaults,
        schema=RecordCreate,
        key=record_key,
        existing=existing,
        create=lambda entity: store.create(scope, entity),
        label="record",
    )


def export_rows(records) -> list[dict]:
    """Records as camelCase dicts holding exactly the export columns."""
    rows = []
    for record in records:
        data = RecordResponse.model_validate(record).model_dump(mode="json", by_alias=True)
        rows.append({column: data.get(column) for column in EXPORT_COLUMNS})
    return rows


def to_csv(rows: list[dict], delimiter: str = ",") -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=delimiter, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for row in rows:
        writer.writerow(["" if row[c] is None else row[c] for c in EXPORT_COLUMNS])
    return buf.getvalue()


def export_all(store: RecordStore, scope: Scope, fmt: ImportFormat) -> str:
    rows = export_rows(store.list(scope))
    log.info(f"Exporting {len(rows)} records ({fmt.value}) for owner {scope.owner_id}")
    if fmt is ImportFormat.CSV:
        return to_csv(rows)
    return json.dumps(rows, indent=2)
