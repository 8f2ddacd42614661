"""Record CRUD plus CSV/JSON import and export on the collection endpoint."""

import logging
from typing import Optional

import pydantic
from fastapi import APIRouter, Body, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from core.base import ImportFormat
from core.db import get_db
from core.dedup import summarize_errors
from core.dependencies import get_scope, log_audit
from core.errors import NotFoundError, ValidationError
from core.schemas import CsvImportRequest, ImportOutcomeResponse, JsonImportRequest
from core.scope import Scope
from modules.inventory import transfer
from modules.inventory.schemas import RecordCreate, RecordPatch, RecordResponse
from modules.inventory.store import RecordStore

log = logging.getLogger("spoolvault.api")
router = APIRouter(prefix="/records", tags=["Records"])

_EXPORT_MEDIA_TYPES = {
    ImportFormat.CSV: "text/csv; charset=utf-8",
    ImportFormat.JSON: "application/json",
}


def _parse(model: type[pydantic.BaseModel], body: dict):
    try:
        return model.model_validate(body)
    except pydantic.ValidationError as exc:
        raise ValidationError(summarize_errors(exc))


@router.get("")
def list_records(
    export: Optional[ImportFormat] = Query(default=None),
    scope: Scope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """List the caller's records, or download them with ?export=csv|json."""
    store = RecordStore(db)
    if export is None:
        return [RecordResponse.model_validate(r).model_dump(by_alias=True) for r in store.list(scope)]

    content = transfer.export_all(store, scope, export)
    filename = f"spools.{export.value}"
    return Response(
        content=content,
        media_type=_EXPORT_MEDIA_TYPES[export],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("", status_code=201)
def create_or_import_records(
    request: Request,
    body: dict = Body(...),
    import_format: Optional[ImportFormat] = Query(default=None, alias="import"),
    scope: Scope = Depends(get_scope),
    db: Session = Depends(get_db),
):
    """Create one record, or bulk-import with ?import=csv|json."""
    store = RecordStore(db)

    if import_format is None:
        record = store.create(scope, _parse(RecordCreate, body))
        log_audit(db, "create", "record", record.id, details={"name": record.name},
                  user_id=scope.owner_id)
        return RecordResponse.model_validate(record).model_dump(by_alias=True)

    if import_format is ImportFormat.CSV:
        raw = _parse(CsvImportRequest, body).csv_data
    else:
        raw = _parse(JsonImportRequest, body).json_data

    outcome = transfer.import_batch(store, raw, import_format, scope)
    log_audit(db, "import", "record", None,
              details={"format": import_format.value, **outcome.as_dict()},
              user_id=scope.owner_id,
              ip=request.client.host if request.client else None)
    return ImportOutcomeResponse(**outcome.as_dict())


@router.get("/{record_id}")
def get_record(record_id: int, scope: Scope = Depends(get_scope), db: Session = Depends(get_db)):
    record = RecordStore(db).get(scope, record_id)
    if record is None:
        raise NotFoundError("Record not found")
    return RecordResponse.model_validate(record).model_dump(by_alias=True)


@router.patch("/{record_id}")
def update_record(record_id: int, patch: RecordPatch, scope: Scope = Depends(get_scope),
                  db: Session = Depends(get_db)):
    changes = patch.changes()
    if not changes:
        raise ValidationError("No fields to update")
    record = RecordStore(db).update(scope, record_id, changes)
    if record is None:
        raise NotFoundError("Record not found")
    return RecordResponse.model_validate(record).model_dump(by_alias=True)


@router.delete("/{record_id}", status_code=204)
def delete_record(record_id: int, scope: Scope = Depends(get_scope), db: Session = Depends(get_db)):
    if not RecordStore(db).delete(scope, record_id):
        raise NotFoundError("Record not found")
    log_audit(db, "delete", "record", record_id, user_id=scope.owner_id)
    return Response(status_code=204)
