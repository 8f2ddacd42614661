"""Catalog routes — list/export, create/import and delete for every category list.

Each category gets the same three endpoints under its own path segment:
  GET    /{category}            list, or ?export=csv
  POST   /{category}            create one, or ?import=csv with {csvData}
  DELETE /{category}/{id}       refused while records use the entry
"""

import logging
from typing import Optional

import pydantic
from fastapi import APIRouter, Body, Depends, Query, Response
from sqlalchemy.orm import Session

from core.base import CategoryKind, ImportFormat
from core.db import get_db
from core.dedup import summarize_errors
from core.dependencies import log_audit, require_user
from core.errors import ValidationError
from core.schemas import CsvImportRequest, ImportOutcomeResponse
from modules.catalog import services
from modules.catalog.services import CATEGORIES, CategorySpec

log = logging.getLogger("spoolvault.api")
router = APIRouter(tags=["Catalog"])


def _validate(model: type[pydantic.BaseModel], body: dict):
    try:
        return model.model_validate(body)
    except pydantic.ValidationError as exc:
        raise ValidationError(summarize_errors(exc))


def _dump(spec: CategorySpec, entry) -> dict:
    return spec.response_schema.model_validate(entry).model_dump(by_alias=True)


def _add_category_routes(spec: CategorySpec) -> None:
    path = f"/{spec.kind.value}"

    @router.get(path, name=f"list_{spec.model.__tablename__}")
    def list_category(
        export: Optional[ImportFormat] = Query(default=None),
        current_user: dict = Depends(require_user),
        db: Session = Depends(get_db),
    ):
        if export is ImportFormat.CSV:
            return Response(
                content=services.export_csv(db, spec),
                media_type="text/csv; charset=utf-8",
                headers={"Content-Disposition": f'attachment; filename="{spec.kind.value}.csv"'},
            )
        if export is not None:
            raise ValidationError(f"Unsupported export format for {spec.kind.value}: {export.value}")
        return [_dump(spec, entry) for entry in services.list_entries(db, spec)]

    @router.post(path, status_code=201, name=f"create_{spec.model.__tablename__}")
    def create_category(
        body: dict = Body(...),
        import_format: Optional[ImportFormat] = Query(default=None, alias="import"),
        current_user: dict = Depends(require_user),
        db: Session = Depends(get_db),
    ):
        if import_format is None:
            entry = services.create_entry(db, spec, _validate(spec.create_schema, body))
            return _dump(spec, entry)

        if import_format is not ImportFormat.CSV:
            raise ValidationError(f"Unsupported import format for {spec.kind.value}: {import_format.value}")
        raw = _validate(CsvImportRequest, body).csv_data
        outcome = services.import_csv(db, spec, raw)
        log_audit(db, "import", spec.model.__tablename__, None, details=outcome.as_dict(),
                  user_id=current_user["id"])
        return ImportOutcomeResponse(**outcome.as_dict())

    @router.delete(f"{path}/{{entry_id}}", status_code=204, name=f"delete_{spec.model.__tablename__}")
    def delete_category(
        entry_id: int,
        current_user: dict = Depends(require_user),
        db: Session = Depends(get_db),
    ):
        services.delete_entry(db, spec, entry_id)
        log_audit(db, "delete", spec.model.__tablename__, entry_id, user_id=current_user["id"])
        return Response(status_code=204)


for _spec in CATEGORIES.values():
    _add_category_routes(_spec)
