"""Batch update and delete of the caller's records."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.db import get_db
from core.dependencies import get_scope, log_audit
from core.scope import Scope
from modules.inventory import batch
from modules.inventory.schemas import (
    BatchDeleteRequest, BatchDeleteResponse, BatchUpdateRequest, BatchUpdateResponse,
)
from modules.inventory.store import RecordStore

log = logging.getLogger("spoolvault.api")
router = APIRouter(prefix="/records/batch", tags=["Records"])


@router.patch("", response_model=BatchUpdateResponse)
def batch_update_records(body: BatchUpdateRequest, scope: Scope = Depends(get_scope),
                         db: Session = Depends(get_db)):
    """Apply the same partial update to every listed record the caller owns."""
    changes = body.updates.changes()
    result = batch.batch_update(RecordStore(db), body.ids, changes, scope)
    log_audit(db, "batch_update", "record", None,
              details={"requested": len(body.ids), "fields": sorted(changes), **result},
              user_id=scope.owner_id)
    return result


@router.delete("", response_model=BatchDeleteResponse)
def batch_delete_records(body: BatchDeleteRequest, scope: Scope = Depends(get_scope),
                         db: Session = Depends(get_db)):
    result = batch.batch_delete(RecordStore(db), body.ids, scope)
    log_audit(db, "batch_delete", "record", None,
              details={"requested": len(body.ids), **result},
              user_id=scope.owner_id)
    return result
