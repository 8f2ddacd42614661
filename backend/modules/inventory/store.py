"""
modules/inventory/store.py — Owner-scoped persistence for inventory records.

Every method takes the caller's Scope explicitly; a record owned by someone
else behaves exactly like a missing one. Each mutating call commits on its
own, so callers looping over many ids get per-row atomicity only.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from core.scope import Scope
from modules.inventory.models import InventoryRecord
from modules.inventory.schemas import RecordCreate


def _utcnow() -> datetime:
    # Stored naive, like server_default=func.now() on SQLite
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    def _query(self, scope: Scope):
        return self.db.query(InventoryRecord).filter(InventoryRecord.owner_id == scope.owner_id)

    def list(self, scope: Scope) -> list[InventoryRecord]:
        return self._query(scope).order_by(InventoryRecord.id).all()

    def get(self, scope: Scope, record_id: int) -> Optional[InventoryRecord]:
        return self._query(scope).filter(InventoryRecord.id == record_id).first()

    def create(self, scope: Scope, data: RecordCreate) -> InventoryRecord:
        record = InventoryRecord(owner_id=scope.owner_id, **data.model_dump())
        self.db.add(record)
        self._commit()
        self.db.refresh(record)
        return record

    def update(self, scope: Scope, record_id: int, changes: dict) -> Optional[InventoryRecord]:
        """Overwrite only the given fields. None when the id is absent or foreign."""
        record = self.get(scope, record_id)
        if record is None:
            return None
        for field, value in changes.items():
            setattr(record, field, value)
        record.updated_at = _utcnow()
        self._commit()
        self.db.refresh(record)
        return record

    def delete(self, scope: Scope, record_id: int) -> bool:
        deleted = self._query(scope).filter(InventoryRecord.id == record_id).delete(synchronize_session=False)
        self._commit()
        return deleted > 0

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
