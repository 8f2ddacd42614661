"""
modules/inventory/batch.py — Batch update/delete over a list of record ids.

Ids arrive straight from the request body and are coerced here. Rows are
processed one at a time through the RecordStore: no cross-row transaction,
misses (absent or foreign-owned ids) are skipped, and a storage failure on
one row is logged and skipped so the rest of the batch still runs.
"""

import logging
from typing import Any, Iterable, Iterator, Optional

from core.errors import ValidationError
from core.scope import Scope
from modules.inventory.store import RecordStore

log = logging.getLogger("spoolvault.batch")


def coerce_id(value: Any) -> Optional[int]:
    """int for ints, integral floats and digit strings; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return None
            return int(number) if number.is_integer() else None
    return None


def coerce_ids(raw_ids: Iterable[Any]) -> list[int]:
    """Coerce, drop non-coercible values silently, de-duplicate keeping order.

    Raises ValidationError when nothing usable is left.
    """
    ids: list[int] = []
    seen = set()
    for raw in raw_ids:
        value = coerce_id(raw)
        if value is None:
            log.debug(f"Dropping non-numeric id {raw!r}")
            continue
        if value not in seen:
            seen.add(value)
            ids.append(value)
    if not ids:
        raise ValidationError("No valid record ids provided")
    return ids


def apply_patches(store: RecordStore, scope: Scope, pairs: Iterable[tuple[int, dict]]) -> int:
    """Apply each (id, patch) pair in order. Returns how many rows were updated."""
    updated = 0
    for record_id, patch in pairs:
        try:
            record = store.update(scope, record_id, patch)
        except Exception:
            log.warning(f"Batch update failed for record {record_id}", exc_info=True)
            continue
        if record is None:
            log.debug(f"Batch update: record {record_id} not found for owner {scope.owner_id}")
            continue
        updated += 1
    return updated


def _broadcast(ids: list[int], patch: dict) -> Iterator[tuple[int, dict]]:
    for record_id in ids:
        yield record_id, patch


def batch_update(store: RecordStore, raw_ids: Iterable[Any], patch: dict, scope: Scope) -> dict:
    """Apply one patch to every listed record the scope owns."""
    ids = coerce_ids(raw_ids)
    if not patch:
        raise ValidationError("No fields to update")
    updated = apply_patches(store, scope, _broadcast(ids, patch))
    log.info(f"Batch update for owner {scope.owner_id}: {updated}/{len(ids)} records updated")
    return {"updatedCount": updated}


def batch_delete(store: RecordStore, raw_ids: Iterable[Any], scope: Scope) -> dict:
    """Delete every listed record the scope owns. Missing ids are no-ops."""
    ids = coerce_ids(raw_ids)
    deleted = 0
    for record_id in ids:
        try:
            if store.delete(scope, record_id):
                deleted += 1
            else:
                log.debug(f"Batch delete: record {record_id} not found for owner {scope.owner_id}")
        except Exception:
            log.warning(f"Batch delete failed for record {record_id}", exc_info=True)
    log.info(f"Batch delete for owner {scope.owner_id}: {deleted}/{len(ids)} records deleted")
    return {"deletedCount": deleted}
