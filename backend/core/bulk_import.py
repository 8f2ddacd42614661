"""
core/bulk_import.py — Row-by-row import driver shared by every importer.

import_rows() walks parsed rows once, projects each onto the target entity
shape, classifies it with core.dedup.resolve() against a key snapshot taken
by the caller before the run, and hands CREATE rows to a create callback.

Nothing a single row does can abort the run: parse errors, validation
rejects and exceptions raised while creating all land in the error count.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable, Container, Iterable, Mapping

import pydantic

from core.dedup import DuplicateKey, Outcome, resolve
from core.line_parser import ParsedRow

log = logging.getLogger("spoolvault.import")


@dataclass
class ImportOutcome:
    created: int = 0
    duplicates: int = 0
    errors: int = 0

    @property
    def total(self) -> int:
        return self.created + self.duplicates + self.errors

    def as_dict(self) -> dict:
        return asdict(self)


def rows_from_items(items: Iterable[Any]) -> Iterable[ParsedRow]:
    """Wrap already-structured items (e.g. a decoded JSON array) as rows."""
    for index, item in enumerate(items, start=1):
        yield ParsedRow(index, item)


def import_rows(
    rows: Iterable[ParsedRow],
    *,
    project: Callable[[Any], Mapping],
    schema: type[pydantic.BaseModel],
    key: DuplicateKey,
    existing: Container,
    create: Callable[[pydantic.BaseModel], Any],
    label: str = "row",
) -> ImportOutcome:
    """Import every row; return the created/duplicates/errors tally."""
    outcome = ImportOutcome()

    for row in rows:
        if not row.ok:
            log.warning(f"Skipping {label} at line {row.line_number}: {row.error}")
            outcome.errors += 1
            continue

        try:
            resolution = resolve(project(row.values), schema, key, existing)

            if resolution.outcome is Outcome.REJECT:
                log.warning(f"Rejected {label} at line {row.line_number}: {resolution.reason}")
                outcome.errors += 1
                continue

            if resolution.outcome is Outcome.SKIP:
                log.debug(f"Duplicate {label} at line {row.line_number}, skipping")
                outcome.duplicates += 1
                continue

            create(resolution.entity)
            outcome.created += 1
            log.debug(f"Created {label} from line {row.line_number}")
        except Exception:
            log.warning(f"Error importing {label} at line {row.line_number}", exc_info=True)
            outcome.errors += 1

    log.info(
        f"Import of {label}s finished: {outcome.created} created, "
        f"{outcome.duplicates} duplicates, {outcome.errors} errors"
    )
    return outcome
