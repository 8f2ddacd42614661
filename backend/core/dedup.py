"""
core/dedup.py — Duplicate resolution for imported rows.

resolve() validates a candidate row against the target schema and checks its
duplicate key against a set of keys computed from the existing rows. It never
touches the database; the caller creates CREATE rows and tallies the rest.

One DuplicateKey function per entity type. Key functions only read
attributes, so they work on both pydantic candidates and ORM rows.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Container, Hashable, Iterable, Mapping, Optional

import pydantic

DuplicateKey = Callable[[Any], Hashable]


class Outcome(str, Enum):
    CREATE = "create"
    SKIP = "skip"        # duplicate of an existing row
    REJECT = "reject"    # failed validation


@dataclass
class Resolution:
    outcome: Outcome
    entity: Optional[pydantic.BaseModel] = None
    reason: Optional[str] = None


def name_key(entity) -> str:
    """Records, manufacturers, materials, storage locations."""
    return (entity.name or "").strip().lower()


def color_key(entity) -> tuple:
    """Colors are unique by the (name, code) pair."""
    return ((entity.name or "").strip().lower(), (entity.code or "").strip().lower())


def diameter_key(entity) -> float:
    return round(float(entity.value), 4)


record_key = name_key


def existing_keys(rows: Iterable[Any], key: DuplicateKey) -> set:
    """Snapshot of duplicate keys for the rows currently in the store."""
    return {key(row) for row in rows}


def summarize_errors(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return "; ".join(parts)


def resolve(
    candidate: Any,
    schema: type[pydantic.BaseModel],
    key: DuplicateKey,
    existing: Container,
) -> Resolution:
    """Classify one candidate as CREATE, SKIP or REJECT."""
    if not isinstance(candidate, Mapping):
        return Resolution(Outcome.REJECT, reason="row is not an object")
    try:
        entity = schema.model_validate(candidate)
    except pydantic.ValidationError as exc:
        return Resolution(Outcome.REJECT, reason=summarize_errors(exc))

    if key(entity) in existing:
        return Resolution(Outcome.SKIP, entity=entity, reason="duplicate")
    return Resolution(Outcome.CREATE, entity=entity)
