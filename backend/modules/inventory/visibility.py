"""
modules/inventory/visibility.py — Which of an owner's records an anonymous viewer may see.

A public global rule (material_id None) shares everything. Otherwise a
record is shared when its material, read as a material id, has a public
rule. Rules that are not public never grant anything.
"""

from enum import Enum
from typing import Iterable, Optional, Sequence

from core.errors import NotFoundError
from core.interfaces.sharing import OwnerInfo, RuleView, SharingProvider
from core.scope import Scope
from modules.inventory.store import RecordStore


class Decision(str, Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


def material_id_of(record) -> Optional[int]:
    """The record's material as an integer id, or None when it is not one."""
    value = record.material
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if not isinstance(value, str):
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def shares_everything(rules: Iterable[RuleView]) -> bool:
    return any(rule.material_id is None and rule.is_public for rule in rules)


def public_material_ids(rules: Iterable[RuleView]) -> set[int]:
    return {rule.material_id for rule in rules if rule.material_id is not None and rule.is_public}


def decide(record, rules: Sequence[RuleView]) -> Decision:
    if shares_everything(rules):
        return Decision.INCLUDE
    material_id = material_id_of(record)
    if material_id is not None and material_id in public_material_ids(rules):
        return Decision.INCLUDE
    return Decision.EXCLUDE


def filter_visible(records: Iterable, rules: Sequence[RuleView]) -> list:
    rules = list(rules)
    return [r for r in records if decide(r, rules) is Decision.INCLUDE]


def public_view(db, owner_id: int, provider: SharingProvider) -> tuple[OwnerInfo, list]:
    """Owner info and the visible subset of their records.

    NotFoundError when the owner does not exist or has never configured
    sharing. Rules that exist but share nothing yield an empty list.
    """
    owner = provider.get_owner(db, owner_id)
    if owner is None:
        raise NotFoundError("User not found")
    rules = provider.get_rules(db, owner_id)
    if not rules:
        raise NotFoundError("No shared records for this user")
    records = RecordStore(db).list(Scope(owner_id=owner.id))
    return owner, filter_visible(records, rules)
