# core/interfaces/sharing.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class OwnerInfo:
    id: int
    name: str


@dataclass(frozen=True)
class RuleView:
    """Read-only copy of a sharing rule. material_id None means "everything"."""
    material_id: Optional[int]
    is_public: bool


class SharingProvider(ABC):
    """What the public inventory view needs to know about owners and their sharing settings."""

    @abstractmethod
    def get_owner(self, db, owner_id: int) -> Optional[OwnerInfo]: ...

    @abstractmethod
    def get_rules(self, db, owner_id: int) -> list[RuleView]: ...
