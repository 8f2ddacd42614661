"""
core/scope.py — Owner scoping.

Every Record Store call receives a Scope explicitly. Routes obtain one via
core.dependencies.get_scope; services and tests build it directly.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Scope:
    owner_id: int

    def __post_init__(self):
        if not isinstance(self.owner_id, int) or isinstance(self.owner_id, bool):
            raise TypeError(f"owner_id must be an int, got {self.owner_id!r}")
