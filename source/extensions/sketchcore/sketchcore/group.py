"""Groups: ordered labels partitioning params, entities and constraints."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Group:
    """
    A solve group.

    Groups are totally ordered by creation (handle order).  Solving a group
    treats only that group's parameters as unknowns; every other group's
    parameters are held fixed.
    """
    handle: int

    def __int__(self) -> int:
        return self.handle
