"""
Exception hierarchy for sketchcore.

Reference and workplane errors are raised synchronously by construction and
mutation calls and always leave the element store unchanged.  Solve
failures are *not* exceptions; see :mod:`sketchcore.solve_result`.
"""

from __future__ import annotations


class SketchError(Exception):
    """Base class for every error raised by sketchcore."""


class NotFoundError(SketchError, LookupError):
    """A handle does not resolve to a live element of its category."""

    def __init__(self, category: str, handle: int):
        super().__init__(f"Specified {category} not found.")
        self.category = category
        self.handle = handle


class WorkplaneMismatchError(SketchError, ValueError):
    """A referenced element is not on the workplane the candidate declares."""


class KindMismatchError(SketchError, TypeError):
    """A reference points at an element of the wrong kind."""


class GroupInUseError(SketchError):
    """A group cannot be deleted while it still owns elements."""

    def __init__(self, group: int, owned: int):
        super().__init__(
            f"Group {group} still owns {owned} element(s); delete them first."
        )
        self.group = group
        self.owned = owned


class EntityInUseError(SketchError):
    """An entity cannot be deleted while other elements reference it."""

    def __init__(self, entity: int, entities: list, constraints: list):
        super().__init__(
            f"Entity {entity} is referenced by entities {entities} "
            f"and constraints {constraints}."
        )
        self.entity = entity
        self.entities = entities
        self.constraints = constraints


class HandleExhaustedError(SketchError, OverflowError):
    """A handle counter ran past the 32-bit range."""
