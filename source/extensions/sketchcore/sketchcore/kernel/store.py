"""
Element store — the flat, handle-keyed collections behind a System.

Each category keeps its records in a dict keyed by handle.  Handles come
from a per-category :class:`HandleAllocator`, so insertion order is also
ascending handle order and iteration never needs sorting.  Removing a
record keeps the remaining order intact.

Deleting an entity cascades to the parameters it owns; constraints and
groups never cascade.
"""

from __future__ import annotations

import logging
from typing import Dict, Generic, Iterator, List, TypeVar

from ..errors import NotFoundError
from ..group import Group
from .handles import HandleAllocator
from .records import ConstraintRecord, EntityRecord, Param

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Elements(Generic[T]):
    """
    Ordered collection of one record category.

    Records must expose a ``handle`` attribute.  ``get`` returns the live
    record, so callers that mutate it are patching the store directly.
    """

    def __init__(self, category: str):
        self._category = category
        self._allocator = HandleAllocator(category)
        self._items: Dict[int, T] = {}

    # ── Handles ─────────────────────────────────────────────────────────────

    @property
    def category(self) -> str:
        return self._category

    def next_handle(self) -> int:
        return self._allocator.next()

    # ── Queries ─────────────────────────────────────────────────────────────

    def get(self, handle: int) -> T:
        try:
            return self._items[handle]
        except KeyError:
            raise NotFoundError(self._category, handle) from None

    def handles(self) -> List[int]:
        return list(self._items.keys())

    def values(self) -> List[T]:
        return list(self._items.values())

    def __contains__(self, handle: int) -> bool:
        return handle in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    # ── Mutations ───────────────────────────────────────────────────────────

    def insert(self, record: T) -> int:
        handle = record.handle
        if handle in self._items:
            raise ValueError(f"{self._category} {handle} already stored")
        self._items[handle] = record
        return handle

    def remove(self, handle: int) -> T:
        try:
            return self._items.pop(handle)
        except KeyError:
            raise NotFoundError(self._category, handle) from None

    def __repr__(self) -> str:
        return f"Elements({self._category!r}, n={len(self._items)})"


class ElementStore:
    """The four collections owned by one System."""

    def __init__(self):
        self.groups: Elements[Group] = Elements("group")
        self.params: Elements[Param] = Elements("parameter")
        self.entities: Elements[EntityRecord] = Elements("entity")
        self.constraints: Elements[ConstraintRecord] = Elements("constraint")

    def new_param(self, group: int, value: float) -> Param:
        param = Param(self.params.next_handle(), group, float(value))
        self.params.insert(param)
        return param

    def remove_entity(self, handle: int) -> EntityRecord:
        """Remove an entity and every parameter it owns."""
        record = self.entities.remove(handle)
        for ph in record.param_handles:
            self.params.remove(ph)
        logger.debug("Removed entity %d with %d param(s)",
                     handle, len(record.param_handles))
        return record

    def owned_by(self, group: int) -> int:
        """Number of params, entities and constraints owned by *group*."""
        return sum(
            1
            for coll in (self.params, self.entities, self.constraints)
            for rec in coll
            if rec.group == group
        )

    def __repr__(self) -> str:
        return (
            f"ElementStore(groups={len(self.groups)}, "
            f"params={len(self.params)}, entities={len(self.entities)}, "
            f"constraints={len(self.constraints)})"
        )
