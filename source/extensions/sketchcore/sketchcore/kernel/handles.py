"""
Handle allocation.

Every category (param, entity, constraint, group) owns an independent
counter.  Handles start at 1 because 0 is the "no reference" sentinel in
every optional record slot, and they are never reused within a session.
"""

from __future__ import annotations

import logging

from ..errors import HandleExhaustedError

logger = logging.getLogger(__name__)

NO_HANDLE = 0
MAX_HANDLE = 2 ** 32 - 1


class HandleAllocator:
    """
    Monotonic handle counter for one category.

    Usage::

        params = HandleAllocator("param")
        h1 = params.next()   # 1
        h2 = params.next()   # 2
    """

    def __init__(self, category: str):
        self._category = category
        self._last: int = NO_HANDLE

    @property
    def category(self) -> str:
        return self._category

    @property
    def last(self) -> int:
        """Most recently issued handle (0 before the first call)."""
        return self._last

    def next(self) -> int:
        if self._last >= MAX_HANDLE:
            logger.error("%s handle counter exhausted", self._category)
            raise HandleExhaustedError(
                f"No {self._category} handles left (limit {MAX_HANDLE})."
            )
        self._last += 1
        return self._last

    def __repr__(self) -> str:
        return f"HandleAllocator({self._category!r}, last={self._last})"
