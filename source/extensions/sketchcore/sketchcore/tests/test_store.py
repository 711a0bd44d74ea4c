"""
Tests for handle allocation and the element store.
"""

import unittest

from sketchcore.errors import HandleExhaustedError, NotFoundError
from sketchcore.kernel.handles import MAX_HANDLE, HandleAllocator
from sketchcore.kernel.records import EntityRecord, EntityType
from sketchcore.kernel.store import ElementStore, Elements


class TestHandleAllocator(unittest.TestCase):
    """Handles are unique, increasing and never 0."""

    def test_starts_at_one(self):
        alloc = HandleAllocator("entity")
        self.assertEqual(alloc.last, 0)
        self.assertEqual(alloc.next(), 1)

    def test_strictly_increasing(self):
        alloc = HandleAllocator("param")
        handles = [alloc.next() for _ in range(100)]
        self.assertEqual(len(set(handles)), 100)
        self.assertEqual(handles, sorted(handles))
        self.assertNotIn(0, handles)

    def test_independent_counters(self):
        a = HandleAllocator("param")
        b = HandleAllocator("entity")
        a.next()
        a.next()
        self.assertEqual(b.next(), 1)

    def test_exhaustion_is_fatal(self):
        alloc = HandleAllocator("constraint")
        alloc._last = MAX_HANDLE - 1
        self.assertEqual(alloc.next(), MAX_HANDLE)
        with self.assertRaises(HandleExhaustedError):
            alloc.next()


class TestElements(unittest.TestCase):
    """Ordered, handle-keyed collections."""

    def setUp(self):
        self.elements = Elements("entity")

    def _add(self):
        h = self.elements.next_handle()
        self.elements.insert(EntityRecord(h, 1, EntityType.DISTANCE))
        return h

    def test_insert_and_get(self):
        h = self._add()
        self.assertEqual(self.elements.get(h).handle, h)
        self.assertIn(h, self.elements)
        self.assertEqual(len(self.elements), 1)

    def test_missing_handle(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.elements.get(42)
        self.assertEqual(str(ctx.exception), "Specified entity not found.")

    def test_remove_keeps_order(self):
        handles = [self._add() for _ in range(5)]
        self.elements.remove(handles[2])
        self.assertEqual(self.elements.handles(), handles[:2] + handles[3:])
        with self.assertRaises(NotFoundError):
            self.elements.remove(handles[2])

    def test_no_reuse_after_remove(self):
        h1 = self._add()
        self.elements.remove(h1)
        h2 = self._add()
        self.assertGreater(h2, h1)

    def test_duplicate_insert_rejected(self):
        h = self._add()
        with self.assertRaises(ValueError):
            self.elements.insert(EntityRecord(h, 1, EntityType.DISTANCE))


class TestElementStore(unittest.TestCase):
    """Cascade behaviour of the four collections."""

    def test_remove_entity_cascades_to_params(self):
        store = ElementStore()
        record = EntityRecord(store.entities.next_handle(), 1, EntityType.POINT_IN_3D)
        for slot, value in enumerate((1.0, 2.0, 3.0)):
            record.params[slot] = store.new_param(1, value).handle
        store.entities.insert(record)
        other = store.new_param(1, 9.0)

        self.assertEqual(len(store.params), 4)
        store.remove_entity(record.handle)
        self.assertEqual(len(store.params), 1)
        self.assertIn(other.handle, store.params)
        for ph in record.param_handles:
            with self.assertRaises(NotFoundError):
                store.params.get(ph)

    def test_owned_by(self):
        store = ElementStore()
        store.new_param(1, 0.0)
        store.new_param(2, 0.0)
        store.new_param(2, 0.0)
        self.assertEqual(store.owned_by(1), 1)
        self.assertEqual(store.owned_by(2), 2)
        self.assertEqual(store.owned_by(3), 0)
