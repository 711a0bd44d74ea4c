"""
Tests for the typed constraint facade and constraint validation.
"""

import unittest

from sketchcore import (
    ArcLineTangent,
    ArcOfCircle,
    Circle,
    ConstraintHandle,
    Diameter,
    Distance,
    EqualRadius,
    KindMismatchError,
    LineHorizontal,
    LineSegment,
    NotFoundError,
    Point,
    PointsHorizontal,
    PtPtDistance,
    SymmetricHoriz,
    System,
    WorkplaneMismatchError,
)
from sketchcore.constraint import constraint_class_for
from sketchcore.kernel.records import ConstraintRecord, ConstraintType

from .fixtures import xy_workplane, xz_workplane


class TestConstraintFacade(unittest.TestCase):
    """Capability contract and read-back."""

    def setUp(self):
        self.system = System()
        self.g = self.system.add_group()
        self.o, self.n, self.wp = xy_workplane(self.system, self.g)
        self.a = self.system.sketch(Point.on_workplane(self.g, self.wp, 0.0, 0.0))
        self.b = self.system.sketch(Point.on_workplane(self.g, self.wp, 10.0, 0.0))
        self.c = self.system.sketch(Point.on_workplane(self.g, self.wp, 0.0, 10.0))
        self.line = self.system.sketch(LineSegment(self.g, self.a, self.b, self.wp))
        self.arc = self.system.sketch(ArcOfCircle(
            self.g, self.wp, self.a, self.b, self.c, self.n))

    def test_distance_round_trip(self):
        data = PtPtDistance(self.g, self.a, self.b, 12.5, self.wp)
        h = self.system.constrain(data)
        self.assertEqual(self.system.constraint_data(h), data)
        self.assertEqual(self.system.constraint_data(h), self.system.constraint_data(h))

    def test_workplane_taken_from_references(self):
        """Points on one workplane put an unplaced constraint on it."""
        h = self.system.constrain(PtPtDistance(self.g, self.a, self.b, 12.5))
        self.assertEqual(self.system.constraint_data(h).workplane, self.wp)

        h = self.system.constrain(LineHorizontal(self.g, None, self.line))
        self.assertEqual(self.system.constraint_data(h).workplane, self.wp)

    def test_capability_contract(self):
        data = ArcLineTangent(self.g, self.wp, self.arc, self.line, at_end=True)
        self.assertEqual(data.kind_tag(), ConstraintType.ARC_LINE_TANGENT)
        self.assertEqual(data.owning_group(), self.g.handle)
        self.assertEqual(data.workplane_ref(), self.wp.handle)
        self.assertIsNone(data.point_refs())
        self.assertEqual(data.entity_refs(), [self.arc.handle, self.line.handle])
        self.assertIsNone(data.scalar_value())
        self.assertEqual(data.flag_pair(), (True, False))

        h = self.system.constrain(data)
        self.assertTrue(self.system.constraint_data(h).at_end)

    def test_scalar_value(self):
        data = PtPtDistance(self.g, self.a, self.b, 3.0)
        self.assertEqual(data.scalar_value(), 3.0)
        self.assertEqual(data.point_refs(), [self.a.handle, self.b.handle])
        self.assertIsNone(data.workplane_ref())

    def test_shared_type_code_disambiguation(self):
        by_points = self.system.constrain(
            PointsHorizontal(self.g, self.wp, self.a, self.b))
        by_line = self.system.constrain(LineHorizontal(self.g, self.wp, self.line))

        bare_points = self.system.constraint_data(ConstraintHandle(by_points.handle))
        bare_line = self.system.constraint_data(ConstraintHandle(by_line.handle))
        self.assertIsInstance(bare_points, PointsHorizontal)
        self.assertIsInstance(bare_line, LineHorizontal)
        self.assertEqual(bare_line.line, self.line)

    def test_every_type_code_has_a_kind(self):
        for code in ConstraintType:
            record = ConstraintRecord(1, 1, code, points=[1, 1], entities=[1, 1, 1, 1])
            cls = constraint_class_for(record)
            self.assertEqual(cls.type_code, code)

    def test_update_constraint(self):
        h = self.system.constrain(PtPtDistance(self.g, self.a, self.b, 5.0))

        def lengthen(data):
            data.distance = 8.0

        self.system.update_constraint(h, lengthen)
        self.assertEqual(self.system.constraint_data(h).distance, 8.0)

    def test_update_constraint_rejects_missing_reference(self):
        h = self.system.constrain(PtPtDistance(self.g, self.a, self.b, 5.0))
        dead = self.system.sketch(Point.on_workplane(self.g, self.wp, 1.0, 1.0))
        self.system.delete_entity(dead)

        def retarget(data):
            data.point_b = dead

        with self.assertRaises(NotFoundError):
            self.system.update_constraint(h, retarget)
        self.assertEqual(self.system.constraint_data(h).point_b, self.b)

    def test_delete_constraint(self):
        h = self.system.constrain(PtPtDistance(self.g, self.a, self.b, 5.0))
        params = self.system.param_count
        data = self.system.delete_constraint(h)
        self.assertEqual(data.distance, 5.0)
        self.assertEqual(self.system.constraint_count, 0)
        self.assertEqual(self.system.param_count, params)
        with self.assertRaises(NotFoundError):
            self.system.constraint_data(h)

    def test_constraint_handles_filters(self):
        g2 = self.system.add_group()
        c1 = self.system.constrain(PtPtDistance(self.g, self.a, self.b, 5.0))
        c2 = self.system.constrain(PtPtDistance(g2, self.a, self.c, 5.0))
        self.assertEqual(self.system.constraint_handles(), [c1, c2])
        self.assertEqual(self.system.constraint_handles(group=g2), [c2])
        self.assertEqual(self.system.constraint_handles(entity=self.b), [c1])
        self.assertIs(self.system.constraint_handles(group=g2)[0].kind, PtPtDistance)

    def test_entity_in_use_by_constraint(self):
        from sketchcore import EntityInUseError
        self.system.constrain(PtPtDistance(self.g, self.a, self.b, 5.0))
        d = self.system.sketch(Point.on_workplane(self.g, self.wp, 5.0, 5.0))
        c = self.system.constrain(PtPtDistance(self.g, self.a, d, 1.0))
        with self.assertRaises(EntityInUseError):
            self.system.delete_entity(d)
        # no cascade: the referrer and the entity both survive
        self.assertIn(c, self.system.constraint_handles())
        self.assertIn(d, self.system.entity_handles())

        self.system.delete_constraint(c)
        self.system.delete_entity(d)
        self.assertNotIn(d, self.system.entity_handles())


class TestConstraintValidation(unittest.TestCase):
    """Existence and category checks; no workplane membership."""

    def setUp(self):
        self.system = System()
        self.g = self.system.add_group()
        self.o1, self.n1, self.wp1 = xy_workplane(self.system, self.g)
        self.o2, self.n2, self.wp2 = xz_workplane(self.system, self.g)
        self.a = self.system.sketch(Point.on_workplane(self.g, self.wp1, 0.0, 0.0))
        self.b = self.system.sketch(Point.on_workplane(self.g, self.wp2, 1.0, 1.0))

    def test_constraint_may_span_workplanes(self):
        h = self.system.constrain(PtPtDistance(self.g, self.a, self.b, 2.0, self.wp1))
        self.assertEqual(self.system.constraint_data(h).workplane, self.wp1)

    def test_missing_point(self):
        from sketchcore import EntityHandle
        with self.assertRaises(NotFoundError):
            self.system.constrain(
                PtPtDistance(self.g, self.a, EntityHandle(999, Point), 1.0))
        self.assertEqual(self.system.constraint_count, 0)

    def test_wrong_entity_kind(self):
        line = self.system.sketch(LineSegment(self.g, self.o1, self.o2))
        with self.assertRaises(KindMismatchError):
            self.system.constrain(Diameter(self.g, line, 4.0))

    def test_point_slot_needs_point(self):
        with self.assertRaises(KindMismatchError):
            self.system.constrain(PtPtDistance(self.g, self.a, self.n1, 1.0))

    def test_missing_required_workplane(self):
        with self.assertRaises(WorkplaneMismatchError):
            self.system.constrain(SymmetricHoriz(self.g, None, self.a, self.b))

    def test_workplane_slot_needs_workplane(self):
        with self.assertRaises(KindMismatchError):
            self.system.constrain(SymmetricHoriz(self.g, self.o1, self.a, self.b))

    def test_equal_radius_of_circle_and_arc(self):
        r = self.system.sketch(Distance(self.g, 2.0, self.wp1))
        circle = self.system.sketch(Circle(self.g, self.a, r, self.n1, self.wp1))
        p = self.system.sketch(Point.on_workplane(self.g, self.wp1, 2.0, 0.0))
        q = self.system.sketch(Point.on_workplane(self.g, self.wp1, 0.0, 2.0))
        arc = self.system.sketch(
            ArcOfCircle(self.g, self.wp1, self.a, p, q, self.n1))
        h = self.system.constrain(EqualRadius(self.g, circle, arc))
        self.assertEqual(self.system.constraint_data(h).curve_b, arc)
