"""
Tests for the System orchestrator: groups, snapshots, configuration and
the solver call contract.
"""

import logging
import os
import tempfile
import unittest

from sketchcore import (
    FailReason,
    Group,
    GroupInUseError,
    NotFoundError,
    Point,
    PtPtDistance,
    SolveFail,
    SolveOkay,
    SolverSettings,
    System,
)
from sketchcore.kernel.constraint_solver import SolveRequest, SolveResponse
from sketchcore.kernel.records import ResultCode
from sketchcore.logging_config import setup_logging


class TestGroups(unittest.TestCase):
    """Creation order and guarded deletion."""

    def setUp(self):
        self.system = System()

    def test_groups_in_creation_order(self):
        groups = [self.system.add_group() for _ in range(3)]
        self.assertEqual(self.system.groups(), groups)
        self.assertEqual([g.handle for g in groups], [1, 2, 3])
        self.assertLess(groups[0], groups[2])

    def test_delete_empty_group(self):
        g1 = self.system.add_group()
        g2 = self.system.add_group()
        self.assertEqual(self.system.delete_group(g1), g1)
        self.assertEqual(self.system.groups(), [g2])
        g3 = self.system.add_group()
        self.assertEqual(g3.handle, 3)

    def test_delete_group_in_use(self):
        g = self.system.add_group()
        p = self.system.sketch(Point.in_3d(g, 0.0, 0.0, 0.0))
        with self.assertRaises(GroupInUseError):
            self.system.delete_group(g)
        self.system.delete_entity(p)
        self.system.delete_group(g)
        self.assertEqual(self.system.groups(), [])

    def test_delete_unknown_group(self):
        with self.assertRaises(NotFoundError):
            self.system.delete_group(Group(7))

    def test_solve_unknown_group(self):
        with self.assertRaises(NotFoundError):
            self.system.solve(Group(7))


class TestSnapshots(unittest.TestCase):
    """Callers can roll back a solve themselves."""

    def test_restore_after_solve(self):
        system = System()
        g = system.add_group()
        a = system.sketch(Point.in_3d(g, 10.0, 10.0, 10.0))
        b = system.sketch(Point.in_3d(g, 20.0, 20.0, 20.0))
        system.constrain(PtPtDistance(g, a, b, 30.0))

        saved = system.snapshot()
        system.solve(g)
        self.assertNotEqual(system.snapshot(), saved)
        system.restore(saved)
        self.assertEqual(system.snapshot(), saved)
        self.assertEqual(system.entity_data(a).coords.components(), [10.0, 10.0, 10.0])


class _ScriptedSolver:
    """Stands in for the numerical engine and records what it was given."""

    def __init__(self, response):
        self.response = response
        self.requests = []

    def solve(self, request):
        self.requests.append(request)
        return self.response


class TestSolverContract(unittest.TestCase):
    """The flat request/response boundary around the engine."""

    def _build(self, response):
        solver = _ScriptedSolver(response)
        system = System(solver=solver)
        g1 = system.add_group()
        g2 = system.add_group()
        a = system.sketch(Point.in_3d(g1, 1.0, 2.0, 3.0))
        b = system.sketch(Point.in_3d(g2, 4.0, 5.0, 6.0))
        c = system.constrain(PtPtDistance(g2, a, b, 1.0))
        return solver, system, g2, a, b, c

    def test_request_shape(self):
        solver, system, g2, a, b, c = self._build(SolveResponse(ResultCode.OKAY, 3))
        system.set_dragged(b)
        system.calculate_faileds = False
        system.solve(g2)

        request = solver.requests[0]
        self.assertIsInstance(request, SolveRequest)
        self.assertEqual(request.group, g2.handle)
        self.assertEqual(len(request.params), 6)
        self.assertEqual(len(request.entities), 2)
        self.assertEqual([r.handle for r in request.constraints], [c.handle])
        self.assertEqual(request.dragged, system.entity_params(b) + [0])
        self.assertFalse(request.calculate_faileds)

    def test_request_is_a_copy(self):
        solver, system, g2, a, b, c = self._build(SolveResponse(ResultCode.OKAY, 3))
        system.solve(g2)
        solver.requests[0].params[0].value = 99.0
        self.assertEqual(system.entity_data(a).coords.components(), [1.0, 2.0, 3.0])

    def test_only_target_group_is_written_back(self):
        solver, system, g2, a, b, c = self._build(None)
        pa = system.entity_params(a)
        pb = system.entity_params(b)
        solver.response = SolveResponse(
            ResultCode.OKAY, 0,
            values={pa[0]: -1.0, pb[0]: 40.0, pb[1]: 50.0, pb[2]: 60.0},
        )
        result = system.solve(g2)

        self.assertEqual(result, SolveOkay(0))
        self.assertEqual(system.entity_data(a).coords.components(), [1.0, 2.0, 3.0])
        self.assertEqual(system.entity_data(b).coords.components(), [40.0, 50.0, 60.0])

    def test_failure_mapping(self):
        solver, system, g2, a, b, c = self._build(
            SolveResponse(ResultCode.DIDNT_CONVERGE, 2, failed=[c.handle, 999]))
        result = system.solve(g2)

        self.assertIsInstance(result, SolveFail)
        self.assertEqual(result.reason, FailReason.DIDNT_CONVERGE)
        self.assertEqual(result.dof, 2)
        self.assertEqual(result.failed_constraints, [c])
        self.assertIs(result.failed_constraints[0].kind, PtPtDistance)

    def test_reasons_follow_result_codes(self):
        for code, reason in (
            (ResultCode.INCONSISTENT, FailReason.INCONSISTENT),
            (ResultCode.TOO_MANY_UNKNOWNS, FailReason.TOO_MANY_UNKNOWNS),
        ):
            solver, system, g2, a, b, c = self._build(SolveResponse(code, 0))
            self.assertEqual(system.solve(g2).reason, reason)


class TestSettings(unittest.TestCase):
    """SolverSettings validation."""

    def test_defaults(self):
        s = SolverSettings()
        self.assertEqual(s.tolerance, 1e-6)
        self.assertEqual(s.max_unknowns, 1024)

    def test_from_mapping(self):
        s = SolverSettings.from_mapping({"max_iterations": 10, "drag_scale": 0.5})
        self.assertEqual(s.max_iterations, 10)
        self.assertEqual(s.drag_scale, 0.5)

    def test_unknown_key(self):
        with self.assertRaises(KeyError):
            SolverSettings.from_mapping({"iterations": 10})

    def test_invalid_values(self):
        with self.assertRaises(ValueError):
            SolverSettings(tolerance=0.0)
        with self.assertRaises(ValueError):
            SolverSettings(drag_scale=2.0)


class TestLogging(unittest.TestCase):
    """setup_logging attaches handlers to the package logger only."""

    def tearDown(self):
        logger = logging.getLogger("sketchcore")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    def test_console_and_file_handlers(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "sketch.log")
            setup_logging(logging.DEBUG, log_file=path)
            logger = logging.getLogger("sketchcore")
            self.assertEqual(len(logger.handlers), 2)

            system = System()
            system.add_group()
            for handler in logger.handlers:
                handler.flush()
            with open(path, encoding="utf-8") as fh:
                text = fh.read()
            self.assertIn("Added group 1", text)
            self.tearDown()

    def test_repeated_setup_does_not_duplicate(self):
        setup_logging()
        setup_logging()
        self.assertEqual(len(logging.getLogger("sketchcore").handlers), 1)
