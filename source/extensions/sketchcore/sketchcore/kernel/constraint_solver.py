"""
Default numerical engine — pure-Python, scipy-based.

The engine consumes a flat :class:`SolveRequest` (copies of the parameter,
entity and constraint records plus the solve group) and returns a
:class:`SolveResponse`.  It never touches a :class:`System` directly, so
any object with the same ``solve(request)`` method can replace it.

Architecture
------------
* Unknowns are the parameters owned by the solve group; every other
  parameter is a constant and is never reported back.
* :class:`~sketchcore.kernel.equations.EquationSystem` turns the group's
  constraints (plus implicit entity equations) into residual rows.
* Rows that touch no unknown are checked once: satisfied ones are dropped,
  violated ones make the solve inconsistent straight away.
* The remaining rows are minimised with ``least_squares`` (Trust Region
  Reflective, ``3-point`` differences).  Dragged unknowns get a small
  ``x_scale`` so the solver prefers moving everything else.
* The outcome is classified from the rank of the row-normalised Jacobian:
  fewer independent rows than rows means redundant or contradictory
  constraints (INCONSISTENT); residuals left above tolerance mean
  DIDNT_CONVERGE; otherwise OKAY with ``dof = unknowns - rank``.
  Satisfied rows with a zero gradient are left out of the count; violated
  ones are reported as failed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

import numpy as np
from scipy.optimize import least_squares

from ..config import SolverSettings
from .equations import EquationSystem
from .handles import NO_HANDLE
from .records import ConstraintRecord, EntityRecord, Param, ResultCode

logger = logging.getLogger(__name__)

MAX_DRAGGED = 4

# Rows whose gradient norm is below this count as zero rows in the rank test
_ZERO_ROW = 1e-12


# =========================================================================
# Call contract
# =========================================================================

@dataclass
class SolveRequest:
    """Flat input buffer; owned by a single solve call."""
    params: List[Param]
    entities: List[EntityRecord]
    constraints: List[ConstraintRecord]
    group: int
    dragged: List[int] = field(default_factory=lambda: [NO_HANDLE] * MAX_DRAGGED)
    calculate_faileds: bool = True


@dataclass
class SolveResponse:
    """
    Flat output buffer.

    ``values`` maps parameter handle to its new value; only parameters of
    the solve group appear in it.
    """
    result: ResultCode
    dof: int
    values: Dict[int, float] = field(default_factory=dict)
    failed: List[int] = field(default_factory=list)


# =========================================================================
# Solver
# =========================================================================

class ConstraintSolver:
    """
    Least-squares constraint engine.

    Usage::

        solver = ConstraintSolver(SolverSettings(max_iterations=50))
        response = solver.solve(request)
        if response.result == ResultCode.OKAY:
            print(response.dof)
    """

    def __init__(self, settings: Optional[SolverSettings] = None):
        self.settings = settings or SolverSettings()

    # -- Rank helpers ----------------------------------------------------------

    def _rank(self, jac: np.ndarray) -> int:
        if jac.size == 0:
            return 0
        norms = np.linalg.norm(jac, axis=1)
        keep = norms > _ZERO_ROW
        if not keep.any():
            return 0
        scaled = jac[keep] / norms[keep, None]
        return int(np.linalg.matrix_rank(scaled, tol=self.settings.rank_tolerance))

    def _redundant(self, jac: np.ndarray, owners: List[int], rank: int) -> List[int]:
        """Constraints whose rows can be dropped without losing rank."""
        implicated = []
        for owner in sorted(set(owners) - {NO_HANDLE}):
            others = np.array([o != owner for o in owners], dtype=bool)
            if self._rank(jac[others]) == rank:
                implicated.append(owner)
        return implicated

    # -- Solve -----------------------------------------------------------------

    def solve(self, request: SolveRequest) -> SolveResponse:
        s = self.settings
        values = {p.handle: p.value for p in request.params}
        unknowns = [p.handle for p in request.params if p.group == request.group]

        if len(unknowns) > s.max_unknowns:
            logger.warning("Group %d has %d unknowns (limit %d)",
                           request.group, len(unknowns), s.max_unknowns)
            return SolveResponse(ResultCode.TOO_MANY_UNKNOWNS, dof=0)

        system = EquationSystem(
            {e.handle: e for e in request.entities}, values, unknowns)
        for e in request.entities:
            if e.group == request.group:
                system.add_entity(e)
        for c in request.constraints:
            if c.group == request.group:
                system.add_constraint(c)

        x0 = system.initial
        f0, live = system.scan()
        owners = system.owners
        rows = np.flatnonzero(live)
        live_owners = [owners[i] for i in rows]
        logger.debug("Solving group %d: %d unknowns, %d rows (%d constant)",
                     request.group, len(unknowns), len(owners),
                     len(owners) - len(rows))

        def finish(result: ResultCode, x: np.ndarray, rank: int,
                   failed: Set[int]) -> SolveResponse:
            if not request.calculate_faileds:
                failed = set()
            return SolveResponse(
                result=result,
                dof=len(unknowns) - rank,
                values={h: float(v) for h, v in zip(unknowns, x)},
                failed=sorted(failed - {NO_HANDLE}),
            )

        # Equations that no unknown can fix
        violated = {owners[i] for i in np.flatnonzero(~live)
                    if abs(f0[i]) > s.tolerance}
        if violated:
            rank = self._rank(system.jacobian(x0, rows))
            return finish(ResultCode.INCONSISTENT, x0, rank, violated)

        x = x0
        if rows.size and np.max(np.abs(f0[rows])) > s.tolerance:
            dragged = set(request.dragged) - {NO_HANDLE}
            x_scale = np.array(
                [s.drag_scale if h in dragged else 1.0 for h in unknowns])
            result = least_squares(
                lambda v: system.residuals(v)[rows],
                x0,
                jac="3-point",
                x_scale=x_scale,
                method="trf",
                max_nfev=s.max_iterations,
                ftol=s.step_tolerance,
                xtol=s.step_tolerance,
                gtol=s.step_tolerance,
            )
            x = result.x
            logger.debug("least_squares: status=%d nfev=%d cost=%.3g",
                         result.status, result.nfev, result.cost)

        f = system.residuals(x)[rows]
        jac = system.jacobian(x, rows)
        flat = np.linalg.norm(jac, axis=1) <= _ZERO_ROW
        satisfied = np.abs(f) <= s.tolerance
        # A satisfied row without gradient removes nothing the rank can see
        counted = ~(flat & satisfied)
        counted_owners = [o for o, keep in zip(live_owners, counted) if keep]
        rank = self._rank(jac[counted])

        if rank < np.count_nonzero(counted):
            implicated = set()
            if request.calculate_faileds:
                implicated = set(self._redundant(jac[counted], counted_owners, rank))
                implicated |= {live_owners[i] for i in np.flatnonzero(flat & ~satisfied)}
            return finish(ResultCode.INCONSISTENT, x0, rank, implicated)

        if rows.size and np.max(np.abs(f)) > s.tolerance:
            unsatisfied = {live_owners[i] for i in np.flatnonzero(np.abs(f) > s.tolerance)}
            return finish(ResultCode.DIDNT_CONVERGE, x, rank, unsatisfied)

        return finish(ResultCode.OKAY, x, rank, set())
