"""Structured outcomes of :meth:`System.solve`."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

from .constraint.base import ConstraintHandle
from .kernel.records import ResultCode


class FailReason(Enum):
    INCONSISTENT = ResultCode.INCONSISTENT
    DIDNT_CONVERGE = ResultCode.DIDNT_CONVERGE
    TOO_MANY_UNKNOWNS = ResultCode.TOO_MANY_UNKNOWNS


@dataclass(frozen=True)
class SolveOkay:
    """Every constraint of the group is satisfied."""
    dof: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class SolveFail:
    """
    The solve failed.

    ``failed_constraints`` lists the constraints implicated in the failure
    (empty when the system was told not to compute them).
    """
    dof: int
    reason: FailReason
    failed_constraints: List[ConstraintHandle] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return False

    def constraint_did_fail(self, constraint: ConstraintHandle) -> bool:
        """Whether *constraint* is among the implicated constraints."""
        return any(int(c) == int(constraint) for c in self.failed_constraints)


SolveResult = Union[SolveOkay, SolveFail]
