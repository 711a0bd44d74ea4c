"""
Solver configuration.

Module-level constants are the defaults; :class:`SolverSettings` bundles
them so a :class:`~sketchcore.system.System` can be tuned per instance::

    settings = SolverSettings(max_iterations=50, drag_scale=0.1)
    system = System(settings=settings)
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

# Largest residual accepted as "satisfied"
SOLVE_TOLERANCE = 1e-6

# Function evaluations handed to least_squares as max_nfev
MAX_ITERATIONS = 100

# Above this many unknowns the solve reports TOO_MANY_UNKNOWNS
MAX_UNKNOWNS = 1024

# x_scale applied to dragged unknowns (1.0 = not dragged)
DRAG_SCALE = 0.05

# Relative singular value cut-off for the Jacobian rank test
RANK_TOLERANCE = 1e-6

# ftol / xtol / gtol passed to least_squares
STEP_TOLERANCE = 1e-12


@dataclass
class SolverSettings:
    """Tunables for the default numerical engine."""
    tolerance: float = SOLVE_TOLERANCE
    max_iterations: int = MAX_ITERATIONS
    max_unknowns: int = MAX_UNKNOWNS
    drag_scale: float = DRAG_SCALE
    rank_tolerance: float = RANK_TOLERANCE
    step_tolerance: float = STEP_TOLERANCE

    def __post_init__(self):
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.max_unknowns < 0:
            raise ValueError("max_unknowns must not be negative")
        if not 0 < self.drag_scale <= 1:
            raise ValueError("drag_scale must be in (0, 1]")

    @classmethod
    def from_mapping(cls, d: Mapping[str, Any]) -> "SolverSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise KeyError(f"Unknown solver setting(s): {sorted(unknown)}")
        return cls(**dict(d))
