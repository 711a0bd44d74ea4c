"""
Coordinate representations for points.

A point either lives on a workplane (two components, u and v, relative to
the plane's origin and basis) or free in 3D space (x, y, z).  Both expose
the same small capability so the flat record only ever sees "how many
parameter slots are populated".
"""

from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import ClassVar, List, Sequence

from ..kernel.records import EntityType


class Target:
    """Coordinate capability shared by :class:`OnWorkplane` and :class:`In3d`."""

    point_type: ClassVar[EntityType]
    n_components: ClassVar[int]

    def components(self) -> List[float]:
        return [float(c) for c in astuple(self)]

    @classmethod
    def from_components(cls, values: Sequence[float]) -> "Target":
        return cls(*(float(v) for v in values[: cls.n_components]))


@dataclass
class OnWorkplane(Target):
    point_type: ClassVar[EntityType] = EntityType.POINT_IN_2D
    n_components: ClassVar[int] = 2

    u: float = 0.0
    v: float = 0.0


@dataclass
class In3d(Target):
    point_type: ClassVar[EntityType] = EntityType.POINT_IN_3D
    n_components: ClassVar[int] = 3

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


TARGETS = {cls.point_type: cls for cls in (OnWorkplane, In3d)}
