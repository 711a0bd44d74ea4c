"""
Normals and workplanes.

A 3D normal is a free unit quaternion (four parameters).  A normal "on a
workplane" owns no parameters at all; it simply borrows the orientation of
the workplane it names.  A workplane ties an origin point to a normal and
defines the (u, v) frame that 2D entities live in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Sequence, Tuple

from ..errors import WorkplaneMismatchError
from ..group import Group
from ..kernel.quaternion import Quaternion, make_quaternion
from ..kernel.records import EntityRecord, EntityType
from .base import EntityData, EntityHandle, Resolver, register_entity


@register_entity
@dataclass
class Normal(EntityData):
    """
    An orientation.

    Usage::

        n = Normal.in_3d(g, 1.0, 0.0, 0.0, 0.0)           # XY orientation
        n = Normal.from_basis(g, (1, 0, 0), (0, 0, 1))   # XZ orientation
        n2 = Normal.on_workplane(g, wp)
    """
    type_codes: ClassVar[Tuple[EntityType, ...]] = (
        EntityType.NORMAL_IN_3D,
        EntityType.NORMAL_IN_2D,
    )

    group: Group
    quaternion: Optional[Quaternion] = None
    workplane: Optional[EntityHandle] = None

    def __post_init__(self):
        if self.quaternion is not None:
            self.quaternion = tuple(float(c) for c in self.quaternion)
        self.check_shape()

    @classmethod
    def in_3d(cls, group: Group, w: float, x: float, y: float,
              z: float) -> "Normal":
        return cls(group, quaternion=(w, x, y, z))

    @classmethod
    def from_basis(cls, group: Group, u: Sequence[float],
                   v: Sequence[float]) -> "Normal":
        return cls(group, quaternion=make_quaternion(u, v))

    @classmethod
    def on_workplane(cls, group: Group, workplane: EntityHandle) -> "Normal":
        return cls(group, workplane=workplane)

    def check_shape(self) -> None:
        if (self.quaternion is None) == (self.workplane is None):
            raise WorkplaneMismatchError(
                "A normal is either a 3D quaternion or borrowed from a "
                "workplane, not both.")
        if self.quaternion is not None and len(self.quaternion) != 4:
            raise ValueError("A quaternion has four components (w, x, y, z).")

    def kind_tag(self) -> EntityType:
        if self.workplane is not None:
            return EntityType.NORMAL_IN_2D
        return EntityType.NORMAL_IN_3D

    def param_values(self) -> Optional[List[float]]:
        if self.quaternion is None:
            return None
        return list(self.quaternion)

    @classmethod
    def from_record(cls, record: EntityRecord, values: List[float],
                    resolve: Resolver) -> "Normal":
        cls.check_record(record)
        if record.type == EntityType.NORMAL_IN_2D:
            return cls(Group(record.group), workplane=resolve(record.workplane))
        return cls(Group(record.group), quaternion=tuple(values[:4]))


@register_entity
@dataclass
class Workplane(EntityData):
    """A 2D frame: *origin* (a 3D point) plus orientation *normal*."""
    type_codes: ClassVar[Tuple[EntityType, ...]] = (EntityType.WORKPLANE,)

    group: Group
    origin: EntityHandle
    normal: EntityHandle

    def point_refs(self) -> List[int]:
        return [self.origin.handle]

    def normal_ref(self) -> int:
        return self.normal.handle

    @classmethod
    def from_record(cls, record: EntityRecord, values: List[float],
                    resolve: Resolver) -> "Workplane":
        cls.check_record(record)
        return cls(Group(record.group), resolve(record.points[0]),
                   resolve(record.normal))
