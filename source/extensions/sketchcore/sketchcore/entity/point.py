"""Points, either on a workplane (u, v) or free in 3D (x, y, z)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple

from ..errors import WorkplaneMismatchError
from ..group import Group
from ..kernel.records import EntityRecord, EntityType
from .base import EntityData, EntityHandle, Resolver, register_entity
from .target import TARGETS, In3d, OnWorkplane, Target


@register_entity
@dataclass
class Point(EntityData):
    """
    A point whose coordinates are free parameters.

    Usage::

        p = Point.in_3d(g, 10.0, 10.0, 10.0)
        q = Point.on_workplane(g, wp, 10.0, 20.0)
    """
    type_codes: ClassVar[Tuple[EntityType, ...]] = (
        EntityType.POINT_IN_3D,
        EntityType.POINT_IN_2D,
    )

    group: Group
    coords: Target
    workplane: Optional[EntityHandle] = None

    def __post_init__(self):
        self.check_shape()

    @classmethod
    def on_workplane(cls, group: Group, workplane: EntityHandle,
                     u: float, v: float) -> "Point":
        return cls(group, OnWorkplane(u, v), workplane)

    @classmethod
    def in_3d(cls, group: Group, x: float, y: float, z: float) -> "Point":
        return cls(group, In3d(x, y, z))

    @property
    def is_on_workplane(self) -> bool:
        return isinstance(self.coords, OnWorkplane)

    def check_shape(self) -> None:
        if self.is_on_workplane and self.workplane is None:
            raise WorkplaneMismatchError(
                "A point on a workplane must declare its workplane.")
        if not self.is_on_workplane and self.workplane is not None:
            raise WorkplaneMismatchError(
                "A 3D point cannot declare a workplane.")

    def kind_tag(self) -> EntityType:
        return self.coords.point_type

    def param_values(self) -> List[float]:
        return self.coords.components()

    @classmethod
    def from_record(cls, record: EntityRecord, values: List[float],
                    resolve: Resolver) -> "Point":
        cls.check_record(record)
        coords = TARGETS[record.type].from_components(values)
        return cls(Group(record.group), coords, resolve(record.workplane))
