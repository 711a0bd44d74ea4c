"""Line segments, circles, arcs and cubic Béziers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple

from ..group import Group
from ..kernel.records import EntityRecord, EntityType
from .base import EntityData, EntityHandle, Resolver, register_entity


@register_entity
@dataclass
class LineSegment(EntityData):
    type_codes: ClassVar[Tuple[EntityType, ...]] = (EntityType.LINE_SEGMENT,)

    group: Group
    point_a: EntityHandle
    point_b: EntityHandle
    workplane: Optional[EntityHandle] = None

    def point_refs(self) -> List[int]:
        return [self.point_a.handle, self.point_b.handle]

    @classmethod
    def from_record(cls, record: EntityRecord, values: List[float],
                    resolve: Resolver) -> "LineSegment":
        cls.check_record(record)
        return cls(Group(record.group), resolve(record.points[0]),
                   resolve(record.points[1]), resolve(record.workplane))


@register_entity
@dataclass
class Circle(EntityData):
    """
    A full circle.

    *radius* references a :class:`Distance` entity and *normal* orients the
    circle's plane; on a workplane the normal must be that workplane's.
    """
    type_codes: ClassVar[Tuple[EntityType, ...]] = (EntityType.CIRCLE,)

    group: Group
    center: EntityHandle
    radius: EntityHandle
    normal: EntityHandle
    workplane: Optional[EntityHandle] = None

    def point_refs(self) -> List[int]:
        return [self.center.handle]

    def normal_ref(self) -> int:
        return self.normal.handle

    def distance_ref(self) -> int:
        return self.radius.handle

    @classmethod
    def from_record(cls, record: EntityRecord, values: List[float],
                    resolve: Resolver) -> "Circle":
        cls.check_record(record)
        return cls(Group(record.group), resolve(record.points[0]),
                   resolve(record.distance), resolve(record.normal),
                   resolve(record.workplane))


@register_entity
@dataclass
class ArcOfCircle(EntityData):
    """
    A counter-clockwise arc from *arc_begin* to *arc_end* around *center*.

    Arcs always live on a workplane.  The end point is kept at the same
    radius as the start point by the solver.
    """
    type_codes: ClassVar[Tuple[EntityType, ...]] = (EntityType.ARC_OF_CIRCLE,)

    group: Group
    workplane: EntityHandle
    center: EntityHandle
    arc_begin: EntityHandle
    arc_end: EntityHandle
    normal: EntityHandle

    def point_refs(self) -> List[int]:
        return [self.center.handle, self.arc_begin.handle, self.arc_end.handle]

    def normal_ref(self) -> int:
        return self.normal.handle

    @classmethod
    def from_record(cls, record: EntityRecord, values: List[float],
                    resolve: Resolver) -> "ArcOfCircle":
        cls.check_record(record)
        center, begin, end = (resolve(h) for h in record.points[:3])
        return cls(Group(record.group), resolve(record.workplane), center,
                   begin, end, resolve(record.normal))


@register_entity
@dataclass
class Cubic(EntityData):
    """Cubic Bézier through four control points."""
    type_codes: ClassVar[Tuple[EntityType, ...]] = (EntityType.CUBIC,)

    group: Group
    start_point: EntityHandle
    start_control: EntityHandle
    end_control: EntityHandle
    end_point: EntityHandle
    workplane: Optional[EntityHandle] = None

    def point_refs(self) -> List[int]:
        return [
            self.start_point.handle,
            self.start_control.handle,
            self.end_control.handle,
            self.end_point.handle,
        ]

    @classmethod
    def from_record(cls, record: EntityRecord, values: List[float],
                    resolve: Resolver) -> "Cubic":
        cls.check_record(record)
        return cls(Group(record.group), *(resolve(h) for h in record.points),
                   workplane=resolve(record.workplane))
