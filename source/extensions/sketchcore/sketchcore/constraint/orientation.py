"""Orientation constraints: horizontal/vertical, angles, parallelism."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..entity.base import EntityHandle
from ..group import Group
from ..kernel.records import ConstraintRecord, ConstraintType
from .base import LINE, NORMAL, ConstraintData, register_constraint, slot_filled


# -- Horizontal / vertical --------------------------------------------------
#
# Both type codes come in two shapes: two points, or one line.  The points
# form fills ``record.points``; the line form fills ``record.entities``.

class _ByPoints(ConstraintData):
    point_fields = ("point_a", "point_b")
    needs_workplane = True

    @classmethod
    def matches(cls, record: ConstraintRecord) -> bool:
        return record.type == cls.type_code and slot_filled(record.points, 0)


class _ByLine(ConstraintData):
    entity_fields = ("line",)
    entity_kinds = (LINE,)
    needs_workplane = True

    @classmethod
    def matches(cls, record: ConstraintRecord) -> bool:
        return record.type == cls.type_code and slot_filled(record.entities, 0)


@register_constraint
@dataclass
class PointsHorizontal(_ByPoints):
    """The two points share the same v coordinate in *workplane*."""
    type_code = ConstraintType.HORIZONTAL

    group: Group
    workplane: EntityHandle
    point_a: EntityHandle
    point_b: EntityHandle


@register_constraint
@dataclass
class LineHorizontal(_ByLine):
    type_code = ConstraintType.HORIZONTAL

    group: Group
    workplane: EntityHandle
    line: EntityHandle


@register_constraint
@dataclass
class PointsVertical(_ByPoints):
    """The two points share the same u coordinate in *workplane*."""
    type_code = ConstraintType.VERTICAL

    group: Group
    workplane: EntityHandle
    point_a: EntityHandle
    point_b: EntityHandle


@register_constraint
@dataclass
class LineVertical(_ByLine):
    type_code = ConstraintType.VERTICAL

    group: Group
    workplane: EntityHandle
    line: EntityHandle


# -- Angles -----------------------------------------------------------------

@register_constraint
@dataclass
class Parallel(ConstraintData):
    type_code = ConstraintType.PARALLEL
    entity_fields = ("line_a", "line_b")
    entity_kinds = (LINE, LINE)

    group: Group
    line_a: EntityHandle
    line_b: EntityHandle
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class Perpendicular(ConstraintData):
    type_code = ConstraintType.PERPENDICULAR
    entity_fields = ("line_a", "line_b")
    entity_kinds = (LINE, LINE)

    group: Group
    line_a: EntityHandle
    line_b: EntityHandle
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class Angle(ConstraintData):
    """
    Angle in degrees between the directions of two lines.

    ``supplementary`` measures against the reversed first line, i.e. the
    180° - angle reading.
    """
    type_code = ConstraintType.ANGLE
    entity_fields = ("line_a", "line_b")
    entity_kinds = (LINE, LINE)
    value_field = "angle"
    flag_fields = ("supplementary",)

    group: Group
    line_a: EntityHandle
    line_b: EntityHandle
    angle: float
    supplementary: bool = False
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class EqualAngle(ConstraintData):
    """The angle between lines a/b equals the angle between lines c/d."""
    type_code = ConstraintType.EQUAL_ANGLE
    entity_fields = ("line_a", "line_b", "line_c", "line_d")
    entity_kinds = (LINE, LINE, LINE, LINE)
    flag_fields = ("supplementary",)

    group: Group
    line_a: EntityHandle
    line_b: EntityHandle
    line_c: EntityHandle
    line_d: EntityHandle
    supplementary: bool = False
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class SameOrientation(ConstraintData):
    type_code = ConstraintType.SAME_ORIENTATION
    entity_fields = ("normal_a", "normal_b")
    entity_kinds = (NORMAL, NORMAL)

    group: Group
    normal_a: EntityHandle
    normal_b: EntityHandle
