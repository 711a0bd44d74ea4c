"""Incidence constraints: coincidence, point-on-X, midpoints, drag pins."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..entity.base import EntityHandle
from ..group import Group
from ..kernel.records import ConstraintType
from .base import CURVE, LINE, PLANE, ConstraintData, register_constraint


@register_constraint
@dataclass
class PointsCoincident(ConstraintData):
    type_code = ConstraintType.POINTS_COINCIDENT
    point_fields = ("point_a", "point_b")

    group: Group
    point_a: EntityHandle
    point_b: EntityHandle
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class PtInPlane(ConstraintData):
    type_code = ConstraintType.PT_IN_PLANE
    point_fields = ("point",)
    entity_fields = ("plane",)
    entity_kinds = (PLANE,)

    group: Group
    point: EntityHandle
    plane: EntityHandle


@register_constraint
@dataclass
class PtOnFace(ConstraintData):
    type_code = ConstraintType.PT_ON_FACE
    point_fields = ("point",)
    entity_fields = ("face",)
    entity_kinds = (PLANE,)

    group: Group
    point: EntityHandle
    face: EntityHandle


@register_constraint
@dataclass
class PtOnLine(ConstraintData):
    type_code = ConstraintType.PT_ON_LINE
    point_fields = ("point",)
    entity_fields = ("line",)
    entity_kinds = (LINE,)

    group: Group
    point: EntityHandle
    line: EntityHandle
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class PtOnCircle(ConstraintData):
    """*point* lies on *curve*, a circle or an arc."""
    type_code = ConstraintType.PT_ON_CIRCLE
    point_fields = ("point",)
    entity_fields = ("curve",)
    entity_kinds = (CURVE,)

    group: Group
    point: EntityHandle
    curve: EntityHandle


@register_constraint
@dataclass
class AtMidpoint(ConstraintData):
    type_code = ConstraintType.AT_MIDPOINT
    point_fields = ("point",)
    entity_fields = ("line",)
    entity_kinds = (LINE,)

    group: Group
    point: EntityHandle
    line: EntityHandle
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class WhereDragged(ConstraintData):
    """Pins *point* to the position it has when the solve starts."""
    type_code = ConstraintType.WHERE_DRAGGED
    point_fields = ("point",)

    group: Group
    point: EntityHandle
    workplane: Optional[EntityHandle] = None
