"""Distance constraints between points, lines, planes and faces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..entity.base import EntityHandle
from ..group import Group
from ..kernel.records import ConstraintType
from .base import LINE, NORMAL, PLANE, ConstraintData, register_constraint


@register_constraint
@dataclass
class PtPtDistance(ConstraintData):
    """
    Distance between two points.

    With a *workplane* the distance is measured after projecting both
    points into it.
    """
    type_code = ConstraintType.PT_PT_DISTANCE
    point_fields = ("point_a", "point_b")
    value_field = "distance"

    group: Group
    point_a: EntityHandle
    point_b: EntityHandle
    distance: float
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class PtLineDistance(ConstraintData):
    type_code = ConstraintType.PT_LINE_DISTANCE
    point_fields = ("point",)
    entity_fields = ("line",)
    entity_kinds = (LINE,)
    value_field = "distance"

    group: Group
    point: EntityHandle
    line: EntityHandle
    distance: float
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class PtPlaneDistance(ConstraintData):
    """Signed distance from *point* to the plane of workplane *plane*."""
    type_code = ConstraintType.PT_PLANE_DISTANCE
    point_fields = ("point",)
    entity_fields = ("plane",)
    entity_kinds = (PLANE,)
    value_field = "distance"

    group: Group
    point: EntityHandle
    plane: EntityHandle
    distance: float


@register_constraint
@dataclass
class PtFaceDistance(ConstraintData):
    type_code = ConstraintType.PT_FACE_DISTANCE
    point_fields = ("point",)
    entity_fields = ("face",)
    entity_kinds = (PLANE,)
    value_field = "distance"

    group: Group
    point: EntityHandle
    face: EntityHandle
    distance: float


@register_constraint
@dataclass
class ProjPtDistance(ConstraintData):
    """
    Distance between two points measured along *projection*.

    *projection* is either a line segment (its direction) or a normal (its
    N axis).
    """
    type_code = ConstraintType.PROJ_PT_DISTANCE
    point_fields = ("point_a", "point_b")
    entity_fields = ("projection",)
    entity_kinds = (LINE + NORMAL,)
    value_field = "distance"

    group: Group
    point_a: EntityHandle
    point_b: EntityHandle
    projection: EntityHandle
    distance: float
