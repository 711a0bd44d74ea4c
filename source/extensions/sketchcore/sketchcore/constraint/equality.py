"""Length, radius and arc-length equalities, ratios and differences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..entity.base import EntityHandle
from ..group import Group
from ..kernel.records import ConstraintType
from .base import ARC, CURVE, LINE, ConstraintData, register_constraint


# -- Lines ------------------------------------------------------------------

@register_constraint
@dataclass
class EqualLengthLines(ConstraintData):
    type_code = ConstraintType.EQUAL_LENGTH_LINES
    entity_fields = ("line_a", "line_b")
    entity_kinds = (LINE, LINE)

    group: Group
    line_a: EntityHandle
    line_b: EntityHandle
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class LengthRatio(ConstraintData):
    """length(line_a) = ratio * length(line_b)"""
    type_code = ConstraintType.LENGTH_RATIO
    entity_fields = ("line_a", "line_b")
    entity_kinds = (LINE, LINE)
    value_field = "ratio"

    group: Group
    line_a: EntityHandle
    line_b: EntityHandle
    ratio: float
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class LengthDifference(ConstraintData):
    """length(line_a) - length(line_b) = difference"""
    type_code = ConstraintType.LENGTH_DIFFERENCE
    entity_fields = ("line_a", "line_b")
    entity_kinds = (LINE, LINE)
    value_field = "difference"

    group: Group
    line_a: EntityHandle
    line_b: EntityHandle
    difference: float
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class EqLenPtLineD(ConstraintData):
    """length(line_a) equals the distance from *point* to *line_b*."""
    type_code = ConstraintType.EQ_LEN_PT_LINE_D
    point_fields = ("point",)
    entity_fields = ("line_a", "line_b")
    entity_kinds = (LINE, LINE)

    group: Group
    line_a: EntityHandle
    point: EntityHandle
    line_b: EntityHandle
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class EqPtLnDistances(ConstraintData):
    """dist(point_a, line_a) = dist(point_b, line_b)"""
    type_code = ConstraintType.EQ_PT_LN_DISTANCES
    point_fields = ("point_a", "point_b")
    entity_fields = ("line_a", "line_b")
    entity_kinds = (LINE, LINE)

    group: Group
    line_a: EntityHandle
    point_a: EntityHandle
    line_b: EntityHandle
    point_b: EntityHandle
    workplane: Optional[EntityHandle] = None


# -- Circles and arcs -------------------------------------------------------

@register_constraint
@dataclass
class EqualRadius(ConstraintData):
    type_code = ConstraintType.EQUAL_RADIUS
    entity_fields = ("curve_a", "curve_b")
    entity_kinds = (CURVE, CURVE)

    group: Group
    curve_a: EntityHandle
    curve_b: EntityHandle


@register_constraint
@dataclass
class Diameter(ConstraintData):
    type_code = ConstraintType.DIAMETER
    entity_fields = ("curve",)
    entity_kinds = (CURVE,)
    value_field = "diameter"

    group: Group
    curve: EntityHandle
    diameter: float


@register_constraint
@dataclass
class EqualLineArcLen(ConstraintData):
    type_code = ConstraintType.EQUAL_LINE_ARC_LEN
    entity_fields = ("line", "arc")
    entity_kinds = (LINE, ARC)

    group: Group
    line: EntityHandle
    arc: EntityHandle
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class ArcArcLenRatio(ConstraintData):
    type_code = ConstraintType.ARC_ARC_LEN_RATIO
    entity_fields = ("arc_a", "arc_b")
    entity_kinds = (ARC, ARC)
    value_field = "ratio"

    group: Group
    arc_a: EntityHandle
    arc_b: EntityHandle
    ratio: float


@register_constraint
@dataclass
class ArcLineLenRatio(ConstraintData):
    type_code = ConstraintType.ARC_LINE_LEN_RATIO
    entity_fields = ("arc", "line")
    entity_kinds = (ARC, LINE)
    value_field = "ratio"

    group: Group
    arc: EntityHandle
    line: EntityHandle
    ratio: float


@register_constraint
@dataclass
class ArcArcDifference(ConstraintData):
    type_code = ConstraintType.ARC_ARC_DIFFERENCE
    entity_fields = ("arc_a", "arc_b")
    entity_kinds = (ARC, ARC)
    value_field = "difference"

    group: Group
    arc_a: EntityHandle
    arc_b: EntityHandle
    difference: float


@register_constraint
@dataclass
class ArcLineDifference(ConstraintData):
    type_code = ConstraintType.ARC_LINE_DIFFERENCE
    entity_fields = ("arc", "line")
    entity_kinds = (ARC, LINE)
    value_field = "difference"

    group: Group
    arc: EntityHandle
    line: EntityHandle
    difference: float
