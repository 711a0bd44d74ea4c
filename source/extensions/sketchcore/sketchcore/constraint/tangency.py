"""
Tangency constraints.

Flags select which end of a curve the tangency applies to: ``False`` is
the start (an arc's ``arc_begin``, a cubic's ``start_point``), ``True`` the
end.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..entity.base import EntityHandle
from ..group import Group
from ..kernel.records import ConstraintType
from .base import ARC, CUBIC, LINE, ConstraintData, register_constraint


@register_constraint
@dataclass
class ArcLineTangent(ConstraintData):
    type_code = ConstraintType.ARC_LINE_TANGENT
    entity_fields = ("arc", "line")
    entity_kinds = (ARC, LINE)
    flag_fields = ("at_end",)
    needs_workplane = True

    group: Group
    workplane: EntityHandle
    arc: EntityHandle
    line: EntityHandle
    at_end: bool = False


@register_constraint
@dataclass
class CubicLineTangent(ConstraintData):
    type_code = ConstraintType.CUBIC_LINE_TANGENT
    entity_fields = ("cubic", "line")
    entity_kinds = (CUBIC, LINE)
    flag_fields = ("at_end",)
    needs_workplane = True

    group: Group
    workplane: EntityHandle
    cubic: EntityHandle
    line: EntityHandle
    at_end: bool = False


@register_constraint
@dataclass
class CurveCurveTangent(ConstraintData):
    """Two arcs, two cubics, or an arc and a cubic meeting tangentially."""
    type_code = ConstraintType.CURVE_CURVE_TANGENT
    entity_fields = ("curve_a", "curve_b")
    entity_kinds = (ARC + CUBIC, ARC + CUBIC)
    flag_fields = ("curve_a_end", "curve_b_end")
    needs_workplane = True

    group: Group
    workplane: EntityHandle
    curve_a: EntityHandle
    curve_b: EntityHandle
    curve_a_end: bool = False
    curve_b_end: bool = False
