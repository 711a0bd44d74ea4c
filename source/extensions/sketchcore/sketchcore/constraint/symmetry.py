"""Symmetry constraints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..entity.base import EntityHandle
from ..group import Group
from ..kernel.records import ConstraintType
from .base import LINE, PLANE, ConstraintData, register_constraint


@register_constraint
@dataclass
class Symmetric(ConstraintData):
    """*point_a* and *point_b* mirror each other about *plane*."""
    type_code = ConstraintType.SYMMETRIC
    point_fields = ("point_a", "point_b")
    entity_fields = ("plane",)
    entity_kinds = (PLANE,)

    group: Group
    point_a: EntityHandle
    point_b: EntityHandle
    plane: EntityHandle
    workplane: Optional[EntityHandle] = None


@register_constraint
@dataclass
class SymmetricHoriz(ConstraintData):
    """Mirror about the workplane's v axis (u flips sign, v equal)."""
    type_code = ConstraintType.SYMMETRIC_HORIZ
    point_fields = ("point_a", "point_b")
    needs_workplane = True

    group: Group
    workplane: EntityHandle
    point_a: EntityHandle
    point_b: EntityHandle


@register_constraint
@dataclass
class SymmetricVert(ConstraintData):
    """Mirror about the workplane's u axis (v flips sign, u equal)."""
    type_code = ConstraintType.SYMMETRIC_VERT
    point_fields = ("point_a", "point_b")
    needs_workplane = True

    group: Group
    workplane: EntityHandle
    point_a: EntityHandle
    point_b: EntityHandle


@register_constraint
@dataclass
class SymmetricLine(ConstraintData):
    type_code = ConstraintType.SYMMETRIC_LINE
    point_fields = ("point_a", "point_b")
    entity_fields = ("line",)
    entity_kinds = (LINE,)
    needs_workplane = True

    group: Group
    workplane: EntityHandle
    point_a: EntityHandle
    point_b: EntityHandle
    line: EntityHandle
