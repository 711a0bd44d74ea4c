"""
Flat storage records and kind codes.

These are the fixed-width shapes the element store holds and the numerical
engine consumes.  Every kind of entity or constraint collapses to one of
them; unused slots stay ``0`` (handles) or ``False`` (flags).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List

from .handles import NO_HANDLE

MAX_ENTITY_POINTS = 4
MAX_ENTITY_PARAMS = 4
MAX_CONSTRAINT_POINTS = 2
MAX_CONSTRAINT_ENTITIES = 4


# =========================================================================
# Kind codes
# =========================================================================

class EntityType(IntEnum):
    POINT_IN_3D = 50000
    POINT_IN_2D = 50001
    NORMAL_IN_3D = 60000
    NORMAL_IN_2D = 60001
    DISTANCE = 70000
    WORKPLANE = 80000
    LINE_SEGMENT = 80001
    CUBIC = 80002
    CIRCLE = 80003
    ARC_OF_CIRCLE = 80004


POINT_TYPES = (EntityType.POINT_IN_3D, EntityType.POINT_IN_2D)
NORMAL_TYPES = (EntityType.NORMAL_IN_3D, EntityType.NORMAL_IN_2D)
CURVE_TYPES = (EntityType.CIRCLE, EntityType.ARC_OF_CIRCLE)


class ConstraintType(IntEnum):
    POINTS_COINCIDENT = 100001
    PT_PT_DISTANCE = 100002
    PT_PLANE_DISTANCE = 100003
    PT_LINE_DISTANCE = 100004
    PT_FACE_DISTANCE = 100005
    PT_IN_PLANE = 100006
    PT_ON_LINE = 100007
    PT_ON_FACE = 100008
    EQUAL_LENGTH_LINES = 100009
    LENGTH_RATIO = 100010
    EQ_LEN_PT_LINE_D = 100011
    EQ_PT_LN_DISTANCES = 100012
    EQUAL_ANGLE = 100013
    EQUAL_LINE_ARC_LEN = 100014
    SYMMETRIC = 100015
    SYMMETRIC_HORIZ = 100016
    SYMMETRIC_VERT = 100017
    SYMMETRIC_LINE = 100018
    AT_MIDPOINT = 100019
    HORIZONTAL = 100020
    VERTICAL = 100021
    DIAMETER = 100022
    PT_ON_CIRCLE = 100023
    SAME_ORIENTATION = 100024
    ANGLE = 100025
    PARALLEL = 100026
    PERPENDICULAR = 100027
    ARC_LINE_TANGENT = 100028
    CUBIC_LINE_TANGENT = 100029
    EQUAL_RADIUS = 100030
    PROJ_PT_DISTANCE = 100031
    WHERE_DRAGGED = 100032
    CURVE_CURVE_TANGENT = 100033
    LENGTH_DIFFERENCE = 100034
    ARC_ARC_LEN_RATIO = 100035
    ARC_LINE_LEN_RATIO = 100036
    ARC_ARC_DIFFERENCE = 100037
    ARC_LINE_DIFFERENCE = 100038


class ResultCode(IntEnum):
    OKAY = 0
    INCONSISTENT = 1
    DIDNT_CONVERGE = 2
    TOO_MANY_UNKNOWNS = 3


# =========================================================================
# Records
# =========================================================================

def _zeros(n: int) -> List[int]:
    return [NO_HANDLE] * n


@dataclass
class Param:
    """A scalar unknown owned by exactly one entity."""
    handle: int
    group: int
    value: float = 0.0


@dataclass
class EntityRecord:
    handle: int
    group: int
    type: EntityType
    workplane: int = NO_HANDLE
    points: List[int] = field(default_factory=lambda: _zeros(MAX_ENTITY_POINTS))
    normal: int = NO_HANDLE
    distance: int = NO_HANDLE
    params: List[int] = field(default_factory=lambda: _zeros(MAX_ENTITY_PARAMS))

    @property
    def param_handles(self) -> List[int]:
        return [h for h in self.params if h != NO_HANDLE]

    @property
    def references(self) -> List[int]:
        """Every non-zero entity handle this record refers to."""
        refs = [self.workplane, self.normal, self.distance, *self.points]
        return [h for h in refs if h != NO_HANDLE]


@dataclass
class ConstraintRecord:
    handle: int
    group: int
    type: ConstraintType
    workplane: int = NO_HANDLE
    value: float = 0.0
    points: List[int] = field(
        default_factory=lambda: _zeros(MAX_CONSTRAINT_POINTS))
    entities: List[int] = field(
        default_factory=lambda: _zeros(MAX_CONSTRAINT_ENTITIES))
    flags: List[bool] = field(default_factory=lambda: [False, False])

    @property
    def references(self) -> List[int]:
        refs = [self.workplane, *self.points, *self.entities]
        return [h for h in refs if h != NO_HANDLE]
