"""
Typed constraint facade — shared capability contract and handle type.

Each constraint kind is a dataclass whose fields carry kind-specific names
(``point_a``, ``line``, ``distance`` ...).  Class-level slot tables map
those names onto the fixed-width :class:`ConstraintRecord`:

* ``point_fields``: fields stored in ``record.points`` (at most two)
* ``entity_fields``: fields stored in ``record.entities`` (at most four)
* ``entity_kinds``: accepted entity types per ``entity_fields`` slot
* ``value_field``: field stored in ``record.value``
* ``flag_fields``: fields stored in ``record.flags`` (at most two)

With those tables the generic accessors below and :meth:`from_record`
work for every kind; a subclass only declares its fields.

Several kinds share one type code (e.g. horizontal-by-points and
horizontal-by-line).  :func:`constraint_class_for` picks between them with
:meth:`ConstraintData.matches`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import ClassVar, Dict, List, Optional, Tuple, Type

from ..entity.base import Resolver
from ..errors import KindMismatchError
from ..group import Group
from ..kernel.handles import NO_HANDLE
from ..kernel.records import (
    MAX_CONSTRAINT_ENTITIES,
    MAX_CONSTRAINT_POINTS,
    ConstraintRecord,
    ConstraintType,
    EntityType,
)

_REGISTRY: Dict[ConstraintType, List[Type["ConstraintData"]]] = {}

# Entity-kind sets used in ``entity_kinds`` tables
LINE = (EntityType.LINE_SEGMENT,)
ARC = (EntityType.ARC_OF_CIRCLE,)
CUBIC = (EntityType.CUBIC,)
PLANE = (EntityType.WORKPLANE,)
CURVE = (EntityType.CIRCLE, EntityType.ARC_OF_CIRCLE)
NORMAL = (EntityType.NORMAL_IN_3D, EntityType.NORMAL_IN_2D)


@dataclass(frozen=True)
class ConstraintHandle:
    """Reference to a stored constraint; compares on the integer only."""
    handle: int
    kind: Optional[Type["ConstraintData"]] = field(default=None, compare=False)

    def __int__(self) -> int:
        return self.handle

    def __repr__(self) -> str:
        name = self.kind.__name__ if self.kind else "?"
        return f"ConstraintHandle({self.handle}, {name})"


class ConstraintData:
    """Capability contract implemented by every constraint kind."""

    type_code: ClassVar[ConstraintType]
    point_fields: ClassVar[Tuple[str, ...]] = ()
    entity_fields: ClassVar[Tuple[str, ...]] = ()
    entity_kinds: ClassVar[Tuple[Tuple[EntityType, ...], ...]] = ()
    value_field: ClassVar[Optional[str]] = None
    flag_fields: ClassVar[Tuple[str, ...]] = ()
    needs_workplane: ClassVar[bool] = False

    # -- Capability contract -------------------------------------------------

    def kind_tag(self) -> ConstraintType:
        return self.type_code

    def owning_group(self) -> int:
        return self.group.handle

    def workplane_ref(self) -> Optional[int]:
        wp = getattr(self, "workplane", None)
        return wp.handle if wp is not None else None

    def point_refs(self) -> Optional[List[int]]:
        if not self.point_fields:
            return None
        return [getattr(self, name).handle for name in self.point_fields]

    def entity_refs(self) -> Optional[List[int]]:
        if not self.entity_fields:
            return None
        return [getattr(self, name).handle for name in self.entity_fields]

    def scalar_value(self) -> Optional[float]:
        if self.value_field is None:
            return None
        return float(getattr(self, self.value_field))

    def flag_pair(self) -> Tuple[bool, bool]:
        flags = [bool(getattr(self, name)) for name in self.flag_fields]
        flags += [False] * (2 - len(flags))
        return flags[0], flags[1]

    # -- Record mapping ------------------------------------------------------

    @classmethod
    def has_workplane_field(cls) -> bool:
        return any(f.name == "workplane" for f in fields(cls))

    @classmethod
    def matches(cls, record: ConstraintRecord) -> bool:
        """Whether *record* belongs to this kind (for shared type codes)."""
        return record.type == cls.type_code

    @classmethod
    def from_record(cls, record: ConstraintRecord,
                    resolve: Resolver) -> "ConstraintData":
        if not cls.matches(record):
            raise KindMismatchError(
                f"Constraint {record.handle} is {record.type.name}, "
                f"not a {cls.__name__}."
            )
        kwargs = {"group": Group(record.group)}
        for slot, name in enumerate(cls.point_fields):
            kwargs[name] = resolve(record.points[slot])
        for slot, name in enumerate(cls.entity_fields):
            kwargs[name] = resolve(record.entities[slot])
        if cls.value_field is not None:
            kwargs[cls.value_field] = record.value
        for slot, name in enumerate(cls.flag_fields):
            kwargs[name] = record.flags[slot]
        if cls.has_workplane_field():
            kwargs["workplane"] = resolve(record.workplane)
        return cls(**kwargs)


def register_constraint(cls: Type[ConstraintData]) -> Type[ConstraintData]:
    """Class decorator registering a constraint kind under its type code."""
    if len(cls.point_fields) > MAX_CONSTRAINT_POINTS:
        raise ValueError(f"{cls.__name__} declares too many point slots")
    if len(cls.entity_fields) > MAX_CONSTRAINT_ENTITIES:
        raise ValueError(f"{cls.__name__} declares too many entity slots")
    if len(cls.entity_kinds) != len(cls.entity_fields):
        raise ValueError(f"{cls.__name__} needs one entity_kinds entry per slot")
    _REGISTRY.setdefault(cls.type_code, []).append(cls)
    return cls


def constraint_class_for(record: ConstraintRecord) -> Type[ConstraintData]:
    for cls in _REGISTRY.get(record.type, ()):
        if cls.matches(record):
            return cls
    raise KindMismatchError(f"No constraint kind registered for {record.type!r}")


def slot_filled(handles: List[int], slot: int) -> bool:
    return handles[slot] != NO_HANDLE
