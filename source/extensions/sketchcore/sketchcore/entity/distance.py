"""Distances: a single length parameter, e.g. a circle's radius."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple

from ..group import Group
from ..kernel.records import EntityRecord, EntityType
from .base import EntityData, EntityHandle, Resolver, register_entity


@register_entity
@dataclass
class Distance(EntityData):
    type_codes: ClassVar[Tuple[EntityType, ...]] = (EntityType.DISTANCE,)

    group: Group
    value: float
    workplane: Optional[EntityHandle] = None

    def param_values(self) -> List[float]:
        return [float(self.value)]

    @classmethod
    def from_record(cls, record: EntityRecord, values: List[float],
                    resolve: Resolver) -> "Distance":
        cls.check_record(record)
        return cls(Group(record.group), values[0], resolve(record.workplane))
