"""
Typed entity facade — shared capability contract and handle type.

Every entity kind is a dataclass that knows how to describe itself to the
flat :class:`~sketchcore.kernel.records.EntityRecord` (kind code, group,
workplane, point/normal/distance references, parameter values) and how to
rebuild itself from one.  The store never needs to know which concrete
class produced a record.

Kinds register themselves with :func:`register_entity` so a bare record
can be turned back into the right class.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, ClassVar, Dict, List, Optional, Tuple, Type

from ..errors import KindMismatchError
from ..kernel.records import EntityRecord, EntityType

_REGISTRY: Dict[EntityType, Type["EntityData"]] = {}


@dataclass(frozen=True)
class EntityHandle:
    """
    Reference to a stored entity.

    Equality and hashing use the integer handle only; ``kind`` tells
    :meth:`System.entity_data` which class to rebuild.
    """
    handle: int
    kind: Optional[Type["EntityData"]] = field(default=None, compare=False)

    def __int__(self) -> int:
        return self.handle

    def __repr__(self) -> str:
        name = self.kind.__name__ if self.kind else "?"
        return f"EntityHandle({self.handle}, {name})"


Resolver = Callable[[int], Optional[EntityHandle]]


class EntityData:
    """Capability contract implemented by every entity kind."""

    type_codes: ClassVar[Tuple[EntityType, ...]] = ()

    def kind_tag(self) -> EntityType:
        return self.type_codes[0]

    def owning_group(self) -> int:
        return self.group.handle

    def workplane_ref(self) -> Optional[int]:
        wp = getattr(self, "workplane", None)
        return wp.handle if wp is not None else None

    def point_refs(self) -> Optional[List[int]]:
        return None

    def normal_ref(self) -> Optional[int]:
        return None

    def distance_ref(self) -> Optional[int]:
        return None

    def entity_refs(self) -> Optional[List[int]]:
        refs = [h for h in (self.normal_ref(), self.distance_ref()) if h]
        return refs or None

    def param_values(self) -> Optional[List[float]]:
        return None

    @classmethod
    def from_record(
        cls,
        record: EntityRecord,
        values: List[float],
        resolve: Resolver,
    ) -> "EntityData":
        raise NotImplementedError

    def check_shape(self) -> None:
        """Raise if the combination of fields is not a valid entity."""

    @classmethod
    def check_record(cls, record: EntityRecord) -> None:
        if record.type not in cls.type_codes:
            raise KindMismatchError(
                f"Entity {record.handle} is {record.type.name}, "
                f"not a {cls.__name__}."
            )


def register_entity(cls: Type[EntityData]) -> Type[EntityData]:
    """Class decorator registering an entity kind by its type codes."""
    if not cls.type_codes:
        raise ValueError(f"{cls.__name__} must define type_codes")
    for code in cls.type_codes:
        _REGISTRY[code] = cls
    return cls


def entity_class_for(code: EntityType) -> Type[EntityData]:
    try:
        return _REGISTRY[code]
    except KeyError:
        raise KindMismatchError(f"No entity kind registered for {code!r}") from None
