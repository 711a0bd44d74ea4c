"""
Reference validation.

Runs before every insert and every update.  A failure raises and the caller
(:class:`~sketchcore.system.System`) has not touched the store yet, so a
rejected candidate never leaves partial state behind.

Entities get the full workplane-membership check.  Constraints only get
existence and category checks: their workplane is an input to the equation
(e.g. "measure this distance projected into W"), not a membership filter,
so a constraint may legitimately relate entities on different workplanes.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from ..errors import KindMismatchError, NotFoundError, WorkplaneMismatchError
from .handles import NO_HANDLE
from .records import NORMAL_TYPES, POINT_TYPES, EntityRecord, EntityType
from .store import ElementStore

logger = logging.getLogger(__name__)


def _fetch(store: ElementStore, handle: int,
           accepted: Tuple[EntityType, ...], role: str) -> EntityRecord:
    record = store.entities.get(handle)
    if record.type not in accepted:
        names = "/".join(t.name for t in accepted)
        raise KindMismatchError(
            f"Referenced {role} {handle} is {record.type.name}, expected {names}."
        )
    return record


def _check_group(store: ElementStore, group: int) -> None:
    if group not in store.groups:
        raise NotFoundError("group", group)


def _check_workplane(store: ElementStore, workplane: Optional[int]) -> Optional[EntityRecord]:
    if not workplane:
        return None
    return _fetch(store, workplane, (EntityType.WORKPLANE,), "workplane")


# =========================================================================
# Entities
# =========================================================================

def validate_entity(store: ElementStore, candidate) -> None:
    """
    Check an entity candidate against the store.

    1. The owning group and any declared workplane exist.
    2. Every referenced point is a point; with a workplane, it must be a
       point on that same workplane.
    3. The normal is a normal; with a workplane it must be a normal on that
       workplane or the very 3D normal the workplane itself uses.
    4. The distance is a distance; with a workplane it must be on it.
    5. A workplane is built from a 3D origin point and a 3D normal.
    """
    candidate.check_shape()
    _check_group(store, candidate.owning_group())
    wp_handle = candidate.workplane_ref()
    wp = _check_workplane(store, wp_handle)

    for ph in candidate.point_refs() or ():
        point = _fetch(store, ph, POINT_TYPES, "point")
        if wp is not None and point.workplane != wp_handle:
            raise WorkplaneMismatchError(
                f"Point {ph} is not on workplane {wp_handle}.")

    nh = candidate.normal_ref()
    if nh:
        normal = _fetch(store, nh, NORMAL_TYPES, "normal")
        if wp is not None:
            on_plane = (normal.type == EntityType.NORMAL_IN_2D
                        and normal.workplane == wp_handle)
            is_plane_normal = (normal.type == EntityType.NORMAL_IN_3D
                               and wp.normal == nh)
            if not (on_plane or is_plane_normal):
                raise WorkplaneMismatchError(
                    f"Normal {nh} does not belong to workplane {wp_handle}.")

    if candidate.kind_tag() == EntityType.WORKPLANE:
        for ph in candidate.point_refs() or ():
            _fetch(store, ph, (EntityType.POINT_IN_3D,), "origin")
        _fetch(store, nh, (EntityType.NORMAL_IN_3D,), "normal")

    dh = candidate.distance_ref()
    if dh:
        distance = _fetch(store, dh, (EntityType.DISTANCE,), "distance")
        if wp is not None and distance.workplane != wp_handle:
            raise WorkplaneMismatchError(
                f"Distance {dh} is not on workplane {wp_handle}.")


# =========================================================================
# Constraints
# =========================================================================

def validate_constraint(store: ElementStore, candidate) -> None:
    """Check that a constraint candidate only references live elements."""
    _check_group(store, candidate.owning_group())
    wp_handle = candidate.workplane_ref()
    if candidate.needs_workplane and not wp_handle:
        raise WorkplaneMismatchError(
            f"{type(candidate).__name__} requires a workplane.")
    _check_workplane(store, wp_handle)

    for ph in candidate.point_refs() or ():
        _fetch(store, ph, POINT_TYPES, "point")

    refs: Iterable[int] = candidate.entity_refs() or ()
    for eh, accepted in zip(refs, candidate.entity_kinds):
        _fetch(store, eh, accepted, "entity")


# =========================================================================
# Workplane inference
# =========================================================================

def inferred_workplane(store: ElementStore, candidate,
                       include_entities: bool = False) -> Optional[int]:
    """
    Workplane shared by everything a candidate references.

    Entities look at their points and normal, constraints at their points
    and entities (*include_entities*).  Returns ``None`` when the candidate
    already names a workplane, references nothing, or its references
    disagree or are 3D.  Unknown handles are skipped; validation reports
    them.
    """
    if candidate.workplane_ref():
        return None
    refs = list(candidate.point_refs() or ())
    if include_entities:
        refs.extend(candidate.entity_refs() or ())
    else:
        nh = candidate.normal_ref()
        if nh:
            refs.append(nh)

    found = {store.entities.get(h).workplane for h in refs if h in store.entities}
    if len(found) != 1:
        return None
    shared = found.pop()
    return shared or None


def referrers(store: ElementStore, handle: int) -> Tuple[list, list]:
    """Entities and constraints that reference entity *handle*."""
    if handle == NO_HANDLE:
        return [], []
    entities = [e.handle for e in store.entities if handle in e.references]
    constraints = [c.handle for c in store.constraints if handle in c.references]
    return entities, constraints
