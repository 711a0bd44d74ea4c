"""
System — the one object callers build sketches with.

A ``System`` owns an element store (groups, parameters, entities,
constraints), validates every typed construction or mutation against it,
and drives the numerical engine for one group at a time.

Example::

    from sketchcore import System, Point, PtPtDistance

    system = System()
    g = system.add_group()
    a = system.sketch(Point.in_3d(g, 10, 10, 10))
    b = system.sketch(Point.in_3d(g, 20, 20, 20))
    system.constrain(PtPtDistance(g, a, b, 30.0))
    result = system.solve(g)
    assert result.ok

Solving a group treats only that group's parameters as unknowns; every
other group is frozen.  Solve failures come back as :class:`SolveFail`
values, never as exceptions, and only parameters of the solved group are
ever written back.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import fields, replace
from typing import Callable, Dict, List, Optional

from .config import SolverSettings
from .constraint.base import ConstraintData, ConstraintHandle, constraint_class_for
from .entity.base import EntityData, EntityHandle, entity_class_for
from .errors import EntityInUseError, GroupInUseError, KindMismatchError
from .group import Group
from .kernel.constraint_solver import MAX_DRAGGED, ConstraintSolver, SolveRequest
from .kernel.handles import NO_HANDLE
from .kernel.records import (
    MAX_CONSTRAINT_ENTITIES,
    MAX_CONSTRAINT_POINTS,
    MAX_ENTITY_POINTS,
    ConstraintRecord,
    EntityRecord,
    EntityType,
    Param,
    ResultCode,
)
from .kernel.store import ElementStore
from .kernel.validator import (
    inferred_workplane,
    referrers,
    validate_constraint,
    validate_entity,
)
from .solve_result import FailReason, SolveFail, SolveOkay, SolveResult

logger = logging.getLogger(__name__)


def _pad(handles: Optional[List[int]], width: int) -> List[int]:
    handles = list(handles or [])
    if len(handles) > width:
        raise ValueError(f"At most {width} references fit in this slot")
    return handles + [NO_HANDLE] * (width - len(handles))


class System:
    """
    A sketch: groups of entities and constraints plus a solver.

    Parameters:
        solver: Object with a ``solve(SolveRequest) -> SolveResponse``
            method.  Defaults to :class:`ConstraintSolver`.
        settings: Settings for the default solver (ignored when *solver*
            is given).
    """

    def __init__(self, solver=None, settings: Optional[SolverSettings] = None):
        self._store = ElementStore()
        self._solver = solver if solver is not None else ConstraintSolver(settings)
        self._dragged: List[int] = []
        self.calculate_faileds: bool = True

    # ── Queries ─────────────────────────────────────────────────────────────

    @property
    def param_count(self) -> int:
        return len(self._store.params)

    @property
    def entity_count(self) -> int:
        return len(self._store.entities)

    @property
    def constraint_count(self) -> int:
        return len(self._store.constraints)

    @property
    def dragged(self) -> List[int]:
        """Parameter handles soft-pinned for the next solve."""
        return list(self._dragged)

    def param(self, handle: int) -> Param:
        """Copy of a parameter record."""
        return replace(self._store.params.get(handle))

    def entity_params(self, handle: EntityHandle) -> List[int]:
        """Handles of the parameters an entity owns."""
        return self._store.entities.get(int(handle)).param_handles

    def entity_handles(self, group: Optional[Group] = None,
                       entity: Optional[EntityHandle] = None) -> List[EntityHandle]:
        """Entities owned by *group* and/or referencing *entity*."""
        out = []
        for record in self._store.entities:
            if group is not None and record.group != group.handle:
                continue
            if entity is not None and int(entity) not in record.references:
                continue
            out.append(EntityHandle(record.handle, entity_class_for(record.type)))
        return out

    def constraint_handles(self, group: Optional[Group] = None,
                           entity: Optional[EntityHandle] = None) -> List[ConstraintHandle]:
        """Constraints owned by *group* and/or referencing *entity*."""
        out = []
        for record in self._store.constraints:
            if group is not None and record.group != group.handle:
                continue
            if entity is not None and int(entity) not in record.references:
                continue
            out.append(self._constraint_handle(record))
        return out

    # ── Groups ──────────────────────────────────────────────────────────────

    def add_group(self) -> Group:
        group = Group(self._store.groups.next_handle())
        self._store.groups.insert(group)
        logger.debug("Added group %d", group.handle)
        return group

    def delete_group(self, group: Group) -> Group:
        """Remove an empty group; raises :class:`GroupInUseError` otherwise."""
        self._store.groups.get(group.handle)
        owned = self._store.owned_by(group.handle)
        if owned:
            raise GroupInUseError(group.handle, owned)
        return self._store.groups.remove(group.handle)

    def groups(self) -> List[Group]:
        return self._store.groups.values()

    # ── Entities ────────────────────────────────────────────────────────────

    def _resolve(self, handle: int) -> Optional[EntityHandle]:
        if handle == NO_HANDLE:
            return None
        record = self._store.entities.get(handle)
        return EntityHandle(handle, entity_class_for(record.type))

    def _place(self, data, include_entities: bool = False):
        """*data* with the workplane its references share, if it names none."""
        if not any(f.name == "workplane" for f in fields(data)):
            return data
        wp = inferred_workplane(self._store, data, include_entities)
        if wp is None:
            return data
        return replace(data, workplane=self._resolve(wp))

    @staticmethod
    def _write_entity(record: EntityRecord, data: EntityData) -> None:
        record.group = data.owning_group()
        record.workplane = data.workplane_ref() or NO_HANDLE
        record.points = _pad(data.point_refs(), MAX_ENTITY_POINTS)
        record.normal = data.normal_ref() or NO_HANDLE
        record.distance = data.distance_ref() or NO_HANDLE

    def sketch(self, data: EntityData) -> EntityHandle:
        """
        Validate and store a new entity together with its parameters.

        An entity given without a workplane whose points (and normal) all
        lie on one workplane is placed on that workplane.
        """
        data = self._place(data)
        validate_entity(self._store, data)
        record = EntityRecord(
            self._store.entities.next_handle(), data.owning_group(), data.kind_tag())
        self._write_entity(record, data)
        for slot, value in enumerate(data.param_values() or []):
            record.params[slot] = self._store.new_param(record.group, value).handle
        self._store.entities.insert(record)
        logger.debug("Sketched %s %d", record.type.name, record.handle)
        return EntityHandle(record.handle, type(data))

    def entity_data(self, handle: EntityHandle) -> EntityData:
        record = self._store.entities.get(int(handle))
        kind = handle.kind or entity_class_for(record.type)
        values = [self._store.params.get(ph).value for ph in record.param_handles]
        return kind.from_record(record, values, self._resolve)

    def update_entity(self, handle: EntityHandle,
                      fn: Callable[[EntityData], Optional[EntityData]]) -> EntityData:
        """
        Mutate an entity through its typed form.

        *fn* receives the current data and either edits it in place or
        returns a replacement.  The result is validated before anything in
        the store changes; the entity's kind cannot change.
        """
        data = self.entity_data(handle)
        updated = fn(data)
        if updated is not None:
            data = updated
        record = self._store.entities.get(int(handle))
        if data.kind_tag() != record.type:
            raise KindMismatchError(
                f"Entity {record.handle} is {record.type.name}; "
                f"cannot become {data.kind_tag().name}.")
        data = self._place(data)
        validate_entity(self._store, data)

        self._write_entity(record, data)
        for ph, value in zip(record.param_handles, data.param_values() or []):
            param = self._store.params.get(ph)
            param.value = float(value)
            param.group = record.group
        logger.debug("Updated entity %d", record.handle)
        return data

    def delete_entity(self, handle: EntityHandle) -> EntityData:
        """
        Remove an entity and its parameters.

        The delete is refused rather than leaving referrers dangling: while
        other entities or constraints still reference the entity,
        :class:`EntityInUseError` is raised and the store is left untouched.
        Referrers are never deleted in cascade either; delete them first.
        """
        data = self.entity_data(handle)
        entities, constraints = referrers(self._store, int(handle))
        if entities or constraints:
            raise EntityInUseError(int(handle), entities, constraints)
        record = self._store.remove_entity(int(handle))
        self._dragged = [h for h in self._dragged if h not in record.params]
        return data

    # ── Constraints ─────────────────────────────────────────────────────────

    def _constraint_handle(self, record: ConstraintRecord) -> ConstraintHandle:
        return ConstraintHandle(record.handle, constraint_class_for(record))

    @staticmethod
    def _write_constraint(record: ConstraintRecord, data: ConstraintData) -> None:
        record.group = data.owning_group()
        record.workplane = data.workplane_ref() or NO_HANDLE
        value = data.scalar_value()
        record.value = value if value is not None else 0.0
        record.points = _pad(data.point_refs(), MAX_CONSTRAINT_POINTS)
        record.entities = _pad(data.entity_refs(), MAX_CONSTRAINT_ENTITIES)
        record.flags = list(data.flag_pair())

    def constrain(self, data: ConstraintData) -> ConstraintHandle:
        """
        Validate and store a new constraint.

        Without a workplane, a constraint whose points and entities all
        lie on one workplane is evaluated in that workplane.
        """
        data = self._place(data, include_entities=True)
        validate_constraint(self._store, data)
        record = ConstraintRecord(
            self._store.constraints.next_handle(), data.owning_group(), data.kind_tag())
        self._write_constraint(record, data)
        self._store.constraints.insert(record)
        logger.debug("Added %s constraint %d", record.type.name, record.handle)
        return ConstraintHandle(record.handle, type(data))

    def constraint_data(self, handle: ConstraintHandle) -> ConstraintData:
        record = self._store.constraints.get(int(handle))
        kind = handle.kind or constraint_class_for(record)
        return kind.from_record(record, self._resolve)

    def update_constraint(self, handle: ConstraintHandle,
                          fn: Callable[[ConstraintData], Optional[ConstraintData]]
                          ) -> ConstraintData:
        """Mutate, validate, then commit; see :meth:`update_entity`."""
        data = self.constraint_data(handle)
        updated = fn(data)
        if updated is not None:
            data = updated
        record = self._store.constraints.get(int(handle))
        if data.kind_tag() != record.type:
            raise KindMismatchError(
                f"Constraint {record.handle} is {record.type.name}; "
                f"cannot become {data.kind_tag().name}.")
        data = self._place(data, include_entities=True)
        validate_constraint(self._store, data)
        self._write_constraint(record, data)
        logger.debug("Updated constraint %d", record.handle)
        return data

    def delete_constraint(self, handle: ConstraintHandle) -> ConstraintData:
        data = self.constraint_data(handle)
        self._store.constraints.remove(int(handle))
        return data

    # ── Dragging ────────────────────────────────────────────────────────────

    def _drag_params(self, record: EntityRecord) -> List[int]:
        entities = self._store.entities
        if record.type in (EntityType.ARC_OF_CIRCLE, EntityType.CUBIC,
                           EntityType.LINE_SEGMENT):
            return self._drag_params(entities.get(record.points[0]))
        if record.type == EntityType.CIRCLE:
            return self._drag_params(entities.get(record.distance))
        if record.type == EntityType.WORKPLANE:
            return self._drag_params(entities.get(record.normal))
        if record.type == EntityType.NORMAL_IN_2D:
            return self._drag_params(entities.get(record.workplane))
        return record.param_handles

    def set_dragged(self, handle: EntityHandle) -> None:
        """
        Soft-pin the parameters that position *handle* for the next solve.

        Lines, arcs and cubics are pinned by their first point, a circle by
        its radius, a workplane (or a normal on it) by its orientation.
        """
        record = self._store.entities.get(int(handle))
        self._dragged = self._drag_params(record)[:MAX_DRAGGED]
        logger.debug("Dragging params %s", self._dragged)

    def clear_dragged(self) -> None:
        self._dragged = []

    # ── Snapshots ───────────────────────────────────────────────────────────

    def snapshot(self) -> Dict[int, float]:
        """Current parameter values, for callers that need to roll back."""
        return {p.handle: p.value for p in self._store.params}

    def restore(self, snapshot: Dict[int, float]) -> None:
        for handle, value in snapshot.items():
            if handle in self._store.params:
                self._store.params.get(handle).value = value

    # ── Solve ───────────────────────────────────────────────────────────────

    def solve(self, group: Group) -> SolveResult:
        """
        Solve *group* with every other group held fixed.

        Returns :class:`SolveOkay` or :class:`SolveFail`.  Parameter values
        reported by the engine are written back only for parameters owned
        by *group*; nothing is rolled back on failure.
        """
        self._store.groups.get(group.handle)
        request = SolveRequest(
            params=[replace(p) for p in self._store.params],
            entities=[copy.deepcopy(e) for e in self._store.entities],
            constraints=[copy.deepcopy(c) for c in self._store.constraints],
            group=group.handle,
            dragged=_pad(self._dragged, MAX_DRAGGED),
            calculate_faileds=self.calculate_faileds,
        )
        response = self._solver.solve(request)

        params = self._store.params
        for handle, value in response.values.items():
            if handle in params and params.get(handle).group == group.handle:
                params.get(handle).value = float(value)

        if response.result == ResultCode.OKAY:
            logger.debug("Group %d solved, dof=%d", group.handle, response.dof)
            return SolveOkay(response.dof)

        constraints = self._store.constraints
        failed = [
            self._constraint_handle(constraints.get(h))
            for h in response.failed
            if h in constraints
        ]
        reason = FailReason(response.result)
        logger.warning("Group %d failed to solve: %s (dof=%d, failed=%s)",
                       group.handle, reason.name, response.dof,
                       [int(c) for c in failed])
        return SolveFail(response.dof, reason, failed)

    def __repr__(self) -> str:
        return f"System({self._store!r})"
