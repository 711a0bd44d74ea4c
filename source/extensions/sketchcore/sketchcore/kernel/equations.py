"""
Residual equations for the default numerical engine.

Every constraint of the solve group contributes one or more residual rows
(zero when satisfied); some entities contribute implicit rows of their own
(a 3D normal must stay a unit quaternion, an arc's end must stay on its
circle).  Rows are plain Python closures over the flat records, evaluated
against the current unknown vector.

Architecture
------------
* Parameters of the solve group are *unknowns* and are read from the
  vector ``x``; every other parameter is a constant read from the initial
  value table.
* Geometry helpers lift records into numpy vectors: 3D points, points
  projected into a workplane's (u, v) frame, line directions, radii and
  arc lengths.  A constraint with a workplane is evaluated in that
  workplane's 2D frame; without one it is evaluated in 3D.
* Each block of rows records which parameters it read while being scanned
  at the initial point, so the engine can tell equations that cannot move
  (no unknowns involved) from the ones it has to solve.
* 3D "these two vectors are parallel" conditions have only two independent
  components; the component along the reference vector's dominant axis is
  dropped, with the axis fixed at the first evaluation so the row layout
  never changes mid-solve.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Set, Tuple

import numpy as np

from .geometry import sweep_angle
from .quaternion import quaternion_n, quaternion_u, quaternion_v
from .records import ConstraintRecord, ConstraintType, EntityRecord, EntityType

# Lengths below this are treated as degenerate
_EPS = 1e-12

# Relative step for central differences (~ cube root of machine epsilon)
_FD_STEP = 6e-6


def _cross2(a: np.ndarray, b: np.ndarray) -> float:
    return a[0] * b[1] - a[1] * b[0]


def _norm(v: np.ndarray) -> float:
    return float(math.sqrt(float(np.dot(v, v))))


def _cos(a: np.ndarray, b: np.ndarray) -> float:
    denom = _norm(a) * _norm(b)
    if denom < _EPS:
        return 0.0
    return float(np.dot(a, b)) / denom


class EquationSystem:
    """
    Residual rows for one solve.

    Usage::

        eqs = EquationSystem(entities, values, unknowns)
        for c in group_constraints:
            eqs.add_constraint(c)
        f0, live = eqs.scan()
        jac = eqs.jacobian(eqs.initial)
    """

    def __init__(
        self,
        entities: Dict[int, EntityRecord],
        values: Dict[int, float],
        unknowns: List[int],
    ):
        self._entities = entities
        self._values = values
        self._index = {h: i for i, h in enumerate(unknowns)}
        self._x = np.array([values[h] for h in unknowns], dtype=np.float64)
        self.initial = self._x.copy()

        self._blocks: List[Tuple[int, Callable[[], List[float]]]] = []
        self._block: int = -1
        self._axes: Dict[Tuple[int, int], int] = {}
        self._touched: Optional[Set[int]] = None

        #: Constraint handle per row (0 for implicit entity rows); set by scan()
        self.owners: List[int] = []

    # -- Building -------------------------------------------------------------

    def add_constraint(self, c: ConstraintRecord) -> None:
        self._blocks.append((c.handle, lambda c=c: self._eval_residuals(c)))

    def add_entity(self, e: EntityRecord) -> None:
        """Register the implicit rows an entity of the solve group carries."""
        if e.type == EntityType.NORMAL_IN_3D:
            self._blocks.append((0, lambda e=e: self._eval_unit_quaternion(e)))
        elif e.type == EntityType.ARC_OF_CIRCLE:
            self._blocks.append((0, lambda e=e: self._eval_arc_radius(e)))

    @property
    def n_unknowns(self) -> int:
        return self._x.size

    # -- Evaluation -----------------------------------------------------------

    def scan(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Evaluate every row at the initial point.

        Returns the residuals and a boolean mask of rows that depend on at
        least one unknown.  Also fills :attr:`owners`.
        """
        self._x = self.initial.copy()
        residuals: List[float] = []
        live: List[bool] = []
        self.owners = []
        for block, (owner, fn) in enumerate(self._blocks):
            self._block = block
            self._touched = set()
            rows = fn()
            depends = any(h in self._index for h in self._touched)
            self._touched = None
            residuals.extend(rows)
            live.extend([depends] * len(rows))
            self.owners.extend([owner] * len(rows))
        return np.array(residuals, dtype=np.float64), np.array(live, dtype=bool)

    def residuals(self, x: np.ndarray) -> np.ndarray:
        self._x = np.asarray(x, dtype=np.float64)
        out: List[float] = []
        for block, (_, fn) in enumerate(self._blocks):
            self._block = block
            out.extend(fn())
        return np.array(out, dtype=np.float64)

    def jacobian(self, x: np.ndarray, rows: Optional[np.ndarray] = None) -> np.ndarray:
        """Central-difference Jacobian, optionally restricted to *rows*."""
        x = np.asarray(x, dtype=np.float64)
        n_rows = len(self.owners) if rows is None else len(rows)
        if x.size == 0:
            return np.zeros((n_rows, 0))
        steps = _FD_STEP * np.maximum(1.0, np.abs(x))
        cols = []
        for j in range(x.size):
            xp = x.copy()
            xm = x.copy()
            xp[j] += steps[j]
            xm[j] -= steps[j]
            col = (self.residuals(xp) - self.residuals(xm)) / (2.0 * steps[j])
            cols.append(col if rows is None else col[rows])
        self._x = x
        return np.column_stack(cols)

    # -- Parameter and geometry access ----------------------------------------

    def _p(self, handle: int) -> float:
        if self._touched is not None:
            self._touched.add(handle)
        i = self._index.get(handle)
        if i is not None:
            return float(self._x[i])
        return self._values[handle]

    def _point3(self, handle: int) -> np.ndarray:
        e = self._entities[handle]
        if e.type == EntityType.POINT_IN_3D:
            return np.array([self._p(h) for h in e.params[:3]])
        origin, u, v, _ = self._frame(e.workplane)
        return origin + self._p(e.params[0]) * u + self._p(e.params[1]) * v

    def _quat(self, handle: int) -> Tuple[float, float, float, float]:
        e = self._entities[handle]
        if e.type == EntityType.NORMAL_IN_2D:
            return self._quat(self._entities[e.workplane].normal)
        return tuple(self._p(h) for h in e.params[:4])

    def _frame(self, workplane: int):
        """Origin and U, V, N axes of a workplane."""
        wp = self._entities[workplane]
        q = self._quat(wp.normal)
        return (self._point3(wp.points[0]), quaternion_u(q),
                quaternion_v(q), quaternion_n(q))

    def _pos(self, handle: int, workplane: int) -> np.ndarray:
        """A point in 3D, or in *workplane*'s (u, v) frame when given."""
        if not workplane:
            return self._point3(handle)
        e = self._entities[handle]
        if e.type == EntityType.POINT_IN_2D and e.workplane == workplane:
            return np.array([self._p(e.params[0]), self._p(e.params[1])])
        origin, u, v, _ = self._frame(workplane)
        d = self._point3(handle) - origin
        return np.array([float(np.dot(d, u)), float(np.dot(d, v))])

    def _line(self, handle: int, workplane: int) -> Tuple[np.ndarray, np.ndarray]:
        e = self._entities[handle]
        return self._pos(e.points[0], workplane), self._pos(e.points[1], workplane)

    def _direction(self, handle: int, workplane: int) -> np.ndarray:
        a, b = self._line(handle, workplane)
        return b - a

    def _length(self, handle: int, workplane: int) -> float:
        return _norm(self._direction(handle, workplane))

    def _pt_line_distance(self, point: int, line: int, workplane: int) -> float:
        p = self._pos(point, workplane)
        a, b = self._line(line, workplane)
        d = b - a
        length = _norm(d)
        if length < _EPS:
            return _norm(p - a)
        if workplane:
            return abs(_cross2(p - a, d)) / length
        return _norm(np.cross(p - a, d)) / length

    def _plane_distance(self, point: int, plane: int) -> float:
        origin, _, _, n = self._frame(plane)
        length = _norm(n)
        if length < _EPS:
            return 0.0
        return float(np.dot(self._point3(point) - origin, n)) / length

    def _radius(self, handle: int) -> float:
        e = self._entities[handle]
        if e.type == EntityType.CIRCLE:
            return self._p(self._entities[e.distance].params[0])
        center = self._pos(e.points[0], e.workplane)
        return _norm(self._pos(e.points[1], e.workplane) - center)

    def _arc_length(self, handle: int) -> float:
        """Radius times the counter-clockwise sweep from begin to end."""
        e = self._entities[handle]
        c = self._pos(e.points[0], e.workplane)
        s = self._pos(e.points[1], e.workplane) - c
        t = self._pos(e.points[2], e.workplane) - c
        sweep = sweep_angle(s, t)
        if sweep < _EPS:
            sweep = 2 * math.pi
        return _norm(s) * sweep

    def _tangent(self, handle: int, at_end: bool, workplane: int) -> np.ndarray:
        """Tangent direction of an arc or cubic at its start or end."""
        e = self._entities[handle]
        pts = e.points
        if e.type == EntityType.ARC_OF_CIRCLE:
            r = self._pos(pts[2] if at_end else pts[1], workplane) - \
                self._pos(pts[0], workplane)
            return np.array([-r[1], r[0]])
        if at_end:
            return self._pos(pts[3], workplane) - self._pos(pts[2], workplane)
        return self._pos(pts[1], workplane) - self._pos(pts[0], workplane)

    def _cross_rows(self, u: np.ndarray, d: np.ndarray, scale: float,
                    tag: int = 0) -> List[float]:
        """Rows that vanish when *u* is parallel to the reference *d*."""
        if scale < _EPS:
            scale = 1.0
        if u.size == 2:
            return [_cross2(u, d) / scale]
        axis = self._axes.setdefault(
            (self._block, tag), int(np.argmax(np.abs(d))))
        c = np.cross(u, d) / scale
        return [float(c[i]) for i in range(3) if i != axis]

    # -- Implicit entity rows ---------------------------------------------------

    def _eval_unit_quaternion(self, e: EntityRecord) -> List[float]:
        q = np.array([self._p(h) for h in e.params[:4]])
        return [float(np.dot(q, q)) - 1.0]

    def _eval_arc_radius(self, e: EntityRecord) -> List[float]:
        c = self._pos(e.points[0], e.workplane)
        begin = self._pos(e.points[1], e.workplane)
        end = self._pos(e.points[2], e.workplane)
        return [_norm(end - c) - _norm(begin - c)]

    # -- Constraint rows --------------------------------------------------------

    def _eval_residuals(self, c: ConstraintRecord) -> List[float]:
        """
        Residual rows for one constraint.  Each row is zero when the
        constraint is satisfied; the row count depends only on the
        constraint's kind and workplane.
        """
        T = ConstraintType
        t = c.type
        wp = c.workplane
        pa, pb = c.points
        ea, eb, ec, ed = c.entities

        if t == T.POINTS_COINCIDENT:
            return list(self._pos(pa, wp) - self._pos(pb, wp))

        if t == T.PT_PT_DISTANCE:
            delta = self._pos(pa, wp) - self._pos(pb, wp)
            if abs(c.value) < _EPS:
                # |delta| has no usable gradient at zero
                return list(delta)
            return [_norm(delta) - c.value]

        if t in (T.PT_PLANE_DISTANCE, T.PT_FACE_DISTANCE):
            return [self._plane_distance(pa, ea) - c.value]

        if t in (T.PT_IN_PLANE, T.PT_ON_FACE):
            return [self._plane_distance(pa, ea)]

        if t == T.PT_LINE_DISTANCE:
            if abs(c.value) < _EPS:
                p = self._pos(pa, wp)
                a, b = self._line(ea, wp)
                return self._cross_rows(p - a, b - a, _norm(b - a))
            return [self._pt_line_distance(pa, ea, wp) - c.value]

        if t == T.PT_ON_LINE:
            p = self._pos(pa, wp)
            a, b = self._line(ea, wp)
            return self._cross_rows(p - a, b - a, _norm(b - a))

        if t == T.EQUAL_LENGTH_LINES:
            return [self._length(ea, wp) - self._length(eb, wp)]

        if t == T.LENGTH_RATIO:
            return [self._length(ea, wp) - c.value * self._length(eb, wp)]

        if t == T.LENGTH_DIFFERENCE:
            return [self._length(ea, wp) - self._length(eb, wp) - c.value]

        if t == T.EQ_LEN_PT_LINE_D:
            return [self._length(ea, wp) - self._pt_line_distance(pa, eb, wp)]

        if t == T.EQ_PT_LN_DISTANCES:
            return [self._pt_line_distance(pa, ea, wp)
                    - self._pt_line_distance(pb, eb, wp)]

        if t == T.EQUAL_ANGLE:
            da = self._direction(ea, wp)
            if c.flags[0]:
                da = -da
            return [_cos(da, self._direction(eb, wp))
                    - _cos(self._direction(ec, wp), self._direction(ed, wp))]

        if t == T.EQUAL_LINE_ARC_LEN:
            return [self._length(ea, wp) - self._arc_length(eb)]

        if t == T.SYMMETRIC:
            a = self._point3(pa)
            b = self._point3(pb)
            origin, u, v, n = self._frame(ea)
            length = _norm(n) or 1.0
            rows = [float(np.dot((a + b) / 2 - origin, n)) / length]
            if wp:
                d = self._pos(pb, wp) - self._pos(pa, wp)
                _, wu, wv, _ = self._frame(wp)
                n2 = np.array([float(np.dot(n, wu)), float(np.dot(n, wv))])
                return rows + self._cross_rows(d, n2, length)
            return rows + self._cross_rows(b - a, n, length)

        if t == T.SYMMETRIC_HORIZ:
            a = self._pos(pa, wp)
            b = self._pos(pb, wp)
            return [a[1] - b[1], a[0] + b[0]]

        if t == T.SYMMETRIC_VERT:
            a = self._pos(pa, wp)
            b = self._pos(pb, wp)
            return [a[0] - b[0], a[1] + b[1]]

        if t == T.SYMMETRIC_LINE:
            a = self._pos(pa, wp)
            b = self._pos(pb, wp)
            la, lb = self._line(ea, wp)
            d = lb - la
            length = _norm(d) or 1.0
            mid = (a + b) / 2
            return [_cross2(mid - la, d) / length,
                    float(np.dot(b - a, d)) / length]

        if t == T.AT_MIDPOINT:
            a, b = self._line(ea, wp)
            return list(self._pos(pa, wp) - (a + b) / 2)

        if t in (T.HORIZONTAL, T.VERTICAL):
            if ea:
                a, b = self._line(ea, wp)
            else:
                a, b = self._pos(pa, wp), self._pos(pb, wp)
            axis = 1 if t == T.HORIZONTAL else 0
            return [a[axis] - b[axis]]

        if t == T.DIAMETER:
            return [2.0 * self._radius(ea) - c.value]

        if t == T.PT_ON_CIRCLE:
            curve = self._entities[ea]
            q = self._quat(curve.normal)
            d = self._point3(pa) - self._point3(curve.points[0])
            du = float(np.dot(d, quaternion_u(q)))
            dv = float(np.dot(d, quaternion_v(q)))
            return [math.hypot(du, dv) - self._radius(ea)]

        if t == T.SAME_ORIENTATION:
            qa = self._quat(ea)
            qb = self._quat(eb)
            rows = self._cross_rows(quaternion_n(qb), quaternion_n(qa), 1.0)
            return rows + [float(np.dot(quaternion_u(qa), quaternion_v(qb)))]

        if t == T.ANGLE:
            da = self._direction(ea, wp)
            if c.flags[0]:
                da = -da
            db = self._direction(eb, wp)
            target = math.radians(c.value)
            if abs(math.sin(target)) < _EPS:
                # cos is flat at 0 and 180 degrees; ask for parallel instead
                return self._cross_rows(db, da, _norm(da) * _norm(db))
            return [_cos(da, db) - math.cos(target)]

        if t == T.PARALLEL:
            da = self._direction(ea, wp)
            db = self._direction(eb, wp)
            return self._cross_rows(db, da, _norm(da) * _norm(db))

        if t == T.PERPENDICULAR:
            return [_cos(self._direction(ea, wp), self._direction(eb, wp))]

        if t == T.ARC_LINE_TANGENT:
            arc = self._entities[ea]
            center = self._pos(arc.points[0], wp)
            end = self._pos(arc.points[2] if c.flags[0] else arc.points[1], wp)
            return [_cos(end - center, self._direction(eb, wp))]

        if t == T.CUBIC_LINE_TANGENT:
            tangent = self._tangent(ea, c.flags[0], wp)
            d = self._direction(eb, wp)
            return self._cross_rows(tangent, d, _norm(tangent) * _norm(d))

        if t == T.CURVE_CURVE_TANGENT:
            ta = self._tangent(ea, c.flags[0], wp)
            tb = self._tangent(eb, c.flags[1], wp)
            return self._cross_rows(ta, tb, _norm(ta) * _norm(tb))

        if t == T.EQUAL_RADIUS:
            return [self._radius(ea) - self._radius(eb)]

        if t == T.PROJ_PT_DISTANCE:
            target = self._entities[ea]
            if target.type == EntityType.LINE_SEGMENT:
                d = self._direction(ea, 0)
            else:
                d = quaternion_n(self._quat(ea))
            length = _norm(d) or 1.0
            delta = self._point3(pb) - self._point3(pa)
            return [float(np.dot(delta, d)) / length - c.value]

        if t == T.WHERE_DRAGGED:
            point = self._entities[pa]
            return [self._p(h) - self._values[h] for h in point.param_handles]

        if t == T.ARC_ARC_LEN_RATIO:
            return [self._arc_length(ea) - c.value * self._arc_length(eb)]

        if t == T.ARC_LINE_LEN_RATIO:
            return [self._arc_length(ea) - c.value * self._length(eb, wp)]

        if t == T.ARC_ARC_DIFFERENCE:
            return [self._arc_length(ea) - self._arc_length(eb) - c.value]

        if t == T.ARC_LINE_DIFFERENCE:
            return [self._arc_length(ea) - self._length(eb, wp) - c.value]

        raise ValueError(f"Unsupported constraint type: {t!r}")
