"""
Geometry helpers for reading solved sketches.

Plain numpy functions over coordinate tuples: distances, moving between a
workplane's 2D frame and 3D, angles and arc lengths.  Workplane
orientations are unit quaternions ``(w, x, y, z)`` as produced by
:func:`~sketchcore.kernel.quaternion.make_quaternion`.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from ..config import SOLVE_TOLERANCE
from .quaternion import quaternion_u, quaternion_v

Segment = Sequence[Sequence[float]]


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Euclidean distance between two points of the same dimension.

    >>> distance((3.0, 0.0), (0.0, 4.0))
    5.0
    """
    delta = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(math.sqrt(float(np.dot(delta, delta))))


def convert_2d_to_3d(point: Sequence[float], origin: Sequence[float],
                     normal: Sequence[float]) -> Tuple[float, float, float]:
    """Lift (u, v) coordinates on the plane through *origin* into 3D."""
    u, v = point
    p = np.asarray(origin, dtype=np.float64) + u * quaternion_u(normal) \
        + v * quaternion_v(normal)
    return tuple(float(c) for c in p)


def project_3d_to_2d(point: Sequence[float], origin: Sequence[float],
                     normal: Sequence[float]) -> Tuple[float, float]:
    """(u, v) coordinates of *point* projected onto the plane."""
    d = np.asarray(point, dtype=np.float64) - np.asarray(origin, dtype=np.float64)
    return (float(np.dot(d, quaternion_u(normal))),
            float(np.dot(d, quaternion_v(normal))))


def sweep_angle(start: Sequence[float], end: Sequence[float]) -> float:
    """Counter-clockwise angle in radians from 2D vector *start* to *end*, in [0, 2*pi)."""
    angle = math.atan2(end[1], end[0]) - math.atan2(start[1], start[0])
    return angle % (2 * math.pi)


def angle_2d(vec_a: Segment, vec_b: Segment) -> float:
    """
    Counter-clockwise angle in degrees from segment *vec_a* to *vec_b*.

    Each segment is given as ``(start, end)``; the result is in [0, 360).
    """
    a = np.subtract(vec_a[1], vec_a[0])
    b = np.subtract(vec_b[1], vec_b[0])
    return math.degrees(sweep_angle(a, b))


def angle_3d(vec_a: Segment, vec_b: Segment) -> float:
    """Smallest angle in degrees between two 3D segments, in [0, 180]."""
    a = np.subtract(vec_a[1], vec_a[0])
    b = np.subtract(vec_b[1], vec_b[0])
    cos = float(np.dot(a, b)) / (np.linalg.norm(a) * np.linalg.norm(b))
    return math.degrees(math.acos(max(-1.0, min(1.0, cos))))


def arc_len(center: Sequence[float], arc_start: Sequence[float],
            arc_end: Sequence[float]) -> float:
    """
    Length of the arc running counter-clockwise from *arc_start* to
    *arc_end*.  Coincident ends describe a full circle.

    Raises ``ValueError`` when the ends are not equally far from *center*.
    """
    s = np.subtract(arc_start, center)
    t = np.subtract(arc_end, center)
    radius = float(np.linalg.norm(s))
    if abs(radius - float(np.linalg.norm(t))) > SOLVE_TOLERANCE:
        raise ValueError("Not a circular arc")
    sweep = sweep_angle(s, t)
    if sweep < 1e-12:
        sweep = 2 * math.pi
    return radius * sweep
