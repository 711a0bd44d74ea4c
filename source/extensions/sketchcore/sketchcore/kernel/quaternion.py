"""
Quaternion helpers for 3D normals.

A workplane's orientation is a unit quaternion ``(w, x, y, z)``.  Its
rotation maps the global X/Y/Z axes onto the plane's U (in-plane "right"),
V (in-plane "up") and N (plane normal) basis vectors.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

Quaternion = Tuple[float, float, float, float]


def make_quaternion(u: Sequence[float], v: Sequence[float]) -> Quaternion:
    """
    Quaternion rotating the X axis onto *u* and the Y axis onto *v*.

    *u* and *v* must be perpendicular; they are normalised here.

    >>> make_quaternion((1, 0, 0), (0, 1, 0))
    (1.0, 0.0, 0.0, 0.0)
    """
    u = np.asarray(u, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    nu, nv = np.linalg.norm(u), np.linalg.norm(v)
    if nu < 1e-12 or nv < 1e-12:
        raise ValueError("Basis vectors must be non-zero")
    u = u / nu
    v = v / nv
    n = np.cross(u, v)

    tr = 1.0 + u[0] + v[1] + n[2]
    if tr > 1e-4:
        s = 2.0 * math.sqrt(tr)
        q = (s / 4, (v[2] - n[1]) / s, (n[0] - u[2]) / s, (u[1] - v[0]) / s)
    elif u[0] > v[1] and u[0] > n[2]:
        s = 2.0 * math.sqrt(1.0 + u[0] - v[1] - n[2])
        q = ((v[2] - n[1]) / s, s / 4, (u[1] + v[0]) / s, (n[0] + u[2]) / s)
    elif v[1] > n[2]:
        s = 2.0 * math.sqrt(1.0 - u[0] + v[1] - n[2])
        q = ((n[0] - u[2]) / s, (u[1] + v[0]) / s, s / 4, (v[2] + n[1]) / s)
    else:
        s = 2.0 * math.sqrt(1.0 - u[0] - v[1] + n[2])
        q = ((u[1] - v[0]) / s, (n[0] + u[2]) / s, (v[2] + n[1]) / s, s / 4)

    mag = math.sqrt(sum(c * c for c in q))
    return tuple(float(c / mag) for c in q)


def quaternion_u(q: Sequence[float]) -> np.ndarray:
    w, x, y, z = q
    return np.array([
        w * w + x * x - y * y - z * z,
        2 * (w * z + x * y),
        2 * (x * z - w * y),
    ])


def quaternion_v(q: Sequence[float]) -> np.ndarray:
    w, x, y, z = q
    return np.array([
        2 * (x * y - w * z),
        w * w - x * x + y * y - z * z,
        2 * (w * x + y * z),
    ])


def quaternion_n(q: Sequence[float]) -> np.ndarray:
    w, x, y, z = q
    return np.array([
        2 * (w * y + x * z),
        2 * (y * z - w * x),
        w * w - x * x - y * y + z * z,
    ])
