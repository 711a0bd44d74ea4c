"""Small sketch builders shared by the test modules."""

from sketchcore import Normal, Point, Workplane


def xy_workplane(system, group, origin=(0.0, 0.0, 0.0)):
    """Sketch an origin point, an identity normal and the XY workplane."""
    o = system.sketch(Point.in_3d(group, *origin))
    n = system.sketch(Normal.in_3d(group, 1.0, 0.0, 0.0, 0.0))
    wp = system.sketch(Workplane(group, o, n))
    return o, n, wp


def xz_workplane(system, group):
    o = system.sketch(Point.in_3d(group, 0.0, 0.0, 0.0))
    n = system.sketch(Normal.from_basis(group, (1, 0, 0), (0, 0, 1)))
    wp = system.sketch(Workplane(group, o, n))
    return o, n, wp
