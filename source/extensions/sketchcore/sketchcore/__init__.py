"""
sketchcore — parametric 2D/3D geometric constraint sketches.

Build groups of entities (points, normals, workplanes, lines, circles,
arcs, cubics), attach constraints between them, and solve one group at a
time with earlier groups held fixed.
"""

__version__ = "0.1.0"

from .config import SolverSettings
from .errors import (
    EntityInUseError,
    GroupInUseError,
    HandleExhaustedError,
    KindMismatchError,
    NotFoundError,
    SketchError,
    WorkplaneMismatchError,
)
from .group import Group
from .entity import (
    ArcOfCircle,
    Circle,
    Cubic,
    Distance,
    EntityData,
    EntityHandle,
    In3d,
    LineSegment,
    Normal,
    OnWorkplane,
    Point,
    Workplane,
)
from .constraint import (
    Angle,
    ArcArcDifference,
    ArcArcLenRatio,
    ArcLineDifference,
    ArcLineLenRatio,
    ArcLineTangent,
    AtMidpoint,
    ConstraintData,
    ConstraintHandle,
    CubicLineTangent,
    CurveCurveTangent,
    Diameter,
    EqLenPtLineD,
    EqPtLnDistances,
    EqualAngle,
    EqualLengthLines,
    EqualLineArcLen,
    EqualRadius,
    LengthDifference,
    LengthRatio,
    LineHorizontal,
    LineVertical,
    Parallel,
    Perpendicular,
    PointsCoincident,
    PointsHorizontal,
    PointsVertical,
    ProjPtDistance,
    PtFaceDistance,
    PtInPlane,
    PtLineDistance,
    PtOnCircle,
    PtOnFace,
    PtOnLine,
    PtPlaneDistance,
    PtPtDistance,
    SameOrientation,
    Symmetric,
    SymmetricHoriz,
    SymmetricLine,
    SymmetricVert,
    WhereDragged,
)
from .kernel.geometry import (
    angle_2d,
    angle_3d,
    arc_len,
    convert_2d_to_3d,
    distance,
    project_3d_to_2d,
)
from .kernel.quaternion import make_quaternion, quaternion_n, quaternion_u, quaternion_v
from .solve_result import FailReason, SolveFail, SolveOkay, SolveResult
from .system import System
