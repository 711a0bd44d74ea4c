from .base import (
    ConstraintData,
    ConstraintHandle,
    constraint_class_for,
    register_constraint,
)
from .distances import (
    ProjPtDistance,
    PtFaceDistance,
    PtLineDistance,
    PtPlaneDistance,
    PtPtDistance,
)
from .incidence import (
    AtMidpoint,
    PointsCoincident,
    PtInPlane,
    PtOnCircle,
    PtOnFace,
    PtOnLine,
    WhereDragged,
)
from .orientation import (
    Angle,
    EqualAngle,
    LineHorizontal,
    LineVertical,
    Parallel,
    Perpendicular,
    PointsHorizontal,
    PointsVertical,
    SameOrientation,
)
from .equality import (
    ArcArcDifference,
    ArcArcLenRatio,
    ArcLineDifference,
    ArcLineLenRatio,
    Diameter,
    EqLenPtLineD,
    EqPtLnDistances,
    EqualLengthLines,
    EqualLineArcLen,
    EqualRadius,
    LengthDifference,
    LengthRatio,
)
from .symmetry import Symmetric, SymmetricHoriz, SymmetricLine, SymmetricVert
from .tangency import ArcLineTangent, CubicLineTangent, CurveCurveTangent
