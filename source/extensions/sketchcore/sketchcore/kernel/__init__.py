from .handles import MAX_HANDLE, NO_HANDLE, HandleAllocator
from .records import (
    ConstraintRecord,
    ConstraintType,
    EntityRecord,
    EntityType,
    Param,
    ResultCode,
)
from .store import ElementStore, Elements
from .geometry import (
    angle_2d,
    angle_3d,
    arc_len,
    convert_2d_to_3d,
    distance,
    project_3d_to_2d,
)
from .quaternion import make_quaternion, quaternion_n, quaternion_u, quaternion_v
from .constraint_solver import ConstraintSolver, SolveRequest, SolveResponse
