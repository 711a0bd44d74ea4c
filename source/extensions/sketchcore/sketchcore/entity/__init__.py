from .base import EntityData, EntityHandle, entity_class_for, register_entity
from .target import In3d, OnWorkplane, Target
from .point import Point
from .distance import Distance
from .orientation import Normal, Workplane
from .curves import ArcOfCircle, Circle, Cubic, LineSegment
