# geometry/__init__.py

from .vec2d import Vec2D
from .waypoint import Waypoint
from .segments import BaseSegment, CubicHermiteSegment, QuinticHermiteSegment
from .registry import PathType, SEGMENT_REGISTRY, resolve_path_type
from .path import Path, ArcLengthTable

__all__ = [
    "Vec2D",
    "Waypoint",
    "BaseSegment",
    "CubicHermiteSegment",
    "QuinticHermiteSegment",
    "PathType",
    "SEGMENT_REGISTRY",
    "resolve_path_type",
    "Path",
    "ArcLengthTable",
]
