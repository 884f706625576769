from enum import Enum

from .segments import CubicHermiteSegment, QuinticHermiteSegment


class PathType(Enum):
    """Curve family used to join consecutive waypoints."""
    CUBIC_HERMITE = "cubic_hermite"
    QUINTIC_HERMITE = "quintic_hermite"


SEGMENT_REGISTRY = {
    PathType.CUBIC_HERMITE: CubicHermiteSegment,
    PathType.QUINTIC_HERMITE: QuinticHermiteSegment,
}


def resolve_path_type(value) -> PathType:
    """Accept a PathType or its string value ("cubic_hermite", "QUINTIC_HERMITE", ...)."""
    if isinstance(value, PathType):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        for path_type in PathType:
            if path_type.value == key:
                return path_type
    raise ValueError(f"Unknown path type: {value}")
