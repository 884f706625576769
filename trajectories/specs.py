import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from geometry import PathType, Waypoint, resolve_path_type
from .exceptions import InvalidConfigurationError


def _is_valid_number(value) -> bool:
    return value is not None and not math.isnan(value)


def _to_float(value) -> Optional[float]:
    return None if value is None else float(value)


def _to_sample_count(value) -> int:
    try:
        count = float(value)
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"Sample count must be an integer, got {value!r}") from e
    if not count.is_integer():
        raise InvalidConfigurationError(f"Sample count must be an integer, got {value!r}")
    if count < 2:
        raise InvalidConfigurationError(f"Sample count must be at least 2, got {value!r}")
    return int(count)


@dataclass(frozen=True)
class RobotSpecs:
    """
    Kinematic limits of the robot.

    Attributes:
        max_velocity (float): [m/s] Maximum speed of the robot (or of each wheel side for tank drives)
        max_acceleration (float): [m/s²] Maximum acceleration magnitude
        base_width (Optional[float]): [m] Distance between left and right wheels, required for tank drives
    """
    max_velocity: float
    max_acceleration: float
    base_width: Optional[float] = None

    def __post_init__(self):
        if not _is_valid_number(self.max_velocity):
            raise InvalidConfigurationError("Max velocity cannot be NaN or missing")
        if not _is_valid_number(self.max_acceleration):
            raise InvalidConfigurationError("Max acceleration cannot be NaN or missing")
        if self.max_velocity <= 0:
            raise InvalidConfigurationError(f"Max velocity must be positive, got {self.max_velocity}")
        if self.max_acceleration <= 0:
            raise InvalidConfigurationError(f"Max acceleration must be positive, got {self.max_acceleration}")
        if self.base_width is not None and math.isnan(self.base_width):
            # NaN means unset; tank drives reject a missing base width
            object.__setattr__(self, "base_width", None)
        if self.base_width is not None:
            if math.isinf(self.base_width) or self.base_width <= 0:
                raise InvalidConfigurationError(f"Base width must be a positive number, got {self.base_width}")

    @property
    def base_radius(self) -> float:
        """[m] Half of the base width (0 when no base width is set)"""
        return self.base_width / 2 if self.base_width is not None else 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RobotSpecs":
        missing = {"max_velocity", "max_acceleration"} - set(data)
        if missing:
            raise InvalidConfigurationError(f"Missing robot keys: {sorted(missing)}")
        base_width = data.get("base_width")
        return cls(
            max_velocity=_to_float(data["max_velocity"]),
            max_acceleration=_to_float(data["max_acceleration"]),
            base_width=_to_float(base_width),
        )

    def to_dict(self) -> dict:
        return dict(
            max_velocity=self.max_velocity,
            max_acceleration=self.max_acceleration,
            base_width=self.base_width,
        )


@dataclass(frozen=True)
class TrajectoryParams:
    """
    Parameters of trajectory generation.

    Attributes:
        waypoints (Tuple[Waypoint, ...]): at least 2 waypoints; the first one sets the initial facing
        alpha (float): tangent magnitude at each waypoint (curve tension)
        sample_count (int): number of moments to generate (>= 2)
        is_tank (bool): apply the differential-drive turning penalty
        path_type (PathType): curve family joining the waypoints
    """
    waypoints: Tuple[Waypoint, ...]
    alpha: float
    sample_count: int = 1000
    is_tank: bool = False
    path_type: PathType = PathType.QUINTIC_HERMITE

    def __post_init__(self):
        if self.waypoints is None:
            raise InvalidConfigurationError("Waypoints are not set")
        object.__setattr__(self, "waypoints", tuple(self.waypoints))
        if len(self.waypoints) < 2:
            raise InvalidConfigurationError("At least 2 waypoints are required")
        if not _is_valid_number(self.alpha):
            raise InvalidConfigurationError("Alpha cannot be NaN or missing")
        object.__setattr__(self, "sample_count", _to_sample_count(self.sample_count))
        try:
            object.__setattr__(self, "path_type", resolve_path_type(self.path_type))
        except ValueError as e:
            raise InvalidConfigurationError(str(e)) from e

        for wp in (self.waypoints[0], self.waypoints[-1]):
            if wp.velocity is not None and (math.isnan(wp.velocity) or wp.velocity < 0):
                raise InvalidConfigurationError(
                    f"Boundary velocity must be a non-negative number, got {wp.velocity}"
                )

    @property
    def initial_velocity(self) -> float:
        v = self.waypoints[0].velocity
        return 0.0 if v is None else v

    @property
    def final_velocity(self) -> float:
        v = self.waypoints[-1].velocity
        return 0.0 if v is None else v

    def with_waypoints(self, waypoints) -> "TrajectoryParams":
        return TrajectoryParams(
            waypoints=tuple(waypoints),
            alpha=self.alpha,
            sample_count=self.sample_count,
            is_tank=self.is_tank,
            path_type=self.path_type,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrajectoryParams":
        missing = {"waypoints", "alpha"} - set(data)
        if missing:
            raise InvalidConfigurationError(f"Missing trajectory keys: {sorted(missing)}")
        try:
            waypoints = tuple(Waypoint.from_dict(w) for w in data["waypoints"] or ())
        except (TypeError, ValueError) as e:
            raise InvalidConfigurationError(f"Invalid waypoint: {e}") from e
        return cls(
            waypoints=waypoints,
            alpha=_to_float(data["alpha"]),
            sample_count=data.get("sample_count", 1000),
            is_tank=bool(data.get("is_tank", False)),
            path_type=data.get("path_type", PathType.QUINTIC_HERMITE),
        )
