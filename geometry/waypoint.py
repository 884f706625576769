from dataclasses import dataclass
from typing import Any, Dict, Optional

from .vec2d import Vec2D


@dataclass(frozen=True)
class Waypoint:
    """
    A point the path must pass through.

    Attributes:
        x (float): X position [m]
        y (float): Y position [m]
        heading (float): Direction of travel at this point [rad]
        velocity (Optional[float]): Boundary velocity [m/s]. Only used on the
            first and last waypoint of a trajectory; None means the robot is
            at rest there.
    """
    x: float
    y: float
    heading: float
    velocity: Optional[float] = None

    @property
    def position(self) -> Vec2D:
        return Vec2D(self.x, self.y)

    def tangent(self, alpha: float) -> Vec2D:
        """Hermite tangent at this waypoint: alpha * (cos(heading), sin(heading))."""
        return Vec2D.from_angle(self.heading).scale(alpha)

    @classmethod
    def from_dict(cls, data) -> "Waypoint":
        """
        Build a waypoint from a mapping {"x", "y", "heading", ["velocity"]}
        or a sequence [x, y, heading, (velocity)].
        """
        if isinstance(data, dict):
            missing = {"x", "y", "heading"} - set(data)
            if missing:
                raise ValueError(f"Waypoint is missing keys: {sorted(missing)}")
            velocity = data.get("velocity")
            return cls(
                float(data["x"]),
                float(data["y"]),
                float(data["heading"]),
                None if velocity is None else float(velocity),
            )
        values = list(data)
        if len(values) not in (3, 4):
            raise ValueError(f"Waypoint needs 3 or 4 values, got {len(values)}")
        velocity = float(values[3]) if len(values) == 4 else None
        return cls(float(values[0]), float(values[1]), float(values[2]), velocity)

    def to_dict(self) -> Dict[str, Any]:
        return dict(x=self.x, y=self.y, heading=self.heading, velocity=self.velocity)
