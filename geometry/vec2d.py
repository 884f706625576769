from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class Vec2D:
    """
    Immutable 2D vector.

    Attributes:
        x (float): X component [m]
        y (float): Y component [m]
    """
    x: float
    y: float

    @classmethod
    def from_array(cls, arr) -> "Vec2D":
        return cls(float(arr[0]), float(arr[1]))

    @classmethod
    def from_angle(cls, angle: float) -> "Vec2D":
        """Unit vector pointing at `angle` [rad]."""
        return cls(float(np.cos(angle)), float(np.sin(angle)))

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y])

    def add(self, other: "Vec2D") -> "Vec2D":
        return Vec2D(self.x + other.x, self.y + other.y)

    def subtract(self, other: "Vec2D") -> "Vec2D":
        return Vec2D(self.x - other.x, self.y - other.y)

    def scale(self, k: float) -> "Vec2D":
        return Vec2D(self.x * k, self.y * k)

    def dot(self, other: "Vec2D") -> float:
        return self.x * other.x + self.y * other.y

    def magnitude(self) -> float:
        return float(np.hypot(self.x, self.y))

    def normalize(self) -> "Vec2D":
        """
        Unit vector with the same direction. The zero vector is returned
        unchanged since it has no direction.
        """
        n = self.magnitude()
        if n == 0.0:
            return self
        return Vec2D(self.x / n, self.y / n)

    def angle(self) -> float:
        return float(np.arctan2(self.y, self.x))

    def reflect(self, origin: "Vec2D", angle: float) -> "Vec2D":
        """
        Reflect this point across the line through `origin` with direction `angle`.
        """
        d = Vec2D.from_angle(angle)
        rel = self.subtract(origin)
        # r' = 2 (r.d) d - r
        proj = d.scale(2.0 * rel.dot(d))
        return origin.add(proj.subtract(rel))

    def __add__(self, other: "Vec2D") -> "Vec2D":
        return self.add(other)

    def __sub__(self, other: "Vec2D") -> "Vec2D":
        return self.subtract(other)

    def __mul__(self, k: float) -> "Vec2D":
        return self.scale(k)

    __rmul__ = __mul__
