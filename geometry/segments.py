from abc import ABC, abstractmethod
import numpy as np

from .vec2d import Vec2D


def _power_basis(t: np.ndarray, degree: int, order: int = 0) -> np.ndarray:
    """
    Rows of [1, t, t^2, ..., t^degree] differentiated `order` times.

    Returns:
        np.ndarray: shape (len(t), degree + 1)
    """
    t = np.asarray(t, dtype=float)
    out = np.zeros((t.shape[0], degree + 1))
    for k in range(order, degree + 1):
        coeff = 1.0
        for j in range(order):
            coeff *= (k - j)
        out[:, k] = coeff * t ** (k - order)
    return out


class BaseSegment(ABC):
    """
    Abstract base class for a single polynomial curve segment.

    A segment is fully described by a basis matrix (one row per basis
    function, one column per power of t) and a matching stack of control
    data (points, tangents, ...). Position and derivatives are then
    evaluated the same way for every curve family:

        P^(n)(t) = (d^n/dt^n [1, t, ..., t^d]) @ BASIS.T @ control

    Subclasses only provide `BASIS` and build `control` from Hermite data.

    Args:
        control (np.ndarray): control data, shape (n_basis, 2).
    """
    BASIS: np.ndarray = None

    def __init__(self, control: np.ndarray):
        self.control = np.asarray(control, dtype=float)
        self.control.setflags(write=False)

    @property
    def degree(self) -> int:
        return self.BASIS.shape[1] - 1

    @classmethod
    @abstractmethod
    def from_hermite(cls, p0: Vec2D, p1: Vec2D, v0: Vec2D, v1: Vec2D) -> "BaseSegment":
        """
        Build a segment from endpoint positions and endpoint tangents.

        Args:
            p0, p1 (Vec2D): start and end positions.
            v0, v1 (Vec2D): derivatives at start and end (already scaled).
        """
        pass

    def evaluate(self, t, order: int = 0) -> np.ndarray:
        scalar = np.ndim(t) == 0
        ts = np.atleast_1d(np.asarray(t, dtype=float))
        weights = _power_basis(ts, self.degree, order) @ self.BASIS.T
        values = weights @ self.control
        return values[0] if scalar else values

    def at(self, t) -> np.ndarray:
        """Position at local parameter t in [0, 1]; shape (2,) or (n, 2)."""
        return self.evaluate(t, 0)

    def deriv_at(self, t) -> np.ndarray:
        return self.evaluate(t, 1)

    def second_deriv_at(self, t) -> np.ndarray:
        return self.evaluate(t, 2)


class CubicHermiteSegment(BaseSegment):
    """
    Cubic Hermite segment stored as a cubic Bezier curve.

    Control points: p0, p0 + v0/3, p1 - v1/3, p1.
    """
    # Bernstein polynomials in power form
    BASIS = np.array([
        [1.0, -3.0,  3.0, -1.0],
        [0.0,  3.0, -6.0,  3.0],
        [0.0,  0.0,  3.0, -3.0],
        [0.0,  0.0,  0.0,  1.0],
    ])

    @classmethod
    def from_hermite(cls, p0, p1, v0, v1):
        c1 = p0.add(v0.scale(1.0 / 3.0))
        c2 = p1.add(v1.scale(-1.0 / 3.0))
        return cls(np.array([p0.to_array(), c1.to_array(), c2.to_array(), p1.to_array()]))

    @property
    def control_points(self) -> list:
        return [Vec2D.from_array(p) for p in self.control]


class QuinticHermiteSegment(BaseSegment):
    """
    Quintic Hermite segment with zero second derivative at both ends.

    Control data order: p0, v0, a0, a1, v1, p1.
    """
    BASIS = np.array([
        [1.0, 0.0, 0.0, -10.0,  15.0, -6.0],   # p0
        [0.0, 1.0, 0.0,  -6.0,   8.0, -3.0],   # v0
        [0.0, 0.0, 0.5,  -1.5,   1.5, -0.5],   # a0
        [0.0, 0.0, 0.0,   0.5,  -1.0,  0.5],   # a1
        [0.0, 0.0, 0.0,  -4.0,   7.0, -3.0],   # v1
        [0.0, 0.0, 0.0,  10.0, -15.0,  6.0],   # p1
    ])

    @classmethod
    def from_hermite(cls, p0, p1, v0, v1, a0=None, a1=None):
        a0 = a0 if a0 is not None else Vec2D(0.0, 0.0)
        a1 = a1 if a1 is not None else Vec2D(0.0, 0.0)
        return cls(np.array([
            p0.to_array(), v0.to_array(), a0.to_array(),
            a1.to_array(), v1.to_array(), p1.to_array(),
        ]))
