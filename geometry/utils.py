import numpy as np


def normalize_angle(angle: float) -> float:
    """Wrap an angle [rad] to (-pi, pi]."""
    wrapped = float(np.arctan2(np.sin(angle), np.cos(angle)))
    if wrapped == -np.pi:
        return float(np.pi)
    return wrapped


def mirror_angle(angle: float, ref: float) -> float:
    """Reflect a direction across the line with direction `ref`."""
    return normalize_angle(2.0 * ref - angle)


def lerp(a: float, b: float, f: float) -> float:
    return a + (b - a) * f


def lerp_angle(a: np.ndarray, b: np.ndarray, f: float) -> float:
    """
    Interpolate between two unit heading vectors and return the blended angle.

    Blending the vectors instead of the angles keeps the result continuous
    when the two headings sit on either side of +-pi.
    """
    x = lerp(a[0], b[0], f)
    y = lerp(a[1], b[1], f)
    return float(np.arctan2(y, x))


def curvature(dx: float, ddx: float, dy: float, ddy: float) -> float:
    """
    Signed curvature of a parametric curve.

        kappa = (x'y'' - y'x'') / (x'^2 + y'^2)^(3/2)

    Positive for counter-clockwise (left) turns. A point with zero
    derivative has no defined tangent and is treated as straight.
    """
    denom = (dx * dx + dy * dy) ** 1.5
    if denom == 0.0:
        return 0.0
    return (dx * ddy - dy * ddx) / denom


def radius_from_curvature(kappa: float) -> float:
    """Signed radius [m]; infinite on straight sections."""
    if kappa == 0.0:
        return float("inf")
    return 1.0 / kappa
