import threading
from dataclasses import replace
from typing import NamedTuple, Sequence, Tuple

import numpy as np

from .registry import PathType, SEGMENT_REGISTRY, resolve_path_type
from .utils import curvature, mirror_angle, normalize_angle, radius_from_curvature
from .vec2d import Vec2D
from .waypoint import Waypoint


class ArcLengthTable(NamedTuple):
    """Cumulative chord length paired with the global parameter it was sampled at."""
    points: int
    lengths: np.ndarray
    ts: np.ndarray


class Path:
    """
    Piecewise Hermite curve through a list of waypoints.

    One segment joins each pair of consecutive waypoints. The tangent at a
    waypoint is `alpha * (cos(heading), sin(heading))`, so neighbouring
    segments share position and first derivative (C1 continuity).

    The global parameter t in [0, 1] is split evenly between segments.
    Because t is not proportional to distance, an arc-length lookup table
    (built by `compute_length`) maps a fraction of the total distance back
    to t (`s2t`).

    Args:
        waypoints (Sequence[Waypoint]): at least two waypoints.
        alpha (float): tangent magnitude ("tension") at each waypoint.
        path_type (PathType | str): curve family, quintic Hermite by default.
        base_radius (float): half of the robot's base width [m], used by `wheels_at`.
        driving_backwards (bool): swap left/right wheels in `wheels_at`.
    """

    def __init__(
        self,
        waypoints: Sequence[Waypoint],
        alpha: float,
        path_type=PathType.QUINTIC_HERMITE,
        base_radius: float = 0.0,
        driving_backwards: bool = False,
    ):
        if waypoints is None or len(waypoints) < 2:
            raise ValueError("A path needs at least 2 waypoints")
        if alpha is None or np.isnan(alpha):
            raise ValueError("Alpha cannot be NaN")

        self.waypoints: Tuple[Waypoint, ...] = tuple(waypoints)
        self.alpha = float(alpha)
        self.path_type = resolve_path_type(path_type)
        self.base_radius = float(base_radius)
        self.driving_backwards = bool(driving_backwards)

        segment_class = SEGMENT_REGISTRY[self.path_type]
        self.segments = tuple(
            segment_class.from_hermite(
                a.position, b.position, a.tangent(self.alpha), b.tangent(self.alpha)
            )
            for a, b in zip(self.waypoints[:-1], self.waypoints[1:])
        )

        self._table = None
        self._table_lock = threading.Lock()

    # ---------- Evaluation ----------
    def _locate(self, t: np.ndarray):
        """Map global t to (segment index, local t)."""
        n = len(self.segments)
        t = np.asarray(t, dtype=float)
        scaled = t * n
        idx = np.floor(scaled).astype(int)
        local = np.mod(scaled, 1.0)
        # t >= 1 (or rounding up to it) is the end of the last segment
        end = (t >= 1.0) | (idx >= n)
        idx[end] = n - 1
        local[end] = 1.0
        start = t < 0.0
        idx[start] = 0
        local[start] = 0.0
        return idx, local

    def sample(self, t, order: int = 0) -> np.ndarray:
        """
        Evaluate the path (order 0), its derivative (1) or second derivative (2).

        Args:
            t (float | np.ndarray): global parameter(s) in [0, 1].
            order (int): derivative order.

        Returns:
            np.ndarray: shape (2,) for a scalar t, (n, 2) otherwise.
        """
        scalar = np.ndim(t) == 0
        ts = np.atleast_1d(np.asarray(t, dtype=float))
        idx, local = self._locate(ts)
        out = np.empty((ts.shape[0], 2))
        for k in np.unique(idx):
            mask = idx == k
            out[mask] = self.segments[k].evaluate(local[mask], order)
        return out[0] if scalar else out

    def at(self, t: float) -> Vec2D:
        return Vec2D.from_array(self.sample(t, 0))

    def deriv_at(self, t: float) -> Vec2D:
        return Vec2D.from_array(self.sample(t, 1))

    def second_deriv_at(self, t: float) -> Vec2D:
        return Vec2D.from_array(self.sample(t, 2))

    def heading_at(self, t: float) -> float:
        return self.deriv_at(t).angle()

    def curvature_at(self, t: float) -> float:
        d = self.sample(t, 1)
        dd = self.sample(t, 2)
        return curvature(d[0], dd[0], d[1], dd[1])

    def radius_at(self, t: float) -> float:
        """Signed radius of the path [m]; positive when turning left."""
        return radius_from_curvature(self.curvature_at(t))

    def wheels_at(self, t: float) -> Tuple[Vec2D, Vec2D]:
        """
        Positions of the left and right wheels at t.

        The wheels sit `base_radius` away from the path along the normal to
        the heading. When driving backwards the robot faces the other way,
        so left and right are swapped.
        """
        position = self.at(t)
        heading = self.heading_at(t)
        offset = self.base_radius if not self.driving_backwards else -self.base_radius
        normal = Vec2D(-np.sin(heading), np.cos(heading)).scale(offset)
        return position.add(normal), position.subtract(normal)

    # ---------- Arc length ----------
    def compute_length(self, points: int) -> float:
        """
        Build the arc-length table from `points` uniform samples of t and
        return the total path length [m].

        Only the first table is kept. Later calls with the same number of
        points reuse it; other counts return their length without touching
        the stored table.
        """
        points = int(points)
        if points < 2:
            raise ValueError("The arc-length table needs at least 2 points")

        with self._table_lock:
            table = self._table
            if table is None:
                table = self._build_table(points)
                self._table = table
            elif table.points != points:
                return float(self._build_table(points).lengths[-1])
        return float(table.lengths[-1])

    def _build_table(self, points: int) -> ArcLengthTable:
        ts = np.linspace(0.0, 1.0, points)
        positions = self.sample(ts)
        chords = np.hypot(*np.diff(positions, axis=0).T)
        lengths = np.concatenate([[0.0], np.cumsum(chords)])
        lengths.setflags(write=False)
        ts.setflags(write=False)
        return ArcLengthTable(points, lengths, ts)

    @property
    def arc_length_table(self) -> ArcLengthTable:
        if self._table is None:
            raise RuntimeError("Arc-length table not computed, call compute_length() first")
        return self._table

    @property
    def length(self) -> float:
        """Total length [m]; NaN until `compute_length` has run."""
        table = self._table
        return float("nan") if table is None else float(table.lengths[-1])

    def s2t(self, s: float) -> float:
        """
        Convert a fraction of the total distance (s in [0, 1]) to the path parameter t.
        """
        table = self.arc_length_table
        lengths, ts = table.lengths, table.ts
        dist = s * lengths[-1]

        if dist > lengths[-1]:
            return 1.0
        if dist <= 0.0:
            return float(ts[0])

        # lengths[k] <= dist < lengths[k + 1]
        k = int(np.searchsorted(lengths, dist, side="right")) - 1
        if lengths[k] == dist:
            return float(ts[k])
        if k >= len(lengths) - 1:
            return 1.0

        f = (dist - lengths[k]) / (lengths[k + 1] - lengths[k])
        return float(ts[k] + (ts[k + 1] - ts[k]) * f)

    # ---------- Transforms ----------
    def _derive(self, waypoints, driving_backwards: bool) -> "Path":
        return Path(
            waypoints,
            self.alpha,
            path_type=self.path_type,
            base_radius=self.base_radius,
            driving_backwards=driving_backwards,
        )

    def _reflect(self, ref: float) -> Tuple[Waypoint, ...]:
        origin = self.waypoints[0].position
        reflected = []
        for wp in self.waypoints:
            p = wp.position.reflect(origin, ref)
            reflected.append(replace(wp, x=p.x, y=p.y, heading=mirror_angle(wp.heading, ref)))
        return tuple(reflected)

    def mirror_left_right(self) -> "Path":
        """
        Path in which every left turn becomes a right turn.

        Reflects across the line through the first waypoint along its
        heading; this is a reflection across the Y axis only when the first
        heading is pi/2.
        """
        ref = self.waypoints[0].heading
        return self._derive(self._reflect(ref), self.driving_backwards)

    def mirror_front_back(self) -> "Path":
        """Path driven backwards: reflected across the line perpendicular to the first heading."""
        ref = self.waypoints[0].heading + np.pi / 2
        return self._derive(self._reflect(ref), not self.driving_backwards)

    def retrace(self) -> "Path":
        """The same curve traversed from the last waypoint back to the first."""
        reversed_wps = tuple(
            replace(wp, heading=normalize_angle(wp.heading + np.pi))
            for wp in reversed(self.waypoints)
        )
        return self._derive(reversed_wps, not self.driving_backwards)
