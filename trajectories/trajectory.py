# trajectories/trajectory.py

from typing import Optional, Sequence, Tuple

import numpy as np

from geometry import Path
from geometry.utils import lerp, lerp_angle, mirror_angle, normalize_angle
from .base import BaseTrajectory, Moment
from .drive_models import BaseDriveModel, build_drive_model
from .exceptions import TimeOutOfRangeError
from .generator import generate_profile
from .specs import RobotSpecs, TrajectoryParams

_WHEEL_FIELDS = (
    "left_velocity",
    "right_velocity",
    "left_acceleration",
    "right_acceleration",
    "left_position",
    "right_position",
)


class Trajectory(BaseTrajectory):
    """
    Time-parameterized motion along a waypoint path.

    The trajectory is computed once at construction and never changes:
    moments are frozen dataclasses held in a tuple and the per-sample
    arrays are read-only, so a finished trajectory can be queried from
    several threads.

    For tank drives (`params.is_tank`), each moment also carries the left
    and right wheel kinematics, and the velocity is lowered in turns so
    that neither wheel exceeds the max velocity.

    Example usage:
        specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5, base_width=2.0)
        params = TrajectoryParams(waypoints, alpha=40.0, sample_count=1000, is_tank=True)
        traj = Trajectory(specs, params)
        m = traj.get(1.5)

    Args:
        specs (RobotSpecs): kinematic limits.
        params (TrajectoryParams): waypoints and generation parameters.

    Raises:
        InvalidConfigurationError: tank drive without a base width.
        TrajectoryGenerationError: boundary velocities that cannot be met.
    """

    def __init__(self, specs: RobotSpecs, params: TrajectoryParams):
        drive_model = build_drive_model(specs, params.is_tank)
        path = Path(
            params.waypoints,
            params.alpha,
            path_type=params.path_type,
            base_radius=specs.base_radius if params.is_tank else 0.0,
        )
        profile = generate_profile(path, specs, params, drive_model)
        self._assign(
            path, specs, params, drive_model,
            profile.moments, profile.path_t, profile.path_radius, profile.total_distance,
        )

    def _assign(
        self,
        path: Path,
        specs: RobotSpecs,
        params: TrajectoryParams,
        drive_model: BaseDriveModel,
        moments: Tuple[Moment, ...],
        path_t: np.ndarray,
        path_radius: np.ndarray,
        total_distance: float,
    ):
        self.path = path
        self.specs = specs
        self.params = params
        self.drive_model = drive_model
        self._moments = tuple(moments)
        self.path_t = path_t
        self.path_radius = path_radius
        self.total_distance = total_distance

        self._times = np.array([m.time for m in self._moments])
        headings = np.array([m.heading for m in self._moments])
        # unit heading vectors for interpolation across +-pi
        self._heading_vectors = np.stack([np.cos(headings), np.sin(headings)], axis=1)
        for arr in (self._times, self._heading_vectors):
            arr.setflags(write=False)

    @classmethod
    def _from_parts(cls, source: "Trajectory", path: Path, moments, path_t, path_radius) -> "Trajectory":
        traj = cls.__new__(cls)
        traj._assign(
            path,
            source.specs,
            source.params.with_waypoints(path.waypoints),
            source.drive_model,
            moments,
            path_t,
            path_radius,
            source.total_distance,
        )
        return traj

    # ---------- Query ----------
    @property
    def is_tank(self) -> bool:
        return self.drive_model.is_tank

    @property
    def initial_facing(self) -> float:
        return self.params.waypoints[0].heading

    def moments(self) -> Tuple[Moment, ...]:
        return self._moments

    def __len__(self) -> int:
        return len(self._moments)

    def get_path(self) -> Path:
        return self.path

    def total_time(self) -> float:
        return self._moments[-1].time

    def get(self, t: float) -> Moment:
        """
        Moment at time t [s].

        Between two stored moments, position, velocity, acceleration (and
        wheel values) are linearly interpolated, and the heading is taken
        from the blend of the two unit heading vectors. At or past the end
        the last moment is returned: a finished trajectory holds its final
        state.

        Raises:
            TimeOutOfRangeError: if t is before the first moment.
        """
        times = self._times
        if t >= times[-1]:
            return self._moments[-1]
        if not t >= times[0]:
            raise TimeOutOfRangeError(f"Time {t} is before the start of the trajectory ({times[0]})")

        # times[k] <= t < times[k + 1]
        k = int(np.searchsorted(times, t, side="right")) - 1
        current = self._moments[k]
        if times[k] == t:
            return current

        nxt = self._moments[k + 1]
        f = (t - times[k]) / (times[k + 1] - times[k])
        wheels = {}
        if current.is_tank:
            wheels = {
                name: lerp(getattr(current, name), getattr(nxt, name), f)
                for name in _WHEEL_FIELDS
            }
        return Moment(
            position=lerp(current.position, nxt.position, f),
            velocity=lerp(current.velocity, nxt.velocity, f),
            acceleration=lerp(current.acceleration, nxt.acceleration, f),
            heading=lerp_angle(self._heading_vectors[k], self._heading_vectors[k + 1], f),
            time=t,
            initial_facing=current.initial_facing,
            **wheels,
        )

    def is_smooth(self) -> bool:
        """
        True if no sample needs a wheel to reverse direction, i.e. the path
        never turns tighter than half the base width.
        """
        return not any(self.drive_model.reverses_wheel(r) for r in self.path_radius)

    # ---------- Transforms ----------
    def _derive(
        self,
        path: Path,
        positions: Sequence[float],
        velocities: Sequence[float],
        accelerations: Sequence[float],
        headings: Sequence[float],
        times: Sequence[float],
        path_t: np.ndarray,
        path_radius: np.ndarray,
    ) -> "Trajectory":
        path_t = np.array(path_t)
        path_radius = np.array(path_radius)
        path_t.setflags(write=False)
        path_radius.setflags(write=False)
        path.compute_length(self.params.sample_count)

        initial_facing = path.waypoints[0].heading
        wheels = self.drive_model.derive_wheels(velocities, accelerations, path_radius, times)
        moments = tuple(
            Moment(
                position=positions[i],
                velocity=velocities[i],
                acceleration=accelerations[i],
                heading=headings[i],
                time=times[i],
                initial_facing=initial_facing,
                **{key: float(values[i]) for key, values in wheels.items()},
            )
            for i in range(len(positions))
        )
        return Trajectory._from_parts(self, path, moments, path_t, path_radius)

    def mirror_left_right(self) -> "Trajectory":
        """
        Trajectory in which every left turn becomes a right turn.

        Headings are reflected about the first waypoint's heading; distance,
        speed and timing are unchanged. This is the same as reflecting across
        the Y axis only when the first heading is pi/2.
        """
        ref = self.initial_facing
        ms = self._moments
        return self._derive(
            self.path.mirror_left_right(),
            [m.position for m in ms],
            [m.velocity for m in ms],
            [m.acceleration for m in ms],
            [mirror_angle(m.heading, ref) for m in ms],
            [m.time for m in ms],
            self.path_t,
            -self.path_radius,
        )

    def mirror_front_back(self) -> "Trajectory":
        """
        Trajectory in which every forward movement becomes a backward movement.
        """
        ref = self.initial_facing + np.pi / 2
        ms = self._moments
        return self._derive(
            self.path.mirror_front_back(),
            [-m.position for m in ms],
            [-m.velocity for m in ms],
            [-m.acceleration for m in ms],
            [mirror_angle(m.heading, ref) for m in ms],
            [m.time for m in ms],
            self.path_t,
            self.path_radius,
        )

    def retrace(self) -> "Trajectory":
        """
        Trajectory that drives back along this one, from its end to its start.

        Moments are taken in reverse order. Distance and velocity change sign
        since the robot backs up; acceleration flips twice (direction of
        travel and direction of time) and keeps its sign. A left turn stays
        a left turn, so the path radii keep their sign.
        """
        last = self._moments[-1]
        ms = self._moments[::-1]
        return self._derive(
            self.path.retrace(),
            [-(last.position - m.position) for m in ms],
            [-m.velocity for m in ms],
            [m.acceleration for m in ms],
            [normalize_angle(m.heading + np.pi) for m in ms],
            [last.time - m.time for m in ms],
            self.path_t[::-1],
            self.path_radius[::-1],
        )

    def wheel_velocities(self) -> Optional[np.ndarray]:
        """Array (N, 2) of [left, right] wheel velocities, None for non-tank trajectories."""
        if not self.is_tank:
            return None
        return np.array([[m.left_velocity, m.right_velocity] for m in self._moments])
