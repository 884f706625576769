# trajectories/generator.py

import logging
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from geometry import Path
from geometry.utils import curvature, radius_from_curvature
from .base import Moment
from .drive_models import BaseDriveModel
from .exceptions import TrajectoryGenerationError
from .specs import RobotSpecs, TrajectoryParams

logger = logging.getLogger(__name__)

# relative slack when comparing requested boundary velocities with reachable ones
_TOL = 1e-9


@dataclass(frozen=True)
class Profile:
    """
    Output of the velocity profiler.

    Attributes:
        moments (Tuple[Moment, ...]): time-ordered moments, one per sample.
        path_t (np.ndarray): path parameter of each sample, shape (N,).
        path_radius (np.ndarray): signed path radius at each sample [m], shape (N,).
        total_distance (float): path length [m].
    """
    moments: Tuple[Moment, ...]
    path_t: np.ndarray
    path_radius: np.ndarray
    total_distance: float


def sample_path(path: Path, sample_count: int):
    """
    Sample the path at `sample_count` points evenly spaced in distance.

    Returns:
        path_t, headings, radii (np.ndarray): each of shape (N,).
    """
    s = np.linspace(0.0, 1.0, sample_count)
    path_t = np.array([path.s2t(si) for si in s])

    d = path.sample(path_t, 1)
    dd = path.sample(path_t, 2)
    headings = np.arctan2(d[:, 1], d[:, 0])
    radii = np.array([
        radius_from_curvature(curvature(dx, ddx, dy, ddy))
        for (dx, dy), (ddx, ddy) in zip(d, dd)
    ])
    return path_t, headings, radii


def _forward_pass(caps, v_start, max_a, step):
    """
    Accelerate as hard as allowed from the start, never exceeding the caps.

    Returns velocities, accelerations (of the step starting at each sample)
    and the time taken by each step where it is already known.
    """
    n = len(caps)
    vel = [0.0] * n
    acc = [0.0] * n
    dt = [math.nan] * (n - 1)
    vel[0] = v_start

    for i in range(1, n):
        cap = caps[i]
        prev = vel[i - 1]
        if prev < cap:
            # v^2 = v0^2 + 2 a d
            reachable = math.sqrt(prev * prev + 2.0 * max_a * step)
            if reachable > cap:
                acc[i - 1] = (cap * cap - prev * prev) / (2.0 * step)
                vel[i] = cap
            else:
                acc[i - 1] = max_a
                vel[i] = reachable
            dt[i - 1] = (vel[i] - prev) / acc[i - 1]
        else:
            # already at (or above) the cap; the backward pass takes care of slowing down
            vel[i] = cap
            acc[i - 1] = 0.0
    return vel, acc, dt


def _backward_pass(vel, acc, dt, v_end, max_a, step):
    """
    Walk from the end and make sure every deceleration is feasible.
    Modifies vel, acc and dt in place.
    """
    n = len(vel)
    forward_vel = list(vel)
    vel[-1] = v_end
    acc[-1] = 0.0

    for i in range(n - 2, -1, -1):
        if vel[i] > vel[i + 1]:
            reachable = math.sqrt(vel[i + 1] * vel[i + 1] + 2.0 * max_a * step)
            if reachable > vel[i]:
                acc[i] = -(vel[i] * vel[i] - vel[i + 1] * vel[i + 1]) / (2.0 * step)
            else:
                vel[i] = reachable
                acc[i] = -max_a
            dt[i] = (vel[i + 1] - vel[i]) / acc[i]
        elif vel[i + 1] != forward_vel[i + 1]:
            # the next sample was slowed down, so the forward step into it is stale
            acc[i] = (vel[i + 1] * vel[i + 1] - vel[i] * vel[i]) / (2.0 * step)
            dt[i] = (vel[i + 1] - vel[i]) / acc[i] if acc[i] != 0.0 else math.nan


def _integrate_time(vel, dt, step):
    n = len(vel)
    times = [0.0] * n
    for i in range(1, n):
        if not math.isnan(dt[i - 1]):
            times[i] = times[i - 1] + dt[i - 1]
        else:
            # no acceleration over this step, so the velocity is constant
            if vel[i - 1] <= 0.0:
                raise TrajectoryGenerationError(
                    f"Robot is at rest between samples {i - 1} and {i}; "
                    f"the trajectory cannot start and stop within one sample interval"
                )
            times[i] = times[i - 1] + step / vel[i - 1]
    return times


def generate_profile(
    path: Path,
    specs: RobotSpecs,
    params: TrajectoryParams,
    drive_model: BaseDriveModel,
) -> Profile:
    """
    Time-parameterize `path` under the robot's limits.

    The algorithm:
        1. sample the path at N points evenly spaced in distance,
        2. cap the velocity at each point (turning penalty of the drive model),
        3. forward pass: accelerate at max acceleration up to the caps,
        4. backward pass: decelerate early enough to meet every later velocity,
        5. integrate time, reusing step durations computed in the passes.

    The result is a greedy profile, not a globally time-optimal one.

    Raises:
        TrajectoryGenerationError: if the boundary velocities cannot be met.
    """
    n = params.sample_count
    max_a = specs.max_acceleration

    total = path.compute_length(n)
    if not total > 0.0:
        raise TrajectoryGenerationError("Path has zero length")
    step = total / (n - 1)

    path_t, headings, radii = sample_path(path, n)
    caps = [drive_model.velocity_cap(r) for r in radii]

    v_start = params.initial_velocity
    v_end = params.final_velocity
    if v_start > caps[0] * (1.0 + _TOL):
        raise TrajectoryGenerationError(
            f"Initial velocity {v_start} exceeds the maximum of {caps[0]} at the start of the path"
        )

    vel, acc, dt = _forward_pass(caps, v_start, max_a, step)

    if v_end > vel[-1] * (1.0 + _TOL):
        raise TrajectoryGenerationError(
            f"Final velocity {v_end} cannot be reached; at most {vel[-1]} is possible"
        )

    _backward_pass(vel, acc, dt, v_end, max_a, step)

    if vel[0] < v_start * (1.0 - _TOL):
        raise TrajectoryGenerationError(
            f"Initial velocity {v_start} is too high to slow down in time; at most {vel[0]} is possible"
        )

    times = _integrate_time(vel, dt, step)
    positions = [i * step for i in range(n)]
    initial_facing = params.waypoints[0].heading

    wheels = drive_model.derive_wheels(vel, acc, radii, times)
    moments = tuple(
        Moment(
            position=positions[i],
            velocity=vel[i],
            acceleration=acc[i],
            heading=float(headings[i]),
            time=times[i],
            initial_facing=initial_facing,
            **{key: float(values[i]) for key, values in wheels.items()},
        )
        for i in range(n)
    )

    path_t.setflags(write=False)
    radii.setflags(write=False)
    logger.debug(
        "Generated %d moments over %.3f m in %.3f s (tank=%s)",
        n, total, times[-1], drive_model.is_tank,
    )
    return Profile(moments=moments, path_t=path_t, path_radius=radii, total_distance=total)
