# trajectories/drive_models.py

from abc import ABC, abstractmethod
from typing import Dict

import numpy as np

from .exceptions import InvalidConfigurationError
from .specs import RobotSpecs


class BaseDriveModel(ABC):
    """
    Abstract base class for drivetrain kinematics used by the profiler.

    A drive model answers two questions:
        - how fast may the robot's center go on a path of a given radius?
        - given the center velocity/acceleration and the path radius, what do
          the individual wheels do?

    Args:
        specs (RobotSpecs): kinematic limits of the robot.
    """
    is_tank: bool = False

    def __init__(self, specs: RobotSpecs):
        self.specs = specs

    @abstractmethod
    def velocity_cap(self, radius: float) -> float:
        """
        Maximum center velocity [m/s] on a path of signed radius `radius` [m].
        """
        pass

    def derive_wheels(
        self,
        velocity: np.ndarray,
        acceleration: np.ndarray,
        radius: np.ndarray,
        time: np.ndarray,
    ) -> Dict[str, np.ndarray]:
        """
        Per-wheel kinematics for every sample, keyed by Moment field name.
        Drivetrains without independent sides return an empty dict.
        """
        return {}

    def reverses_wheel(self, radius: float) -> bool:
        """True if following `radius` requires a wheel to spin backwards."""
        return False


class BasicDriveModel(BaseDriveModel):
    """Holonomic-like robot: turning costs no speed."""

    def velocity_cap(self, radius: float) -> float:
        return self.specs.max_velocity


class TankDriveModel(BaseDriveModel):
    """
    Differential (tank / skid-steer) drive.

    With l, r the wheel velocities, b the base width, V the center velocity,
    w the angular velocity and R the path radius:

        (r - l) / b = w,    (l + r) / 2 = V,    w = V / R

    so l = V (1 - b / 2R) and r = V (1 + b / 2R). Requiring the outer wheel
    to stay under Vmax gives the cap

        V = Vmax / (1 + b / (2 |R|))
    """
    is_tank = True

    def __init__(self, specs: RobotSpecs):
        if specs.base_width is None:
            raise InvalidConfigurationError("A tank drive trajectory needs a base width")
        super().__init__(specs)
        self.base_width = specs.base_width

    def _half_base_over_radius(self, radius):
        # b / 2R, 0 on straight sections (R = inf)
        return self.base_width / (2.0 * np.asarray(radius, dtype=float))

    def velocity_cap(self, radius: float) -> float:
        k = abs(float(self._half_base_over_radius(radius)))
        return self.specs.max_velocity / (1.0 + k)

    def wheel_factors(self, radius):
        """Multipliers (left, right) turning center kinematics into wheel kinematics."""
        k = self._half_base_over_radius(radius)
        return 1.0 - k, 1.0 + k

    def derive_wheels(self, velocity, acceleration, radius, time):
        velocity = np.asarray(velocity, dtype=float)
        acceleration = np.asarray(acceleration, dtype=float)
        time = np.asarray(time, dtype=float)
        left_k, right_k = self.wheel_factors(radius)

        left_v = velocity * left_k
        right_v = velocity * right_k

        # trapezoidal integration of the wheel speeds
        dt = np.diff(time)
        left_pos = np.concatenate([[0.0], np.cumsum(0.5 * (left_v[1:] + left_v[:-1]) * dt)])
        right_pos = np.concatenate([[0.0], np.cumsum(0.5 * (right_v[1:] + right_v[:-1]) * dt)])

        return {
            "left_velocity": left_v,
            "right_velocity": right_v,
            "left_acceleration": acceleration * left_k,
            "right_acceleration": acceleration * right_k,
            "left_position": left_pos,
            "right_position": right_pos,
        }

    def reverses_wheel(self, radius: float) -> bool:
        return abs(float(self._half_base_over_radius(radius))) > 1.0


def build_drive_model(specs: RobotSpecs, is_tank: bool) -> BaseDriveModel:
    if is_tank:
        return TankDriveModel(specs)
    return BasicDriveModel(specs)
