# trajectories/base.py
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Optional
import numpy as np


@dataclass(frozen=True)
class Moment:
    """
    State of the robot at one instant of a trajectory.

    Wheel fields are only set for tank drive trajectories.
    """
    position: float        # signed distance travelled since the start [m]
    velocity: float        # [m/s]
    acceleration: float    # [m/s²]
    heading: float         # [rad]
    time: float            # [s]
    initial_facing: float  # heading of the first waypoint [rad]

    left_velocity: Optional[float] = None
    right_velocity: Optional[float] = None
    left_acceleration: Optional[float] = None
    right_acceleration: Optional[float] = None
    left_position: Optional[float] = None
    right_position: Optional[float] = None

    @property
    def is_tank(self) -> bool:
        return self.left_velocity is not None

    @property
    def facing_relative(self) -> float:
        """Heading relative to the initial facing [rad]."""
        return self.heading - self.initial_facing

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class BaseTrajectory(ABC):
    """Abstract base class for time-indexed trajectories."""

    @abstractmethod
    def get(self, t: float) -> Moment:
        """Return the moment at time t."""
        pass

    @abstractmethod
    def total_time(self) -> float:
        pass

    def sample_array(self, time_array: np.ndarray) -> np.ndarray:
        """
        Returns a numpy array of shape (N, 6):
        [time, position, velocity, acceleration, heading, initial_facing]
        """
        return np.array([
            [
                m.time,
                m.position,
                m.velocity,
                m.acceleration,
                m.heading,
                m.initial_facing,
            ]
            for m in (self.get(float(t)) for t in time_array)
        ])
