# trajectories/__init__.py

from geometry import PathType, Waypoint
from .base import BaseTrajectory, Moment
from .exceptions import (
    PathfinderError,
    InvalidConfigurationError,
    TrajectoryGenerationError,
    TimeOutOfRangeError,
)
from .specs import RobotSpecs, TrajectoryParams
from .drive_models import BaseDriveModel, BasicDriveModel, TankDriveModel, build_drive_model
from .generator import Profile, generate_profile
from .trajectory import Trajectory

__all__ = [
    "PathType",
    "Waypoint",
    "BaseTrajectory",
    "Moment",
    "PathfinderError",
    "InvalidConfigurationError",
    "TrajectoryGenerationError",
    "TimeOutOfRangeError",
    "RobotSpecs",
    "TrajectoryParams",
    "BaseDriveModel",
    "BasicDriveModel",
    "TankDriveModel",
    "build_drive_model",
    "Profile",
    "generate_profile",
    "Trajectory",
]
