"""Errors raised while building or querying trajectories."""


class PathfinderError(Exception):
    """Base class for trajectory errors."""


class InvalidConfigurationError(PathfinderError, ValueError):
    """Robot specs or generation parameters are missing, NaN or out of range."""


class TrajectoryGenerationError(PathfinderError):
    """The requested constraints cannot be met (e.g. unreachable boundary velocity)."""


class TimeOutOfRangeError(PathfinderError, ValueError):
    """A trajectory was queried before its start time."""
