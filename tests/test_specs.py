import math

import pytest

from trajectories import (
    BasicDriveModel,
    InvalidConfigurationError,
    PathType,
    RobotSpecs,
    TrajectoryParams,
    Waypoint,
    build_drive_model,
)

WAYPOINTS = (Waypoint(0.0, 0.0, math.pi / 2), Waypoint(0.0, 10.0, math.pi / 2))


def test_robot_specs_valid():
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5, base_width=2.0)
    assert specs.base_radius == 1.0
    assert RobotSpecs(1.0, 1.0).base_radius == 0.0


@pytest.mark.parametrize("kwargs", [
    dict(max_velocity=float("nan"), max_acceleration=1.0),
    dict(max_velocity=1.0, max_acceleration=float("nan")),
    dict(max_velocity=None, max_acceleration=1.0),
    dict(max_velocity=0.0, max_acceleration=1.0),
    dict(max_velocity=1.0, max_acceleration=-2.0),
    dict(max_velocity=1.0, max_acceleration=1.0, base_width=0.0),
    dict(max_velocity=1.0, max_acceleration=1.0, base_width=float("inf")),
])
def test_robot_specs_invalid(kwargs):
    with pytest.raises(InvalidConfigurationError):
        RobotSpecs(**kwargs)


def test_nan_base_width_means_unset():
    specs = RobotSpecs(max_velocity=1.0, max_acceleration=1.0, base_width=float("nan"))
    assert specs.base_width is None
    assert specs.base_radius == 0.0
    assert isinstance(build_drive_model(specs, is_tank=False), BasicDriveModel)
    with pytest.raises(InvalidConfigurationError):
        build_drive_model(specs, is_tank=True)


def test_robot_specs_from_dict():
    specs = RobotSpecs.from_dict({"max_velocity": 3, "max_acceleration": 2})
    assert specs.max_velocity == 3.0
    assert specs.base_width is None
    assert RobotSpecs.from_dict(specs.to_dict()) == specs

    with pytest.raises(InvalidConfigurationError):
        RobotSpecs.from_dict({"max_velocity": 3})


def test_params_defaults():
    params = TrajectoryParams(list(WAYPOINTS), alpha=10.0)
    assert isinstance(params.waypoints, tuple)
    assert params.sample_count == 1000
    assert params.is_tank is False
    assert params.path_type is PathType.QUINTIC_HERMITE
    assert params.initial_velocity == 0.0
    assert params.final_velocity == 0.0


def test_params_integral_sample_count():
    assert TrajectoryParams(WAYPOINTS, alpha=10.0, sample_count=10.0).sample_count == 10
    assert TrajectoryParams(WAYPOINTS, alpha=10.0, sample_count="25").sample_count == 25


def test_params_boundary_velocities():
    wps = (Waypoint(0.0, 0.0, 0.0, velocity=1.23), Waypoint(10.0, 0.0, 0.0, velocity=3.45))
    params = TrajectoryParams(wps, alpha=10.0)
    assert params.initial_velocity == 1.23
    assert params.final_velocity == 3.45


@pytest.mark.parametrize("kwargs", [
    dict(waypoints=WAYPOINTS[:1], alpha=10.0),
    dict(waypoints=None, alpha=10.0),
    dict(waypoints=WAYPOINTS, alpha=float("nan")),
    dict(waypoints=WAYPOINTS, alpha=10.0, sample_count=1),
    dict(waypoints=WAYPOINTS, alpha=10.0, sample_count=2.7),
    dict(waypoints=WAYPOINTS, alpha=10.0, sample_count="many"),
    dict(waypoints=WAYPOINTS, alpha=10.0, sample_count=None),
    dict(waypoints=WAYPOINTS, alpha=10.0, sample_count=float("nan")),
    dict(waypoints=WAYPOINTS, alpha=10.0, path_type="bezier"),
    dict(waypoints=(Waypoint(0.0, 0.0, 0.0, velocity=-1.0), WAYPOINTS[1]), alpha=10.0),
])
def test_params_invalid(kwargs):
    with pytest.raises(InvalidConfigurationError):
        TrajectoryParams(**kwargs)


def test_params_from_dict():
    params = TrajectoryParams.from_dict({
        "alpha": 20,
        "sample_count": 50,
        "is_tank": True,
        "path_type": "cubic_hermite",
        "waypoints": [[0, 0, 0], {"x": 5, "y": 0, "heading": 0, "velocity": 1.5}],
    })
    assert params.alpha == 20.0
    assert params.sample_count == 50
    assert params.is_tank is True
    assert params.path_type is PathType.CUBIC_HERMITE
    assert params.final_velocity == 1.5


@pytest.mark.parametrize("data", [
    {"alpha": 10.0},
    {"alpha": 10.0, "waypoints": [[0, 0], [1, 1, 0]]},
    {"alpha": 10.0, "waypoints": [{"x": 0, "y": 0}, [1, 1, 0]]},
])
def test_params_from_dict_invalid(data):
    with pytest.raises(InvalidConfigurationError):
        TrajectoryParams.from_dict(data)


if __name__ == "__main__":
    pytest.main([__file__])
