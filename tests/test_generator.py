import numpy as np
import pytest

from trajectories import (
    InvalidConfigurationError,
    RobotSpecs,
    Trajectory,
    TrajectoryGenerationError,
    TrajectoryParams,
    Waypoint,
)

TOL = 1e-9


def straight_waypoints(v_start=None, v_end=None, length=100.0):
    return (
        Waypoint(0.0, 0.0, np.pi / 2, velocity=v_start),
        Waypoint(0.0, length, np.pi / 2, velocity=v_end),
    )


@pytest.fixture(scope="module")
def tank_straight():
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5, base_width=2.0)
    params = TrajectoryParams(straight_waypoints(), alpha=40.0, sample_count=1000, is_tank=True)
    return Trajectory(specs, params)


@pytest.fixture(scope="module")
def tank_turn():
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5, base_width=2.0)
    wps = (Waypoint(0.0, 0.0, np.pi / 2), Waypoint(-10.0, 10.0, np.pi))
    params = TrajectoryParams(wps, alpha=15.0, sample_count=500, is_tank=True)
    return Trajectory(specs, params)


def test_tank_straight_respects_limits(tank_straight):
    for m in tank_straight.moments():
        assert -5.0 - TOL <= m.velocity <= 5.0 + TOL
        assert -3.5 - TOL <= m.acceleration <= 3.5 + TOL
        assert m.is_tank


def test_tank_straight_total_time(tank_straight):
    # 1.43 s up to speed, 18.57 s cruising, 1.43 s to stop
    assert tank_straight.total_time() == pytest.approx(21.43, rel=1e-2)
    assert tank_straight.total_distance == pytest.approx(100.0)
    assert tank_straight.moments()[-1].position == pytest.approx(100.0)


def test_starts_and_ends_at_rest(tank_straight):
    first, last = tank_straight.moments()[0], tank_straight.moments()[-1]
    assert first.velocity == 0.0
    assert first.time == 0.0
    assert last.velocity == 0.0


def test_times_strictly_increase(tank_straight):
    times = np.array([m.time for m in tank_straight.moments()])
    assert np.all(np.diff(times) > 0.0)


def test_tank_turn_wheels_respect_max_velocity(tank_turn):
    turning = False
    for m in tank_turn.moments():
        assert abs(m.left_velocity) <= 5.0 + TOL
        assert abs(m.right_velocity) <= 5.0 + TOL
        assert m.velocity == pytest.approx(0.5 * (m.left_velocity + m.right_velocity))
        if m.right_velocity > m.left_velocity + TOL:
            turning = True
    # a left turn drives the right wheel faster
    assert turning


def test_tank_turn_is_slower_than_basic():
    wps = (Waypoint(0.0, 0.0, np.pi / 2), Waypoint(-10.0, 10.0, np.pi))
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5, base_width=2.0)
    tank = Trajectory(specs, TrajectoryParams(wps, alpha=15.0, sample_count=300, is_tank=True))
    basic = Trajectory(specs, TrajectoryParams(wps, alpha=15.0, sample_count=300))

    assert not basic.is_tank
    assert basic.moments()[0].left_velocity is None
    assert tank.total_time() > basic.total_time()


def test_wheel_positions_start_at_zero(tank_turn):
    first, last = tank_turn.moments()[0], tank_turn.moments()[-1]
    assert first.left_position == 0.0
    assert first.right_position == 0.0
    # the outer (right) wheel covers more ground
    assert last.right_position > last.left_position


def test_basic_drive_respects_limits():
    specs = RobotSpecs(max_velocity=3.0, max_acceleration=2.0)
    wps = (Waypoint(0.0, 0.0, 0.0), Waypoint(10.0, 10.0, np.pi / 2), Waypoint(20.0, 0.0, -np.pi / 2))
    traj = Trajectory(specs, TrajectoryParams(wps, alpha=12.0, sample_count=400))
    for m in traj.moments():
        assert abs(m.velocity) <= 3.0 + TOL
        assert abs(m.acceleration) <= 2.0 + TOL


def test_explicit_boundary_velocities():
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5, base_width=2.0)
    params = TrajectoryParams(
        straight_waypoints(v_start=1.23, v_end=3.45),
        alpha=40.0, sample_count=1000, is_tank=True,
    )
    traj = Trajectory(specs, params)

    assert traj.get(0.0).velocity == 1.23
    assert traj.get(traj.total_time()).velocity == 3.45


@pytest.mark.parametrize("v_start, v_end, length", [
    (6.0, None, 100.0),  # above max velocity
    (None, 5.0, 1.0),    # too short to speed up
    (5.0, None, 1.0),    # too short to slow down
])
def test_unreachable_boundary_velocity(v_start, v_end, length):
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5)
    params = TrajectoryParams(straight_waypoints(v_start, v_end, length), alpha=length / 2, sample_count=200)
    with pytest.raises(TrajectoryGenerationError):
        Trajectory(specs, params)


def test_rest_to_rest_in_one_step():
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5)
    params = TrajectoryParams(straight_waypoints(), alpha=40.0, sample_count=2)
    with pytest.raises(TrajectoryGenerationError):
        Trajectory(specs, params)


def test_zero_length_path():
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5)
    wps = (Waypoint(1.0, 1.0, 0.0), Waypoint(1.0, 1.0, 0.0))
    with pytest.raises(TrajectoryGenerationError):
        Trajectory(specs, TrajectoryParams(wps, alpha=0.0, sample_count=10))


def test_tank_without_base_width():
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5)
    params = TrajectoryParams(straight_waypoints(), alpha=40.0, sample_count=10, is_tank=True)
    with pytest.raises(InvalidConfigurationError):
        Trajectory(specs, params)


@pytest.mark.parametrize("end_heading, alpha, expected", [
    (np.pi / 4, 50.0, True),
    (3 * np.pi / 4, 100.0, False),
])
def test_smoothness(end_heading, alpha, expected):
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5, base_width=25.716)
    wps = (Waypoint(0.0, 0.0, np.pi / 2), Waypoint(50.0, 50.0, end_heading))
    traj = Trajectory(specs, TrajectoryParams(wps, alpha=alpha, sample_count=500, is_tank=True))
    assert traj.is_smooth() is expected


def test_basic_drive_is_always_smooth():
    specs = RobotSpecs(max_velocity=5.0, max_acceleration=3.5, base_width=25.716)
    wps = (Waypoint(0.0, 0.0, np.pi / 2), Waypoint(50.0, 50.0, 3 * np.pi / 4))
    traj = Trajectory(specs, TrajectoryParams(wps, alpha=100.0, sample_count=200))
    assert traj.is_smooth()
    assert traj.wheel_velocities() is None


if __name__ == "__main__":
    pytest.main([__file__])
