# ------------------------------------------------------------------------ #
#      o-o      o                o                                         #
#     /         |                |                                         #
#    O     o  o O-o  o-o o-o     |  oo o--o o-o o-o                        #
#     \    |  | |  | |-' |   \   o | | |  |  /   /                         #
#      o-o o--O o-o  o-o o    o-o  o-o-o--O o-o o-o                        #
#             |                           |                                #
#          o--o                        o--o                                #
#                        o--o      o         o                             #
#                        |   |     |         |  o                          #
#                        O-Oo  o-o O-o  o-o -o-    o-o o-o                 #
#                        |  \  | | |  | | |  |  | |     \                  #
#                        o   o o-o o-o  o-o  o  |  o-o o-o                 #
#                                                                          #
#    Jemison High School - Huntsville Alabama                              #
# ------------------------------------------------------------------------ #

import math

import pytest
from wpimath.geometry import Pose2d, Rotation2d
from wpimath.kinematics import ChassisSpeeds

from lib_glitch.constants import RobotModes
from lib_glitch.subsystems.gyro.gyro import Gyro
from lib_glitch.subsystems.swervedrive.constants import DriveConfig, SwerveModuleConfigParams
from lib_glitch.subsystems.swervedrive.drivesubsystem import DriveSubsystem, sim_motors, talonfx_motors
from lib_glitch.subsystems.swervedrive.kinematics import MODULE_NAMES, SwerveGeometry

ROBOT = Pose2d(2.0, 0.0, Rotation2d())


class FixedGyro(Gyro):
    gyro_type = "fixed"

    def reset(self) -> None:
        pass

    @property
    def yaw(self) -> float:
        return 0.0


def _tick(drive, clock, speeds=None):
    """
    One robot loop: command, scheduler periodic, then simulation periodic
    """
    if speeds is not None:
        drive.set_chassis_speeds(speeds)

    clock.advance()
    drive.periodic()
    drive.simulationPeriodic()


def _assert_pose(actual: Pose2d, expected: Pose2d, abs_tol: float = 1e-6):
    assert actual.x == pytest.approx(expected.x, abs=abs_tol)
    assert actual.y == pytest.approx(expected.y, abs=abs_tol)
    assert math.remainder(actual.rotation().radians() - expected.rotation().radians(), math.tau) == \
           pytest.approx(0.0, abs=abs_tol)


def test_straight_ahead_scenario(make_drive):
    """
    Square chassis with every module at 0 rad: driving forward at 2 m/s gives four
    identical module states and the same chassis speed back
    """
    drive = make_drive()
    drive.set_chassis_speeds(ChassisSpeeds(2.0, 0.0, 0.0))

    for state in drive.get_module_states():
        assert state.speed == pytest.approx(2.0)
        assert state.angle.radians() == pytest.approx(0.0, abs=1e-9)

    speeds = drive.get_chassis_speeds()
    assert (speeds.vx, speeds.vy, speeds.omega) == pytest.approx((2.0, 0.0, 0.0), abs=1e-9)


def test_module_order_matches_geometry(make_drive):
    drive = make_drive()
    drive.set_chassis_speeds(ChassisSpeeds(0.0, 0.0, 1.0))

    headings = [state.angle.degrees() for state in drive.get_target_module_states()]
    assert headings == pytest.approx([135.0, 45.0, -135.0, -45.0])

    for name, module in zip(MODULE_NAMES, drive.modules):
        assert module.name == name


def test_desaturation(make_drive, drive_config):
    drive = make_drive()
    drive.set_chassis_speeds(ChassisSpeeds(6.0, 3.0, 8.0))

    targets = drive.get_target_module_states()
    assert max(abs(state.speed) for state in targets) == pytest.approx(drive_config.max_speed)

    requested = drive.kinematics.to_module_states(ChassisSpeeds(6.0, 3.0, 8.0))
    ratio = targets[0].speed / requested[0].speed
    for target, request in zip(targets, requested):
        assert target.speed == pytest.approx(request.speed * ratio)


def test_sim_heading_is_staged_then_applied(make_drive):
    drive = make_drive()

    drive.set_chassis_speeds(ChassisSpeeds(0.0, 0.0, 1.0))
    assert drive.heading.radians() == pytest.approx(0.0)
    assert drive.gyro.staged == pytest.approx(0.02)

    drive.set_chassis_speeds(ChassisSpeeds(0.0, 0.0, 1.0))
    assert drive.heading.radians() == pytest.approx(0.0)

    drive.apply_sim_heading()
    assert drive.heading.radians() == pytest.approx(0.04)


def test_heading_zeroed_after_warmup(make_drive, clock):
    drive = make_drive(warmup_ticks=3)
    spin = ChassisSpeeds(0.0, 0.0, 1.0)

    _tick(drive, clock, spin)
    _tick(drive, clock, spin)
    assert drive.heading.radians() == pytest.approx(0.04)
    before = drive.get_pose()

    drive.set_chassis_speeds(spin)
    drive.simulationPeriodic()
    clock.advance()
    drive.periodic()

    # The gyro reads zero but the robot has not turned on the field
    assert drive.tick_count == 3
    assert drive.heading.radians() == pytest.approx(0.0)
    _assert_pose(drive.get_pose(), before)

    # Only once
    _tick(drive, clock, spin)
    assert drive.heading.radians() == pytest.approx(0.02)


def test_warmup_keeps_initial_heading(make_drive, clock):
    start = Pose2d(1.0, 2.0, Rotation2d(math.pi))
    drive = make_drive(initial_pose=start, warmup_ticks=3)

    for _ in range(5):
        _tick(drive, clock)

    assert drive.tick_count == 5
    _assert_pose(drive.get_pose(), start)


def test_zero_heading_keeps_pose(make_drive, clock):
    drive = make_drive()
    for _ in range(10):
        _tick(drive, clock, ChassisSpeeds(1.0, 0.0, 0.5))

    before = drive.get_pose()
    assert before.rotation().radians() != pytest.approx(0.0)

    drive.zero_heading()
    _assert_pose(drive.get_pose(), before)
    assert drive.heading.radians() == pytest.approx(0.0)

    # Turning after the zero carries on from the field heading
    drive.set_chassis_speeds(ChassisSpeeds(0.0, 0.0, 1.0))
    drive.simulationPeriodic()
    clock.advance()
    drive.periodic()

    assert drive.get_pose().rotation().radians() == pytest.approx(before.rotation().radians() + 0.02, abs=1e-6)



def test_odometry_follows_commands(make_drive, clock):
    drive = make_drive()
    for _ in range(50):
        _tick(drive, clock, ChassisSpeeds(1.0, 0.0, 0.0))

    assert drive.get_pose().x == pytest.approx(1.0, abs=1e-6)
    assert drive.get_pose().y == pytest.approx(0.0, abs=1e-6)


def test_field_relative_drive(make_drive):
    drive = make_drive()
    drive.reset_pose(Pose2d(0.0, 0.0, Rotation2d(math.pi / 2)))

    drive.drive(1.0, 0.0, 0.0, field_relative=True)

    for state in drive.get_target_module_states():
        assert state.speed == pytest.approx(1.0)
        assert state.angle.degrees() == pytest.approx(-90.0)


def test_stop_and_presets(make_drive):
    drive = make_drive()
    drive.set_chassis_speeds(ChassisSpeeds(1.0, 1.0, 0.0))

    drive.stop()
    assert all(state.speed == 0.0 for state in drive.get_target_module_states())

    drive.set_x()
    for state, location in zip(drive.get_target_module_states(), drive.config.geometry.locations()):
        assert state.speed == pytest.approx(0.0, abs=1e-9)
        assert math.sin(state.angle.radians() - math.atan2(location.y, location.x)) == pytest.approx(0.0, abs=1e-9)

    drive.set_o()
    for state, location in zip(drive.get_target_module_states(), drive.config.geometry.locations()):
        assert math.cos(state.angle.radians() - math.atan2(location.y, location.x)) == pytest.approx(0.0, abs=1e-9)


def test_reset_encoders_keeps_pose(make_drive, clock):
    drive = make_drive()
    for _ in range(20):
        _tick(drive, clock, ChassisSpeeds(1.0, 0.0, 0.0))

    before = drive.get_pose()
    drive.reset_encoders()

    assert all(position.distance == 0.0 for position in drive.get_module_positions())
    _tick(drive, clock)
    _assert_pose(drive.get_pose(), before)


def test_non_finite_request_is_ignored(make_drive):
    drive = make_drive()
    drive.set_chassis_speeds(ChassisSpeeds(1.0, 0.0, 0.0))

    drive.set_chassis_speeds(ChassisSpeeds(math.nan, 0.0, 0.0))

    assert all(state.speed == pytest.approx(1.0) for state in drive.get_target_module_states())


def test_real_mode_reads_motors(make_drive):
    drive = make_drive(mode=RobotModes.REAL)
    assert drive.mode == RobotModes.REAL

    drive.set_chassis_speeds(ChassisSpeeds(1.5, 0.0, 1.0))
    drive.simulationPeriodic()

    # No simulated heading integration on a real robot
    assert drive.heading.radians() == pytest.approx(0.0)

    for state, target in zip(drive.get_module_states(), drive.get_target_module_states()):
        assert abs(state.speed) <= abs(target.speed) + 1e-9


def test_vision_fusion(make_drive, clock, vision, fake_result, fake_target, tag_view):
    drive = make_drive(vision=vision)
    for _ in range(5):
        _tick(drive, clock)

    vision.camera("front").frames = [fake_result(clock.now - 0.02, [fake_target(1, tag_view(ROBOT, 1))])]
    _tick(drive, clock)

    _assert_pose(drive.get_pose(), ROBOT)


def test_vision_follows_robot_pose(make_drive, clock, vision):
    drive = make_drive(vision=vision)

    for _ in range(5):
        _tick(drive, clock, ChassisSpeeds(1.0, 0.0, 0.0))

    assert len(vision.periodic_poses) == 5
    assert vision.periodic_poses[-1].x > vision.periodic_poses[0].x > 0.0
    _assert_pose(vision.periodic_poses[-1], drive.get_pose())


def test_seed_pose_from_vision(make_drive, vision, fake_result, fake_target, tag_view):
    assert not make_drive().seed_pose_from_vision()

    drive = make_drive(vision=vision)
    assert not drive.seed_pose_from_vision()

    vision.camera("rear").frames = [fake_result(9.0, [fake_target(2, tag_view(ROBOT, 2))])]
    assert drive.seed_pose_from_vision()
    _assert_pose(drive.get_pose(), ROBOT)


def test_simulation_needs_sim_gyro(make_drive):
    with pytest.raises(ValueError):
        make_drive(gyro=FixedGyro())

    assert make_drive(mode=RobotModes.REAL, gyro=FixedGyro()).heading.radians() == pytest.approx(0.0)


def test_no_duplicate_can_bus_ids(square_geometry):
    modules = (SwerveModuleConfigParams("front-left", 1, 2),
               SwerveModuleConfigParams("front-right", 3, 4),
               SwerveModuleConfigParams("back-left", 5, 6),
               SwerveModuleConfigParams("back-right", 7, 1))

    with pytest.raises(ValueError):
        DriveConfig(square_geometry, modules)

    with pytest.raises(ValueError):
        DriveConfig(square_geometry, modules[:3])


def test_default_configuration_is_valid():
    config = DriveConfig.default()

    ids = [can_id for module in config.modules for can_id in (module.drive_motor_id, module.steer_motor_id)]
    assert len(ids) == len(set(ids)), f"Duplicate IDs found: All: {ids}, Unique: {set(ids)}"
    assert [module.name for module in config.modules] == list(MODULE_NAMES)
    assert config.max_speed > 0.0

    encoders = [module.steer_encoder_id for module in config.modules]
    assert None not in encoders
    assert len(encoders) == len(set(encoders))


def test_real_module_needs_steer_encoder(square_geometry):
    with pytest.raises(ValueError):
        talonfx_motors(SwerveModuleConfigParams("front-left", 1, 2))

    modules = tuple(SwerveModuleConfigParams(name, 2 * index + 1, 2 * index + 2, steer_encoder_id=30)
                    for index, name in enumerate(MODULE_NAMES))
    with pytest.raises(ValueError):
        DriveConfig(square_geometry, modules)


def test_custom_geometry(telemetry, clock):
    geometry = SwerveGeometry.rectangular(0.8, 0.5)
    config = DriveConfig(geometry, tuple(SwerveModuleConfigParams(name, 10 + index, 20 + index)
                                         for index, name in enumerate(MODULE_NAMES)))

    drive = DriveSubsystem(config, RobotModes.SIMULATION, motor_factory=sim_motors, telemetry=telemetry,
                           clock=clock)

    assert [module.location for module in drive.modules] == list(geometry.locations())
