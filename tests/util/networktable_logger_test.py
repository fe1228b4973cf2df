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

import pytest
from wpimath.geometry import Pose2d, Rotation2d
from wpimath.kinematics import ChassisSpeeds, SwerveModuleState

from lib_glitch.util.networktable_logger import NetworkTableLogger


def test_values_land_in_subsystem_table(nt_instance):
    telemetry = NetworkTableLogger("Test", nt_instance)

    telemetry.log_double("Speed", 1.25)
    telemetry.log_int("Count", 7)
    telemetry.log_boolean("Ready", True)
    telemetry.log_string("Mode", "SIMULATION")

    table = nt_instance.getTable("Test")
    assert table.getDoubleTopic("Speed").subscribe(0.0).get() == pytest.approx(1.25)
    assert table.getIntegerTopic("Count").subscribe(0).get() == 7
    assert table.getBooleanTopic("Ready").subscribe(False).get()
    assert table.getStringTopic("Mode").subscribe("").get() == "SIMULATION"


def test_struct_values(nt_instance):
    telemetry = NetworkTableLogger("Test", nt_instance)
    pose = Pose2d(1.0, 2.0, Rotation2d(0.5))
    states = [SwerveModuleState(1.0, Rotation2d(0.25)), SwerveModuleState(-1.0, Rotation2d())]

    telemetry.log_pose2d("Pose", pose)
    telemetry.log_chassis_speeds("Speeds", ChassisSpeeds(1.0, 0.0, 0.5))
    telemetry.log_module_states("States", states)

    table = nt_instance.getTable("Test")
    logged = table.getStructTopic("Pose", Pose2d).subscribe(Pose2d()).get()
    assert (logged.x, logged.y, logged.rotation().radians()) == pytest.approx((1.0, 2.0, 0.5))

    speeds = table.getStructTopic("Speeds", ChassisSpeeds).subscribe(ChassisSpeeds()).get()
    assert (speeds.vx, speeds.vy, speeds.omega) == pytest.approx((1.0, 0.0, 0.5))

    logged_states = table.getStructArrayTopic("States", SwerveModuleState).subscribe([]).get()
    assert [state.speed for state in logged_states] == pytest.approx([1.0, -1.0])


def test_publishers_are_reused(nt_instance):
    telemetry = NetworkTableLogger("Test", nt_instance)

    telemetry.log_double("Speed", 1.0)
    publisher = telemetry._publishers["Speed"]
    telemetry.log_double("Speed", 2.0)

    assert telemetry._publishers["Speed"] is publisher
    assert len(telemetry._publishers) == 1
    assert nt_instance.getTable("Test").getDoubleTopic("Speed").subscribe(0.0).get() == pytest.approx(2.0)
