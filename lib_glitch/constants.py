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

#
# Commonly used constants not found in existing wpilib modules

import math
from enum import Enum

from wpilib import RobotBase
from wpimath.units import meters, seconds


class RobotModes(Enum):
    """
    Sensor source for the drivetrain. Chosen once when a subsystem is built and
    never re-checked afterward.
    """
    REAL = 1
    SIMULATION = 2


def default_robot_mode() -> RobotModes:
    return RobotModes.REAL if RobotBase.isReal() else RobotModes.SIMULATION


# The period is available from robot.getPeriod() and the following provides
# a default value in case it returns 0 or None
DEFAULT_ROBOT_PERIOD: seconds = 1.0 / 50

# Number of robot ticks to wait after boot before zeroing the heading. The gyro
# needs time to settle before its yaw can be trusted (1 second at 50 Hz)
HEADING_ZERO_WARMUP_TICKS = 50

######################################################################
# Math
RADIANS_PER_REVOLUTION = 2 * math.pi
DEGREES_PER_REVOLUTION = 360.0
RADIANS_PER_DEGREE = RADIANS_PER_REVOLUTION / DEGREES_PER_REVOLUTION

SECONDS_PER_MINUTE = 60.0

######################################################################
# Pose estimation

# How much odometry history the pose estimator keeps for latency compensation
POSE_HISTORY_DURATION: seconds = 1.5

######################################################################
# Vision Pose filter limits

MAX_VISION_AMBIGUITY = 0.2
MAX_VISION_DISTANCE: meters = 4.0

# PhotonVision reports an ambiguity of -1 when it could not be computed
INVALID_AMBIGUITY = -1.0
