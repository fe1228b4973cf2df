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

from wpimath.geometry import Rotation2d
from wpimath.kinematics import SwerveModuleState
from wpimath.units import radians


def wrap_angle(angle: radians) -> radians:
    """
    Wrap an angle into [-pi, pi]
    """
    return math.remainder(angle, math.tau)


def wrap_positive(angle: radians) -> radians:
    """
    Wrap an angle into [0, 2*pi), the range of an absolute encoder
    """
    return angle % math.tau


def angle_between(target: Rotation2d, current: Rotation2d) -> radians:
    """
    Signed shortest rotation that takes 'current' to 'target'
    """
    return wrap_angle(target.radians() - current.radians())


def is_finite_state(state: SwerveModuleState) -> bool:
    return math.isfinite(state.speed) and math.isfinite(state.angle.radians())
