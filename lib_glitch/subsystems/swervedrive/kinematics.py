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
from dataclasses import dataclass
from typing import Sequence, Tuple

from wpimath.geometry import Rotation2d, Translation2d, Twist2d
from wpimath.kinematics import ChassisSpeeds, SwerveDrive4Kinematics, SwerveModulePosition, SwerveModuleState
from wpimath.units import meters, meters_per_second

NUM_MODULES = 4

# Module order shared by the geometry, the kinematics and every module
# state / position tuple. Swerve uses ccw+ angular quantities and a
# coordinate plane with 0,0 at the robot's center, forward is +x
#
#   BL        FL
#         C
#   BR        FR
MODULE_NAMES = ("front-left", "front-right", "back-left", "back-right")

ModuleStates = Tuple[SwerveModuleState, SwerveModuleState, SwerveModuleState, SwerveModuleState]
ModulePositions = Tuple[SwerveModulePosition, SwerveModulePosition, SwerveModulePosition, SwerveModulePosition]


@dataclass(frozen=True)
class SwerveGeometry:
    """
    Wheel contact points relative to the robot center, in meters. Fixed for the
    lifetime of the robot and shared by the kinematics and the modules.
    """
    front_left: Translation2d
    front_right: Translation2d
    back_left: Translation2d
    back_right: Translation2d

    def __post_init__(self):
        locations = self.locations()

        for name, location in zip(MODULE_NAMES, locations):
            if not (math.isfinite(location.x) and math.isfinite(location.y)):
                raise ValueError(f"Swerve module {name} has a non-finite location: {location}")

        for index, location in enumerate(locations):
            for other in locations[index + 1:]:
                if location.distance(other) < 1e-6:
                    raise ValueError(f"Swerve modules share a location: {location}")

    @classmethod
    def rectangular(cls, wheel_base: meters, track_width: meters) -> 'SwerveGeometry':
        """
        :param wheel_base:  Distance between front and back wheels on robot
        :param track_width: Distance between centers of right and left wheels on robot
        """
        if not wheel_base > 0.0 or not track_width > 0.0:
            raise ValueError(f"Invalid chassis size: wheel base {wheel_base}, track width {track_width}")

        return cls(Translation2d(wheel_base / 2, track_width / 2),
                   Translation2d(wheel_base / 2, -track_width / 2),
                   Translation2d(-wheel_base / 2, track_width / 2),
                   Translation2d(-wheel_base / 2, -track_width / 2))

    def locations(self) -> Tuple[Translation2d, Translation2d, Translation2d, Translation2d]:
        return self.front_left, self.front_right, self.back_left, self.back_right


class ChassisKinematics:
    """
    Converts between chassis velocities and the four module states using the
    WPILib swerve kinematics built from a validated geometry.
    """

    def __init__(self, geometry: SwerveGeometry):
        self._geometry = geometry
        self._kinematics = SwerveDrive4Kinematics(*geometry.locations())

    @property
    def geometry(self) -> SwerveGeometry:
        return self._geometry

    @property
    def kinematics(self) -> SwerveDrive4Kinematics:
        return self._kinematics

    def reset_headings(self, headings: Sequence[Rotation2d]) -> None:
        self._check_count(headings)
        self._kinematics.resetHeadings(tuple(headings))

    def to_module_states(self, speeds: ChassisSpeeds) -> ModuleStates:
        # A stopped chassis leaves each module at its last heading instead of snapping to 0
        return self._kinematics.toSwerveModuleStates(speeds)

    def to_chassis_speeds(self, states: Sequence[SwerveModuleState]) -> ChassisSpeeds:
        self._check_count(states)
        return self._kinematics.toChassisSpeeds(tuple(states))

    def to_twist(self, start: Sequence[SwerveModulePosition], end: Sequence[SwerveModulePosition]) -> Twist2d:
        """
        Robot motion between two sets of module positions. Each module is assumed to
        have travelled along its final heading.
        """
        self._check_count(start)
        self._check_count(end)
        return self._kinematics.toTwist2d(tuple(start), tuple(end))

    @staticmethod
    def desaturate(states: Sequence[SwerveModuleState], max_speed: meters_per_second) -> ModuleStates:
        """
        Scale all wheel speeds down by the same ratio so none exceeds 'max_speed'.
        Speeds are never scaled up and the direction of each module is unchanged.
        """
        if not max_speed > 0.0:
            raise ValueError(f"Invalid maximum wheel speed: {max_speed}")

        ChassisKinematics._check_count(states)
        return SwerveDrive4Kinematics.desaturateWheelSpeeds(tuple(states), max_speed)

    @staticmethod
    def _check_count(items: Sequence) -> None:
        if len(items) != NUM_MODULES:
            raise ValueError(f"Expected {NUM_MODULES} swerve modules, got {len(items)}")
