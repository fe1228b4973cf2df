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

from typing import Optional

from wpimath.geometry import Rotation2d
from wpimath.units import degrees

from lib_glitch.util.networktable_logger import NetworkTableLogger


class Gyro:
    """
    Gyro is the base class for gyros on our system. Actual gyros are derived
    from this class.
    """
    gyro_type = "unknown"

    def __init__(self, is_reversed: bool = False) -> None:
        self._reversed = is_reversed
        self._telemetry: Optional[NetworkTableLogger] = None

    def initialize(self) -> None:
        """
        Perform initial steps to get your gyro ready
        """
        self.reset()

    @property
    def is_reversed(self) -> bool:
        return self._reversed

    @property
    def calibrated(self) -> bool:
        """
        Is this gyro calibrated. Implement in derived class if your gyro
        does not auto-calibrate.
        """
        return True

    def reset(self) -> None:
        """
        Reset the gyro so the current direction reads as zero
        """
        raise NotImplementedError("Implement in derived class")

    @property
    def yaw(self) -> degrees:
        """
        Counter-clockwise positive yaw
        """
        raise NotImplementedError("Implement in derived class")

    @property
    def heading(self) -> Rotation2d:
        """
        Returns the heading of the robot
        """
        return Rotation2d.fromDegrees(self.yaw)

    def periodic(self) -> None:
        """
        Perform any periodic maintenance
        """

    ######################
    # Dashboard support

    def dashboard_initialize(self, telemetry: NetworkTableLogger) -> None:
        self._telemetry = telemetry
        telemetry.log_string('Gyro/type', self.gyro_type)

    def dashboard_periodic(self) -> None:
        """
        Called from periodic function to update dashboard elements for this subsystem
        """
        if self._telemetry is not None:
            self._telemetry.log_double('Gyro/yaw', self.yaw)
            self._telemetry.log_boolean('Gyro/calibrated', self.calibrated)
