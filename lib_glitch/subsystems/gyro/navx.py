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

import logging

from wpimath.geometry import Rotation2d
from wpimath.units import degrees

from lib_glitch.subsystems.gyro.gyro import Gyro

logger = logging.getLogger(__name__)


class NavX(Gyro):
    """
    NavX gyro implementation (MXP SPI port)
    """
    gyro_type = "navX"

    def __init__(self, is_reversed: bool = False):
        super().__init__(is_reversed)

        import navx  # Only needed on a real robot

        self._gyro = navx.AHRS(navx.AHRS.NavXComType.kMXP_SPI)
        self._calibrated = False

    def initialize(self) -> None:
        """
        Perform initial steps to get your gyro ready
        """
        if self._gyro.isCalibrating():
            # Flag that gyro is not calibrated. Checked in periodic call
            self._calibrated = False
        else:
            self.reset()  # we boot up at zero degrees  - note - you can't reset this while calibrating
            self._calibrated = True

    @property
    def calibrated(self) -> bool:
        return self._calibrated

    @property
    def connected(self) -> bool:
        return self._gyro.isConnected()

    def reset(self) -> None:
        self._gyro.reset()

    @property
    def yaw(self) -> degrees:
        # navX reports clockwise positive
        yaw = -self._gyro.getYaw()

        return -yaw if self._reversed else yaw

    @property
    def heading(self) -> Rotation2d:
        heading = self._gyro.getRotation2d()

        return Rotation2d(-heading.radians()) if self._reversed else heading

    def periodic(self) -> None:
        if not self.calibrated and not self._gyro.isCalibrating():
            # Gyro has finished calibrating, set it to zero
            logger.info("navX calibration complete")
            self.reset()
            self._calibrated = True
