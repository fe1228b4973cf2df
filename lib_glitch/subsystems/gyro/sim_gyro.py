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
from wpimath.units import degrees, radians

from lib_glitch.subsystems.gyro.gyro import Gyro


class SimGyro(Gyro):
    """
    Simulated gyro for a robot without an IMU model.

    The heading is written in two phases. During a tick, callers stage the next
    heading; the staged value only becomes visible once 'apply()' is called, so
    every read within one tick sees the same heading.
    """
    gyro_type = "sim"

    def __init__(self) -> None:
        super().__init__(False)

        self._next_heading: radians = 0.0
        self._current_heading: radians = 0.0

    def reset(self) -> None:
        self.stage(0.0)
        self.apply()

    def stage(self, heading: radians) -> None:
        """
        Set the heading to report after the next 'apply()'
        """
        if math.isfinite(heading):
            self._next_heading = heading

    def apply(self) -> None:
        self._current_heading = self._next_heading

    @property
    def staged(self) -> radians:
        return self._next_heading

    @property
    def yaw(self) -> degrees:
        return math.degrees(self._current_heading)

    @property
    def heading(self) -> Rotation2d:
        return Rotation2d(self._current_heading)

    def dashboard_periodic(self) -> None:
        super().dashboard_periodic()

        if self._telemetry is not None:
            self._telemetry.log_double('Gyro/next-sim-heading', math.degrees(self._next_heading))
