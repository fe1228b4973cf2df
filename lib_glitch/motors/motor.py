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

from wpimath.units import amperes, volts


class Motor:
    """
    Motor is the base class for the motor controllers used by our mechanisms. It
    only describes what a mechanism may ask of a motor. Vendor specific setup
    (CAN ids, current limits, conversion factors, PID slots) belongs in the
    derived class.

    Positions and velocities are in mechanism units once the derived class has
    applied its conversion factors (meters and meters/second for a drive wheel,
    radians and radians/second for a steering module).
    """
    motor_type = "unknown"

    def setVelocity(self, velocity: float, feedforward: volts = 0.0) -> None:
        """
        Run closed-loop velocity control

        :param velocity:    Target velocity in mechanism units per second
        :param feedforward: Arbitrary feedforward voltage added to the PID output
        """
        raise NotImplementedError("Implement in derived class")

    def setDutyCycle(self, duty_cycle: float) -> None:
        """
        Run open-loop at a percent output [-1.0..1.0]
        """
        raise NotImplementedError("Implement in derived class")

    def setVoltage(self, voltage: volts) -> None:
        """
        Run open-loop at a fixed voltage
        """
        raise NotImplementedError("Implement in derived class")

    def setPosition(self, position: float, feedforward: volts = 0.0) -> None:
        """
        Run closed-loop position control

        :param position:    Target position in mechanism units
        :param feedforward: Arbitrary feedforward voltage added to the PID output
        """
        raise NotImplementedError("Implement in derived class")

    def getPosition(self) -> float:
        raise NotImplementedError("Implement in derived class")

    def getVelocity(self) -> float:
        raise NotImplementedError("Implement in derived class")

    def getCurrent(self) -> amperes:
        raise NotImplementedError("Implement in derived class")

    def getVoltage(self) -> volts:
        """
        Voltage currently applied to the motor
        """
        return 0.0

    def getForwardLimitSwitch(self) -> bool:
        raise NotImplementedError("Implement in derived class")

    def getReverseLimitSwitch(self) -> bool:
        raise NotImplementedError("Implement in derived class")
