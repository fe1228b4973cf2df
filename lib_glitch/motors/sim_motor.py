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

from enum import Enum
from typing import Optional

from wpimath.units import amperes, volts

from lib_glitch.motors.motor import Motor


class ControlMode(Enum):
    NEUTRAL = 0
    VELOCITY = 1
    DUTY_CYCLE = 2
    VOLTAGE = 3
    POSITION = 4


class SimMotor(Motor):
    """
    Idealized motor for simulation and unit tests. Every setpoint is reached
    immediately, so reads return the last command of the matching kind.
    """
    motor_type = "sim"

    def __init__(self, name: str = "", nominal_voltage: volts = 12.0) -> None:
        self.name = name
        self._nominal_voltage = nominal_voltage

        self.control_mode: ControlMode = ControlMode.NEUTRAL
        self.setpoint: float = 0.0
        self.feedforward: volts = 0.0

        self._position: float = 0.0
        self._velocity: float = 0.0
        self._voltage: volts = 0.0
        self.current: amperes = 0.0

        self.forward_limit: bool = False
        self.reverse_limit: bool = False

    def _command(self, mode: ControlMode, setpoint: float, feedforward: volts = 0.0) -> None:
        self.control_mode = mode
        self.setpoint = setpoint
        self.feedforward = feedforward

    def setVelocity(self, velocity: float, feedforward: volts = 0.0) -> None:
        self._command(ControlMode.VELOCITY, velocity, feedforward)
        self._velocity = velocity
        self._voltage = feedforward

    def setDutyCycle(self, duty_cycle: float) -> None:
        duty_cycle = max(-1.0, min(1.0, duty_cycle))
        self._command(ControlMode.DUTY_CYCLE, duty_cycle)
        self._voltage = duty_cycle * self._nominal_voltage

    def setVoltage(self, voltage: volts) -> None:
        self._command(ControlMode.VOLTAGE, voltage)
        self._voltage = voltage

    def setPosition(self, position: float, feedforward: volts = 0.0) -> None:
        self._command(ControlMode.POSITION, position, feedforward)
        self._position = position

    def getPosition(self) -> float:
        return self._position

    def getVelocity(self) -> float:
        return self._velocity

    def getCurrent(self) -> amperes:
        return self.current

    def getVoltage(self) -> volts:
        return self._voltage

    def getForwardLimitSwitch(self) -> bool:
        return self.forward_limit

    def getReverseLimitSwitch(self) -> bool:
        return self.reverse_limit

    ######################
    # Simulation support

    def set_sim_position(self, position: float, velocity: Optional[float] = None) -> None:
        """
        Force the sensor readings, used by tests and physics models
        """
        self._position = position
        if velocity is not None:
            self._velocity = velocity
