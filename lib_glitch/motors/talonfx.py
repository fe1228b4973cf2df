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
from typing import Optional

from phoenix6 import StatusCode
from phoenix6.configs import TalonFXConfiguration
from phoenix6.controls import DutyCycleOut, PositionVoltage, VelocityVoltage, VoltageOut
from phoenix6.hardware import TalonFX
from phoenix6.signals import FeedbackSensorSourceValue, ForwardLimitValue, InvertedValue, NeutralModeValue, \
    ReverseLimitValue
from wpimath.units import amperes, volts

from lib_glitch.motors.motor import Motor

logger = logging.getLogger(__name__)


class TalonFXMotor(Motor):
    """
    CTRE TalonFX (Kraken / Falcon) motor controller.

    The TalonFX works in mechanism rotations once the sensor to mechanism ratio is
    applied. 'units_per_rotation' converts those rotations into the units the
    caller works in (wheel circumference for a drive motor, 2*pi for steering).
    """
    motor_type = "TalonFX"

    # pylint:disable-next=too-many-arguments, too-many-positional-arguments
    def __init__(self, device_id: int, units_per_rotation: float = 1.0,
                 sensor_to_mechanism_ratio: float = 1.0, inverted: bool = False,
                 kp: float = 0.0, kd: float = 0.0,
                 current_limit: Optional[amperes] = None,
                 encoder_id: Optional[int] = None,
                 continuous_wrap: bool = False,
                 canbus: str = "") -> None:
        if units_per_rotation == 0.0:
            raise ValueError(f"TalonFX {device_id}: units_per_rotation must be non-zero")

        self._device_id = device_id
        self._units_per_rotation = units_per_rotation
        self._motor = TalonFX(device_id, canbus)

        config = TalonFXConfiguration()
        config.motor_output.inverted = InvertedValue.CLOCKWISE_POSITIVE if inverted \
            else InvertedValue.COUNTER_CLOCKWISE_POSITIVE
        config.motor_output.neutral_mode = NeutralModeValue.BRAKE

        config.slot0.k_p = kp
        config.slot0.k_d = kd

        if encoder_id is not None:
            # Steering modules fuse the absolute CANcoder with the rotor encoder
            config.feedback.feedback_remote_sensor_id = encoder_id
            config.feedback.feedback_sensor_source = FeedbackSensorSourceValue.FUSED_CANCODER
            config.feedback.rotor_to_sensor_ratio = sensor_to_mechanism_ratio
        else:
            config.feedback.sensor_to_mechanism_ratio = sensor_to_mechanism_ratio

        config.closed_loop_general.continuous_wrap = continuous_wrap

        if current_limit is not None:
            config.current_limits.stator_current_limit = current_limit
            config.current_limits.stator_current_limit_enable = True

        status = StatusCode.OK
        for _ in range(5):
            status = self._motor.configurator.apply(config, timeout_seconds=0.2)
            if status.is_ok():
                break
        else:
            logger.warning(f"TalonFX {device_id}: Error applying configuration: {status}")

        self._velocity_request = VelocityVoltage(0)
        self._position_request = PositionVoltage(0)
        self._duty_cycle_request = DutyCycleOut(0)
        self._voltage_request = VoltageOut(0)

    @property
    def device_id(self) -> int:
        return self._device_id

    def setVelocity(self, velocity: float, feedforward: volts = 0.0) -> None:
        self._motor.set_control(self._velocity_request
                                .with_velocity(velocity / self._units_per_rotation)
                                .with_feed_forward(feedforward))

    def setDutyCycle(self, duty_cycle: float) -> None:
        self._motor.set_control(self._duty_cycle_request.with_output(duty_cycle))

    def setVoltage(self, voltage: volts) -> None:
        self._motor.set_control(self._voltage_request.with_output(voltage))

    def setPosition(self, position: float, feedforward: volts = 0.0) -> None:
        self._motor.set_control(self._position_request
                                .with_position(position / self._units_per_rotation)
                                .with_feed_forward(feedforward))

    def getPosition(self) -> float:
        return self._motor.get_position().value * self._units_per_rotation

    def getVelocity(self) -> float:
        return self._motor.get_velocity().value * self._units_per_rotation

    def getCurrent(self) -> amperes:
        return self._motor.get_stator_current().value

    def getVoltage(self) -> volts:
        return self._motor.get_motor_voltage().value

    def getForwardLimitSwitch(self) -> bool:
        return self._motor.get_forward_limit().value == ForwardLimitValue.CLOSED_TO_GROUND

    def getReverseLimitSwitch(self) -> bool:
        return self._motor.get_reverse_limit().value == ReverseLimitValue.CLOSED_TO_GROUND
