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
import math
from typing import Optional

from wpimath.controller import SimpleMotorFeedforwardMeters
from wpimath.geometry import Rotation2d, Translation2d
from wpimath.kinematics import SwerveModulePosition, SwerveModuleState
from wpimath.units import meters, meters_per_second, radians, seconds, volts

from lib_glitch.constants import DEFAULT_ROBOT_PERIOD, RobotModes
from lib_glitch.motors.motor import Motor
from lib_glitch.subsystems.swervedrive.constants import ModuleConstants
from lib_glitch.subsystems.swervedrive.swerveutils import angle_between, is_finite_state, wrap_angle, wrap_positive

logger = logging.getLogger(__name__)


class ModuleSensors:
    """
    Where a swerve module gets its measured state from. Picked once when the
    module is built.
    """

    def heading(self) -> Rotation2d:
        raise NotImplementedError("Implement in derived class")

    def speed(self) -> meters_per_second:
        raise NotImplementedError("Implement in derived class")

    def distance(self) -> meters:
        raise NotImplementedError("Implement in derived class")

    def reset_distance(self) -> None:
        raise NotImplementedError("Implement in derived class")

    def advance(self, target: SwerveModuleState) -> None:
        """
        Called after a new target has been sent to the motors
        """


class RealModuleSensors(ModuleSensors):
    """
    Absolute steering encoder and relative drive encoder, read through the motors
    """

    def __init__(self, drive_motor: Motor, steer_motor: Motor, chassis_offset: radians):
        self._drive_motor = drive_motor
        self._steer_motor = steer_motor
        self._chassis_offset = chassis_offset
        self._distance_offset: meters = 0.0

    def heading(self) -> Rotation2d:
        return Rotation2d(wrap_angle(self._steer_motor.getPosition() + self._chassis_offset))

    def speed(self) -> meters_per_second:
        return self._drive_motor.getVelocity()

    def distance(self) -> meters:
        return self._drive_motor.getPosition() - self._distance_offset

    def reset_distance(self) -> None:
        self._distance_offset = self._drive_motor.getPosition()


class SimModuleSensors(ModuleSensors):
    """
    No encoders, the module is assumed to reach every target immediately and the
    wheel distance is Euler-integrated once per commanded tick.
    """

    def __init__(self, period: seconds):
        self._period = period
        self._state = SwerveModuleState()
        self._distance: meters = 0.0

    def heading(self) -> Rotation2d:
        return self._state.angle

    def speed(self) -> meters_per_second:
        return self._state.speed

    def distance(self) -> meters:
        return self._distance

    def reset_distance(self) -> None:
        self._distance = 0.0

    def advance(self, target: SwerveModuleState) -> None:
        self._state = target
        self._distance += target.speed * self._period


class SwerveModule:
    """
    One wheel of a swerve drive: a drive motor for speed and a steer motor for
    heading.

    Headings exposed by this class are in the chassis frame. The steer encoder
    reads zero when the module points 'chassis_offset' radians away from the
    chassis forward direction, so the offset is added on every read and removed on
    every steering command.
    """

    # pylint:disable-next=too-many-arguments, too-many-positional-arguments
    def __init__(self, name: str, drive_motor: Motor, steer_motor: Motor,
                 location: Translation2d, chassis_offset: radians = 0.0,
                 mode: RobotModes = RobotModes.REAL,
                 period: seconds = DEFAULT_ROBOT_PERIOD):
        self.name = name
        self._drive_motor = drive_motor
        self._steer_motor = steer_motor
        self._location = location
        self._chassis_offset = chassis_offset
        self._mode = mode
        self._feedforward = SimpleMotorFeedforwardMeters(ModuleConstants.DRIVING_KS, ModuleConstants.DRIVING_KV,
                                                         ModuleConstants.DRIVING_KA, period)

        if mode == RobotModes.REAL:
            self._sensors: ModuleSensors = RealModuleSensors(drive_motor, steer_motor, chassis_offset)
        else:
            self._sensors = SimModuleSensors(period)

        self._target_state = SwerveModuleState(0.0, self.getCorrectedSteer())

    @property
    def mode(self) -> RobotModes:
        return self._mode

    @property
    def location(self) -> Translation2d:
        return self._location

    @property
    def chassis_offset(self) -> radians:
        return self._chassis_offset

    def getCorrectedSteer(self) -> Rotation2d:
        """
        Current heading of the module corrected for the chassis offset
        """
        return self._sensors.heading()

    def getState(self) -> SwerveModuleState:
        return SwerveModuleState(self._sensors.speed(), self.getCorrectedSteer())

    def getPosition(self) -> SwerveModulePosition:
        return SwerveModulePosition(self._sensors.distance(), self.getCorrectedSteer())

    def getTargetState(self) -> SwerveModuleState:
        return SwerveModuleState(self._target_state.speed, self._target_state.angle)

    def getHeadingError(self) -> Rotation2d:
        return Rotation2d(angle_between(self._target_state.angle, self.getCorrectedSteer()))

    def setTargetState(self, desired: SwerveModuleState, closed_loop_drive: bool = True,
                       optimize_heading: bool = True) -> None:
        """
        Drive the module toward the desired (speed, heading)

        :param desired:           Target state in the chassis frame
        :param closed_loop_drive: Use the drive motor's velocity loop, otherwise only
                                  the feedforward voltage is applied
        :param optimize_heading:  Allow reversing the wheel rather than steering more
                                  than 90 degrees
        """
        if not is_finite_state(desired):
            logger.warning(f"{self.name}: ignoring non-finite target state {desired}")
            return

        current = self.getCorrectedSteer()
        state = SwerveModuleState(desired.speed, desired.angle)
        if optimize_heading:
            state.optimize(current)

        # Slow down while still turning so the wheel does not scrub sideways
        state.cosineScale(current)

        feedforward = self._feedforward.calculate(state.speed)
        if closed_loop_drive:
            self._drive_motor.setVelocity(state.speed, feedforward)
        else:
            self._drive_motor.setVoltage(feedforward)

        self._steer_motor.setPosition(wrap_positive(state.angle.radians() - self._chassis_offset))

        self._target_state = state
        self._sensors.advance(state)

    def setX(self) -> None:
        """
        Point the wheel at the chassis center, all four together form an X that
        resists being pushed
        """
        self.setTargetState(SwerveModuleState(0.0, Rotation2d(self._radial_angle())), False)

    def setO(self) -> None:
        """
        Point the wheel tangent to the chassis circle, all four together form an O.
        Used for rotational characterization.
        """
        self.setTargetState(SwerveModuleState(0.0, Rotation2d(self._radial_angle() + math.pi / 2)), False)

    def _radial_angle(self) -> radians:
        return math.atan2(self._location.y, self._location.x)

    def resetEncoder(self) -> None:
        """
        Zero the drive distance (for odometry)
        """
        self._sensors.reset_distance()

    def setRawDriveVoltage(self, voltage: volts) -> None:
        """
        Open-loop drive voltage for system identification
        """
        self._drive_motor.setVoltage(voltage)

    def getDriveVoltage(self) -> volts:
        return self._drive_motor.getVoltage()

    def stop(self, heading: Optional[Rotation2d] = None) -> None:
        if heading is None:
            heading = self.getCorrectedSteer()

        self.setTargetState(SwerveModuleState(0.0, heading), False, False)
