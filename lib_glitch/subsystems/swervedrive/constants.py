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
from typing import Optional, Tuple

from wpimath import units
from wpimath.units import meters_per_second, radians, seconds

from lib_glitch.constants import DEFAULT_ROBOT_PERIOD, SECONDS_PER_MINUTE
from lib_glitch.subsystems.swervedrive.kinematics import MODULE_NAMES, SwerveGeometry


class NeoMotorConstants:
    FREE_SPEED_RPM = 5820


class ModuleConstants:
    # The MAXSwerve module can be configured with one of three pinion gears: 12T, 13T, or 14T.
    # This changes the drive speed of the module (a pinion gear with more teeth will result in a
    # robot that drives faster).
    DRIVING_MOTOR_PINION_TEETH = 14

    # Wheels are assumed worn 3% below their nominal 3 inch diameter
    WHEEL_DIAMETER = units.inchesToMeters(0.97 * 3)
    WHEEL_CIRCUMFERENCE = WHEEL_DIAMETER * math.pi

    # 45 teeth on the wheel's bevel gear, 22 teeth on the first-stage spur gear, 15 teeth on the bevel pinion
    DRIVING_MOTOR_REDUCTION = (45.0 * 22) / (DRIVING_MOTOR_PINION_TEETH * 15)

    DRIVING_MOTOR_FREE_SPEED_RPS = NeoMotorConstants.FREE_SPEED_RPM / SECONDS_PER_MINUTE
    MAX_WHEEL_SPEED: meters_per_second = \
        (DRIVING_MOTOR_FREE_SPEED_RPS / DRIVING_MOTOR_REDUCTION) * WHEEL_CIRCUMFERENCE

    DRIVING_ENCODER_POSITION_FACTOR = WHEEL_CIRCUMFERENCE / DRIVING_MOTOR_REDUCTION  # meters
    TURNING_ENCODER_POSITION_FACTOR = math.tau  # radian

    # MAXSwerve steering reduction, motor rotations per module rotation
    TURNING_MOTOR_REDUCTION = 9424.0 / 203.0

    # Drive velocity loop
    DRIVING_P = 0.25
    DRIVING_D = 0.05
    DRIVING_KS = 0.068841  # volts
    DRIVING_KV = 2.4568  # volts * seconds / meter
    DRIVING_KA = 0.22524  # volts * seconds^2 / meter

    # Steering position loop
    TURNING_P = 2.5
    TURNING_D = 0.0

    DRIVING_MOTOR_CURRENT_LIMIT = 50  # amp
    TURNING_MOTOR_CURRENT_LIMIT = 80  # amp


class DriveConstants:
    # Chassis configuration
    TRACK_WIDTH = units.inchesToMeters(26.5)
    # Distance between centers of right and left wheels on robot
    WHEEL_BASE = units.inchesToMeters(26.5)
    # Distance between front and back wheels on robot

    # Angular offsets of the modules relative to the chassis in radians
    FRONT_LEFT_CHASSIS_ANGULAR_OFFSET = math.pi / 2
    FRONT_RIGHT_CHASSIS_ANGULAR_OFFSET = 0.0
    BACK_LEFT_CHASSIS_ANGULAR_OFFSET = -math.pi
    BACK_RIGHT_CHASSIS_ANGULAR_OFFSET = -math.pi / 2

    # CAN IDs (drive, steer, steer CANcoder)
    FRONT_LEFT_DRIVING_CAN_ID = 11
    FRONT_LEFT_TURNING_CAN_ID = 10
    FRONT_LEFT_ENCODER_CAN_ID = 31

    FRONT_RIGHT_DRIVING_CAN_ID = 15
    FRONT_RIGHT_TURNING_CAN_ID = 14
    FRONT_RIGHT_ENCODER_CAN_ID = 32

    BACK_LEFT_DRIVING_CAN_ID = 13
    BACK_LEFT_TURNING_CAN_ID = 12
    BACK_LEFT_ENCODER_CAN_ID = 33

    BACK_RIGHT_DRIVING_CAN_ID = 17
    BACK_RIGHT_TURNING_CAN_ID = 16
    BACK_RIGHT_ENCODER_CAN_ID = 34

    GYRO_REVERSED = False


@dataclass(frozen=True)
class SwerveModuleConfigParams:
    """
    Identity of one swerve module: its motor ids and how far its zero heading
    is rotated from the chassis forward direction.
    """
    name: str
    drive_motor_id: int
    steer_motor_id: int
    chassis_offset: radians = 0.0
    steer_encoder_id: Optional[int] = None


@dataclass(frozen=True)
class DriveConfig:
    """
    Everything fixed at construction for a four module swerve drive. Modules are
    listed in the same order as the geometry (front-left, front-right, back-left,
    back-right).
    """
    geometry: SwerveGeometry
    modules: Tuple[SwerveModuleConfigParams, ...]
    max_speed: meters_per_second = ModuleConstants.MAX_WHEEL_SPEED
    period: seconds = DEFAULT_ROBOT_PERIOD

    def __post_init__(self):
        if len(self.modules) != len(MODULE_NAMES):
            raise ValueError(f"Expected {len(MODULE_NAMES)} swerve modules, got {len(self.modules)}")

        if not self.max_speed > 0.0:
            raise ValueError(f"Invalid maximum wheel speed: {self.max_speed}")

        if not self.period > 0.0:
            raise ValueError(f"Invalid robot period: {self.period}")

        seen = set()
        for module in self.modules:
            if not math.isfinite(module.chassis_offset):
                raise ValueError(f"Swerve module {module.name} has a non-finite chassis offset")

            for can_id in (module.drive_motor_id, module.steer_motor_id):
                if can_id in seen:
                    raise ValueError(f"Duplicate CAN id {can_id} in swerve module {module.name}")
                seen.add(can_id)

        encoders = [module.steer_encoder_id for module in self.modules if module.steer_encoder_id is not None]
        if len(set(encoders)) != len(encoders):
            raise ValueError(f"Duplicate steer encoder CAN id in {encoders}")

    @classmethod
    def default(cls) -> 'DriveConfig':
        return cls(SwerveGeometry.rectangular(DriveConstants.WHEEL_BASE, DriveConstants.TRACK_WIDTH),
                   (SwerveModuleConfigParams(MODULE_NAMES[0],
                                             DriveConstants.FRONT_LEFT_DRIVING_CAN_ID,
                                             DriveConstants.FRONT_LEFT_TURNING_CAN_ID,
                                             DriveConstants.FRONT_LEFT_CHASSIS_ANGULAR_OFFSET,
                                             DriveConstants.FRONT_LEFT_ENCODER_CAN_ID),
                    SwerveModuleConfigParams(MODULE_NAMES[1],
                                             DriveConstants.FRONT_RIGHT_DRIVING_CAN_ID,
                                             DriveConstants.FRONT_RIGHT_TURNING_CAN_ID,
                                             DriveConstants.FRONT_RIGHT_CHASSIS_ANGULAR_OFFSET,
                                             DriveConstants.FRONT_RIGHT_ENCODER_CAN_ID),
                    SwerveModuleConfigParams(MODULE_NAMES[2],
                                             DriveConstants.BACK_LEFT_DRIVING_CAN_ID,
                                             DriveConstants.BACK_LEFT_TURNING_CAN_ID,
                                             DriveConstants.BACK_LEFT_CHASSIS_ANGULAR_OFFSET,
                                             DriveConstants.BACK_LEFT_ENCODER_CAN_ID),
                    SwerveModuleConfigParams(MODULE_NAMES[3],
                                             DriveConstants.BACK_RIGHT_DRIVING_CAN_ID,
                                             DriveConstants.BACK_RIGHT_TURNING_CAN_ID,
                                             DriveConstants.BACK_RIGHT_CHASSIS_ANGULAR_OFFSET,
                                             DriveConstants.BACK_RIGHT_ENCODER_CAN_ID)))
