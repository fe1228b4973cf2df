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
from typing import Callable, NamedTuple, Optional, Tuple

from commands2 import Subsystem
from wpilib import Field2d, SmartDashboard, Timer
from wpimath.geometry import Pose2d, Rotation2d
from wpimath.kinematics import ChassisSpeeds
from wpimath.units import meters_per_second, radians_per_second, seconds

from lib_glitch.constants import HEADING_ZERO_WARMUP_TICKS, RobotModes, default_robot_mode
from lib_glitch.motors.motor import Motor
from lib_glitch.motors.sim_motor import SimMotor
from lib_glitch.subsystems.gyro.gyro import Gyro
from lib_glitch.subsystems.gyro.sim_gyro import SimGyro
from lib_glitch.subsystems.pose.pose_estimator import PoseEstimator, StdDevs
from lib_glitch.subsystems.swervedrive.constants import DriveConfig, DriveConstants, ModuleConstants, \
    SwerveModuleConfigParams
from lib_glitch.subsystems.swervedrive.kinematics import ChassisKinematics, ModulePositions, ModuleStates
from lib_glitch.subsystems.swervedrive.swervemodule import SwerveModule
from lib_glitch.subsystems.vision.visionprovider import VisionProvider
from lib_glitch.util.logtracer import LogTracer
from lib_glitch.util.networktable_logger import NetworkTableLogger

logger = logging.getLogger(__name__)

MotorFactory = Callable[[SwerveModuleConfigParams], Tuple[Motor, Motor]]


class SwerveModules(NamedTuple):
    """
    The four modules, in the same order as the kinematics
    """
    front_left: SwerveModule
    front_right: SwerveModule
    back_left: SwerveModule
    back_right: SwerveModule


def talonfx_motors(params: SwerveModuleConfigParams) -> Tuple[Motor, Motor]:
    """
    Drive and steer motors for a module on the real robot
    """
    # Without an absolute encoder the steer zero is wherever the wheel sat at boot
    if params.steer_encoder_id is None:
        raise ValueError(f"Swerve module {params.name} has no steer encoder CAN id")

    from lib_glitch.motors.talonfx import TalonFXMotor  # Only needed on a real robot

    drive = TalonFXMotor(params.drive_motor_id,
                         units_per_rotation=ModuleConstants.WHEEL_CIRCUMFERENCE,
                         sensor_to_mechanism_ratio=ModuleConstants.DRIVING_MOTOR_REDUCTION,
                         kp=ModuleConstants.DRIVING_P,
                         kd=ModuleConstants.DRIVING_D,
                         current_limit=ModuleConstants.DRIVING_MOTOR_CURRENT_LIMIT)

    steer = TalonFXMotor(params.steer_motor_id,
                         units_per_rotation=ModuleConstants.TURNING_ENCODER_POSITION_FACTOR,
                         sensor_to_mechanism_ratio=ModuleConstants.TURNING_MOTOR_REDUCTION,
                         kp=ModuleConstants.TURNING_P,
                         kd=ModuleConstants.TURNING_D,
                         current_limit=ModuleConstants.TURNING_MOTOR_CURRENT_LIMIT,
                         encoder_id=params.steer_encoder_id,
                         continuous_wrap=True)
    return drive, steer


def sim_motors(params: SwerveModuleConfigParams) -> Tuple[Motor, Motor]:
    return SimMotor(f"{params.name}-drive"), SimMotor(f"{params.name}-steer")


class DriveSubsystem(Subsystem):
    """
    Four module swerve drive.

    Chassis speed requests are turned into module states by the kinematics,
    desaturated and forwarded to each module. Every tick the drive feeds module
    positions and the gyro heading to its pose estimator, then fuses whatever the
    vision provider has seen since the last tick.

    Real or simulated sensors are picked once, at construction, from 'mode'.
    In simulation the heading comes from a SimGyro that integrates the commanded
    angular velocity. The new heading is staged when speeds are commanded and
    only applied in 'simulationPeriodic', so every read within a tick agrees.
    """

    # pylint:disable-next=too-many-arguments, too-many-positional-arguments
    def __init__(self, config: Optional[DriveConfig] = None,
                 mode: Optional[RobotModes] = None,
                 gyro: Optional[Gyro] = None,
                 motor_factory: Optional[MotorFactory] = None,
                 vision: Optional[VisionProvider] = None,
                 telemetry: Optional[NetworkTableLogger] = None,
                 clock: Callable[[], seconds] = Timer.getFPGATimestamp,
                 initial_pose: Optional[Pose2d] = None,
                 warmup_ticks: int = HEADING_ZERO_WARMUP_TICKS,
                 vision_std_devs: Optional[StdDevs] = None) -> None:
        super().__init__()

        self._config = config or DriveConfig.default()
        self._mode = mode or default_robot_mode()
        self._period = self._config.period
        self._clock = clock
        self._warmup_ticks = warmup_ticks
        self._tick_count = 0

        self._kinematics = ChassisKinematics(self._config.geometry)

        if motor_factory is None:
            motor_factory = talonfx_motors if self._mode == RobotModes.REAL else sim_motors

        modules = []
        for params, location in zip(self._config.modules, self._config.geometry.locations()):
            drive_motor, steer_motor = motor_factory(params)
            modules.append(SwerveModule(params.name, drive_motor, steer_motor, location,
                                        params.chassis_offset, self._mode, self._period))

        self._modules = SwerveModules(*modules)

        if gyro is None:
            if self._mode == RobotModes.REAL:
                from lib_glitch.subsystems.gyro.navx import NavX  # Only needed on a real robot
                gyro = NavX(DriveConstants.GYRO_REVERSED)
            else:
                gyro = SimGyro()

        elif self._mode == RobotModes.SIMULATION and not isinstance(gyro, SimGyro):
            raise ValueError(f"Simulated drive needs a simulated gyro, not {gyro.gyro_type}")

        self._gyro = gyro
        self._sim_gyro: Optional[SimGyro] = gyro if self._mode == RobotModes.SIMULATION else None
        self._gyro.initialize()

        self._target_states: ModuleStates = tuple(module.getTargetState() for module in self._modules)
        self._commanded_speeds = ChassisSpeeds()

        self._estimator = PoseEstimator(self._kinematics, self.heading, self.get_module_positions(),
                                        initial_pose, vision_std_devs=vision_std_devs)
        self._vision = vision

        self._telemetry = telemetry or NetworkTableLogger("Drive")
        self._field = Field2d()
        self.dashboard_initialize()

    @property
    def mode(self) -> RobotModes:
        return self._mode

    @property
    def config(self) -> DriveConfig:
        return self._config

    @property
    def kinematics(self) -> ChassisKinematics:
        return self._kinematics

    @property
    def modules(self) -> SwerveModules:
        return self._modules

    @property
    def gyro(self) -> Gyro:
        return self._gyro

    @property
    def estimator(self) -> PoseEstimator:
        return self._estimator

    @property
    def vision(self) -> Optional[VisionProvider]:
        return self._vision

    @property
    def field(self) -> Field2d:
        return self._field

    @property
    def tick_count(self) -> int:
        return self._tick_count

    ######################
    # Driving

    def set_chassis_speeds(self, speeds: ChassisSpeeds) -> None:
        """
        Drive at the given robot-relative velocity. Wheel speeds above the
        configured maximum are scaled down together, so the robot keeps the
        requested direction of travel and rotation but moves slower.
        """
        if not (math.isfinite(speeds.vx) and math.isfinite(speeds.vy) and math.isfinite(speeds.omega)):
            logger.warning(f"Ignoring non-finite chassis speeds {speeds}")
            return

        states = ChassisKinematics.desaturate(self._kinematics.to_module_states(speeds), self._config.max_speed)

        for module, state in zip(self._modules, states):
            module.setTargetState(state, True, True)

        self._target_states = states
        self._commanded_speeds = speeds

        if self._sim_gyro is not None:
            # Desaturation may have slowed the rotation too
            omega = self._kinematics.to_chassis_speeds(states).omega
            self._sim_gyro.stage(self._sim_gyro.staged + omega * self._period)

    def drive(self, x_speed: meters_per_second, y_speed: meters_per_second,
              rotation: radians_per_second, field_relative: bool = False) -> None:
        """
        Method to drive the robot using joystick info.

        :param x_speed:        Speed of the robot in the x direction (forward).
        :param y_speed:        Speed of the robot in the y direction (sideways).
        :param rotation:       Angular rate of the robot.
        :param field_relative: Whether the provided x and y speeds are relative to the field.
        """
        if field_relative:
            speeds = ChassisSpeeds.fromFieldRelativeSpeeds(x_speed, y_speed, rotation, self.get_pose().rotation())
        else:
            speeds = ChassisSpeeds(x_speed, y_speed, rotation)

        self.set_chassis_speeds(speeds)

    def stop(self) -> None:
        self.set_chassis_speeds(ChassisSpeeds())

    def set_x(self) -> None:
        """
        Point the wheels inward in an X to resist being pushed
        """
        for module in self._modules:
            module.setX()

        self._record_module_targets()

    def set_o(self) -> None:
        """
        Point the wheels tangent to the chassis in an O, for rotation
        characterization
        """
        for module in self._modules:
            module.setO()

        self._record_module_targets()

    def _record_module_targets(self) -> None:
        self._target_states = tuple(module.getTargetState() for module in self._modules)
        self._commanded_speeds = ChassisSpeeds()

    ######################
    # Chassis state

    def get_module_states(self) -> ModuleStates:
        return tuple(module.getState() for module in self._modules)

    def get_module_positions(self) -> ModulePositions:
        return tuple(module.getPosition() for module in self._modules)

    def get_target_module_states(self) -> ModuleStates:
        """
        Module states from the last chassis request, after desaturation
        """
        return self._target_states

    def get_chassis_speeds(self) -> ChassisSpeeds:
        """
        Robot-relative velocity measured from the module states
        """
        return self._kinematics.to_chassis_speeds(self.get_module_states())

    def reset_encoders(self) -> None:
        for module in self._modules:
            module.resetEncoder()

        # Re-seat odometry so the jump in wheel distance is not seen as motion
        self._estimator.reset(self.get_pose(), self.heading, self.get_module_positions())

    ######################
    # Heading

    @property
    def heading(self) -> Rotation2d:
        """
        Heading reported by the gyro, real or simulated
        """
        return self._gyro.heading

    def zero_heading(self) -> None:
        """
        Make the current direction read as zero on the gyro. The fused pose is
        re-seated against the new gyro reading so it keeps its field heading.
        """
        logger.info("Zeroing heading")

        self._gyro.reset()
        self._estimator.reset(self.get_pose(), self.heading, self.get_module_positions())

    def apply_sim_heading(self) -> None:
        """
        Make the staged simulated heading visible to readers
        """
        if self._sim_gyro is not None:
            self._sim_gyro.apply()

    ######################
    # Pose

    def get_pose(self) -> Pose2d:
        return self._estimator.get_pose()

    def reset_pose(self, pose: Pose2d) -> None:
        self._estimator.reset(pose, self.heading, self.get_module_positions())

    def add_vision_measurement(self, pose: Pose2d, timestamp: seconds,
                               std_devs: Optional[StdDevs] = None) -> None:
        self._estimator.add_vision_measurement(pose, timestamp, std_devs)

    def seed_pose_from_vision(self) -> bool:
        """
        Reset the pose from the most confident tag in view, if there is one

        :returns: True if the pose was reset
        """
        if self._vision is None:
            return False

        pose = self._vision.best_start_pose()
        if pose is None:
            return False

        logger.info(f"Seeding pose from vision: {pose}")
        self.reset_pose(pose)
        return True

    ######################
    # Periodic

    def periodic(self) -> None:
        LogTracer.resetOuter("DriveSubsystemPeriodic")

        # Let the gyro settle after boot before trusting it as zero
        self._tick_count += 1
        if self._tick_count == self._warmup_ticks:
            self.zero_heading()

        self._gyro.periodic()
        self._estimator.update_with_time(self._clock(), self.heading, self.get_module_positions())
        LogTracer.record("OdometryUpdate")

        if self._vision is not None:
            self._vision.periodic(self.get_pose())

            for measurement in self._vision.drain_measurements(self.get_pose()):
                self._estimator.add_vision_measurement(measurement.pose, measurement.timestamp)

            LogTracer.record("VisionUpdate")

        self.dashboard_periodic()
        LogTracer.record("DashboardUpdate")
        LogTracer.recordTotal()

    def simulationPeriodic(self) -> None:
        self.apply_sim_heading()

    ######################
    # Dashboard support

    def dashboard_initialize(self) -> None:
        """
        Configure the SmartDashboard for this subsystem
        """
        SmartDashboard.putData("Field", self._field)

        if self._vision is not None and self._vision.debug_field is not None:
            SmartDashboard.putData("VisionDebugField", self._vision.debug_field)

        self._telemetry.log_string("Mode", self._mode.name)
        self._gyro.dashboard_initialize(self._telemetry)

    def dashboard_periodic(self) -> None:
        """
        Called from periodic function to update dashboard elements for this subsystem
        """
        pose = self.get_pose()
        self._field.setRobotPose(pose)

        self._telemetry.log_double("Heading", self.heading.degrees())
        self._telemetry.log_pose2d("Pose", pose)
        self._telemetry.log_module_states("ModuleStates", self.get_module_states())
        self._telemetry.log_module_states("DesiredStates", self._target_states)
        self._telemetry.log_chassis_speeds("CommandedSpeeds", self._commanded_speeds)

        self._gyro.dashboard_periodic()
