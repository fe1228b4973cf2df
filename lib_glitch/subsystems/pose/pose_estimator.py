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
import bisect
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from wpimath.estimator import SwerveDrive4PoseEstimator
from wpimath.geometry import Pose2d, Rotation2d
from wpimath.kinematics import SwerveModulePosition
from wpimath.units import seconds

from lib_glitch.constants import POSE_HISTORY_DURATION
from lib_glitch.subsystems.swervedrive.kinematics import ChassisKinematics

logger = logging.getLogger(__name__)

StdDevs = Tuple[float, float, float]

# Vision is trusted completely until told otherwise
FULL_TRUST: StdDevs = (0.0, 0.0, 0.0)


def is_finite_pose(pose: Pose2d) -> bool:
    return math.isfinite(pose.x) and math.isfinite(pose.y) and math.isfinite(pose.rotation().radians())


@dataclass(frozen=True)
class _AppliedMeasurement:
    timestamp: seconds
    pose: Pose2d
    std_devs: Optional[StdDevs]


class PoseEstimator:
    """
    Fuses swerve odometry with latency-delayed vision measurements.

    The fusion itself is the WPILib swerve pose estimator. On top of it this keeps
    the vision measurements applied within the odometry history so that one
    arriving out of order is applied at its own timestamp and the later ones are
    applied again on top of it, rather than being discarded. Non-finite inputs are
    logged and ignored.

    The estimator is single-threaded: all calls are expected on the robot loop.
    """

    # pylint:disable-next=too-many-arguments, too-many-positional-arguments
    def __init__(self, kinematics: ChassisKinematics, heading: Rotation2d,
                 module_positions: Sequence[SwerveModulePosition],
                 initial_pose: Optional[Pose2d] = None,
                 state_std_devs: StdDevs = (0.1, 0.1, 0.1),
                 vision_std_devs: Optional[StdDevs] = None):
        self._num_modules = len(kinematics.geometry.locations())
        self._check_positions(module_positions)

        if initial_pose is None:
            initial_pose = Pose2d()
        if not is_finite_pose(initial_pose):
            raise ValueError(f"Invalid initial pose: {initial_pose}")

        self._kinematics = kinematics
        self._vision_std_devs = tuple(self._check_std_devs(vision_std_devs or FULL_TRUST))
        self._estimator = SwerveDrive4PoseEstimator(self._kinematics.kinematics, heading, tuple(module_positions),
                                                    initial_pose, tuple(self._check_std_devs(state_std_devs)),
                                                    self._vision_std_devs)

        self._last_timestamp: Optional[seconds] = None
        self._last_heading = heading
        self._last_positions = tuple(module_positions)
        self._measurements: List[_AppliedMeasurement] = []

    @staticmethod
    def _check_std_devs(std_devs: Sequence[float]) -> Sequence[float]:
        if len(std_devs) != 3 or not all(math.isfinite(value) and value >= 0.0 for value in std_devs):
            raise ValueError(f"Standard deviations must be three non-negative values, got {std_devs}")
        return std_devs

    def _check_positions(self, module_positions: Sequence[SwerveModulePosition]) -> None:
        if len(module_positions) != self._num_modules:
            raise ValueError(f"Expected {self._num_modules} module positions, got {len(module_positions)}")

    def set_vision_measurement_std_devs(self, std_devs: StdDevs) -> None:
        """
        How much to trust vision relative to odometry, as standard deviations of the
        vision pose in the form (x, y, theta), in meters and radians. Until this is
        called, vision measurements are trusted completely.
        """
        self._vision_std_devs = tuple(self._check_std_devs(std_devs))
        self._estimator.setVisionMeasurementStdDevs(self._vision_std_devs)

    ######################
    # Odometry

    def update_with_time(self, timestamp: seconds, heading: Rotation2d,
                         module_positions: Sequence[SwerveModulePosition]) -> Pose2d:
        """
        Integrate one tick of odometry

        :param timestamp:        Time of the readings, must be later than the previous update
        :param heading:          Raw gyro heading
        :param module_positions: Module positions in kinematics order

        :returns: The fused pose estimate
        """
        self._check_positions(module_positions)

        if not math.isfinite(timestamp) or not math.isfinite(heading.radians()) or \
                not all(math.isfinite(position.distance) and math.isfinite(position.angle.radians())
                        for position in module_positions):
            logger.warning(f"Ignoring non-finite odometry reading at {timestamp}")
            return self.get_pose()

        if self._last_timestamp is not None and timestamp <= self._last_timestamp:
            return self.get_pose()

        self._last_timestamp = timestamp
        self._last_heading = heading
        self._last_positions = tuple(module_positions)

        pose = self._estimator.updateWithTime(timestamp, heading, self._last_positions)

        oldest = bisect.bisect_left([measurement.timestamp for measurement in self._measurements],
                                    timestamp - POSE_HISTORY_DURATION)
        del self._measurements[:oldest]

        return pose

    ######################
    # Vision

    def add_vision_measurement(self, pose: Pose2d, timestamp: seconds,
                               std_devs: Optional[StdDevs] = None) -> None:
        """
        Blend in a field pose observed at some earlier time.

        :param pose:      Robot pose as measured by vision
        :param timestamp: When the camera captured the frame, on the same clock as
                          'update_with_time'
        :param std_devs:  Optional trust for this measurement only (x, y, theta)
        """
        if not math.isfinite(timestamp) or not is_finite_pose(pose):
            logger.warning(f"Ignoring non-finite vision measurement {pose} at {timestamp}")
            return

        if std_devs is not None:
            std_devs = tuple(self._check_std_devs(std_devs))

        # Nothing to blend against before the first update or beyond the odometry history
        if self._last_timestamp is None or timestamp < self._last_timestamp - POSE_HISTORY_DURATION:
            return

        measurement = _AppliedMeasurement(timestamp, pose, std_devs)
        index = bisect.bisect_right([applied.timestamp for applied in self._measurements], timestamp)
        later = self._measurements[index:]

        # The estimator forgets corrections made after an earlier timestamp, put them back
        self._apply(measurement)
        for applied in later:
            self._apply(applied)

        self._measurements.insert(index, measurement)

    def _apply(self, measurement: _AppliedMeasurement) -> None:
        if measurement.std_devs is None:
            self._estimator.addVisionMeasurement(measurement.pose, measurement.timestamp)
            return

        self._estimator.addVisionMeasurement(measurement.pose, measurement.timestamp, measurement.std_devs)
        self._estimator.setVisionMeasurementStdDevs(self._vision_std_devs)

    def sample_at(self, timestamp: seconds) -> Optional[Pose2d]:
        """
        Fused pose at a past instant. Times outside the history are clamped to it.

        :returns: The pose, or None before the first odometry update
        """
        return self._estimator.sampleAt(timestamp)

    ######################
    # Pose access / reset

    def get_pose(self) -> Pose2d:
        return self._estimator.getEstimatedPosition()

    def reset(self, pose: Pose2d, heading: Optional[Rotation2d] = None,
              module_positions: Optional[Sequence[SwerveModulePosition]] = None) -> None:
        """
        Hard-seed the estimate and forget all history

        :param pose:             New field pose
        :param heading:          Gyro heading at the time of the reset. Without it the
                                 last gyro reading is assumed to still be current.
        :param module_positions: Module positions at the time of the reset
        """
        if not is_finite_pose(pose):
            logger.warning(f"Ignoring reset to non-finite pose {pose}")
            return

        if heading is not None:
            self._last_heading = heading

        if module_positions is not None:
            self._check_positions(module_positions)
            self._last_positions = tuple(module_positions)

        self._estimator.resetPosition(self._last_heading, self._last_positions, pose)
        self._last_timestamp = None
        self._measurements.clear()

    def reset_rotation(self, rotation: Rotation2d, heading: Optional[Rotation2d] = None,
                       module_positions: Optional[Sequence[SwerveModulePosition]] = None) -> None:
        """
        Keep the estimated position but replace the heading
        """
        self.reset(Pose2d(self.get_pose().translation(), rotation), heading, module_positions)
