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
import dataclasses
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple

from photonlibpy import EstimatedRobotPose, PhotonPoseEstimator
from photonlibpy.targeting import PhotonPipelineResult, PhotonTrackedTarget
from robotpy_apriltag import AprilTagFieldLayout
from wpilib import Field2d
from wpimath.geometry import Pose2d, Transform3d
from wpimath.units import degrees, meters, milliseconds, seconds

from lib_glitch.constants import INVALID_AMBIGUITY, MAX_VISION_AMBIGUITY, MAX_VISION_DISTANCE
from lib_glitch.subsystems.swervedrive.swerveutils import wrap_angle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Measurement:
    """
    A field pose seen by a camera at 'timestamp' (FPGA time, seconds)
    """
    pose: Pose2d
    timestamp: seconds


@dataclass(frozen=True)
class CameraConfig:
    """
    A camera by its PhotonVision name, and where it is mounted on the robot
    """
    name: str
    robot_to_camera: Transform3d


@dataclass(frozen=True)
class VisionConfig:
    cameras: Tuple[CameraConfig, ...]
    max_ambiguity: float = MAX_VISION_AMBIGUITY
    max_distance: meters = MAX_VISION_DISTANCE

    # Simulated camera properties
    width: int = 960
    height: int = 720
    fov: degrees = 90.0
    fps: float = 30.0
    avg_latency: milliseconds = 35.0
    latency_std_dev: milliseconds = 5.0

    def __post_init__(self):
        if not self.cameras:
            raise ValueError("Vision needs at least one camera")

        names = [camera.name for camera in self.cameras]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate camera names: {names}")

        if not (math.isfinite(self.max_ambiguity) and self.max_ambiguity >= 0.0):
            raise ValueError(f"Invalid maximum ambiguity: {self.max_ambiguity}")

        if not (math.isfinite(self.max_distance) and self.max_distance > 0.0):
            raise ValueError(f"Invalid maximum distance: {self.max_distance}")

        if self.width <= 0 or self.height <= 0 or not 0.0 < self.fov < 180.0 or self.fps <= 0.0:
            raise ValueError(f"Invalid simulated camera properties: {self.width}x{self.height}, "
                             f"fov {self.fov}, fps {self.fps}")

        if self.avg_latency < 0.0 or self.latency_std_dev < 0.0:
            raise ValueError("Simulated camera latency must not be negative")


@dataclass
class _CameraPipeline:
    """
    One camera, the pose estimator for its mounting, and the frames it has
    produced that have not been consumed yet
    """
    config: CameraConfig
    camera: Any
    estimator: PhotonPoseEstimator
    pending: List[PhotonPipelineResult] = field(default_factory=list)
    latest: Optional[PhotonPipelineResult] = None

    def poll(self) -> None:
        """
        Non-blocking read of every frame completed since the last poll
        """
        results = self.camera.getAllUnreadResults()
        if results:
            self.pending.extend(results)
            self.latest = results[-1]

    def take(self) -> List[PhotonPipelineResult]:
        results, self.pending = self.pending, []
        return results

    def estimate(self, result: PhotonPipelineResult, target: PhotonTrackedTarget,
                 camera_to_target: Optional[Transform3d] = None) -> Optional[EstimatedRobotPose]:
        """
        Robot pose from a single target of a frame, optionally using another
        camera-to-target solution than the best one
        """
        if camera_to_target is not None:
            target = dataclasses.replace(target, bestCameraToTarget=camera_to_target)

        return self.estimator.estimateLowestAmbiguityPose(dataclasses.replace(result, targets=[target]))


class VisionProvider:
    """
    Turns AprilTag detections from one or more cameras into field pose
    Measurements.

    Detections are dropped when their pose ambiguity is above the configured
    ceiling (or flagged invalid) or when the tag is too far away to be trusted.
    A failure reading one camera or one target only skips that item. Each
    surviving target is turned into a robot pose by a PhotonVision pose
    estimator for the camera's mounting.

    Derived classes supply the camera objects by overriding '_open_camera'. A
    camera must provide 'getAllUnreadResults()' returning photonlibpy pipeline
    results.
    """

    def __init__(self, config: VisionConfig, layout: AprilTagFieldLayout):
        if layout is None:
            raise ValueError("Vision needs an AprilTag field layout")

        self._config = config
        self._layout = layout
        self._pipelines: List[_CameraPipeline] = [_CameraPipeline(camera, self._open_camera(camera),
                                                                  PhotonPoseEstimator(layout, camera.robot_to_camera))
                                                  for camera in config.cameras]
        self._reference_pose = Pose2d()

    def _open_camera(self, camera: CameraConfig) -> Any:
        raise NotImplementedError("Implement in derived class")

    @property
    def config(self) -> VisionConfig:
        return self._config

    @property
    def layout(self) -> AprilTagFieldLayout:
        return self._layout

    @property
    def reference_pose(self) -> Pose2d:
        """
        Pose passed to the most recent 'drain_measurements' call
        """
        return self._reference_pose

    @property
    def debug_field(self) -> Optional[Field2d]:
        """
        Field2d showing what the cameras see, only available in simulation
        """
        return None

    def periodic(self, robot_pose: Pose2d) -> None:
        """
        Advance any simulated vision world to the robot's current pose. Real
        cameras need nothing here.
        """

    def close(self) -> None:
        """
        Release camera resources
        """
        self._pipelines.clear()

    def accepts(self, ambiguity: float, distance: meters) -> bool:
        """
        Is a detection good enough to localize from
        """
        if ambiguity == INVALID_AMBIGUITY or not math.isfinite(ambiguity) or ambiguity > self._config.max_ambiguity:
            return False

        return math.isfinite(distance) and distance < self._config.max_distance

    def drain_measurements(self, reference_pose: Pose2d) -> List[Measurement]:
        """
        Collect measurements from every frame completed since the last call.

        :param reference_pose: Current best estimate of the robot pose, used to pick
                               between the two solutions of an ambiguous tag
        :returns: Surviving measurements from all cameras, oldest first
        """
        self._reference_pose = reference_pose
        measurements: List[Measurement] = []

        for pipeline in self._pipelines:
            try:
                pipeline.poll()
                results = pipeline.take()

            except Exception as e:
                logger.warning(f"Camera {pipeline.config.name}: unable to read results: {e}")
                continue

            for result in results:
                try:
                    targets = list(result.targets)

                except Exception as e:
                    logger.warning(f"Camera {pipeline.config.name}: skipping malformed frame: {e}")
                    continue

                for target in targets:
                    try:
                        measurement = self._measure(pipeline, result, target, reference_pose)

                    except Exception as e:
                        logger.warning(f"Camera {pipeline.config.name}: skipping target: {e}")
                        continue

                    if measurement is not None:
                        measurements.append(measurement)

        measurements.sort(key=lambda measurement: measurement.timestamp)
        return measurements

    def _measure(self, pipeline: _CameraPipeline, result: PhotonPipelineResult, target: PhotonTrackedTarget,
                 reference_pose: Pose2d) -> Optional[Measurement]:
        camera = pipeline.config
        ambiguity = target.poseAmbiguity
        camera_to_target: Transform3d = target.bestCameraToTarget
        distance = camera_to_target.translation().norm()

        if not self.accepts(ambiguity, distance):
            logger.debug(f"Camera {camera.name}: rejected tag {target.fiducialId} "
                         f"(ambiguity {ambiguity}, distance {distance:.2f})")
            return None

        if self._layout.getTagPose(target.fiducialId) is None:
            logger.debug(f"Camera {camera.name}: tag {target.fiducialId} is not on this field")
            return None

        estimate = pipeline.estimate(result, target)
        if estimate is None:
            return None

        candidates = [estimate.estimatedPose.toPose2d()]

        alternate = target.altCameraToTarget
        if alternate != camera_to_target and alternate != Transform3d():
            alternate_estimate = pipeline.estimate(result, target, alternate)
            if alternate_estimate is not None:
                candidates.append(alternate_estimate.estimatedPose.toPose2d())

        return Measurement(self.disambiguate(candidates, reference_pose), estimate.timestampSeconds)

    @staticmethod
    def disambiguate(candidates: Sequence[Pose2d], reference_pose: Pose2d) -> Pose2d:
        """
        Of the possible solutions, the one whose heading agrees best with the
        reference. The first candidate wins ties.
        """
        reference = reference_pose.rotation().radians()

        return min(candidates, key=lambda pose: abs(wrap_angle(pose.rotation().radians() - reference)))

    def best_start_pose(self) -> Optional[Pose2d]:
        """
        Best-effort pose from the single most confident tag currently in view.
        Only meant to seed the pose estimator before it is trusted.

        Frames read here stay queued for the next 'drain_measurements'.
        """
        best: Optional[Tuple[float, Pose2d]] = None

        for pipeline in self._pipelines:
            try:
                pipeline.poll()
                latest = pipeline.latest
                if latest is None:
                    continue

                for target in latest.targets:
                    ambiguity = target.poseAmbiguity
                    if ambiguity == INVALID_AMBIGUITY or not ambiguity >= 0.0:
                        continue

                    if best is not None and ambiguity >= best[0]:
                        continue

                    if self._layout.getTagPose(target.fiducialId) is None:
                        continue

                    estimate = pipeline.estimate(latest, target)
                    if estimate is not None:
                        best = (ambiguity, estimate.estimatedPose.toPose2d())

            except Exception as e:
                logger.warning(f"Camera {pipeline.config.name}: unable to find a start pose: {e}")
                continue

        return best[1] if best is not None else None
