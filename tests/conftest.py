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
from typing import Dict, List, Optional

import pytest
from commands2 import CommandScheduler
from ntcore import NetworkTableInstance
from photonlibpy.targeting import PhotonPipelineResult, PhotonTrackedTarget
from wpimath.geometry import Pose2d, Pose3d, Rotation3d, Transform3d

from lib_glitch.constants import RobotModes
from lib_glitch.subsystems.gyro.sim_gyro import SimGyro
from lib_glitch.subsystems.swervedrive.constants import DriveConfig, SwerveModuleConfigParams
from lib_glitch.subsystems.swervedrive.drivesubsystem import DriveSubsystem, sim_motors
from lib_glitch.subsystems.swervedrive.kinematics import MODULE_NAMES, SwerveGeometry
from lib_glitch.subsystems.vision.visionprovider import CameraConfig, VisionConfig, VisionProvider
from lib_glitch.util.networktable_logger import NetworkTableLogger

SQUARE_SIDE = 0.6
MAX_SPEED = 4.5
TAG_POSES = {
    1: Pose3d(5.0, 0.0, 0.5, Rotation3d(0.0, 0.0, math.pi)),
    2: Pose3d(2.0, 3.0, 0.5, Rotation3d(0.0, 0.0, -math.pi / 2)),
}


class FakeClock:
    """
    Stand in for the FPGA clock, only moves when told to
    """

    def __init__(self, start: float = 10.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 0.02) -> float:
        self.now += seconds
        return self.now


def make_target(fiducial_id: int, camera_to_target: Transform3d, ambiguity: float = 0.05,
                alternate: Optional[Transform3d] = None) -> PhotonTrackedTarget:
    return PhotonTrackedTarget(fiducialId=fiducial_id,
                               bestCameraToTarget=camera_to_target,
                               altCameraToTarget=alternate if alternate is not None else camera_to_target,
                               poseAmbiguity=ambiguity)


def make_result(timestamp: float, targets: List[PhotonTrackedTarget]) -> PhotonPipelineResult:
    """
    A frame received at 'timestamp' with no reported latency
    """
    return PhotonPipelineResult(ntReceiveTimestampMicros=round(timestamp * 1e6), targets=list(targets))


class FakeCamera:
    def __init__(self, name: str):
        self.name = name
        self.frames: List[PhotonPipelineResult] = []
        self.fail = False

    def getAllUnreadResults(self) -> List[PhotonPipelineResult]:
        if self.fail:
            raise RuntimeError(f"{self.name} disconnected")

        frames, self.frames = self.frames, []
        return frames


class FakeLayout:
    def __init__(self, tags: Dict[int, Pose3d]):
        self._tags = tags

    def getTagPose(self, tag_id: int) -> Optional[Pose3d]:
        return self._tags.get(tag_id)


class FakeVisionProvider(VisionProvider):
    def __init__(self, config: VisionConfig, layout: FakeLayout):
        self.periodic_poses: List[Pose2d] = []
        super().__init__(config, layout)

    def periodic(self, robot_pose: Pose2d) -> None:
        self.periodic_poses.append(robot_pose)

    def _open_camera(self, camera: CameraConfig) -> FakeCamera:
        return FakeCamera(camera.name)

    def camera(self, name: str) -> FakeCamera:
        return next(pipeline.camera for pipeline in self._pipelines if pipeline.config.name == name)


def camera_to_tag(robot_pose: Pose2d, tag_id: int, robot_to_camera: Transform3d = Transform3d()) -> Transform3d:
    """
    What a camera mounted at 'robot_to_camera' sees of a tag when the robot is at 'robot_pose'
    """
    camera_pose = Pose3d(robot_pose).transformBy(robot_to_camera)
    return Transform3d(camera_pose, TAG_POSES[tag_id])


@pytest.fixture(autouse=True)
def command_scheduler():
    yield CommandScheduler.getInstance()
    CommandScheduler.resetInstance()


@pytest.fixture
def nt_instance():
    instance = NetworkTableInstance.create()
    yield instance
    NetworkTableInstance.destroy(instance)


@pytest.fixture
def telemetry(nt_instance) -> NetworkTableLogger:
    return NetworkTableLogger("Drive", nt_instance)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def square_geometry() -> SwerveGeometry:
    return SwerveGeometry.rectangular(SQUARE_SIDE, SQUARE_SIDE)


@pytest.fixture
def drive_config(square_geometry) -> DriveConfig:
    return DriveConfig(square_geometry,
                       tuple(SwerveModuleConfigParams(name, 2 * index + 1, 2 * index + 2)
                             for index, name in enumerate(MODULE_NAMES)),
                       max_speed=MAX_SPEED)


@pytest.fixture
def vision_config() -> VisionConfig:
    return VisionConfig((CameraConfig("front", Transform3d()),
                         CameraConfig("rear", Transform3d())))


@pytest.fixture
def vision(vision_config) -> FakeVisionProvider:
    return FakeVisionProvider(vision_config, FakeLayout(TAG_POSES))


@pytest.fixture
def make_drive(drive_config, telemetry, clock):
    """
    Build a simulated drive. Keyword arguments override the defaults.
    """

    def _make(**kwargs) -> DriveSubsystem:
        options = dict(config=drive_config, mode=RobotModes.SIMULATION, gyro=SimGyro(),
                       motor_factory=sim_motors, telemetry=telemetry, clock=clock)
        options.update(kwargs)
        return DriveSubsystem(**options)

    return _make


@pytest.fixture
def fake_target():
    return make_target


@pytest.fixture
def fake_result():
    return make_result


@pytest.fixture
def tag_view():
    return camera_to_tag


@pytest.fixture
def make_vision():
    """
    Build a vision provider with fake cameras for a custom configuration
    """

    def _make(config: VisionConfig) -> FakeVisionProvider:
        return FakeVisionProvider(config, FakeLayout(TAG_POSES))

    return _make
