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

from photonlibpy.simulation import PhotonCameraSim, SimCameraProperties, VisionSystemSim
from robotpy_apriltag import AprilTagFieldLayout
from wpilib import Field2d
from wpimath.geometry import Pose2d, Rotation2d

from lib_glitch.subsystems.vision.photonvision import PhotonVisionProvider
from lib_glitch.subsystems.vision.visionprovider import VisionConfig

logger = logging.getLogger(__name__)


class PhotonVisionSimProvider(PhotonVisionProvider):
    """
    Simulation wrapper for the PhotonVision provider. Every camera is backed by a
    simulated camera in one vision world that renders the field's tags from the
    robot pose handed to 'periodic'.
    """

    def __init__(self, config: VisionConfig, layout: Optional[AprilTagFieldLayout] = None):
        super().__init__(config, layout)

        self._vision_sim: VisionSystemSim = VisionSystemSim("main")

        # Add apriltags to the sim
        self._vision_sim.addAprilTags(self.layout)

        for pipeline in self._pipelines:
            properties = SimCameraProperties()
            properties.setCalibrationFromFOV(config.width, config.height, Rotation2d.fromDegrees(config.fov))
            properties.setCalibError(0.25, 0.08)
            properties.setFPS(config.fps)
            properties.setAvgLatency(config.avg_latency / 1000.0)
            properties.setLatencyStdDev(config.latency_std_dev / 1000.0)

            sim_camera = PhotonCameraSim(pipeline.camera, properties, self.layout)

            logger.info(f"Simulating camera {pipeline.config.name}")

            # Finish initialization by adding the camera to the simulation
            self._vision_sim.addCamera(sim_camera, pipeline.config.robot_to_camera)

    @property
    def debug_field(self) -> Optional[Field2d]:
        return self._vision_sim.getDebugField()

    def periodic(self, robot_pose: Pose2d) -> None:
        self._vision_sim.update(robot_pose)
