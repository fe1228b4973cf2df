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

from photonlibpy import PhotonCamera
from robotpy_apriltag import AprilTagFieldLayout

from lib_glitch.subsystems.vision.visionprovider import CameraConfig, VisionConfig, VisionProvider
from lib_glitch.util.field import load_field_layout

logger = logging.getLogger(__name__)


class PhotonVisionProvider(VisionProvider):
    """
    Coprocessor cameras running PhotonVision, reached over NetworkTables
    """

    def __init__(self, config: VisionConfig, layout: Optional[AprilTagFieldLayout] = None):
        super().__init__(config, layout if layout is not None else load_field_layout())

    def _open_camera(self, camera: CameraConfig) -> PhotonCamera:
        logger.info(f"Opening PhotonVision camera {camera.name}")
        return PhotonCamera(camera.name)
