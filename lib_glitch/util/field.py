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
import os
from typing import Optional

from robotpy_apriltag import AprilTagField, AprilTagFieldLayout
from wpilib import getDeployDirectory

# Setup Logging
logger = logging.getLogger(__name__)

# Fallback JSON files (under <deploy>/fields/apriltags) keyed by AprilTagField
# name, for fields that the installed robotpy_apriltag does not ship with
FIELD_FILES = {
    "k2025ReefscapeWelded": "2025-reefscape-welded.json",
    "k2025ReefscapeAndyMark": "2025-reefscape-andymark.json",
}


def load_field_layout(field: AprilTagField = AprilTagField.kDefaultField,
                      deploy_directory: Optional[str] = None) -> Optional[AprilTagFieldLayout]:
    """
    Load the AprilTag layout for a field. The layouts shipped with robotpy_apriltag
    are tried first, then a JSON file from the deploy directory.

    :returns: The layout, or None if neither source could supply one
    """
    try:
        # Get from library first
        layout = AprilTagFieldLayout.loadField(field)
        logger.info(f"AprilTagLayout loaded for field {field}")
        return layout

    except Exception as e:
        logger.warning(f"AprilTagLayout for field {field} not available from library: {e}")

    # Fallback to directory load method
    april_tag_dir = os.path.join(deploy_directory or getDeployDirectory(), 'fields', 'apriltags')

    if not os.path.isdir(april_tag_dir) or not os.access(april_tag_dir, os.R_OK):
        logger.warning(f"AprilTag directory {april_tag_dir} does not exist or is not accessible")
        return None

    filename = FIELD_FILES.get(field.name)
    if not filename:
        logger.warning(f"No AprilTag JSON file known for field {field}")
        return None

    file_path = os.path.join(april_tag_dir, filename)
    try:
        layout = AprilTagFieldLayout(file_path)
        logger.info(f"AprilTagLayout field {field} loaded from {file_path}")
        return layout

    except Exception as _e:
        logger.warning(f"AprilTag JSON {file_path} does not exist or is not valid")

    return None
