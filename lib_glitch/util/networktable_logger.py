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

from typing import Dict, Optional, Sequence

from ntcore import NetworkTable, NetworkTableInstance
from wpimath.geometry import Pose2d, Pose3d
from wpimath.kinematics import ChassisSpeeds, SwerveModuleState


class NetworkTableLogger:
    """
    Write-only telemetry for a subsystem. Values land in a NetworkTable named after
    the subsystem and can be viewed with AdvantageScope, Glass, Elastic, etc.

    Publishers are created the first time a key is logged and reused afterward.
    """

    def __init__(self, subsystem: str, instance: Optional[NetworkTableInstance] = None) -> None:
        inst = instance or NetworkTableInstance.getDefault()

        self._table: NetworkTable = inst.getTable(subsystem)
        self._publishers: Dict[str, object] = {}

    @property
    def table(self) -> NetworkTable:
        return self._table

    def _publisher(self, key: str, create):
        publisher = self._publishers.get(key)
        if publisher is None:
            publisher = create()
            self._publishers[key] = publisher

        return publisher

    def log_double(self, key: str, value: float) -> None:
        self._publisher(key, lambda: self._table.getDoubleTopic(key).publish()).set(value)

    def log_int(self, key: str, value: int) -> None:
        self._publisher(key, lambda: self._table.getIntegerTopic(key).publish()).set(value)

    def log_boolean(self, key: str, value: bool) -> None:
        self._publisher(key, lambda: self._table.getBooleanTopic(key).publish()).set(value)

    def log_string(self, key: str, value: str) -> None:
        self._publisher(key, lambda: self._table.getStringTopic(key).publish()).set(value)

    def log_pose2d(self, key: str, pose: Pose2d) -> None:
        self._publisher(key, lambda: self._table.getStructTopic(key, Pose2d).publish()).set(pose)

    def log_pose3d(self, key: str, pose: Pose3d) -> None:
        self._publisher(key, lambda: self._table.getStructTopic(key, Pose3d).publish()).set(pose)

    def log_chassis_speeds(self, key: str, speeds: ChassisSpeeds) -> None:
        self._publisher(key, lambda: self._table.getStructTopic(key, ChassisSpeeds).publish()).set(speeds)

    def log_module_states(self, key: str, states: Sequence[SwerveModuleState]) -> None:
        self._publisher(key,
                        lambda: self._table.getStructArrayTopic(key, SwerveModuleState).publish()).set(list(states))
