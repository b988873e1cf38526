"""Joint driver that streams angles to a JSON recording."""

from typing import Any, Dict, Optional

from ..core.base_joint_driver import BaseJointDriver
from ..core.constants import NECK_JOINT
from ..core.types import PoseAngles
from ..processors.data_exporter import DataExporter


class JsonExportDriver(BaseJointDriver):
    """
    Writes one {"pitch": ..., "yaw": ...} entry per frame so a session can
    be replayed onto an avatar later (see DataLoader.load_angles).
    """

    def __init__(self,
                 output_path: str,
                 fps: float = 30.0,
                 joint_name: str = NECK_JOINT,
                 extra_metadata: Optional[Dict[str, Any]] = None):
        """
        Args:
            output_path: Output JSON file path
            fps: Frame rate of the recorded session
            joint_name: Bone the angles are meant for
            extra_metadata: Additional scalar metadata, e.g. estimator settings
        """
        metadata: Dict[str, Any] = {"fps": fps, "joint": joint_name, "units": "radians"}
        metadata.update(extra_metadata or {})
        self.exporter = DataExporter(output_path, metadata)
        self.exporter.open()

    def apply(self, angles: PoseAngles) -> None:
        self.exporter.write_item(angles.to_dict())

    @property
    def frame_count(self) -> int:
        return self.exporter.frame_count

    def close(self) -> None:
        self.exporter.close()
