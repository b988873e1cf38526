"""Joint drivers that hold or record the neck rotation."""

from typing import Dict, List, Optional

from ..core.base_joint_driver import BaseJointDriver
from ..core.constants import NECK_JOINT
from ..core.types import PoseAngles


class BoneRotationDriver(BaseJointDriver):
    """
    Keeps the current local Euler rotation of one bone.

    Rendering code reads `rotation` each frame and copies it onto the
    bone node. Every apply() overwrites the rotation (absolute, not
    additive); roll is always zero.
    """

    def __init__(self, joint_name: str = NECK_JOINT, keep_history: bool = False):
        """
        Args:
            joint_name: Humanoid bone the rotation belongs to
            keep_history: Record every applied rotation in `history`
        """
        self.joint_name = joint_name
        self.keep_history = keep_history
        self.rotation: Dict[str, float] = {"x": 0.0, "y": 0.0, "z": 0.0}
        self.history: List[PoseAngles] = []
        self.frames_applied = 0

    def apply(self, angles: PoseAngles) -> None:
        pitch, yaw = angles.to_tuple()
        self.rotation = {"x": pitch, "y": yaw, "z": 0.0}
        self.frames_applied += 1
        if self.keep_history:
            self.history.append(angles.clone())

    @property
    def last_angles(self) -> Optional[PoseAngles]:
        return self.history[-1] if self.history else None

    def close(self) -> None:
        self.history.clear()
