"""Type definitions for head pose angles."""

from dataclasses import dataclass
from typing import Dict, Tuple, Union
import torch


@dataclass
class PoseAngles:
    """
    Smoothed rotation of the tracked neck joint.
    Values are scalar torch tensors in radians so they stay on the device of
    the landmarks they were computed from.
    """

    pitch: torch.Tensor  # Up-down rotation (local x axis)
    yaw: torch.Tensor    # Left-right rotation (local y axis)

    @classmethod
    def create_neutral(cls,
                       device: Union[str, torch.device] = 'cpu',
                       dtype: torch.dtype = torch.float32) -> 'PoseAngles':
        """
        Create the neutral (0, 0) pose.

        Args:
            device: Device to create tensors on
            dtype: Floating point type of the angles

        Returns:
            PoseAngles with zero rotation on both axes
        """
        return cls(
            pitch=torch.tensor(0.0, device=device, dtype=dtype),
            yaw=torch.tensor(0.0, device=device, dtype=dtype),
        )

    @classmethod
    def from_floats(cls, pitch: float, yaw: float,
                    device: Union[str, torch.device] = 'cpu') -> 'PoseAngles':
        """Build angles from plain Python floats."""
        return cls(
            pitch=torch.tensor(float(pitch), device=device),
            yaw=torch.tensor(float(yaw), device=device),
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert angles to plain floats for export or a rendering API."""
        return {
            "pitch": self.pitch.item(),
            "yaw": self.yaw.item(),
        }

    def to_tuple(self) -> Tuple[float, float]:
        """Return (pitch, yaw) as Python floats."""
        return self.pitch.item(), self.yaw.item()

    def is_finite(self) -> bool:
        """True when neither angle is NaN or infinite."""
        return bool(torch.isfinite(self.pitch).item() and torch.isfinite(self.yaw).item())

    def is_neutral(self) -> bool:
        return self.pitch.item() == 0.0 and self.yaw.item() == 0.0

    def clone(self) -> 'PoseAngles':
        """Create a deep copy of the angles."""
        return PoseAngles(pitch=self.pitch.clone(), yaw=self.yaw.clone())
