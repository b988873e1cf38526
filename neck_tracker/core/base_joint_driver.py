"""Base interface for the animation side that consumes joint rotations."""

from abc import ABC, abstractmethod

from .types import PoseAngles


class BaseJointDriver(ABC):
    """
    Abstract base class for the animation collaborator.

    A driver receives one PoseAngles per frame and applies it as the
    absolute (not additive) local rotation of a single joint: pitch on the
    joint's x axis, yaw on its y axis.
    """

    @abstractmethod
    def apply(self, angles: PoseAngles) -> None:
        """
        Apply the rotation for the current frame.

        Args:
            angles: Absolute joint rotation in radians
        """
        pass

    def close(self) -> None:
        """Release driver resources."""

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with automatic cleanup."""
        self.close()
