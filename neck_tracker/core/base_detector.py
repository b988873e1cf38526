"""Base class for face landmark detectors."""

from abc import ABC, abstractmethod
from typing import Optional, Union
import numpy as np
import torch


class BaseDetector(ABC):
    """
    Abstract base class for the perception collaborator.

    A detector produces one landmark frame per detection cycle: an (N, 3)
    tensor with x, y normalized to [0, 1] and a relative depth z, or None
    when no face is found.
    """

    @abstractmethod
    def detect(self, image: Union[np.ndarray, torch.Tensor]) -> Optional[torch.Tensor]:
        """
        Detect landmarks in the given image.

        Args:
            image: Input image (H, W, 3) in RGB format

        Returns:
            Landmarks as torch tensor (N, 3), or None if no face was detected
        """
        pass

    def close(self) -> None:
        """Release detector resources."""

    def postprocess_landmarks(self, landmarks: Union[np.ndarray, torch.Tensor]) -> torch.Tensor:
        """
        Convert raw normalized landmarks to a float32 tensor.

        Args:
            landmarks: Raw landmarks from the detector

        Returns:
            Landmarks as float torch tensor
        """
        if isinstance(landmarks, np.ndarray):
            landmarks = torch.from_numpy(landmarks)
        return landmarks.float()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
