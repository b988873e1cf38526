"""Base class for landmark to joint rotation estimation."""

from abc import ABC, abstractmethod
from typing import Optional
import torch

from .config import EstimatorConfig
from .constants import SUPPORTED_LANDMARK_COUNTS, COORDINATE_TOLERANCE
from .exceptions import InvalidLandmarksError
from .types import PoseAngles


def validate_landmarks(landmarks: object) -> torch.Tensor:
    """
    Check that a landmark frame is well formed.

    Args:
        landmarks: Candidate landmark frame

    Returns:
        The same tensor, so the call can be used inline

    Raises:
        InvalidLandmarksError: If the frame has the wrong type, shape or
            landmark count, holds non-finite values, or has x/y coordinates
            far outside the normalized [0, 1] range
    """
    if not isinstance(landmarks, torch.Tensor):
        raise InvalidLandmarksError(f"Landmarks must be a torch.Tensor, got {type(landmarks).__name__}")
    if landmarks.ndim != 2 or landmarks.shape[1] != 3:
        raise InvalidLandmarksError(f"Landmarks must have shape (N, 3), got {tuple(landmarks.shape)}")
    if landmarks.shape[0] not in SUPPORTED_LANDMARK_COUNTS:
        raise InvalidLandmarksError(
            f"Expected {' or '.join(map(str, SUPPORTED_LANDMARK_COUNTS))} landmarks, got {landmarks.shape[0]}"
        )
    if not landmarks.is_floating_point():
        raise InvalidLandmarksError(f"Landmarks must be floating point, got {landmarks.dtype}")
    if not torch.isfinite(landmarks).all():
        raise InvalidLandmarksError("Landmarks contain NaN or infinite values")

    xy = landmarks[:, :2]
    if (xy < -COORDINATE_TOLERANCE).any() or (xy > 1 + COORDINATE_TOLERANCE).any():
        raise InvalidLandmarksError("Landmark x/y coordinates are not normalized to [0, 1]")

    return landmarks


class BaseHeadPoseEstimator(ABC):
    """
    Abstract base class for estimating joint rotation from landmarks.

    Estimators hold configuration only. The previous frame's angles are
    passed in by the caller on every call.
    """

    def __init__(self, config: Optional[EstimatorConfig] = None):
        """
        Initialize the estimator.

        Args:
            config: Tuning values, defaults to EstimatorConfig()
        """
        self.config = config or EstimatorConfig()

    @abstractmethod
    def estimate(self,
                 landmarks: Optional[torch.Tensor],
                 previous: Optional[PoseAngles] = None) -> PoseAngles:
        """
        Estimate smoothed joint rotation for one frame.

        Args:
            landmarks: Landmark coordinates (N, 3) in [0, 1] space, or None
                       when no face was detected
            previous: Angles returned for the previous frame

        Returns:
            New pose angles
        """
        pass

    def preprocess_landmarks(self, landmarks: torch.Tensor) -> torch.Tensor:
        """
        Convert [0, 1] normalized coordinates to the signed [-1, 1] range.
        The depth axis is kept as-is.

        Args:
            landmarks: Landmark coordinates in [0, 1] range

        Returns:
            Landmarks in [-1, 1] range for angle calculations
        """
        normalized = landmarks.clone()
        normalized[..., 0] = landmarks[..., 0] * 2 - 1  # x coordinates
        normalized[..., 1] = landmarks[..., 1] * 2 - 1  # y coordinates
        return normalized

    @staticmethod
    def _smooth(previous: torch.Tensor, target: torch.Tensor, factor: float) -> torch.Tensor:
        """Move `factor` of the way from previous to target (exponential smoothing)."""
        return torch.lerp(previous, target, factor)

    @staticmethod
    def _clamp_symmetric(value: torch.Tensor, limit: float) -> torch.Tensor:
        """Clamp to [-limit, limit], exactly, in the precision of `value`."""
        bound = value.new_tensor(limit)
        # float32 rounds pi/4 and pi/3 up, step back to the largest value inside
        if bound.item() > limit:
            bound = torch.nextafter(bound, torch.zeros_like(bound))
        return torch.clamp(value, -bound, bound)
