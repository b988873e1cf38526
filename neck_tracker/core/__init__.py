"""Core components for neck-tracker package."""

from .base_detector import BaseDetector
from .base_estimator import BaseHeadPoseEstimator, validate_landmarks
from .base_frame_reader import BaseFrameReader
from .base_joint_driver import BaseJointDriver
from .config import EstimatorConfig
from .exceptions import ConfigError, InvalidLandmarksError
from .types import PoseAngles

__all__ = [
    "BaseDetector",
    "BaseFrameReader",
    "BaseHeadPoseEstimator",
    "BaseJointDriver",
    "ConfigError",
    "EstimatorConfig",
    "InvalidLandmarksError",
    "PoseAngles",
    "validate_landmarks",
]
