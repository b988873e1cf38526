"""
Neck Tracker Package

Estimates head pitch and yaw from MediaPipe face landmarks and drives the
neck joint of an animated avatar, frame by frame.
"""

__version__ = "1.0.0"

from .core.config import EstimatorConfig
from .core.exceptions import ConfigError, InvalidLandmarksError
from .core.types import PoseAngles
from .drivers.bone_driver import BoneRotationDriver
from .drivers.json_driver import JsonExportDriver
from .estimators.head_pose_estimator import HeadPoseEstimator
from .processors.data_exporter import DataExporter
from .processors.data_loader import DataLoader
from .processors.frame_slot import DetectionLoop, LatestFrameSlot
from .processors.input_utils import InputType, detect_input_type
from .processors.tracker import FrameData, NeckTracker

__all__ = [
    "BoneRotationDriver",
    "ConfigError",
    "DataExporter",
    "DataLoader",
    "DetectionLoop",
    "EstimatorConfig",
    "FrameData",
    "HeadPoseEstimator",
    "InputType",
    "InvalidLandmarksError",
    "JsonExportDriver",
    "LatestFrameSlot",
    "NeckTracker",
    "PoseAngles",
    "detect_input_type",
]
