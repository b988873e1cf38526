"""Estimator implementations for landmark to joint rotation conversion."""

from .head_pose_estimator import HeadPoseEstimator

__all__ = [
    "HeadPoseEstimator",
]
