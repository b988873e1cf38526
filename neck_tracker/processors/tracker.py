"""Per-frame tracking session driving the neck joint."""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union
import numpy as np
import torch

from ..core.base_detector import BaseDetector
from ..core.base_estimator import BaseHeadPoseEstimator
from ..core.base_joint_driver import BaseJointDriver
from ..core.exceptions import InvalidLandmarksError
from ..core.types import PoseAngles
from ..estimators.head_pose_estimator import HeadPoseEstimator
from .frame_slot import LatestFrameSlot
from .stream_utils import is_iterator

logger = logging.getLogger(__name__)


@dataclass
class FrameData:
    """Data for a single frame in the tracking session."""
    frame_idx: int
    landmarks: Optional[torch.Tensor] = None
    angles: Optional[PoseAngles] = None
    tracking: bool = False  # False when the neutral fallback was applied


class NeckTracker:
    """
    Owns the smoothing state of one tracking session.

    Every update runs the estimator with the previous angles, stores the
    result for the next frame and hands it to the joint driver. A missing or
    malformed frame resets the joint to the neutral pose instead of
    interrupting the session.

    Not thread-safe: call from the render/update loop only.
    """

    def __init__(self,
                 estimator: Optional[BaseHeadPoseEstimator] = None,
                 driver: Optional[BaseJointDriver] = None,
                 detector: Optional[BaseDetector] = None):
        """
        Initialize the session.

        Args:
            estimator: Landmark to rotation estimator, HeadPoseEstimator() by default
            driver: Consumer of the resulting angles
            detector: Detector used by process() for image input
        """
        self.estimator = estimator or HeadPoseEstimator()
        self.driver = driver
        self.detector = detector

        self.angles: PoseAngles = PoseAngles.create_neutral()
        self.frame_idx = 0
        self.rejected_frames = 0
        self._tracking = False

    @property
    def is_tracking(self) -> bool:
        """True while the last frame produced tracked (non-fallback) angles."""
        return self._tracking

    def update(self, landmarks: Optional[torch.Tensor]) -> FrameData:
        """
        Advance the session by one frame.

        Args:
            landmarks: Landmark frame from the detector, or None

        Returns:
            FrameData with the angles applied for this frame
        """
        result = FrameData(frame_idx=self.frame_idx, landmarks=landmarks)

        if landmarks is not None:
            try:
                result.angles = self.estimator.estimate(landmarks, self.angles)
                result.tracking = True
            except InvalidLandmarksError as e:
                self.rejected_frames += 1
                logger.warning("Frame %d rejected, resetting to neutral pose: %s", self.frame_idx, e)

        if result.angles is None:
            result.angles = self.estimator.estimate(None, self.angles)

        if self._tracking != result.tracking:
            logger.debug("Frame %d: %s", self.frame_idx, "tracking" if result.tracking else "neutral")

        self.angles = result.angles
        self._tracking = result.tracking
        self.frame_idx += 1

        if self.driver is not None:
            self.driver.apply(result.angles)

        return result

    def update_from_slot(self, slot: LatestFrameSlot) -> FrameData:
        """
        Advance the session using the latest published detection.

        A result that was already consumed is applied again, so the joint
        keeps converging while detection lags behind rendering.

        Args:
            slot: Slot written by a DetectionLoop

        Returns:
            FrameData for this render frame
        """
        latest = slot.latest()
        if latest is None:
            return self.update(None)
        return self.update(latest.landmarks)

    def process(self,
                input_data: Union[np.ndarray, Iterator[np.ndarray], List[np.ndarray]]
                ) -> Union[FrameData, Iterator[FrameData], List[FrameData]]:
        """
        Detect and track on images.

        Args:
            input_data: RGB frame(s) - single array, list, or iterator

        Returns:
            - Single frame: FrameData
            - Iterator input: iterator of FrameData
            - List input: list of FrameData
        """
        if self.detector is None:
            raise ValueError("process() requires a detector")

        if isinstance(input_data, (np.ndarray, torch.Tensor)):
            return self.update(self.detector.detect(input_data))
        elif is_iterator(input_data):
            return (self.update(self.detector.detect(frame)) for frame in input_data)
        else:
            return [self.update(self.detector.detect(frame)) for frame in input_data]

    def track(self,
              landmark_frames: Union[Iterator[Optional[torch.Tensor]], List[Optional[torch.Tensor]]]
              ) -> Union[Iterator[FrameData], List[FrameData]]:
        """
        Track over already detected landmark frames.

        Args:
            landmark_frames: Landmark frames (None for no face) - list or iterator

        Returns:
            Iterator or list of FrameData, matching the input
        """
        if is_iterator(landmark_frames):
            return (self.update(landmarks) for landmarks in landmark_frames)
        return [self.update(landmarks) for landmarks in landmark_frames]

    def reset(self) -> None:
        """Return to the neutral pose and clear counters."""
        self.angles = PoseAngles.create_neutral()
        self.frame_idx = 0
        self.rejected_frames = 0
        self._tracking = False
