"""Pitch and yaw estimation from MediaPipe face landmarks."""

from typing import Iterable, Iterator, List, Optional, Union
import torch

from ..core.base_estimator import BaseHeadPoseEstimator, validate_landmarks
from ..core.constants import LANDMARK_POINTS
from ..core.exceptions import InvalidLandmarksError
from ..core.types import PoseAngles
from ..processors.stream_utils import is_iterator


class HeadPoseEstimator(BaseHeadPoseEstimator):
    """
    Maps face landmarks to the pitch and yaw of an avatar neck joint.

    Pitch comes from where the nose tip sits between forehead and chin, yaw
    from the depth difference between the two ears. Both are clamped to a
    fixed range and smoothed against the previous frame. A frame without
    landmarks resets the joint to the neutral pose immediately.

    The estimator keeps no per-frame state: the caller passes the previous
    angles in and stores the returned ones.
    """

    def estimate(self,
                 landmarks: Optional[torch.Tensor],
                 previous: Optional[PoseAngles] = None) -> PoseAngles:
        """
        Estimate smoothed pitch and yaw for a single frame.

        Args:
            landmarks: Landmarks (N, 3) with x, y in [0, 1] and relative z,
                       or None when no face was detected
            previous: Angles from the previous frame, neutral if None

        Returns:
            Smoothed angles, or the neutral pose when landmarks is None

        Raises:
            InvalidLandmarksError: If the frame is malformed or the angles
                would not be finite
        """
        if landmarks is None:
            # Reset straight to neutral, no smoothing
            if previous is not None:
                return PoseAngles.create_neutral(previous.pitch.device, previous.pitch.dtype)
            return PoseAngles.create_neutral()

        target = self.target_angles(landmarks)

        previous_pitch = self._previous_value(previous.pitch if previous is not None else 0.0, landmarks)
        previous_yaw = self._previous_value(previous.yaw if previous is not None else 0.0, landmarks)

        pitch = self._smooth(previous_pitch, target.pitch, self.config.pitch_smoothing)
        yaw = self._smooth(previous_yaw, target.yaw, self.config.yaw_smoothing)

        # Keep the range invariant even for an out-of-range previous state
        angles = PoseAngles(
            pitch=self._clamp_symmetric(pitch, self.config.pitch_range),
            yaw=self._clamp_symmetric(yaw, self.config.yaw_range),
        )
        if not angles.is_finite():
            raise InvalidLandmarksError("Landmarks produced a non-finite rotation")
        return angles

    def estimate_stream(self,
                        input_data: Union[Iterable[Optional[torch.Tensor]], Iterator[Optional[torch.Tensor]]],
                        initial: Optional[PoseAngles] = None) -> Union[Iterator[PoseAngles], List[PoseAngles]]:
        """
        Estimate angles for a sequence of frames, threading the previous
        angles from one frame into the next.

        Args:
            input_data: List or iterator of landmark frames (None for no face)
            initial: Angles before the first frame, neutral if None

        Returns:
            - Iterator input: iterator of PoseAngles
            - List input: list of PoseAngles
        """
        if is_iterator(input_data):
            return self._stream(input_data, initial)
        return list(self._stream(iter(input_data), initial))

    def _stream(self,
                frames: Iterator[Optional[torch.Tensor]],
                initial: Optional[PoseAngles]) -> Iterator[PoseAngles]:
        previous = initial
        for landmarks in frames:
            previous = self.estimate(landmarks, previous)
            yield previous

    def target_angles(self, landmarks: torch.Tensor) -> PoseAngles:
        """
        Unsmoothed angles for a frame: the fixed point that repeated
        estimation on the same frame converges to.

        Args:
            landmarks: Landmarks (N, 3) in [0, 1] space

        Returns:
            Amplified, clamped and axis-corrected pitch and yaw

        Raises:
            InvalidLandmarksError: If the frame is malformed
        """
        normalized = self.preprocess_landmarks(validate_landmarks(landmarks))
        return PoseAngles(
            pitch=self._calculate_pitch(normalized),
            yaw=self._calculate_yaw(normalized),
        )

    def _calculate_pitch(self, landmarks: torch.Tensor) -> torch.Tensor:
        """
        Calculate vertical rotation from nose tip deviation.

        Args:
            landmarks: Landmarks in [-1, 1] space

        Returns:
            Pitch angle in radians within ±pitch_range
        """
        nose = landmarks[LANDMARK_POINTS["nose_tip"]]
        forehead = landmarks[LANDMARK_POINTS["forehead"]]
        chin = landmarks[LANDMARK_POINTS["chin"]]

        face_center_y = (forehead[1] + chin[1]) / 2
        vertical_deviation = nose[1] - face_center_y
        face_height = chin[1] - forehead[1]

        # Degenerate face height: divide by a signed epsilon so the ratio saturates
        eps = face_height.new_tensor(self.config.min_face_height)
        safe_height = torch.where(face_height.abs() < eps, torch.copysign(eps, face_height), face_height)

        vertical_ratio = torch.clamp(vertical_deviation / safe_height, -1.0, 1.0)
        angle = torch.asin(vertical_ratio)

        angle = angle * self.config.amplification
        angle = self._clamp_symmetric(angle, self.config.pitch_range)
        # Landmark y grows downwards, the joint's x rotation does not
        return -angle

    def _calculate_yaw(self, landmarks: torch.Tensor) -> torch.Tensor:
        """
        Calculate horizontal rotation from the ear-to-ear vector.

        Args:
            landmarks: Landmarks in [-1, 1] space

        Returns:
            Yaw angle in radians within ±yaw_range
        """
        left_ear = landmarks[LANDMARK_POINTS["left_ear"]]
        right_ear = landmarks[LANDMARK_POINTS["right_ear"]]

        ear_vector = right_ear - left_ear

        # Angle of the ear axis out of the camera plane
        angle = torch.atan2(ear_vector[2], ear_vector[0])
        angle = -angle  # Right-handed joint rotation
        return self._clamp_symmetric(angle, self.config.yaw_range)

    @staticmethod
    def _previous_value(value: Union[float, torch.Tensor], reference: torch.Tensor) -> torch.Tensor:
        return torch.as_tensor(value, dtype=reference.dtype, device=reference.device)
