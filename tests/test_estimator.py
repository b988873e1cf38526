"""Tests for HeadPoseEstimator."""

import math

import pytest
import torch

from neck_tracker import EstimatorConfig, HeadPoseEstimator, InvalidLandmarksError, PoseAngles
from neck_tracker.core.constants import LANDMARK_POINTS

from conftest import TILTED_AND_TURNED_FACE, make_landmarks

# Nose 1/6 of the face height below the face center
TILTED_PITCH_TARGET = -math.asin(1 / 6) * 1.2
# Ear vector (1.2, dz=-0.2) in signed space, inverted
TURNED_YAW_TARGET = math.atan2(0.2, 1.2)


class TestPreprocess:
    def test_maps_xy_to_signed_range(self):
        estimator = HeadPoseEstimator()
        landmarks = torch.tensor([[0.0, 1.0, 0.3], [0.5, 0.25, -0.2]])

        result = estimator.preprocess_landmarks(landmarks)

        assert torch.allclose(result, torch.tensor([[-1.0, 1.0, 0.3], [0.0, -0.5, -0.2]]))

    def test_does_not_modify_input(self):
        estimator = HeadPoseEstimator()
        landmarks = torch.tensor([[0.25, 0.75, 0.1]])

        estimator.preprocess_landmarks(landmarks)

        assert torch.equal(landmarks, torch.tensor([[0.25, 0.75, 0.1]]))


class TestTargetAngles:
    def test_frontal_face_is_neutral(self, frontal_landmarks):
        target = HeadPoseEstimator().target_angles(frontal_landmarks)

        assert target.pitch.item() == pytest.approx(0.0, abs=1e-6)
        assert target.yaw.item() == pytest.approx(0.0, abs=1e-6)

    def test_nose_below_center_gives_negative_pitch(self, tilted_landmarks):
        target = HeadPoseEstimator().target_angles(tilted_landmarks)

        assert target.pitch.item() < 0
        assert target.pitch.item() == pytest.approx(TILTED_PITCH_TARGET, abs=1e-6)

    def test_nose_above_center_gives_positive_pitch(self):
        landmarks = make_landmarks({**TILTED_AND_TURNED_FACE, "nose_tip": (0.5, 0.5, 0.0)})

        target = HeadPoseEstimator().target_angles(landmarks)

        assert target.pitch.item() == pytest.approx(math.asin(1 / 6) * 1.2, abs=1e-6)

    def test_right_ear_closer_gives_positive_yaw(self, tilted_landmarks):
        target = HeadPoseEstimator().target_angles(tilted_landmarks)

        assert target.yaw.item() > 0
        assert target.yaw.item() == pytest.approx(TURNED_YAW_TARGET, abs=1e-6)

    def test_left_ear_closer_gives_negative_yaw(self):
        landmarks = make_landmarks({
            **TILTED_AND_TURNED_FACE,
            "left_ear": (0.2, 0.5, -0.1),
            "right_ear": (0.8, 0.5, 0.1),
        })

        target = HeadPoseEstimator().target_angles(landmarks)

        assert target.yaw.item() == pytest.approx(-TURNED_YAW_TARGET, abs=1e-6)

    def test_ear_height_does_not_affect_yaw(self, tilted_landmarks):
        shifted = tilted_landmarks.clone()
        shifted[LANDMARK_POINTS["right_ear"], 1] = 0.8

        estimator = HeadPoseEstimator()

        assert estimator.target_angles(shifted).yaw.item() == pytest.approx(
            estimator.target_angles(tilted_landmarks).yaw.item(), abs=1e-6)

    def test_amplification_is_configurable(self, tilted_landmarks):
        estimator = HeadPoseEstimator(EstimatorConfig(amplification=1.0))

        target = estimator.target_angles(tilted_landmarks)

        assert target.pitch.item() == pytest.approx(-math.asin(1 / 6), abs=1e-6)


class TestClamping:
    def test_extreme_pitch_is_clamped(self):
        landmarks = make_landmarks({
            "nose_tip": (0.5, 1.0, 0.0),
            "forehead": (0.5, 0.49, 0.0),
            "chin": (0.5, 0.51, 0.0),
        })

        angles = HeadPoseEstimator().estimate(landmarks, PoseAngles.from_floats(-math.pi / 4, 0.0))

        assert angles.pitch.item() == pytest.approx(-math.pi / 4, abs=1e-6)

    def test_extreme_yaw_is_clamped(self):
        landmarks = make_landmarks({
            "left_ear": (0.5, 0.5, -5.0),
            "right_ear": (0.5, 0.5, 5.0),
        })

        target = HeadPoseEstimator().target_angles(landmarks)

        assert target.yaw.item() == pytest.approx(-math.pi / 3, abs=1e-6)

    def test_out_of_range_previous_state_is_clamped(self, tilted_landmarks):
        angles = HeadPoseEstimator().estimate(tilted_landmarks, PoseAngles.from_floats(10.0, -10.0))

        assert -math.pi / 4 <= angles.pitch.item() <= math.pi / 4
        assert -math.pi / 3 <= angles.yaw.item() <= math.pi / 3

    def test_random_frames_stay_in_range(self):
        generator = torch.Generator().manual_seed(0)
        estimator = HeadPoseEstimator()
        previous = None

        for _ in range(200):
            landmarks = torch.rand((478, 3), generator=generator)
            landmarks[:, 2] = landmarks[:, 2] * 2 - 1
            previous = estimator.estimate(landmarks, previous)

            assert previous.is_finite()
            assert abs(previous.pitch.item()) <= math.pi / 4
            assert abs(previous.yaw.item()) <= math.pi / 3

    @pytest.mark.parametrize("dtype", [torch.float32, torch.float64])
    def test_saturated_angles_stay_within_exact_limits(self, dtype):
        landmarks = make_landmarks({
            "nose_tip": (0.5, 1.0, 0.0),
            "forehead": (0.5, 0.49, 0.0),
            "chin": (0.5, 0.51, 0.0),
            "left_ear": (0.5, 0.5, 5.0),
            "right_ear": (0.5, 0.5, -5.0),
        }, dtype=dtype)
        estimator = HeadPoseEstimator(EstimatorConfig(pitch_smoothing=1.0, yaw_smoothing=1.0))

        angles = estimator.estimate(landmarks, PoseAngles.from_floats(10.0, 10.0))

        assert -math.pi / 4 <= angles.pitch.item() < -math.pi / 4 + 1e-6
        assert math.pi / 3 - 1e-6 < angles.yaw.item() <= math.pi / 3


class TestDegenerateInput:
    def test_zero_face_height_is_finite(self):
        landmarks = make_landmarks({
            "nose_tip": (0.5, 0.6, 0.0),
            "forehead": (0.5, 0.5, 0.0),
            "chin": (0.5, 0.5, 0.0),
        })

        target = HeadPoseEstimator().target_angles(landmarks)

        assert math.isfinite(target.pitch.item())
        assert target.pitch.item() == pytest.approx(-math.pi / 4, abs=1e-6)

    def test_zero_face_height_with_centered_nose(self):
        landmarks = make_landmarks({
            "nose_tip": (0.5, 0.5, 0.0),
            "forehead": (0.5, 0.5, 0.0),
            "chin": (0.5, 0.5, 0.0),
        })

        angles = HeadPoseEstimator().estimate(landmarks)

        assert angles.pitch.item() == pytest.approx(0.0, abs=1e-6)

    def test_nan_landmarks_raise(self, tilted_landmarks):
        tilted_landmarks[LANDMARK_POINTS["nose_tip"], 1] = float("nan")

        with pytest.raises(InvalidLandmarksError):
            HeadPoseEstimator().estimate(tilted_landmarks)

    def test_malformed_frame_raises_invalid_landmarks(self):
        with pytest.raises(InvalidLandmarksError, match="landmarks"):
            HeadPoseEstimator().estimate(torch.zeros((10, 3)))

    def test_malformed_frame_in_stream_raises_invalid_landmarks(self, tilted_landmarks):
        with pytest.raises(InvalidLandmarksError):
            HeadPoseEstimator().estimate_stream([tilted_landmarks, torch.zeros((478, 2))])


class TestSmoothing:
    def test_first_frame_moves_fifteen_percent(self, tilted_landmarks):
        angles = HeadPoseEstimator().estimate(tilted_landmarks)

        assert angles.pitch.item() == pytest.approx(0.15 * TILTED_PITCH_TARGET, abs=1e-6)
        assert angles.yaw.item() == pytest.approx(0.15 * TURNED_YAW_TARGET, abs=1e-6)

    def test_exponential_convergence(self):
        landmarks = make_landmarks(TILTED_AND_TURNED_FACE, dtype=torch.float64)
        estimator = HeadPoseEstimator()
        target = estimator.target_angles(landmarks).pitch.item()

        previous = PoseAngles.create_neutral(dtype=torch.float64)
        errors = []
        for n in range(1, 31):
            previous = estimator.estimate(landmarks, previous)
            error = abs(previous.pitch.item() - target)
            assert error == pytest.approx(abs(target) * (1 - 0.15) ** n, rel=1e-9, abs=1e-12)
            errors.append(error)

        assert all(later < earlier for earlier, later in zip(errors, errors[1:]))

    def test_repeated_frame_reaches_fixed_point(self, tilted_landmarks):
        estimator = HeadPoseEstimator()
        target = estimator.target_angles(tilted_landmarks)

        angles = None
        for _ in range(300):
            angles = estimator.estimate(tilted_landmarks, angles)

        assert angles.pitch.item() == pytest.approx(target.pitch.item(), abs=1e-5)
        assert angles.yaw.item() == pytest.approx(target.yaw.item(), abs=1e-5)

    def test_smoothing_one_jumps_to_target(self, tilted_landmarks):
        estimator = HeadPoseEstimator(EstimatorConfig(pitch_smoothing=1.0, yaw_smoothing=1.0))

        angles = estimator.estimate(tilted_landmarks, PoseAngles.from_floats(0.5, -0.5))

        assert angles.pitch.item() == pytest.approx(TILTED_PITCH_TARGET, abs=1e-6)
        assert angles.yaw.item() == pytest.approx(TURNED_YAW_TARGET, abs=1e-6)

    def test_does_not_mutate_previous(self, tilted_landmarks):
        previous = PoseAngles.from_floats(0.2, 0.1)

        HeadPoseEstimator().estimate(tilted_landmarks, previous)

        assert previous.to_tuple() == pytest.approx((0.2, 0.1))


class TestNoDetection:
    def test_none_resets_to_neutral(self):
        angles = HeadPoseEstimator().estimate(None, PoseAngles.from_floats(0.5, -0.7))

        assert angles.to_tuple() == (0.0, 0.0)

    def test_none_without_previous(self):
        assert HeadPoseEstimator().estimate(None).is_neutral()


class TestEstimateStream:
    def test_list_input_threads_state(self, tilted_landmarks):
        estimator = HeadPoseEstimator()

        results = estimator.estimate_stream([tilted_landmarks, tilted_landmarks, None, tilted_landmarks])

        assert isinstance(results, list)
        assert results[1].pitch.item() == pytest.approx(
            TILTED_PITCH_TARGET * (1 - 0.85 ** 2), abs=1e-6)
        assert results[2].is_neutral()
        assert results[3].pitch.item() == pytest.approx(0.15 * TILTED_PITCH_TARGET, abs=1e-6)

    def test_iterator_input_is_lazy(self, tilted_landmarks):
        estimator = HeadPoseEstimator()

        results = estimator.estimate_stream(iter([tilted_landmarks, tilted_landmarks]))

        assert not isinstance(results, list)
        assert len(list(results)) == 2
