"""Shared fixtures for neck_tracker tests."""

from typing import Dict, Tuple

import pytest
import torch

from neck_tracker.core.constants import LANDMARK_POINTS, NUM_FACE_LANDMARKS_WITH_IRIS

Point = Tuple[float, float, float]


def make_landmarks(points: Dict[str, Point],
                   count: int = NUM_FACE_LANDMARKS_WITH_IRIS,
                   dtype: torch.dtype = torch.float32) -> torch.Tensor:
    """Build a landmark frame with every point at the image center except `points`."""
    landmarks = torch.zeros((count, 3), dtype=dtype)
    landmarks[:, :2] = 0.5
    for name, (x, y, z) in points.items():
        landmarks[LANDMARK_POINTS[name]] = torch.tensor([x, y, z], dtype=dtype)
    return landmarks


FRONTAL_FACE = {
    "nose_tip": (0.5, 0.6, 0.0),
    "forehead": (0.5, 0.3, 0.0),
    "chin": (0.5, 0.9, 0.0),
    "left_ear": (0.2, 0.5, 0.0),
    "right_ear": (0.8, 0.5, 0.0),
}

TILTED_AND_TURNED_FACE = {
    "nose_tip": (0.5, 0.7, 0.0),
    "forehead": (0.5, 0.3, 0.0),
    "chin": (0.5, 0.9, 0.0),
    "left_ear": (0.2, 0.5, 0.1),
    "right_ear": (0.8, 0.5, -0.1),
}


@pytest.fixture
def frontal_landmarks() -> torch.Tensor:
    return make_landmarks(FRONTAL_FACE)


@pytest.fixture
def tilted_landmarks() -> torch.Tensor:
    return make_landmarks(TILTED_AND_TURNED_FACE)
