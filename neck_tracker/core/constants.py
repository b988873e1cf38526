"""Constants and default values for head pose estimation."""

import math

# MediaPipe face mesh sizes: 468 face points, 478 with refined iris points
NUM_FACE_LANDMARKS = 468
NUM_FACE_LANDMARKS_WITH_IRIS = 478
SUPPORTED_LANDMARK_COUNTS = (NUM_FACE_LANDMARKS, NUM_FACE_LANDMARKS_WITH_IRIS)

# Specific landmark points for head rotation
# Indices from the MediaPipe face mesh topology
LANDMARK_POINTS = {
    "nose_tip": 1,
    "forehead": 10,
    "chin": 152,
    "left_ear": 127,
    "right_ear": 356,
}

# Rotation calculation defaults (radians)
ROTATION = {
    "pitch": {
        "amplification": 1.2,
        "range": math.pi / 4,  # ±45 degrees
        "smoothing": 0.15,
    },
    "yaw": {
        "range": math.pi / 3,  # ±60 degrees
        "smoothing": 0.15,
    },
}

# Face heights below this are treated as degenerate
MIN_FACE_HEIGHT = 1e-6

# MediaPipe reports points slightly outside the frame when the face is cropped
COORDINATE_TOLERANCE = 0.5

# Neck joint name in the VRM humanoid rig
NECK_JOINT = "neck"
