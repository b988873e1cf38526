"""Detector implementations for landmark detection.

MediaPipeDetector is imported lazily so the rest of the package works
without loading the MediaPipe runtime.
"""

__all__ = [
    "MediaPipeDetector",
]


def __getattr__(name):
    if name == "MediaPipeDetector":
        from .mediapipe_detector import MediaPipeDetector
        return MediaPipeDetector
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
