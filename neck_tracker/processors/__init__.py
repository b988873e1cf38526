"""Processing utilities for tracking sessions and recorded data."""

from .data_exporter import DataExporter
from .data_loader import DataLoader
from .frame_slot import DetectionLoop, DetectionResult, LatestFrameSlot
from .input_utils import InputType, detect_input_type
from .stream_utils import apply_to_stream, is_iterator
from .tracker import FrameData, NeckTracker

__all__ = [
    "DataExporter",
    "DataLoader",
    "DetectionLoop",
    "DetectionResult",
    "FrameData",
    "InputType",
    "LatestFrameSlot",
    "NeckTracker",
    "apply_to_stream",
    "detect_input_type",
    "is_iterator",
]
