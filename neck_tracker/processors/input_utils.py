"""Utilities for detecting input types."""

from enum import Enum
from pathlib import Path
from typing import Union


class InputType(Enum):
    """Supported inputs for offline tracking."""
    VIDEO = "video"
    LANDMARKS = "landmarks"


VIDEO_SUFFIXES = ('.mp4', '.avi', '.mov', '.mkv', '.webm')


def detect_input_type(input_path: Union[str, Path]) -> InputType:
    """
    Detect the type of input file from its extension.

    Args:
        input_path: Path to input file

    Returns:
        Input type enum value

    Raises:
        ValueError: If the extension is not recognized
    """
    suffix = Path(input_path).suffix.lower()

    if suffix in VIDEO_SUFFIXES:
        return InputType.VIDEO
    if suffix == '.json':
        return InputType.LANDMARKS

    raise ValueError(f"Unsupported input file: {input_path}")
