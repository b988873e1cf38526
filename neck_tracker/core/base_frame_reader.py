"""Base frame reader interface for image sources fed to a detector."""

from abc import ABC, abstractmethod
from typing import Iterator, Optional, Any
import numpy as np


class BaseFrameReader(ABC):
    """
    Abstract base class for frame readers.

    Readers yield frames as (H, W, 3) RGB uint8 numpy arrays.
    """

    def __init__(self) -> None:
        self.fps: float = 30.0
        self.width: int = 0
        self.height: int = 0
        self.frame_count: Optional[int] = None

    @abstractmethod
    def read_frames(self) -> Iterator[np.ndarray]:
        """
        Read frames from the source.

        Yields:
            RGB frames (H x W x 3, uint8)
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close reader and clean up resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type: Optional[type], exc_val: Optional[Exception], exc_tb: Optional[Any]) -> None:
        self.close()
