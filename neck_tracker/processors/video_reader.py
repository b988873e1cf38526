"""Video reader for feeding recorded footage to a detector."""

from typing import Iterator, Optional
from pathlib import Path
import cv2
import numpy as np

from ..core.base_frame_reader import BaseFrameReader


class VideoReader(BaseFrameReader):
    """
    Read video frames from a file using OpenCV.
    """

    def __init__(self, video_path: str) -> None:
        """
        Open a video file.

        Args:
            video_path: Path to the video file
        """
        super().__init__()

        self.video_path: Path = Path(video_path)
        if not self.video_path.exists():
            raise FileNotFoundError(f"Video file not found: {video_path}")

        self.capture: Optional[cv2.VideoCapture] = cv2.VideoCapture(str(self.video_path))
        if not self.capture.isOpened():
            raise RuntimeError(f"Failed to open video: {video_path}")

        self.fps = self.capture.get(cv2.CAP_PROP_FPS) or 30.0
        self.width = int(self.capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self.capture.get(cv2.CAP_PROP_FRAME_HEIGHT))
        count = int(self.capture.get(cv2.CAP_PROP_FRAME_COUNT))
        self.frame_count = count if count > 0 else None

    def read_frames(self) -> Iterator[np.ndarray]:
        """
        Iterate over video frames.

        Yields:
            RGB frames (H x W x 3, uint8)
        """
        while self.capture is not None:
            ok, frame = self.capture.read()
            if not ok:
                break
            # OpenCV decodes to BGR, detectors expect RGB
            yield cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

    def close(self) -> None:
        """Release the capture handle."""
        if self.capture is not None:
            self.capture.release()
            self.capture = None
