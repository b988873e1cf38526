"""Hand-off between the asynchronous detection cycle and the render loop."""

import logging
import threading
from dataclasses import dataclass
from typing import Optional
import torch

from ..core.base_detector import BaseDetector
from ..core.base_frame_reader import BaseFrameReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectionResult:
    """One complete detection cycle output."""
    frame_idx: int
    landmarks: Optional[torch.Tensor]


class LatestFrameSlot:
    """
    Holds the most recent detection result.

    The detection thread replaces the whole result on every cycle and the
    render loop reads whichever result is current. Landmarks are cloned on
    publish, so a reader never sees a frame that is being written.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._result: Optional[DetectionResult] = None

    def publish(self, frame_idx: int, landmarks: Optional[torch.Tensor]) -> None:
        """
        Replace the current result.

        Args:
            frame_idx: Index of the source frame
            landmarks: Detected landmarks, or None when no face was found
        """
        snapshot = landmarks.detach().clone() if landmarks is not None else None
        result = DetectionResult(frame_idx=frame_idx, landmarks=snapshot)
        with self._lock:
            self._result = result

    def latest(self) -> Optional[DetectionResult]:
        """Return the current result, or None before the first publish."""
        with self._lock:
            return self._result

    def clear(self) -> None:
        with self._lock:
            self._result = None


class DetectionLoop:
    """
    Runs a detector over a frame reader in a background thread and
    publishes each result to a LatestFrameSlot.

    A detector error is published as "no face" and the loop keeps going.
    The slot is cleared when the loop ends, so no stale face outlives it.
    """

    def __init__(self,
                 reader: BaseFrameReader,
                 detector: BaseDetector,
                 slot: Optional[LatestFrameSlot] = None):
        """
        Args:
            reader: Source of RGB frames
            detector: Landmark detector run on every frame
            slot: Destination slot, a new one is created if omitted
        """
        self.reader = reader
        self.detector = detector
        self.slot = slot or LatestFrameSlot()

        self.frames_processed = 0
        self.failed_frames = 0
        self.error: Optional[Exception] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """
        Start the detection thread.

        Raises:
            RuntimeError: If a previous stop() timed out and its thread is
                still running
        """
        if self.is_running:
            if self._stop_event.is_set():
                raise RuntimeError("Detection loop is still stopping, join() it before restarting")
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="detection-loop", daemon=True)
        self._thread.start()
        logger.info("Detection loop started")

    def stop(self, timeout: float = 2.0) -> None:
        """
        Signal the thread to stop and wait for it. The slot is cleared, so
        readers fall back to the neutral pose.

        Args:
            timeout: Seconds to wait for the thread to exit
        """
        self._stop_event.set()
        self.slot.clear()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Detection loop did not stop within %.1f s", timeout)
                return
            self._thread = None
        logger.info("Detection loop stopped after %d frames", self.frames_processed)

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the reader to run out of frames."""
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def _run(self) -> None:
        try:
            for frame_idx, frame in enumerate(self.reader.read_frames()):
                if self._stop_event.is_set():
                    break
                try:
                    landmarks = self.detector.detect(frame)
                except Exception as e:
                    self.failed_frames += 1
                    logger.warning("Detection failed on frame %d, publishing no face: %s", frame_idx, e)
                    landmarks = None
                self.slot.publish(frame_idx, landmarks)
                self.frames_processed += 1
        except Exception as e:
            # Read by the owning thread via .error
            self.error = e
            logger.error("Frame reader failed: %s", e)
        finally:
            self.slot.clear()

    def __enter__(self) -> 'DetectionLoop':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
