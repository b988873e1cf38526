"""MediaPipe FaceLandmarker wrapper producing 478-point 3D landmark frames."""

import logging
from typing import Optional, Union, Iterator, List
from pathlib import Path
import requests
import numpy as np
import torch
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision
from tqdm import tqdm

from ..core.base_detector import BaseDetector
from ..core.constants import NUM_FACE_LANDMARKS_WITH_IRIS
from ..processors.stream_utils import is_iterator, apply_to_stream

logger = logging.getLogger(__name__)

MODEL_URL = "https://storage.googleapis.com/mediapipe-models/face_landmarker/face_landmarker/float16/1/face_landmarker.task"
MODEL_FILENAME = "face_landmarker.task"


class MediaPipeDetector(BaseDetector):
    """
    MediaPipe FaceLandmarker detector using the Tasks API in VIDEO mode.

    Landmark coordinate system:
    - x: normalized [0, 1] relative to image width (0=left, 1=right)
    - y: normalized [0, 1] relative to image height (0=top, 1=bottom)
    - z: depth relative to head center, roughly [-0.3, 0.3]
         (negative=closer to camera)
    """

    def __init__(self,
                 model_path: Optional[str] = None,
                 min_detection_confidence: float = 0.5,
                 min_tracking_confidence: float = 0.5,
                 fps: float = 30.0):
        """
        Initialize the FaceLandmarker, downloading the model if needed.

        Args:
            model_path: Path to face_landmarker.task, defaults to the current directory
            min_detection_confidence: Minimum confidence for face detection
            min_tracking_confidence: Minimum confidence for landmark tracking
            fps: Frame rate used to derive VIDEO mode timestamps
        """
        self.min_detection_confidence = min_detection_confidence
        self.min_tracking_confidence = min_tracking_confidence

        self.frame_counter = 0
        self.frame_time_ms = 1000.0 / fps

        model_file = self._ensure_model_exists(Path(model_path) if model_path else Path.cwd() / MODEL_FILENAME)

        base_options = python.BaseOptions(model_asset_path=str(model_file))
        options = vision.FaceLandmarkerOptions(
            base_options=base_options,
            running_mode=vision.RunningMode.VIDEO,
            num_faces=1,  # Only one neck to drive
            min_face_detection_confidence=min_detection_confidence,
            min_face_presence_confidence=min_detection_confidence,
            min_tracking_confidence=min_tracking_confidence,
            output_face_blendshapes=False,
            output_facial_transformation_matrixes=False
        )

        self.landmarker = vision.FaceLandmarker.create_from_options(options)

    @staticmethod
    def _ensure_model_exists(model_path: Path) -> Path:
        """
        Download the model file if it does not exist yet.

        Returns:
            Path to the model file
        """
        if model_path.exists():
            logger.info("Using existing MediaPipe model: %s", model_path)
            return model_path

        logger.info("MediaPipe FaceLandmarker model not found, downloading to %s", model_path)
        try:
            response = requests.get(MODEL_URL, stream=True, timeout=30)
            response.raise_for_status()
            total_size = int(response.headers.get('content-length', 0))

            model_path.parent.mkdir(parents=True, exist_ok=True)
            with open(model_path, 'wb') as f:
                with tqdm(total=total_size, unit='B', unit_scale=True, desc="Downloading model") as pbar:
                    for chunk in response.iter_content(chunk_size=8192):
                        if chunk:
                            f.write(chunk)
                            pbar.update(len(chunk))
        except requests.RequestException as e:
            model_path.unlink(missing_ok=True)
            raise RuntimeError(f"Failed to download MediaPipe model: {e}") from e

        logger.info("Model downloaded successfully to: %s", model_path)
        return model_path

    def detect(self,
               input_data: Union[np.ndarray, torch.Tensor, Iterator[np.ndarray], List[np.ndarray]]
               ) -> Union[Optional[torch.Tensor], Iterator[Optional[torch.Tensor]], List[Optional[torch.Tensor]]]:
        """
        Detection supporting single frame, batch, and streaming modes.

        Args:
            input_data: RGB image(s) (H, W, 3) uint8 - single, list, or iterator

        Returns:
            - Single frame: Optional[torch.Tensor] (478, 3)
            - Multiple frames: Iterator or List of Optional[torch.Tensor]
        """
        if isinstance(input_data, (np.ndarray, torch.Tensor)):
            return self._detect_single(input_data)
        elif is_iterator(input_data):
            return apply_to_stream(input_data, self._detect_single, preserve_none=False)
        else:
            return [self._detect_single(image) for image in input_data]

    def _detect_single(self, image: Union[np.ndarray, torch.Tensor]) -> Optional[torch.Tensor]:
        """
        Detect landmarks of the most prominent face in one image.

        Returns:
            Landmarks tensor (478, 3) on CPU, or None if no face was detected
        """
        if isinstance(image, torch.Tensor):
            image = image.cpu().numpy()
        image = np.ascontiguousarray(image, dtype=np.uint8)

        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image)

        # VIDEO mode needs monotonically increasing timestamps
        timestamp_ms = int(self.frame_counter * self.frame_time_ms)
        self.frame_counter += 1

        detection_result = self.landmarker.detect_for_video(mp_image, timestamp_ms)

        if not detection_result.face_landmarks:
            logger.debug("No face detected at %d ms", timestamp_ms)
            return None

        face_landmarks = detection_result.face_landmarks[0]
        landmarks_np = np.array(
            [[landmark.x, landmark.y, landmark.z] for landmark in face_landmarks],
            dtype=np.float32,
        )

        if landmarks_np.shape[0] != NUM_FACE_LANDMARKS_WITH_IRIS:
            logger.warning("Expected %d landmarks, got %d", NUM_FACE_LANDMARKS_WITH_IRIS, landmarks_np.shape[0])

        # Coordinates are already normalized by MediaPipe
        return self.postprocess_landmarks(landmarks_np)

    def close(self) -> None:
        """Clean up MediaPipe resources."""
        if getattr(self, 'landmarker', None) is not None:
            self.landmarker.close()
            self.landmarker = None
