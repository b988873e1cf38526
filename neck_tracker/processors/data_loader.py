"""Load recorded landmark and angle sequences."""

from typing import Tuple, Iterator, Optional, Dict, Any, Union
from pathlib import Path
import torch

from .streaming_json_reader import StreamingJSONReader
from ..core.types import PoseAngles


class DataLoader:
    """Load intermediate data from files."""

    @staticmethod
    def load_landmarks(input_path: Union[str, Path],
                       device: str = 'cpu') -> Tuple[Iterator[Optional[torch.Tensor]], Dict[str, Any]]:
        """
        Load a landmark recording using streaming.

        Args:
            input_path: Input JSON file path
            device: Device to load tensors to

        Returns:
            Tuple of (landmarks iterator, metadata dict with fps and frame_count)
        """
        input_path = Path(input_path)

        with StreamingJSONReader(input_path) as reader:
            data = reader.get_metadata()

        frame_count = data.get('frame_count')
        metadata: Dict[str, Any] = {
            'fps': float(data.get('fps', 30.0)),
            'frame_count': int(frame_count) if frame_count is not None else None,
        }
        for key in ('width', 'height'):
            if data.get(key) is not None:
                metadata[key] = int(data[key])

        return DataLoader._create_landmarks_iterator(input_path, device), metadata

    @staticmethod
    def _create_landmarks_iterator(input_path: Path, device: str) -> Iterator[Optional[torch.Tensor]]:
        with StreamingJSONReader(input_path) as reader:
            for frame_landmarks in reader.read_items():
                if frame_landmarks is not None:
                    yield torch.tensor(frame_landmarks, dtype=torch.float32, device=device)
                else:
                    yield None

    @staticmethod
    def load_angles(input_path: Union[str, Path],
                    device: str = 'cpu') -> Iterator[PoseAngles]:
        """
        Load an exported pose angle sequence.

        Args:
            input_path: Input JSON file path
            device: Device to load tensors to

        Returns:
            Iterator of PoseAngles
        """
        with StreamingJSONReader(input_path) as reader:
            for item in reader.read_items():
                yield PoseAngles.from_floats(item['pitch'], item['yaw'], device=device)
