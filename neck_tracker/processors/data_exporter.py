"""Streaming JSON exporter for per-frame recordings."""

from typing import Dict, Any, Optional, TextIO
import json
from pathlib import Path

# Wide enough for any frame count, padded with spaces (valid JSON whitespace)
_FRAME_COUNT_WIDTH = 20


class DataExporter:
    """
    Writes {"<meta>": ..., "frame_count": N, "data": [...]} one item at a
    time, so long sessions never have to be held in memory.
    """

    def __init__(self, output_path: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Args:
            output_path: Output file path
            metadata: Scalar metadata written before the data array
        """
        self.output_path: Path = Path(output_path)
        self.file: Optional[TextIO] = None
        self.metadata: Dict[str, Any] = metadata or {}
        self.first_item: bool = True
        self.frame_count: int = 0
        self.frame_count_position: int = 0

    def __enter__(self) -> 'DataExporter':
        self.open()
        return self

    def __exit__(self, exc_type: Optional[type], exc_val: Optional[Exception], exc_tb: Optional[Any]) -> None:
        self.close()

    def open(self) -> None:
        """Create the file and write the header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.file = open(self.output_path, 'w', encoding='utf-8')
        self.file.write('{\n')

        for key, value in self.metadata.items():
            if key not in ('frame_count', 'data'):
                self.file.write(f'  {json.dumps(key)}: {json.dumps(value)},\n')

        # Placeholder, rewritten in place on close
        self.frame_count_position = self.file.tell()
        self.file.write(f'  "frame_count": {"null".ljust(_FRAME_COUNT_WIDTH)},\n')

        self.file.write('  "data": [\n')

    def write_item(self, item: Any) -> None:
        """Append one item to the data array."""
        if self.file is None:
            raise RuntimeError("DataExporter is not open")

        if not self.first_item:
            self.file.write(',\n')
        else:
            self.first_item = False

        self.file.write('    ' + json.dumps(item))
        self.frame_count += 1
        self.file.flush()

    def close(self) -> None:
        """Close the data array and fill in the frame count."""
        if self.file is None:
            return
        self.file.write('\n  ]\n}\n')
        self._update_frame_count()
        self.file.close()
        self.file = None

    def _update_frame_count(self) -> None:
        current_pos = self.file.tell()
        self.file.seek(self.frame_count_position)
        self.file.write(f'  "frame_count": {str(self.frame_count).ljust(_FRAME_COUNT_WIDTH)}')
        self.file.seek(current_pos)
