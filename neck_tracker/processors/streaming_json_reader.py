"""Streaming JSON reader using ijson for token-based parsing."""

from typing import Iterator, Dict, Any, Optional, BinaryIO
import ijson
from pathlib import Path


class StreamingJSONReader:
    """
    Reads recording files of the form {"<meta>": ..., "data": [...]}
    without loading the data array into memory.
    """

    def __init__(self, input_path: str) -> None:
        """
        Args:
            input_path: Input file path
        """
        self.input_path: Path = Path(input_path)
        self.file: Optional[BinaryIO] = None

    def __enter__(self) -> 'StreamingJSONReader':
        self.file = open(self.input_path, 'rb')  # ijson wants bytes
        return self

    def __exit__(self, exc_type: Optional[type], exc_val: Optional[Exception], exc_tb: Optional[Any]) -> None:
        if self.file:
            self.file.close()
            self.file = None

    def read_items(self) -> Iterator[Any]:
        """Yield the entries of the top-level 'data' array one at a time."""
        if self.file is None:
            raise RuntimeError("StreamingJSONReader must be used as a context manager")
        self.file.seek(0)
        # use_float keeps numbers as float instead of Decimal
        yield from ijson.items(self.file, 'data.item', use_float=True)

    def get_metadata(self) -> Dict[str, Any]:
        """Read the scalar top-level keys that precede the 'data' array."""
        if self.file is None:
            raise RuntimeError("StreamingJSONReader must be used as a context manager")
        self.file.seek(0)

        metadata: Dict[str, Any] = {}
        for prefix, event, value in ijson.parse(self.file, use_float=True):
            if prefix == 'data' and event == 'start_array':
                break
            if '.' in prefix or not prefix:
                continue
            if event in ('string', 'number', 'boolean', 'null'):
                metadata[prefix] = value

        return metadata
