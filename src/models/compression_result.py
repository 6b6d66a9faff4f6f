"""Image file and compression result data models."""

import base64
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass
class ImageFile:
    """An in-memory file picked for upload.

    Attributes:
        name: Original file name
        data: Raw file bytes
        mime_type: MIME type (e.g. "image/jpeg")
    """
    name: str
    data: bytes
    mime_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)

    def to_data_url(self) -> str:
        """Encode the file as a base64 data URL."""
        encoded = base64.b64encode(self.data).decode('ascii')
        return f"data:{self.mime_type};base64,{encoded}"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'ImageFile':
        """Read a file from disk, guessing its MIME type from the extension."""
        file_path = Path(path)
        mime_type, _ = mimetypes.guess_type(file_path.name)
        return cls(
            name=file_path.name,
            data=file_path.read_bytes(),
            mime_type=mime_type or "application/octet-stream",
        )


@dataclass
class CompressionResult:
    """Outcome of compressing an image before upload.

    Attributes:
        file: The file to upload (compressed, or the original on fallback)
        original_size: Size of the input in bytes
        compressed_size: Size of the output in bytes
        compression_ratio: Percent of bytes saved, rounded to an integer
    """
    file: ImageFile
    original_size: int
    compressed_size: int
    compression_ratio: int
