"""In-memory images for compression and upload tests.

Images are generated with Pillow so tests never depend on binary files.
Noise images compress poorly, which forces the compressor to work.
"""

import io
import os

from PIL import Image

from src.models.compression_result import ImageFile


def make_image_bytes(width: int, height: int, fmt: str = "JPEG", noise: bool = False, mode: str = "RGB") -> bytes:
    """Encode a solid (or random-noise) image in the given format."""
    if noise:
        channels = len(mode)
        img = Image.frombytes(mode, (width, height), os.urandom(width * height * channels))
    else:
        color = (30, 120, 200, 255)[:len(mode)] if len(mode) > 1 else 128
        img = Image.new(mode, (width, height), color)

    buffer = io.BytesIO()
    options = {"quality": 95} if fmt == "JPEG" else {}
    img.save(buffer, format=fmt, **options)
    return buffer.getvalue()


def make_image_file(
    width: int,
    height: int,
    fmt: str = "JPEG",
    noise: bool = False,
    mode: str = "RGB",
    name: str = "",
) -> ImageFile:
    """Build an ImageFile with a matching name and MIME type."""
    extension = {"JPEG": "jpg", "PNG": "png", "WEBP": "webp", "GIF": "gif", "BMP": "bmp"}[fmt]
    return ImageFile(
        name=name or f"photo.{extension}",
        data=make_image_bytes(width, height, fmt, noise, mode),
        mime_type=f"image/{'jpeg' if fmt == 'JPEG' else fmt.lower()}",
    )


def image_size(data: bytes):
    """(width, height) of encoded image bytes."""
    with Image.open(io.BytesIO(data)) as img:
        return img.size


def image_format(data: bytes) -> str:
    with Image.open(io.BytesIO(data)) as img:
        return img.format
