"""Client-side image compression before upload.

Images picked in the image field editor are shrunk to fit a maximum
dimension and a byte budget before being encoded into the page content.
Compression must never block an upload: any failure falls back to the
original file with a compression ratio of 0.
"""

import io
import logging
from pathlib import Path
from typing import List

from PIL import Image

from src.models.compression_result import CompressionResult, ImageFile

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE_MB = 1.0
DEFAULT_MAX_WIDTH_OR_HEIGHT = 1920

MAX_ITERATIONS = 10
INITIAL_QUALITY = 90
MIN_QUALITY = 40
QUALITY_STEP = 10
SHRINK_FACTOR = 0.8

_MIME_TYPES = {
    'JPEG': 'image/jpeg',
    'PNG': 'image/png',
    'WEBP': 'image/webp',
}

_LOSSY_FORMATS = frozenset({'JPEG', 'WEBP'})

_EXTENSIONS = {
    'JPEG': '.jpg',
    'PNG': '.png',
    'WEBP': '.webp',
}


def _resample_lanczos() -> int:
    if hasattr(Image, "Resampling"):
        return Image.Resampling.LANCZOS  # type: ignore[attr-defined]
    return Image.LANCZOS  # type: ignore[attr-defined]


def _flatten_to_rgb(img: Image.Image) -> Image.Image:
    """Composite transparent images onto white so they can be stored as JPEG."""
    if img.mode in ("RGBA", "LA") or ("transparency" in img.info):
        rgba = img.convert("RGBA")
        bg = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        bg.paste(rgba, mask=rgba.split()[-1])
        return bg.convert("RGB")
    if img.mode not in ("RGB", "L"):
        return img.convert("RGB")
    return img


def _encode(img: Image.Image, output_format: str, quality: int, exif: bytes) -> bytes:
    buffer = io.BytesIO()
    options = {}
    if output_format == 'JPEG':
        options = {'quality': quality, 'optimize': True, 'progressive': True}
    elif output_format == 'WEBP':
        options = {'quality': quality}
    else:
        options = {'optimize': True}
    if exif and output_format in _LOSSY_FORMATS:
        options['exif'] = exif
    img.save(buffer, format=output_format, **options)
    return buffer.getvalue()


def _compress(
    file: ImageFile,
    max_size_mb: float,
    max_width_or_height: int,
    preserve_exif: bool,
) -> ImageFile:
    max_bytes = int(max_size_mb * 1024 * 1024)

    with Image.open(io.BytesIO(file.data)) as img:
        img.load()
        source_format = (img.format or '').upper()
        exif = img.info.get('exif', b'') if preserve_exif else b''
        needs_resize = max(img.size) > max_width_or_height

        if not needs_resize and file.size <= max_bytes:
            return file

        output_format = source_format if source_format in _MIME_TYPES else 'JPEG'
        working = img.copy()

    if needs_resize:
        working.thumbnail((max_width_or_height, max_width_or_height), _resample_lanczos())
    if output_format == 'JPEG':
        working = _flatten_to_rgb(working)

    quality = INITIAL_QUALITY
    data = _encode(working, output_format, quality, exif)
    for _ in range(MAX_ITERATIONS - 1):
        if len(data) <= max_bytes:
            break
        if output_format in _LOSSY_FORMATS and quality > MIN_QUALITY:
            quality -= QUALITY_STEP
        else:
            width, height = working.size
            working = working.resize(
                (max(1, int(width * SHRINK_FACTOR)), max(1, int(height * SHRINK_FACTOR))),
                _resample_lanczos(),
            )
        data = _encode(working, output_format, quality, exif)

    if len(data) >= file.size and not needs_resize:
        return file

    name = file.name
    if output_format != source_format:
        name = Path(file.name).stem + _EXTENSIONS[output_format]

    return ImageFile(name=name, data=data, mime_type=_MIME_TYPES[output_format])


def _ratio(original_size: int, compressed_size: int) -> int:
    if original_size <= 0:
        return 0
    return round((1 - compressed_size / original_size) * 100)


def compress_image(
    file: ImageFile,
    max_size_mb: float = DEFAULT_MAX_SIZE_MB,
    max_width_or_height: int = DEFAULT_MAX_WIDTH_OR_HEIGHT,
    preserve_exif: bool = True,
) -> CompressionResult:
    """Shrink an image to fit max_width_or_height and max_size_mb.

    Lossy formats first trade quality (90 down to 40), then dimensions;
    lossless formats only trade dimensions. Formats other than JPEG, PNG
    and WebP are re-encoded as JPEG. Never raises.

    Args:
        file: The picked file
        max_size_mb: Byte budget in megabytes
        max_width_or_height: Largest allowed width or height in pixels
        preserve_exif: Carry EXIF metadata over to lossy output

    Returns:
        CompressionResult with the file to upload; the original file with
        a ratio of 0 if compression failed or did not help
    """
    original_size = file.size
    try:
        compressed = _compress(file, max_size_mb, max_width_or_height, preserve_exif)
    except Exception as e:
        logger.error(f"Image compression failed for {file.name}, using original: {e}")
        return CompressionResult(
            file=file,
            original_size=original_size,
            compressed_size=original_size,
            compression_ratio=0,
        )

    logger.debug(
        f"Compressed {file.name}: {format_file_size(original_size)} -> "
        f"{format_file_size(compressed.size)}"
    )
    return CompressionResult(
        file=compressed,
        original_size=original_size,
        compressed_size=compressed.size,
        compression_ratio=_ratio(original_size, compressed.size),
    )


def compress_images(
    files: List[ImageFile],
    max_size_mb: float = DEFAULT_MAX_SIZE_MB,
    max_width_or_height: int = DEFAULT_MAX_WIDTH_OR_HEIGHT,
) -> List[CompressionResult]:
    """Compress several files with the same limits."""
    return [compress_image(f, max_size_mb, max_width_or_height) for f in files]


def is_image_file(file: ImageFile) -> bool:
    return file.mime_type.startswith("image/")


def is_video_file(file: ImageFile) -> bool:
    return file.mime_type.startswith("video/")


def format_file_size(size: int) -> str:
    """Human-readable size: 0 -> "0 Bytes", 1536 -> "1.5 KB"."""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"
