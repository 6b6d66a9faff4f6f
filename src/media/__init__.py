"""Image handling for uploads picked in the inline image editor."""

from .image_compression import (
    compress_image,
    compress_images,
    format_file_size,
    is_image_file,
    is_video_file,
)

__all__ = [
    "compress_image",
    "compress_images",
    "format_file_size",
    "is_image_file",
    "is_video_file",
]
