"""Shared test data.

- sample_pages: Page documents as the pages API returns them
- sample_images: Images generated in memory with Pillow
"""

from .sample_pages import (
    ABOUT_CONTENT,
    API_ABOUT,
    API_HOMEPAGE,
    API_PAGE_WITH_STRING_CONTENT,
    HOMEPAGE_CONTENT,
    UNSAFE_HTML,
)
from .sample_images import image_format, image_size, make_image_bytes, make_image_file

__all__ = [
    "ABOUT_CONTENT",
    "API_ABOUT",
    "API_HOMEPAGE",
    "API_PAGE_WITH_STRING_CONTENT",
    "HOMEPAGE_CONTENT",
    "UNSAFE_HTML",
    "image_format",
    "image_size",
    "make_image_bytes",
    "make_image_file",
]
