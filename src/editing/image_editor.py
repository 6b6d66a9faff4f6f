"""Inline image field editor.

Outside edit mode an ImageFieldEditor renders a plain <img>. In edit mode
the image becomes clickable and opens a dialog offering two ways to change
it: uploading a file (compressed first, then stored inline as a data URL)
or entering an image URL.
"""

import logging
from typing import Callable, Optional

from bs4 import BeautifulSoup

from src.media.image_compression import (
    DEFAULT_MAX_SIZE_MB,
    DEFAULT_MAX_WIDTH_OR_HEIGHT,
    compress_image,
    format_file_size,
)
from src.models.compression_result import CompressionResult, ImageFile

from .edit_session import EditSession
from .sanitizer import PARSER

logger = logging.getLogger(__name__)

Compressor = Callable[..., CompressionResult]


def compression_summary(result: CompressionResult) -> str:
    """One-line summary, e.g. "Compressed: 2.5 MB → 800 KB (68% saved)"."""
    return (
        f"Compressed: {format_file_size(result.original_size)} → "
        f"{format_file_size(result.compressed_size)} "
        f"({result.compression_ratio}% saved)"
    )


class ImageFieldEditor:
    """Controller for one editable image field.

    Attributes:
        src: Current image source (URL or data URL)
        is_dialog_open: Whether the change-image dialog is open
        image_url: URL typed into the dialog's URL tab
        is_uploading: True while an upload is being compressed
        compression_info: Summary of the last compression, until applied
        preview_failed: The URL preview could not be loaded
        last_compression: Result of the most recent upload's compression
    """

    def __init__(
        self,
        session: EditSession,
        src: str,
        alt: str,
        on_change: Callable[[str], None],
        class_name: Optional[str] = None,
        content_key: Optional[str] = None,
        compressor: Compressor = compress_image,
        max_size_mb: float = DEFAULT_MAX_SIZE_MB,
        max_width_or_height: int = DEFAULT_MAX_WIDTH_OR_HEIGHT,
    ):
        self.session = session
        self.src = src or ""
        self.alt = alt
        self.on_change = on_change
        self.class_name = class_name
        self.content_key = content_key
        self.compressor = compressor
        self.max_size_mb = max_size_mb
        self.max_width_or_height = max_width_or_height

        self.is_dialog_open = False
        self.image_url = ""
        self.is_uploading = False
        self.compression_info: Optional[str] = None
        self.preview_failed = False
        self.last_compression: Optional[CompressionResult] = None

    def click(self) -> None:
        """Open the change-image dialog; ignored outside edit mode."""
        if self.session.is_edit_mode:
            self.is_dialog_open = True

    def close_dialog(self) -> None:
        self.is_dialog_open = False

    @property
    def can_apply(self) -> bool:
        """Changes are only accepted from an open dialog in edit mode."""
        return self.session.is_edit_mode and self.is_dialog_open

    def upload_file(self, image_file: ImageFile) -> bool:
        """Compress a picked file and apply it as a data URL.

        Returns:
            True if the image was applied
        """
        if not self.can_apply:
            logger.debug(f"Ignoring upload of {image_file.name}: image dialog is not open")
            return False

        self.is_uploading = True
        try:
            result = self.compressor(
                image_file,
                max_size_mb=self.max_size_mb,
                max_width_or_height=self.max_width_or_height,
            )
            self.last_compression = result
            self.compression_info = compression_summary(result)
            logger.info(f"{image_file.name}: {self.compression_info}")
            self._apply(result.file.to_data_url())
            return True
        except Exception as e:
            logger.error(f"Failed to upload image {image_file.name}: {e}")
            return False
        finally:
            self.is_uploading = False

    def set_image_url(self, url: str) -> None:
        self.image_url = url or ""
        self.preview_failed = False

    @property
    def preview_src(self) -> Optional[str]:
        """Source for the URL preview, None when there is nothing to show."""
        if not self.image_url or self.preview_failed:
            return None
        return self.image_url

    def on_preview_error(self) -> None:
        self.preview_failed = True

    def apply_url(self) -> bool:
        """Apply the typed URL verbatim after trimming; blank is a no-op."""
        if not self.can_apply:
            return False
        url = self.image_url.strip()
        if not url:
            return False
        self._apply(url)
        return True

    def _apply(self, new_src: str) -> None:
        self.src = new_src
        self.on_change(new_src)
        if self.content_key:
            self.session.register_change(self.content_key, new_src)
        self.is_dialog_open = False
        self.image_url = ""
        self.compression_info = None
        self.preview_failed = False

    def render(self) -> str:
        """Render the field as HTML for the current session state."""
        soup = BeautifulSoup("", PARSER)

        if not self.session.is_edit_mode:
            attrs = {'src': self.src, 'alt': self.alt}
            if self.class_name:
                attrs['class'] = self.class_name
            if self.content_key:
                attrs['data-testid'] = f"image-{self.content_key}"
            return str(soup.new_tag('img', attrs=attrs))

        classes = ['editable-image']
        if self.class_name:
            classes.append(self.class_name)
        wrapper = soup.new_tag('div', attrs={
            'class': ' '.join(classes),
            'data-testid': (
                f"editable-image-{self.content_key}" if self.content_key else "editable-image"
            ),
        })

        if self.src:
            wrapper.append(soup.new_tag('img', attrs={'src': self.src, 'alt': self.alt}))
        else:
            wrapper.append(soup.new_tag('div', attrs={'class': 'editable-image__placeholder'}))

        overlay = soup.new_tag('div', attrs={'class': 'editable-image__overlay'})
        overlay.string = "Change Image"
        wrapper.append(overlay)
        return str(wrapper)
