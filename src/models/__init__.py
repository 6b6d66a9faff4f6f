"""Data models for page documents and image uploads."""

from src.models.page_document import PageDocument, display_title
from src.models.compression_result import CompressionResult, ImageFile

__all__ = ['PageDocument', 'display_title', 'CompressionResult', 'ImageFile']
