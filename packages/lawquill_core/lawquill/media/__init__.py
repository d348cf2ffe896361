"""Figure attachment download, conversion and embedding."""

from .attachment_client import AttachmentClient, LawAPIClient
from .converters import RasterConverter, guess_content_type, png_filename
from .image_pipeline import ImageCache, ImagePipeline

__all__ = [
    "AttachmentClient",
    "ImageCache",
    "ImagePipeline",
    "LawAPIClient",
    "RasterConverter",
    "guess_content_type",
    "png_filename",
]
