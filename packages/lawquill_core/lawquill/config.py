"""Conversion options shared by the assembler, the CLI and the image pipeline."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import PurePath
from typing import Optional, Union

DEFAULT_API_BASE_URL = "https://laws.e-gov.go.jp/api/2"
DEFAULT_MAX_IMAGE_HEIGHT = "80vh"


@dataclass(frozen=True)
class ConversionOptions:
    """Options that control a single XML to EPUB conversion."""

    download_images: bool = True
    revision_id: Optional[str] = None
    max_image_height: str = DEFAULT_MAX_IMAGE_HEIGHT
    title_page: bool = True
    include_stylesheet: bool = True
    api_base_url: str = DEFAULT_API_BASE_URL
    request_timeout: float = 30.0
    pdf_zoom: float = 2.0

    def images_enabled(self) -> bool:
        """Figures are resolved only when downloads are on and a revision is known."""
        return self.download_images and bool(self.revision_id)

    def with_revision_id(self, revision_id: Optional[str]) -> "ConversionOptions":
        return replace(self, revision_id=revision_id)


def revision_id_from_path(path: Union[str, PurePath]) -> Optional[str]:
    """
    Derive the law revision id from an e-Gov file name.

    Revision files are named ``<lawId>_<yyyymmdd>_<seq>.xml``; the stem is
    the revision id when it contains at least two underscores.

    Args:
        path: Source XML path

    Returns:
        Revision id or None when the name does not follow the convention
    """
    stem = PurePath(path).stem
    if stem.count("_") >= 2:
        return stem
    return None
