"""
Pytest configuration for LawQuill
"""

import io
import logging
import struct
import sys
import zlib
from pathlib import Path
from typing import Dict, List, Optional

import fitz
import pytest
from PIL import Image

from lawquill.exceptions import FetchError


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    import tempfile
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


def build_law_xml(
    main_provision: str = "",
    extra: str = "",
    title: str = "テスト法",
    law_num: str = "令和五年法律第一号",
    enact: str = "",
) -> bytes:
    """Wrap body fragments in a minimal Law document."""
    enact_xml = f"<EnactStatement>{enact}</EnactStatement>" if enact else ""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<Law Era="Reiwa" Year="5" Num="1" LawType="Act" Lang="ja" PromulgateMonth="4" PromulgateDay="1">
  <LawNum>{law_num}</LawNum>
  <LawBody>
    <LawTitle Kana="てすとほう" Abbrev="">{title}</LawTitle>
    {enact_xml}
    <MainProvision>{main_provision}</MainProvision>
    {extra}
  </LawBody>
</Law>
""".encode("utf-8")


def paragraph_xml(sentence: str, num: int = 1, label: str = "") -> str:
    return (
        f'<Paragraph Num="{num}"><ParagraphNum>{label}</ParagraphNum>'
        f"<ParagraphSentence><Sentence>{sentence}</Sentence></ParagraphSentence></Paragraph>"
    )


@pytest.fixture
def law_xml():
    """Builder for Law XML documents."""
    return build_law_xml


class FakeClient:
    """Attachment client serving canned payloads and recording calls."""

    def __init__(self, payloads: Optional[Dict[str, bytes]] = None):
        self.payloads = payloads or {}
        self.calls: List[tuple] = []

    def fetch_attachment(self, revision_id: str, src: str) -> bytes:
        self.calls.append((revision_id, src))
        if src not in self.payloads:
            raise FetchError("attachment not found", details=src, status_code=404)
        return self.payloads[src]


@pytest.fixture
def fake_client():
    """Empty fake attachment client."""
    return FakeClient()


@pytest.fixture
def pdf_bytes():
    """Single-page PDF generated with PyMuPDF."""
    doc = fitz.open()
    page = doc.new_page(width=200, height=100)
    page.insert_text((20, 50), "diagram")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def png_bytes():
    """Small RGB PNG image."""
    output = io.BytesIO()
    Image.new("RGB", (8, 6), (255, 0, 0)).save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def jpeg_bytes():
    """Small JPEG image."""
    output = io.BytesIO()
    Image.new("RGB", (8, 6), (0, 0, 255)).save(output, format="JPEG")
    return output.getvalue()


def _png_chunk(tag: bytes, payload: bytes) -> bytes:
    return struct.pack(">I", len(payload)) + tag + payload + struct.pack(">I", zlib.crc32(tag + payload))


@pytest.fixture
def oversized_png_bytes():
    """PNG header declaring 30000x30000 pixels, past Pillow's decompression-bomb limit."""
    header = struct.pack(">IIBBBBB", 30000, 30000, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", b"")
        + _png_chunk(b"IEND", b"")
    )


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    logging.raiseExceptions = False
