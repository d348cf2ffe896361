"""
EPUB 3 package writer.

Sections, stylesheets and raster assets are registered in memory and
written as a ZIP container with ``mimetype`` stored first, an OPF package
document, an XHTML navigation document and an NCX table of contents for
older reading systems.
"""

from __future__ import annotations

import io
import logging
import posixpath
import uuid
import zipfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Dict, List, Optional, Union

from lxml import etree

from ..exceptions import ArchiveWriteError, OutputIOError

logger = logging.getLogger(__name__)

CONTAINER_NS = "urn:oasis:names:tc:opendocument:xmlns:container"
OPF_NS = "http://www.idpf.org/2007/opf"
DC_NS = "http://purl.org/dc/elements/1.1/"
XHTML_NS = "http://www.w3.org/1999/xhtml"
OPS_NS = "http://www.idpf.org/2007/ops"
NCX_NS = "http://www.daisy.org/z3986/2005/ncx/"
XML_NS = "http://www.w3.org/XML/1998/namespace"

ROOT_DIR = "EPUB"
SECTION_DIR = "xhtml"
CSS_DIR = "css"
IMAGE_DIR = "images"

_IMAGE_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
}

_SECTION_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml" xmlns:epub="http://www.idpf.org/2007/ops" lang="{lang}" xml:lang="{lang}">
<head>
<meta charset="UTF-8" />
<title>{title}</title>
{links}
</head>
<body>
{body}
</body>
</html>
"""


@dataclass(slots=True)
class SectionEntry:
    """One XHTML page registered in the package."""

    filename: str
    title: str
    body: str
    parent: Optional[str] = None
    children: List[str] = field(default_factory=list)


class EPUBWriter:
    """In-memory EPUB 3 package built section by section."""

    def __init__(self, title: str):
        self.title = title
        self.author = ""
        self.language = "ja"
        self.description = ""
        self.identifier = f"urn:uuid:{uuid.uuid4()}"
        self._sections: Dict[str, SectionEntry] = {}
        self._stylesheets: Dict[str, str] = {}
        self._assets: Dict[str, bytes] = {}

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------
    def set_author(self, author: str) -> None:
        self.author = author

    def set_language(self, language: str) -> None:
        self.language = language or "ja"

    def set_description(self, description: str) -> None:
        self.description = description

    def set_identifier(self, identifier: str) -> None:
        self.identifier = identifier

    # ------------------------------------------------------------------
    # Content registration
    # ------------------------------------------------------------------
    @property
    def sections(self) -> List[SectionEntry]:
        """Registered sections in spine order."""
        return list(self._sections.values())

    @property
    def assets(self) -> Dict[str, bytes]:
        return dict(self._assets)

    @property
    def stylesheets(self) -> Dict[str, str]:
        return dict(self._stylesheets)

    def get_section(self, filename: str) -> SectionEntry:
        return self._sections[filename]

    def add_section(
        self,
        body: str,
        title: str,
        filename: Optional[str] = None,
        parent: Optional[str] = None,
    ) -> str:
        """
        Register an XHTML page.

        Args:
            body: HTML placed inside ``<body>``
            title: Plain-text title used in the navigation documents
            filename: Page filename; generated when omitted
            parent: Filename of the parent page for nested TOC entries

        Returns:
            Filename under which the page was registered

        Raises:
            ArchiveWriteError: If the filename is taken or the parent is unknown
        """
        if filename is None:
            filename = f"section-{len(self._sections) + 1:04d}.xhtml"
        elif not filename.endswith(".xhtml"):
            filename += ".xhtml"

        if filename in self._sections:
            raise ArchiveWriteError("filename already used", details=filename)
        if parent is not None and parent not in self._sections:
            raise ArchiveWriteError("parent section not found", details=parent)

        self._sections[filename] = SectionEntry(filename=filename, title=title, body=body, parent=parent)
        if parent is not None:
            self._sections[parent].children.append(filename)
        logger.debug(f"Added section {filename} ({title})" + (f" under {parent}" if parent else ""))
        return filename

    def add_stylesheet(self, css: str, filename: str = "styles.css") -> str:
        if filename in self._stylesheets:
            raise ArchiveWriteError("stylesheet already added", details=filename)
        self._stylesheets[filename] = css
        return f"../{CSS_DIR}/{filename}"

    def add_raster_asset(self, data: bytes, filename: str) -> str:
        """Store image bytes; a taken name gets a numeric suffix."""
        stem, ext = posixpath.splitext(filename)
        candidate = filename
        counter = 1
        while candidate in self._assets:
            candidate = f"{stem}-{counter}{ext}"
            counter += 1
        self._assets[candidate] = data
        return f"../{IMAGE_DIR}/{candidate}"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def serialize(self) -> bytes:
        """Build the EPUB container and return its bytes."""
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zip_file:
                zip_file.writestr(
                    zipfile.ZipInfo("mimetype"), "application/epub+zip", compress_type=zipfile.ZIP_STORED
                )
                zip_file.writestr("META-INF/container.xml", self._generate_container_xml())
                zip_file.writestr(f"{ROOT_DIR}/package.opf", self._generate_package_opf())
                zip_file.writestr(f"{ROOT_DIR}/nav.xhtml", self._generate_nav_xhtml())
                zip_file.writestr(f"{ROOT_DIR}/toc.ncx", self._generate_toc_ncx())
                for name, css in self._stylesheets.items():
                    zip_file.writestr(f"{ROOT_DIR}/{CSS_DIR}/{name}", css)
                for name, data in self._assets.items():
                    zip_file.writestr(f"{ROOT_DIR}/{IMAGE_DIR}/{name}", data)
                for section in self._sections.values():
                    zip_file.writestr(f"{ROOT_DIR}/{SECTION_DIR}/{section.filename}", self._render_section(section))
        except (OSError, ValueError, zipfile.BadZipFile) as exc:
            raise ArchiveWriteError("building EPUB archive", details=str(exc)) from exc
        return buffer.getvalue()

    def write(self, dest_path: Union[str, Path]) -> Path:
        """
        Write the package to ``dest_path``, creating parent directories.

        The archive is built in memory first so a failure never leaves a
        partial file behind.
        """
        dest = Path(dest_path)
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputIOError("creating directory", details=str(exc)) from exc

        data = self.serialize()
        try:
            dest.write_bytes(data)
        except OSError as exc:
            dest.unlink(missing_ok=True)
            raise OutputIOError("writing EPUB file", details=str(exc)) from exc

        logger.info(f"Wrote {dest} ({len(self._sections)} sections, {len(self._assets)} images)")
        return dest

    def _render_section(self, section: SectionEntry) -> str:
        links = "\n".join(
            f'<link rel="stylesheet" type="text/css" href="../{CSS_DIR}/{name}" />' for name in self._stylesheets
        )
        return _SECTION_TEMPLATE.format(
            lang=escape(self.language),
            title=escape(section.title),
            links=links,
            body=section.body,
        )

    def _generate_container_xml(self) -> bytes:
        root = etree.Element(f"{{{CONTAINER_NS}}}container", {"version": "1.0"}, nsmap={None: CONTAINER_NS})
        rootfiles = etree.SubElement(root, f"{{{CONTAINER_NS}}}rootfiles")
        etree.SubElement(
            rootfiles,
            f"{{{CONTAINER_NS}}}rootfile",
            {"full-path": f"{ROOT_DIR}/package.opf", "media-type": "application/oebps-package+xml"},
        )
        return self._tostring(root)

    def _generate_package_opf(self) -> bytes:
        root = etree.Element(
            f"{{{OPF_NS}}}package",
            {"version": "3.0", "unique-identifier": "pub-id", f"{{{XML_NS}}}lang": self.language},
            nsmap={None: OPF_NS, "dc": DC_NS},
        )

        metadata = etree.SubElement(root, f"{{{OPF_NS}}}metadata")
        identifier = etree.SubElement(metadata, f"{{{DC_NS}}}identifier", {"id": "pub-id"})
        identifier.text = self.identifier
        etree.SubElement(metadata, f"{{{DC_NS}}}title").text = self.title
        etree.SubElement(metadata, f"{{{DC_NS}}}language").text = self.language
        if self.author:
            etree.SubElement(metadata, f"{{{DC_NS}}}creator").text = self.author
        if self.description:
            etree.SubElement(metadata, f"{{{DC_NS}}}description").text = self.description
        modified = etree.SubElement(metadata, f"{{{OPF_NS}}}meta", {"property": "dcterms:modified"})
        modified.text = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

        manifest = etree.SubElement(root, f"{{{OPF_NS}}}manifest")
        etree.SubElement(
            manifest,
            f"{{{OPF_NS}}}item",
            {"id": "nav", "href": "nav.xhtml", "media-type": "application/xhtml+xml", "properties": "nav"},
        )
        etree.SubElement(
            manifest,
            f"{{{OPF_NS}}}item",
            {"id": "ncx", "href": "toc.ncx", "media-type": "application/x-dtbncx+xml"},
        )
        for index, name in enumerate(self._stylesheets, start=1):
            etree.SubElement(
                manifest,
                f"{{{OPF_NS}}}item",
                {"id": f"css-{index:04d}", "href": f"{CSS_DIR}/{name}", "media-type": "text/css"},
            )
        for index, name in enumerate(self._assets, start=1):
            media_type = _IMAGE_TYPES.get(posixpath.splitext(name)[1].lower(), "application/octet-stream")
            etree.SubElement(
                manifest,
                f"{{{OPF_NS}}}item",
                {"id": f"image-{index:04d}", "href": f"{IMAGE_DIR}/{name}", "media-type": media_type},
            )
        section_ids = {}
        for index, section in enumerate(self._sections.values(), start=1):
            section_ids[section.filename] = f"section-{index:04d}"
            etree.SubElement(
                manifest,
                f"{{{OPF_NS}}}item",
                {
                    "id": section_ids[section.filename],
                    "href": f"{SECTION_DIR}/{section.filename}",
                    "media-type": "application/xhtml+xml",
                },
            )

        spine = etree.SubElement(root, f"{{{OPF_NS}}}spine", {"toc": "ncx"})
        for section in self._sections.values():
            etree.SubElement(spine, f"{{{OPF_NS}}}itemref", {"idref": section_ids[section.filename]})

        return self._tostring(root)

    def _generate_nav_xhtml(self) -> bytes:
        root = etree.Element(
            f"{{{XHTML_NS}}}html", {"lang": self.language}, nsmap={None: XHTML_NS, "epub": OPS_NS}
        )
        head = etree.SubElement(root, f"{{{XHTML_NS}}}head")
        etree.SubElement(head, f"{{{XHTML_NS}}}title").text = self.title
        body = etree.SubElement(root, f"{{{XHTML_NS}}}body")
        nav = etree.SubElement(body, f"{{{XHTML_NS}}}nav", {f"{{{OPS_NS}}}type": "toc", "id": "toc"})
        etree.SubElement(nav, f"{{{XHTML_NS}}}h1").text = self.title

        top_level = [s.filename for s in self._sections.values() if s.parent is None]
        if top_level:
            self._append_nav_list(nav, top_level)
        return self._tostring(root)

    def _append_nav_list(self, parent: etree._Element, filenames: List[str]) -> None:
        ol = etree.SubElement(parent, f"{{{XHTML_NS}}}ol")
        for filename in filenames:
            section = self._sections[filename]
            li = etree.SubElement(ol, f"{{{XHTML_NS}}}li")
            link = etree.SubElement(li, f"{{{XHTML_NS}}}a", {"href": f"{SECTION_DIR}/{filename}"})
            link.text = section.title
            if section.children:
                self._append_nav_list(li, section.children)

    def _generate_toc_ncx(self) -> bytes:
        root = etree.Element(f"{{{NCX_NS}}}ncx", {"version": "2005-1"}, nsmap={None: NCX_NS})
        head = etree.SubElement(root, f"{{{NCX_NS}}}head")
        etree.SubElement(head, f"{{{NCX_NS}}}meta", {"name": "dtb:uid", "content": self.identifier})
        doc_title = etree.SubElement(root, f"{{{NCX_NS}}}docTitle")
        etree.SubElement(doc_title, f"{{{NCX_NS}}}text").text = self.title
        nav_map = etree.SubElement(root, f"{{{NCX_NS}}}navMap")

        play_order = 0
        points: Dict[str, etree._Element] = {}
        for section in self._sections.values():
            play_order += 1
            container = points[section.parent] if section.parent else nav_map
            point = etree.SubElement(
                container,
                f"{{{NCX_NS}}}navPoint",
                {"id": f"navpoint-{play_order}", "playOrder": str(play_order)},
            )
            label = etree.SubElement(point, f"{{{NCX_NS}}}navLabel")
            etree.SubElement(label, f"{{{NCX_NS}}}text").text = section.title
            etree.SubElement(point, f"{{{NCX_NS}}}content", {"src": f"{SECTION_DIR}/{section.filename}"})
            points[section.filename] = point
        return self._tostring(root)

    @staticmethod
    def _tostring(root: etree._Element) -> bytes:
        return etree.tostring(root, encoding="utf-8", xml_declaration=True, pretty_print=True)
