"""Law XML parsing."""

from .law_xml_parser import LawXMLParser

__all__ = ["LawXMLParser"]
