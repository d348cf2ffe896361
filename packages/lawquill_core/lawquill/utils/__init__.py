"""Utility helpers for LawQuill."""

from .rich_logger import get_console, setup_logging

__all__ = ["get_console", "setup_logging"]
