"""Custom exceptions for LawQuill."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional


class LawQuillError(Exception):
    """Base exception for LawQuill errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message

    def with_context(self, context: str) -> "LawQuillError":
        """Return a copy of this error whose message is prefixed by ``context``."""
        wrapped = self.__class__.__new__(self.__class__)
        LawQuillError.__init__(wrapped, context, str(self))
        for key, value in vars(self).items():
            if key not in ("message", "details"):
                setattr(wrapped, key, value)
        return wrapped


class MalformedInputError(LawQuillError):
    """Exception raised when the source XML cannot be parsed."""

    pass


class MissingRequiredFieldError(MalformedInputError):
    """Exception raised when a required title element is absent or empty."""

    def __init__(self, message: str, details: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message, details)
        self.field = field


class FetchError(LawQuillError):
    """Exception raised when an attachment cannot be downloaded."""

    def __init__(self, message: str, details: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, details)
        self.status_code = status_code


class DecodeError(LawQuillError):
    """Exception raised when an attachment cannot be decoded or re-encoded."""

    pass


class ConfigurationError(LawQuillError):
    """Exception raised when a required collaborator is not configured."""

    pass


class ArchiveWriteError(LawQuillError):
    """Exception raised while registering content in the output archive."""

    pass


class OutputIOError(LawQuillError):
    """Exception raised when the destination file cannot be written."""

    pass


class SourceIOError(LawQuillError):
    """Exception raised when the source file cannot be read."""

    pass


# Figure-level failures; renderers omit the figure instead of aborting.
FIGURE_ERRORS = (FetchError, DecodeError)


@contextmanager
def error_context(context: str) -> Iterator[None]:
    """
    Prefix any LawQuill error raised inside the block with ``context``.

    The exception class is preserved so callers can still tell fatal
    structural errors apart from figure-level ones.
    """
    try:
        yield
    except LawQuillError as exc:
        raise exc.with_context(context) from exc
