"""Clients that download figure attachments referenced by law XML."""

from __future__ import annotations

import logging
from typing import Optional, Protocol
from urllib.parse import quote

import requests

from ..config import DEFAULT_API_BASE_URL
from ..exceptions import FetchError

logger = logging.getLogger(__name__)


class AttachmentClient(Protocol):
    """Anything that can return the raw bytes of an attachment."""

    def fetch_attachment(self, revision_id: str, src: str) -> bytes:
        ...


class LawAPIClient:
    """
    Client for the e-Gov law API v2 attachment endpoint.

    ``GET {base_url}/attachment/{law_revision_id}?src=<src>`` returns the
    attachment bytes.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("User-Agent", "lawquill")

    def attachment_url(self, revision_id: str) -> str:
        return f"{self.base_url}/attachment/{quote(revision_id, safe='')}"

    def fetch_attachment(self, revision_id: str, src: str) -> bytes:
        """
        Download one attachment.

        Args:
            revision_id: Law revision id used to route the request
            src: Attachment reference as written in the Fig element

        Returns:
            Attachment bytes

        Raises:
            FetchError: On network failure, non-2xx status or empty body
        """
        url = self.attachment_url(revision_id)
        try:
            response = self.session.get(url, params={"src": src}, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(f"requesting attachment {src}", details=str(exc)) from exc

        if response.status_code == 404:
            raise FetchError("attachment not found", details=src, status_code=404)
        if not 200 <= response.status_code < 300:
            raise FetchError(
                f"unexpected HTTP status {response.status_code}",
                details=src,
                status_code=response.status_code,
            )
        if not response.content:
            raise FetchError("empty response", details=src, status_code=response.status_code)

        logger.debug(f"Fetched {src} for {revision_id} ({len(response.content)} bytes)")
        return response.content

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "LawAPIClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
