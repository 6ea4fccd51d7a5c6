"""
Read-only ("HR view") gate.

A page opened with `?view=hr` is restricted: the console and image
controls are not offered. The gate is evaluated once per session and
never changes afterwards.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

VIEW_PARAM = "view"
RESTRICTED_VALUE = "hr"


def is_restricted_url(url: str) -> bool:
    """True when the first `view` parameter of `url` equals the sentinel."""
    values = parse_qs(urlsplit(url).query, keep_blank_values=True).get(VIEW_PARAM)
    return bool(values) and values[0] == RESTRICTED_VALUE


def share_link(url: str) -> str:
    """Base address of `url` (scheme, host, path) with the restricted flag set."""
    parts = urlsplit(url)
    # Origin only: credentials in the netloc are dropped
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    if parts.port is not None:
        host = f"{host}:{parts.port}"
    query = urlencode({VIEW_PARAM: RESTRICTED_VALUE})
    return urlunsplit((parts.scheme, host, parts.path, query, ""))


@dataclass(frozen=True)
class VisibilityGate:
    page_url: str
    restricted: bool

    @classmethod
    def from_url(cls, url: str) -> "VisibilityGate":
        gate = cls(page_url=url, restricted=is_restricted_url(url))
        if gate.restricted:
            logger.info("Restricted view active: console disabled")
        return gate

    @property
    def share_link(self) -> str:
        return share_link(self.page_url)

    def share(self, clipboard: Optional[Callable[[str], None]] = None) -> str:
        """Build the share link and hand it to `clipboard` if given."""
        link = self.share_link
        if clipboard is not None:
            clipboard(link)
        logger.info(f"Share link generated: {link}")
        return link
