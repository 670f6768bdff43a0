from __future__ import annotations

import re
from urllib.parse import urlparse

ELLIPSIS = "…"


def is_valid_url(url: str) -> bool:
    """Basic URL validation."""
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except ValueError:
        return False


def collapse_whitespace(text: str | None) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def clip(text: str | None, max_length: int) -> str:
    """Collapse whitespace and trim to ``max_length`` with an ellipsis marker."""
    text = collapse_whitespace(text)
    if len(text) > max_length:
        text = text[:max_length].rstrip() + ELLIPSIS
    return text


def normalize_host(url: str | None) -> str:
    """Lowercase hostname without a leading ``www.``; empty when unparseable."""
    if not url:
        return ""
    try:
        host = urlparse(url.strip()).hostname or ""
    except ValueError:
        return ""
    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    return host
