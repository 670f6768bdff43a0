from __future__ import annotations

import re
from dataclasses import dataclass

import httpx
import trafilatura
from bs4 import BeautifulSoup

from pagegenie.config import settings
from pagegenie.errors import UpstreamCallFailure, ValidationFailure
from pagegenie.tools.web_utils import is_valid_url


@dataclass
class ExtractedContent:
    url: str
    title: str
    text: str
    method: str


def _normalize_text(text: str) -> str:
    text = text.replace("\xa0", " ")
    text = re.sub(r"\r\n?", "\n", text)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def _truncate(text: str, max_chars: int) -> str:
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."


def _extract_with_trafilatura(raw_html: str) -> str:
    extracted = trafilatura.extract(raw_html, output_format="txt")
    if not isinstance(extracted, str):
        return ""
    return _normalize_text(extracted)


def extract_main_content(
    url: str,
    raw_html: str,
    *,
    max_chars: int | None = None,
) -> ExtractedContent:
    """Pull the page title and readable body text out of ``raw_html``."""
    target_chars = max_chars if max_chars is not None else settings.extractor_max_page_chars
    soup = BeautifulSoup(raw_html, "html.parser")
    title = _normalize_text(soup.title.string) if soup.title and soup.title.string else ""

    text = _extract_with_trafilatura(raw_html)
    method = "trafilatura"
    if not text:
        body = soup.body or soup
        text = _normalize_text(body.get_text("\n"))
        method = "raw"

    return ExtractedContent(
        url=url,
        title=title,
        text=_truncate(text, target_chars),
        method=method,
    )


async def fetch_and_extract(url: str) -> ExtractedContent:
    """Fetch ``url`` and extract its title and text."""
    if not is_valid_url(url):
        raise ValidationFailure(f"Invalid URL: {url}")

    try:
        async with httpx.AsyncClient(
            timeout=settings.fetch_timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": settings.fetch_user_agent},
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            raw_html = response.text
    except httpx.HTTPStatusError as e:
        raise UpstreamCallFailure("fetch", f"HTTP {e.response.status_code} for {url}") from e
    except httpx.HTTPError as e:
        raise UpstreamCallFailure("fetch", str(e) or type(e).__name__) from e

    content = extract_main_content(url, raw_html)
    if not content.text:
        raise UpstreamCallFailure("fetch", f"No readable text found at {url}")
    return content
