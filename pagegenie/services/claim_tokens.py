from __future__ import annotations

import re
from urllib.parse import unquote, urlparse

from pagegenie.models.search import ClaimTokens

YEAR_PATTERN = re.compile(r"\b(?:18\d{2}|19\d{2}|20\d{2})\b")
CAPITALIZED_WORD_PATTERN = re.compile(r"\b[A-Z][A-Za-z]+\b")
PAGE_EXTENSION_PATTERN = re.compile(r"\.(?:s?html?|php|aspx?|jsp)$", re.IGNORECASE)

# First match wins.
CORE_KEYWORDS = ("born", "captain", "cricketer")
MAX_PLACE_TOKENS = 5


def _title_case(words: str) -> str:
    return " ".join(word.capitalize() for word in words.split())


def extract_subject(source_url: str | None) -> str:
    """Guess the page subject from its URL path.

    ``/wiki/Virat_Kohli`` becomes ``Virat Kohli``; other paths use their last
    non-empty segment with ``-``/``_`` treated as spaces.
    """
    if not source_url:
        return ""
    try:
        path = urlparse(source_url.strip()).path
    except ValueError:
        return ""

    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return ""

    if "/wiki/" in path:
        title = unquote(path.rsplit("/", 1)[-1] or segments[-1])
        return _title_case(title.replace("_", " "))

    last = PAGE_EXTENSION_PATTERN.sub("", unquote(segments[-1]))
    return _title_case(last.replace("-", " ").replace("_", " "))


def extract_years(text: str) -> str:
    # Duplicates are kept as found.
    return " ".join(YEAR_PATTERN.findall(text))


def extract_places(text: str, subject_hint: str) -> str:
    subject = (subject_hint or "").lower()
    places: list[str] = []
    seen: set[str] = set()
    for token in CAPITALIZED_WORD_PATTERN.findall(text):
        lowered = token.lower()
        if lowered in subject or lowered in seen:
            continue
        seen.add(lowered)
        places.append(token)
        if len(places) >= MAX_PLACE_TOKENS:
            break
    return " ".join(places)


def extract_core(text: str) -> str:
    lowered = text.lower()
    for keyword in CORE_KEYWORDS:
        if keyword in lowered:
            return keyword
    return ""


def extract(text: str | None, subject_hint: str | None = "") -> ClaimTokens:
    """Pull the keyword hint, year markers and place markers out of ``text``."""
    text = text or ""
    return ClaimTokens(
        core=extract_core(text),
        when=extract_years(text),
        where=extract_places(text, subject_hint or ""),
    )
