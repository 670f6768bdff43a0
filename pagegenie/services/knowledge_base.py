"""Render a user's recent notes and suggestions as compact prompt context."""
from __future__ import annotations

from typing import Any, Sequence

from pagegenie.tools.web_utils import clip

MAX_NOTES = 3
MAX_SUGGESTIONS = 2
NOTE_PREVIEW_CHARS = 300
SUGGESTION_REASON_CHARS = 280


def _text(record: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = record.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def build_knowledge_base(
    notes: Sequence[dict[str, Any]],
    suggestions: Sequence[dict[str, Any]],
) -> str:
    """Notes and suggestions are expected newest first."""
    lines: list[str] = []

    for note in list(notes)[:MAX_NOTES]:
        categories = note.get("categories") or {}
        if not isinstance(categories, dict):
            categories = {}
        topic = _text(categories, "topic") or "Note"
        summary = _text(categories, "summary")
        lines.append(f"- Note: {topic}")
        if summary:
            lines.append(f"  Summary: {clip(summary, NOTE_PREVIEW_CHARS)}")
        else:
            content = _text(note, "content")
            if content:
                lines.append(f"  Text: {clip(content, NOTE_PREVIEW_CHARS)}")
        source = _text(note, "sourceUrl", "source_url")
        if source:
            lines.append(f"  Source: {source}")

    for suggestion in list(suggestions)[:MAX_SUGGESTIONS]:
        lines.append(f"- Suggestion: {_text(suggestion, 'title') or 'Untitled'}")
        reason = _text(suggestion, "reason")
        if reason:
            lines.append(f"  Why: {clip(reason, SUGGESTION_REASON_CHARS)}")
        link = _text(suggestion, "suggestedUrl", "url", "baseSourceUrl")
        if link:
            lines.append(f"  Link: {link}")

    return "\n".join(lines)
