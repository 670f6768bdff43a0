"""Prompt catalog backed by ``prompts/prompts.json``.

Entries are addressed by dotted keys (``tasks.translate``) and rendered with
``string.Template``; the file is re-read only when its mtime changes.
"""
from __future__ import annotations

import json
from pathlib import Path
from string import Template
from typing import Any


PROMPTS_PATH = Path(__file__).resolve().parents[1] / "prompts" / "prompts.json"


class PromptCatalog:
    def __init__(self, path: Path):
        self.path = path
        self._entries: dict[str, Any] | None = None
        self._mtime_ns: int | None = None

    def entries(self) -> dict[str, Any]:
        mtime_ns = self.path.stat().st_mtime_ns
        if self._entries is None or self._mtime_ns != mtime_ns:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            if not isinstance(payload, dict):
                raise ValueError(f"Prompt catalog must be a JSON object: {self.path}")
            self._entries = payload
            self._mtime_ns = mtime_ns
        return self._entries

    def lookup(self, key: str) -> Any:
        node: Any = self.entries()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                raise KeyError(f"Prompt key not found: {key}")
            node = node[part]
        return node

    def render(self, key: str, **values: Any) -> str:
        entry = self.lookup(key)
        if not isinstance(entry, str):
            raise TypeError(f"Prompt key must map to a string: {key}")
        try:
            return Template(entry).substitute(**values)
        except KeyError as exc:
            raise KeyError(f"Missing template value '{exc.args[0]}' for prompt '{key}'") from exc

    def clear(self) -> None:
        self._entries = None
        self._mtime_ns = None


_catalog = PromptCatalog(PROMPTS_PATH)


def has_prompt(key: str) -> bool:
    try:
        return isinstance(_catalog.lookup(key), str)
    except KeyError:
        return False


def render_prompt(key: str, **values: Any) -> str:
    return _catalog.render(key, **values)


def clear_prompt_cache() -> None:
    _catalog.clear()
