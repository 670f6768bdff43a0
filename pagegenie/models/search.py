from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ClaimTokens:
    """Coarse signals pulled from a passage to bias query construction."""

    core: str = ""
    when: str = ""
    where: str = ""


@dataclass(frozen=True, slots=True)
class QueryPlan:
    """Ordered, de-duplicated search attempts, most specific first."""

    attempts: tuple[str, ...]
    language_hint: str
    region_hint: str | None = None
    last_resort: tuple[str, ...] = field(default_factory=tuple)


@dataclass(slots=True)
class RawSearchResult:
    """One hit as returned by a search provider, before normalization."""

    title: str
    link: str
    snippet: str = ""


@dataclass(frozen=True, slots=True)
class SearchItem:
    title: str
    url: str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"title": self.title, "url": self.url, "reason": self.reason}
