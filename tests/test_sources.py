from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from pagegenie.errors import ValidationFailure
from pagegenie.models.search import RawSearchResult
from pagegenie.services import sources
from pagegenie.tools.content_extractor import ExtractedContent
from pagegenie.tools.search_provider import SearchResponse

TEXT = "Virat Kohli was born on 5 November 1988 in Delhi. He captained India."
URL = "https://en.wikipedia.org/wiki/Virat_Kohli"


@pytest.fixture
def limits():
    with patch("pagegenie.services.sources.settings") as mock_settings:
        mock_settings.sources_default_limit = 5
        mock_settings.sources_max_limit = 20
        yield mock_settings


class TestResolveLimit:
    def test_default_when_missing(self, limits):
        assert sources.resolve_limit(None) == 5

    def test_clamped_to_maximum(self, limits):
        assert sources.resolve_limit(100) == 20

    def test_rejects_non_positive(self, limits):
        with pytest.raises(ValidationFailure):
            sources.resolve_limit(0)


@pytest.mark.asyncio
async def test_find_sources_searches_with_planned_queries(limits):
    searcher = AsyncMock(
        return_value=SearchResponse(
            results=[
                RawSearchResult("Kohli profile - ESPN", "https://www.espncricinfo.com/kohli", "Profile."),
                RawSearchResult("Kohli biography", "https://www.bbc.com/kohli", "Biography."),
            ],
            provider="brave",
        )
    )

    items = await sources.find_sources(TEXT, URL, size=2, searcher=searcher)

    assert [item.url for item in items] == ["https://www.espncricinfo.com/kohli", "https://www.bbc.com/kohli"]
    first_query = searcher.await_args_list[0].args[0]
    assert first_query.startswith("Virat Kohli")
    assert "-site:en.wikipedia.org" in first_query
    assert searcher.await_args.kwargs["region"] == "IN"


@pytest.mark.asyncio
async def test_find_sources_fetches_page_when_text_is_missing(limits):
    page = ExtractedContent(url=URL, title="Virat Kohli", text=TEXT, method="raw")
    searcher = AsyncMock(return_value=SearchResponse(results=[], provider="brave"))

    with patch(
        "pagegenie.services.sources.content_extractor.fetch_and_extract",
        new=AsyncMock(return_value=page),
    ) as fetch:
        items = await sources.find_sources("", URL, searcher=searcher)

    fetch.assert_awaited_once_with(URL)
    assert items == []
    assert searcher.await_count > 0


@pytest.mark.asyncio
async def test_find_sources_requires_text_or_url(limits):
    searcher = AsyncMock()
    with pytest.raises(ValidationFailure):
        await sources.find_sources("  ", None, searcher=searcher)
    searcher.assert_not_awaited()
