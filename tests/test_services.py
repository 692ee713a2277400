"""Tests pour le service de recommandations (lecture du catalogue, mots-clés, payload)."""

from __future__ import annotations

import pytest

from reco_backend.domain.browsing import BrowseFilters
from reco_backend.domain.errors import CatalogUnavailableError
from reco_backend.domain.filtering import RecommendationQuery
from reco_backend.domain.keywords import KeywordResolver
from reco_backend.domain.services import RecommendationService
from reco_backend.domain.tag_selection import FacetResolver
from reco_backend.domain.taxonomy import TaxonomyKind
from reco_backend.infra.tag_selector import LLMTagSelector
from tests.fakes import (
    FailingLLM,
    FakeLLM,
    InMemoryCatalogRepository,
    InMemorySettingsRepo,
    StaticKeywordExtractor,
    UnavailableCatalogRepository,
    make_catalog_records,
)

ALL_VISIBLE = 4
SUMMARY_KEYS = {
    "id",
    "title",
    "cloudflare_uid",
    "thumbnail_time_seconds",
    "budget_min",
    "budget_max",
}


def _service(records=None, **kwargs) -> RecommendationService:
    return RecommendationService(
        InMemoryCatalogRepository(records or make_catalog_records()),
        InMemorySettingsRepo(),
        **kwargs,
    )


def test_recommend_returns_public_summaries(service) -> None:
    payload = service.recommend(RecommendationQuery(objectives=["promotion"]))
    assert [video["id"] for video in payload["videos"]] == ["v1", "v4", "v2"]
    assert set(payload["videos"][0]) == SUMMARY_KEYS
    assert "debug" not in payload


def test_pending_video_never_returned(service) -> None:
    payload = service.recommend(RecommendationQuery(limit=12))
    assert "v5" not in [video["id"] for video in payload["videos"]]


def test_description_keywords_via_substring(service) -> None:
    query = RecommendationQuery(description="Un clip tourné en montagne, plans au drone")
    payload = service.recommend(query)
    assert payload["videos"][0]["id"] == "v3"


def test_debug_payload() -> None:
    resolver = KeywordResolver(StaticKeywordExtractor(["Café"]))
    service = _service(keyword_resolver=resolver, debug=True)
    query = RecommendationQuery(
        objectives=["promotion"],
        budget="5000-10000",
        description="Publicité pour un café de quartier",
    )
    payload = service.recommend(query)
    debug = payload["debug"]
    assert debug["matchedKeywordLabels"] == ["Café"]
    assert debug["keywordSource"] == "llm"
    assert debug["priorityObjectifs"] == ["promotionnelle"]
    assert debug["fullMatchCount"] == 1
    assert debug["usedFallback"] is False
    assert "Favoris" in debug["reasonsByVideoId"]["v1"]


def test_debug_reports_fallback() -> None:
    service = _service(debug=True)
    query = RecommendationQuery(budget="5000-10000", durations=["mini_documentaire"])
    payload = service.recommend(query)
    assert payload["debug"]["usedFallback"] is True
    assert payload["debug"]["activeDurationFilters"] == ["mini_documentaire"]
    assert payload["videos"][0]["id"] == "v1"


def test_max_videos_caps_recommendations_only() -> None:
    service = _service(max_videos=2)
    payload = service.recommend(RecommendationQuery(limit=12))
    assert [video["id"] for video in payload["videos"]] == ["v1", "v2"]
    assert len(service.browse(BrowseFilters()).videos) == ALL_VISIBLE


def test_catalog_unavailable_propagates() -> None:
    service = RecommendationService(UnavailableCatalogRepository(), InMemorySettingsRepo())
    with pytest.raises(CatalogUnavailableError):
        service.recommend(RecommendationQuery())


@pytest.mark.parametrize(
    "broken",
    [
        {"title": "Sans identifiant", "cloudflare_uid": "cf"},
        {
            "id": "x",
            "title": "Budget inversé",
            "cloudflare_uid": "cf",
            "budget_min": 9,
            "budget_max": 1,
        },
    ],
)
def test_invalid_records_are_read_errors(broken) -> None:
    records = make_catalog_records()
    records["videos"].append(broken)
    with pytest.raises(CatalogUnavailableError):
        _service(records).load_catalog()


def _facet_resolver(llm) -> FacetResolver:
    return FacetResolver(LLMTagSelector(llm))


def test_browse_prompt_selects_facets() -> None:
    llm = FakeLLM('{"type": ["Story"], "objectif": ["promotionnelle"], "keyword": ["Inconnu"]}')
    service = _service(facet_resolver=_facet_resolver(llm))
    filters = BrowseFilters(selected={"type": {"t-clip"}})
    result = service.browse(filters, prompt="Une story pour promouvoir la boutique")
    assert filters.selected[TaxonomyKind.TYPE] == {"t-story"}
    assert filters.selected[TaxonomyKind.OBJECTIF] == {"o-promo"}
    assert result.full_match_count == 1
    assert result.videos[0].id == "v4"
    available = llm.calls[0]["messages"][1]["content"]
    assert "Vidéoclip" in available


def test_browse_prompt_keeps_filters_when_selection_fails() -> None:
    service = _service(facet_resolver=_facet_resolver(FailingLLM()))
    filters = BrowseFilters(selected={"type": {"t-clip"}})
    result = service.browse(filters, prompt="Un clip, budget d'environ 20 000$")
    assert filters.selected[TaxonomyKind.TYPE] == {"t-clip"}
    assert filters.budget_range is not None
    assert result.videos[0].id == "v3"


def test_browse_without_prompt_does_not_call_selector() -> None:
    llm = FakeLLM('{"type": ["Story"]}')
    service = _service(facet_resolver=_facet_resolver(llm))
    assert len(service.browse(BrowseFilters()).videos) == ALL_VISIBLE
    assert llm.calls == []
