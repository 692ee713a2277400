"""Tests pour le classement du portfolio par facettes (complètes puis partielles)."""

from __future__ import annotations

from reco_backend.domain.browsing import (
    NO_FULL_MATCH_MESSAGE,
    NO_MORE_MATCH_MESSAGE,
    BrowseFilters,
    rank_for_browsing,
)
from reco_backend.domain.ranges import BUDGET_LEVELS, NumericRange
from reco_backend.domain.taxonomy import Tag, TaxonomyKind, Video

# Constantes pour éviter les erreurs PLR2004 (Magic values)
ALL_VISIBLE = 4
INDEX_4000 = 2
INDEX_5000 = 3
INDEX_10000 = 4
PROMO_VIDEOS = 2


def _ids(result) -> list[str]:
    return [video.id for video in result.videos]


def test_no_filter_keeps_catalog_order(catalog) -> None:
    result = rank_for_browsing(catalog, BrowseFilters())
    assert _ids(result) == ["v1", "v2", "v3", "v4"]
    assert result.full_match_count == ALL_VISIBLE
    assert not result.has_active_filters
    assert result.divider_message is None


def test_pending_videos_are_dropped(catalog) -> None:
    pending = Video(id="p", title="En attente", cloudflare_uid="pending:1")
    result = rank_for_browsing([pending, *catalog], BrowseFilters())
    assert "p" not in _ids(result)


def test_single_facet_full_match_first(catalog) -> None:
    filters = BrowseFilters(selected={"type": ["t-pub"]})
    result = rank_for_browsing(catalog, filters)
    assert _ids(result) == ["v1", "v2", "v3", "v4"]
    assert result.full_match_count == 1
    assert result.divider_message == NO_MORE_MATCH_MESSAGE


def test_every_selected_facet_required_for_full_match(catalog) -> None:
    """Type « Vidéoclip » et objectif « Promotionnelle »: aucune vidéo n'a les deux."""
    filters = BrowseFilters(selected={TaxonomyKind.TYPE: {"t-clip"}, "objectif": ["o-promo"]})
    result = rank_for_browsing(catalog, filters)
    assert result.full_match_count == 0
    assert result.divider_message == NO_FULL_MATCH_MESSAGE
    # type avant objectif, puis les vidéos sans correspondance
    assert _ids(result) == ["v3", "v1", "v4", "v2"]


def test_keyword_partial_match_before_type(catalog) -> None:
    filters = BrowseFilters(selected={"keyword": ["k-montagne"], "type": ["t-pub"]})
    result = rank_for_browsing(catalog, filters)
    assert _ids(result) == ["v3", "v1", "v2", "v4"]


def test_budget_slider(catalog) -> None:
    filters = BrowseFilters(budget_min_index=INDEX_5000, budget_max_index=INDEX_10000)
    assert filters.budget_range == NumericRange(5000, 10000)
    result = rank_for_browsing(catalog, filters)
    assert result.has_active_filters
    assert result.full_match_count == 1
    assert _ids(result)[0] == "v1"


def test_duration_slider(catalog) -> None:
    filters = BrowseFilters(duration_min_index=0, duration_max_index=1)
    result = rank_for_browsing(catalog, filters)
    assert result.full_match_count == 1
    assert _ids(result)[0] == "v4"


def test_full_scale_sliders_are_inactive() -> None:
    filters = BrowseFilters(budget_min_index=0, budget_max_index=len(BUDGET_LEVELS) - 1)
    assert filters.budget_range is None
    assert not filters.has_active_filters


def test_apply_budget_prompt() -> None:
    filters = BrowseFilters()
    filters.apply_budget_prompt("On vise environ 5 000$ au total")
    assert (filters.budget_min_index, filters.budget_max_index) == (INDEX_4000, INDEX_5000)
    assert filters.has_active_filters


def test_apply_budget_prompt_without_amount_changes_nothing() -> None:
    filters = BrowseFilters()
    filters.apply_budget_prompt("Une vidéo pour nos 10 ans")
    assert not filters.has_active_filters


TAGS = [
    Tag(id="t-pub", kind="type", label="Publicité"),
    Tag(id="o-promo", kind="objectif", label="Promotionnelle"),
    Tag(id="k-cafe", kind="keyword", label="Café"),
    Tag(id="k-pub", kind="keyword", label="Publicité"),
]


def test_apply_tag_selection_maps_labels_within_their_facet() -> None:
    filters = BrowseFilters(selected={"feel": {"f-chaleur"}}, duration_max_index=1)
    filters.apply_tag_selection(
        {"type": ["PUBLICITE"], "keyword": ["café ", "Inconnu"], "objectif": ["Café"]}, TAGS
    )
    assert filters.selected[TaxonomyKind.TYPE] == {"t-pub"}
    assert filters.selected[TaxonomyKind.KEYWORD] == {"k-cafe"}
    assert filters.selected[TaxonomyKind.OBJECTIF] == set()
    # la sélection précédente est remplacée, les curseurs sont conservés
    assert filters.selected[TaxonomyKind.FEEL] == set()
    assert filters.duration_max_index == 1


def test_tag_selection_drives_ranking(catalog) -> None:
    filters = BrowseFilters()
    filters.apply_tag_selection({"objectif": ["promotionnelle"]}, TAGS)
    result = rank_for_browsing(catalog, filters)
    assert _ids(result)[:2] == ["v1", "v4"]
    assert result.full_match_count == PROMO_VIDEOS
