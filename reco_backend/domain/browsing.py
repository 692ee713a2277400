"""
Classement du portfolio selon les facettes choisies par le visiteur.

Contrairement aux références, aucune vidéo n'est écartée: le catalogue entier est réordonné en deux
groupes, les correspondances complètes puis les correspondances partielles, séparés par un message.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reco_backend.domain.ranges import (
    BUDGET_LEVELS,
    DURATION_LEVELS,
    NumericRange,
    budget_indices_from_text,
    budget_matches,
    contains,
    scale_range,
)
from reco_backend.domain.taxonomy import Tag, TaxonomyKind, Video, empty_groups
from reco_backend.domain.text import normalize

# Ordre de départage des correspondances par facette.
KIND_ORDER: tuple[TaxonomyKind, ...] = (
    TaxonomyKind.KEYWORD,
    TaxonomyKind.TYPE,
    TaxonomyKind.OBJECTIF,
    TaxonomyKind.FEEL,
    TaxonomyKind.STYLE,
    TaxonomyKind.PARAMETRE,
)

# Priorité des correspondances partielles: première facette satisfaite.
PARTIAL_PRIORITY: tuple[str, ...] = (
    "keyword",
    "type",
    "budget",
    "duration",
    "objectif",
    "feel",
    "style",
    "parametre",
)

NO_FULL_MATCH_MESSAGE = "Il n'y a aucun vidéos avec les filtres choisis."
NO_MORE_MATCH_MESSAGE = "Il n'y a pas d'autres vidéos avec les filtres choisis."


@dataclass
class BrowseFilters:
    """État des filtres du portfolio: tags choisis par facette et curseurs."""

    selected: dict[TaxonomyKind, set[str]] = field(default_factory=empty_groups)
    budget_min_index: int = 0
    budget_max_index: int = len(BUDGET_LEVELS) - 1
    duration_min_index: int = 0
    duration_max_index: int = len(DURATION_LEVELS) - 1

    def __post_init__(self) -> None:
        groups: dict[TaxonomyKind, set[str]] = {kind: set() for kind in TaxonomyKind}
        for kind, ids in self.selected.items():
            groups[TaxonomyKind(kind)] = set(ids)
        self.selected = groups

    def apply_tag_selection(self, labels: dict[str, list[str]], tags: list[Tag]) -> None:
        """Remplace les tags choisis par ceux des libellés proposés, comparés sous forme normalisée.

        Les libellés inconnus de leur facette sont ignorés; les curseurs ne changent pas.
        """
        tag_ids: dict[tuple[TaxonomyKind, str], str] = {}
        for tag in tags:
            tag_ids.setdefault((tag.kind, normalize(tag.label)), tag.id)

        selected: dict[TaxonomyKind, set[str]] = {kind: set() for kind in TaxonomyKind}
        for kind in TaxonomyKind:
            for label in labels.get(kind.value, []):
                tag_id = tag_ids.get((kind, normalize(label)))
                if tag_id is not None:
                    selected[kind].add(tag_id)
        self.selected = selected

    def apply_budget_prompt(self, prompt: str) -> None:
        """Positionne les curseurs de budget d'après les montants cités dans `prompt`."""
        indices = budget_indices_from_text(prompt)
        if indices is not None:
            self.budget_min_index, self.budget_max_index = indices

    @property
    def budget_range(self) -> NumericRange | None:
        return scale_range(BUDGET_LEVELS, self.budget_min_index, self.budget_max_index)

    @property
    def duration_range(self) -> NumericRange | None:
        return scale_range(DURATION_LEVELS, self.duration_min_index, self.duration_max_index)

    @property
    def has_active_filters(self) -> bool:
        return (
            self.budget_range is not None
            or self.duration_range is not None
            or any(self.selected[kind] for kind in TaxonomyKind)
        )


@dataclass
class BrowseEntry:
    video: Video
    matches_by_kind: dict[TaxonomyKind, int]
    budget_match: int
    duration_match: int
    is_full_match: bool
    partial_rank: int
    index: int

    def cascade(self) -> tuple:
        return (
            tuple(-self.matches_by_kind[kind] for kind in KIND_ORDER)
            + (-self.budget_match, -self.duration_match, self.index)
        )


@dataclass
class BrowseResult:
    videos: list[Video]
    full_match_count: int
    has_active_filters: bool

    @property
    def divider_message(self) -> str | None:
        """Message affiché entre les deux groupes (None sans filtre actif)."""
        if not self.has_active_filters:
            return None
        return NO_FULL_MATCH_MESSAGE if self.full_match_count == 0 else NO_MORE_MATCH_MESSAGE


def _score_entry(video: Video, index: int, filters: BrowseFilters) -> BrowseEntry:
    matches = {kind: 0 for kind in TaxonomyKind}
    for tag in video.tags:
        wanted = filters.selected[tag.kind]
        if wanted and tag.id in wanted:
            matches[tag.kind] += 1

    budget_range = filters.budget_range
    budget_match = int(
        budget_range is not None
        and budget_matches(video.budget_min, video.budget_max, budget_range)
    )
    duration_range = filters.duration_range
    duration_match = int(
        duration_range is not None
        and video.duration_seconds is not None
        and contains(duration_range, video.duration_seconds)
    )

    full_taxonomy = all(
        not filters.selected[kind] or matches[kind] > 0 for kind in TaxonomyKind
    )
    is_full = (
        full_taxonomy
        and (budget_range is None or budget_match == 1)
        and (duration_range is None or duration_match == 1)
    )

    partial_rank = len(PARTIAL_PRIORITY)
    for position, facet in enumerate(PARTIAL_PRIORITY):
        if facet == "budget":
            hit = budget_range is not None and budget_match == 1
        elif facet == "duration":
            hit = duration_range is not None and duration_match == 1
        else:
            kind = TaxonomyKind(facet)
            hit = bool(filters.selected[kind]) and matches[kind] > 0
        if hit:
            partial_rank = position
            break

    return BrowseEntry(
        video=video,
        matches_by_kind=matches,
        budget_match=budget_match,
        duration_match=duration_match,
        is_full_match=is_full,
        partial_rank=partial_rank,
        index=index,
    )


def rank_for_browsing(catalog: list[Video], filters: BrowseFilters) -> BrowseResult:
    """Réordonne tout le catalogue visible: correspondances complètes puis partielles."""
    active = filters.has_active_filters
    entries = [
        _score_entry(video, index, filters)
        for index, video in enumerate(v for v in catalog if not v.is_pending)
    ]

    full = sorted(
        (e for e in entries if e.is_full_match or not active), key=BrowseEntry.cascade
    )
    partial = sorted(
        (e for e in entries if active and not e.is_full_match),
        key=lambda e: (e.partial_rank,) + e.cascade(),
    )
    return BrowseResult(
        videos=[e.video for e in full + partial],
        full_match_count=len(full),
        has_active_filters=active,
    )
