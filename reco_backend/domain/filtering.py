"""
Filtrage du catalogue selon l'intention déclarée (objectifs, publics, budget, durées).

`resolve_intent` traduit la requête et les réglages en ensembles de libellés normalisés et en
intervalles numériques; `filter_videos` applique ensuite les prédicats actifs en conservant l'ordre
du catalogue.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field, field_validator

from reco_backend.core.http_constants import (
    DEFAULT_RECOMMENDATION_LIMIT,
    MAX_RECOMMENDATION_LIMIT,
    MIN_RECOMMENDATION_LIMIT,
)
from reco_backend.domain.ranges import (
    NumericRange,
    budget_matches,
    duration_matches,
    resolve_budget_bucket,
    resolve_duration_buckets,
)
from reco_backend.domain.rule_settings import OTHER_CHOICE, RuleSettings
from reco_backend.domain.taxonomy import TaxonomyKind, Video
from reco_backend.domain.text import normalize


class RecommendationQuery(BaseModel):
    """Entrée éphémère d'un appel de recommandation."""

    objectives: list[str] = Field(default_factory=list)
    audiences: list[str] = Field(default_factory=list)
    budget: str | None = None
    durations: list[str] = Field(default_factory=list)
    description: str = ""
    exclude_ids: set[str] = Field(default_factory=set)
    limit: int = DEFAULT_RECOMMENDATION_LIMIT

    @field_validator("limit", mode="before")
    @classmethod
    def _clamp_limit(cls, value):
        try:
            limit = int(value)
        except OverflowError:
            limit = MAX_RECOMMENDATION_LIMIT if value > 0 else MIN_RECOMMENDATION_LIMIT
        except (TypeError, ValueError):
            limit = DEFAULT_RECOMMENDATION_LIMIT
        return max(MIN_RECOMMENDATION_LIMIT, min(MAX_RECOMMENDATION_LIMIT, limit))


@dataclass
class ResolvedIntent:
    """Contraintes effectives d'une requête, prêtes à être testées sur chaque vidéo."""

    allowed_types: set[str] = field(default_factory=set)
    allowed_objectifs: set[str] = field(default_factory=set)
    priority_objectifs: set[str] = field(default_factory=set)
    removed_types: set[str] = field(default_factory=set)
    budget_range: NumericRange | None = None
    duration_ranges: dict[str, NumericRange] = field(default_factory=dict)

    @property
    def applies_allow_list(self) -> bool:
        return bool(self.allowed_types or self.allowed_objectifs)


def resolve_intent(query: RecommendationQuery, settings: RuleSettings) -> ResolvedIntent:
    """Résout objectifs, publics et tranches en contraintes normalisées.

    Un objectif ou un public « autre » désactive la contrainte correspondante; les identifiants
    absents des réglages sont ignorés.
    """
    intent = ResolvedIntent()

    if query.objectives and OTHER_CHOICE not in query.objectives:
        for objective in query.objectives:
            rule = settings.objectives.get(objective)
            if rule is None:
                continue
            intent.allowed_types.update(normalize(label) for label in rule.types)
            intent.allowed_objectifs.update(normalize(label) for label in rule.objectifs)
            intent.priority_objectifs.update(
                normalize(label) for label in rule.priority_objectifs
            )

    if query.audiences and OTHER_CHOICE not in query.audiences:
        for audience in query.audiences:
            removed = settings.audiences.get(audience, ())
            intent.removed_types.update(normalize(label) for label in removed)

    for labels in (
        intent.allowed_types,
        intent.allowed_objectifs,
        intent.priority_objectifs,
        intent.removed_types,
    ):
        labels.discard("")

    intent.budget_range = resolve_budget_bucket(query.budget)
    intent.duration_ranges = resolve_duration_buckets(query.durations)
    return intent


def is_visible(video: Video, exclude_ids: set[str]) -> bool:
    """Vidéo proposable: ni en attente, ni déjà vue par l'appelant."""
    return not video.is_pending and video.id not in exclude_ids


def passes_filters(video: Video, intent: ResolvedIntent) -> bool:
    """Applique les prédicats actifs à une vidéo."""
    labels = video.labels_by_kind()
    types = labels[TaxonomyKind.TYPE]

    if intent.applies_allow_list:
        type_ok = not intent.allowed_types or any(t in intent.allowed_types for t in types)
        objectifs = labels[TaxonomyKind.OBJECTIF]
        objectif_ok = not intent.allowed_objectifs or any(
            o in intent.allowed_objectifs for o in objectifs
        )
        if not (type_ok and objectif_ok):
            return False

    if intent.removed_types and any(t in intent.removed_types for t in types):
        return False

    if intent.budget_range is not None and not budget_matches(
        video.budget_min, video.budget_max, intent.budget_range
    ):
        return False

    if intent.duration_ranges and not duration_matches(
        video.duration_seconds, list(intent.duration_ranges.values())
    ):
        return False

    return True


def filter_videos(
    catalog: list[Video],
    query: RecommendationQuery,
    settings: RuleSettings,
    intent: ResolvedIntent | None = None,
) -> list[Video]:
    """Sous-ensemble du catalogue satisfaisant toutes les contraintes, dans l'ordre d'origine."""
    if intent is None:
        intent = resolve_intent(query, settings)
    return [
        video
        for video in catalog
        if is_visible(video, query.exclude_ids) and passes_filters(video, intent)
    ]
