"""
Classement des vidéos candidates.

Chaque vidéo reçoit un score multi-critères calculé sur l'intention complète; le tri est
lexicographique décroissant dans l'ordre: mots-clés, objectif prioritaire, objectifs, types, durée,
budget, puis date de création (plus récente d'abord).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reco_backend.domain.filtering import (
    RecommendationQuery,
    ResolvedIntent,
    filter_videos,
    is_visible,
    resolve_intent,
)
from reco_backend.domain.ranges import budget_matches, duration_matches
from reco_backend.domain.rule_settings import RuleSettings
from reco_backend.domain.taxonomy import KEYWORD_GROUP_KINDS, TaxonomyKind, Video
from reco_backend.domain.text import normalize


@dataclass(frozen=True)
class VideoScore:
    """Critères de classement d'une vidéo (ordre des champs = ordre de priorité)."""

    keyword_matches: int = 0
    priority_objectif_match: int = 0
    objectif_matches: int = 0
    type_matches: int = 0
    duration_match: int = 0
    budget_match: int = 0

    def as_tuple(self) -> tuple[int, int, int, int, int, int]:
        return (
            self.keyword_matches,
            self.priority_objectif_match,
            self.objectif_matches,
            self.type_matches,
            self.duration_match,
            self.budget_match,
        )


@dataclass
class RankResult:
    """Vidéos retenues (triées, tronquées) et diagnostic de la sélection."""

    videos: list[Video] = field(default_factory=list)
    full_match_count: int = 0
    used_fallback: bool = False
    scores: dict[str, VideoScore] = field(default_factory=dict)


def score_video(video: Video, intent: ResolvedIntent, matched_keywords: set[str]) -> VideoScore:
    """Calcule le score d'une vidéo; `matched_keywords` contient des libellés normalisés."""
    labels = video.labels_by_kind()

    keyword_matches = sum(
        1 for kind in KEYWORD_GROUP_KINDS for label in labels[kind] if label in matched_keywords
    )
    type_matches = sum(1 for label in labels[TaxonomyKind.TYPE] if label in intent.allowed_types)
    objectifs = labels[TaxonomyKind.OBJECTIF]
    priority = any(label in intent.priority_objectifs for label in objectifs)
    objectif_matches = sum(1 for label in objectifs if label in intent.allowed_objectifs)

    duration_ok = bool(intent.duration_ranges) and duration_matches(
        video.duration_seconds, list(intent.duration_ranges.values())
    )
    budget_ok = intent.budget_range is not None and budget_matches(
        video.budget_min, video.budget_max, intent.budget_range
    )

    return VideoScore(
        keyword_matches=keyword_matches,
        priority_objectif_match=int(priority),
        objectif_matches=objectif_matches,
        type_matches=type_matches,
        duration_match=int(duration_ok),
        budget_match=int(budget_ok),
    )


def sort_key(video: Video, score: VideoScore) -> tuple:
    """Clé de tri croissante équivalente à l'ordre décroissant voulu."""
    return tuple(-value for value in score.as_tuple()) + (-video.created_ts,)


def reason_tags(video: Video, score: VideoScore) -> list[str]:
    """Raisons lisibles expliquant la sélection d'une vidéo (payload de debug)."""
    reasons: list[str] = []
    if score.keyword_matches > 0:
        reasons.append("Mots-clés")
    if score.priority_objectif_match > 0:
        reasons.append("Objectif prioritaire")
    if score.objectif_matches > 0:
        reasons.append("Objectif")
    if score.type_matches > 0:
        reasons.append("Type")
    if score.duration_match > 0:
        reasons.append("Durée")
    if score.budget_match > 0:
        reasons.append("Budget")
    if video.is_featured:
        reasons.append("Favoris")
    return reasons


def rank_videos(
    catalog: list[Video],
    candidates: list[Video],
    query: RecommendationQuery,
    matched_keywords: set[str],
    settings: RuleSettings,
    intent: ResolvedIntent | None = None,
) -> RankResult:
    """Trie et tronque les candidats.

    Si aucun candidat ne passe les filtres et que `fallback_to_best` est actif, le classement porte
    sur tout le catalogue visible (hors exclusions et vidéos en attente).
    """
    if intent is None:
        intent = resolve_intent(query, settings)
    normalized_keywords = {normalize(label) for label in matched_keywords} - {""}

    pool = [video for video in candidates if is_visible(video, query.exclude_ids)]
    used_fallback = False
    if not pool and settings.fallback_to_best:
        pool = [video for video in catalog if is_visible(video, query.exclude_ids)]
        used_fallback = bool(pool)

    scores = {video.id: score_video(video, intent, normalized_keywords) for video in pool}
    ordered = sorted(pool, key=lambda video: sort_key(video, scores[video.id]))
    selected = ordered[: query.limit]
    return RankResult(
        videos=selected,
        full_match_count=len(candidates),
        used_fallback=used_fallback,
        scores={video.id: scores[video.id] for video in selected},
    )


def recommend(
    catalog: list[Video],
    query: RecommendationQuery,
    matched_keywords: set[str],
    settings: RuleSettings,
) -> RankResult:
    """Filtre puis classe le catalogue pour une requête."""
    intent = resolve_intent(query, settings)
    candidates = filter_videos(catalog, query, settings, intent=intent)
    return rank_videos(catalog, candidates, query, matched_keywords, settings, intent=intent)
