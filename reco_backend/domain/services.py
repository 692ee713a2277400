from __future__ import annotations

from typing import Any

import structlog

from reco_backend.core.metrics import (
    KEYWORD_EXTRACTION_TOTAL,
    RECOMMENDATIONS_TOTAL,
    TAG_SELECTION_TOTAL,
)
from reco_backend.domain.browsing import BrowseFilters, BrowseResult, rank_for_browsing
from reco_backend.domain.errors import CatalogUnavailableError
from reco_backend.domain.filtering import RecommendationQuery, filter_videos, resolve_intent
from reco_backend.domain.keywords import KeywordResolver
from reco_backend.domain.ranking import rank_videos, reason_tags
from reco_backend.domain.tag_selection import FacetResolver
from reco_backend.domain.taxonomy import KEYWORD_GROUP_KINDS, Tag, Video, build_catalog

log = structlog.get_logger(__name__)


class RecommendationService:
    """Service métier de sélection des vidéos de référence.

    Responsabilités:
    - Lire catalogue et réglages à chaque appel (aucun état conservé entre deux requêtes).
    - Résoudre la description en mots-clés via `keyword_resolver`.
    - Choisir les facettes du portfolio d'après une description via `facet_resolver`.
    - Filtrer, classer et tronquer; produire le payload de debug si demandé.
    """

    def __init__(
        self,
        catalog_repo,
        settings_repo,
        keyword_resolver: KeywordResolver | None = None,
        facet_resolver: FacetResolver | None = None,
        max_videos: int | None = 200,
        debug: bool = False,
    ):
        """Initialise le service avec ses dépendances.

        Paramètres:
        - catalog_repo: dépôt du catalogue (JSON ou SQL).
        - settings_repo: dépôt des réglages des références.
        - keyword_resolver: extraction des mots-clés (repli déterministe seul par défaut).
        - facet_resolver: sélection des facettes du portfolio (aucune par défaut).
        - max_videos: nombre maximal de vidéos visibles considérées.
        - debug: ajoute le diagnostic de sélection à la réponse.
        """
        self.catalog = catalog_repo
        self.settings = settings_repo
        self.keywords = keyword_resolver or KeywordResolver()
        self.facets = facet_resolver or FacetResolver()
        self.max_videos = max_videos
        self.debug = debug

    def load_catalog(self, limited: bool = True) -> tuple[list[Video], list[Tag]]:
        """Lit et assemble le catalogue; lève `CatalogUnavailableError` si illisible.

        `limited` applique le plafond `max_videos` (sélection de références uniquement).
        """
        videos = self.catalog.list_videos()
        taxonomies = self.catalog.list_taxonomies()
        links = self.catalog.list_video_taxonomies()
        cap = self.max_videos if limited else None
        try:
            return build_catalog(videos, taxonomies, links, max_videos=cap)
        except (KeyError, TypeError, ValueError) as err:
            raise CatalogUnavailableError("enregistrements du catalogue invalides") from err

    def recommend(self, query: RecommendationQuery) -> dict[str, Any]:
        """Produit `{"videos": [...]}` (et `debug` si activé) pour une requête."""
        catalog, tags = self.load_catalog()
        settings = self.settings.load()

        available = [t.label for t in tags if t.kind in KEYWORD_GROUP_KINDS]
        resolution = self.keywords.resolve(query.description, available, settings.keyword_limit)
        KEYWORD_EXTRACTION_TOTAL.labels(resolution.source).inc()

        intent = resolve_intent(query, settings)
        candidates = filter_videos(catalog, query, settings, intent=intent)
        result = rank_videos(
            catalog, candidates, query, resolution.labels, settings, intent=intent
        )

        if result.used_fallback:
            outcome = "fallback"
            log.info("recommendations_fallback_to_best", returned=len(result.videos))
        else:
            outcome = "filtered" if result.videos else "empty"
        RECOMMENDATIONS_TOTAL.labels(outcome).inc()
        log.info(
            "recommendations_request",
            catalog_size=len(catalog),
            full_matches=result.full_match_count,
            returned=len(result.videos),
            keyword_source=resolution.source,
        )

        payload: dict[str, Any] = {"videos": [video.summary() for video in result.videos]}
        if self.debug:
            payload["debug"] = {
                "objectives": query.objectives,
                "audiences": query.audiences,
                "budget": query.budget,
                "durations": query.durations,
                "matchedKeywordLabels": sorted(resolution.labels),
                "keywordSource": resolution.source,
                "allowedTypes": sorted(intent.allowed_types),
                "allowedObjectifs": sorted(intent.allowed_objectifs),
                "priorityObjectifs": sorted(intent.priority_objectifs),
                "removedTypes": sorted(intent.removed_types),
                "activeDurationFilters": list(intent.duration_ranges),
                "keywordLimit": settings.keyword_limit,
                "fullMatchCount": result.full_match_count,
                "usedFallback": result.used_fallback,
                "reasonsByVideoId": {
                    video.id: reason_tags(video, result.scores[video.id])
                    for video in result.videos
                },
            }
        return payload

    def browse(self, filters: BrowseFilters, prompt: str | None = None) -> BrowseResult:
        """Réordonne le portfolio complet selon les facettes choisies.

        Avec `prompt`, les facettes proposées par le sélecteur remplacent les tags choisis (filtres
        inchangés s'il est absent ou en échec) et les montants cités règlent les curseurs de budget.
        """
        catalog, tags = self.load_catalog(limited=False)
        if prompt:
            selection = self.facets.resolve(prompt, tags)
            TAG_SELECTION_TOTAL.labels(selection.source).inc()
            if selection.applied:
                filters.apply_tag_selection(selection.labels, tags)
            filters.apply_budget_prompt(prompt)
            log.info(
                "portfolio_prompt_applied",
                selection_source=selection.source,
                selected=sum(len(ids) for ids in filters.selected.values()),
            )
        return rank_for_browsing(catalog, filters)
