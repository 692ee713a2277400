"""
Choix des facettes du portfolio à partir d'une description libre.

Un `TagSelector` externe (LLM) propose, pour chacune des six facettes, des libellés pris dans le
vocabulaire du catalogue; `FacetResolver` l'appelle sans jamais lever d'exception. La conversion
des libellés en identifiants de tags est faite par `BrowseFilters.apply_tag_selection`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import structlog

from reco_backend.domain.taxonomy import Tag, TaxonomyKind
from reco_backend.domain.text import normalize

# Nombre maximal de libellés retenus par facette.
MAX_SELECTED_PER_KIND = 12

log = structlog.get_logger(__name__)


class TagSelector(ABC):
    """Interface d'un sélecteur de tags externe."""

    @abstractmethod
    def select(
        self, description: str, available: dict[str, list[str]]
    ) -> dict[str, list[str]]:
        """Retourne, par facette, des libellés choisis dans `available`.

        Peut lever en cas d'indisponibilité; l'appelant conserve alors les filtres existants.
        """
        ...


@dataclass
class FacetSelection:
    """Libellés proposés par facette et issue: "llm", "failed" ou "skipped"."""

    labels: dict[str, list[str]] = field(default_factory=dict)
    source: str = "skipped"

    @property
    def applied(self) -> bool:
        return self.source == "llm"


def labels_for_selection(tags: list[Tag]) -> dict[str, list[str]]:
    """Vocabulaire envoyé au sélecteur: libellés du catalogue regroupés par facette."""
    available: dict[str, list[str]] = {kind.value: [] for kind in TaxonomyKind}
    for tag in tags:
        available[tag.kind.value].append(tag.label)
    return available


class FacetResolver:
    def __init__(self, selector: TagSelector | None = None) -> None:
        self.selector = selector

    def resolve(self, description: str, tags: list[Tag]) -> FacetSelection:
        if self.selector is None or not normalize(description) or not tags:
            return FacetSelection()
        try:
            proposed = self.selector.select(description, labels_for_selection(tags))
        except Exception as exc:
            log.warning("tag_selection_failed", error=str(exc))
            return FacetSelection(source="failed")

        labels: dict[str, list[str]] = {}
        for kind in TaxonomyKind:
            values = proposed.get(kind.value) if isinstance(proposed, dict) else None
            if not isinstance(values, list):
                values = []
            labels[kind.value] = [v for v in values if isinstance(v, str)][:MAX_SELECTED_PER_KIND]
        return FacetSelection(labels=labels, source="llm")
