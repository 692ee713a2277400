"""
Extraction des mots-clés d'une description de projet.

Trois pièces indépendantes:
- `KeywordExtractor`: capacité externe (LLM) choisissant des libellés dans un vocabulaire fourni;
- `substring_keyword_fallback`: correspondance déterministe par suite de mots;
- `KeywordResolver`: orchestre les deux, sans jamais lever d'exception.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import structlog

from reco_backend.domain.text import contains_phrase, normalize

# En dessous de cette longueur (texte normalisé), la description n'apporte pas assez de signal.
MIN_DESCRIPTION_LENGTH = 8

log = structlog.get_logger(__name__)


class KeywordExtractor(ABC):
    """Interface d'un extracteur de mots-clés externe."""

    @abstractmethod
    def extract(self, description: str, available_labels: list[str], limit: int) -> list[str]:
        """Retourne au plus `limit` libellés choisis dans `available_labels`.

        Peut lever en cas d'indisponibilité; l'appelant se charge du repli.
        """
        ...


@dataclass
class KeywordResolution:
    """Libellés retenus et provenance: "llm", "fallback" ou "none"."""

    labels: set[str] = field(default_factory=set)
    source: str = "none"


def _by_normalized(available_labels: list[str]) -> dict[str, str]:
    """Premier libellé disponible pour chaque forme normalisée."""
    index: dict[str, str] = {}
    for label in available_labels:
        key = normalize(label)
        if key and key not in index:
            index[key] = label
    return index


def substring_keyword_fallback(
    description: str, available_labels: list[str], limit: int | None = None
) -> set[str]:
    """Libellés dont la forme normalisée apparaît telle quelle dans la description."""
    normalized_description = normalize(description)
    matched: set[str] = set()
    for label in available_labels:
        if limit is not None and len(matched) >= limit:
            break
        if contains_phrase(normalized_description, normalize(label)):
            matched.add(label)
    return matched


class KeywordResolver:
    """Compose l'extracteur externe et le repli déterministe."""

    def __init__(self, extractor: KeywordExtractor | None = None) -> None:
        self.extractor = extractor

    def resolve(
        self, description: str, available_labels: list[str], limit: int
    ) -> KeywordResolution:
        """Résout une description en sous-ensemble de `available_labels` (au plus `limit`)."""
        if len(normalize(description)) <= MIN_DESCRIPTION_LENGTH or not available_labels:
            return KeywordResolution()

        matched = self._from_extractor(description, available_labels, limit)
        if matched:
            return KeywordResolution(labels=matched, source="llm")

        fallback = substring_keyword_fallback(description, available_labels, limit)
        log.info("keyword_fallback_used", matched=len(fallback))
        return KeywordResolution(labels=fallback, source="fallback" if fallback else "none")

    def _from_extractor(
        self, description: str, available_labels: list[str], limit: int
    ) -> set[str]:
        if self.extractor is None:
            return set()
        try:
            proposed = self.extractor.extract(description, available_labels, limit)
        except Exception as exc:
            log.warning("keyword_extraction_failed", error=str(exc))
            return set()

        index = _by_normalized(available_labels)
        matched: set[str] = set()
        for label in list(proposed or [])[:limit]:
            if not isinstance(label, str):
                continue
            canonical = index.get(normalize(label))
            if canonical is not None:
                matched.add(canonical)
        return matched
