"""
Entités du catalogue vidéo: facettes de taxonomie, tags et vidéos.

Le catalogue est fourni par le dépôt externe sous forme de trois listes plates (vidéos, taxonomies,
liens vidéo↔taxonomie); `build_catalog` les assemble en mémoire.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from reco_backend.domain.text import normalize

PENDING_PREFIX = "pending:"


class TaxonomyKind(str, Enum):
    """Les six facettes de la taxonomie."""

    TYPE = "type"
    OBJECTIF = "objectif"
    KEYWORD = "keyword"
    STYLE = "style"
    FEEL = "feel"
    PARAMETRE = "parametre"


# Facettes comparées au texte libre de la demande.
KEYWORD_GROUP_KINDS: tuple[TaxonomyKind, ...] = (
    TaxonomyKind.KEYWORD,
    TaxonomyKind.STYLE,
    TaxonomyKind.PARAMETRE,
)


def empty_groups() -> dict[TaxonomyKind, list]:
    """Dictionnaire regroupé par facette, avec les six clés toujours présentes."""
    return {kind: [] for kind in TaxonomyKind}


class Tag(BaseModel):
    """Entrée de taxonomie (libellé libre, non normalisé)."""

    id: str
    kind: TaxonomyKind
    label: str


class Video(BaseModel):
    """Vidéo du catalogue avec ses tags."""

    id: str
    title: str
    cloudflare_uid: str
    thumbnail_time_seconds: float | None = None
    duration_seconds: int | None = Field(default=None, ge=0)
    budget_min: int | None = None
    budget_max: int | None = None
    is_featured: bool = False
    created_at: datetime | None = None
    tags: list[Tag] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_budget_bounds(self) -> Video:
        if (
            self.budget_min is not None
            and self.budget_max is not None
            and self.budget_min > self.budget_max
        ):
            raise ValueError("budget_min doit être inférieur ou égal à budget_max")
        return self

    @property
    def is_pending(self) -> bool:
        """Vidéo sans média lisible (téléversement en cours)."""
        return self.cloudflare_uid.startswith(PENDING_PREFIX)

    @property
    def created_ts(self) -> float:
        """Horodatage de création (0 si inconnu), utilisé comme dernier départage."""
        if self.created_at is None:
            return 0.0
        created = self.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=UTC)
        return created.timestamp()

    def labels_by_kind(self) -> dict[TaxonomyKind, list[str]]:
        """Libellés normalisés des tags de la vidéo, regroupés par facette."""
        groups = empty_groups()
        for tag in self.tags:
            groups[tag.kind].append(normalize(tag.label))
        return groups

    def summary(self) -> dict[str, Any]:
        """Représentation publique renvoyée par l'API."""
        return {
            "id": self.id,
            "title": self.title,
            "cloudflare_uid": self.cloudflare_uid,
            "thumbnail_time_seconds": self.thumbnail_time_seconds,
            "budget_min": self.budget_min,
            "budget_max": self.budget_max,
        }


def build_catalog(
    videos: list[dict[str, Any]],
    taxonomies: list[dict[str, Any]],
    links: list[dict[str, Any]],
    max_videos: int | None = None,
) -> tuple[list[Video], list[Tag]]:
    """Assemble les enregistrements plats du dépôt en vidéos taggées.

    Les vidéos en attente sont écartées; `max_videos` borne le nombre de vidéos visibles
    conservées (dans l'ordre fourni). Les liens vers une taxonomie inconnue sont ignorés.
    """
    tags = [Tag(**row) for row in taxonomies]
    tag_by_id = {tag.id: tag for tag in tags}

    tag_ids_by_video: dict[str, list[str]] = {}
    for row in links:
        tag_ids_by_video.setdefault(str(row["video_id"]), []).append(str(row["taxonomy_id"]))

    catalog: list[Video] = []
    for row in videos:
        video_tags = [
            tag_by_id[tag_id]
            for tag_id in tag_ids_by_video.get(str(row["id"]), [])
            if tag_id in tag_by_id
        ]
        video = Video(**{**row, "tags": video_tags})
        if video.is_pending:
            continue
        catalog.append(video)
        if max_videos is not None and len(catalog) >= max_videos:
            break
    return catalog, tags
