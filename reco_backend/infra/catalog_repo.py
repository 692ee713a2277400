"""Dépôts du catalogue vidéo (fichier JSON ou base SQL).

Chaque dépôt expose trois lectures plates: vidéos (plus récentes d'abord), taxonomies et liens
vidéo↔taxonomie. L'assemblage en mémoire est fait par `domain.taxonomy.build_catalog`.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from reco_backend.domain.errors import CatalogUnavailableError
from reco_backend.infra.repo.db import read_session
from reco_backend.infra.repo.models import TaxonomyORM, VideoORM, VideoTaxonomyORM


class CatalogRepository(ABC):
    """Lectures du catalogue consommées par le service de recommandations."""

    @abstractmethod
    def list_videos(self) -> list[dict[str, Any]]: ...

    @abstractmethod
    def list_taxonomies(self) -> list[dict[str, Any]]: ...

    @abstractmethod
    def list_video_taxonomies(self) -> list[dict[str, Any]]: ...


class JSONCatalogRepository(CatalogRepository):
    """Catalogue stocké dans un fichier JSON `{videos, taxonomies, video_taxonomies}`.

    Utilisé en développement et pour les démos; un fichier absent est une erreur de lecture.
    """

    def __init__(self, path: str):
        self.path = path

    def _section(self, name: str) -> list[dict[str, Any]]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as err:
            # JSONDecodeError et UnicodeDecodeError sont des ValueError
            raise CatalogUnavailableError(f"catalogue illisible: {self.path}") from err
        rows = data.get(name, []) if isinstance(data, dict) else None
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            raise CatalogUnavailableError(f"section '{name}' invalide dans {self.path}")
        return rows

    def list_videos(self) -> list[dict[str, Any]]:
        rows = self._section("videos")
        return sorted(rows, key=lambda row: str(row.get("created_at") or ""), reverse=True)

    def list_taxonomies(self) -> list[dict[str, Any]]:
        return self._section("taxonomies")

    def list_video_taxonomies(self) -> list[dict[str, Any]]:
        return self._section("video_taxonomies")


class SQLCatalogRepository(CatalogRepository):
    """Catalogue lu dans les tables `videos`, `taxonomies` et `video_taxonomies`."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def _fetch(self, stmt, to_record) -> list[dict[str, Any]]:
        """Exécute `stmt` et convertit chaque ligne tant que la session est ouverte."""
        try:
            with read_session(self.engine) as session:
                return [to_record(row) for row in session.execute(stmt).scalars().all()]
        except SQLAlchemyError as err:
            raise CatalogUnavailableError("lecture du catalogue SQL en échec") from err

    def list_videos(self) -> list[dict[str, Any]]:
        stmt = select(VideoORM).order_by(VideoORM.created_at.desc())
        return self._fetch(
            stmt,
            lambda row: {
                "id": str(row.id),
                "title": row.title,
                "cloudflare_uid": row.cloudflare_uid,
                "thumbnail_time_seconds": row.thumbnail_time_seconds,
                "duration_seconds": row.duration_seconds,
                "budget_min": row.budget_min,
                "budget_max": row.budget_max,
                "is_featured": bool(row.is_featured),
                "created_at": row.created_at,
            },
        )

    def list_taxonomies(self) -> list[dict[str, Any]]:
        return self._fetch(
            select(TaxonomyORM),
            lambda row: {"id": str(row.id), "kind": row.kind, "label": row.label},
        )

    def list_video_taxonomies(self) -> list[dict[str, Any]]:
        return self._fetch(
            select(VideoTaxonomyORM),
            lambda row: {"video_id": str(row.video_id), "taxonomy_id": str(row.taxonomy_id)},
        )
