"""
Tests pour les dépôts du catalogue (fichier JSON et SQLAlchemy sur sqlite mémoire).
"""

from __future__ import annotations

import json
from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from reco_backend.domain.errors import CatalogUnavailableError
from reco_backend.domain.taxonomy import build_catalog
from reco_backend.infra.catalog_repo import JSONCatalogRepository, SQLCatalogRepository
from reco_backend.infra.repo.models import Base, TaxonomyORM, VideoORM, VideoTaxonomyORM

TAXONOMY_COUNT = 2
BUDGET_3000 = 3000


def _write(tmp_path, data) -> str:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_json_repo_reads_sections_newest_first(tmp_path, catalog_records) -> None:
    shuffled = dict(catalog_records, videos=list(reversed(catalog_records["videos"])))
    repo = JSONCatalogRepository(_write(tmp_path, shuffled))
    assert [row["id"] for row in repo.list_videos()] == ["v5", "v1", "v2", "v3", "v4"]
    assert len(repo.list_taxonomies()) == len(catalog_records["taxonomies"])
    assert repo.list_video_taxonomies()[0] == {"video_id": "v5", "taxonomy_id": "t-pub"}


def test_json_repo_missing_section_is_empty(tmp_path) -> None:
    repo = JSONCatalogRepository(_write(tmp_path, {"videos": []}))
    assert repo.list_taxonomies() == []


def test_json_repo_missing_file(tmp_path) -> None:
    repo = JSONCatalogRepository(str(tmp_path / "absent.json"))
    with pytest.raises(CatalogUnavailableError):
        repo.list_videos()


def test_json_repo_invalid_content(tmp_path) -> None:
    path = tmp_path / "catalog.json"
    path.write_text("{pas du json", encoding="utf-8")
    with pytest.raises(CatalogUnavailableError):
        JSONCatalogRepository(str(path)).list_videos()
    repo = JSONCatalogRepository(_write(tmp_path, {"videos": {"v1": {}}}))
    with pytest.raises(CatalogUnavailableError):
        repo.list_videos()


def test_json_repo_non_utf8_file(tmp_path) -> None:
    path = tmp_path / "catalog.json"
    path.write_bytes(b'{"videos": [{"title": "\xff"}]}')
    with pytest.raises(CatalogUnavailableError):
        JSONCatalogRepository(str(path)).list_videos()


@pytest.mark.parametrize("row", ["v1", 3, None, ["v1"]])
def test_json_repo_rejects_non_object_rows(tmp_path, row) -> None:
    repo = JSONCatalogRepository(_write(tmp_path, {"videos": [{"id": "v1"}, row]}))
    with pytest.raises(CatalogUnavailableError):
        repo.list_videos()


def _engine(with_tables: bool = True):
    """Moteur SQLite en mémoire partagé entre sessions."""
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    if with_tables:
        Base.metadata.create_all(engine)
    return engine


def _seed(engine) -> None:
    with Session(bind=engine) as session:
        session.add_all(
            [
                VideoORM(
                    id="old",
                    title="Ancienne",
                    cloudflare_uid="cf-old",
                    budget_min=3000,
                    is_featured=False,
                    created_at=datetime(2023, 1, 1),
                ),
                VideoORM(
                    id="new",
                    title="Récente",
                    cloudflare_uid="cf-new",
                    duration_seconds=90,
                    is_featured=True,
                    created_at=datetime(2024, 1, 1),
                ),
                TaxonomyORM(id="t1", kind="type", label="Publicité"),
                TaxonomyORM(id="k1", kind="keyword", label="Café"),
            ]
        )
        session.flush()
        session.add_all(
            [
                VideoTaxonomyORM(video_id="new", taxonomy_id="t1"),
                VideoTaxonomyORM(video_id="new", taxonomy_id="k1"),
            ]
        )
        session.commit()


def test_sql_repo_lists_records() -> None:
    engine = _engine()
    _seed(engine)
    repo = SQLCatalogRepository(engine)
    videos = repo.list_videos()
    assert [row["id"] for row in videos] == ["new", "old"]
    assert videos[0]["is_featured"] is True
    assert videos[1]["budget_min"] == BUDGET_3000
    assert len(repo.list_taxonomies()) == TAXONOMY_COUNT
    assert {row["taxonomy_id"] for row in repo.list_video_taxonomies()} == {"t1", "k1"}


def test_sql_records_build_a_catalog() -> None:
    engine = _engine()
    _seed(engine)
    repo = SQLCatalogRepository(engine)
    catalog, tags = build_catalog(
        repo.list_videos(), repo.list_taxonomies(), repo.list_video_taxonomies()
    )
    assert [video.id for video in catalog] == ["new", "old"]
    assert sorted(tag.label for tag in catalog[0].tags) == ["Café", "Publicité"]
    assert len(tags) == TAXONOMY_COUNT


def test_sql_repo_read_failure() -> None:
    repo = SQLCatalogRepository(_engine(with_tables=False))
    with pytest.raises(CatalogUnavailableError):
        repo.list_videos()
