"""Configuration de test pour pytest.

Ajoute la racine du projet au sys.path et fournit le catalogue de démonstration de `fakes`, assemblé
ou servi par un service de recommandations branché sur l'application.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from reco_backend...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fastapi.testclient import TestClient  # noqa: E402

from reco_backend.app.main import app  # noqa: E402
from reco_backend.core.container import get_recommendation_service  # noqa: E402
from reco_backend.domain.services import RecommendationService  # noqa: E402
from reco_backend.domain.taxonomy import build_catalog  # noqa: E402
from tests.fakes import (  # noqa: E402
    InMemoryCatalogRepository,
    InMemorySettingsRepo,
    make_catalog_records,
)


@pytest.fixture
def catalog_records() -> dict:
    return make_catalog_records()


@pytest.fixture
def catalog(catalog_records):
    """Vidéos visibles assemblées (v1, v2, v3, v4 dans cet ordre)."""
    videos, _tags = build_catalog(
        catalog_records["videos"],
        catalog_records["taxonomies"],
        catalog_records["video_taxonomies"],
    )
    return videos


@pytest.fixture
def by_id(catalog):
    return {video.id: video for video in catalog}


@pytest.fixture
def service(catalog_records) -> RecommendationService:
    return RecommendationService(
        InMemoryCatalogRepository(catalog_records),
        InMemorySettingsRepo(),
    )


@pytest.fixture
def client(service):
    """Client HTTP dont le service de recommandations lit le catalogue de démonstration."""
    app.dependency_overrides[get_recommendation_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
