"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, dépôts, client LLM partagé par l'extracteur de
mots-clés et le sélecteur de facettes, service de recommandations) et expose un singleton
`container` utilisé par les routes.
"""

from reco_backend.core.settings import Settings, get_settings
from reco_backend.domain.keywords import KeywordResolver
from reco_backend.domain.services import RecommendationService
from reco_backend.domain.tag_selection import FacetResolver
from reco_backend.infra.catalog_repo import (
    CatalogRepository,
    JSONCatalogRepository,
    SQLCatalogRepository,
)
from reco_backend.infra.keyword_extractor import LLMKeywordExtractor
from reco_backend.infra.llm.base import LLM
from reco_backend.infra.llm.openai_client import OpenAILLM
from reco_backend.infra.repo.db import get_engine
from reco_backend.infra.settings_repo import JSONSettingsRepository
from reco_backend.infra.tag_selector import LLMTagSelector


def build_catalog_repo(settings: Settings) -> CatalogRepository:
    """Base SQL si `DATABASE_URL` est défini, sinon fichier JSON."""
    if settings.DATABASE_URL:
        return SQLCatalogRepository(get_engine(settings.DATABASE_URL))
    return JSONCatalogRepository(path=settings.CATALOG_PATH)


def build_llm(settings: Settings) -> LLM | None:
    """Client OpenAI si une clé est disponible."""
    if not settings.OPENAI_API_KEY:
        return None
    return OpenAILLM(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        timeout_seconds=settings.LLM_TIMEOUT_SECONDS,
    )


def build_keyword_resolver(llm: LLM | None) -> KeywordResolver:
    """Extracteur LLM si un client est disponible; sinon repli déterministe seul."""
    if llm is None:
        return KeywordResolver()
    return KeywordResolver(LLMKeywordExtractor(llm))


def build_facet_resolver(llm: LLM | None) -> FacetResolver:
    """Sélecteur de facettes LLM si un client est disponible; sinon aucune sélection."""
    if llm is None:
        return FacetResolver()
    return FacetResolver(LLMTagSelector(llm))


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.catalog_repo = build_catalog_repo(self.settings)
        self.settings_repo = JSONSettingsRepository(path=self.settings.SETTINGS_PATH)
        llm = build_llm(self.settings)
        self.keyword_resolver = build_keyword_resolver(llm)
        self.facet_resolver = build_facet_resolver(llm)
        self.storage_backend = "sql" if self.settings.DATABASE_URL else "json"
        self.recommendations = RecommendationService(
            self.catalog_repo,
            self.settings_repo,
            keyword_resolver=self.keyword_resolver,
            facet_resolver=self.facet_resolver,
            max_videos=self.settings.MAX_CATALOG_VIDEOS,
            debug=self.settings.RECOMMENDATIONS_DEBUG,
        )


container = Container()


def get_recommendation_service() -> RecommendationService:
    """Dépendance FastAPI (remplaçable via `app.dependency_overrides`)."""
    return container.recommendations


def get_settings_repo() -> JSONSettingsRepository:
    """Dépendance FastAPI pour le dépôt des réglages."""
    return container.settings_repo
