# Schémas Pydantic exposés par l'API (requêtes et réponses).

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from reco_backend.core.http_constants import DEFAULT_RECOMMENDATION_LIMIT
from reco_backend.domain.ranges import BUDGET_LEVELS, DURATION_LEVELS


class RecommendationRequest(BaseModel):
    """Corps de `POST /api/ai/recommendations`.

    Champs (tous optionnels):
    - objectives / audiences: identifiants déclarés dans le formulaire
    - budget: tranche ("5000-10000", "20000+", "unknown") ou None
    - durations: tranches de durée ("courte_video", ..., "incertain")
    - description: texte libre du projet
    - excludeIds: vidéos déjà montrées (pagination)
    - limit: taille du résultat, bornée à [1, 12]
    """

    model_config = ConfigDict(populate_by_name=True)

    objectives: list[str] = Field(default_factory=list)
    audiences: list[str] = Field(default_factory=list)
    budget: str | None = None
    durations: list[str] = Field(default_factory=list)
    description: str = ""
    exclude_ids: list[str] = Field(default_factory=list, alias="excludeIds")
    limit: Any = DEFAULT_RECOMMENDATION_LIMIT


class VideoSummary(BaseModel):
    """Vidéo renvoyée au formulaire de demande."""

    id: str
    title: str
    cloudflare_uid: str
    thumbnail_time_seconds: float | None = None
    budget_min: int | None = None
    budget_max: int | None = None


class RecommendationResponse(BaseModel):
    """Réponse: vidéos de référence et, si activé, diagnostic de sélection."""

    videos: list[VideoSummary]
    debug: dict[str, Any] | None = None


class BrowseRequest(BaseModel):
    """Corps de `POST /api/portfolio/rank`: tags choisis par facette et positions des curseurs."""

    selected: dict[str, list[str]] = Field(default_factory=dict)
    budget_min_index: int = Field(default=0, alias="budgetMinIndex")
    budget_max_index: int = Field(default=len(BUDGET_LEVELS) - 1, alias="budgetMaxIndex")
    duration_min_index: int = Field(default=0, alias="durationMinIndex")
    duration_max_index: int = Field(default=len(DURATION_LEVELS) - 1, alias="durationMaxIndex")
    prompt: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class BrowseResponse(BaseModel):
    videos: list[VideoSummary]
    fullMatchCount: int
    hasActiveFilters: bool
    message: str | None = None


class SettingsPayload(BaseModel):
    """Corps de `POST /api/admin/recommendations-settings`."""

    settings: dict[str, Any] | None = None
