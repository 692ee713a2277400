"""
Route de sélection des vidéos de référence du formulaire « demander une soumission ».

Ce module expose `POST /api/ai/recommendations`: il traduit le corps JSON en requête métier, appelle
le service de recommandations et convertit les erreurs de lecture amont en réponse 500.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from reco_backend.api.schemas import RecommendationRequest, RecommendationResponse
from reco_backend.core.container import get_recommendation_service
from reco_backend.core.http_constants import HTTP_INTERNAL_SERVER_ERROR
from reco_backend.domain.errors import UpstreamReadError
from reco_backend.domain.filtering import RecommendationQuery
from reco_backend.domain.services import RecommendationService

router = APIRouter(prefix="/api/ai", tags=["recommendations"])
service_dep = Depends(get_recommendation_service)
log = structlog.get_logger(__name__)


@router.post(
    "/recommendations",
    response_model=RecommendationResponse,
    response_model_exclude_unset=True,
)
def recommendations(
    payload: RecommendationRequest,
    service: RecommendationService = service_dep,
):
    """
    Sélectionne et classe des vidéos de référence pour un projet déclaré.

    Retour:
    - `{"videos": [...]}` (plus `debug` si `RECOMMENDATIONS_DEBUG`)
    - `{"error": str}` avec un statut 500 si le catalogue ou les réglages sont illisibles.
    """
    query = RecommendationQuery(
        objectives=payload.objectives,
        audiences=payload.audiences,
        budget=payload.budget,
        durations=payload.durations,
        description=payload.description,
        exclude_ids=set(payload.exclude_ids),
        limit=payload.limit,
    )
    try:
        return service.recommend(query)
    except UpstreamReadError as exc:
        log.error("catalog_read_failed", error=str(exc))
        return JSONResponse(status_code=HTTP_INTERNAL_SERVER_ERROR, content={"error": str(exc)})
