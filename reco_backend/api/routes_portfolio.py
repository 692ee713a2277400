"""
Classement du portfolio selon les filtres du visiteur.

`POST /api/portfolio/rank` renvoie tout le catalogue réordonné (correspondances complètes puis
partielles) avec le message de séparation à afficher entre les deux groupes.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from reco_backend.api.schemas import BrowseRequest, BrowseResponse
from reco_backend.core.container import get_recommendation_service
from reco_backend.core.http_constants import HTTP_BAD_REQUEST, HTTP_INTERNAL_SERVER_ERROR
from reco_backend.domain.browsing import BrowseFilters
from reco_backend.domain.errors import UpstreamReadError
from reco_backend.domain.services import RecommendationService
from reco_backend.domain.taxonomy import TaxonomyKind

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])
service_dep = Depends(get_recommendation_service)
log = structlog.get_logger(__name__)


@router.post("/rank", response_model=BrowseResponse)
def rank_portfolio(payload: BrowseRequest, service: RecommendationService = service_dep):
    """Réordonne le portfolio.

    Un `prompt` remplace les tags choisis par ceux que propose le sélecteur de facettes (s'il est
    configuré) et règle les curseurs de budget d'après les montants cités.
    """
    try:
        selected = {TaxonomyKind(kind): set(ids) for kind, ids in payload.selected.items()}
    except ValueError:
        log.warning("portfolio_unknown_facet", facets=sorted(payload.selected))
        return JSONResponse(status_code=HTTP_BAD_REQUEST, content={"error": "facette inconnue"})

    filters = BrowseFilters(
        selected=selected,
        budget_min_index=payload.budget_min_index,
        budget_max_index=payload.budget_max_index,
        duration_min_index=payload.duration_min_index,
        duration_max_index=payload.duration_max_index,
    )

    try:
        result = service.browse(filters, prompt=payload.prompt)
    except UpstreamReadError as exc:
        log.error("catalog_read_failed", error=str(exc))
        return JSONResponse(status_code=HTTP_INTERNAL_SERVER_ERROR, content={"error": str(exc)})
    return {
        "videos": [video.summary() for video in result.videos],
        "fullMatchCount": result.full_match_count,
        "hasActiveFilters": result.has_active_filters,
        "message": result.divider_message,
    }
