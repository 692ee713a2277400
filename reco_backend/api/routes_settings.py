"""
Administration des réglages des références.

`GET` et `POST /api/admin/recommendations-settings`, protégés par le jeton `X-Admin-Token`
(comparaison à temps constant avec `ADMIN_TOKEN`). Sans jeton configuré, l'accès est refusé.
"""

from __future__ import annotations

import hmac

import structlog
from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from reco_backend.api.schemas import SettingsPayload
from reco_backend.core.container import container, get_settings_repo
from reco_backend.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_UNAUTHORIZED,
)
from reco_backend.domain.errors import SettingsUnavailableError
from reco_backend.infra.settings_repo import JSONSettingsRepository

router = APIRouter(prefix="/api/admin", tags=["admin"])
repo_dep = Depends(get_settings_repo)
log = structlog.get_logger(__name__)


def is_admin(token: str | None) -> bool:
    """Vérifie le jeton d'administration."""
    expected = container.settings.ADMIN_TOKEN
    if not expected or not token:
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))


def _denied() -> JSONResponse:
    return JSONResponse(status_code=HTTP_UNAUTHORIZED, content={"error": "Accès refusé."})


@router.get("/recommendations-settings")
def read_settings(
    x_admin_token: str | None = Header(default=None),
    repo: JSONSettingsRepository = repo_dep,
):
    """Retourne les réglages enregistrés (ou les défauts)."""
    if not is_admin(x_admin_token):
        return _denied()
    try:
        return {"settings": repo.load_raw()}
    except SettingsUnavailableError as exc:
        return JSONResponse(status_code=HTTP_INTERNAL_SERVER_ERROR, content={"error": str(exc)})


@router.post("/recommendations-settings")
def save_settings(
    payload: SettingsPayload,
    x_admin_token: str | None = Header(default=None),
    repo: JSONSettingsRepository = repo_dep,
):
    """Normalise et enregistre de nouveaux réglages."""
    if not is_admin(x_admin_token):
        return _denied()
    if not payload.settings:
        return JSONResponse(status_code=HTTP_BAD_REQUEST, content={"error": "Settings manquants."})
    try:
        saved = repo.save(payload.settings)
    except SettingsUnavailableError as exc:
        log.error("settings_save_failed", error=str(exc))
        return JSONResponse(status_code=HTTP_INTERNAL_SERVER_ERROR, content={"error": str(exc)})
    log.info("settings_saved", objectives=len(saved.objectives), audiences=len(saved.audiences))
    return {"ok": True}
