"""Middleware Starlette de chronométrage des requêtes.

La durée (ms) est renvoyée dans l'en-tête `X-Process-Time-ms` et journalisée avec la méthode, le
chemin et le statut; l'identifiant de requête est ajouté par le contexte structlog.
"""

import time
from collections.abc import Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

log = structlog.get_logger(__name__)


class TimingMiddleware(BaseHTTPMiddleware):
    """Mesure et journalise la durée de traitement de chaque requête."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Process-Time-ms") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request, call_next: Callable):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - start) * 1000, 1)
        response.headers[self.header_name] = str(elapsed_ms)
        log.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=elapsed_ms,
        )
        return response
