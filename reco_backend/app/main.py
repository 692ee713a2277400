"""
Application principale FastAPI.

Ce module assemble les composants de l'application : middlewares, routes du moteur de références,
administration des réglages et métriques.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (chronométrage, request id, Prometheus)
- Monter les routers (santé, recommandations, portfolio, administration, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI

from reco_backend.api.routes_health import router as health_router
from reco_backend.api.routes_portfolio import router as portfolio_router
from reco_backend.api.routes_recommendations import router as recommendations_router
from reco_backend.api.routes_settings import router as settings_router
from reco_backend.app.metrics import PrometheusMiddleware, metrics_router
from reco_backend.core.container import container
from reco_backend.core.logging import setup_logging
from reco_backend.middlewares.request_id import RequestIDMiddleware
from reco_backend.middlewares.timing import TimingMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute les middlewares utiles au debug/traçabilité
    - Publie les routes
    """
    settings = container.settings
    setup_logging(level=settings.LOG_LEVEL, json_output=settings.LOG_JSON)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(PrometheusMiddleware)
    app.include_router(health_router)
    app.include_router(recommendations_router)
    app.include_router(portfolio_router)
    app.include_router(settings_router)
    app.include_router(metrics_router)
    return app


app = create_app()
