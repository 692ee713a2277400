"""
Endpoint de santé pour vérifier la disponibilité de l'API.

Expose `/health` avec le type de stockage du catalogue et l'état de l'extraction de mots-clés.
"""


from fastapi import APIRouter

from reco_backend.core.container import container

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Vérifie la disponibilité de l'API et indique les sources configurées."""
    return {
        "status": "ok",
        "catalog": getattr(container, "storage_backend", "unknown"),
        "keyword_llm": bool(getattr(container.settings, "OPENAI_API_KEY", None)),
    }
