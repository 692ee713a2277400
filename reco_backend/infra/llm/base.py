"""Interface de base pour les modèles de langage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class LLMError(RuntimeError):
    """Appel au modèle impossible ou réponse inexploitable."""


class LLM(ABC):
    """Interface abstraite pour les modèles de langage."""

    @abstractmethod
    def generate(
        self,
        messages: list[dict[str, str]],
        *,
        json_schema: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> str:
        """Génère une réponse à partir d'une liste de messages.

        Avec `json_schema`, la sortie est contrainte au schéma (JSON brut renvoyé en texte).
        Lève `LLMError` si aucune réponse exploitable n'est obtenue.
        """
        ...
