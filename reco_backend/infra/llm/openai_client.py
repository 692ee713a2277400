"""
Client LLM basé sur l'API OpenAI (Responses API, sortie structurée).

Un seul essai par appel: pas de nouvelle tentative côté SDK, délai borné par `httpx.Timeout`.
Toute erreur est convertie en `LLMError` pour que l'appelant puisse basculer sur son repli.
"""

from __future__ import annotations

from typing import Any

import httpx
from openai import OpenAI, OpenAIError

from reco_backend.infra.llm.base import LLM, LLMError


class OpenAILLM(LLM):
    """LLM basé sur OpenAI."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout_seconds: float = 10.0,
        client: Any | None = None,
    ) -> None:
        """Initialise le client OpenAI (ou utilise `client` fourni, p. ex. en test)."""
        self.model = model
        if client is not None:
            self.client = client
        else:
            self.client = OpenAI(
                api_key=api_key,
                timeout=httpx.Timeout(timeout_seconds, connect=min(5.0, timeout_seconds)),
                max_retries=0,
            )

    def generate(
        self,
        messages: list[dict[str, str]],
        *,
        json_schema: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> str:
        """Génère du texte via `responses.create`.

        - json_schema: dict {"name": str, "schema": dict} pour une sortie structurée.
        """
        params: dict[str, Any] = {"model": self.model, "input": messages, **kwargs}
        if json_schema is not None:
            params["text"] = {
                "format": {
                    "type": "json_schema",
                    "name": json_schema["name"],
                    "schema": json_schema["schema"],
                }
            }
        try:
            resp = self.client.responses.create(**params)
        except (OpenAIError, httpx.HTTPError) as exc:
            raise LLMError(f"appel OpenAI en échec: {exc}") from exc

        content = self._extract_text(resp)
        if not content:
            raise LLMError("réponse OpenAI vide")
        return content

    def _extract_text(self, resp: Any) -> str:
        """Texte de la réponse: `output_text`, sinon concaténation du premier bloc de sortie."""
        text = getattr(resp, "output_text", None)
        if isinstance(text, str) and text.strip():
            return text.strip()
        output = getattr(resp, "output", None) or []
        if not output:
            return ""
        chunks = getattr(output[0], "content", None) or []
        return "".join(getattr(chunk, "text", "") or "" for chunk in chunks).strip()
