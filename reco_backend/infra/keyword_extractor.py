"""
Extracteur de mots-clés adossé à un LLM.

Envoie la description et le vocabulaire disponible, demande au plus `limit` libellés existants et
analyse la réponse JSON `{"keywords": [...]}`.
"""

from __future__ import annotations

import json

from reco_backend.domain.keywords import KeywordExtractor
from reco_backend.infra.llm.base import LLM, LLMError

SYSTEM_PROMPT = (
    "Tu choisis les mots-clés les plus pertinents à partir d'une liste. "
    "Réponds uniquement en JSON valide."
)

KEYWORD_SCHEMA = {
    "name": "keyword_selection",
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "properties": {"keywords": {"type": "array", "items": {"type": "string"}}},
        "required": ["keywords"],
    },
}


class LLMKeywordExtractor(KeywordExtractor):
    """Sélection de mots-clés par un modèle de langage, contrainte au vocabulaire fourni."""

    def __init__(self, llm: LLM, temperature: float = 0.2) -> None:
        self.llm = llm
        self.temperature = temperature

    def build_messages(
        self, description: str, available_labels: list[str], limit: int
    ) -> list[dict[str, str]]:
        payload = {
            "description": description,
            "available_keywords": available_labels,
            "rules": [f"Choisis au plus {limit} mots-clés existants."],
        }
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
        ]

    def extract(self, description: str, available_labels: list[str], limit: int) -> list[str]:
        raw = self.llm.generate(
            self.build_messages(description, available_labels, limit),
            json_schema=KEYWORD_SCHEMA,
            temperature=self.temperature,
        )
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise LLMError("réponse JSON invalide") from exc
        keywords = parsed.get("keywords") if isinstance(parsed, dict) else None
        if not isinstance(keywords, list):
            raise LLMError("champ 'keywords' absent")
        return [label for label in keywords if isinstance(label, str)][:limit]
