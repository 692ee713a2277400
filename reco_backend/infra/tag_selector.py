"""
Sélecteur de tags du portfolio adossé à un LLM.

Envoie la description et les libellés disponibles par facette; la réponse JSON contient un tableau
de libellés pour chacune des six facettes (vide si rien ne correspond).
"""

from __future__ import annotations

import json

from reco_backend.domain.tag_selection import MAX_SELECTED_PER_KIND, TagSelector
from reco_backend.domain.taxonomy import TaxonomyKind
from reco_backend.infra.llm.base import LLM, LLMError

SYSTEM_PROMPT = (
    "Tu es un assistant qui mappe une description de projet vidéo vers des tags existants. "
    "Réponds uniquement en JSON valide. "
    "Respecte strictement les tags fournis. "
    "Si rien ne correspond pour une catégorie, renvoie un tableau vide."
)

TAG_SELECTION_SCHEMA = {
    "name": "tag_selection",
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            kind.value: {"type": "array", "items": {"type": "string"}} for kind in TaxonomyKind
        },
        "required": [kind.value for kind in TaxonomyKind],
    },
}


class LLMTagSelector(TagSelector):
    """Sélection des facettes par un modèle de langage, contrainte aux tags du catalogue."""

    def __init__(self, llm: LLM, temperature: float = 0.2) -> None:
        self.llm = llm
        self.temperature = temperature

    def build_messages(
        self, description: str, available: dict[str, list[str]]
    ) -> list[dict[str, str]]:
        payload = {"description": description, "available_tags": available}
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
        ]

    def select(
        self, description: str, available: dict[str, list[str]]
    ) -> dict[str, list[str]]:
        raw = self.llm.generate(
            self.build_messages(description, available),
            json_schema=TAG_SELECTION_SCHEMA,
            temperature=self.temperature,
        )
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise LLMError("réponse JSON invalide") from exc
        if not isinstance(parsed, dict):
            raise LLMError("objet JSON attendu")

        selection: dict[str, list[str]] = {}
        for kind in TaxonomyKind:
            values = parsed.get(kind.value)
            labels = [v for v in values if isinstance(v, str)] if isinstance(values, list) else []
            selection[kind.value] = labels[:MAX_SELECTED_PER_KIND]
        return selection
