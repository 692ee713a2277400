"""Dépôt des réglages des références, stockés dans un fichier JSON.

Fichier absent → réglages par défaut. L'enregistrement (chemin d'administration) normalise le
contenu via `parse_rule_settings` avant écriture.
"""

from __future__ import annotations

import json
import os
from typing import Any

from reco_backend.domain.errors import SettingsUnavailableError
from reco_backend.domain.rule_settings import (
    DEFAULT_RULE_SETTINGS,
    RuleSettings,
    parse_rule_settings,
)


class JSONSettingsRepository:
    """Lecture/écriture des réglages dans `path`."""

    def __init__(self, path: str):
        self.path = path

    def load_raw(self) -> dict[str, Any]:
        """Contenu brut du fichier (défauts si absent)."""
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return DEFAULT_RULE_SETTINGS.to_dict()
        except (OSError, ValueError) as err:
            raise SettingsUnavailableError(f"réglages illisibles: {self.path}") from err
        return data if isinstance(data, dict) else {}

    def load(self) -> RuleSettings:
        """Réglages effectifs, complétés par les valeurs par défaut."""
        return parse_rule_settings(self.load_raw())

    def save(self, raw: dict[str, Any]) -> RuleSettings:
        """Normalise et enregistre les réglages; retourne la version enregistrée."""
        settings = parse_rule_settings(raw)
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as err:
            raise SettingsUnavailableError(f"écriture impossible: {self.path}") from err
        return settings
