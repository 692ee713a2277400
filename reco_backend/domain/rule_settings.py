"""
Réglages des références: règles par objectif et par public, plus les paramètres globaux.

Les réglages sont lus une fois par requête puis passés explicitement au moteur.
`parse_rule_settings` est pure et ne lève jamais: toute partie absente ou malformée reprend la
valeur par défaut.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_KEYWORD_LIMIT = 4
MIN_KEYWORD_LIMIT = 1
MAX_KEYWORD_LIMIT = 8

# Choix « autre » du formulaire: ne contraint ni les types ni les objectifs.
OTHER_CHOICE = "autre"


@dataclass(frozen=True)
class ObjectiveRule:
    """Types et objectifs de vidéos acceptés pour un objectif déclaré."""

    types: tuple[str, ...] = ()
    objectifs: tuple[str, ...] = ()
    priority_objectifs: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "types": list(self.types),
            "objectifs": list(self.objectifs),
            "priorityObjectifs": list(self.priority_objectifs),
        }


@dataclass(frozen=True)
class RuleSettings:
    """Configuration complète du moteur de références."""

    objectives: dict[str, ObjectiveRule] = field(default_factory=dict)
    audiences: dict[str, tuple[str, ...]] = field(default_factory=dict)
    keyword_limit: int = DEFAULT_KEYWORD_LIMIT
    fallback_to_best: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Forme JSON (clés camelCase du fichier de réglages)."""
        return {
            "keywordLimit": self.keyword_limit,
            "fallbackToBest": self.fallback_to_best,
            "objectives": {key: rule.to_dict() for key, rule in self.objectives.items()},
            "audiences": {key: list(labels) for key, labels in self.audiences.items()},
        }


DEFAULT_RULE_SETTINGS = RuleSettings(
    objectives={
        "promotion": ObjectiveRule(
            types=("Animation 3D", "Corpo", "Publicité", "Story", "Événement"),
            objectifs=("Communautaire", "Événementiel", "Notoriété", "Promotionnelle"),
            priority_objectifs=("Promotionnelle",),
        ),
        "recrutement": ObjectiveRule(
            types=("Corpo", "Publicité", "Capsule", "Story"),
            objectifs=(
                "Communautaire",
                "Informatif",
                "Notoriété",
                "Promotionnelle",
                "Recrutement",
            ),
            priority_objectifs=("Recrutement",),
        ),
        "informatif": ObjectiveRule(
            types=(
                "Animation 3D",
                "Capsule",
                "Corpo",
                "Documentaire",
                "Événement",
                "Podcast",
                "Story",
            ),
            objectifs=(
                "Communautaire",
                "Éducatif",
                "Événementiel",
                "Informatif",
                "Recrutement",
            ),
            priority_objectifs=("Informatif",),
        ),
        "divertissement": ObjectiveRule(
            types=(
                "Capsule",
                "Captation",
                "Court métrage",
                "Documentaire",
                "Événement",
                "Podcast",
                "Story",
                "Vidéoclip",
            ),
            objectifs=("Divertissement", "Événementiel"),
            priority_objectifs=("Divertissement",),
        ),
    },
    audiences={
        "clients_potentiels": (
            "Captation",
            "Court métrage",
            "Documentaire",
            "Événement",
            "Vidéoclip",
        ),
        "clients_actuels": (
            "Captation",
            "Court métrage",
            "Documentaire",
            "Événement",
            "Vidéoclip",
        ),
        "interne": ("Captation", "Court métrage", "Vidéoclip"),
        "evenement": ("Story", "Podcast", "Court métrage"),
    },
)


def clamp_keyword_limit(value: Any) -> int:
    """Borne le nombre de mots-clés retenus à [1, 8] (4 si la valeur est invalide)."""
    if isinstance(value, bool):
        return DEFAULT_KEYWORD_LIMIT
    try:
        limit = int(value)
    except OverflowError:
        # nombres infinis
        return MAX_KEYWORD_LIMIT if value > 0 else MIN_KEYWORD_LIMIT
    except (TypeError, ValueError):
        return DEFAULT_KEYWORD_LIMIT
    return max(MIN_KEYWORD_LIMIT, min(MAX_KEYWORD_LIMIT, limit))


def _labels(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list | tuple):
        return ()
    return tuple(item for item in value if isinstance(item, str) and item.strip())


def _parse_objectives(value: Any) -> dict[str, ObjectiveRule] | None:
    if not isinstance(value, dict):
        return None
    rules: dict[str, ObjectiveRule] = {}
    for key, raw in value.items():
        if not isinstance(raw, dict):
            continue
        rules[str(key)] = ObjectiveRule(
            types=_labels(raw.get("types")),
            objectifs=_labels(raw.get("objectifs")),
            priority_objectifs=_labels(raw.get("priorityObjectifs")),
        )
    return rules


def _parse_audiences(value: Any) -> dict[str, tuple[str, ...]] | None:
    if not isinstance(value, dict):
        return None
    return {str(key): _labels(raw) for key, raw in value.items()}


def parse_rule_settings(raw: Any) -> RuleSettings:
    """Construit des réglages à partir d'un dict JSON, en complétant par les défauts."""
    if not isinstance(raw, dict):
        return DEFAULT_RULE_SETTINGS
    objectives = _parse_objectives(raw.get("objectives"))
    audiences = _parse_audiences(raw.get("audiences"))
    fallback = raw.get("fallbackToBest")
    return RuleSettings(
        objectives=objectives if objectives is not None else DEFAULT_RULE_SETTINGS.objectives,
        audiences=audiences if audiences is not None else DEFAULT_RULE_SETTINGS.audiences,
        keyword_limit=clamp_keyword_limit(raw.get("keywordLimit", DEFAULT_KEYWORD_LIMIT)),
        fallback_to_best=fallback if isinstance(fallback, bool) else True,
    )
