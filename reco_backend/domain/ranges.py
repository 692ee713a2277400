"""
Échelles fixes de budget et de durée, résolution des tranches et test de chevauchement.

L'interface manipule des tranches nommées ("5000-10000", "courte_video") ou des index de curseur;
le moteur ne travaille que sur les bornes numériques résolues. Une borne `max` à None signifie
« sans limite supérieure ».
"""

from __future__ import annotations

import math
import re
from typing import NamedTuple

BUDGET_LEVELS: tuple[int, ...] = (
    2000, 3000, 4000, 5000, 10000, 15000, 20000, 25000, 30000, 35000, 40000, 45000, 50000,
)
DURATION_LEVELS: tuple[int, ...] = (0, 30, 60, 90, 120, 180, 240, 300, 420, 600, 900)

# Choix « je ne sais pas » côté formulaire: aucune contrainte.
UNSURE_BUCKETS = frozenset({"unknown", "incertain"})

# Montants inférieurs à ce seuil ignorés lors de l'analyse d'un texte libre.
MIN_BUDGET_MENTION = 1000


class NumericRange(NamedTuple):
    """Intervalle fermé [min, max]; max None = non borné."""

    min: float
    max: float | None


BUDGET_BUCKETS: dict[str, NumericRange] = {
    "2000-5000": NumericRange(2000, 5000),
    "5000-10000": NumericRange(5000, 10000),
    "10000-20000": NumericRange(10000, 20000),
    "20000+": NumericRange(20000, None),
}

DURATION_BUCKETS: dict[str, NumericRange] = {
    "courte_video": NumericRange(10, 30),
    "publicite": NumericRange(30, 90),
    "film_publicitaire": NumericRange(120, 240),
    "mini_documentaire": NumericRange(300, None),
}


def resolve_budget_bucket(bucket_id: str | None) -> NumericRange | None:
    """Tranche de budget → intervalle, ou None (aucune contrainte)."""
    if not bucket_id or bucket_id in UNSURE_BUCKETS:
        return None
    return BUDGET_BUCKETS.get(bucket_id)


def resolve_duration_buckets(bucket_ids: list[str]) -> dict[str, NumericRange]:
    """Tranches de durée connues parmi `bucket_ids` (sentinelles et inconnues ignorées)."""
    resolved: dict[str, NumericRange] = {}
    for bucket_id in bucket_ids:
        if bucket_id in UNSURE_BUCKETS:
            continue
        bucket = DURATION_BUCKETS.get(bucket_id)
        if bucket is not None:
            resolved[bucket_id] = bucket
    return resolved


def overlaps(a: NumericRange, b: NumericRange) -> bool:
    """Chevauchement de deux intervalles fermés: aMax ≥ bMin et aMin ≤ bMax."""
    a_max = math.inf if a.max is None else a.max
    b_max = math.inf if b.max is None else b.max
    return a_max >= b.min and a.min <= b_max


def contains(bucket: NumericRange, value: float) -> bool:
    """Indique si la valeur ponctuelle appartient à l'intervalle."""
    return value >= bucket.min and (bucket.max is None or value <= bucket.max)


def video_budget_range(budget_min: int | None, budget_max: int | None) -> NumericRange | None:
    """Intervalle de budget déclaré par une vidéo.

    Règle de la borne unique: si une seule borne est renseignée, l'autre prend la même valeur
    (intervalle ponctuel). Sans aucune borne, la vidéo n'a pas d'intervalle.
    """
    if budget_min is None and budget_max is None:
        return None
    low = budget_min if budget_min is not None else budget_max
    high = budget_max if budget_max is not None else budget_min
    return NumericRange(low, high)


def budget_matches(
    budget_min: int | None, budget_max: int | None, wanted: NumericRange
) -> bool:
    """Budget d'une vidéo compatible avec l'intervalle demandé."""
    declared = video_budget_range(budget_min, budget_max)
    return declared is not None and overlaps(declared, wanted)


def duration_matches(duration_seconds: int | None, buckets: list[NumericRange]) -> bool:
    """Durée connue comprise dans au moins une des tranches."""
    if duration_seconds is None:
        return False
    return any(contains(bucket, duration_seconds) for bucket in buckets)


def scale_range(scale: tuple[int, ...], min_index: int, max_index: int) -> NumericRange | None:
    """Intervalle sélectionné par deux curseurs; None s'il couvre toute l'échelle."""
    last = len(scale) - 1
    low = max(0, min(min_index, last))
    high = max(0, min(max_index, last))
    low, high = min(low, high), max(low, high)
    if low == 0 and high == last:
        return None
    return NumericRange(scale[low], scale[high])


_AMOUNT = re.compile(r"(\d[\d\s]*(?:[.,]\d+)?)(?:\s*([kK]))?")


def parse_budget_mentions(text: str) -> list[float]:
    """Montants mentionnés dans un texte libre ("5 000$", "7,5k").

    Les valeurs sous 1000 sont ignorées (quantités, durées...).
    """
    values: list[float] = []
    for match in _AMOUNT.finditer(text or ""):
        cleaned = re.sub(r"\s+", "", match.group(1)).replace(",", ".", 1)
        try:
            parsed = float(cleaned)
        except ValueError:
            continue
        value = parsed * 1000 if match.group(2) else parsed
        if value < MIN_BUDGET_MENTION:
            continue
        values.append(value)
    return values


def closest_level_index(scale: tuple[int, ...], value: float) -> int:
    """Index du palier le plus proche (premier en cas d'égalité)."""
    best_index = 0
    best_delta = abs(scale[0] - value)
    for index in range(1, len(scale)):
        delta = abs(scale[index] - value)
        if delta < best_delta:
            best_delta = delta
            best_index = index
    return best_index


def budget_indices_from_text(text: str) -> tuple[int, int] | None:
    """Positions des curseurs de budget déduites d'un texte libre.

    Le curseur bas est élargi d'un palier vers le bas pour ne pas écarter les projets voisins.
    """
    values = parse_budget_mentions(text)
    if not values:
        return None
    min_index = max(0, closest_level_index(BUDGET_LEVELS, min(values)) - 1)
    max_index = min(len(BUDGET_LEVELS) - 1, closest_level_index(BUDGET_LEVELS, max(values)))
    return min(min_index, max_index), max(min_index, max_index)
