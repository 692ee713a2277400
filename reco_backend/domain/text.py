"""Normalisation des libellés et du texte libre.

Toutes les comparaisons de libellés (tags, description, réglages) passent par `normalize` afin
d'être insensibles aux accents, à la casse et aux espaces: "Café", "cafe" et "  CAFÉ " sont égaux.
"""

from __future__ import annotations

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize(text) -> str:
    """Forme canonique d'un texte (sans accents, minuscules, séparateurs simples).

    Fonction totale: une entrée vide ou non textuelle donne "".
    """
    if not isinstance(text, str) or not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    lowered = stripped.replace("\u00a0", " ").lower()
    return _NON_ALNUM.sub(" ", lowered).strip()


def contains_phrase(haystack: str, phrase: str) -> bool:
    """Indique si `phrase` (normalisée) apparaît comme suite de mots entière dans `haystack`.

    Les deux arguments doivent déjà être normalisés.
    """
    if not phrase:
        return False
    return f" {phrase} " in f" {haystack} "
