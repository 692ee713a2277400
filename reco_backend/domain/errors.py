"""Erreurs métier remontées par les dépôts et le service de recommandations."""

from __future__ import annotations


class UpstreamReadError(RuntimeError):
    """Lecture impossible d'une source externe; fatale pour la requête en cours."""


class CatalogUnavailableError(UpstreamReadError):
    """Catalogue (vidéos, taxonomies ou liens) illisible."""


class SettingsUnavailableError(UpstreamReadError):
    """Réglages des références illisibles ou impossibles à enregistrer."""
