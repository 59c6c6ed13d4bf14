"""Normalisation des noms d'articles."""

from __future__ import annotations

from typing import Any


def _is_missing(val: Any) -> bool:
    return val is None or (isinstance(val, float) and (val != val or val == float("inf")))


def norm_name(s: str | float | int | None) -> str:
    """
    Normalise un nom d'article pour la comparaison : minuscules, strip.

    Pas de NFKC ni de fusion des espaces internes : la distance d'édition
    porte sur la chaîne telle quelle.

    Args:
        s: Valeur à normaliser (convertie en str si numérique).

    Returns:
        Chaîne normalisée ("" pour None / NaN).
    """
    if _is_missing(s):
        return ""
    return str(s).lower().strip()


def safe_str(val: Any) -> str:
    """Convertit une valeur en chaîne pour affichage/stockage."""
    if _is_missing(val):
        return ""
    return str(val)
