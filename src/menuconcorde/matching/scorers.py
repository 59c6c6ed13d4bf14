"""Calcul du score de similarité entre deux noms d'articles."""

from __future__ import annotations

from collections.abc import Iterable

from rapidfuzz.distance import Levenshtein

from menuconcorde.matching.schema import Record, Suggestion
from menuconcorde.normalize import norm_name

SUBSTRING_BOOST = 10.0
WORD_OVERLAP_BOOST = 20.0


def levenshtein_distance(a: str, b: str) -> int:
    """Distance d'édition (substitution, insertion, suppression : coût 1)."""
    return int(Levenshtein.distance(a, b))


def score_names(source: str, target: str) -> float:
    """
    Calcule le score de confiance (0-100) entre deux noms.

    - Noms identiques après normalisation : 100 (y compris deux noms vides).
    - Sinon similarité Levenshtein normalisée, avec bonus si l'un contient
      l'autre (+10) ou, à défaut, si des mots sont communs (+20 au prorata).

    Args:
        source: Nom de l'article source.
        target: Nom de l'article cible.

    Returns:
        Score entre 0 et 100.
    """
    s = norm_name(source)
    t = norm_name(target)

    if s == t:
        return 100.0

    max_len = max(len(s), len(t))
    distance = levenshtein_distance(s, t)
    similarity = (max_len - distance) / max_len * 100

    if s in t or t in s:
        return min(100.0, similarity + SUBSTRING_BOOST)

    # Ensembles de mots des deux côtés : score symétrique
    words_s = set(s.split())
    words_t = set(t.split())
    common = len(words_s & words_t)
    if common > 0:
        boost = common / max(len(words_s), len(words_t)) * WORD_OVERLAP_BOOST
        return min(100.0, similarity + boost)

    return max(0.0, similarity)


def find_best_match(
    name: str,
    candidates: Iterable[Record],
    threshold: float = 70.0,
) -> Suggestion | None:
    """
    Retourne le meilleur candidat (score >= threshold), le premier en cas d'égalité.

    Returns:
        Suggestion ou None si aucun candidat n'atteint le seuil.
    """
    best: Suggestion | None = None
    for item in candidates:
        confidence = score_names(name, item.name)
        if confidence >= threshold and (best is None or confidence > best.confidence):
            best = Suggestion(item=item, confidence=confidence)
    return best


def confidence_level(confidence: float, high: float = 80.0, medium: float = 60.0) -> str:
    """Classe un score en high / medium / low (convention d'affichage)."""
    if confidence >= high:
        return "high"
    if confidence >= medium:
        return "medium"
    return "low"
