"""Module de matching : score de similarité et moteur d'appariement."""

from menuconcorde.matching.engine import MatchEngine
from menuconcorde.matching.schema import (
    CatalogDelta,
    Category,
    CommandResult,
    Match,
    MatchGroups,
    Record,
    Suggestion,
)
from menuconcorde.matching.scorers import confidence_level, score_names

__all__ = [
    "MatchEngine",
    "CatalogDelta",
    "Category",
    "CommandResult",
    "Match",
    "MatchGroups",
    "Record",
    "Suggestion",
    "confidence_level",
    "score_names",
]
