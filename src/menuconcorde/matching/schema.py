"""Schémas et types pour le matching."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from menuconcorde.config import MenuConcordeError

# Statuts d'une commande
APPLIED = "applied"
NOOP = "noop"
CONFLICT = "conflict"
DUPLICATE = "duplicate"

# Types de delta sur le catalogue cible
ADDED = "added"
REMOVED = "removed"


class MatchConflictError(MenuConcordeError):
    """L'article cible est déjà apparié à un autre article source."""


class DuplicateNameError(MenuConcordeError):
    """Un article du même nom existe déjà dans la catégorie cible."""


@dataclass(frozen=True)
class Record:
    """Un article d'une carte. Identité = id, seul le nom sert au score."""

    id: str
    name: str
    description: str | None = None
    price: Decimal | None = None
    created: bool = False  # créé côté cible à partir d'un article source


@dataclass
class Category:
    """Une catégorie d'une carte (liste ordonnée d'articles)."""

    id: str
    name: str
    items: list[Record] = field(default_factory=list)


@dataclass
class Match:
    """État d'appariement d'un article source."""

    source_item: Record
    target_item: Record | None
    confidence: float
    is_matched: bool
    category_id: str  # id de la catégorie source
    method: str = ""  # auto, manual, created ; "" si non apparié

    def __repr__(self) -> str:
        target = self.target_item.id if self.target_item else None
        return f"Match(source={self.source_item.id}, target={target}, confidence={self.confidence:.1f})"


@dataclass
class Suggestion:
    """Un candidat cible proposé à l'opérateur."""

    item: Record
    confidence: float

    def __repr__(self) -> str:
        return f"Suggestion(item={self.item.id}, confidence={self.confidence:.1f})"


@dataclass
class MatchGroups:
    """Matches d'une catégorie, séparés par statut (ordre des articles source)."""

    matched: list[Match] = field(default_factory=list)
    unmatched: list[Match] = field(default_factory=list)


@dataclass
class CatalogDelta:
    """Modification du catalogue cible que l'hôte doit reporter."""

    kind: str  # added, removed
    category_id: str  # id de la catégorie cible
    category_name: str
    record: Record


@dataclass
class CommandResult:
    """Résultat d'une commande du moteur."""

    command: str
    status: str  # applied, noop, conflict, duplicate
    match: Match | None = None
    delta: CatalogDelta | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == APPLIED

    def raise_for_status(self) -> None:
        """Lève l'erreur correspondant à un refus (conflict, duplicate)."""
        if self.status == CONFLICT:
            raise MatchConflictError(self.message)
        if self.status == DUPLICATE:
            raise DuplicateNameError(self.message)
