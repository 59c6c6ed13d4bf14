"""Côté hôte : report des deltas du moteur dans le catalogue cible de référence."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from menuconcorde.matching.schema import ADDED, REMOVED, CatalogDelta, Category, Record


def find_category(catalog: Iterable[Category], category_id: str) -> Category | None:
    """Retourne la catégorie d'id donné, ou None."""
    for category in catalog:
        if category.id == category_id:
            return category
    return None


def iter_records(catalog: Iterable[Category]) -> Iterator[tuple[Category, Record]]:
    """Parcourt (catégorie, article) dans l'ordre du catalogue."""
    for category in catalog:
        for item in category.items:
            yield category, item


def apply_delta(
    catalog: list[Category],
    delta: CatalogDelta,
    *,
    drop_empty: bool = True,
) -> list[Category]:
    """
    Applique un delta du moteur à un catalogue et retourne le nouveau catalogue.

    - added : ajoute l'article en fin de catégorie, crée la catégorie si absente.
    - removed : retire l'article ; la catégorie vidée est supprimée si drop_empty.

    Le catalogue d'entrée n'est pas modifié.
    """
    updated = [Category(id=c.id, name=c.name, items=list(c.items)) for c in catalog]
    category = find_category(updated, delta.category_id)

    if delta.kind == ADDED:
        if category is None:
            updated.append(Category(id=delta.category_id, name=delta.category_name, items=[delta.record]))
        elif all(item.id != delta.record.id for item in category.items):
            category.items.append(delta.record)
        return updated

    if delta.kind == REMOVED:
        if category is None:
            return updated
        category.items = [item for item in category.items if item.id != delta.record.id]
        if drop_empty and not category.items:
            updated = [c for c in updated if c.id != delta.category_id]
        return updated

    raise ValueError(f"Type de delta inconnu: {delta.kind!r}")
