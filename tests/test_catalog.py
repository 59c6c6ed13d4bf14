"""Tests du report des deltas dans le catalogue de l'hôte."""

import pytest

from menuconcorde.catalog import apply_delta, find_category, iter_records
from menuconcorde.matching.engine import MatchEngine
from menuconcorde.matching.schema import ADDED, REMOVED, CatalogDelta, Category, Record


def test_find_category(target_menu: list[Category]) -> None:
    assert find_category(target_menu, "desserts").name == "Desserts"  # type: ignore[union-attr]
    assert find_category(target_menu, "nope") is None


def test_iter_records_order(target_menu: list[Category]) -> None:
    ids = [item.id for _, item in iter_records(target_menu)]
    assert ids == [f"t{i}" for i in range(1, 10)]


def test_apply_delta_added(target_menu: list[Category]) -> None:
    record = Record("created-s4", "French Fries", created=True)
    updated = apply_delta(target_menu, CatalogDelta(ADDED, "appetizers", "Appetizers", record))
    assert updated[0].items[-1] == record
    # Entrée non modifiée
    assert len(target_menu[0].items) == 4


def test_apply_delta_added_is_idempotent(target_menu: list[Category]) -> None:
    delta = CatalogDelta(ADDED, "appetizers", "Appetizers", Record("created-s4", "French Fries", created=True))
    updated = apply_delta(apply_delta(target_menu, delta), delta)
    assert len(updated[0].items) == 5


def test_apply_delta_added_creates_category(target_menu: list[Category]) -> None:
    record = Record("created-s20", "Cola", created=True)
    updated = apply_delta(target_menu, CatalogDelta(ADDED, "drinks", "Drinks", record))
    assert updated[-1].id == "drinks"
    assert updated[-1].name == "Drinks"
    assert updated[-1].items == [record]


def test_apply_delta_removed(target_menu: list[Category]) -> None:
    t4 = target_menu[0].items[3]
    updated = apply_delta(target_menu, CatalogDelta(REMOVED, "appetizers", "Appetizers", t4))
    assert [r.id for r in updated[0].items] == ["t1", "t2", "t3"]


def test_apply_delta_removed_drops_empty_category() -> None:
    record = Record("x", "Cola")
    catalog = [Category("drinks", "Drinks", [record])]
    delta = CatalogDelta(REMOVED, "drinks", "Drinks", record)
    assert apply_delta(catalog, delta) == []
    assert apply_delta(catalog, delta, drop_empty=False) == [Category("drinks", "Drinks", [])]


def test_apply_delta_removed_unknown_category(target_menu: list[Category]) -> None:
    delta = CatalogDelta(REMOVED, "nope", "Nope", Record("x", "Cola"))
    assert apply_delta(target_menu, delta) == target_menu


def test_apply_delta_unknown_kind(target_menu: list[Category]) -> None:
    with pytest.raises(ValueError, match="inconnu"):
        apply_delta(target_menu, CatalogDelta("renamed", "appetizers", "Appetizers", Record("x", "Cola")))


def test_host_catalog_follows_engine(source_menu: list[Category], target_menu: list[Category]) -> None:
    """Le catalogue de l'hôte, tenu par les notifications, reste aligné sur la vue du moteur."""
    host = {"catalog": target_menu}

    def on_change(delta: CatalogDelta) -> None:
        host["catalog"] = apply_delta(host["catalog"], delta)

    engine = MatchEngine(source_menu, target_menu, on_catalog_change=on_change)
    engine.create_counterpart("s4")
    engine.create_counterpart("s11")
    engine.delete_counterpart("t9")
    engine.delete_counterpart("created-s4")

    def ids(catalog: list[Category]) -> list[tuple[str, str]]:
        return [(c.id, item.id) for c, item in iter_records(catalog)]

    assert ids(host["catalog"]) == ids(engine.target_catalog)
    assert ("desserts", "created-s11") in ids(host["catalog"])
