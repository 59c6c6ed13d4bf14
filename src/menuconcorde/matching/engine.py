"""Moteur d'appariement : alignement initial, suggestions, commandes opérateur."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import Callable

from menuconcorde.config import Config
from menuconcorde.matching.schema import (
    ADDED,
    APPLIED,
    CONFLICT,
    DUPLICATE,
    NOOP,
    REMOVED,
    CatalogDelta,
    Category,
    CommandResult,
    Match,
    MatchGroups,
    Record,
    Suggestion,
)
from menuconcorde.matching.scorers import find_best_match, score_names
from menuconcorde.normalize import norm_name

logger = logging.getLogger(__name__)

CatalogListener = Callable[[CatalogDelta], None]
JournalEntry = tuple[str, str, str | None]


def _copy_catalog(catalog: Iterable[Category]) -> list[Category]:
    """Copie superficielle : les Record sont immuables, seules les listes sont dupliquées."""
    return [Category(id=c.id, name=c.name, items=list(c.items)) for c in catalog]


def _find_record(category: Category, record_id: str) -> Record | None:
    for item in category.items:
        if item.id == record_id:
            return item
    return None


class MatchEngine:
    """
    Moteur d'appariement entre une carte source et une carte cible.

    Un Match par article source, créé une seule fois à la construction
    (alignement initial) puis modifié uniquement par les commandes. Un index
    target_id -> source_id garantit qu'un article cible n'est tenu que par
    un seul Match.

    Le moteur travaille sur sa propre copie des catalogues. Les commandes qui
    modifient la carte cible (create_counterpart, delete_counterpart)
    notifient l'hôte via on_catalog_change pour qu'il reporte le delta dans
    son catalogue de référence.
    """

    def __init__(
        self,
        source_catalog: Iterable[Category],
        target_catalog: Iterable[Category],
        config: Config | None = None,
        on_catalog_change: CatalogListener | None = None,
    ) -> None:
        self.config = config or Config()
        self.auto_match_score = self.config.auto_match_score
        self.suggestion_min_score = self.config.suggestion_min_score
        self.suggestion_limit = self.config.suggestion_limit
        self.created_id_prefix = self.config.created_id_prefix
        self.on_catalog_change = on_catalog_change

        self._source = _copy_catalog(source_catalog)
        self._target = _copy_catalog(target_catalog)
        self._matches: dict[str, Match] = {}
        self._holders: dict[str, str] = {}  # target_id -> source_id
        self._target_category_ids: dict[str, str | None] = {}  # source cat -> target cat
        self.journal: list[JournalEntry] = []

        self._align()

    # ------------------------------------------------------------------
    # Alignement

    def _corresponding_category(self, source_category: Category) -> Category | None:
        """Catégorie cible de même id, à défaut de même nom."""
        for tc in self._target:
            if tc.id == source_category.id:
                return tc
        for tc in self._target:
            if tc.name == source_category.name:
                return tc
        return None

    def _resolve_categories(self) -> None:
        self._target_category_ids = {}
        for sc in self._source:
            tc = self._corresponding_category(sc)
            self._target_category_ids[sc.id] = tc.id if tc is not None else None

    def _align(self) -> None:
        self._matches = {}
        self._holders = {}
        self._resolve_categories()
        n_auto = 0

        for sc in self._source:
            tc = self._target_category(sc.id)
            for item in sc.items:
                if item.id in self._matches:
                    logger.warning("Article source en double ignoré: %r (catégorie %r)", item.id, sc.id)
                    continue

                match = Match(source_item=item, target_item=None, confidence=0.0, is_matched=False, category_id=sc.id)
                best = find_best_match(item.name, tc.items, threshold=0.0) if tc is not None else None
                if best is not None:
                    match.confidence = best.confidence
                    # La cible déjà prise par une source homonyme est sautée au profit d'une cible libre
                    free = [r for r in tc.items if r.id not in self._holders]
                    auto = find_best_match(item.name, free, threshold=self.auto_match_score)
                    if auto is not None:
                        self._assign(match, auto.item, auto.confidence, "auto")
                        n_auto += 1
                self._matches[item.id] = match

        logger.info(
            "Alignement initial: %d articles source, %d appariés automatiquement",
            len(self._matches),
            n_auto,
        )

    def realign(self) -> None:
        """
        Recalcule l'alignement initial sur l'état courant des catalogues.

        Toutes les décisions de l'opérateur sont perdues. Jamais appelé
        implicitement.
        """
        self._align()
        self.journal.append(("realign", "", None))

    def sync_target_catalog(self, target_catalog: Iterable[Category]) -> int:
        """
        Remplace la vue de la carte cible sans relancer l'alignement.

        Les appariements existants sont conservés ; ceux dont l'article cible
        a disparu de la catégorie correspondante repassent en non apparié.

        Returns:
            Nombre d'appariements libérés.
        """
        self._target = _copy_catalog(target_catalog)
        self._resolve_categories()
        released = 0

        for match in self._matches.values():
            if match.target_item is None:
                continue
            tc = self._target_category(match.category_id)
            record = _find_record(tc, match.target_item.id) if tc is not None else None
            if record is None:
                self._release(match)
                released += 1
            else:
                match.target_item = record

        logger.info("Carte cible synchronisée: %d appariement(s) libéré(s)", released)
        return released

    # ------------------------------------------------------------------
    # Requêtes

    def _target_category(self, category_id: str) -> Category | None:
        target_id = self._target_category_ids.get(category_id)
        if target_id is None:
            return None
        for tc in self._target:
            if tc.id == target_id:
                return tc
        return None

    def _source_category(self, category_id: str) -> Category | None:
        for sc in self._source:
            if sc.id == category_id:
                return sc
        return None

    @property
    def matches(self) -> list[Match]:
        """Tous les Match (copies), dans l'ordre des articles source."""
        return [replace(m) for m in self._matches.values()]

    @property
    def target_catalog(self) -> list[Category]:
        """Vue du moteur sur la carte cible (copie)."""
        return _copy_catalog(self._target)

    def get_match(self, source_item_id: str) -> Match | None:
        match = self._matches.get(source_item_id)
        return replace(match) if match is not None else None

    def holder_of(self, target_item_id: str) -> str | None:
        """Id de l'article source apparié à cet article cible, ou None."""
        return self._holders.get(target_item_id)

    def target_category_for(self, category_id: str) -> Category | None:
        """Catégorie cible correspondant à une catégorie source (copie)."""
        tc = self._target_category(category_id)
        if tc is None:
            return None
        return Category(id=tc.id, name=tc.name, items=list(tc.items))

    def list_matches(self, category_id: str) -> MatchGroups:
        groups = MatchGroups()
        for match in self._matches.values():
            if match.category_id != category_id:
                continue
            if match.is_matched:
                groups.matched.append(replace(match))
            else:
                groups.unmatched.append(replace(match))
        return groups

    def group_matches(self) -> dict[str, MatchGroups]:
        """Matches groupés par catégorie source (toutes les catégories présentes)."""
        return {sc.id: self.list_matches(sc.id) for sc in self._source}

    def list_unmatched_targets(self, category_id: str) -> list[Record]:
        """Articles de la catégorie cible correspondante tenus par aucun Match."""
        tc = self._target_category(category_id)
        if tc is None:
            return []
        return [item for item in tc.items if item.id not in self._holders]

    def suggest(self, source_item_id: str) -> list[Suggestion]:
        """
        Propose les meilleurs candidats libres pour un article source.

        Candidats : articles cibles non appariés de la même catégorie, score
        strictement supérieur à suggestion_min_score, tri décroissant stable,
        au plus suggestion_limit entrées.
        """
        match = self._matches.get(source_item_id)
        if match is None:
            return []

        suggestions = [
            Suggestion(item=item, confidence=score_names(match.source_item.name, item.name))
            for item in self.list_unmatched_targets(match.category_id)
        ]
        suggestions = [s for s in suggestions if s.confidence > self.suggestion_min_score]
        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        return suggestions[: self.suggestion_limit]

    def exists_in_target(self, source_item_id: str) -> bool:
        """Vrai si la catégorie cible contient déjà un article du même nom."""
        match = self._matches.get(source_item_id)
        if match is None:
            return False
        tc = self._target_category(match.category_id)
        if tc is None:
            return False
        name = norm_name(match.source_item.name)
        return any(norm_name(item.name) == name for item in tc.items)

    # ------------------------------------------------------------------
    # Commandes

    def _assign(self, match: Match, record: Record, confidence: float, method: str) -> None:
        self._release(match)
        match.target_item = record
        match.confidence = confidence
        match.is_matched = True
        match.method = method
        self._holders[record.id] = match.source_item.id

    def _release(self, match: Match) -> None:
        if match.target_item is not None:
            self._holders.pop(match.target_item.id, None)
        match.target_item = None
        match.is_matched = False
        match.method = ""

    def _result(
        self,
        command: str,
        status: str,
        match: Match | None = None,
        delta: CatalogDelta | None = None,
        message: str = "",
    ) -> CommandResult:
        logger.debug("%s: %s %s", command, status, message)
        return CommandResult(
            command=command,
            status=status,
            match=replace(match) if match is not None else None,
            delta=delta,
            message=message,
        )

    def _notify(self, delta: CatalogDelta) -> None:
        if self.on_catalog_change is not None:
            self.on_catalog_change(delta)

    def _new_created_id(self, source_item_id: str) -> str:
        taken = {item.id for tc in self._target for item in tc.items}
        base = f"{self.created_id_prefix}{source_item_id}"
        candidate = base
        n = 2
        while candidate in taken:
            candidate = f"{base}-{n}"
            n += 1
        return candidate

    def manual_match(self, source_item_id: str, target_item_id: str) -> CommandResult:
        """
        Apparie manuellement un article source à un article cible de la même catégorie.

        Refuse (conflict) si l'article cible est déjà tenu par un autre Match.
        """
        match = self._matches.get(source_item_id)
        if match is None:
            return self._result("manual_match", NOOP, message=f"Article source introuvable: {source_item_id!r}")

        tc = self._target_category(match.category_id)
        record = _find_record(tc, target_item_id) if tc is not None else None
        if record is None:
            return self._result(
                "manual_match",
                NOOP,
                match,
                message=f"Article cible introuvable dans la catégorie: {target_item_id!r}",
            )

        holder = self._holders.get(target_item_id)
        if holder is not None and holder != source_item_id:
            return self._result(
                "manual_match",
                CONFLICT,
                match,
                message=f"Article cible {target_item_id!r} déjà apparié à {holder!r}",
            )

        self._assign(match, record, score_names(match.source_item.name, record.name), "manual")
        self.journal.append(("manual_match", source_item_id, target_item_id))
        return self._result("manual_match", APPLIED, match)

    def unmatch(self, target_item_id: str) -> CommandResult:
        """Libère le Match qui tient cet article cible (sans effet s'il n'y en a pas)."""
        holder = self._holders.get(target_item_id)
        if holder is None:
            return self._result("unmatch", NOOP, message=f"Aucun appariement pour {target_item_id!r}")

        match = self._matches[holder]
        self._release(match)
        self.journal.append(("unmatch", target_item_id, None))
        return self._result("unmatch", APPLIED, match)

    def create_counterpart(self, source_item_id: str) -> CommandResult:
        """
        Crée dans la carte cible une copie de l'article source et l'apparie.

        Refuse (duplicate) si un article du même nom existe déjà dans la
        catégorie cible. Crée la catégorie cible si elle n'existe pas.
        """
        match = self._matches.get(source_item_id)
        if match is None:
            return self._result("create_counterpart", NOOP, message=f"Article source introuvable: {source_item_id!r}")

        if self.exists_in_target(source_item_id):
            return self._result(
                "create_counterpart",
                DUPLICATE,
                match,
                message=f"Un article nommé {match.source_item.name!r} existe déjà dans la catégorie cible",
            )

        tc = self._target_category(match.category_id)
        if tc is None:
            sc = self._source_category(match.category_id)
            if sc is None:
                return self._result("create_counterpart", NOOP, match, message="Catégorie source introuvable")
            tc = Category(id=sc.id, name=sc.name, items=[])
            self._target.append(tc)
            self._target_category_ids[sc.id] = tc.id

        record = replace(match.source_item, id=self._new_created_id(source_item_id), created=True)
        tc.items.append(record)
        self._assign(match, record, 100.0, "created")

        delta = CatalogDelta(kind=ADDED, category_id=tc.id, category_name=tc.name, record=record)
        self.journal.append(("create_counterpart", source_item_id, None))
        self._notify(delta)
        return self._result("create_counterpart", APPLIED, match, delta)

    def delete_counterpart(self, target_item_id: str) -> CommandResult:
        """
        Supprime un article de la carte cible, après l'avoir désapparié.

        Aucune restriction aux articles créés : c'est à l'interface de limiter.
        """
        located: tuple[Category, Record] | None = None
        for tc in self._target:
            record = _find_record(tc, target_item_id)
            if record is not None:
                located = (tc, record)
                break
        if located is None:
            return self._result("delete_counterpart", NOOP, message=f"Article cible introuvable: {target_item_id!r}")

        tc, record = located
        match: Match | None = None
        holder = self._holders.get(target_item_id)
        if holder is not None:
            match = self._matches[holder]
            self._release(match)
        tc.items = [item for item in tc.items if item.id != target_item_id]

        delta = CatalogDelta(kind=REMOVED, category_id=tc.id, category_name=tc.name, record=record)
        self.journal.append(("delete_counterpart", target_item_id, None))
        self._notify(delta)
        return self._result("delete_counterpart", APPLIED, match, delta)
