"""Interface en ligne de commande MenuConcorde."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from menuconcorde import __version__
from menuconcorde.catalog import apply_delta
from menuconcorde.config import Config, MenuConcordeError
from menuconcorde.io_excel import catalog_to_df, list_sheets, load_catalogs, save_xlsx
from menuconcorde.mapping import build_mapping_csv, build_mapping_df
from menuconcorde.matching.engine import MatchEngine
from menuconcorde.matching.schema import CatalogDelta, Category
from menuconcorde.matching.scorers import confidence_level
from menuconcorde.report import build_report_df, print_report_console
from menuconcorde.session import SessionController

logger = logging.getLogger(__name__)


class TargetCatalogHost:
    """Catalogue cible de référence côté hôte, tenu à jour par les deltas du moteur."""

    def __init__(self, catalog: list[Category]) -> None:
        self.catalog = catalog

    def __call__(self, delta: CatalogDelta) -> None:
        logger.debug("Delta %s: %s dans %s", delta.kind, delta.record.id, delta.category_id)
        self.catalog = apply_delta(self.catalog, delta)


def cmd_list_sheets(filepath: str) -> int:
    """Liste les feuilles d'un fichier tableur."""
    sheets = list_sheets(filepath)
    print(f"Feuilles dans {filepath}:")
    for s in sheets:
        print(f"  - {s}")
    return 0


def interactive_resolve(engine: MatchEngine) -> None:
    """
    Mode interactif : pour chaque article source non apparié, propose les
    suggestions, la création côté cible ou le passage.
    """
    cfg = engine.config
    pending = [m.source_item.id for m in engine.matches if not m.is_matched]

    for source_id in pending:
        match = engine.get_match(source_id)
        if match is None or match.is_matched:
            continue
        suggestions = engine.suggest(source_id)

        print("\n" + "=" * 60)
        print(f"Article source {source_id} ({match.category_id}): {match.source_item.name}")
        if match.source_item.description:
            print(f"  {match.source_item.description}")
        if match.source_item.price is not None:
            print(f"  Prix: {match.source_item.price}")
        print("\nSuggestions:")
        for i, s in enumerate(suggestions):
            level = confidence_level(s.confidence, cfg.high_confidence, cfg.medium_confidence)
            print(f"  [{i + 1}] {s.item.name} ({s.item.id}) - {round(s.confidence)}% [{level}]")
        print("  [c] Créer dans la carte cible")
        print("  [s] Passer (skip)")

        while True:
            inp = input(f"Choix (1-{len(suggestions)} / c / s): ").strip().lower()
            if inp == "s":
                break
            if inp == "c":
                result = engine.create_counterpart(source_id)
                if result.ok:
                    break
                print(result.message)
                continue
            try:
                idx = int(inp)
            except ValueError:
                idx = 0
            if 1 <= idx <= len(suggestions):
                result = engine.manual_match(source_id, suggestions[idx - 1].item.id)
                if result.ok:
                    break
                print(result.message)
                continue
            print("Choix invalide, réessayez.")


def cmd_run(
    config_path: str,
    output_path: str | None,
    *,
    dry_run: bool = False,
    interactive: bool = False,
    mapping_path: str | None = None,
    session_path: str | None = None,
) -> int:
    """Exécute le pipeline MenuConcorde."""
    config = Config.load(config_path)
    source_catalog, target_catalog = load_catalogs(config)

    host = TargetCatalogHost(target_catalog)
    engine = MatchEngine(source_catalog, target_catalog, config, on_catalog_change=host)

    sessions = SessionController()
    if session_path and Path(session_path).exists():
        _, journal = sessions.load_session(Path(session_path))
        results = sessions.replay(engine, journal)
        n_applied = sum(1 for r in results if r.ok)
        print(f"Session rejouée: {n_applied}/{len(results)} commandes appliquées")

    if interactive:
        interactive_resolve(engine)

    if session_path:
        sessions.save_session(Path(session_path), {"config": str(Path(config_path).resolve())}, engine.journal)
        print(f"Session écrite: {session_path}")

    # --mapping prime s'il est fourni
    map_path = (
        Path(mapping_path)
        if mapping_path
        else (Path(output_path).parent / "mapping.csv" if output_path else Path(config_path).parent / "mapping.csv")
    )
    build_mapping_csv(engine, str(map_path), config)
    print(f"Mapping écrit: {map_path}")

    print_report_console(engine, config)

    if dry_run:
        print("Mode dry-run: pas d'écriture du fichier de sortie.")
        return 0

    if not output_path:
        print("Erreur: --output requis en mode non dry-run.")
        return 1

    sheets = {
        "Target": catalog_to_df(host.catalog, config.columns),
        "Mapping": build_mapping_df(engine, config),
        "REPORT": build_report_df(engine, config),
    }
    save_xlsx(output_path, sheets)
    print(f"Fichier de sortie: {output_path}")

    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="menuconcorde",
        description="Concordance entre deux cartes (appariement assisté des articles)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", "-v", action="store_true", help="Journalisation détaillée")

    subparsers = parser.add_subparsers(dest="command", help="Commandes")

    # list-sheets
    p_list = subparsers.add_parser("list-sheets", help="Lister les feuilles d'un tableur")
    p_list.add_argument("file", help="Fichier xlsx / ods / csv")

    # run
    p_run = subparsers.add_parser("run", help="Exécuter l'appariement")
    p_run.add_argument("--config", "-c", required=True, help="Fichier config JSON")
    p_run.add_argument("--output", "-o", help="Fichier xlsx de sortie")
    p_run.add_argument("--dry-run", action="store_true", help="Ne pas écrire le fichier de sortie")
    p_run.add_argument("--interactive", "-i", action="store_true", help="Validation interactive des non appariés")
    p_run.add_argument("--mapping", "-m", help="Chemin pour mapping.csv")
    p_run.add_argument("--session", "-s", help="Fichier de session JSON (rejoué puis mis à jour)")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "list-sheets":
            return cmd_list_sheets(args.file)

        if args.command == "run":
            if not args.dry_run and not args.output:
                parser.error("--output requis sauf en --dry-run")
            return cmd_run(
                args.config,
                args.output,
                dry_run=args.dry_run,
                interactive=args.interactive,
                mapping_path=args.mapping,
                session_path=args.session,
            )
    except MenuConcordeError as e:
        print(f"Erreur: {e}")
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
