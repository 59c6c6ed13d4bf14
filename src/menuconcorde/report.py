"""Génération du rapport et onglet REPORT."""

from __future__ import annotations

from datetime import datetime

import pandas as pd

from menuconcorde import __version__
from menuconcorde.config import Config
from menuconcorde.matching.engine import MatchEngine
from menuconcorde.matching.scorers import confidence_level


def _counts(engine: MatchEngine, config: Config) -> dict[str, int]:
    matches = engine.matches
    matched = [m for m in matches if m.is_matched]
    levels = [confidence_level(m.confidence, config.high_confidence, config.medium_confidence) for m in matched]
    # Une catégorie cible partagée par plusieurs catégories source n'est comptée qu'une fois
    by_target: dict[str, str] = {}
    for cid in engine.group_matches():
        tc = engine.target_category_for(cid)
        if tc is not None:
            by_target.setdefault(tc.id, cid)
    unmatched_targets = sum(len(engine.list_unmatched_targets(cid)) for cid in by_target.values())
    return {
        "nb_source_items": len(matches),
        "nb_matched": len(matched),
        "nb_auto": sum(1 for m in matched if m.method == "auto"),
        "nb_manual": sum(1 for m in matched if m.method == "manual"),
        "nb_created": sum(1 for m in matched if m.method == "created"),
        "nb_unmatched": len(matches) - len(matched),
        "nb_unmatched_targets": unmatched_targets,
        "nb_high": levels.count("high"),
        "nb_medium": levels.count("medium"),
        "nb_low": levels.count("low"),
    }


def build_report_df(engine: MatchEngine, config: Config | None = None) -> pd.DataFrame:
    """
    Construit le DataFrame pour l'onglet REPORT.

    Contient : compteurs d'appariement (auto, manuel, créé, non apparié),
    répartition par niveau de confiance des appariés, paramètres,
    horodatage, version.
    """
    cfg = config or engine.config
    rows: list[tuple[str, object]] = [("Metric", "Value")]
    rows.extend(_counts(engine, cfg).items())
    rows.extend(
        [
            ("", ""),
            ("Parameters", ""),
            ("auto_match_score", cfg.auto_match_score),
            ("suggestion_min_score", cfg.suggestion_min_score),
            ("suggestion_limit", cfg.suggestion_limit),
            ("high_confidence", cfg.high_confidence),
            ("medium_confidence", cfg.medium_confidence),
            ("", ""),
            ("timestamp", datetime.now().isoformat()),
            ("version", __version__),
        ]
    )
    return pd.DataFrame(rows, columns=["Key", "Value"])


def print_report_console(engine: MatchEngine, config: Config | None = None) -> None:
    """Affiche un résumé du rapport en console."""
    c = _counts(engine, config or engine.config)

    print("\n=== MenuConcorde Report ===")
    print(f"  Articles source:    {c['nb_source_items']}")
    print(f"  Auto-appariés:      {c['nb_auto']}")
    print(f"  Appariés (manuel):  {c['nb_manual']}")
    print(f"  Créés en cible:     {c['nb_created']}")
    print(f"  Non appariés:       {c['nb_unmatched']}")
    print(f"  Cibles libres:      {c['nb_unmatched_targets']}")
    print(f"  Confiance h/m/b:    {c['nb_high']}/{c['nb_medium']}/{c['nb_low']}")
    print(f"  Version:            {__version__}")
    print(f"  Timestamp:          {datetime.now().isoformat()}")
    print("===========================\n")
