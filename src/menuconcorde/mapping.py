"""Export du mapping source -> cible."""

from __future__ import annotations

import pandas as pd

from menuconcorde.config import Config
from menuconcorde.matching.engine import MatchEngine
from menuconcorde.matching.scorers import confidence_level

MAPPING_COLUMNS = [
    "category_id",
    "source_id",
    "source_name",
    "target_id",
    "target_name",
    "confidence",
    "confidence_level",
    "is_matched",
    "method",
]


def build_mapping_df(engine: MatchEngine, config: Config | None = None) -> pd.DataFrame:
    """
    Construit le mapping : une ligne par article source, dans l'ordre de la carte source.

    Le niveau de confiance (high / medium / low) suit les seuils de la config.
    """
    cfg = config or engine.config
    rows = []
    for m in engine.matches:
        rows.append(
            {
                "category_id": m.category_id,
                "source_id": m.source_item.id,
                "source_name": m.source_item.name,
                "target_id": m.target_item.id if m.target_item is not None else "",
                "target_name": m.target_item.name if m.target_item is not None else "",
                "confidence": round(m.confidence, 1),
                "confidence_level": confidence_level(m.confidence, cfg.high_confidence, cfg.medium_confidence),
                "is_matched": m.is_matched,
                "method": m.method,
            }
        )
    return pd.DataFrame(rows, columns=MAPPING_COLUMNS)


def build_mapping_csv(engine: MatchEngine, output_path: str, config: Config | None = None) -> None:
    """Génère mapping.csv (voir build_mapping_df)."""
    df = build_mapping_df(engine, config)
    df.to_csv(output_path, index=False, encoding="utf-8")
