"""Tests de l'export du mapping."""

from pathlib import Path

import pandas as pd

from menuconcorde.config import Config
from menuconcorde.mapping import MAPPING_COLUMNS, build_mapping_csv, build_mapping_df
from menuconcorde.matching.engine import MatchEngine


def test_build_mapping_df_rows(engine: MatchEngine) -> None:
    df = build_mapping_df(engine)
    assert list(df.columns) == MAPPING_COLUMNS
    assert len(df) == 12
    assert df["source_id"].tolist()[:4] == ["s1", "s2", "s3", "s4"]


def test_build_mapping_df_matched_row(engine: MatchEngine) -> None:
    row = build_mapping_df(engine).iloc[0]
    assert row["target_id"] == "t1"
    assert row["target_name"] == "Chicken Wings"
    assert row["confidence"] == 100.0
    assert row["confidence_level"] == "high"
    assert bool(row["is_matched"])
    assert row["method"] == "auto"


def test_build_mapping_df_unmatched_row(engine: MatchEngine) -> None:
    row = build_mapping_df(engine).set_index("source_id").loc["s4"]
    assert row["target_id"] == ""
    assert not bool(row["is_matched"])
    assert row["method"] == ""


def test_build_mapping_df_follows_commands(engine: MatchEngine) -> None:
    engine.manual_match("s2", "t2")
    engine.create_counterpart("s4")
    df = build_mapping_df(engine).set_index("source_id")
    assert df.loc["s2", "method"] == "manual"
    assert df.loc["s4", "target_id"] == "created-s4"
    assert df.loc["s4", "method"] == "created"


def test_build_mapping_df_levels_from_config(engine: MatchEngine) -> None:
    engine.manual_match("s2", "t2")  # score entre 50 et 90
    df = build_mapping_df(engine, Config(high_confidence=95.0, medium_confidence=20.0)).set_index("source_id")
    assert df.loc["s2", "confidence_level"] == "medium"


def test_build_mapping_csv(engine: MatchEngine, tmp_path: Path) -> None:
    path = tmp_path / "mapping.csv"
    build_mapping_csv(engine, str(path))
    df = pd.read_csv(path)
    assert len(df) == 12
    assert "source_id" in df.columns
    assert "target_id" in df.columns
    assert df["target_id"].isna().sum() == 11
