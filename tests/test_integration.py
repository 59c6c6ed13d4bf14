"""Test d'intégration du pipeline MenuConcorde."""

import json
from pathlib import Path

import pandas as pd
import pytest

from menuconcorde.cli import cmd_run
from menuconcorde.io_excel import catalog_to_df
from menuconcorde.matching.schema import Category


@pytest.fixture
def project(tmp_path: Path, source_menu: list[Category], target_menu: list[Category]) -> Path:
    """Crée source.xlsx, target.xlsx et config.json ; retourne le chemin de la config."""
    catalog_to_df(source_menu).to_excel(tmp_path / "source.xlsx", index=False, engine="openpyxl")
    catalog_to_df(target_menu).to_excel(tmp_path / "target.xlsx", index=False, engine="openpyxl")
    config_path = tmp_path / "config.json"
    config_path.write_text(
        json.dumps({"source_file": "source.xlsx", "target_file": "target.xlsx", "suggestion_limit": 3}),
        encoding="utf-8",
    )
    return config_path


def test_full_pipeline_dry_run(project: Path, tmp_path: Path) -> None:
    """Exécute le pipeline complet en mode dry-run."""
    mapping_path = tmp_path / "mapping.csv"
    exit_code = cmd_run(str(project), None, dry_run=True, mapping_path=str(mapping_path))
    assert exit_code == 0
    mapping_df = pd.read_csv(mapping_path)
    assert len(mapping_df) == 12
    assert mapping_df["is_matched"].sum() == 1
    assert mapping_df.loc[mapping_df["source_id"] == "s1", "target_id"].values[0] == "t1"


def test_full_pipeline_with_output(project: Path, tmp_path: Path) -> None:
    out = tmp_path / "output.xlsx"
    exit_code = cmd_run(str(project), str(out), dry_run=False)
    assert exit_code == 0
    assert (tmp_path / "mapping.csv").exists()

    xl = pd.ExcelFile(out, engine="openpyxl")
    assert xl.sheet_names == ["Target", "Mapping", "REPORT"]
    target_df = pd.read_excel(xl, sheet_name="Target", dtype=str)
    assert len(target_df) == 9
    xl.close()


def test_run_without_output_fails(project: Path) -> None:
    assert cmd_run(str(project), None, dry_run=False) == 1


def test_interactive_pipeline_and_session(
    project: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Mode interactif : skip s2, suggestion 1 pour s3, création pour s4, skip le reste."""
    answers = iter(["s", "1", "c"] + ["s"] * 8)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(answers))

    out = tmp_path / "output.xlsx"
    session = tmp_path / "session.json"
    exit_code = cmd_run(str(project), str(out), interactive=True, session_path=str(session))
    assert exit_code == 0

    mapping = pd.read_excel(out, sheet_name="Mapping", dtype=str).set_index("source_id")
    assert mapping.loc["s3", "target_id"] == "t3"
    assert mapping.loc["s3", "method"] == "manual"
    assert mapping.loc["s4", "target_id"] == "created-s4"

    target_df = pd.read_excel(out, sheet_name="Target", dtype=str)
    assert "created-s4" in target_df["id"].tolist()
    assert len(target_df) == 10

    saved = json.loads(session.read_text(encoding="utf-8"))
    assert saved["journal"] == [["manual_match", "s3", "t3"], ["create_counterpart", "s4", None]]

    # Second passage : la session est rejouée, aucune saisie nécessaire
    out2 = tmp_path / "output2.xlsx"
    assert cmd_run(str(project), str(out2), session_path=str(session)) == 0
    mapping2 = pd.read_excel(out2, sheet_name="Mapping", dtype=str).set_index("source_id")
    assert mapping2.loc["s4", "target_id"] == "created-s4"
    assert mapping2.loc["s3", "method"] == "manual"
