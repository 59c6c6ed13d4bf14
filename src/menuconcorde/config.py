"""Configuration et chargement du fichier config JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Colonnes logiques d'une feuille catalogue (format long : une ligne par article)
CATALOG_COLUMNS = ("category_id", "category_name", "id", "name", "description", "price")
REQUIRED_COLUMNS = frozenset({"category_id", "id", "name"})


class MenuConcordeError(Exception):
    """Exception de base pour MenuConcorde."""


class ConfigError(MenuConcordeError, ValueError):
    """Erreur de validation de la configuration."""


class ConfigFileError(MenuConcordeError):
    """Erreur de chargement du fichier de configuration (fichier absent, JSON invalide)."""


def default_columns() -> dict[str, str]:
    return {c: c for c in CATALOG_COLUMNS}


@dataclass
class Config:
    """Configuration principale de MenuConcorde."""

    source_file: str = ""
    target_file: str = ""
    source_sheet: str | None = None  # None = première feuille
    target_sheet: str | None = None
    # Si un seul fichier avec deux feuilles
    single_file: str | None = None
    source_sheet_in_single: str | None = None
    target_sheet_in_single: str | None = None
    source_header_row: int = 1
    target_header_row: int = 1

    # colonne logique -> nom de colonne dans le tableur
    columns: dict[str, str] = field(default_factory=default_columns)

    auto_match_score: float = 100.0
    suggestion_min_score: float = 30.0  # seuil exclusif
    suggestion_limit: int = 3
    high_confidence: float = 80.0
    medium_confidence: float = 60.0
    created_id_prefix: str = "created-"

    @classmethod
    def from_dict(cls, d: dict[str, Any], *, require_files: bool = True) -> Config:
        single_file = d.get("single_file")
        source_file = d.get("source_file", "")
        target_file = d.get("target_file", "")
        auto_match_score = float(d.get("auto_match_score", 100.0))
        suggestion_min_score = float(d.get("suggestion_min_score", 30.0))
        suggestion_limit = int(d.get("suggestion_limit", 3))
        high_confidence = float(d.get("high_confidence", 80.0))
        medium_confidence = float(d.get("medium_confidence", 60.0))
        created_id_prefix = d.get("created_id_prefix", "created-")
        source_header_row = int(d.get("source_header_row", 1))
        target_header_row = int(d.get("target_header_row", 1))

        columns = default_columns()
        raw_columns = d.get("columns", {})
        if not isinstance(raw_columns, dict):
            raise ConfigError("columns doit être un objet {colonne_logique: nom_colonne}")
        unknown = sorted(set(raw_columns) - set(CATALOG_COLUMNS))
        if unknown:
            raise ConfigError(f"columns: colonnes inconnues {unknown}. Valides: {list(CATALOG_COLUMNS)}")
        columns.update({k: str(v) for k, v in raw_columns.items()})

        if require_files:
            if single_file:
                if not d.get("source_sheet_in_single") or not d.get("target_sheet_in_single"):
                    raise ConfigError("single_file requis: source_sheet_in_single et target_sheet_in_single")
            elif not source_file or not target_file:
                raise ConfigError("source_file et target_file requis (ou single_file avec feuilles)")

        if not 0 < auto_match_score <= 100:
            raise ConfigError(f"auto_match_score doit être entre 0 (exclu) et 100 (got {auto_match_score})")
        if not 0 <= suggestion_min_score <= 100:
            raise ConfigError(f"suggestion_min_score doit être entre 0 et 100 (got {suggestion_min_score})")
        if suggestion_limit < 1:
            raise ConfigError(f"suggestion_limit doit être >= 1 (got {suggestion_limit})")
        if not 0 <= medium_confidence <= high_confidence <= 100:
            raise ConfigError(
                f"seuils invalides: 0 <= medium_confidence ({medium_confidence}) "
                f"<= high_confidence ({high_confidence}) <= 100"
            )
        if not created_id_prefix:
            raise ConfigError("created_id_prefix ne peut pas être vide")
        if source_header_row < 1 or target_header_row < 1:
            raise ConfigError("source_header_row et target_header_row doivent être >= 1")

        return cls(
            source_file=source_file,
            target_file=target_file,
            source_sheet=d.get("source_sheet"),
            target_sheet=d.get("target_sheet"),
            single_file=single_file,
            source_sheet_in_single=d.get("source_sheet_in_single"),
            target_sheet_in_single=d.get("target_sheet_in_single"),
            source_header_row=source_header_row,
            target_header_row=target_header_row,
            columns=columns,
            auto_match_score=auto_match_score,
            suggestion_min_score=suggestion_min_score,
            suggestion_limit=suggestion_limit,
            high_confidence=high_confidence,
            medium_confidence=medium_confidence,
            created_id_prefix=created_id_prefix,
        )

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """
        Charge la configuration depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou le JSON invalide.
            ConfigError: Si la configuration est invalide.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Fichier de configuration introuvable: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"Fichier de configuration invalide: {path} doit contenir un objet JSON")

        config = cls.from_dict(d)
        config.resolve_paths(path.parent)
        return config

    def resolve_paths(self, base_dir: Path) -> None:
        """
        Résout les chemins relatifs par rapport au répertoire de base (ex. dossier du fichier config).

        Modifie source_file, target_file et single_file en place.
        """
        base = Path(base_dir)
        if self.source_file and not Path(self.source_file).is_absolute():
            self.source_file = str((base / self.source_file).resolve())
        if self.target_file and not Path(self.target_file).is_absolute():
            self.target_file = str((base / self.target_file).resolve())
        if self.single_file and not Path(self.single_file).is_absolute():
            self.single_file = str((base / self.single_file).resolve())
