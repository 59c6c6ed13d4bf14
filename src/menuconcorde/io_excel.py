"""I/O tableurs : chargement et sauvegarde des cartes (Excel, ODS, CSV)."""

from __future__ import annotations

import csv
from decimal import Decimal, InvalidOperation
from pathlib import Path

import pandas as pd

from menuconcorde.config import REQUIRED_COLUMNS, Config, MenuConcordeError, default_columns
from menuconcorde.matching.schema import Category, Record
from menuconcorde.normalize import safe_str

# Formats supportés
SUPPORTED_INPUT_EXTENSIONS = (".xlsx", ".xls", ".ods", ".csv")
CREATED_COLUMN = "created"
_TRUE_VALUES = frozenset({"1", "true", "yes", "oui", "x"})


class SpreadsheetFileError(MenuConcordeError):
    """Erreur de chargement d'un fichier (fichier absent, feuille inexistante, colonnes manquantes)."""


def _get_engine(path: Path) -> str | None:
    """Retourne le moteur pandas selon l'extension, ou None pour auto."""
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return "openpyxl"
    if suffix == ".xls":
        return "xlrd"
    if suffix in (".ods", ".odt"):
        return "odf"
    return None


def _is_csv(path: Path) -> bool:
    return path.suffix.lower() == ".csv"


def _detect_csv_delimiter(path: Path, encoding: str, *, skip_rows: int = 0) -> str | None:
    try:
        with path.open("r", encoding=encoding, errors="replace") as f:
            for _ in range(skip_rows):
                if f.readline() == "":
                    return None
            sample_lines: list[str] = []
            for line in f:
                if line.strip() == "":
                    continue
                sample_lines.append(line)
                if len(sample_lines) >= 5:
                    break
    except OSError:
        return None
    if not sample_lines:
        return None
    sample = "".join(sample_lines)
    try:
        return csv.Sniffer().sniff(sample, delimiters=[",", ";", "\t", "|"]).delimiter
    except csv.Error:
        first = sample_lines[0]
        counts = {d: first.count(d) for d in [",", ";", "\t", "|"]}
        best = max(counts, key=lambda d: counts[d])
        return best if counts[best] > 0 else None


def _open_workbook(path: Path) -> pd.ExcelFile:
    try:
        engine = _get_engine(path)
        return pd.ExcelFile(path, engine=engine) if engine else pd.ExcelFile(path)
    except ImportError as e:
        ext = path.suffix.lower()
        if ext == ".xls":
            raise SpreadsheetFileError(f"Format .xls requis: pip install xlrd. Détail: {e}") from e
        if ext in (".ods", ".odt"):
            raise SpreadsheetFileError(f"Format ODS requis: pip install odfpy. Détail: {e}") from e
        raise SpreadsheetFileError(f"Impossible de lire {path}: {e}") from e
    except Exception as e:
        raise SpreadsheetFileError(f"Impossible de lire le fichier {path}: {e}") from e


def list_sheets(filepath: str | Path) -> list[str]:
    """
    Liste les noms des feuilles d'un fichier tableur.

    Formats supportés : .xlsx, .xls, .ods, .csv (une seule "feuille" pour CSV).

    Raises:
        SpreadsheetFileError: Si le fichier est absent ou illisible.
    """
    path = Path(filepath)
    if not path.exists():
        raise SpreadsheetFileError(f"Fichier introuvable: {path}")
    if _is_csv(path):
        return ["(données)"]
    return [str(s) for s in _open_workbook(path).sheet_names]


def load_sheet(
    filepath: str | Path,
    sheet_name: str | None = None,
    *,
    header_row: int = 1,
) -> pd.DataFrame:
    """
    Charge une feuille dans un DataFrame en préservant le texte (dtype=str).

    Args:
        filepath: Chemin vers le fichier.
        sheet_name: Nom de la feuille (None = première). Ignoré pour CSV.
        header_row: Numéro de ligne (1-based) contenant les en-têtes.

    Raises:
        SpreadsheetFileError: Si le fichier est absent, illisible ou si la feuille n'existe pas.
    """
    path = Path(filepath)
    if not path.exists():
        raise SpreadsheetFileError(f"Fichier introuvable: {path}")

    header_idx = max(header_row - 1, 0)
    if _is_csv(path):
        for encoding in ("utf-8", "latin-1"):
            try:
                delimiter = _detect_csv_delimiter(path, encoding, skip_rows=header_idx) or ","
                return pd.read_csv(
                    path,
                    dtype=str,
                    encoding=encoding,
                    sep=delimiter,
                    skiprows=range(header_idx) if header_idx > 0 else None,
                )
            except UnicodeDecodeError:
                continue
            except Exception as e:
                raise SpreadsheetFileError(
                    f"Erreur CSV {path}: {e}. Vérifiez la ligne d'en-tête et le séparateur."
                ) from e
        raise SpreadsheetFileError(f"Erreur CSV {path}: encodage non reconnu")

    xl = _open_workbook(path)
    if sheet_name is None:
        sheet_name = str(xl.sheet_names[0])
    elif sheet_name not in xl.sheet_names:
        sheets = [str(s) for s in xl.sheet_names]
        raise SpreadsheetFileError(f"Feuille '{sheet_name}' introuvable dans {path}. Feuilles: {', '.join(sheets)}")

    try:
        return pd.read_excel(xl, sheet_name=sheet_name, dtype=str, header=header_idx)
    except Exception as e:
        raise SpreadsheetFileError(f"Erreur feuille '{sheet_name}' dans {path}: {e}") from e


def save_xlsx(
    filepath: str | Path,
    dataframes: dict[str, pd.DataFrame],
    *,
    index: bool = False,
) -> None:
    """
    Sauvegarde plusieurs DataFrames dans un fichier xlsx (une feuille par DataFrame).

    Args:
        filepath: Chemin de sortie.
        dataframes: Dict {nom_feuille: DataFrame}.
    """
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        for sheet_name, df in dataframes.items():
            # Excel limite les noms de feuille à 31 caractères
            safe_name = str(sheet_name)[:31]
            df.to_excel(writer, sheet_name=safe_name, index=index)


def _parse_price(raw: str, row_number: int) -> Decimal | None:
    text = raw.strip().replace(",", ".")
    if not text:
        return None
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise SpreadsheetFileError(f"Prix invalide ligne {row_number}: {raw!r}") from e


def catalog_from_df(
    df: pd.DataFrame,
    columns: dict[str, str] | None = None,
    *,
    header_row: int = 1,
) -> list[Category]:
    """
    Construit une carte à partir d'une feuille au format long (une ligne par article).

    Les catégories sont ordonnées par première apparition. Les lignes sans id
    d'article sont ignorées (lignes vides en fin de feuille).

    Args:
        df: Feuille chargée (dtype=str).
        columns: colonne logique -> nom de colonne (défaut : noms logiques).
        header_row: Ligne (1-based) des en-têtes dans le fichier, pour numéroter les erreurs.

    Raises:
        SpreadsheetFileError: Si une colonne obligatoire manque ou si un prix est invalide.
    """
    cols = columns or default_columns()
    missing = sorted(cols[c] for c in REQUIRED_COLUMNS if cols[c] not in df.columns)
    if missing:
        raise SpreadsheetFileError(f"Colonnes manquantes: {', '.join(missing)}")

    def cell(row: pd.Series, logical: str) -> str:
        col = cols[logical]
        return safe_str(row[col]).strip() if col in row.index else ""

    categories: dict[str, Category] = {}
    for pos, (_, row) in enumerate(df.iterrows()):
        row_number = header_row + pos + 1
        record_id = cell(row, "id")
        if not record_id:
            continue
        category_id = cell(row, "category_id")
        if category_id not in categories:
            categories[category_id] = Category(id=category_id, name=cell(row, "category_name") or category_id)
        description = cell(row, "description")
        created = CREATED_COLUMN in row.index and safe_str(row[CREATED_COLUMN]).strip().lower() in _TRUE_VALUES
        categories[category_id].items.append(
            Record(
                id=record_id,
                name=safe_str(row[cols["name"]]),
                description=description or None,
                price=_parse_price(cell(row, "price"), row_number),
                created=created,
            )
        )
    return list(categories.values())


def catalog_to_df(catalog: list[Category], columns: dict[str, str] | None = None) -> pd.DataFrame:
    """Aplatit une carte au format long (inverse de catalog_from_df)."""
    cols = columns or default_columns()
    rows = []
    for category in catalog:
        for item in category.items:
            rows.append(
                {
                    cols["category_id"]: category.id,
                    cols["category_name"]: category.name,
                    cols["id"]: item.id,
                    cols["name"]: item.name,
                    cols["description"]: item.description or "",
                    cols["price"]: str(item.price) if item.price is not None else "",
                    CREATED_COLUMN: item.created,
                }
            )
    header = [cols[c] for c in ("category_id", "category_name", "id", "name", "description", "price")]
    return pd.DataFrame(rows, columns=header + [CREATED_COLUMN])


def load_catalogs(config: Config) -> tuple[list[Category], list[Category]]:
    """
    Charge les cartes source et cible selon la configuration.

    Returns:
        (source_catalog, target_catalog)
    """
    if config.single_file:
        path = Path(config.single_file)
        df_source = load_sheet(path, config.source_sheet_in_single, header_row=config.source_header_row)
        df_target = load_sheet(path, config.target_sheet_in_single, header_row=config.target_header_row)
    else:
        df_source = load_sheet(config.source_file, config.source_sheet, header_row=config.source_header_row)
        df_target = load_sheet(config.target_file, config.target_sheet, header_row=config.target_header_row)
    return (
        catalog_from_df(df_source, config.columns, header_row=config.source_header_row),
        catalog_from_df(df_target, config.columns, header_row=config.target_header_row),
    )
