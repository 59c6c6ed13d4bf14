"""MenuConcorde - Concordance entre deux cartes (source / cible)."""

from menuconcorde.config import ConfigError, ConfigFileError, MenuConcordeError
from menuconcorde.io_excel import SpreadsheetFileError
from menuconcorde.matching.schema import DuplicateNameError, MatchConflictError

__all__ = [
    "__version__",
    "MenuConcordeError",
    "ConfigError",
    "ConfigFileError",
    "SpreadsheetFileError",
    "MatchConflictError",
    "DuplicateNameError",
]

__version__ = "0.1.0"
