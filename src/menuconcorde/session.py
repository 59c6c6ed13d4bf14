"""Sessions : sauvegarde et rejeu des décisions de l'opérateur."""

from __future__ import annotations

import json
from pathlib import Path

from menuconcorde.config import ConfigFileError
from menuconcorde.matching.engine import JournalEntry, MatchEngine
from menuconcorde.matching.schema import CommandResult


class SessionController:
    """Gère la persistance du journal des commandes appliquées."""

    def save_session(self, path: Path, config_dict: dict, journal: list[JournalEntry]) -> None:
        """Sauvegarde config_dict et le journal dans un fichier JSON."""
        data = {
            "config_dict": config_dict,
            "journal": [list(entry) for entry in journal],
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def load_session(self, path: Path) -> tuple[dict, list[JournalEntry]]:
        """
        Charge config_dict et le journal depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou invalide.
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"Session invalide {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire la session {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigFileError(f"Session invalide: {path} doit contenir un objet JSON")
        config_dict = data.get("config_dict", {})
        journal: list[JournalEntry] = []
        for raw in data.get("journal", []):
            if not isinstance(raw, list) or len(raw) != 3:
                raise ConfigFileError(f"Entrée de journal invalide dans {path}: {raw!r}")
            command, arg, extra = raw
            journal.append((str(command), str(arg), None if extra is None else str(extra)))
        return config_dict, journal

    @staticmethod
    def replay(engine: MatchEngine, journal: list[JournalEntry]) -> list[CommandResult]:
        """
        Rejoue un journal sur un moteur fraîchement aligné.

        Les commandes devenues sans objet (article disparu) reviennent en noop.
        """
        results: list[CommandResult] = []
        for command, arg, extra in journal:
            if command == "manual_match":
                results.append(engine.manual_match(arg, extra or ""))
            elif command == "unmatch":
                results.append(engine.unmatch(arg))
            elif command == "create_counterpart":
                results.append(engine.create_counterpart(arg))
            elif command == "delete_counterpart":
                results.append(engine.delete_counterpart(arg))
            elif command == "realign":
                engine.realign()
            else:
                raise ConfigFileError(f"Commande inconnue dans le journal: {command!r}")
        return results
