"""JSON file storage for the application document.

The whole document is one record under a fixed key. There is no partial
update and no versioning: every save overwrites the previous record.

Directory layout:

    {base}/
      ordo_rpg_manager_data_v1.json   ← the serialised AppState

Loading never raises. A missing record, an unreadable file or a document
that no longer matches the model all fall back to the default document.
Saving is best-effort: failures are logged and swallowed, and the in-memory
document stays authoritative until the next successful write.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from ordo_manager.models import AppState

logger = logging.getLogger(__name__)

STORAGE_KEY = "ordo_rpg_manager_data_v1"


def default_state() -> AppState:
    return AppState()


class Storage:
    def __init__(self, base_path: Path, key: str = STORAGE_KEY) -> None:
        self._base = base_path
        self._key = key
        self._base.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._base / f"{self._key}.json"

    def load(self) -> AppState:
        path = self.path
        if not path.is_file():
            return default_state()
        try:
            return AppState.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning("Failed to load state from %s: %s", path, e)
            return default_state()

    def save(self, state: AppState) -> None:
        try:
            self.path.write_text(state.to_json(), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save state to %s: %s", self.path, e)
