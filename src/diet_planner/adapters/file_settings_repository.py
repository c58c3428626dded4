"""Local JSON file repository for persisted settings documents."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from diet_planner.services.settings_store import SettingsRepository

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileSettingsRepository(SettingsRepository):
    """Stores every settings document in a single JSON file."""

    path: Path

    def load(self, key: str) -> dict[str, object] | None:
        """Return the stored document for a key."""
        value = self._read().get(key)
        return value if isinstance(value, dict) else None

    def save(self, key: str, value: dict[str, object]) -> None:
        """Write the document for a key, keeping the other keys."""
        documents = self._read()
        documents[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps(documents, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        tmp_path.replace(self.path)

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            _logger.warning("Settings file %s is not valid JSON, ignoring", self.path)
            return {}
        return data if isinstance(data, dict) else {}
