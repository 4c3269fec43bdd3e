"""JSON file persistence for the configuration record."""

import json
from pathlib import Path
from typing import Any

import aiofiles
import structlog

logger = structlog.get_logger(__name__)


class JsonSettingsStore:
    """Loads and saves the flat configuration record as a JSON document."""

    def __init__(self, path: str | Path):
        """
        Initialize settings store.

        Args:
            path: JSON file holding the record; parent directories are created on save
        """
        self.path = Path(path)

    async def load(self) -> dict[str, Any]:
        """
        Read the persisted record.

        Returns:
            The stored mapping, or an empty dict when nothing was saved yet
            or the file is not a JSON object
        """
        if not self.path.exists():
            return {}

        async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
            raw = await f.read()

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Settings file is not valid JSON, using defaults", path=str(self.path), error=str(e))
            return {}

        if not isinstance(data, dict):
            logger.warning("Settings file does not hold an object, using defaults", path=str(self.path))
            return {}
        return data

    async def save(self, record: dict[str, Any]) -> None:
        """Write the record, replacing the previous contents."""
        self.path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(record, indent=2, sort_keys=True))

        logger.debug("Settings saved", path=str(self.path))
