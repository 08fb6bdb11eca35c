"""File-backed key-value store for the board state and operator preferences."""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from ..config import settings

SLOTS_KEY = "pallet_data"
RETURNS_KEY = "return_items"
SAS_KEY = "sas_items"
ARCHIVES_KEY = "pallet_archives"
THEME_KEY = "theme"

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")

logger = logging.getLogger(__name__)


class LocalStore:
    """Thin wrapper around the data root holding one JSON document per key."""

    def __init__(self, root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve()
        self.state_root = self.root / "state"
        self.state_root.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key '{key}'.")
        return self.state_root / f"{key}.json"

    def get(self, key: str) -> Any | None:
        """Return the decoded value for ``key`` or ``None`` when absent or unreadable."""
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error(f"Failed to read local key '{key}' from {path}: {exc}")
            return None

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        with tmp_path.open("w", encoding="utf-8") as handle:
            json.dump(value, handle, ensure_ascii=False)
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def has(self, key: str) -> bool:
        return self._path(key).exists()
