"""
JSON Key/Value Store

One JSON blob per logical collection. Reads fall back to a default and
writes are best-effort: storage errors are logged, never raised.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class JsonStore:
    """
    File-backed store.

    Each key is written to {data_dir}/{key}.json.
    """

    def __init__(self, data_dir: str = "./data"):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def load(self, key: str, default: Any = None) -> Any:
        """Load a blob, or return `default` when missing or unreadable."""
        path = self._path(key)
        if not path.exists():
            return default

        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load '{key}' from {path}: {e}")
            return default

    def save(self, key: str, value: Any) -> bool:
        """Write a blob. Returns False if the write failed."""
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")

        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
            tmp_path.replace(path)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to save '{key}' to {path}: {e}")
            return False

    def delete(self, key: str) -> bool:
        path = self._path(key)
        if not path.exists():
            return False

        try:
            path.unlink()
            return True
        except OSError as e:
            logger.warning(f"Failed to delete '{key}': {e}")
            return False

    def keys(self) -> List[str]:
        return sorted(p.stem for p in self.data_dir.glob("*.json"))

    def clear(self):
        """Remove every blob."""
        for key in self.keys():
            self.delete(key)


class MemoryStore:
    """In-memory store with the same interface, for tests."""

    def __init__(self):
        self._blobs: Dict[str, str] = {}

    def load(self, key: str, default: Any = None) -> Any:
        raw = self._blobs.get(key)
        if raw is None:
            return default

        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Failed to load '{key}': {e}")
            return default

    def save(self, key: str, value: Any) -> bool:
        # Kept as JSON text, same as the file store
        try:
            self._blobs[key] = json.dumps(value, ensure_ascii=False)
            return True
        except (TypeError, ValueError) as e:
            logger.warning(f"Failed to save '{key}': {e}")
            return False

    def delete(self, key: str) -> bool:
        return self._blobs.pop(key, None) is not None

    def keys(self) -> List[str]:
        return sorted(self._blobs)

    def clear(self):
        self._blobs.clear()
