# storefront/database.py
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import UpstreamFailure

# This file holds the key-value backends behind the catalog store.
# Values are plain JSON-compatible dicts.

logger = logging.getLogger(__name__)


class MemoryKVStore:
    def __init__(self):
        self._data: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        value = self._data.get(key)
        return dict(value) if value is not None else None

    def set(self, key: str, value: Dict[str, Any]) -> None:
        self._data[key] = dict(value)

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def get_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        return [dict(v) for k, v in self._data.items() if k.startswith(prefix)]


class JsonFileKVStore(MemoryKVStore):
    """Memory store mirrored to one JSON file.

    The file is read once on construction and rewritten in full after every
    write, through a temp file and ``os.replace``.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                self._data = json.load(fh)
        except (OSError, ValueError) as e:
            raise UpstreamFailure(f"Failed to read catalog store {self.path}: {e}")
        logger.info("Loaded %d keys from %s", len(self._data), self.path)

    def _flush(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".kv-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise UpstreamFailure(f"Failed to write catalog store {self.path}: {e}")

    def set(self, key: str, value: Dict[str, Any]) -> None:
        previous = self._data.get(key)
        super().set(key, value)
        try:
            self._flush()
        except UpstreamFailure:
            if previous is None:
                self._data.pop(key, None)
            else:
                self._data[key] = previous
            raise

    def delete(self, key: str) -> bool:
        previous = self._data.get(key)
        if not super().delete(key):
            return False
        try:
            self._flush()
        except UpstreamFailure:
            self._data[key] = previous
            raise
        return True
