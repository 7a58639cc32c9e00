# app/services/storage/kv_store.py
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Keys of the persisted collections
ACCOUNTS_KEY = "accounts"
SESSION_KEY = "session"
TOKEN_KEY = "token"
FILES_KEY = "files"
ANALYSIS_KEY = "analysis"


class KeyValueStore:
    """JSON-serialised key-value state, the server-side counterpart of browser local storage.

    Values must be JSON-compatible. Every write rewrites the backing file (when one is
    configured) through a temporary file and an atomic rename. With ``path=None`` the
    state lives in memory only.

    Not thread-safe: all mutations are expected to run on the event loop, which is
    why every route handler touching the store is ``async def``.
    """

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path else None
        self._data: dict[str, Any] = self._load()

    def _load(self) -> dict[str, Any]:
        if not self.path or not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Could not read persisted state from %s, starting empty: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            logger.error("Persisted state in %s is not a JSON object, starting empty", self.path)
            return {}
        logger.info("Loaded persisted state from %s (%d keys)", self.path, len(raw))
        return raw

    def _flush(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError:
            logger.exception("Failed to persist state to %s", self.path)
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str, default: Any = None) -> Any:
        """Return a deep copy of the stored value so callers never alias the store."""
        if key not in self._data:
            return default
        return json.loads(json.dumps(self._data[key]))

    def set_item(self, key: str, value: Any) -> None:
        # Round-trip through JSON now so unserialisable values fail at the call site
        self._data[key] = json.loads(json.dumps(value))
        self._flush()

    def remove_item(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    def keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> None:
        """Drop every key."""
        self._data = {}
        self._flush()
