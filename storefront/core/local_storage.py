# storefront/core/local_storage.py
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    Device-local string key/value store.

    Values are plain strings (callers serialize). Backed by one JSON file
    when `path` is given, otherwise in-memory only. Never synced anywhere.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else None
        self._items: dict[str, str] = {}
        if self.path is not None and self.path.exists():
            self._load()

    def _load(self) -> None:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("local storage at %s unreadable, starting empty: %s", self.path, e)
            return
        if isinstance(raw, dict):
            self._items = {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._items), encoding="utf-8")

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()
