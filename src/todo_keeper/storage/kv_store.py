# src/todo_keeper/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from .errors import PersistenceReadFailure, PersistenceWriteFailure

logger = logging.getLogger(__name__)


def _encoded_len(text: str) -> int:
    # Lone surrogates are legal in str; count them instead of failing the quota check.
    return len(text.encode("utf-8", errors="surrogatepass"))


class JsonFileStorage:
    """
    File-backed key-value storage (string keys, string values).

    The whole map lives in one JSON object on disk. Every call re-reads the
    file, so the file is the only state.

    Writes go to a temp file first and are moved into place with os.replace.
    """

    def __init__(self, path: str | Path = "storage.json") -> None:
        self._path = Path(path)
        logger.debug("JsonFileStorage path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    def _read_map(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            raw = self._path.read_text("utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceReadFailure(f"cannot read {self._path}: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and the int digit limit; RecursionError deep nesting.
            raise PersistenceReadFailure(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceReadFailure(f"{self._path} must hold a JSON object")
        return data

    def _write_map(self, data: dict[str, str]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, ensure_ascii=True, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except (OSError, ValueError) as e:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise PersistenceWriteFailure(f"cannot write {self._path}: {e}") from e

        with contextlib.suppress(OSError):
            # Best-effort: task text is personal data, keep the file private on disk.
            os.chmod(self._path, 0o600)

    # ---- public API ----

    def get_item(self, key: str) -> str | None:
        value = self._read_map().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise PersistenceReadFailure(f"value for key {key!r} is not a string")
        return value

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read_map()
        except PersistenceReadFailure:
            # Unreadable map: the new write replaces it rather than failing forever.
            logger.warning("Storage file %s is corrupted; overwriting.", self._path)
            data = {}
        data[key] = value
        self._write_map(data)


class MemoryStorage:
    """
    In-process key-value storage.

    quota_bytes mimics a browser storage quota: a write that would make the
    total encoded size of keys and values exceed it fails.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def _size_with(self, key: str, value: str) -> int:
        total = 0
        for k, v in self._items.items():
            if k == key:
                continue
            total += _encoded_len(k) + _encoded_len(v)
        return total + _encoded_len(key) + _encoded_len(value)

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota_bytes is not None and self._size_with(key, value) > self._quota_bytes:
            raise PersistenceWriteFailure(
                f"quota exceeded: writing {key!r} needs more than {self._quota_bytes} bytes"
            )
        self._items[key] = value
