"""
String-keyed persistent storage.

Stands in for the browser's origin-scoped local storage: synchronous
`get` / `set` / `remove` of string values. `FileStore` keeps one JSON
object on disk per profile; `MemoryStore` is used for tests and for
sessions that should not outlive the process.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StorageWriteError(Exception):
    """A write to the store could not be completed."""


class StorageQuotaExceeded(StorageWriteError):
    """The write would push the store past its byte quota."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


def _usage(data: dict[str, str]) -> int:
    # Approximates the UTF-16 unit count browsers use
    return sum(len(k) + len(v) for k, v in data.items())


class MemoryStore:
    """In-memory store with an optional quota."""

    def __init__(self, initial: Optional[dict[str, str]] = None, quota_bytes: Optional[int] = None):
        self._data: dict[str, str] = dict(initial or {})
        self.quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"Store values must be strings, got {type(value).__name__}")
        if self.quota_bytes is not None:
            pending = {**self._data, key: value}
            if _usage(pending) > self.quota_bytes:
                raise StorageQuotaExceeded(
                    f"Writing '{key}' would exceed quota of {self.quota_bytes} bytes"
                )
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileStore(MemoryStore):
    """
    JSON-file backed store.

    The whole file is read once at construction and rewritten atomically
    on every change, so the on-disk state always matches memory after a
    call returns.
    """

    def __init__(self, path: Path | str, quota_bytes: Optional[int] = None):
        self.path = Path(path).expanduser()
        super().__init__(self._read(), quota_bytes=quota_bytes)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Unreadable store file {self.path}, starting empty: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Store file {self.path} is not a JSON object, starting empty")
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _flush(self, data: dict[str, str]) -> None:
        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except (OSError, ValueError) as e:
            # ValueError covers UnicodeEncodeError from lone surrogates
            if tmp is not None and os.path.exists(tmp):
                os.unlink(tmp)
            raise StorageWriteError(f"Failed to write {self.path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        previous = self._data.get(key)
        super().set(key, value)
        try:
            self._flush(self._data)
        except StorageWriteError:
            # Keep memory and disk in lockstep
            if previous is None:
                self._data.pop(key, None)
            else:
                self._data[key] = previous
            raise

    def remove(self, key: str) -> None:
        if key not in self._data:
            return
        previous = self._data.pop(key)
        try:
            self._flush(self._data)
        except StorageWriteError:
            self._data[key] = previous
            raise
