"""Host key-value stores the storage adapter can sit on.

Each backend offers the same synchronous two-call surface:
``get(key) -> str | None`` and ``set(key, value)``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

import redis

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Synchronous string key-value store."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryKeyValueStore:
    """Dict-backed store that lives for the process lifetime."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore:
    """Stores all keys in one local JSON object file.

    Every ``set`` rewrites the whole file in a single write.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        raw = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"{self._path} does not contain a JSON object")
        return raw

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"Value for {key!r} in {self._path} is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except (ValueError, RecursionError) as exc:
            backup = self._path.with_name(self._path.name + ".corrupt")
            logger.warning(
                "Store file %s is corrupt (%s) — moved to %s", self._path, exc, backup
            )
            self._path.replace(backup)
            data = {}
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")


class RedisKeyValueStore:
    """Synchronous Redis-backed store."""

    def __init__(self, redis_url: str, prefix: str = "") -> None:
        self._redis_url = redis_url
        self._prefix = prefix
        self._client = redis.Redis.from_url(redis_url, decode_responses=True)
        logger.info("Redis key-value store configured: %s", redis_url)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        return self._client.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self._client.set(self._key(key), value)

    def close(self) -> None:
        """Close the Redis connection pool."""
        self._client.close()
