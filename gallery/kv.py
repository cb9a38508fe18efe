"""
String-valued key-value stores backing the local fallback.

Supports an in-memory store for tests/dev, a JSON file on disk, and Redis.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol

import redis
from redis import exceptions as redis_exceptions

from gallery.errors import LocalStoreError


class KeyValueStore(Protocol):
    """Minimal browser-storage style interface."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


@dataclass
class InMemoryKeyValueStore:
    """Dict-backed store; contents last as long as the process."""

    items: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set(self, key: str, value: str) -> None:
        self.items[key] = value


@dataclass
class JsonFileKeyValueStore:
    """
    Keeps every entry in one JSON object on disk.

    Writes go through a temporary file in the same directory and are moved
    into place, so a crash never leaves a half-written file behind.
    """

    path: Path

    def __post_init__(self):
        self.path = Path(self.path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise LocalStoreError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise LocalStoreError(f"{self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise LocalStoreError(f"Cannot write {self.path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise LocalStoreError(f"Cannot write {self.path}: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)


@dataclass
class RedisKeyValueStore:
    """Redis-backed store using plain string keys under a prefix."""

    url: str
    prefix: str = "gallery:"

    def __post_init__(self):
        self.client = redis.Redis.from_url(self.url)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.client.get(self._key(key))
        except redis_exceptions.RedisError as exc:
            raise LocalStoreError(f"Redis get {key} failed: {exc}") from exc
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(self._key(key), value)
        except redis_exceptions.RedisError as exc:
            raise LocalStoreError(f"Redis set {key} failed: {exc}") from exc
