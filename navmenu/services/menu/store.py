"""Key/value stores backing the menu caches."""
from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Dict, Optional, Protocol, Tuple

import redis

from ...settings.config import settings

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    def read(self, key: str, namespace: str) -> Any:
        ...

    def write(self, key: str, value: Any, namespace: str, ttl: int) -> bool:
        ...

    def delete(self, key: str, namespace: str) -> bool:
        ...


def _namespaced(key: str, namespace: str) -> str:
    return f"{namespace}:{key}" if namespace else key


class MemoryCacheStore:
    """Process-local store with per-key expiry."""

    def __init__(self) -> None:
        self._data: Dict[str, Tuple[float | None, str]] = {}
        self._lock = threading.Lock()

    def read(self, key: str, namespace: str) -> Any:
        full_key = _namespaced(key, namespace)
        with self._lock:
            item = self._data.get(full_key)
            if item is None:
                return None
            expires_at, payload = item
            if expires_at is not None and expires_at <= time.monotonic():
                self._data.pop(full_key, None)
                return None
        return json.loads(payload)

    def write(self, key: str, value: Any, namespace: str, ttl: int) -> bool:
        payload = json.dumps(value, ensure_ascii=False)
        expires_at = time.monotonic() + ttl if ttl and ttl > 0 else None
        with self._lock:
            self._data[_namespaced(key, namespace)] = (expires_at, payload)
        return True

    def delete(self, key: str, namespace: str) -> bool:
        with self._lock:
            return self._data.pop(_namespaced(key, namespace), None) is not None


class RedisCacheStore:
    """Redis-backed store; read failures look like misses, write failures return False."""

    def __init__(self, client: "redis.Redis") -> None:
        self._client = client

    def read(self, key: str, namespace: str) -> Any:
        try:
            payload = self._client.get(_namespaced(key, namespace))
        except Exception as exc:  # noqa: BLE001
            logger.warning("menu_cache: redis read failed for %s: %s", key, exc)
            return None
        if payload is None:
            return None
        try:
            return json.loads(payload)
        except ValueError as exc:
            logger.warning("menu_cache: discarding undecodable value for %s: %s", key, exc)
            return None

    def write(self, key: str, value: Any, namespace: str, ttl: int) -> bool:
        try:
            payload = json.dumps(value, ensure_ascii=False)
            if ttl and ttl > 0:
                self._client.setex(_namespaced(key, namespace), ttl, payload)
            else:
                self._client.set(_namespaced(key, namespace), payload)
            return True
        except Exception as exc:  # noqa: BLE001
            logger.warning("menu_cache: redis write failed for %s: %s", key, exc)
            return False

    def delete(self, key: str, namespace: str) -> bool:
        try:
            return bool(self._client.delete(_namespaced(key, namespace)))
        except Exception as exc:  # noqa: BLE001
            logger.warning("menu_cache: redis delete failed for %s: %s", key, exc)
            return False


def _get_redis_client(redis_url: str):
    try:
        client = redis.Redis.from_url(
            redis_url,
            decode_responses=True,
        )
        client.ping()
        return client
    except Exception as exc:  # noqa: BLE001
        logger.warning("menu_cache: redis unavailable, fallback to in-memory store: %s", exc)
        return None


def build_cache_store(backend: Optional[str] = None, redis_url: Optional[str] = None) -> CacheStore:
    backend = (backend or settings.menu_cache_backend or "memory").strip().lower()
    if backend == "redis":
        client = _get_redis_client(redis_url or settings.redis_url)
        if client is not None:
            return RedisCacheStore(client)
    return MemoryCacheStore()
