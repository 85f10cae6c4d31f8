"""
TTL Cache Module

A lightweight in-memory key-value cache where every entry carries its own
expiration timestamp. All durations and timestamps are in milliseconds.

Expiry Strategy:
    - Passive: every read that meets an expired entry evicts it and reports
      the key as absent
    - Active: a background sweep scans every entry each ``check_interval``
      milliseconds and evicts the expired ones

Background Sweep:
    - Runs on a daemon threading.Timer, so it never keeps the interpreter
      alive on shutdown
    - Rescheduled after each run until ``close()`` is called
    - Shares a threading.RLock() with the foreground methods

TTL Resolution:
    A write uses the TTL passed to the call, falling back to the cache
    default. If the resolved TTL is not positive the write is refused with
    NoTTLResolvableError.

Example:
    >>> cache = Cache(ttl=10_000)
    >>> cache.set("key", "value")
    >>> cache.get("key")
    'value'
    >>> # 11 seconds later
    >>> cache.has("key")
    False
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, Optional, TypeVar

from chronoid.core.exceptions import NoTTLResolvableError
from chronoid.services.logger import setup_logger
from chronoid.utils.duration import Time

logger = setup_logger()

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_CHECK_INTERVAL = int(Time.MINUTE * 10)


@dataclass
class CacheEntry(Generic[V]):
    """A value stored in the cache along with its expiration timestamp."""

    expires_at: float
    value: V


class Cache(Generic[K, V]):
    """Key-value cache with per-entry TTL.

    Attributes:
        ttl: The default time-to-live of the values, 0 means none.
        check_interval: Milliseconds between two sweeps of expired keys.
        data: The inner dict holding every entry, expired ones included until
            they are swept or read.
    """

    def __init__(self, ttl: float = 0, check_interval: float = DEFAULT_CHECK_INTERVAL):
        self.ttl = ttl
        self.check_interval = check_interval
        self.data: dict[K, CacheEntry[V]] = {}

        self._lock = threading.RLock()
        self._check_timer: Optional[threading.Timer] = None
        self._closed = False

        self._check_data()

    def _current_timestamp(self) -> float:
        """Returns the current timestamp in milliseconds."""
        return time.time() * 1000

    def _resolve_ttl(self, key: K, ttl: Optional[float], action: str) -> float:
        timer_ttl = self.ttl if ttl is None else ttl
        if timer_ttl <= 0:
            raise NoTTLResolvableError(
                f"Cannot {action} with no TTL (key: '{key}', ttl: '{timer_ttl}')"
            )
        return timer_ttl

    def _check(self, key: K, entry: CacheEntry[V]) -> bool:
        """Evicts the entry if it expired. Returns whether it is still alive."""
        if entry.expires_at < self._current_timestamp():
            self.data.pop(key, None)
            return False
        return True

    def _live_entry(self, key: K) -> Optional[CacheEntry[V]]:
        entry = self.data.get(key)
        if entry is not None and self._check(key, entry):
            return entry
        return None

    def _check_data(self) -> None:
        with self._lock:
            if self._closed:
                return

            expired = 0
            for key, entry in list(self.data.items()):
                if not self._check(key, entry):
                    expired += 1
            if expired:
                logger.debug("Cache sweep evicted %d expired keys", expired)

            if self._check_timer is not None:
                self._check_timer.cancel()
            self._check_timer = threading.Timer(
                self.check_interval / 1000, self._check_data
            )
            self._check_timer.daemon = True
            self._check_timer.start()

    def get(self, key: K) -> Optional[V]:
        """Get a value, or None if it is absent or expired."""
        with self._lock:
            entry = self._live_entry(key)
            return entry.value if entry is not None else None

    def set(self, key: K, value: V, ttl: Optional[float] = None) -> None:
        """Set a value.

        Args:
            key: The key.
            value: The value.
            ttl: The time-to-live, defaults to the one of the cache.

        Raises:
            NoTTLResolvableError: If the resolved TTL is not positive.
        """
        timer_ttl = self._resolve_ttl(key, ttl, "set a value")
        with self._lock:
            self.data[key] = CacheEntry(
                expires_at=self._current_timestamp() + timer_ttl, value=value
            )

    def take(self, key: K) -> Optional[V]:
        """Get and delete the value associated with the key."""
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return None
            del self.data[key]
            return entry.value

    def update(self, key: K, value: V, ttl: Optional[float] = None) -> None:
        """Set a value without changing its TTL.

        If there is no live value for this key, it is added with ``ttl``.

        Raises:
            NoTTLResolvableError: If the resolved TTL is not positive.
        """
        timer_ttl = self._resolve_ttl(key, ttl, "update a value")
        with self._lock:
            entry = self._live_entry(key)
            expires_at = (
                entry.expires_at
                if entry is not None
                else self._current_timestamp() + timer_ttl
            )
            self.data[key] = CacheEntry(expires_at=expires_at, value=value)

    def has(self, key: K) -> bool:
        """Check if a live value is stored under the key."""
        with self._lock:
            return self._live_entry(key) is not None

    def find(self, predicate: Callable[[V], bool]) -> Optional[V]:
        """Return the first live value matching the predicate, or None."""
        with self._lock:
            for key, entry in list(self.data.items()):
                if not self._check(key, entry):
                    continue
                if predicate(entry.value):
                    return entry.value
        return None

    def expires_in(self, key: K) -> Optional[float]:
        """Get the milliseconds left before the key expires.

        None if there is no value or it already expired.
        """
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return None
            expires_in = entry.expires_at - self._current_timestamp()
            return expires_in if expires_in > 0 else None

    def expires_at(self, key: K) -> Optional[float]:
        """Get the expiration timestamp of the key.

        None if there is no value or it already expired.
        """
        with self._lock:
            entry = self._live_entry(key)
            return entry.expires_at if entry is not None else None

    def set_ttl(self, key: K, ttl: Optional[float] = None) -> bool:
        """Reset the TTL of a key.

        Returns:
            False if there is no live value for the key.

        Raises:
            NoTTLResolvableError: If the resolved TTL is not positive.
        """
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return False

            timer_ttl = self._resolve_ttl(key, ttl, "set_ttl")
            entry.expires_at = self._current_timestamp() + timer_ttl
            return True

    def delete(self, key: K) -> bool:
        """Delete a key. Returns whether it was present."""
        with self._lock:
            return self.data.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all keys."""
        with self._lock:
            self.data.clear()

    def keys(self) -> list[K]:
        """Get every key, including expired ones not swept yet."""
        with self._lock:
            return list(self.data)

    def close(self) -> None:
        """Stop the background sweep."""
        with self._lock:
            self._closed = True
            if self._check_timer is not None:
                self._check_timer.cancel()
                self._check_timer = None

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self.data)

    def __enter__(self) -> "Cache[K, V]":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
