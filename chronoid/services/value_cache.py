"""
Single Value TTL Cache Module

Holds at most one value that is dropped once its TTL elapsed. All durations
and timestamps are in milliseconds.

Expiry Strategy:
    - Every ``set`` cancels the pending timer and schedules a one-shot daemon
      threading.Timer that clears the value
    - A generation counter makes a timer that fired late for a replaced value
      a no-op

Example:
    >>> value = ValueCache(ttl=10_000)
    >>> value.set("some value")
    'some value'
    >>> # 11 seconds later
    >>> value.get() is None
    True
"""

import threading
import time
from typing import Generic, Optional, TypeVar

from chronoid.core.exceptions import NoTTLResolvableError
from chronoid.services.logger import setup_logger

logger = setup_logger()

T = TypeVar("T")


class ValueCache(Generic[T]):
    """TTL cache for a single value.

    Attributes:
        ttl: The default time-to-live of the value, 0 means none.
    """

    def __init__(self, ttl: float = 0):
        self.ttl = ttl
        self._value: Optional[T] = None
        self._timer: Optional[threading.Timer] = None
        self._expires_at: Optional[float] = None
        self._generation = 0
        self._lock = threading.RLock()

    def _current_timestamp(self) -> float:
        """Returns the current timestamp in milliseconds."""
        return time.time() * 1000

    @property
    def expires_in(self) -> Optional[float]:
        """Milliseconds left before expiration, None if unset or expired."""
        with self._lock:
            if self._expires_at is None:
                return None
            expires_in = self._expires_at - self._current_timestamp()
            return expires_in if expires_in > 0 else None

    @property
    def expires_at(self) -> Optional[float]:
        """The expiration timestamp, None if unset or expired."""
        return self._expires_at

    def get(self) -> Optional[T]:
        return self._value

    def set(self, value: T, ttl: Optional[float] = None) -> T:
        """Set the value.

        Args:
            value: The new value.
            ttl: The time-to-live, defaults to the one of the cache.

        Returns:
            The value just stored.

        Raises:
            NoTTLResolvableError: If the resolved TTL is not positive.
        """
        timer_ttl = self.ttl if ttl is None else ttl
        if timer_ttl <= 0:
            raise NoTTLResolvableError("Cannot set the value of a ValueCache with no TTL")

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()

            self._value = value
            self._generation += 1
            self._timer = threading.Timer(
                timer_ttl / 1000, self._expire, args=(self._generation,)
            )
            self._timer.daemon = True
            self._timer.start()
            self._expires_at = self._current_timestamp() + timer_ttl

        return value

    def _expire(self, generation: int) -> None:
        with self._lock:
            # a later set() replaced the value this timer was scheduled for
            if generation != self._generation:
                return
            logger.debug("ValueCache value expired")
            self.clear()

    def clear(self) -> None:
        """Clear the value."""
        with self._lock:
            self._value = None
            self._expires_at = None
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
