"""
Snowflake ID Codec Module

A Python implementation of the Snowflake scheme for generating and decoding
unique, time-ordered 64-bit identifiers. Every value is a plain Python int, so
the codec never loses precision the way a 64-bit float would.

Layout Overview:
    A snowflake is split into four fixed-width fields, from the most
    significant bit to the least significant bit:

    64                                          22     17     12          0
     000000111011000111100001101001000101000000  00001  00000  000000000000
              number of ms since epoch           worker  pid    increment

    - Timestamp: 42 bits of milliseconds elapsed since the configured epoch
    - Worker ID: 5 bits (0-31)
    - Process ID: 5 bits (0-31)
    - Increment: 12 bits (0-4095), rolling per-instance counter

Field Policy:
    - Worker ID, process ID and increment are truncated to their field width
      with a bitwise AND, never rejected
    - The timestamp is type-checked: int, integral float or datetime only
    - Timestamps before the epoch are not rejected; the elapsed value is then
      negative and so is the resulting identifier

Ordering:
    ``Snowflake.compare`` orders identifiers by raw bit pattern, not by
    absolute time. Two identifiers built against different epochs are
    compared as numbers, whatever their epochs were.

String Comparison Shortcut:
    When both identifiers are decimal strings they are compared by length
    first and lexicographically second, without parsing. This holds for every
    identifier produced by ``generate`` (no leading zeros). Zero-padded input
    such as ``"007"`` is compared incorrectly.

Thread Safety:
    - Counter updates are serialized with threading.Lock()
    - Identifiers from different instances sharing the same worker and
      process IDs may collide; assigning those IDs is up to the caller

Restart Behavior:
    The increment counter lives in memory and starts again from 0 on every
    new instance.
"""

import re
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

from chronoid.core.exceptions import (
    InvalidArgumentTypeError,
    InvalidTimestampTypeError,
    MalformedIdentifierError,
)
from chronoid.services.logger import setup_logger

logger = setup_logger()

# The maximum value the worker_id field accepts in snowflakes.
MAXIMUM_WORKER_ID = 0b11111

# The maximum value the process_id field accepts in snowflakes.
MAXIMUM_PROCESS_ID = 0b11111

# The maximum value the increment field accepts in snowflakes.
MAXIMUM_INCREMENT = 0b111111111111

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ID_PATTERN = re.compile(r"[0-9]+")

Timestamp = Union[int, float, datetime]
SnowflakeID = Union[str, int]


class DeconstructedSnowflake(BaseModel):
    """The fields stored in a snowflake.

    Attributes:
        id: The snowflake as an int.
        timestamp: The UNIX timestamp, in milliseconds, stored in the snowflake.
        worker_id: The worker ID stored in the snowflake.
        process_id: The process ID stored in the snowflake.
        increment: The increment stored in the snowflake.
        epoch: The epoch used to decode the timestamp.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    timestamp: int
    worker_id: int
    process_id: int
    increment: int
    epoch: int


def _datetime_to_ms(value: datetime) -> int:
    """Converts a datetime to UNIX milliseconds, treating naive values as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _UNIX_EPOCH) // timedelta(milliseconds=1)


def _normalize_timestamp(timestamp: Timestamp) -> int:
    """Returns the timestamp in UNIX milliseconds as an int.

    Raises:
        InvalidTimestampTypeError: If the value is not an int, an integral
            float or a datetime.
    """
    if isinstance(timestamp, datetime):
        return _datetime_to_ms(timestamp)
    if isinstance(timestamp, bool):
        raise InvalidTimestampTypeError(
            '"timestamp" argument must be an int, float, or datetime '
            "(received bool)"
        )
    if isinstance(timestamp, int):
        return timestamp
    if isinstance(timestamp, float):
        if not timestamp.is_integer():
            raise InvalidTimestampTypeError(
                f'"timestamp" argument must be a whole number of milliseconds '
                f"(received {timestamp!r})"
            )
        return int(timestamp)
    raise InvalidTimestampTypeError(
        '"timestamp" argument must be an int, float, or datetime '
        f"(received {type(timestamp).__name__})"
    )


def _to_int(snowflake_id: SnowflakeID) -> int:
    """Returns the snowflake as an int, parsing decimal strings.

    Raises:
        MalformedIdentifierError: If the string is not a non-negative integer.
        InvalidArgumentTypeError: If the value is neither a str nor an int.
    """
    if isinstance(snowflake_id, str):
        stripped = snowflake_id.strip()
        if not _ID_PATTERN.fullmatch(stripped):
            raise MalformedIdentifierError(
                f"Snowflake must be a non-negative integer literal, got {snowflake_id!r}"
            )
        return int(stripped)
    if isinstance(snowflake_id, int) and not isinstance(snowflake_id, bool):
        return snowflake_id
    raise InvalidArgumentTypeError(
        f"Snowflake must be a str or an int (received {type(snowflake_id).__name__})"
    )


class Snowflake:
    """A codec for generating and deconstructing snowflakes.

    One instance is bound to a single epoch for its whole lifetime. The worker
    ID, process ID and increment used by default in ``generate`` can be
    changed at any time; assigned values are truncated to their field width.

    Attributes:
        epoch: The epoch timestamp in milliseconds (read-only).
        worker_id: Default worker ID (0-31), 0 unless changed.
        process_id: Default process ID (0-31), 1 unless changed.
        increment: The next auto increment (0-4095).

    Example:
        >>> snowflake = Snowflake(datetime(2000, 1, 1, tzinfo=timezone.utc))
        >>> snowflake_id = snowflake.generate()
        >>> snowflake.deconstruct(snowflake_id).worker_id
        0
    """

    TIMESTAMP_SHIFT = 22
    WORKER_ID_SHIFT = 17
    PROCESS_ID_SHIFT = 12

    def __init__(self, epoch: Union[int, datetime]):
        """Initializes a new snowflake codec.

        Args:
            epoch: The epoch as UNIX milliseconds or as a datetime.
        """
        if isinstance(epoch, datetime):
            epoch = _datetime_to_ms(epoch)

        self._epoch = int(epoch)
        self._increment = 0
        self._worker_id = 0
        self._process_id = 1
        self._lock = threading.Lock()

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def worker_id(self) -> int:
        return self._worker_id

    @worker_id.setter
    def worker_id(self, value: int) -> None:
        self._worker_id = int(value) & MAXIMUM_WORKER_ID
        if self._worker_id != value:
            logger.debug("Worker ID %s truncated to %s", value, self._worker_id)

    @property
    def process_id(self) -> int:
        return self._process_id

    @process_id.setter
    def process_id(self, value: int) -> None:
        self._process_id = int(value) & MAXIMUM_PROCESS_ID
        if self._process_id != value:
            logger.debug("Process ID %s truncated to %s", value, self._process_id)

    @property
    def increment(self) -> int:
        return self._increment

    @increment.setter
    def increment(self, value: int) -> None:
        with self._lock:
            self._increment = int(value) & MAXIMUM_INCREMENT

    def _current_timestamp(self) -> int:
        """Returns the current timestamp in milliseconds."""
        return time.time_ns() // 1_000_000

    def _next_increment(self) -> int:
        with self._lock:
            increment = self._increment
            self._increment = (increment + 1) & MAXIMUM_INCREMENT
        return increment

    def generate(
        self,
        timestamp: Optional[Timestamp] = None,
        increment: Optional[int] = None,
        worker_id: Optional[int] = None,
        process_id: Optional[int] = None,
    ) -> int:
        """Generates a snowflake.

        When ``increment`` is omitted the instance counter is used and then
        advanced by one, wrapping from 4095 back to 0.

        Args:
            timestamp: UNIX milliseconds or a datetime. Defaults to now.
            increment: Explicit increment, truncated to 12 bits.
            worker_id: Worker ID, truncated to 5 bits. Defaults to
                ``self.worker_id``.
            process_id: Process ID, truncated to 5 bits. Defaults to
                ``self.process_id``.

        Returns:
            The snowflake as an int.

        Raises:
            InvalidTimestampTypeError: If the timestamp has an unsupported type.
        """
        if timestamp is None:
            timestamp = self._current_timestamp()
        else:
            timestamp = _normalize_timestamp(timestamp)

        if increment is None:
            increment = self._next_increment()
        if worker_id is None:
            worker_id = self._worker_id
        if process_id is None:
            process_id = self._process_id

        return (
            ((timestamp - self._epoch) << self.TIMESTAMP_SHIFT)
            | ((worker_id & MAXIMUM_WORKER_ID) << self.WORKER_ID_SHIFT)
            | ((process_id & MAXIMUM_PROCESS_ID) << self.PROCESS_ID_SHIFT)
            | (increment & MAXIMUM_INCREMENT)
        )

    def deconstruct(self, snowflake_id: SnowflakeID) -> DeconstructedSnowflake:
        """Deconstructs a snowflake into its fields.

        Args:
            snowflake_id: The snowflake as a decimal string or an int.

        Returns:
            The fields stored in the snowflake, along with the epoch used.

        Raises:
            MalformedIdentifierError: If a string is not a non-negative integer.
        """
        value = _to_int(snowflake_id)
        return DeconstructedSnowflake(
            id=value,
            timestamp=(value >> self.TIMESTAMP_SHIFT) + self._epoch,
            worker_id=(value >> self.WORKER_ID_SHIFT) & MAXIMUM_WORKER_ID,
            process_id=(value >> self.PROCESS_ID_SHIFT) & MAXIMUM_PROCESS_ID,
            increment=value & MAXIMUM_INCREMENT,
            epoch=self._epoch,
        )

    def timestamp_from(self, snowflake_id: SnowflakeID) -> int:
        """Returns the UNIX timestamp, in milliseconds, stored in a snowflake."""
        return (_to_int(snowflake_id) >> self.TIMESTAMP_SHIFT) + self._epoch

    @staticmethod
    def compare(a: SnowflakeID, b: SnowflakeID) -> int:
        """Compares two snowflakes by their bit pattern.

        Returns -1 if ``a`` is older than ``b``, 0 if they are equal and 1 if
        ``a`` is newer than ``b``. Usable as a sort key through
        ``functools.cmp_to_key``.

        Example:
            >>> ids = ["737141877803057244", "1056191128120082432", "254360814063058944"]
            >>> sorted(ids, key=cmp_to_key(Snowflake.compare))
            ['254360814063058944', '737141877803057244', '1056191128120082432']
        """
        if isinstance(a, str) and isinstance(b, str):
            return _compare_strings(a, b)
        return _compare_ints(_to_int(a), _to_int(b))


def _compare_ints(a: int, b: int) -> int:
    return 0 if a == b else -1 if a < b else 1


def _compare_strings(a: str, b: str) -> int:
    if a == b:
        return 0
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    return -1 if a < b else 1
