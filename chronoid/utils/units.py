from typing import Literal

from chronoid.utils.duration import Time

Unit = Literal[
    "millisecond", "second", "minute", "hour", "day", "week", "month", "year"
]

# The available time units, from the smallest to the largest.
units: tuple[Unit, ...] = (
    "millisecond",
    "second",
    "minute",
    "hour",
    "day",
    "week",
    "month",
    "year",
)

# The values in milliseconds of each time unit.
unit_values: dict[Unit, int] = {
    "millisecond": int(Time.MILLISECOND),
    "second": int(Time.SECOND),
    "minute": int(Time.MINUTE),
    "hour": int(Time.HOUR),
    "day": int(Time.DAY),
    "week": int(Time.WEEK),
    "month": int(Time.MONTH),
    "year": int(Time.YEAR),
}
