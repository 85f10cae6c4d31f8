"""
Duration Constants Module

Common time magnitudes as enums, so durations can be written as
``Time.DAY * 5`` instead of ``432000000``. Members are floats and take part in
arithmetic directly.

    - Time: magnitudes expressed in milliseconds
    - TimeSeconds: magnitudes expressed in seconds

MONTH and YEAR are calendar-agnostic approximations (30 and 365 days). The
AVERAGE_* members account for leap years (365.25 days per year).
"""

from enum import Enum


class Time(float, Enum):
    """Common time constants, expressed in milliseconds."""

    NANOSECOND = 0.000_001
    MICROSECOND = 0.001
    MILLISECOND = 1
    SECOND = 1_000
    MINUTE = 60_000
    HOUR = 3_600_000
    DAY = 86_400_000
    WEEK = 604_800_000
    # 30 days
    MONTH = 2_592_000_000
    # 365 days
    YEAR = 31_536_000_000
    # 365.25d / 12
    AVERAGE_MONTH = 2_629_800_000
    AVERAGE_YEAR = 31_557_600_000


class TimeSeconds(float, Enum):
    """Common time constants, expressed in seconds."""

    NANOSECOND = 0.000_000_001
    MICROSECOND = 0.000_001
    MILLISECOND = 0.001
    SECOND = 1
    MINUTE = 60
    HOUR = 3_600
    DAY = 86_400
    WEEK = 604_800
    # 30 days
    MONTH = 2_592_000
    # 365 days
    YEAR = 31_536_000
    # 365.25d / 12
    AVERAGE_MONTH = 2_629_800
    AVERAGE_YEAR = 31_557_600
