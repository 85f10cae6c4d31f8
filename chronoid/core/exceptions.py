class ChronoidError(Exception):
    """Base class for every error raised by chronoid."""

    pass


class InvalidArgumentTypeError(ChronoidError, TypeError):
    """Raised when an argument has a type the operation cannot handle."""

    pass


class InvalidTimestampTypeError(InvalidArgumentTypeError):
    """Raised when a snowflake timestamp is not an int, a float or a datetime."""

    pass


class MalformedIdentifierError(ChronoidError, ValueError):
    """Raised when a snowflake string is not a non-negative integer literal."""

    pass


class NoTTLResolvableError(ChronoidError, ValueError):
    """Raised when a cache write has no positive TTL to use."""

    pass


class UnknownLocaleError(ChronoidError, LookupError):
    """Raised when no locale is registered under the requested code."""

    pass


class InvalidDurationLengthError(ChronoidError, ValueError):
    """Raised when a duration string is empty or longer than 100 characters."""

    pass
