"""
Duration Parser and Formatter Module

Converts between human readable durations and milliseconds, in any locale
registered in a ``LocaleRegistry``.

    >>> ms("5 jours", locale="fr")
    432000000.0
    >>> ms(432000000, locale="fr")
    '5j'
    >>> ms(259202001, locale="fr", compound=True, max_units=2)
    '3j2s'

Parsing:
    The text is read as a sequence of ``<number> [unit]`` tokens, optionally
    separated by whitespace. Each token adds ``number * unit magnitude`` to the
    total; a number without unit is read as milliseconds. Unknown unit names,
    text outside of tokens, or a string without any token give ``nan``
    instead of raising, so loose input can be parsed in bulk.

Formatting:
    - Simple mode picks the largest unit not greater than the value and
      rounds half up: ``90000`` gives ``"2m"``.
    - Compound mode decomposes the value greedily across descending units:
      ``150100`` gives ``"2m30s100ms"``, capped at ``max_units`` parts.
"""

import math
import re
from typing import Optional, Union

from chronoid.core.exceptions import (
    InvalidArgumentTypeError,
    InvalidDurationLengthError,
)
from chronoid.utils.locales import CompiledLocale, LocaleRegistry, locales
from chronoid.utils.units import unit_values

MAX_PARSE_LENGTH = 100

_TOKEN_PATTERN = re.compile(
    r"(?P<value>-?[0-9]*\.?[0-9]+) *(?P<unit>[a-zàèìòùáéíóúýâêîôûãñõäëïöüÿçµ]+)?",
    re.IGNORECASE,
)

Number = Union[int, float]


def _resolve_locale(locale: str, registry: Optional[LocaleRegistry]) -> CompiledLocale:
    return (registry if registry is not None else locales).get(locale)


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _render_number(value: Number) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse(
    text: str, locale: str = "en", registry: Optional[LocaleRegistry] = None
) -> float:
    """Parse the given string and return milliseconds.

    Args:
        text: The duration to parse, between 1 and 100 characters long.
        locale: The code of the locale used to read unit names.
        registry: The locale registry, defaults to the shared one.

    Returns:
        The duration in milliseconds, or ``nan`` if the text can't be parsed.

    Raises:
        InvalidArgumentTypeError: If ``text`` is not a string.
        InvalidDurationLengthError: If ``text`` is empty or too long.
        UnknownLocaleError: If ``locale`` is not registered.
    """
    if not isinstance(text, str):
        raise InvalidArgumentTypeError(
            f"Value provided to parse() must be a string. value={text!r}"
        )
    if len(text) == 0 or len(text) > MAX_PARSE_LENGTH:
        raise InvalidDurationLengthError(
            "Value provided to parse() must be a string with length between 1 and "
            f"{MAX_PARSE_LENGTH}. value={text!r}"
        )

    compiled = _resolve_locale(locale, registry)

    total = 0.0
    consumed = False
    last_index = 0

    for match in _TOKEN_PATTERN.finditer(text):
        if text[last_index : match.start()].strip():
            return math.nan

        raw_unit = match.group("unit")
        unit = (
            "millisecond"
            if raw_unit is None
            else compiled.mapped_units.get(raw_unit.lower())
        )
        if unit is None:
            return math.nan

        total += float(match.group("value")) * unit_values[unit]
        consumed = True
        last_index = match.end()

    if not consumed or text[last_index:].strip():
        return math.nan

    return total


def format(
    ms: Number,
    locale: str = "en",
    long: bool = False,
    compound: bool = False,
    max_units: Optional[int] = None,
    registry: Optional[LocaleRegistry] = None,
) -> str:
    """Format the given amount of milliseconds as a string.

    Args:
        ms: The duration in milliseconds.
        locale: The code of the locale used for unit names.
        long: Use long unit names, e.g. ``"5 days"`` instead of ``"5d"``.
        compound: Use several units, e.g. ``"2m50s100ms"`` instead of ``"3m"``.
        max_units: The maximum amount of units used in compound mode.
        registry: The locale registry, defaults to the shared one.

    Raises:
        InvalidArgumentTypeError: If ``ms`` is not a finite number.
        UnknownLocaleError: If ``locale`` is not registered.
    """
    if not _is_number(ms) or not math.isfinite(ms):
        raise InvalidArgumentTypeError(
            f"Value provided to format() must be a finite number. value={ms!r}"
        )

    compiled = _resolve_locale(locale, registry)

    sign = "-" if ms < 0 else ""
    remaining = abs(ms)

    ordered_units = sorted(
        compiled.units.items(), key=lambda item: unit_values[item[0]], reverse=True
    )
    ms_definition = compiled.units["millisecond"]

    if not compound:
        for unit, definition in ordered_units:
            value = unit_values[unit]
            if remaining >= value:
                amount = _round_half_up(ms / value)
                if long:
                    return f"{amount} {definition.long(abs(amount))}"
                return f"{amount}{definition.short}"

        if long:
            return f"{_render_number(ms)} {ms_definition.long(abs(ms))}"
        return f"{_render_number(ms)}{ms_definition.short}"

    parts: list[str] = []
    for unit, definition in ordered_units:
        value = unit_values[unit]
        if remaining < value:
            continue

        amount = math.floor(remaining / value)
        remaining -= amount * value

        if amount > 0:
            parts.append(
                f"{amount} {definition.long(amount)}"
                if long
                else f"{amount}{definition.short}"
            )
            if max_units and len(parts) >= max_units:
                break

    # everything was below 1ms
    if not parts:
        parts.append(
            f"0 {ms_definition.long(0)}" if long else f"0{ms_definition.short}"
        )

    return sign + (" " if long else "").join(parts)


def ms(value: Union[str, Number], **options) -> Union[float, str]:
    """Parse or format the given value.

    Strings are parsed into milliseconds (``nan`` when they can't be parsed)
    and numbers are formatted. ``options`` takes the keyword arguments of
    ``format``; only ``locale`` and ``registry`` apply when parsing.

    Raises:
        InvalidArgumentTypeError: If ``value`` is neither a string nor a number.
    """
    if isinstance(value, str):
        return parse(
            value,
            locale=options.get("locale", "en"),
            registry=options.get("registry"),
        )
    if _is_number(value):
        return format(value, **options)
    raise InvalidArgumentTypeError(
        f"Value provided to ms() must be a string or number. value={value!r}"
    )
