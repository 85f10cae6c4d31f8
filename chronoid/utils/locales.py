"""
Duration Locale Registry Module

Translations used by the duration parser and formatter. A locale defines, for
each of the eight time units, a short suffix (``"j"``), a long name that
depends on the amount (``"jour"`` / ``"jours"``) and the names accepted when
parsing.

Registries:
    - LocaleRegistry: maps a locale code to its compiled definition
    - locales: the default registry, pre-populated with en, fr, de and es
    - set_locale: adds or replaces a locale in the default registry

Functions in ``chronoid.utils.ms`` accept a ``registry`` argument, so tests
and applications can work with their own registry instead of mutating the
default one.
"""

from typing import Callable, Iterator

from pydantic import BaseModel, field_validator

from chronoid.core.exceptions import UnknownLocaleError
from chronoid.services.logger import setup_logger
from chronoid.utils.units import Unit, units

logger = setup_logger()


class UnitDefinition(BaseModel):
    """The translations of a time unit.

    Args:
        short (str): The short name of the unit, used as a suffix.
        long (Callable[[int], str]): Returns the long name of the unit for the
            absolute value of the rounded amount,
            e.g. ``lambda c: "jours" if c > 1 else "jour"``.
        names (list[str]): The names recognized when parsing. ``short`` and
            the ``long`` forms are not added automatically.
    """

    short: str
    long: Callable[[int], str]
    names: list[str]


class LocaleDefinition(BaseModel):
    """The translations of every time unit in a locale."""

    units: dict[Unit, UnitDefinition]

    @field_validator("units")
    @classmethod
    def validate_units(cls, value):
        """Ensure every time unit is translated."""

        missing = [unit for unit in units if unit not in value]
        if missing:
            raise ValueError(f"Missing unit definitions: {missing}")
        return value


class CompiledLocale:
    """A locale definition along with its name lookup table.

    Attributes:
        units: The unit definitions of the locale.
        mapped_units: Maps each lowercase unit name to its unit.
    """

    def __init__(self, definition: LocaleDefinition):
        self.units = definition.units
        self.mapped_units: dict[str, Unit] = {}
        for unit, unit_definition in definition.units.items():
            for name in unit_definition.names:
                self.mapped_units[name.lower()] = unit


class LocaleRegistry:
    """A mutable mapping from locale codes to locale definitions."""

    def __init__(self, include_defaults: bool = True):
        self._locales: dict[str, CompiledLocale] = {}
        if include_defaults:
            for code, definition in DEFAULT_LOCALES.items():
                self.set_locale(code, definition)

    def set_locale(self, code: str, definition: LocaleDefinition) -> None:
        """Add or edit a locale definition.

        Args:
            code: The locale code, e.g. ``"it"``.
            definition: The translations of the locale.
        """
        self._locales[code] = CompiledLocale(definition)
        logger.debug("Registered duration locale '%s'", code)

    def get(self, code: str) -> CompiledLocale:
        """Return the locale registered under ``code``.

        Raises:
            UnknownLocaleError: If no locale is registered under ``code``.
        """
        try:
            return self._locales[code]
        except KeyError:
            raise UnknownLocaleError(f'Unknown locale "{code}"') from None

    def __contains__(self, code: object) -> bool:
        return code in self._locales

    def __iter__(self) -> Iterator[str]:
        return iter(self._locales)

    def __len__(self) -> int:
        return len(self._locales)


def _plural(singular: str, plural: str) -> Callable[[int], str]:
    return lambda c: plural if c > 1 else singular


DEFAULT_LOCALES: dict[str, LocaleDefinition] = {
    "en": LocaleDefinition(
        units={
            "millisecond": UnitDefinition(
                short="ms",
                long=_plural("millisecond", "milliseconds"),
                names=["milliseconds", "millisecond", "msecs", "msec", "ms"],
            ),
            "second": UnitDefinition(
                short="s",
                long=_plural("second", "seconds"),
                names=["seconds", "second", "secs", "sec", "s"],
            ),
            "minute": UnitDefinition(
                short="m",
                long=_plural("minute", "minutes"),
                names=["minutes", "minute", "mins", "min", "m"],
            ),
            "hour": UnitDefinition(
                short="h",
                long=_plural("hour", "hours"),
                names=["hours", "hour", "hrs", "hr", "h"],
            ),
            "day": UnitDefinition(
                short="d",
                long=_plural("day", "days"),
                names=["days", "day", "d"],
            ),
            "week": UnitDefinition(
                short="w",
                long=_plural("week", "weeks"),
                names=["weeks", "week", "w"],
            ),
            "month": UnitDefinition(
                short="mo",
                long=_plural("month", "months"),
                names=["months", "month", "mo"],
            ),
            "year": UnitDefinition(
                short="y",
                long=_plural("year", "years"),
                names=["years", "year", "yrs", "yr", "y"],
            ),
        }
    ),
    "fr": LocaleDefinition(
        units={
            "millisecond": UnitDefinition(
                short="ms",
                long=_plural("milliseconde", "millisecondes"),
                names=["millisecondes", "milliseconde", "ms"],
            ),
            "second": UnitDefinition(
                short="s",
                long=_plural("seconde", "secondes"),
                names=["secondes", "seconde", "secs", "sec", "s"],
            ),
            "minute": UnitDefinition(
                short="m",
                long=_plural("minute", "minutes"),
                names=["minutes", "minute", "mins", "min", "m"],
            ),
            "hour": UnitDefinition(
                short="h",
                long=_plural("heure", "heures"),
                names=["heures", "heure", "h"],
            ),
            "day": UnitDefinition(
                short="j",
                long=_plural("jour", "jours"),
                names=["jours", "jour", "j"],
            ),
            "week": UnitDefinition(
                short="sem",
                long=_plural("semaine", "semaines"),
                names=["semaines", "semaine", "sem"],
            ),
            "month": UnitDefinition(
                short="mo",
                long=_plural("mois", "mois"),
                names=["mois", "mo"],
            ),
            "year": UnitDefinition(
                short="an",
                long=_plural("année", "années"),
                names=["années", "annees", "année", "annee", "ans", "an"],
            ),
        }
    ),
    "de": LocaleDefinition(
        units={
            "millisecond": UnitDefinition(
                short="ms",
                long=_plural("Millisekunde", "Millisekunden"),
                names=["millisekunden", "millisekunde", "ms"],
            ),
            "second": UnitDefinition(
                short="s",
                long=_plural("Sekunde", "Sekunden"),
                names=["sekunden", "sekunde", "seks", "sek", "s"],
            ),
            "minute": UnitDefinition(
                short="m",
                long=_plural("Minute", "Minuten"),
                names=["minuten", "minute", "mins", "min", "m"],
            ),
            "hour": UnitDefinition(
                short="h",
                long=_plural("Stunde", "Stunden"),
                names=["stunden", "stunde", "hrs", "hr", "h"],
            ),
            "day": UnitDefinition(
                short="t",
                long=_plural("Tag", "Tage"),
                names=["tage", "tag", "t", "d"],
            ),
            "week": UnitDefinition(
                short="w",
                long=_plural("Woche", "Wochen"),
                names=["wochen", "woche", "wo", "w"],
            ),
            "month": UnitDefinition(
                short="mo",
                long=_plural("Monat", "Monate"),
                names=["monate", "monat", "mon", "mo"],
            ),
            "year": UnitDefinition(
                short="j",
                long=_plural("Jahr", "Jahre"),
                names=["jahre", "jahr", "j", "y"],
            ),
        }
    ),
    "es": LocaleDefinition(
        units={
            "millisecond": UnitDefinition(
                short="ms",
                long=_plural("milisegundo", "milisegundos"),
                names=["milisegundos", "milisegundo", "ms"],
            ),
            "second": UnitDefinition(
                short="s",
                long=_plural("segundo", "segundos"),
                names=["segundos", "segundo", "s"],
            ),
            "minute": UnitDefinition(
                short="min",
                long=_plural("minuto", "minutos"),
                names=["minutos", "minuto", "mins", "min", "m"],
            ),
            "hour": UnitDefinition(
                short="h",
                long=_plural("hora", "horas"),
                names=["horas", "hora", "hrs", "hr", "h"],
            ),
            "day": UnitDefinition(
                short="d",
                long=_plural("día", "días"),
                names=["días", "dias", "día", "dia", "d"],
            ),
            "week": UnitDefinition(
                short="sem",
                long=_plural("semana", "semanas"),
                names=["semanas", "semana", "sem"],
            ),
            "month": UnitDefinition(
                short="mes",
                long=_plural("mes", "meses"),
                names=["meses", "mes", "mo"],
            ),
            "year": UnitDefinition(
                short="a",
                long=_plural("año", "años"),
                names=["años", "anos", "año", "ano", "a"],
            ),
        }
    ),
}

# The default registry. Add or edit a locale here, or use set_locale.
locales = LocaleRegistry()


def set_locale(code: str, definition: LocaleDefinition) -> None:
    """Add or edit a locale definition in the default registry."""
    locales.set_locale(code, definition)
