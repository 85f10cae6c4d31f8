import math

import pytest
from pydantic import ValidationError

from chronoid.core.exceptions import UnknownLocaleError
from chronoid.utils.locales import (
    DEFAULT_LOCALES,
    LocaleDefinition,
    LocaleRegistry,
    UnitDefinition,
    locales,
)
from chronoid.utils.ms import format, ms, parse
from chronoid.utils.units import units


def _italian() -> LocaleDefinition:
    names = {
        "millisecond": ("ms", "millisecondo", "millisecondi"),
        "second": ("s", "secondo", "secondi"),
        "minute": ("m", "minuto", "minuti"),
        "hour": ("h", "ora", "ore"),
        "day": ("g", "giorno", "giorni"),
        "week": ("sett", "settimana", "settimane"),
        "month": ("mese", "mese", "mesi"),
        "year": ("a", "anno", "anni"),
    }
    return LocaleDefinition(
        units={
            unit: UnitDefinition(
                short=short,
                long=lambda c, one=one, many=many: many if c > 1 else one,
                names=[many, one, short],
            )
            for unit, (short, one, many) in names.items()
        }
    )


def test_default_locales_are_registered():
    for code in ("en", "fr", "de", "es"):
        assert code in locales


def test_every_default_locale_defines_every_unit():
    for definition in DEFAULT_LOCALES.values():
        assert set(definition.units) == set(units)


def test_french_parsing():
    assert ms("1 année", locale="fr") == 31536000000
    assert ms("5 jours", locale="fr") == 432000000
    assert ms("3j2secondes", locale="fr") == 259202000


def test_french_formatting():
    assert ms(31536000000, locale="fr") == "1an"
    assert ms(31536000000, locale="fr", long=True) == "1 année"

    assert ms(63072000000, locale="fr") == "2an"
    assert ms(63072000000, locale="fr", long=True) == "2 années"

    assert ms(432000000, locale="fr") == "5j"
    assert ms(432000000, locale="fr", long=True) == "5 jours"

    assert ms(259202001, locale="fr", compound=True) == "3j2s1ms"
    assert ms(259202001, locale="fr", compound=True, long=True) == (
        "3 jours 2 secondes 1 milliseconde"
    )

    assert ms(259202001, locale="fr", compound=True, max_units=2) == "3j2s"
    assert ms(259202001, locale="fr", compound=True, long=True, max_units=2) == (
        "3 jours 2 secondes"
    )


def test_french_parse_then_format():
    assert format(parse("5 jours", locale="fr"), locale="fr") == "5j"


def test_french_month_is_invariable():
    assert format(2 * 2_592_000_000, locale="fr", long=True) == "2 mois"


def test_german():
    assert parse("2 Stunden", locale="de") == 7_200_000
    assert parse("1 Tag", locale="de") == 86_400_000
    assert format(172_800_000, locale="de", long=True) == "2 Tage"
    assert format(31_536_000_000, locale="de") == "1j"


def test_spanish_accents():
    assert parse("2 días", locale="es") == 172_800_000
    assert parse("2 DÍAS", locale="es") == 172_800_000
    assert parse("1 año", locale="es") == 31_536_000_000
    assert format(60_000, locale="es") == "1min"
    assert format(172_800_000, locale="es", long=True) == "2 días"


def test_unit_names_are_locale_specific():
    assert parse("5 jours", locale="fr") == 432_000_000
    assert math.isnan(parse("5 jours", locale="en"))


def test_custom_registry_leaves_default_untouched():
    registry = LocaleRegistry()
    registry.set_locale("it", _italian())

    assert parse("2 giorni", locale="it", registry=registry) == 172_800_000
    assert format(172_800_000, locale="it", long=True, registry=registry) == (
        "2 giorni"
    )
    assert ms("1 ora", locale="it", registry=registry) == 3_600_000
    assert "it" not in locales
    with pytest.raises(UnknownLocaleError):
        parse("2 giorni", locale="it")


def test_empty_registry():
    registry = LocaleRegistry(include_defaults=False)

    assert len(registry) == 0
    with pytest.raises(UnknownLocaleError):
        format(1_000, registry=registry)


def test_set_locale_replaces_definition():
    registry = LocaleRegistry()
    registry.set_locale("en", _italian())

    assert format(1_000, locale="en", registry=registry) == "1s"
    assert format(60_000, locale="en", long=True, registry=registry) == "1 minuto"


def test_unknown_locale_is_a_lookup_error():
    with pytest.raises(LookupError):
        locales.get("xx")


def test_incomplete_locale_is_rejected():
    with pytest.raises(ValidationError):
        LocaleDefinition(
            units={"second": UnitDefinition(short="s", long=str, names=["s"])}
        )


def test_set_locale_registers_in_default_registry(monkeypatch):
    from chronoid.utils import locales as locales_module

    registry = LocaleRegistry()
    monkeypatch.setattr(locales_module, "locales", registry)
    locales_module.set_locale("it", _italian())

    assert "it" in registry
    assert registry.get("it").mapped_units["giorni"] == "day"
