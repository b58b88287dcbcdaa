"""Tests for place labels and weather code tables."""

import pytest

from weatherly.domain.formatting import format_place, normalize_label, primary_label
from weatherly.domain.models import PlaceRecord
from weatherly.domain.weather_codes import (
    UNKNOWN_LABEL,
    UNKNOWN_SYMBOL,
    WEATHER_CODE_LABELS,
    code_to_label,
    code_to_symbol,
)


def _place(**kwargs) -> PlaceRecord:
    kwargs.setdefault("name", "")
    return PlaceRecord(latitude=0.0, longitude=0.0, **kwargs)


def test_format_name_admin1_country():
    place = _place(name="London", admin1="England", country="GB")
    assert format_place(place) == "London, England, GB"


def test_format_skips_admin1_equal_to_primary():
    place = _place(name="Berlin", admin1="Berlin", country="Germany")
    assert format_place(place) == "Berlin, Germany"


def test_format_without_optional_parts():
    assert format_place(_place(name="Atlantis")) == "Atlantis"


@pytest.mark.parametrize(
    "fields, expected",
    [
        ({"locality": "Soho", "admin2": "Westminster"}, "Soho"),
        ({"admin2": "Westminster", "admin1": "England"}, "Westminster"),
        ({"admin1": "England", "admin3": "Ward"}, "England"),
        ({"admin3": "Ward", "admin4": "Block"}, "Ward"),
        ({"admin4": "Block"}, "Block"),
    ],
)
def test_primary_label_priority(fields, expected):
    assert primary_label(_place(**fields)) == expected


def test_admin1_as_primary_is_not_repeated():
    place = _place(admin1="England", country="GB")
    assert format_place(place) == "England, GB"


def test_blank_fields_are_ignored():
    place = _place(name="  ", locality="Soho", admin1=" ", country="GB")
    assert format_place(place) == "Soho, GB"


def test_format_never_empty_when_name_present():
    for name in ("A", "London", "São Paulo", "x y"):
        assert format_place(_place(name=name)) != ""


def test_format_is_stable():
    place = _place(name="Paris", admin1="Ile-de-France", country="FR")
    assert format_place(place) == format_place(place)


def test_normalize_label():
    assert normalize_label("  London, England ") == "london, england"
    assert normalize_label(None) == ""


def test_code_tables_cover_documented_codes():
    for code in (0, 1, 2, 3, 45, 48, 51, 53, 55, 61, 63, 65, 71, 73, 75, 80, 81, 82, 95):
        assert code_to_label(code) == WEATHER_CODE_LABELS[code]
        assert code_to_symbol(code) != UNKNOWN_SYMBOL


def test_unknown_codes_fall_back():
    assert code_to_label(4) == UNKNOWN_LABEL
    assert code_to_label(None) == UNKNOWN_LABEL
    assert code_to_symbol(999) == UNKNOWN_SYMBOL
    assert code_to_label(0) == "Clear sky"
