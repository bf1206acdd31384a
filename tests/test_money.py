"""Money parsing and storage conversion tests."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, ValidationError

from analyst_ratings.core.money import (
    Money,
    MoneyConversionError,
    MoneyParseError,
    format_money,
    money_from_storage,
    money_to_storage,
    parse_money,
)


class _Quote(BaseModel):
    price: Money


@pytest.mark.parametrize("value", [0, 42, 42.5, -3.25, 1e-6, 12345678.9])
def test_number_survives_format_and_parse(value):
    assert parse_money(format_money(value)) == value


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("$42.00", 42.0),
        ("1,234.50", 1234.5),
        ("$1,234,567.89", 1234567.89),
        ("  $7 ", 7.0),
        ("15", 15.0),
        (".5", 0.5),
    ],
)
def test_decorated_strings_are_stripped(raw, expected):
    assert parse_money(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", "$", "$,", None])
def test_empty_and_null_are_zero(raw):
    assert parse_money(raw) == 0.0


def test_non_numeric_string_keeps_raw_input():
    with pytest.raises(MoneyParseError) as excinfo:
        parse_money("abc")
    assert excinfo.value.raw == "abc"


@pytest.mark.parametrize("raw", [True, [1.0], {"amount": 1}])
def test_unsupported_types_are_rejected(raw):
    with pytest.raises(MoneyParseError):
        parse_money(raw)


def test_storage_accepts_float_string_and_bytes():
    values = [money_from_storage(77.77), money_from_storage("77.77"), money_from_storage(b"77.77")]
    assert values == [77.77, 77.77, 77.77]


def test_storage_rejects_malformed_values():
    with pytest.raises(MoneyConversionError):
        money_from_storage("abc")
    with pytest.raises(MoneyConversionError):
        money_from_storage(b"12,5x")
    with pytest.raises(MoneyConversionError):
        money_from_storage(object())


def test_storage_null_reads_as_zero():
    assert money_from_storage(None) == 0.0


def test_to_storage_is_native_float():
    value = money_to_storage(19.99)
    assert isinstance(value, float)
    assert value == 19.99


def test_pydantic_field_parses_and_emits_number():
    quote = _Quote.model_validate({"price": "$1,000.25"})
    assert quote.price == 1000.25
    assert quote.model_dump_json() == '{"price":1000.25}'


def test_pydantic_field_reports_bad_money():
    with pytest.raises(ValidationError):
        _Quote.model_validate({"price": "twelve dollars"})


@pytest.mark.parametrize("raw", [10**400, "1e400", "-inf", "$inf", float("inf"), float("nan"), "NaN"])
def test_out_of_range_amounts_are_rejected(raw):
    with pytest.raises(MoneyParseError):
        parse_money(raw)


def test_pydantic_field_reports_overflowing_integer():
    with pytest.raises(ValidationError):
        _Quote.model_validate({"price": 10**400})
