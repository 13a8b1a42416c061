"""Tests for Telegram identifier validation."""

import math

import pytest

from deployops.utils.identifiers import has_valid_ids, is_valid_id, parse_id, to_number


@pytest.mark.parametrize(
    "chat_id,topic_id,expected",
    [
        ("123", "0", False),
        ("", "5", False),
        ("abc", "5", False),
        ("-7", "5", True),
        (None, "5", False),
        ("100", None, False),
        ("-1001234567890", "42", True),
    ],
)
def test_has_valid_ids(chat_id, topic_id, expected):
    assert has_valid_ids(chat_id, topic_id) is expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("  12 ", 12.0),
        ("", 0.0),
        ("1e3", 1000.0),
        ("1.", 1.0),
        (".5", 0.5),
        ("0x1F", 31.0),
        ("0b101", 5.0),
        ("-Infinity", -math.inf),
    ],
)
def test_to_number(value, expected):
    assert to_number(value) == expected


@pytest.mark.parametrize(
    "value", [None, "abc", "1_000", "inf", "nan", "-0x10", "12px", "١٢٣", "0x١"]
)
def test_to_number_not_numeric(value):
    assert math.isnan(to_number(value))


def test_non_finite_is_invalid():
    assert is_valid_id("Infinity") is False


def test_parse_id():
    assert parse_id(" -100 ") == -100
    with pytest.raises(ValueError):
        parse_id("0")


def test_non_ascii_digits_are_invalid():
    assert has_valid_ids("١٢٣", "5") is False


def test_parse_id_accepts_whole_number_notations():
    assert parse_id("1e3") == 1000
    assert parse_id("0x10") == 16
    assert parse_id("-1001234567890") == -1001234567890


def test_parse_id_rejects_fractions():
    with pytest.raises(ValueError, match="whole number"):
        parse_id("12.7")
