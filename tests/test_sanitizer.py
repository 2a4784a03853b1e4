import pytest

from plan_logics.sanitizer import amount_to_text, format_amount, sanitize, to_number


SAMPLES = [
    "", "abc", "0", "100", "1,234.5678", "1.2.3", "12.", ".5", "..", "1..2",
    "-12.5", "1e5", " 7 . 25 ", "0001.00009", "3.14159.26", "١٢٣", "12a.b34c",
]


@pytest.mark.parametrize("raw, expected", [
    ("1,234.5678", "1234.567"),
    ("1.2.3", "1.23"),
    ("abc", ""),
    ("", ""),
    ("12.", "12."),
    ("-12.5", "12.5"),
])
def test_sanitize_examples(raw, expected):
    assert sanitize(raw) == expected


def test_sanitize_zero_decimals_keeps_integer_part():
    assert sanitize("12.34", 0) == "12"


@pytest.mark.parametrize("raw", SAMPLES)
@pytest.mark.parametrize("decimals", [0, 1, 3])
def test_sanitize_is_idempotent(raw, decimals):
    once = sanitize(raw, decimals)
    assert sanitize(once, decimals) == once


@pytest.mark.parametrize("raw", SAMPLES)
@pytest.mark.parametrize("decimals", [0, 2, 3])
def test_fraction_never_exceeds_max_decimals(raw, decimals):
    _, _, fraction = sanitize(raw, decimals).partition('.')
    assert len(fraction) <= decimals


def test_to_number_handles_empty_commas_and_junk():
    assert to_number("") == 0
    assert to_number(None) == 0
    assert to_number("1,234.5") == 1234.5
    assert to_number("abc") == 0
    assert to_number("inf") == 0
    assert to_number(42) == 42.0


def test_format_amount_groups_thousands():
    assert format_amount(1234567.8) == "1,234,568"
    assert format_amount("1234.5", 2) == "1,234.50"


def test_amount_to_text():
    assert amount_to_text(0) == ""
    assert amount_to_text("75.5") == "75.5"
    assert amount_to_text(100.0) == "100"
    assert amount_to_text(0.00001) == ""
