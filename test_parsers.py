"""
test_parsers.py - Field parser behaviour, including the two currency paths.
"""

import pytest

from parsers import (
    normalize_game_number,
    odds_denominator,
    parse_count,
    parse_currency,
    parse_jackpot,
    parse_odds_ratio,
    parse_prize_amount,
)


def test_odds_ratio_normalizes_matching_text():
    assert parse_odds_ratio("1 in 4.25") == "1 in 4.25"
    assert parse_odds_ratio("Overall Odds: 1 IN 3.92") == "1 in 3.92"


def test_odds_ratio_strips_thousands_separators():
    assert parse_odds_ratio("1 in 1,469,394") == "1 in 1469394"


def test_odds_ratio_passes_through_unparseable_text():
    assert parse_odds_ratio("garbage") == "garbage"


def test_odds_ratio_empty_is_none():
    assert parse_odds_ratio("") is None
    assert parse_odds_ratio(None) is None


def test_odds_denominator():
    assert odds_denominator("1 in 4.0") == 4.0
    assert odds_denominator("1 in 1,234.5") == 1234.5
    assert odds_denominator("See back of ticket") is None


@pytest.mark.parametrize("text, expected", [
    ("$5", 5.0),
    ("$2.50", 2.5),
    ("Price: 10", 10.0),
    ("", 0.0),
    ("Free", 0.0),
])
def test_currency_digit_only_pattern(text, expected):
    assert parse_currency(text) == expected


def test_currency_rejects_thousands_separator():
    """Ticket prices use the digit-only pattern: '$1,000' is not a price."""
    assert parse_currency("$1,000") == 0.0


def test_prize_amount_strips_thousands_separator():
    """Prize amounts strip separators first, so the same text reads as 1000."""
    assert parse_prize_amount("$1,000") == 1000.0
    assert parse_prize_amount("$1,000,000") == 1000000.0
    assert parse_prize_amount("Free Ticket") == 0.0
    assert parse_prize_amount(None) == 0.0


@pytest.mark.parametrize("text, expected", [
    ("12", 12),
    ("2,448", 2448),
    (" 7 ", 7),
    ("N/A", 0),
    ("", 0),
    ("12abc", 0),
])
def test_count(text, expected):
    assert parse_count(text) == expected


def test_jackpot_scale_words():
    assert parse_jackpot("$145 Million") == 145_000_000
    assert parse_jackpot("$1.2 Billion") == pytest.approx(1_200_000_000)
    assert parse_jackpot("$52,000,000") == 52_000_000
    assert parse_jackpot("Coming soon") == 0.0


@pytest.mark.parametrize("text, expected", [
    ("Game No. 996", "996"),
    ("#1234", "1234"),
    (" 5678 ", "5678"),
    ("TBD", "TBD"),
    ("", ""),
])
def test_game_number_normalized_to_digits(text, expected):
    assert normalize_game_number(text) == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
