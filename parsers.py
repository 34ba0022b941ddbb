"""
parsers.py - Field parsers

Pure functions that turn scraped text fragments into typed values.
None of them raise: text we cannot read degrades to a conservative default.

Two currency paths exist on purpose:
- parse_currency (ticket prices) only understands plain digits, so "$1,000" is 0.
- parse_prize_amount (prize ladders, jackpots) strips "$" and "," first, so "$1,000" is 1000.
"""

import re
from typing import Optional

# Digits not glued to a thousands separator or another number on either side
_PRICE_RE = re.compile(r"\$?(?<![\d,.])(\d+(?:\.\d{2})?)(?![\d,])")
_AMOUNT_RE = re.compile(r"(\d+(?:\.\d{2})?)")
_ODDS_RE = re.compile(r"1\s*in\s*([\d,]+(?:\.\d+)?)", re.IGNORECASE)
_COUNT_RE = re.compile(r"^\d{1,3}(?:,\d{3})+$|^\d+$")


def parse_currency(text: Optional[str]) -> float:
    """'$5' -> 5.0, '$2.50' -> 2.5, '$1,000' -> 0.0, '' -> 0.0"""
    if not text:
        return 0.0
    match = _PRICE_RE.search(text)
    return float(match.group(1)) if match else 0.0


def parse_prize_amount(text: Optional[str]) -> float:
    """'$1,000,000' -> 1000000.0, 'Free Ticket' -> 0.0"""
    if not text:
        return 0.0
    cleaned = text.replace("$", "").replace(",", "")
    match = _AMOUNT_RE.search(cleaned)
    return float(match.group(1)) if match else 0.0


def parse_odds_ratio(text: Optional[str]) -> Optional[str]:
    """
    Normalize overall odds to '1 in N'.

    '1 in 4.25' -> '1 in 4.25', 'ODDS: 1 IN 1,234' -> '1 in 1234',
    'garbage' -> 'garbage', '' -> None
    """
    if not text:
        return None
    match = _ODDS_RE.search(text)
    if match and odds_denominator(text) is not None:
        return f"1 in {match.group(1).replace(',', '')}"
    return text


def odds_denominator(text: Optional[str]) -> Optional[float]:
    """Pull N out of '1 in N'. None when the string carries no ratio."""
    if not text:
        return None
    match = _ODDS_RE.search(text)
    if not match:
        return None
    digits = match.group(1).replace(",", "")
    try:
        return float(digits)
    except ValueError:
        # a lone separator such as "1 in ,"
        return None


def parse_count(text: Optional[str]) -> int:
    """'12' -> 12, '2,448' -> 2448, 'N/A' -> 0"""
    if not text:
        return 0
    cleaned = text.strip()
    if not _COUNT_RE.match(cleaned):
        return 0
    return int(cleaned.replace(",", ""))


_SCALES = {"thousand": 1_000, "million": 1_000_000, "billion": 1_000_000_000}
_SCALE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(thousand|million|billion)\b", re.IGNORECASE)


def parse_jackpot(text: Optional[str]) -> float:
    """
    Jackpots are advertised in words: '$145 Million' -> 145000000.0.
    Anything without a scale word reads like a prize amount.
    """
    if not text:
        return 0.0
    match = _SCALE_RE.search(text.replace("$", "").replace(",", ""))
    if match:
        return float(match.group(1)) * _SCALES[match.group(2).lower()]
    return parse_prize_amount(text)


def normalize_game_number(text: Optional[str]) -> str:
    """
    Join key shared by the catalog and the prizes-remaining ledger.

    'Game No. 996' -> '996', '#1234' -> '1234'. Text without digits is kept stripped.
    """
    if not text:
        return ""
    digits = "".join(filter(str.isdigit, text))
    return digits or text.strip()
