"""
ev.py - Expected return per dollar

    totalValue   = sum(amount * remaining)
    totalTickets = sum(remaining) + max(0, sum(remaining) * (N - 1))
    ev           = totalValue / totalTickets / price

where N comes from the published "1 in N" overall odds. The losing-ticket term
estimates the unsold population from the winners still out there, so games
with sparse or stale prize data produce noisy values. 1.0 means break-even.
"""

from models import DEFAULT_EXPECTED_VALUE, Game
from parsers import odds_denominator


def calculate_expected_value(game: Game) -> float:
    if not game.prize_tiers or game.price <= 0:
        return DEFAULT_EXPECTED_VALUE

    total_value = sum(tier.amount * tier.remaining for tier in game.prize_tiers)
    total_tickets = float(sum(tier.remaining for tier in game.prize_tiers))

    odds = odds_denominator(game.overall_odds)
    if odds is not None:
        total_tickets += max(0.0, total_tickets * (odds - 1))

    if total_tickets <= 0:
        return DEFAULT_EXPECTED_VALUE
    return (total_value / total_tickets) / game.price


def with_expected_value(game: Game) -> Game:
    return game.model_copy(update={"expected_value": calculate_expected_value(game)})
