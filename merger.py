"""
merger.py - Joins the scratch-off catalog with the prizes-remaining ledger.

The catalog knows names, prices and odds; the ledger knows what is still
unclaimed. They share only the game number.
"""

from typing import Dict, List

from models import Game, PrizeLedgerEntry


def apply_ledger_entry(game: Game, entry: PrizeLedgerEntry) -> Game:
    """
    Return a copy of game carrying the ledger's tiers, largest prize first.
    Applying the same entry twice gives the same game as applying it once.
    """
    tiers = sorted(entry.prize_tiers, key=lambda tier: tier.amount, reverse=True)
    top = tiers[0] if tiers else None
    return game.model_copy(update={
        "prize_tiers": [tier.model_copy() for tier in tiers],
        "top_prize": top.amount if top else 0.0,
        "top_prize_remaining": top.remaining if top else 0,
    })


def merge_prize_ledger(games: List[Game], ledger: Dict[str, PrizeLedgerEntry]) -> List[Game]:
    """Enrich every catalog game whose game number appears in the ledger; leave the rest as scraped."""
    merged = []
    for game in games:
        entry = ledger.get(game.game_number) if game.game_number else None
        merged.append(apply_ledger_entry(game, entry) if entry else game)
    return merged
