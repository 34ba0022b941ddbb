"""
test_merger.py - Joining catalog games with the prizes-remaining ledger.
"""

import pytest

from merger import apply_ledger_entry, merge_prize_ledger
from models import Game, GameKind, PrizeLedgerEntry, PrizeTier


def make_game(game_number="1234", **overrides):
    fields = dict(id="scratch_1", name="Lucky 7s", kind=GameKind.INSTANT, price=5, game_number=game_number)
    fields.update(overrides)
    return Game(**fields)


def make_entry(game_number="1234", tiers=((50, 1000), (500000, 1))):
    return PrizeLedgerEntry(
        game_number=game_number,
        game_name="Lucky 7s",
        prize_tiers=[PrizeTier(amount=a, remaining=r) for a, r in tiers],
    )


def test_merge_sorts_tiers_descending_and_sets_top_prize():
    merged = apply_ledger_entry(make_game(), make_entry())

    assert [t.amount for t in merged.prize_tiers] == [500000, 50]
    assert merged.top_prize == 500000
    assert merged.top_prize_remaining == 1


def test_merge_is_idempotent():
    entry = make_entry()
    once = apply_ledger_entry(make_game(), entry)
    twice = apply_ledger_entry(once, entry)

    assert (twice.top_prize, twice.top_prize_remaining) == (once.top_prize, once.top_prize_remaining)
    assert twice.prize_tiers == once.prize_tiers


def test_merge_does_not_touch_the_input_game():
    game = make_game()
    apply_ledger_entry(game, make_entry())
    assert game.prize_tiers == []
    assert game.top_prize == 0


def test_empty_ledger_entry_zeroes_top_prize():
    merged = apply_ledger_entry(make_game(top_prize=1000), make_entry(tiers=()))
    assert merged.prize_tiers == []
    assert merged.top_prize == 0
    assert merged.top_prize_remaining == 0


def test_unmatched_game_keeps_its_tiers():
    """A game number with no ledger entry is passed through untouched."""
    tiers = [PrizeTier(amount=10, remaining=3)]
    game = make_game(game_number="9999", prize_tiers=tiers, top_prize=10)

    [merged] = merge_prize_ledger([game], {"1234": make_entry()})

    assert merged.prize_tiers == tiers
    assert merged.top_prize == 10
    assert merged.top_prize_remaining == 0


def test_game_without_number_is_never_merged():
    game = make_game(game_number="")
    [merged] = merge_prize_ledger([game], {"": make_entry(game_number="x")})
    assert merged is game


def test_merge_preserves_order():
    games = [make_game(game_number="5678", id="scratch_1"), make_game(id="scratch_2")]
    merged = merge_prize_ledger(games, {"1234": make_entry()})
    assert [g.id for g in merged] == ["scratch_1", "scratch_2"]
    assert merged[1].top_prize == 500000


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
