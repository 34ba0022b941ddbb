"""
queries.py - Read side

Payload builders for whatever serves the snapshot (HTTP routes, CLI, tests).
All of them are linear scans over one snapshot; ties go to the first game.
"""

import math
import time
from enum import Enum
from typing import Optional, Union

from models import Game, Snapshot, utc_now
from parsers import odds_denominator
from scheduler import RefreshOutcome


class GameCategory(str, Enum):
    ALL = "all"
    INSTANT = "instant"
    DRAW = "draw"


def select_games(snapshot: Snapshot, category: Union[GameCategory, str] = GameCategory.ALL) -> list[Game]:
    category = GameCategory(category)
    if category is GameCategory.INSTANT:
        return list(snapshot.instant_games)
    if category is GameCategory.DRAW:
        return list(snapshot.draw_games)
    return snapshot.all_games()


def games_payload(snapshot: Snapshot, category: Union[GameCategory, str] = GameCategory.ALL) -> dict:
    games = select_games(snapshot, category)
    return {
        "games": [game.model_dump(mode="json") for game in games],
        "last_updated": _iso(snapshot),
        "total": len(games),
    }


def refresh_payload(outcome: RefreshOutcome, snapshot: Snapshot) -> dict:
    if outcome.success:
        return {
            "success": True,
            "message": "Data refreshed successfully",
            "last_updated": _iso(snapshot),
        }
    return {
        "success": False,
        "message": "Failed to refresh data",
        "error": outcome.error,
    }


def _odds_rank(game: Game) -> float:
    # unparseable odds never win "best odds"
    odds = odds_denominator(game.overall_odds)
    return odds if odds is not None else math.inf


def stats_payload(snapshot: Snapshot) -> dict:
    games = snapshot.all_games()
    if not games:
        return {"total_games": 0, "best_odds": None, "biggest_prize": 0, "best_value": 0}

    best_odds = games[0]
    biggest = games[0]
    best_value = games[0]
    for game in games[1:]:
        if _odds_rank(game) < _odds_rank(best_odds):
            best_odds = game
        if game.top_prize > biggest.top_prize:
            biggest = game
        if game.expected_value > best_value.expected_value:
            best_value = game

    return {
        "total_games": len(games),
        "best_odds": best_odds.overall_odds,
        "biggest_prize": biggest.top_prize,
        "best_value": best_value.expected_value,
    }


def health_payload(snapshot: Snapshot, started_at: float, now: Optional[float] = None) -> dict:
    now = now if now is not None else time.time()
    return {
        "status": "healthy",
        "uptime": now - started_at,
        "timestamp": utc_now().isoformat(),
        "data_age": _iso(snapshot),
        "snapshot_age_seconds": snapshot.age_seconds(),
    }


def _iso(snapshot: Snapshot) -> Optional[str]:
    return snapshot.last_updated.isoformat() if snapshot.last_updated else None
