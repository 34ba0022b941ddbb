"""
models.py - The Data Fortress

Pydantic models for every record that crosses an adapter boundary.
A scraped row that does not validate is dropped before it reaches the snapshot.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ODDS = "1 in 4.0"
DEFAULT_EXPECTED_VALUE = 0.5

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GameKind(str, Enum):
    INSTANT = "instant"
    DRAW = "draw"


class PrizeTier(BaseModel):
    """One payout level still available to be won."""

    amount: float = Field(ge=0, description="Prize amount in dollars")
    remaining: int = Field(ge=0, description="Prizes of this amount still unclaimed")


class Game(BaseModel):
    """A lottery product as served to readers."""

    id: str = Field(min_length=1, description="Positional for instant games, fixed for draw games")
    name: str = Field(min_length=1, description="Display name")
    kind: GameKind
    price: float = Field(default=0.0, ge=0)
    overall_odds: str = Field(default=DEFAULT_ODDS, description="'1 in N' or the raw text when unparseable")
    top_prize: float = Field(default=0.0, ge=0)
    top_prize_remaining: int = Field(default=0, ge=0)
    expected_value: float = DEFAULT_EXPECTED_VALUE
    prize_tiers: list[PrizeTier] = Field(default_factory=list)
    game_number: str = Field(default="", description="Join key against the prizes-remaining ledger")
    last_updated: datetime = Field(default_factory=utc_now)

    @field_validator("name", "game_number", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Scraped text arrives with layout whitespace around it"""
        if isinstance(v, str):
            return v.strip()
        return v


class PrizeLedgerEntry(BaseModel):
    """Every prize tier the prizes-remaining page lists for one game number."""

    game_number: str = Field(min_length=1)
    game_name: str = ""
    prize_tiers: list[PrizeTier] = Field(default_factory=list)


class Snapshot(BaseModel):
    """The complete result of one pipeline run. Never mutated once installed."""

    model_config = ConfigDict(frozen=True)

    instant_games: list[Game] = Field(default_factory=list)
    draw_games: list[Game] = Field(default_factory=list)
    last_updated: Optional[datetime] = None
    run_id: Optional[str] = None

    def all_games(self) -> list[Game]:
        return [*self.instant_games, *self.draw_games]

    def total_games(self) -> int:
        return len(self.instant_games) + len(self.draw_games)

    def age_seconds(self, now: Optional[datetime] = None) -> Optional[float]:
        if self.last_updated is None:
            return None
        now = now or utc_now()
        return (now - self.last_updated).total_seconds()


@dataclass(frozen=True)
class SourceResult(Generic[T]):
    """
    Outcome of one adapter call.

    A degraded result carries the adapter's empty value plus the reason it
    degraded, so the pipeline can tell "nothing listed" from "source down".
    """

    source: str
    value: T
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.error is not None

    @classmethod
    def ok(cls, source: str, value: T) -> "SourceResult[T]":
        return cls(source=source, value=value)

    @classmethod
    def failed(cls, source: str, empty: T, error: str) -> "SourceResult[T]":
        return cls(source=source, value=empty, error=error)
