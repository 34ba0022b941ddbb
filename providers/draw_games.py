from dataclasses import dataclass
from datetime import datetime
from typing import List, Tuple

from bs4 import BeautifulSoup

import config
from logger import setup_logger
from models import Game, GameKind, PrizeTier
from parsers import parse_jackpot
from providers import list_draw_games, register_draw_game
from providers.base import SourceAdapter, text_of

logger = setup_logger(__name__)

JACKPOT_SELECTOR = ".jackpot-amount, .current-jackpot, .prize-amount"


@dataclass(frozen=True)
class DrawGameDefinition:
    """Published facts about a multi-state draw game. Only the jackpot is scraped."""

    game_id: str
    name: str
    url: str
    price: float
    overall_odds: str
    expected_value: float
    default_jackpot: float
    lower_tiers: Tuple[float, ...]

    def to_game(self, jackpot: float, fetched_at: datetime) -> Game:
        amounts = (jackpot, *self.lower_tiers)
        return Game(
            id=self.game_id,
            name=self.name,
            kind=GameKind.DRAW,
            price=self.price,
            overall_odds=self.overall_odds,
            top_prize=jackpot,
            top_prize_remaining=1,
            expected_value=self.expected_value,
            prize_tiers=[PrizeTier(amount=amount, remaining=1) for amount in amounts],
            game_number="",
            last_updated=fetched_at,
        )


class DrawGameAdapter(SourceAdapter[List[Game]]):
    """
    One draw game page. Yields exactly one Game on success.

    A page without a readable jackpot still yields the game with its
    default jackpot; only a failed fetch drops it.
    """

    def __init__(self, definition: DrawGameDefinition):
        self.definition = definition

    @property
    def name(self) -> str:
        return f"draw:{self.definition.game_id}"

    @property
    def target_url(self) -> str:
        return self.definition.url

    def empty(self) -> List[Game]:
        return []

    def extract(self, html_content: str, fetched_at: datetime) -> List[Game]:
        soup = BeautifulSoup(html_content, "html.parser")
        jackpot = parse_jackpot(text_of(soup, JACKPOT_SELECTOR))
        if not jackpot:
            logger.info(f"No jackpot on {self.definition.name} page, using default", extra={
                "event": "jackpot_default",
                "source": self.name,
            })
            jackpot = self.definition.default_jackpot
        elif jackpot < max(self.definition.lower_tiers, default=0):
            # the generic selector caught a lower-tier figure, not the jackpot
            logger.info(f"Scraped jackpot {jackpot} below fixed tiers on {self.definition.name} page, using default", extra={
                "event": "jackpot_default",
                "source": self.name,
            })
            jackpot = self.definition.default_jackpot
        return [self.definition.to_game(jackpot, fetched_at)]


POWERBALL = DrawGameDefinition(
    game_id="powerball",
    name="Powerball",
    url=config.POWERBALL_URL,
    price=2,
    overall_odds="1 in 24.9",
    expected_value=0.3,
    default_jackpot=20_000_000,
    lower_tiers=(1_000_000, 50_000, 100),
)

MEGA_MILLIONS = DrawGameDefinition(
    game_id="megamillions",
    name="Mega Millions",
    url=config.MEGA_MILLIONS_URL,
    price=2,
    overall_odds="1 in 24.0",
    expected_value=0.28,
    default_jackpot=20_000_000,
    lower_tiers=(1_000_000, 10_000, 200),
)


def build_draw_adapters() -> List[DrawGameAdapter]:
    """One adapter per registered draw game, each with its own failure boundary"""
    return [DrawGameAdapter(definition) for definition in list_draw_games()]


# Auto-register
register_draw_game(POWERBALL)
register_draw_game(MEGA_MILLIONS)
