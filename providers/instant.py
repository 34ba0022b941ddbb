from datetime import datetime
from typing import List

from bs4 import BeautifulSoup
from pydantic import ValidationError

import config
from errors import ExtractionFailure
from logger import setup_logger
from models import DEFAULT_EXPECTED_VALUE, DEFAULT_ODDS, Game, GameKind
from parsers import normalize_game_number, parse_currency, parse_odds_ratio, parse_prize_amount
from providers.base import SourceAdapter, text_of

logger = setup_logger(__name__)

TILE_SELECTOR = ".game-tile, .scratch-game, .game-card, .game-item"
ROW_SELECTOR = "table tr, .row, .game-row"
CELL_SELECTOR = "td, .cell, .col"


class InstantGameCatalog(SourceAdapter[List[Game]]):
    """Scratch-off catalog: name, price, odds and advertised top prize per game."""

    def __init__(self, url: str = config.SCRATCH_OFFS_URL):
        self._url = url

    @property
    def name(self) -> str:
        return "instant_catalog"

    @property
    def target_url(self) -> str:
        return self._url

    def empty(self) -> List[Game]:
        return []

    def extract(self, html_content: str, fetched_at: datetime) -> List[Game]:
        soup = BeautifulSoup(html_content, "html.parser")

        games = self._extract_tiles(soup, fetched_at)
        if not games:
            logger.info("No game tiles found, trying tabular layout", extra={
                "event": "fallback_extraction",
                "source": self.name,
            })
            games = self._extract_rows(soup, fetched_at)

        if not games:
            raise ExtractionFailure("No scratch-off tiles or table rows found")
        return games

    def _extract_tiles(self, soup, fetched_at: datetime) -> List[Game]:
        games = []
        for index, tile in enumerate(soup.select(TILE_SELECTOR)):
            name = text_of(tile, ".game-name, .title, h3, h4")
            price_text = text_of(tile, ".price, .cost, .game-price")
            if not (name and price_text):
                continue

            game = self._build(
                id=f"scratch_{index + 1}",
                name=name,
                price=parse_currency(price_text),
                overall_odds=parse_odds_ratio(text_of(tile, ".odds, .overall-odds")) or DEFAULT_ODDS,
                top_prize=parse_prize_amount(text_of(tile, ".top-prize, .max-prize")),
                game_number=normalize_game_number(text_of(tile, ".game-number")),
                last_updated=fetched_at,
            )
            if game:
                games.append(game)
        return games

    def _extract_rows(self, soup, fetched_at: datetime) -> List[Game]:
        games = []
        for index, row in enumerate(soup.select(ROW_SELECTOR)):
            cells = row.select(CELL_SELECTOR)
            if len(cells) < 2:
                continue

            name = cells[0].get_text(strip=True)
            price_text = cells[1].get_text(strip=True)
            odds_text = cells[2].get_text(strip=True) if len(cells) > 2 else ""
            # Short first cells are labels or headers, not game names
            if not (name and price_text and len(name) > 3):
                continue

            game = self._build(
                id=f"scratch_{index + 1}",
                name=name,
                price=parse_currency(price_text),
                overall_odds=parse_odds_ratio(odds_text) or DEFAULT_ODDS,
                top_prize=0.0,
                game_number="",
                last_updated=fetched_at,
            )
            if game:
                games.append(game)
        return games

    def _build(self, **fields):
        try:
            return Game(
                kind=GameKind.INSTANT,
                top_prize_remaining=0,
                expected_value=DEFAULT_EXPECTED_VALUE,
                prize_tiers=[],
                **fields,
            )
        except ValidationError as ve:
            logger.warning(f"Game {fields.get('id')} failed validation: {ve.error_count()} errors", extra={
                "event": "validation_failed",
                "source": self.name,
                "error": str(ve),
            })
            return None
