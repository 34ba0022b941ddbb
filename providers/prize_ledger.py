from datetime import datetime
from typing import Dict

from bs4 import BeautifulSoup
from pydantic import ValidationError

import config
from errors import ExtractionFailure
from logger import setup_logger
from models import PrizeLedgerEntry, PrizeTier
from parsers import normalize_game_number, parse_count, parse_prize_amount
from providers.base import SourceAdapter, text_of

logger = setup_logger(__name__)

# NC databox layout: Value | Odds | Total | Remaining
DATABOX_AMOUNT_COLUMN = 0
DATABOX_REMAINING_COLUMN = 3


class PrizesRemainingLedger(SourceAdapter[Dict[str, PrizeLedgerEntry]]):
    """Prizes-remaining page, grouped by game number."""

    def __init__(self, url: str = config.PRIZES_REMAINING_URL):
        self._url = url

    @property
    def name(self) -> str:
        return "prize_ledger"

    @property
    def target_url(self) -> str:
        return self._url

    def empty(self) -> Dict[str, PrizeLedgerEntry]:
        return {}

    def extract(self, html_content: str, fetched_at: datetime) -> Dict[str, PrizeLedgerEntry]:
        soup = BeautifulSoup(html_content, "html.parser")

        ledger = self._extract_databoxes(soup)
        if not ledger:
            ledger = self._extract_rows(soup)

        if not ledger:
            raise ExtractionFailure("No prize tables found on prizes-remaining page")
        return ledger

    def _extract_databoxes(self, soup) -> Dict[str, PrizeLedgerEntry]:
        ledger: Dict[str, PrizeLedgerEntry] = {}
        for box in soup.select("div.databox"):
            game_number = normalize_game_number(text_of(box, "span.gamenumber"))
            game_name = text_of(box, "span.gamename")
            if not game_number:
                continue

            for row in box.select("table.datatable tbody tr"):
                cols = row.select("td")
                if len(cols) < 4:
                    continue
                self._add_tier(
                    ledger,
                    game_number,
                    game_name,
                    cols[DATABOX_AMOUNT_COLUMN].get_text(strip=True),
                    cols[DATABOX_REMAINING_COLUMN].get_text(strip=True),
                )
        return ledger

    def _extract_rows(self, soup) -> Dict[str, PrizeLedgerEntry]:
        ledger: Dict[str, PrizeLedgerEntry] = {}
        for row in soup.select("table tbody tr, .prize-row"):
            cells = row.select("td, .cell")
            if len(cells) < 4:
                continue

            game_number = normalize_game_number(cells[0].get_text(strip=True))
            game_name = cells[1].get_text(strip=True)
            if not (game_number and game_name):
                continue

            self._add_tier(
                ledger,
                game_number,
                game_name,
                cells[2].get_text(strip=True),
                cells[3].get_text(strip=True),
            )
        return ledger

    def _add_tier(self, ledger, game_number: str, game_name: str, amount_text: str, remaining_text: str):
        """Append one row to its game's entry, creating the entry on first sight."""
        try:
            tier = PrizeTier(amount=parse_prize_amount(amount_text), remaining=parse_count(remaining_text))
            entry = ledger.get(game_number)
            if entry is None:
                entry = PrizeLedgerEntry(game_number=game_number, game_name=game_name)
                ledger[game_number] = entry
        except ValidationError as ve:
            logger.warning(f"Prize row for game {game_number} failed validation", extra={
                "event": "validation_failed",
                "source": self.name,
                "error": str(ve),
            })
            return
        entry.prize_tiers.append(tier)
