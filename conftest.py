"""
Shared fakes for the test suite: a page fetcher that never touches the network
and an in-memory blob store that can be told to fail.
"""

from typing import Dict, Optional

import pytest

from errors import PersistenceFailure, TransportFailure
from providers.draw_games import MEGA_MILLIONS, POWERBALL
from vault import BlobStore

CATALOG_URL = "https://lottery.test/scratch-offs"
LEDGER_URL = "https://lottery.test/prizes-remaining"

CATALOG_HTML = """
<html><body>
  <div class="game-tile">
    <h3 class="game-name">Lucky 7s</h3>
    <span class="price">$5</span>
    <span class="odds">Overall odds: 1 in 4.0</span>
    <span class="top-prize">$500,000</span>
    <span class="game-number">1234</span>
  </div>
  <div class="game-tile">
    <h3 class="game-name">Cash Blast</h3>
    <span class="price">$2</span>
    <span class="odds">1 in 3.5</span>
    <span class="top-prize">$20,000</span>
    <span class="game-number">5678</span>
  </div>
  <div class="game-tile">
    <h3 class="game-name"></h3>
  </div>
  <div class="game-tile">
    <h3 class="game-name">Mystery Ticket</h3>
    <span class="price">$1</span>
    <span class="odds">See back of ticket</span>
  </div>
</body></html>
"""

LEDGER_HTML = """
<html><body>
<table>
  <thead><tr><th>Game #</th><th>Name</th><th>Prize</th><th>Remaining</th></tr></thead>
  <tbody>
    <tr><td>1234</td><td>Lucky 7s</td><td>$50</td><td>1,000</td></tr>
    <tr><td>1234</td><td>Lucky 7s</td><td>$500,000</td><td>1</td></tr>
    <tr><td>5678</td><td>Cash Blast</td><td>$20,000</td><td>0</td></tr>
  </tbody>
</table>
</body></html>
"""

POWERBALL_HTML = '<html><body><div class="jackpot-amount">$145 Million</div></body></html>'
MEGA_MILLIONS_HTML = '<html><body><p class="current-jackpot">$52,000,000</p></body></html>'


class FakeFetcher:
    """Serves canned pages by URL; unknown or failing URLs raise TransportFailure."""

    def __init__(self, pages: Dict[str, str], failures: Optional[Dict[str, str]] = None):
        self.pages = dict(pages)
        self.failures = dict(failures or {})
        self.calls = []

    def fetch(self, url, headers=None):
        self.calls.append(url)
        if url in self.failures:
            raise TransportFailure(url, self.failures[url])
        if url not in self.pages:
            raise TransportFailure(url, "404 Not Found")
        return self.pages[url]


class MemoryBlobStore(BlobStore):
    def __init__(self, fail_reads: bool = False, fail_writes: bool = False):
        self.blobs: Dict[str, bytes] = {}
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def write(self, key, data):
        if self.fail_writes:
            raise PersistenceFailure(f"store unreachable writing {key}")
        self.blobs[key] = data

    def read(self, key):
        if self.fail_reads:
            raise PersistenceFailure(f"store unreachable reading {key}")
        return self.blobs.get(key)


@pytest.fixture
def all_pages():
    return {
        CATALOG_URL: CATALOG_HTML,
        LEDGER_URL: LEDGER_HTML,
        POWERBALL.url: POWERBALL_HTML,
        MEGA_MILLIONS.url: MEGA_MILLIONS_HTML,
    }


@pytest.fixture
def memory_store():
    return MemoryBlobStore()
