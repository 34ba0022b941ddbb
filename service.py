"""
service.py - The Librarian

Wires pipeline, snapshot store and scheduler together and answers the read
queries. Holds no game data itself: everything comes from the store.
"""

import time
from typing import Optional

import config
from logger import setup_logger
from models import Snapshot
from pipeline import Pipeline
from queries import GameCategory, games_payload, health_payload, refresh_payload, stats_payload
from scheduler import RefreshScheduler
from vault import SnapshotStore, build_blob_store

logger = setup_logger(__name__)


class LotteryService:
    def __init__(
        self,
        pipeline: Optional[Pipeline] = None,
        store: Optional[SnapshotStore] = None,
        interval_seconds: float = config.REFRESH_INTERVAL_SECONDS,
    ):
        self.pipeline = pipeline or Pipeline()
        self.store = store or SnapshotStore(build_blob_store())
        self.scheduler = RefreshScheduler(self._refresh, interval_seconds)
        self.started_at = time.time()

    def _refresh(self) -> Snapshot:
        snapshot = self.pipeline.run()
        if not self.store.replace(snapshot):
            logger.warning("Refresh served from memory only, snapshot not persisted", extra={
                "event": "refresh_unpersisted",
                "run_id": snapshot.run_id,
            })
        return snapshot

    def start(self):
        """Serve the cached snapshot if there is one, otherwise refresh before anything else."""
        if self.store.load() is None:
            logger.info("No usable cached snapshot, fetching fresh data", extra={"event": "startup_refresh"})
            self.scheduler.run_now()
        self.scheduler.start()

    def stop(self):
        self.scheduler.stop()

    def games(self, category=GameCategory.ALL) -> dict:
        return games_payload(self.store.current(), category)

    def refresh(self) -> dict:
        outcome = self.scheduler.run_now()
        return refresh_payload(outcome, self.store.current())

    def stats(self) -> dict:
        return stats_payload(self.store.current())

    def health(self) -> dict:
        return health_payload(self.store.current(), self.started_at)
