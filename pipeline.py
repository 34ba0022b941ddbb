"""
pipeline.py - The Conductor

One refresh: every source in parallel, then merge, then expected value.
A source that fails contributes nothing; the run itself always completes
with a full snapshot.
"""

import contextvars
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeout
from datetime import datetime
from typing import Dict, List, Optional

from opentelemetry import trace

import config
from ev import with_expected_value
from fetcher import build_fetcher
from logger import setup_logger
from merger import merge_prize_ledger
from metrics import export_metrics
from models import Snapshot, SourceResult, utc_now
from providers.base import SourceAdapter
from providers.draw_games import build_draw_adapters
from providers.instant import InstantGameCatalog
from providers.prize_ledger import PrizesRemainingLedger

logger = setup_logger(__name__)
tracer = trace.get_tracer(__name__)


def new_run_id() -> str:
    return f"run_{datetime.now().strftime('%Y%m%d_%H%M')}_{str(uuid.uuid4())[:4]}"


class Pipeline:
    def __init__(
        self,
        fetcher=None,
        instant_source: Optional[SourceAdapter] = None,
        ledger_source: Optional[SourceAdapter] = None,
        draw_sources: Optional[List[SourceAdapter]] = None,
        max_workers: int = config.MAX_WORKERS,
        deadline_seconds: float = config.ADAPTER_DEADLINE_SECONDS,
        metrics_path: Optional[str] = None,
    ):
        self.fetcher = fetcher or build_fetcher()
        self.instant_source = instant_source or InstantGameCatalog()
        self.ledger_source = ledger_source or PrizesRemainingLedger()
        self.draw_sources = draw_sources if draw_sources is not None else build_draw_adapters()
        self.max_workers = max_workers
        self.deadline_seconds = deadline_seconds
        self.metrics_path = metrics_path

    @property
    def sources(self) -> List[SourceAdapter]:
        return [self.instant_source, self.ledger_source, *self.draw_sources]

    def run(self) -> Snapshot:
        run_id = new_run_id()
        start_time = time.time()
        logger.info("Refresh starting", extra={"event": "refresh_start", "run_id": run_id})

        with tracer.start_as_current_span("refresh_pipeline") as span:
            span.set_attribute("run_id", run_id)
            results = self.collect_all()

            instant = results[self.instant_source.name]
            ledger = results[self.ledger_source.name]
            draw_games = [game for source in self.draw_sources for game in results[source.name].value]

            merged = merge_prize_ledger(instant.value, ledger.value)
            instant_games = [with_expected_value(game) for game in merged]

            snapshot = Snapshot(
                instant_games=instant_games,
                draw_games=draw_games,
                last_updated=utc_now(),
                run_id=run_id,
            )

            degraded = [result.source for result in results.values() if result.degraded]
            duration_ms = int((time.time() - start_time) * 1000)
            span.set_attribute("game_count", snapshot.total_games())
            span.set_attribute("degraded_sources", ",".join(degraded))

        log = logger.warning if degraded else logger.info
        log("Refresh complete" + (" with degraded sources" if degraded else ""), extra={
            "event": "refresh_partial" if degraded else "refresh_success",
            "run_id": run_id,
            "instant_count": len(instant_games),
            "draw_count": len(draw_games),
            "ledger_count": len(ledger.value),
            "degraded_sources": degraded,
            "duration_ms": duration_ms,
        })

        export_metrics(run_id, {
            "event": "refresh_complete",
            "duration_ms": duration_ms,
            "instant_count": len(instant_games),
            "draw_count": len(draw_games),
            "ledger_count": len(ledger.value),
            "degraded_sources": degraded,
        }, path=self.metrics_path)

        return snapshot

    def collect_all(self) -> Dict[str, SourceResult]:
        """
        Run every source concurrently and wait for all of them.
        A source still running at the deadline counts as degraded.
        """
        executor = ThreadPoolExecutor(max_workers=max(1, self.max_workers), thread_name_prefix="source")
        try:
            futures = {}
            for source in self.sources:
                # each worker gets its own copy so source spans nest under the run span
                ctx = contextvars.copy_context()
                futures[source.name] = (source, executor.submit(ctx.run, source.collect, self.fetcher))

            deadline = time.monotonic() + self.deadline_seconds
            results = {}
            for name, (source, future) in futures.items():
                remaining = max(0.0, deadline - time.monotonic())
                try:
                    results[name] = future.result(timeout=remaining)
                except FuturesTimeout:
                    logger.warning(f"Source {name} missed the {self.deadline_seconds}s deadline", extra={
                        "event": "source_timeout",
                        "source": name,
                        "url": source.target_url,
                    })
                    results[name] = SourceResult.failed(name, source.empty(), f"Timed out after {self.deadline_seconds}s")
            return results
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
