import sys
import threading

from opentelemetry import trace

from logger import setup_logger
from service import LotteryService
from telemetry import setup_telemetry

logger = setup_logger(__name__)


def start_librarian(stop_event: threading.Event):
    """
    Load the last snapshot (or build one), then keep it fresh on the
    configured interval until asked to stop.
    """
    service = LotteryService()
    service.start()

    snapshot = service.store.current()
    logger.info("Aggregator running", extra={
        "event": "service_started",
        "run_id": snapshot.run_id,
        "game_count": snapshot.total_games(),
    })

    try:
        stop_event.wait()
    finally:
        service.stop()
        logger.info("Aggregator stopped", extra={"event": "service_stopped"})


# Initialize Telemetry Global
tracer = setup_telemetry()

if __name__ == "__main__":
    stop = threading.Event()
    with tracer.start_as_current_span("aggregator") as span:
        try:
            start_librarian(stop)
            span.set_status(trace.Status(trace.StatusCode.OK))
        except KeyboardInterrupt:
            stop.set()
        except Exception as e:
            span.record_exception(e)
            span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
            logger.error("Fatal error in main loop", extra={"error": str(e)})
            sys.exit(1)
