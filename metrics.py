# Run Metrics
# Rolling per-refresh record for dashboards: source health, counts, duration

import json
import os
from datetime import datetime, timezone
from typing import Any, Dict, List

import config
from logger import setup_logger

logger = setup_logger(__name__)


def export_metrics(run_id: str, metrics: Dict[str, Any], path: str = None, window: int = None):
    """
    Append one refresh's metrics to the metrics file, keeping the newest `window` entries.

    Args:
        run_id: Pipeline run identifier
        metrics: Dictionary of metric values
    """
    path = path or config.METRICS_FILE
    window = window or config.METRICS_WINDOW
    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "run_id": run_id,
        **metrics
    }

    history = _read(path)
    history.append(entry)
    if len(history) > window:
        history = history[-window:]

    try:
        with open(path, 'w') as f:
            json.dump(history, f, indent=2, default=str)
    except OSError as e:
        # Metrics are observability only; a refresh never fails because of them
        logger.warning(f"Metrics export failed: {e}", extra={"event": "metrics_failed", "run_id": run_id})


def get_latest_metrics(count: int = 10, path: str = None) -> List[Dict[str, Any]]:
    """The N most recent metric entries, oldest first"""
    return _read(path or config.METRICS_FILE)[-count:]


def _read(path: str) -> list:
    if not os.path.exists(path):
        return []
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        # unreadable or corrupt history starts over rather than failing the refresh
        logger.warning(f"Metrics history unreadable, starting fresh: {e}", extra={"event": "metrics_unreadable"})
        return []
    return data if isinstance(data, list) else []
