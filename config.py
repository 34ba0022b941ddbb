import os
from dotenv import load_dotenv

load_dotenv()

SERVICE_NAME = os.getenv("SERVICE_NAME", "nc-lottery-aggregator")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Upstream pages
SCRATCH_OFFS_URL = os.getenv("SCRATCH_OFFS_URL", "https://nclottery.com/Scratch-Offs")
PRIZES_REMAINING_URL = os.getenv("PRIZES_REMAINING_URL", "https://nclottery.com/Scratch-Off-Prizes-Remaining")
POWERBALL_URL = os.getenv("POWERBALL_URL", "https://nclottery.com/Powerball")
MEGA_MILLIONS_URL = os.getenv("MEGA_MILLIONS_URL", "https://nclottery.com/Mega-Millions")

# Transport
FETCH_BACKEND = os.getenv("FETCH_BACKEND", "http").lower()  # http | browser
FETCH_TIMEOUT_SECONDS = float(os.getenv("FETCH_TIMEOUT_SECONDS", "15"))
# Upper bound for a whole adapter (fetch + extraction) inside one refresh
ADAPTER_DEADLINE_SECONDS = float(os.getenv("ADAPTER_DEADLINE_SECONDS", "60"))
MAX_WORKERS = int(os.getenv("MAX_WORKERS", "4"))

# Scheduling
REFRESH_INTERVAL_SECONDS = int(os.getenv("REFRESH_INTERVAL_SECONDS", "1800"))

# Persistence
DATA_DIR = os.getenv("DATA_DIR", ".")
SNAPSHOT_KEY = os.getenv("SNAPSHOT_KEY", "lottery_cache.json")
ARCHIVE_SNAPSHOTS = os.getenv("ARCHIVE_SNAPSHOTS", "false").lower() == "true"

R2_ENDPOINT = os.getenv("R2_ENDPOINT", "")
R2_ACCESS_KEY = os.getenv("R2_ACCESS_KEY", "")
R2_SECRET_KEY = os.getenv("R2_SECRET_KEY", "")
R2_BUCKET = os.getenv("R2_BUCKET", "")

# Observability
METRICS_FILE = os.getenv("METRICS_FILE", "metrics.json")
METRICS_WINDOW = int(os.getenv("METRICS_WINDOW", "200"))
OTEL_CONSOLE = os.getenv("OTEL_CONSOLE", "false").lower() == "true"


def r2_configured() -> bool:
    """True when every credential needed for the R2 vault is present."""
    return all([R2_ENDPOINT, R2_ACCESS_KEY, R2_SECRET_KEY, R2_BUCKET])
