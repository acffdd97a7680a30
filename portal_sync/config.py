"""
Runtime configuration.

Values come from the environment (optionally via a local ``.env`` file).
Timeouts for the browser are in milliseconds, the HTTP timeout in seconds.
"""
import os
from pathlib import Path

import dotenv

dotenv.load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "y", "on")


# Paths
PROJECT_ROOT = Path(os.getenv("PORTAL_SYNC_HOME", Path.cwd()))
DATA_DIR = PROJECT_ROOT / "data"
LEDGER_FILE = PROJECT_ROOT / "uploaded.json"

# Portal
UPLOAD_URL = os.getenv("PORTAL_SYNC_UPLOAD_URL", "https://frontend-react-mu-lake.vercel.app/upload-logo")
UPLOAD_RESPONSE_FRAGMENT = os.getenv("PORTAL_SYNC_UPLOAD_FRAGMENT", "/upload-logo")
HEADLESS = _env_bool("PORTAL_SYNC_HEADLESS", False)

# HTTP
USER_AGENT = os.getenv(
    "PORTAL_SYNC_USER_AGENT",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)
HTTP_TIMEOUT = float(os.getenv("PORTAL_SYNC_HTTP_TIMEOUT", "30"))

# Timeout configuration (in milliseconds)
NAVIGATION_TIMEOUT = int(os.getenv("PORTAL_SYNC_NAVIGATION_TIMEOUT_MS", "60000"))  # goto + network idle
ACTION_TIMEOUT = int(os.getenv("PORTAL_SYNC_ACTION_TIMEOUT_MS", "30000"))  # each field entry / element lookup
SUBMIT_TIMEOUT = int(os.getenv("PORTAL_SYNC_SUBMIT_TIMEOUT_MS", "30000"))  # click-and-confirm wait

LOG_LEVEL = os.getenv("PORTAL_SYNC_LOG_LEVEL", "INFO").upper()
