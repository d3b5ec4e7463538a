"""Settings loaded from the environment (and a local .env file)."""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

FALLBACK_WEEKS = 8


def env_int(name: str, default: int) -> int:
    """Whole-number setting; a blank or malformed value falls back to the default."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not a whole number, using %d", name, raw, default)
        return default


DEFAULT_SNAPSHOT_PATH = os.environ.get(
    "STUDY_TRACKER_SNAPSHOT", str(Path.home() / ".study_tracker" / "snapshot.json")
)
DEFAULT_WEEKS = env_int("STUDY_TRACKER_WEEKS", FALLBACK_WEEKS)
REVIEWED_CATEGORY_ID = os.environ.get("STUDY_TRACKER_REVIEWED_CATEGORY", "reviewed")
LOG_LEVEL = os.environ.get("STUDY_TRACKER_LOG_LEVEL", "WARNING").upper()

DEFAULT_CATEGORIES = [
    ("summarized", "Summarized"),
    ("studied", "Studied"),
    (REVIEWED_CATEGORY_ID, "Reviewed"),
]
