import os
import json
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_int(name, default):
    value = os.getenv(name)
    return int(value) if value not in (None, "") else default


def _env_float(name, default):
    value = os.getenv(name)
    return float(value) if value not in (None, "") else default


# Remote endpoints
CATALOG_BASE_URL = os.getenv("CATALOG_BASE_URL", "https://api.tvmaze.com").rstrip("/")
PLAYER_BASE_URL = os.getenv("PLAYER_BASE_URL", "https://www.movieboxpro.app").rstrip("/")

# Data storage
DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.path.dirname(__file__), "..", "data"))
PLAYLIST_FILE = os.getenv("PLAYLIST_FILE", os.path.join(DATA_DIR, "shows.json"))
DATASET_FILE = os.getenv("DATASET_FILE", os.path.join(DATA_DIR, "seasons.json"))

# Browser profile (persistent so auth survives restarts)
USER_DATA_DIR = os.path.expanduser(os.getenv("WATCHER_PROFILE_DIR", "~/.playwatcher-profile"))
HEADLESS = os.getenv("HEADLESS", "false").strip().lower() in ("1", "true", "yes")
PAGE_LOAD_TIMEOUT = _env_int("PAGE_LOAD_TIMEOUT", 60)

# Watcher timing (seconds)
SIGNAL_PROBE = os.getenv("SIGNAL_PROBE", "pixel").strip().lower()
PIXEL_X = _env_int("PIXEL_X", 500)
PIXEL_Y = _env_int("PIXEL_Y", 500)
GRACE_SECONDS = _env_float("GRACE_SECONDS", 60)
TICK_SECONDS = _env_float("TICK_SECONDS", 30)
PLAY_PROMPT_WAIT = _env_float("PLAY_PROMPT_WAIT", 5)

# Catalog lookup
REQUEST_DELAY = _env_float("REQUEST_DELAY", 0.15)

CONFIG_DIR = os.path.dirname(__file__)
CATALOG_SHOWS_FILE = os.path.join(CONFIG_DIR, "catalog_shows.json")

def load_catalog_shows():
    """Load the show queries for the dataset builder from JSON"""
    try:
        with open(CATALOG_SHOWS_FILE, 'r', encoding='utf-8') as f:
            return json.load(f)
    except Exception as e:
        print(f"⚠ Warning: Could not load catalog shows: {str(e)}")
        return []

CATALOG_SHOWS = load_catalog_shows()
