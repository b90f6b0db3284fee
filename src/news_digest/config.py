from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

# --- Configuration ---
TOPIC = "Sri Lanka"
DEFAULT_MODEL = "gemini-2.5-flash"
REVEAL_DELAY = 0.25
SHARE_FEEDBACK_SECONDS = 2.0
PREFETCH_MARKER = "news-prefetch"

CONFIG_DIR = os.path.expanduser("~/.config/news-digest")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.json")
STORAGE_PATH = os.path.join(CONFIG_DIR, "storage.json")
CACHE_DIR = os.path.expanduser("~/.cache/news-digest/articles")

# Storage keys
THEME_KEY = "theme"
SAVED_STORIES_KEY = "savedNewsStories"

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

HTTP_TIMEOUT = 15
MIN_ARTICLE_WORDS = 15
REQUEST_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:115.0) "
        "Gecko/20100101 Firefox/115.0"
    )
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "model": DEFAULT_MODEL,
    "use_grounding": True,
    "reveal_delay": REVEAL_DELAY,
    "prefetch": True,
    "prefetch_workers": 4,
    "cache_ttl": 3600,
}

# User-facing messages
MALFORMED_RESPONSE_MESSAGE = (
    "Could not retrieve a valid news breakdown. The AI might be busy or the "
    "response was not in the correct format."
)
NO_STORIES_MESSAGE = (
    f"No major non-sports news stories were found for {TOPIC} in the last 24 hours."
)
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."
FETCH_FAILED_MESSAGE = "Failed to fetch news breakdown."

# --- Logging ---
logger = logging.getLogger("news_digest")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging.

    Logging is silenced unless ``debug`` is set, since the terminal belongs to
    the UI. In debug mode records go to a file under /tmp whose path is
    returned.
    """
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/news_digest_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def load_config(path: str = CONFIG_PATH) -> Dict[str, Any]:
    """Load the config file merged over the defaults."""
    config = dict(DEFAULT_CONFIG)
    if not os.path.exists(path):
        logger.info("Config file not found at %s, using defaults.", path)
        return config
    try:
        with open(path, "r") as f:
            user_config = json.load(f)
        if isinstance(user_config, dict):
            config.update(user_config)
            logger.info("Loaded config from %s", path)
        else:
            logger.error("Ignoring config at %s: expected a JSON object", path)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", path, e)
    return config


def get_api_key(environ: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Return the first API key found in the environment."""
    environ = os.environ if environ is None else environ
    for name in API_KEY_ENV_VARS:
        value = environ.get(name)
        if value:
            return value
    return None
