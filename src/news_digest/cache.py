from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
import time
from typing import Any, Optional

logger = logging.getLogger("news_digest")


class Cache:
    """On-disk JSON cache of fetched articles, one file per URL."""

    def __init__(self, cache_dir: str, ttl: int):
        self.cache_dir = cache_dir
        self.ttl = ttl
        self._lock = threading.Lock()
        os.makedirs(self.cache_dir, exist_ok=True)

    def _path_for(self, url: str) -> str:
        digest = hashlib.sha256(url.encode()).hexdigest()
        return os.path.join(self.cache_dir, f"{digest}.json")

    def get(self, url: str) -> Optional[Any]:
        path = self._path_for(url)
        if not os.path.exists(path):
            return None

        try:
            with open(path, "r") as f:
                entry = json.load(f)
        except (IOError, json.JSONDecodeError) as e:
            logger.warning("Failed to read cached article %s: %s", path, e)
            return None

        if time.time() - entry.get("fetched_at", 0) > self.ttl:
            logger.debug("Cached article expired: %s", url)
            return None

        logger.debug("Article cache hit: %s", url)
        return entry.get("value")

    def __contains__(self, url: str) -> bool:
        return self.get(url) is not None

    def set(self, url: str, value: Any) -> None:
        entry = {"fetched_at": time.time(), "url": url, "value": value}
        path = self._path_for(url)
        # Warm-up threads may write concurrently.
        with self._lock:
            try:
                with open(path, "w") as f:
                    json.dump(entry, f)
                logger.debug("Cached article %s", url)
            except IOError as e:
                logger.warning("Failed to write cached article %s: %s", path, e)

    def clear(self) -> None:
        """Remove every cached article."""
        for filename in os.listdir(self.cache_dir):
            path = os.path.join(self.cache_dir, filename)
            try:
                if os.path.isfile(path):
                    os.unlink(path)
            except OSError as e:
                logger.error("Failed to delete cached article %s: %s", path, e)
        logger.info("Article cache cleared.")
