from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .config import SAVED_STORIES_KEY, STORAGE_PATH, THEME_KEY
from .datamodels import THEME_PREFERENCES, NewsStory

logger = logging.getLogger("news_digest")


class Storage(ABC):
    """A small string key/value store that outlives the process."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass


class MemoryStorage(Storage):
    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStorage(Storage):
    """Keeps every key in one JSON object on disk, rewritten on each change."""

    def __init__(self, path: str = STORAGE_PATH):
        self.path = path
        self._items = self._load()

    def _load(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (IOError, json.JSONDecodeError) as e:
            logger.error("Failed to read storage from %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.error("Ignoring storage at %s: expected a JSON object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _flush(self) -> None:
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(self._items, f, indent=2)
        except IOError as e:
            logger.error("Failed to write storage to %s: %s", self.path, e)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()


def load_saved_stories(storage: Storage) -> List[NewsStory]:
    """Load the saved stories list; unreadable data loads as empty."""
    raw = storage.get_item(SAVED_STORIES_KEY)
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse saved stories from storage: %s", e)
        return []
    if not isinstance(items, list):
        logger.error("Saved stories in storage are not a list; ignoring them.")
        return []
    return [NewsStory.from_dict(item) for item in items if isinstance(item, dict)]


def save_saved_stories(storage: Storage, stories: List[NewsStory]) -> None:
    storage.set_item(SAVED_STORIES_KEY, json.dumps([s.to_dict() for s in stories]))


def load_theme_preference(storage: Storage) -> Optional[str]:
    value = storage.get_item(THEME_KEY)
    if value in THEME_PREFERENCES:
        return value
    if value is not None:
        logger.warning("Ignoring unknown theme preference %r", value)
    return None


def save_theme_preference(storage: Storage, preference: str) -> None:
    storage.set_item(THEME_KEY, preference)
