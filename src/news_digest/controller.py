from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol

from .config import (
    MALFORMED_RESPONSE_MESSAGE,
    NO_STORIES_MESSAGE,
    REVEAL_DELAY,
    UNKNOWN_ERROR_MESSAGE,
)
from .datamodels import (
    BreakdownResult,
    GroundingChunk,
    NewsStory,
    NewsTheme,
    ViewState,
)
from .prefetch import PrefetchManager
from .sources.base import BreakdownSource
from .storage import (
    Storage,
    load_saved_stories,
    load_theme_preference,
    save_saved_stories,
    save_theme_preference,
)
from .themes import detect_color_scheme, toggled

logger = logging.getLogger("news_digest")

MAIN_VIEW = "main"
SAVED_VIEW = "saved"


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


Listener = Callable[[str], None]


class ViewStateController:
    """Owns everything the views display.

    Listeners are called with a short reason string after every change:
    ``loading``, ``error``, ``loaded``, ``theme_revealed``, ``saved``,
    ``theme`` or ``view``.
    """

    def __init__(
        self,
        source: Optional[BreakdownSource],
        storage: Storage,
        scheduler: Scheduler,
        prefetcher: Optional[PrefetchManager] = None,
        reveal_delay: float = REVEAL_DELAY,
    ):
        self.source = source
        self.storage = storage
        self.scheduler = scheduler
        self.prefetcher = prefetcher
        self.reveal_delay = reveal_delay

        self.state = ViewState.IDLE
        self.view = MAIN_VIEW
        self.overview: List[str] = []
        self.themes: List[NewsTheme] = []
        self.sources: List[GroundingChunk] = []
        self.error: Optional[str] = None

        self._pending_themes: List[NewsTheme] = []
        self._reveal_handle: Optional[Cancellable] = None
        self._listeners: List[Listener] = []

        self.saved_stories: List[NewsStory] = load_saved_stories(storage)
        self.theme = load_theme_preference(storage) or detect_color_scheme()

    # --- listeners ---
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self, reason: str) -> None:
        for listener in list(self._listeners):
            listener(reason)

    # --- fetch lifecycle ---
    @property
    def loading(self) -> bool:
        return self.state is ViewState.LOADING

    @property
    def can_refresh(self) -> bool:
        return not self.loading and self.view == MAIN_VIEW

    @property
    def revealing(self) -> bool:
        return bool(self._pending_themes)

    def start_loading(self) -> None:
        self._cancel_reveal()
        self.overview = []
        self.themes = []
        self.sources = []
        self.error = None
        self.state = ViewState.LOADING
        self._notify("loading")

    def apply_result(self, result: BreakdownResult) -> None:
        data = result.data
        if data is None:
            self._fail(MALFORMED_RESPONSE_MESSAGE)
            return

        if self.prefetcher is not None:
            self.prefetcher.update(story.url for story in data.all_stories())

        if not data.themes:
            self._fail(NO_STORIES_MESSAGE)
            return

        self.overview = list(data.overview)
        self.sources = list(result.sources)
        self.state = ViewState.SUCCESS
        self._notify("loaded")

        self._pending_themes = list(data.themes)
        self._schedule_next_reveal()

    def apply_error(self, error: BaseException) -> None:
        self._fail(str(error) or UNKNOWN_ERROR_MESSAGE)

    def refresh(self) -> None:
        """Run one full fetch synchronously on the caller's thread."""
        if self.source is None:
            self._fail(UNKNOWN_ERROR_MESSAGE)
            return
        self.start_loading()
        try:
            result = self.source.fetch_breakdown()
        except Exception as e:
            logger.error("Breakdown fetch failed: %s", e)
            self.apply_error(e)
            return
        self.apply_result(result)

    def _fail(self, message: str) -> None:
        self._cancel_reveal()
        self.overview = []
        self.themes = []
        self.sources = []
        self.error = message
        self.state = ViewState.ERROR
        logger.info("Breakdown unavailable: %s", message)
        self._notify("error")

    # --- staggered reveal ---
    def _schedule_next_reveal(self) -> None:
        if not self._pending_themes:
            self._reveal_handle = None
            return
        self._reveal_handle = self.scheduler.call_later(
            self.reveal_delay, self._reveal_next
        )

    def _reveal_next(self) -> None:
        if not self._pending_themes:
            return
        self.themes.append(self._pending_themes.pop(0))
        self._notify("theme_revealed")
        self._schedule_next_reveal()

    def _cancel_reveal(self) -> None:
        self._pending_themes = []
        if self._reveal_handle is not None:
            self._reveal_handle.cancel()
            self._reveal_handle = None

    # --- saved stories ---
    def is_saved(self, story: NewsStory) -> bool:
        if not story.url:
            return False
        return any(s.url == story.url for s in self.saved_stories)

    def toggle_saved(self, story: NewsStory) -> bool:
        """Save or unsave ``story``; returns whether it is saved afterwards."""
        if not story.url:
            logger.warning("Cannot save a story without a URL: %s", story.title)
            return False
        if self.is_saved(story):
            self.saved_stories = [s for s in self.saved_stories if s.url != story.url]
            saved = False
        else:
            self.saved_stories = self.saved_stories + [story]
            saved = True
        save_saved_stories(self.storage, self.saved_stories)
        self._notify("saved")
        return saved

    # --- theme and view ---
    def toggle_theme(self) -> str:
        self.theme = toggled(self.theme)
        save_theme_preference(self.storage, self.theme)
        self._notify("theme")
        return self.theme

    def toggle_view(self) -> str:
        self.view = SAVED_VIEW if self.view == MAIN_VIEW else MAIN_VIEW
        self._notify("view")
        return self.view

    def close(self) -> None:
        self._cancel_reveal()
        if self.prefetcher is not None:
            self.prefetcher.shutdown()
