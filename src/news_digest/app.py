from __future__ import annotations

import logging
import webbrowser
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.timer import Timer
from textual.worker import Worker, WorkerState
from textual.widgets import Button, Header, ListView

from .articles import ArticleReader
from .config import DEFAULT_CONFIG, SHARE_FEEDBACK_SECONDS, TOPIC
from .controller import MAIN_VIEW, ViewStateController
from .datamodels import NewsStory
from .messages import ViewStateChanged
from .prefetch import PrefetchManager
from .screens import ErrorScreen, SavedStoriesScreen, StoryViewScreen
from .sharing import Sharer
from .sources.base import BreakdownSource
from .storage import JsonFileStorage, Storage
from .themes import DIGEST_DARK, DIGEST_LIGHT, theme_for
from .widgets import (
    ErrorMessage,
    LoadingSkeleton,
    OverviewPanel,
    SourceList,
    StatusBar,
    StoryItem,
    ThemeTitleItem,
)

logger = logging.getLogger("news_digest")

KEYBINDINGS_HINT = (
    "[b $accent]r[/] refresh, [b $accent]b[/] save, [b $accent]c[/] share, "
    "[b $accent]v[/] saved, [b $accent]t[/] theme"
)


class TimerHandle:
    def __init__(self, timer: Timer):
        self.timer = timer

    def cancel(self) -> None:
        self.timer.stop()


class TimerScheduler:
    """Runs controller callbacks on the app's event loop."""

    def __init__(self, app: App):
        self.app = app

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return TimerHandle(self.app.set_timer(delay, callback))


class NewsDigestApp(App):
    TITLE = f"{TOPIC}: News Digest"
    SUB_TITLE = "A 24-hour thematic news summary powered by Gemini"

    CSS_PATH = "app.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "refresh", "Refresh"),
        Binding("b", "toggle_saved", "Save"),
        Binding("c", "share", "Share"),
        Binding("o", "open_in_browser", "Open"),
        Binding("v", "toggle_view", "Saved Stories"),
        Binding("t", "toggle_theme", "Theme"),
    ]

    def __init__(
        self,
        source: Optional[BreakdownSource] = None,
        config: Optional[Dict[str, Any]] = None,
        storage: Optional[Storage] = None,
        reader: Optional[ArticleReader] = None,
        theme: Optional[str] = None,
        startup_error: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self.config = config or dict(DEFAULT_CONFIG)
        self.source = source
        self.reader = reader or ArticleReader()
        self.startup_error = startup_error
        self.sharer = Sharer(copy=self.copy_to_clipboard)

        prefetcher = None
        if self.config.get("prefetch", True):
            prefetcher = PrefetchManager(
                warm=self.reader.warm,
                max_workers=self.config.get("prefetch_workers", 4),
            )
        self.controller = ViewStateController(
            source=source,
            storage=storage if storage is not None else JsonFileStorage(),
            scheduler=TimerScheduler(self),
            prefetcher=prefetcher,
            reveal_delay=self.config.get("reveal_delay", DEFAULT_CONFIG["reveal_delay"]),
        )
        if theme:
            # Applies to this run only; the stored preference is untouched.
            self.controller.theme = theme
        self._rendered_themes = 0

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="toolbar"):
            yield Button("Refresh News", id="refresh", variant="primary")
            yield Button("Saved Stories", id="view-toggle")
            yield Button("Light/Dark", id="theme-toggle")
        with Vertical(id="feed"):
            yield LoadingSkeleton(id="skeleton")
            yield ErrorMessage(id="error")
            yield OverviewPanel(id="overview")
            yield ListView(id="stories-list")
            yield SourceList(id="sources")
        yield StatusBar()

    def on_mount(self) -> None:
        self.main_screen = self.screen
        self.register_theme(DIGEST_LIGHT)
        self.register_theme(DIGEST_DARK)
        self.theme = theme_for(self.controller.theme).name

        self.controller.subscribe(lambda reason: self.post_message(ViewStateChanged(reason)))
        status_bar = self.main_screen.query_one(StatusBar)
        status_bar.hint = KEYBINDINGS_HINT
        status_bar.saved_count = len(self.controller.saved_stories)
        for widget_id in ("#skeleton", "#error", "#overview", "#sources"):
            self.main_screen.query_one(widget_id).display = False

        if self.startup_error or self.source is None:
            self.push_screen(
                ErrorScreen(
                    "News breakdown unavailable",
                    self.startup_error or "No breakdown source configured.",
                )
            )
            return

        self.main_screen.query_one("#stories-list", ListView).focus()
        self.action_refresh()

    def on_unmount(self) -> None:
        self.controller.close()

    # --- fetch lifecycle ---
    def action_refresh(self) -> None:
        if self.source is None or not self.controller.can_refresh:
            return
        self.controller.start_loading()
        self.run_worker(
            self.source.fetch_breakdown,
            name="breakdown_loader",
            thread=True,
            exclusive=True,
        )

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "breakdown_loader":
            return
        if event.state is WorkerState.SUCCESS:
            self.controller.apply_result(event.worker.result)
        elif event.state is WorkerState.ERROR:
            logger.error("Breakdown worker failed: %s", event.worker.error)
            self.controller.apply_error(event.worker.error)

    def on_view_state_changed(self, message: ViewStateChanged) -> None:
        handler = getattr(self, f"_on_{message.reason}", None)
        if handler is not None:
            handler()

    def _set_refresh_enabled(self, enabled: bool) -> None:
        button = self.main_screen.query_one("#refresh", Button)
        button.disabled = not enabled
        button.label = "Refresh News" if enabled else "Refreshing..."

    def _reset_feed(self) -> None:
        self.main_screen.query_one("#stories-list", ListView).clear()
        self._rendered_themes = 0

    def _on_loading(self) -> None:
        self._set_refresh_enabled(False)
        self._reset_feed()
        self.main_screen.query_one("#skeleton").display = True
        self.main_screen.query_one("#error").display = False
        self.main_screen.query_one("#overview").display = False
        self.main_screen.query_one("#sources").display = False
        self.main_screen.query_one(StatusBar).status = "Generating breakdown..."

    def _on_error(self) -> None:
        self._set_refresh_enabled(True)
        self._reset_feed()
        self.main_screen.query_one("#skeleton").display = False
        self.main_screen.query_one("#overview").display = False
        self.main_screen.query_one("#sources").display = False
        self.main_screen.query_one(ErrorMessage).set_message(self.controller.error or "")
        self.main_screen.query_one(StatusBar).status = "Fetch failed"

    def _on_loaded(self) -> None:
        self._set_refresh_enabled(True)
        self._reset_feed()
        self.main_screen.query_one("#skeleton").display = False
        self.main_screen.query_one("#error").display = False
        self.main_screen.query_one(OverviewPanel).set_overview(self.controller.overview)
        self.main_screen.query_one(SourceList).set_sources(self.controller.sources)
        self.main_screen.query_one(StatusBar).status = f"Updated {datetime.now():%H:%M}"

    def _on_theme_revealed(self) -> None:
        stories_list = self.main_screen.query_one("#stories-list", ListView)
        for index in range(self._rendered_themes, len(self.controller.themes)):
            theme = self.controller.themes[index]
            stories_list.append(ThemeTitleItem(theme, index))
            for story in theme.stories:
                stories_list.append(StoryItem(story, saved=self.controller.is_saved(story)))
        self._rendered_themes = len(self.controller.themes)

    def _on_saved(self) -> None:
        self.main_screen.query_one(StatusBar).saved_count = len(self.controller.saved_stories)
        for item in self.main_screen.query(StoryItem):
            item.saved = self.controller.is_saved(item.story)

    def _on_theme(self) -> None:
        self.theme = theme_for(self.controller.theme).name

    def _on_view(self) -> None:
        if self.controller.view == MAIN_VIEW:
            if isinstance(self.screen, SavedStoriesScreen):
                self.pop_screen()
            self.main_screen.query_one("#view-toggle", Button).label = "Saved Stories"
            self._set_refresh_enabled(not self.controller.loading)
        else:
            self.main_screen.query_one("#view-toggle", Button).label = "Back to News"
            self.push_screen(SavedStoriesScreen())

    # --- story actions ---
    def _highlighted_story(self) -> Optional[StoryItem]:
        item = self.main_screen.query_one("#stories-list", ListView).highlighted_child
        return item if isinstance(item, StoryItem) else None

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if event.list_view.id == "stories-list" and isinstance(event.item, StoryItem):
            self.open_story(event.item.story)

    def open_story(self, story: NewsStory) -> None:
        if not story.url:
            self.notify("This story has no source link.", severity="warning")
            return
        self.push_screen(StoryViewScreen(story, self.reader))

    def share_story(self, item: StoryItem) -> None:
        feedback = self.sharer.share(item.story)
        if feedback:
            item.feedback = feedback
            self.set_timer(SHARE_FEEDBACK_SECONDS, lambda: setattr(item, "feedback", ""))

    def action_toggle_saved(self) -> None:
        item = self._highlighted_story()
        if item is None:
            return
        if not item.story.url:
            self.notify("Stories without a source link cannot be saved.", severity="warning")
            return
        self.controller.toggle_saved(item.story)

    def action_share(self) -> None:
        item = self._highlighted_story()
        if item is not None:
            self.share_story(item)

    def action_open_in_browser(self) -> None:
        item = self._highlighted_story()
        if item is not None and item.story.url:
            webbrowser.open(item.story.url)

    def action_toggle_view(self) -> None:
        self.controller.toggle_view()

    def action_toggle_theme(self) -> None:
        self.controller.toggle_theme()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "refresh":
            self.action_refresh()
        elif event.button.id == "view-toggle":
            self.action_toggle_view()
        elif event.button.id == "theme-toggle":
            self.action_toggle_theme()
