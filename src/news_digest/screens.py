from __future__ import annotations

import logging
import webbrowser

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.worker import Worker, WorkerState
from textual.widgets import (
    Footer,
    Header,
    Label,
    ListView,
    LoadingIndicator,
    Markdown,
    Static,
)

from .articles import ArticleReader, source_from_url
from .datamodels import NewsStory
from .widgets import StatusBar, StoryItem

logger = logging.getLogger("news_digest")


# --- Story screen (separate) ---
class StoryViewScreen(Screen):
    BINDINGS = [
        Binding("escape,q,left", "app.pop_screen", "Back"),
        Binding("o", "open_in_browser", "Open in browser"),
        Binding("r", "reload_story", "Reload"),
        Binding("down", "scroll_down", "Scroll Down"),
        Binding("up", "scroll_up", "Scroll Up"),
    ]

    def __init__(self, story: NewsStory, reader: ArticleReader):
        super().__init__()
        self.story = story
        self.reader = reader

    def compose(self) -> ComposeResult:
        yield Header()
        yield LoadingIndicator(id="story-loading")
        yield VerticalScroll(
            Markdown("", id="story-markdown"),
            id="story-scroll",
        )
        yield StatusBar()

    def on_mount(self) -> None:
        self.title = self.story.title
        self.sub_title = source_from_url(self.story.url)
        self.query_one("#story-scroll").focus()
        self.query_one(StatusBar).hint = (
            "[b $accent]up/down[/] to scroll, [b $accent]o[/] to open, [b $accent]esc[/] back"
        )
        self.load_story()

    def load_story(self) -> None:
        self.query_one("#story-loading", LoadingIndicator).display = True
        self.query_one("#story-scroll").display = False
        self.run_worker(
            lambda: self.reader.get_article(self.story.url),
            name="story_loader",
            thread=True,
        )

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "story_loader":
            return
        if event.state in (WorkerState.PENDING, WorkerState.RUNNING):
            return

        self.query_one("#story-loading", LoadingIndicator).display = False
        self.query_one("#story-scroll").display = True
        md = self.query_one("#story-markdown", Markdown)

        if event.state is WorkerState.SUCCESS:
            result = event.worker.result or {"ok": False, "content": "No content"}
            if result.get("ok"):
                content = result.get("content", "")
                md.update(content)
                word_count = len(content.split())
                minutes = max(1, round(word_count / 200))
                self.sub_title = f"{source_from_url(self.story.url)} · ~{minutes} min read"
                return
            message = result.get("content", "Unable to load article.")
        else:
            error = event.worker.error
            logger.error("Story loader worker failed: %s", error)
            message = f"Unable to load article: {error}" if error else "Unable to load article."

        md.update(
            f"**{message}**\n\n{self.story.summary}\n\nPress `o` to open the original."
        )

    def action_open_in_browser(self) -> None:
        if self.story.url:
            webbrowser.open(self.story.url)

    def action_reload_story(self) -> None:
        self.load_story()

    def action_scroll_down(self) -> None:
        self.query_one("#story-scroll").scroll_down()

    def action_scroll_up(self) -> None:
        self.query_one("#story-scroll").scroll_up()


class ErrorScreen(Screen):
    BINDINGS = [Binding("q", "app.quit", "Quit")]

    def __init__(self, title: str, message: str):
        super().__init__()
        self.error_title = title
        self.message = message

    def compose(self) -> ComposeResult:
        yield Header()
        yield Label(self.error_title, classes="error-title")
        yield Markdown(self.message)
        yield Footer()


class SavedStoriesScreen(Screen):
    BINDINGS = [
        Binding("escape,q,v", "back", "Back to News"),
        Binding("b", "toggle_saved", "Unsave"),
        Binding("c", "share", "Share"),
        Binding("o", "open_in_browser", "Open"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Saved Stories", classes="pane-title")
        yield Static(
            "You haven't saved any stories yet.", id="saved-empty", classes="empty-message"
        )
        yield ListView(id="saved-list")
        yield Footer()

    def on_mount(self) -> None:
        self.title = "Saved Stories"
        self.populate()
        self.query_one("#saved-list", ListView).focus()

    def populate(self) -> None:
        saved = self.app.controller.saved_stories
        saved_list = self.query_one("#saved-list", ListView)
        saved_list.clear()
        for story in saved:
            saved_list.append(StoryItem(story, saved=True))
        saved_list.display = bool(saved)
        self.query_one("#saved-empty").display = not saved

    def _highlighted(self) -> StoryItem | None:
        item = self.query_one("#saved-list", ListView).highlighted_child
        return item if isinstance(item, StoryItem) else None

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, StoryItem):
            self.app.open_story(event.item.story)

    def action_toggle_saved(self) -> None:
        item = self._highlighted()
        if item is not None:
            self.app.controller.toggle_saved(item.story)
            self.populate()

    def action_share(self) -> None:
        item = self._highlighted()
        if item is not None:
            self.app.share_story(item)

    def action_open_in_browser(self) -> None:
        item = self._highlighted()
        if item is not None and item.story.url:
            webbrowser.open(item.story.url)

    def action_back(self) -> None:
        self.app.controller.toggle_view()
