from __future__ import annotations

from typing import List, Optional

from textual.app import ComposeResult
from textual.reactive import reactive
from textual.widgets import ListItem, Static
from rich.style import Style
from rich.text import Text

from .articles import source_from_url
from .datamodels import GroundingChunk, NewsStory, NewsTheme
from .themes import section_color

SAVED_MARK = "★"
UNSAVED_MARK = "☆"


# --- UI Widgets ---
class ThemeTitleItem(ListItem):
    """Coloured heading for a theme; not selectable."""

    def __init__(self, theme: NewsTheme, index: int):
        super().__init__(disabled=True, classes="theme-title-item")
        self.news_theme = theme
        self.theme_index = index

    def compose(self) -> ComposeResult:
        title = Static(self.news_theme.theme_title, classes="theme-title")
        title.styles.background = section_color(self.theme_index)
        yield title


class StoryItem(ListItem):
    saved = reactive(False)
    feedback = reactive("")

    def __init__(self, story: NewsStory, saved: bool = False):
        super().__init__(classes="story-item")
        self.story = story
        self.set_reactive(StoryItem.saved, saved)

    def compose(self) -> ComposeResult:
        yield Static(self._headline(), classes="story-title")
        yield Static(self.story.summary, classes="story-summary")
        if self.story.context:
            yield Static(
                Text.assemble(("Context: ", "bold"), self.story.context),
                classes="story-context",
            )
        if self.story.url:
            yield Static(
                f"Source: {source_from_url(self.story.url)}", classes="story-source"
            )

    def _headline(self) -> Text:
        mark = SAVED_MARK if self.saved else UNSAVED_MARK
        headline = Text.assemble((f"{mark} ", "bold"), (self.story.title, "bold"))
        if self.feedback:
            headline.append(f"  {self.feedback}", style="italic")
        return headline

    def _refresh_headline(self) -> None:
        if self.is_mounted:
            self.query_one(".story-title", Static).update(self._headline())

    def watch_saved(self, saved: bool) -> None:
        self._refresh_headline()

    def watch_feedback(self, feedback: str) -> None:
        self._refresh_headline()


class OverviewPanel(Static):
    def set_overview(self, overview: List[str]) -> None:
        self.display = bool(overview)
        text = Text()
        text.append("Overview\n", style="bold")
        for item in overview:
            text.append("✔ ", style="bold green")
            text.append(f"{item}\n")
        self.update(text)


class SourceList(Static):
    def set_sources(self, sources: List[GroundingChunk]) -> None:
        self.display = bool(sources)
        text = Text()
        text.append("Sources\n", style="bold")
        for source in sources:
            text.append("↗ ")
            text.append(source.title, style=Style(link=source.uri))
            text.append("\n")
        self.update(text)


class LoadingSkeleton(Static):
    """Placeholder bars shown while the breakdown is generated."""

    def on_mount(self) -> None:
        bar = "▆" * 24
        lines = ["▆" * 16, ""]
        lines += [f"● {bar * 2}" for _ in range(3)]
        for _ in range(2):
            lines += ["", "▆" * 20]
            lines += [bar * 2, bar, ""]
        self.update("\n".join(lines))


class StatusBar(Static):
    """One-line footer: fetch status, saved-story count and key hints."""

    status = reactive("")
    saved_count: reactive[Optional[int]] = reactive(None)
    hint = reactive("")

    def on_mount(self) -> None:
        self._redraw()

    def _redraw(self) -> None:
        parts = []
        if self.status:
            parts.append(self.status)
        if self.saved_count is not None:
            parts.append(f"{self.saved_count} saved")
        if self.hint:
            parts.append(self.hint)
        self.update(" · ".join(parts))

    def watch_status(self) -> None:
        self._redraw()

    def watch_saved_count(self) -> None:
        self._redraw()

    def watch_hint(self) -> None:
        self._redraw()


class ErrorMessage(Static):
    def set_message(self, message: str) -> None:
        self.display = bool(message)
        self.update(Text.assemble(("Error: ", "bold red"), (message, "red")))
