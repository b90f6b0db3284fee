from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

LIGHT = "light"
DARK = "dark"
THEME_PREFERENCES = (LIGHT, DARK)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _entries(value: Any) -> List[Dict[str, Any]]:
    """The object entries of a JSON list; anything else is dropped."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


# --- Data models ---
@dataclass
class NewsStory:
    title: str
    summary: str
    context: str = ""
    url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsStory":
        return cls(
            title=_text(data.get("title")),
            summary=_text(data.get("summary")),
            context=_text(data.get("context")),
            url=_text(data.get("url")) or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "title": self.title,
            "summary": self.summary,
            "context": self.context,
        }
        if self.url:
            data["url"] = self.url
        return data


@dataclass
class NewsTheme:
    theme_title: str
    stories: List[NewsStory] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsTheme":
        return cls(
            theme_title=_text(data.get("themeTitle")),
            stories=[NewsStory.from_dict(s) for s in _entries(data.get("stories"))],
        )


@dataclass
class NewsData:
    overview: List[str] = field(default_factory=list)
    themes: List[NewsTheme] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsData":
        return cls(
            overview=[_text(item) for item in data.get("overview") or [] if item is not None],
            themes=[NewsTheme.from_dict(t) for t in _entries(data.get("themes"))],
        )

    def all_stories(self) -> List[NewsStory]:
        return [story for theme in self.themes for story in theme.stories]


@dataclass
class GroundingChunk:
    """A web source the model cited while answering."""

    uri: str
    title: str

    @classmethod
    def from_response_chunk(cls, chunk: Any) -> Optional["GroundingChunk"]:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        title = getattr(web, "title", None)
        if not uri or not title:
            return None
        return cls(uri=uri, title=title)


@dataclass
class BreakdownResult:
    data: Optional[NewsData]
    sources: List[GroundingChunk] = field(default_factory=list)


class ViewState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"
