from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Callable, List, Optional

import pytest

from news_digest.datamodels import BreakdownResult, NewsData
from news_digest.sources.base import BreakdownSource
from news_digest.storage import MemoryStorage


class ManualHandle:
    def __init__(self, scheduler: "ManualScheduler", due: float, callback: Callable[[], None]):
        self.scheduler = scheduler
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """A clock that only moves when the test advances it."""

    def __init__(self):
        self.now = 0.0
        self.handles: List[ManualHandle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self, self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.handles if not h.cancelled and h.due <= target + 1e-9]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self.handles.remove(handle)
            self.now = handle.due
            handle.callback()
        self.now = target

    @property
    def pending(self) -> List[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]


class StubSource(BreakdownSource):
    def __init__(self, result: Optional[BreakdownResult] = None, error: Optional[Exception] = None):
        super().__init__({})
        self.result = result
        self.error = error
        self.calls = 0

    def fetch_breakdown(self) -> BreakdownResult:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


def fenced(payload) -> str:
    return "Here is the breakdown:\n```json\n" + json.dumps(payload) + "\n```\nDone."


def sample_payload() -> dict:
    return {
        "overview": ["Parliament passed the budget.", "Rupee steady."],
        "themes": [
            {
                "themeTitle": "Economy",
                "stories": [
                    {
                        "title": "Budget passed",
                        "summary": "The budget passed its second reading.",
                        "url": "https://www.ft.lk/budget",
                        "context": "Follows last week's debate.",
                    },
                    {
                        "title": "Rupee steady",
                        "summary": "The rupee held against the dollar.",
                        "url": "https://www.dailymirror.lk/rupee",
                        "context": "",
                    },
                ],
            },
            {
                "themeTitle": "Environment",
                "stories": [
                    {
                        "title": "Monsoon warning",
                        "summary": "Heavy rain expected in the south.",
                        "url": "https://www.newswire.lk/monsoon",
                        "context": "",
                    },
                ],
            },
        ],
    }


def fake_response(text: str, chunks=None):
    metadata = SimpleNamespace(grounding_chunks=chunks)
    candidate = SimpleNamespace(grounding_metadata=metadata)
    return SimpleNamespace(text=text, candidates=[candidate])


def web_chunk(uri, title):
    return SimpleNamespace(web=SimpleNamespace(uri=uri, title=title))


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def payload():
    return sample_payload()


@pytest.fixture
def news_data(payload):
    return NewsData.from_dict(payload)


@pytest.fixture(autouse=True)
def dark_terminal(monkeypatch):
    monkeypatch.setenv("COLORFGBG", "15;0")
