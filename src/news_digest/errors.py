from __future__ import annotations


class NewsDigestError(Exception):
    """Base class for errors raised by news_digest."""


class FetchError(NewsDigestError):
    """The AI service call itself failed."""
