from __future__ import annotations

import logging
from typing import Callable, Optional

from .datamodels import NewsStory

logger = logging.getLogger("news_digest")

COPIED = "Copied!"
COPY_FAILED = "Failed to copy"


def share_text(story: NewsStory) -> str:
    text = f"{story.title}\n\n{story.summary}"
    if story.url:
        text += f"\n\nSource: {story.url}"
    return text


class Sharer:
    """Copies a story to the clipboard and reports the feedback to show.

    ``copy`` receives plain text; the app passes ``App.copy_to_clipboard``.
    """

    def __init__(self, copy: Optional[Callable[[str], None]] = None):
        self._copy = copy

    def share(self, story: NewsStory) -> str:
        if self._copy is None:
            logger.error("Failed to copy: no clipboard available")
            return COPY_FAILED
        try:
            self._copy(share_text(story))
        except Exception as e:
            logger.error("Failed to copy: %s", e)
            return COPY_FAILED
        return COPIED
