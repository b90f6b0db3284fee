from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional
from urllib.parse import urlparse

from .config import PREFETCH_MARKER

logger = logging.getLogger("news_digest")


@dataclass(frozen=True)
class PrefetchHint:
    url: str
    marker: str = PREFETCH_MARKER


def is_valid_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class PrefetchManager:
    """Keeps one prefetch hint per story URL of the current breakdown.

    Each ``update`` replaces every hint carrying this manager's marker. When a
    ``warm`` callable is given, it is run for each new hint on a thread pool so
    the article is ready before the user opens it.
    """

    def __init__(
        self,
        warm: Optional[Callable[[str], None]] = None,
        max_workers: int = 4,
        marker: str = PREFETCH_MARKER,
    ):
        self.marker = marker
        self._warm = warm
        self._hints: Dict[str, PrefetchHint] = {}
        self._futures: List[Future] = []
        self._executor: Optional[ThreadPoolExecutor] = None
        if warm is not None:
            self._executor = ThreadPoolExecutor(
                max_workers=max_workers, thread_name_prefix="prefetch"
            )

    @property
    def hints(self) -> List[PrefetchHint]:
        return list(self._hints.values())

    def clear(self) -> None:
        """Remove the hints installed by this manager."""
        for future in self._futures:
            future.cancel()
        self._futures = []
        self._hints = {
            url: hint for url, hint in self._hints.items() if hint.marker != self.marker
        }

    def update(self, urls: Iterable[Optional[str]]) -> List[PrefetchHint]:
        self.clear()
        for url in dict.fromkeys(u for u in urls if u):
            if not is_valid_url(url):
                logger.warning("Skipping prefetch for invalid URL: %s", url)
                continue
            self._hints[url] = PrefetchHint(url, self.marker)
            if self._executor is not None:
                self._futures.append(self._executor.submit(self._run_warm, url))
        logger.debug("Installed %d prefetch hints", len(self._hints))
        return self.hints

    def _run_warm(self, url: str) -> None:
        try:
            self._warm(url)
        except Exception as e:
            logger.warning("Prefetch failed for %s: %s", url, e)

    def shutdown(self) -> None:
        self.clear()
        if self._executor is not None:
            self._executor.shutdown(wait=False)
