from __future__ import annotations

import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .cache import Cache
from .config import HTTP_TIMEOUT, MIN_ARTICLE_WORDS, REQUEST_HEADERS

logger = logging.getLogger("news_digest")

HOST_PATTERN = re.compile(r"^https?://([^/?#]+)(?:[/?#]|$)", re.I)


def source_from_url(url: Optional[str]) -> str:
    """Return a display host for ``url`` without a leading ``www.``."""
    if not url:
        return ""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if not hostname:
        logger.warning("Could not parse URL for source: %s", url)
        match = HOST_PATTERN.match(url)
        hostname = match.group(1) if match else ""
    return re.sub(r"^www\.", "", hostname)


class ArticleReader:
    """Downloads source articles and extracts their readable text."""

    def __init__(self, cache: Optional[Cache] = None, session: Optional[requests.Session] = None):
        self.cache = cache
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        retries = Retry(
            total=3, backoff_factor=0.3, status_forcelist=[429, 500, 502, 503, 504]
        )
        adapter = HTTPAdapter(max_retries=retries)
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def _fetch(self, url: str) -> Optional[bytes]:
        try:
            logger.debug("Fetching article %s", url)
            resp = self.session.get(url, timeout=HTTP_TIMEOUT)
            resp.raise_for_status()
            return resp.content
        except requests.RequestException as e:
            logger.warning("Failed to fetch article %s: %s", url, e)
            return None

    def get_article(self, url: str) -> Dict[str, Any]:
        """Return ``{"ok": bool, "content": str}`` for the article at ``url``."""
        if self.cache is not None:
            cached = self.cache.get(url)
            if cached is not None:
                return cached

        content = self._fetch(url)
        if not content:
            return {"ok": False, "content": "Failed to fetch article."}

        result = extract_article(content)
        if result["ok"] and self.cache is not None:
            self.cache.set(url, result)
        return result

    def warm(self, url: str) -> None:
        """Fetch ``url`` into the cache if it is not there already."""
        if self.cache is not None and url in self.cache:
            return
        self.get_article(url)


def extract_article(content: bytes) -> Dict[str, Any]:
    try:
        soup = BeautifulSoup(content, "lxml")
    except Exception as e:
        logger.error("Failed to parse article HTML: %s", e)
        return {"ok": False, "content": "Could not extract valid article content."}

    for tag in soup(["script", "style", "nav", "header", "footer", "aside"]):
        tag.decompose()

    title_tag = soup.find("h1") or soup.find("title")
    title = title_tag.get_text(" ", strip=True) if title_tag else ""
    main = soup.find("article") or soup.find("main") or soup
    paras = [p.get_text(" ", strip=True) for p in main.find_all("p")]
    body = "\n\n".join(p for p in paras if p).strip()

    if len(body.split()) < MIN_ARTICLE_WORDS:
        return {"ok": False, "content": "Could not extract valid article content."}

    markdown = f"# {title}\n\n{body}" if title else body
    return {"ok": True, "content": markdown}
