from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types

from ..config import DEFAULT_MODEL, FETCH_FAILED_MESSAGE
from ..datamodels import BreakdownResult, GroundingChunk, NewsData
from ..errors import FetchError
from ..parser import parse_breakdown
from ..prompts import build_breakdown_prompt
from .base import BreakdownSource

logger = logging.getLogger("news_digest")


def create_client(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


class GeminiSource(BreakdownSource):
    """Fetches the news breakdown from Gemini, optionally search-grounded."""

    def __init__(self, config: Dict[str, Any], client: Any, prompt: Optional[str] = None):
        super().__init__(config)
        self.client = client
        self.model = self.config.get("model") or DEFAULT_MODEL
        self.use_grounding = bool(self.config.get("use_grounding", True))
        self.prompt = prompt or build_breakdown_prompt()

    def _request_config(self) -> Optional[types.GenerateContentConfig]:
        if not self.use_grounding:
            return None
        return types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())],
        )

    def fetch_breakdown(self) -> BreakdownResult:
        logger.debug("Requesting breakdown from %s (grounding=%s)", self.model, self.use_grounding)
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=self.prompt,
                config=self._request_config(),
            )
        except Exception as e:
            logger.error("Error fetching news from Gemini API: %s", e)
            raise FetchError(FETCH_FAILED_MESSAGE) from e

        sources = extract_grounding_chunks(response)
        payload = parse_breakdown(getattr(response, "text", None) or "")
        if payload is None:
            return BreakdownResult(data=None, sources=sources)

        data = NewsData.from_dict(payload)
        logger.info(
            "Fetched breakdown: %d overview points, %d themes, %d sources",
            len(data.overview),
            len(data.themes),
            len(sources),
        )
        return BreakdownResult(data=data, sources=sources)


def extract_grounding_chunks(response: Any) -> List[GroundingChunk]:
    """Collect the cited web sources that have both a URI and a title."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []
    out: List[GroundingChunk] = []
    for chunk in chunks:
        source = GroundingChunk.from_response_chunk(chunk)
        if source is not None:
            out.append(source)
    return out
