from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

logger = logging.getLogger("news_digest")

JSON_BLOCK_PATTERN = re.compile(r"```json\s*(.+?)\s*```", re.S)
# Untagged fences are only tried when no block is marked as JSON.
FENCED_BLOCK_PATTERN = re.compile(r"```\s*(.+?)\s*```", re.S)


def extract_json_block(text: str) -> Optional[str]:
    """Return the contents of the first ```json block in ``text``.

    Falls back to the first fenced block of any kind when none is tagged.
    """
    if not text:
        return None
    match = JSON_BLOCK_PATTERN.search(text) or FENCED_BLOCK_PATTERN.search(text)
    if not match:
        return None
    return match.group(1)


def parse_breakdown(text: str) -> Optional[Dict[str, Any]]:
    """Decode the news breakdown embedded in model output.

    Returns the decoded object untouched when it carries list-typed
    ``overview`` and ``themes`` fields, and ``None`` otherwise.
    """
    block = extract_json_block(text)
    if block is None:
        logger.error("No valid JSON block found in model response.")
        return None

    try:
        payload = json.loads(block)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse JSON from model response: %s", e)
        return None

    if not isinstance(payload, dict):
        logger.error("Model response JSON is a %s, not an object.", type(payload).__name__)
        return None
    if not isinstance(payload.get("overview"), list) or not isinstance(
        payload.get("themes"), list
    ):
        logger.error("Model response JSON lacks 'overview' and 'themes' lists.")
        return None

    return payload
