from __future__ import annotations

import json

import pytest

from conftest import fenced
from news_digest.parser import extract_json_block, parse_breakdown


def test_valid_payload_passes_through_unchanged(payload):
    assert parse_breakdown(fenced(payload)) == payload


def test_extra_fields_are_kept(payload):
    payload["generatedAt"] = "today"
    payload["themes"][0]["stories"][0]["extra"] = 1
    assert parse_breakdown(fenced(payload)) == payload


def test_block_without_json_tag_is_accepted():
    text = '```\n{"overview": [], "themes": []}\n```'
    assert parse_breakdown(text) == {"overview": [], "themes": []}


def test_first_block_wins():
    text = (
        '```json\n{"overview": ["a"], "themes": []}\n```\n'
        '```json\n{"overview": ["b"], "themes": []}\n```'
    )
    assert parse_breakdown(text)["overview"] == ["a"]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "No news today.",
        '{"overview": [], "themes": []}',
        "```json unterminated",
    ],
)
def test_missing_fenced_block_returns_none(text):
    assert parse_breakdown(text) is None


def test_invalid_json_returns_none_without_raising(caplog):
    text = '```json\n{"overview": ["a"], "themes": [}\n```'
    assert parse_breakdown(text) is None
    assert "Failed to parse JSON" in caplog.text


@pytest.mark.parametrize(
    "payload",
    [
        {"overview": ["a"]},
        {"themes": []},
        {"overview": "a", "themes": []},
        {"overview": [], "themes": {}},
        ["overview", "themes"],
        "just a string",
    ],
)
def test_wrong_shape_returns_none(payload):
    assert parse_breakdown("```json\n" + json.dumps(payload) + "\n```") is None


def test_extract_json_block_strips_whitespace():
    assert extract_json_block("```json\n\n  {}  \n\n```") == "{}"


def test_json_block_preferred_over_earlier_untagged_fence():
    text = (
        "Search notes:\n```text\nsearched newswire.lk\n```\n"
        '```json\n{"overview": ["a"], "themes": []}\n```'
    )
    assert parse_breakdown(text) == {"overview": ["a"], "themes": []}


def test_untagged_fence_that_is_not_json_returns_none():
    assert parse_breakdown("```text\nsearched newswire.lk\n```") is None
