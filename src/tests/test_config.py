from __future__ import annotations

import json
import time
from unittest.mock import patch

import pytest

from news_digest.cache import Cache
from news_digest.config import DEFAULT_CONFIG, get_api_key, load_config
from news_digest.main import build_parser, main


def test_missing_config_uses_defaults(tmp_path):
    assert load_config(str(tmp_path / "missing.json")) == DEFAULT_CONFIG


def test_config_overrides_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"model": "gemini-pro", "prefetch": False}))
    config = load_config(str(path))
    assert config["model"] == "gemini-pro"
    assert config["prefetch"] is False
    assert config["reveal_delay"] == DEFAULT_CONFIG["reveal_delay"]


def test_corrupt_config_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{oops")
    assert load_config(str(path)) == DEFAULT_CONFIG


def test_api_key_lookup_order():
    assert get_api_key({"GEMINI_API_KEY": "a", "API_KEY": "b"}) == "a"
    assert get_api_key({"API_KEY": "b"}) == "b"
    assert get_api_key({"GEMINI_API_KEY": ""}) is None


def test_cli_flags():
    args = build_parser().parse_args(["--theme", "light", "--no-grounding", "--model", "m"])
    assert args.theme == "light"
    assert args.no_grounding
    assert args.model == "m"
    assert not args.debug
    assert not args.clear_cache


def test_cache_entries_expire(tmp_path):
    cache = Cache(str(tmp_path), ttl=10)
    cache.set("https://a.lk/1", {"ok": True})
    assert cache.get("https://a.lk/1") == {"ok": True}
    assert "https://a.lk/1" in cache
    with patch("news_digest.cache.time.time", return_value=time.time() + 60):
        assert cache.get("https://a.lk/1") is None
    cache.clear()
    assert cache.get("https://a.lk/1") is None


@pytest.fixture
def patched_main(tmp_path):
    with patch("news_digest.main.load_dotenv"), patch(
        "news_digest.main.setup_logging", return_value=None
    ), patch("news_digest.main.load_config", return_value=dict(DEFAULT_CONFIG)), patch(
        "news_digest.main.CACHE_DIR", str(tmp_path)
    ), patch("news_digest.main.NewsDigestApp") as app_cls:
        yield app_cls


def test_clear_cache_flag_empties_cache_and_exits(tmp_path, patched_main):
    cache = Cache(str(tmp_path), ttl=3600)
    cache.set("https://a.lk/1", {"ok": True, "content": "text"})
    assert list(tmp_path.iterdir())

    main(["--clear-cache"])

    assert list(tmp_path.iterdir()) == []
    patched_main.assert_not_called()


def test_missing_api_key_starts_on_error_screen(patched_main, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)

    main([])

    kwargs = patched_main.call_args.kwargs
    assert kwargs["source"] is None
    assert "GEMINI_API_KEY" in kwargs["startup_error"]
    patched_main.return_value.run.assert_called_once()
