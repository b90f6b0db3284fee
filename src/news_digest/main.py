#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from .app import NewsDigestApp
from .articles import ArticleReader
from .cache import Cache
from .config import API_KEY_ENV_VARS, CACHE_DIR, get_api_key, load_config, setup_logging
from .datamodels import THEME_PREFERENCES
from .sources.gemini import GeminiSource, create_client

logger = logging.getLogger("news_digest")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sri Lanka News Digest")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--theme",
        choices=THEME_PREFERENCES,
        help="Use this colour scheme for this run without saving it",
    )
    parser.add_argument("--model", help="Gemini model to query")
    parser.add_argument(
        "--no-grounding",
        action="store_true",
        help="Do not ask Gemini to ground its answer in Google Search",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        help="Delete the cached articles and exit",
    )
    return parser


# --- Entrypoint ---
def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()
    args = build_parser().parse_args(argv)

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    cache = Cache(CACHE_DIR, ttl=config["cache_ttl"])
    if args.clear_cache:
        cache.clear()
        print(f"Cleared article cache in {CACHE_DIR}")
        return

    if args.model:
        config["model"] = args.model
    if args.no_grounding:
        config["use_grounding"] = False

    source = None
    startup_error = None
    api_key = get_api_key()
    if api_key:
        source = GeminiSource(config, client=create_client(api_key))
    else:
        names = " or ".join(f"`{name}`" for name in API_KEY_ENV_VARS)
        startup_error = f"Set {names} in the environment or a `.env` file."
        logger.error("No Gemini API key configured")

    reader = ArticleReader(cache=cache)
    logger.info("Using model %s", config["model"])

    try:
        app = NewsDigestApp(
            source=source,
            config=config,
            reader=reader,
            theme=args.theme,
            startup_error=startup_error,
        )
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)


if __name__ == "__main__":
    main()
