from .base import BreakdownSource
from .gemini import GeminiSource, create_client

__all__ = ["BreakdownSource", "GeminiSource", "create_client"]
