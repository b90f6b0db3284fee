from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from ..datamodels import BreakdownResult


class BreakdownSource(ABC):
    """Abstract base class for a provider of news breakdowns."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config

    @abstractmethod
    def fetch_breakdown(self) -> BreakdownResult:
        """Request one breakdown.

        Raises FetchError when the provider cannot be reached. A response that
        cannot be parsed yields a result whose ``data`` is None.
        """
        pass
