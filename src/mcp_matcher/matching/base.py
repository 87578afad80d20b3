"""Matching strategy interface."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ..catalog.models import CatalogSnapshot, MatchResult

logger = logging.getLogger(__name__)


class OracleUnavailableError(RuntimeError):
    """The external oracle failed or returned an unusable reply."""


class MatchStrategy(ABC):
    """Turns a task description into a MatchResult for one catalog snapshot."""

    name: str = "base"

    @abstractmethod
    async def match_strict(self, task: str, snapshot: CatalogSnapshot) -> MatchResult:
        """Match a task, raising OracleUnavailableError when the oracle fails."""

    async def match(self, task: str, snapshot: CatalogSnapshot) -> MatchResult:
        """Match a task; oracle failures yield an empty result."""
        try:
            return await self.match_strict(task, snapshot)
        except OracleUnavailableError as e:
            logger.error(f"{self.name} strategy failed: {e}")
            return MatchResult.empty()
