"""Strategy chain: primary matcher with optional fallback."""
from __future__ import annotations

import logging
from functools import partial

from ..catalog.models import CatalogSnapshot, MatchResult
from ..config import ServerConfig, load_server_config
from ..embeddings import embed_texts
from .base import MatchStrategy, OracleUnavailableError
from .oracle import OracleStrategy
from .similarity import SimilarityStrategy

logger = logging.getLogger(__name__)


class TaskMatcher:
    """Tries strategies in order until one reaches its oracle."""

    def __init__(self, strategies: list[MatchStrategy]):
        if not strategies:
            raise ValueError("TaskMatcher needs at least one strategy")
        self.strategies = strategies

    @property
    def strategy_names(self) -> list[str]:
        return [s.name for s in self.strategies]

    async def match(self, task: str, snapshot: CatalogSnapshot) -> MatchResult:
        for strategy in self.strategies:
            try:
                return await strategy.match_strict(task, snapshot)
            except OracleUnavailableError as e:
                logger.warning(f"{strategy.name} strategy unavailable: {e}")

        logger.error(f"All strategies failed ({', '.join(self.strategy_names)}), returning no match")
        return MatchResult.empty()


def build_strategy(kind: str, config: ServerConfig) -> MatchStrategy:
    if kind == "oracle":
        return OracleStrategy(llm_config=config.llm.model_dump())
    if kind == "similarity":
        return SimilarityStrategy(
            embed=partial(embed_texts, config=config.embeddings),
            top_k=config.matching.top_k,
        )
    raise ValueError(f"Unknown strategy: {kind}")


def build_matcher(config: ServerConfig) -> TaskMatcher:
    """Build the strategy chain described by the matching config."""
    strategies = [build_strategy(config.matching.strategy, config)]
    if config.matching.fallback != "none":
        strategies.append(build_strategy(config.matching.fallback, config))
    return TaskMatcher(strategies)


_matcher: TaskMatcher | None = None


def set_matcher(matcher: TaskMatcher) -> None:
    """Set the process-wide matcher (called by the server on startup)."""
    global _matcher
    _matcher = matcher
    logger.info(f"Matcher set: {' -> '.join(matcher.strategy_names)}")


def get_matcher() -> TaskMatcher:
    """Get the process-wide matcher, building one from the environment if unset."""
    global _matcher
    if _matcher is None:
        _matcher = build_matcher(load_server_config())
    return _matcher
