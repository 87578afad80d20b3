"""Task-to-MCP matching strategies."""
from .base import MatchStrategy, OracleUnavailableError
from .oracle import OracleStrategy, build_prompts, render_catalog_listing, validate_match_reply
from .similarity import (
    EmbeddingIndex,
    SimilarityStrategy,
    build_index,
    cosine_similarity,
    find_best,
    find_top,
    rank,
)
from .selector import TaskMatcher, build_matcher, get_matcher, set_matcher

__all__ = [
    "MatchStrategy",
    "OracleUnavailableError",
    "OracleStrategy",
    "build_prompts",
    "render_catalog_listing",
    "validate_match_reply",
    "EmbeddingIndex",
    "SimilarityStrategy",
    "build_index",
    "cosine_similarity",
    "find_best",
    "find_top",
    "rank",
    "TaskMatcher",
    "build_matcher",
    "get_matcher",
    "set_matcher",
]
