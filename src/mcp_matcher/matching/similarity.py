"""Similarity matching: rank MCPs by cosine similarity of embeddings.

Each catalog entry is embedded as "{name}. {description}. {functions}". An
index belongs to exactly one catalog snapshot and is rebuilt from scratch
for any other snapshot.

Scoring rules:
- Entries whose vector has zero norm are left out of the ranking.
- A zero-norm query vector ranks nothing.
- Equal scores keep catalog order.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from ..catalog.models import CatalogSnapshot, MatchResult
from .base import MatchStrategy, OracleUnavailableError

logger = logging.getLogger(__name__)

EmbedFn = Callable[[list[str]], Awaitable[list[list[float]]]]

DEFAULT_TOP_K = 5


def vector_norm(vec: list[float]) -> float:
    return math.sqrt(sum(x * x for x in vec))


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of two vectors; 0.0 if either has zero norm.

    Raises:
        ValueError: If the vectors differ in length
    """
    if len(a) != len(b):
        raise ValueError(f"Vector length mismatch: {len(a)} != {len(b)}")
    norm_a = vector_norm(a)
    norm_b = vector_norm(b)
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return sum(x * y for x, y in zip(a, b)) / (norm_a * norm_b)


@dataclass(frozen=True)
class EmbeddingIndex:
    """Embedding vectors for one catalog snapshot, in catalog order."""
    generation: int
    vectors: Mapping[str, list[float]]
    norms: Mapping[str, float]
    # Snapshot the vectors were built from; generations repeat across stores
    snapshot: CatalogSnapshot | None = field(default=None, compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.vectors)


async def build_index(snapshot: CatalogSnapshot, embed: EmbedFn) -> EmbeddingIndex:
    """Embed every catalog entry.

    Raises:
        OracleUnavailableError: If embedding fails or returns the wrong count
    """
    ids = snapshot.ids()
    texts = [snapshot.entries[mcp_id].as_text() for mcp_id in ids]

    try:
        vectors = await embed(texts) if texts else []
    except Exception as e:
        raise OracleUnavailableError(f"Embedding catalog failed: {e}") from e

    if len(vectors) != len(ids):
        raise OracleUnavailableError(
            f"Embedding returned {len(vectors)} vectors for {len(ids)} MCPs"
        )

    by_id = {mcp_id: list(vec) for mcp_id, vec in zip(ids, vectors)}
    norms = {mcp_id: vector_norm(vec) for mcp_id, vec in by_id.items()}

    skipped = [mcp_id for mcp_id, norm in norms.items() if norm == 0.0]
    if skipped:
        logger.warning(f"Zero-norm embeddings will not be ranked: {', '.join(skipped)}")

    logger.info(f"Built embedding index for generation {snapshot.generation} ({len(by_id)} MCPs)")
    return EmbeddingIndex(
        generation=snapshot.generation,
        vectors=by_id,
        norms=norms,
        snapshot=snapshot,
    )


def rank(query: list[float], index: EmbeddingIndex) -> list[tuple[str, float]]:
    """Score every indexed MCP against a query vector, best first."""
    query_norm = vector_norm(query)
    if query_norm == 0.0:
        return []

    scored: list[tuple[str, float]] = []
    for mcp_id, vec in index.vectors.items():
        norm = index.norms[mcp_id]
        if norm == 0.0:
            continue
        if len(vec) != len(query):
            raise ValueError(f"Vector length mismatch for {mcp_id}: {len(vec)} != {len(query)}")
        score = sum(x * y for x, y in zip(query, vec)) / (query_norm * norm)
        scored.append((mcp_id, score))

    # sorted() is stable: ties stay in catalog order
    return sorted(scored, key=lambda item: item[1], reverse=True)


def _rank_or_fail(query: list[float], index: EmbeddingIndex) -> list[tuple[str, float]]:
    try:
        return rank(query, index)
    except ValueError as e:
        raise OracleUnavailableError(str(e)) from e


async def embed_query(task: str, embed: EmbedFn) -> list[float]:
    try:
        vectors = await embed([task])
    except Exception as e:
        raise OracleUnavailableError(f"Embedding task failed: {e}") from e
    if len(vectors) != 1:
        raise OracleUnavailableError(f"Embedding returned {len(vectors)} vectors for 1 task")
    return vectors[0]


async def find_best(task: str, index: EmbeddingIndex, embed: EmbedFn) -> str | None:
    """Return the id with the highest similarity to the task, or None."""
    if not len(index):
        return None
    query = await embed_query(task, embed)
    ranked = _rank_or_fail(query, index)
    return ranked[0][0] if ranked else None


async def find_top(
    task: str,
    index: EmbeddingIndex,
    embed: EmbedFn,
    k: int = DEFAULT_TOP_K
) -> list[str]:
    """Return up to k ids ordered by descending similarity to the task."""
    if not len(index) or k <= 0:
        return []
    query = await embed_query(task, embed)
    return [mcp_id for mcp_id, _ in _rank_or_fail(query, index)[:k]]


class SimilarityStrategy(MatchStrategy):
    """Ranks catalog entries by embedding similarity to the task."""

    name = "similarity"

    def __init__(self, embed: EmbedFn, top_k: int = DEFAULT_TOP_K):
        self.embed = embed
        self.top_k = top_k
        self._index: EmbeddingIndex | None = None

    async def index_for(self, snapshot: CatalogSnapshot) -> EmbeddingIndex:
        """Get the index for a snapshot, rebuilding for any other snapshot."""
        index = self._index
        if index is None or index.snapshot is not snapshot:
            index = await build_index(snapshot, self.embed)
            self._index = index
        return index

    async def match_strict(self, task: str, snapshot: CatalogSnapshot) -> MatchResult:
        logger.info(f"Matching task by embedding similarity: {task!r}")
        index = await self.index_for(snapshot)
        if not len(index):
            return MatchResult.empty()

        query = await embed_query(task, self.embed)
        ranked = _rank_or_fail(query, index)

        top = [mcp_id for mcp_id, _ in ranked[:self.top_k]]
        if ranked:
            logger.info(f"Similarity best match: {ranked[0][0]} (score {ranked[0][1]:.4f})")
        return MatchResult(
            best_match_id=top[0] if top else None,
            relevant_match_ids=tuple(top),
        )
