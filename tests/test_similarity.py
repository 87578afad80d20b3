"""Tests for embedding similarity matching.

Uses a keyword-count embedder instead of a real embedding model.
"""
import math

import pytest
from unittest.mock import AsyncMock

from mcp_matcher.catalog import CatalogSnapshot, CatalogStore, DEFAULT_MCPS, Descriptor, MatchResult
from mcp_matcher.matching import (
    EmbeddingIndex,
    OracleUnavailableError,
    SimilarityStrategy,
    build_index,
    cosine_similarity,
    find_best,
    find_top,
    rank,
)
from mcp_matcher.matching.similarity import vector_norm


def index_from_vectors(vectors: dict[str, list[float]], generation: int = 0) -> EmbeddingIndex:
    return EmbeddingIndex(
        generation=generation,
        vectors=vectors,
        norms={mcp_id: vector_norm(vec) for mcp_id, vec in vectors.items()},
    )


def embed_returning(vector: list[float]):
    return AsyncMock(return_value=[vector])


@pytest.fixture
def default_snapshot():
    return CatalogStore().current


# =============================================================================
# Cosine similarity
# =============================================================================

class TestCosineSimilarity:

    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 5.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 1.0], [-1.0, -1.0]) == pytest.approx(-1.0)

    def test_symmetric(self):
        a, b = [0.3, -1.2, 4.0], [2.0, 0.5, 1.5]
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_scale_invariant(self):
        a, b = [0.3, -1.2, 4.0], [2.0, 0.5, 1.5]
        scaled = [x * 17.5 for x in b]
        assert cosine_similarity(a, scaled) == pytest.approx(cosine_similarity(a, b))

    def test_zero_norm_scores_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
        assert cosine_similarity([1.0, 2.0], [0.0, 0.0]) == 0.0

    def test_length_mismatch_raises(self):
        with pytest.raises(ValueError, match="mismatch"):
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])

    def test_known_value(self):
        # [1,2] . [2,1] = 4, |a||b| = 5
        assert cosine_similarity([1.0, 2.0], [2.0, 1.0]) == pytest.approx(0.8)


# =============================================================================
# Ranking
# =============================================================================

def test_rank_is_unchanged_by_scaling_an_indexed_vector():
    query = [1.0, 0.5, 0.2]
    vectors = {"a": [1.0, 0.0, 0.0], "b": [0.6, 0.6, 0.0], "c": [0.0, 0.1, 1.0]}
    original = [mcp_id for mcp_id, _ in rank(query, index_from_vectors(vectors))]

    for mcp_id in vectors:
        scaled = dict(vectors)
        scaled[mcp_id] = [x * 42.0 for x in vectors[mcp_id]]
        assert [i for i, _ in rank(query, index_from_vectors(scaled))] == original


def test_rank_ties_keep_catalog_order():
    index = index_from_vectors({"z": [1.0, 0.0], "a": [2.0, 0.0], "m": [0.0, 1.0]})

    ranked = rank([1.0, 0.0], index)

    assert [mcp_id for mcp_id, _ in ranked] == ["z", "a", "m"]


def test_rank_skips_zero_norm_entries():
    index = index_from_vectors({"broken": [0.0, 0.0], "ok": [1.0, 1.0]})

    assert [mcp_id for mcp_id, _ in rank([1.0, 0.0], index)] == ["ok"]


def test_rank_zero_query_ranks_nothing():
    index = index_from_vectors({"ok": [1.0, 1.0]})

    assert rank([0.0, 0.0], index) == []


# =============================================================================
# Index building and lookups
# =============================================================================

@pytest.mark.asyncio
async def test_build_index_embeds_descriptor_text(default_snapshot, keyword_embedder):
    index = await build_index(default_snapshot, keyword_embedder)

    assert index.generation == default_snapshot.generation
    assert list(index.vectors) == ["weather", "todo", "calendar"]
    assert keyword_embedder.calls == [[mcp.as_text() for mcp in DEFAULT_MCPS.values()]]


@pytest.mark.asyncio
async def test_build_index_rejects_wrong_vector_count(default_snapshot):
    with pytest.raises(OracleUnavailableError, match="2 vectors for 3"):
        await build_index(default_snapshot, AsyncMock(return_value=[[1.0], [1.0]]))


@pytest.mark.asyncio
async def test_build_index_wraps_embedding_errors(default_snapshot):
    embed = AsyncMock(side_effect=RuntimeError("OpenAI embedding failed: 401"))

    with pytest.raises(OracleUnavailableError, match="401"):
        await build_index(default_snapshot, embed)


@pytest.mark.asyncio
async def test_find_top_returns_all_entries_of_small_catalog(default_snapshot, keyword_embedder):
    index = await build_index(default_snapshot, keyword_embedder)
    task = "check the weather forecast before the meeting"

    top = await find_top(task, index, keyword_embedder, k=5)

    assert top == ["weather", "calendar", "todo"]
    assert len(set(top)) == 3
    query = [2.0, 0.0, 1.0]
    scores = [cosine_similarity(query, index.vectors[mcp_id]) for mcp_id in top]
    assert scores == sorted(scores, reverse=True)


@pytest.mark.asyncio
async def test_find_top_limits_to_k(default_snapshot, keyword_embedder):
    index = await build_index(default_snapshot, keyword_embedder)

    assert await find_top("add a task", index, keyword_embedder, k=1) == ["todo"]


@pytest.mark.asyncio
async def test_find_best(default_snapshot, keyword_embedder):
    index = await build_index(default_snapshot, keyword_embedder)

    assert await find_best("Will it rain tomorrow?", index, keyword_embedder) == "weather"
    assert await find_best("book a meeting", index, keyword_embedder) == "calendar"


@pytest.mark.asyncio
async def test_find_best_tie_goes_to_first_entry():
    index = index_from_vectors({"first": [3.0, 4.0], "second": [6.0, 8.0]})

    assert await find_best("x", index, embed_returning([3.0, 4.0])) == "first"


@pytest.mark.asyncio
async def test_lookups_on_empty_index():
    index = index_from_vectors({})
    embed = AsyncMock()

    assert await find_best("anything", index, embed) is None
    assert await find_top("anything", index, embed) == []
    embed.assert_not_called()


# =============================================================================
# Strategy
# =============================================================================

@pytest.mark.asyncio
async def test_similarity_strategy_match(default_snapshot, keyword_embedder):
    strategy = SimilarityStrategy(keyword_embedder, top_k=2)

    result = await strategy.match("what's the weather forecast", default_snapshot)

    assert result.best_match_id == "weather"
    assert len(result.relevant_match_ids) == 2
    assert result.relevant_match_ids[0] == "weather"


@pytest.mark.asyncio
async def test_similarity_strategy_reuses_index_within_generation(default_snapshot, keyword_embedder):
    strategy = SimilarityStrategy(keyword_embedder)

    await strategy.match("weather", default_snapshot)
    await strategy.match("task", default_snapshot)

    # One catalog embedding plus one query embedding per match
    assert len(keyword_embedder.calls) == 3
    assert len(keyword_embedder.calls[0]) == 3


@pytest.mark.asyncio
async def test_similarity_strategy_rebuilds_index_on_reload(write_catalog, keyword_embedder):
    store = CatalogStore()
    strategy = SimilarityStrategy(keyword_embedder)
    await strategy.match("weather", store.current)

    store.reload(write_catalog({"meetings": {
        "name": "Meeting Rooms",
        "description": "Books meeting rooms for an event",
        "functions": ["bookRoom"],
    }}))
    result = await strategy.match("book a meeting room", store.current)

    index = await strategy.index_for(store.current)
    assert index.generation == store.current.generation
    assert "meetings" in index.vectors
    assert result.best_match_id in store.current
    # Catalog embedded twice: once per generation
    assert sum(1 for call in keyword_embedder.calls if len(call) > 1) == 2


@pytest.mark.asyncio
async def test_similarity_strategy_rebuilds_for_other_catalog_at_same_generation(keyword_embedder):
    strategy = SimilarityStrategy(keyword_embedder)
    first = CatalogSnapshot(generation=0, entries=DEFAULT_MCPS)
    other = CatalogStore(CatalogSnapshot(generation=0, entries={
        "github": Descriptor(name="GitHub MCP", description="Tracks tasks in repositories"),
    })).current

    await strategy.match("what's the weather forecast", first)
    result = await strategy.match("what's the weather forecast", other)

    assert set(result.relevant_match_ids) <= {"github"}
    assert list((await strategy.index_for(other)).vectors) == ["github"]


@pytest.mark.asyncio
async def test_find_top_dimension_mismatch_is_oracle_failure():
    index = index_from_vectors({"a": [1.0, 0.0], "b": [0.0, 1.0]})

    with pytest.raises(OracleUnavailableError, match="mismatch"):
        await find_top("x", index, embed_returning([1.0, 0.0, 0.0]))

    with pytest.raises(OracleUnavailableError, match="mismatch"):
        await find_best("x", index, embed_returning([1.0, 0.0, 0.0]))


@pytest.mark.asyncio
async def test_similarity_strategy_empty_catalog(keyword_embedder):
    snapshot = CatalogSnapshot(generation=5, entries={})

    result = await SimilarityStrategy(keyword_embedder).match("anything", snapshot)

    assert result == MatchResult.empty()


@pytest.mark.asyncio
async def test_similarity_strategy_failure(default_snapshot):
    strategy = SimilarityStrategy(AsyncMock(side_effect=RuntimeError("down")))

    with pytest.raises(OracleUnavailableError):
        await strategy.match_strict("weather", default_snapshot)

    assert (await strategy.match("weather", default_snapshot)).is_empty


@pytest.mark.asyncio
async def test_similarity_strategy_dimension_mismatch_is_oracle_failure(default_snapshot):
    vectors = [[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]]

    async def embed(texts):
        return vectors if len(texts) == 3 else [[1.0, 0.0, 0.0]]

    with pytest.raises(OracleUnavailableError, match="mismatch"):
        await SimilarityStrategy(embed).match_strict("x", default_snapshot)


def test_vector_norm():
    assert vector_norm([3.0, 4.0]) == pytest.approx(5.0)
    assert math.isclose(vector_norm([]), 0.0)
