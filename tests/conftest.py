"""Shared pytest fixtures for all tests."""
import json
import re

import pytest

from mcp_matcher.catalog import CatalogSnapshot, Descriptor, MatchResult
from mcp_matcher.matching import MatchStrategy

# Dimensions of the keyword embedding used in tests
KEYWORD_GROUPS = [
    ("weather", "forecast", "rain"),
    ("todo", "task", "tasks"),
    ("calendar", "meeting", "event", "events", "appointments"),
]


def keyword_vector(text: str) -> list[float]:
    words = re.findall(r"[a-z]+", text.lower())
    return [float(sum(word in group for word in words)) for group in KEYWORD_GROUPS]


class KeywordEmbedder:
    """Deterministic stand-in for an embedding oracle."""

    def __init__(self):
        self.calls: list[list[str]] = []

    async def __call__(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [keyword_vector(t) for t in texts]


class StaticStrategy(MatchStrategy):
    """Returns a fixed result, or raises a given error."""

    def __init__(self, result: MatchResult | None = None, error: Exception | None = None, name: str = "static"):
        self.result = result or MatchResult.empty()
        self.error = error
        self.name = name
        self.calls: list[tuple[str, CatalogSnapshot]] = []

    async def match_strict(self, task, snapshot):
        self.calls.append((task, snapshot))
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def keyword_embedder():
    return KeywordEmbedder()


@pytest.fixture
def weather_todo_snapshot():
    """Catalog holding only weather and todo."""
    return CatalogSnapshot(
        generation=1,
        entries={
            "weather": Descriptor(
                name="Weather MCP",
                description="Provides weather information for locations",
                functions=["getWeather", "getForecast"],
            ),
            "todo": Descriptor(
                name="Todo MCP",
                description="Manages todo items and task lists",
                functions=["addTask", "listTasks", "completeTask"],
            ),
        },
    )


@pytest.fixture
def write_catalog(tmp_path):
    """Write a catalog dict (or raw text) to a temp mcp.json and return its path."""
    def _write(data, name: str = "mcp.json"):
        path = tmp_path / name
        path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def make_strategy():
    """Factory for StaticStrategy instances."""
    return StaticStrategy
