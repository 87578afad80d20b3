# Tool registry for MCP server
from __future__ import annotations

from typing import Any, Callable, Awaitable

from mcp_matcher.catalog import get_catalog_store
from mcp_matcher.matching import get_matcher
from mcp_matcher.reports import format_match_report

TOOL_REGISTRY: dict[str, Callable[..., Awaitable[Any]]] = {}

def tool(name: str):
    def deco(fn):
        TOOL_REGISTRY[name] = fn
        return fn
    return deco


@tool("match_mcp")
async def match_mcp(taskDescription: str | None = None) -> str:
    """Find the MCPs that best fit a task description.

    Args:
        taskDescription: Natural-language description of the task

    Returns:
        Text report of the best and relevant MCPs

    Raises:
        ValueError: If the task description is empty
    """
    task = str(taskDescription or "").strip()
    if not task:
        raise ValueError("Task description is required")

    # Matching and rendering must see the same catalog generation
    snapshot = get_catalog_store().current
    result = await get_matcher().match(task, snapshot)
    return format_match_report(result, snapshot.entries)
