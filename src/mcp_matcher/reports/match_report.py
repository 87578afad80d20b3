"""Human-readable rendering of match results."""
from __future__ import annotations

from ..catalog.models import Catalog, MatchResult

NO_MATCH_TEXT = "No matching MCP found.\n"
BEST_MARK = "✓ "


def _describe(mcp_id: str, catalog: Catalog, mark: str = "") -> str:
    mcp = catalog.get(mcp_id)
    if mcp is None:
        # Catalog may have been reloaded since matching
        return f"- {mark}ID: {mcp_id} (details not found in the current catalog)\n\n"
    return (
        f"- {mark}**{mcp.name}** (ID: {mcp_id})\n"
        f"  Description: {mcp.description}\n"
        f"  Functions: {', '.join(mcp.functions)}\n\n"
    )


def format_match_report(result: MatchResult, catalog: Catalog) -> str:
    """Render a match result with details from the catalog."""
    if result.is_empty:
        return NO_MATCH_TEXT

    parts: list[str] = []

    if result.best_match_id:
        parts.append("## Best Matching MCP\n\n")
        parts.append(_describe(result.best_match_id, catalog))

    if result.relevant_match_ids:
        parts.append("## Relevant MCPs\n\n")
        for mcp_id in result.relevant_match_ids:
            mark = BEST_MARK if mcp_id == result.best_match_id else ""
            parts.append(_describe(mcp_id, catalog, mark))

    return "".join(parts)
