"""Oracle matching: ask a chat model to pick MCPs from a catalog listing.

The model sees every catalog entry and must answer with a JSON object:

    {"bestMatchId": "weather", "relevantMatchIds": ["weather", "calendar"]}

The reply is untrusted. `validate_match_reply` coerces wrong shapes to empty
values and drops ids that are not in the catalog before anything else sees it.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Callable

from ..catalog.models import Catalog, CatalogSnapshot, MatchResult
from ..llm import call_llm_json
from .base import MatchStrategy, OracleUnavailableError

logger = logging.getLogger(__name__)

# (prompt, system) -> parsed JSON reply or None
CompleteFn = Callable[[str, str], Awaitable[Any]]

SYSTEM_PROMPT_TEMPLATE = """You are an expert assistant helping to select the most appropriate Model Context Protocol (MCP) component for a given task.
Based on the user's task description and the list of available MCPs below, identify the single best matching MCP ID.
If other MCPs also seem relevant, list their IDs as well.
Respond ONLY with a JSON object containing two keys:
1. 'bestMatchId': A string containing the ID of the single best matching MCP, or null if no single best match is clear.
2. 'relevantMatchIds': An array of strings containing the IDs of all relevant MCPs (including the best match, if one exists). Return an empty array if no MCPs are relevant.

Available MCPs:
{listing}"""


def render_catalog_listing(catalog: Catalog) -> str:
    """Render the catalog as text, one block per MCP, in catalog order."""
    return "\n\n---\n\n".join(
        f"ID: {mcp_id}\n"
        f"Name: {mcp.name}\n"
        f"Description: {mcp.description}\n"
        f"Functions: {', '.join(mcp.functions)}"
        for mcp_id, mcp in catalog.items()
    )


def build_prompts(task: str, catalog: Catalog) -> tuple[str, str]:
    """Build (system, user) prompts for a task."""
    system = SYSTEM_PROMPT_TEMPLATE.format(listing=render_catalog_listing(catalog))
    user = f"Task Description: {task}"
    return system, user


def validate_match_reply(raw: Any, catalog: Mapping[str, Any]) -> MatchResult:
    """Decode an oracle reply into a MatchResult restricted to catalog ids.

    Missing or wrong-typed fields become None / empty. Unknown ids are
    dropped. A valid best id absent from the relevant ids is put first.
    """
    if not isinstance(raw, dict):
        return MatchResult.empty()

    best = raw.get("bestMatchId")
    if not isinstance(best, str) or best not in catalog:
        if best is not None:
            logger.debug(f"Discarding best match id not in catalog: {best!r}")
        best = None

    relevant_raw = raw.get("relevantMatchIds")
    if not isinstance(relevant_raw, list):
        relevant_raw = []

    relevant: list[str] = []
    for mcp_id in relevant_raw:
        if not isinstance(mcp_id, str) or mcp_id not in catalog:
            logger.debug(f"Discarding relevant match id not in catalog: {mcp_id!r}")
            continue
        if mcp_id not in relevant:
            relevant.append(mcp_id)

    if best and best not in relevant:
        relevant.insert(0, best)

    return MatchResult(best_match_id=best, relevant_match_ids=tuple(relevant))


class OracleStrategy(MatchStrategy):
    """Lets a chat-completion model choose from the whole catalog."""

    name = "oracle"

    def __init__(
        self,
        llm_config: dict[str, Any] | None = None,
        complete: CompleteFn | None = None
    ):
        self.llm_config = llm_config
        self._complete = complete or self._call_llm

    async def _call_llm(self, prompt: str, system: str) -> Any:
        return await call_llm_json(prompt, system=system, config_override=self.llm_config)

    async def match_strict(self, task: str, snapshot: CatalogSnapshot) -> MatchResult:
        logger.info(f"Matching task with LLM: {task!r}")
        system, user = build_prompts(task, snapshot.entries)

        try:
            raw = await self._complete(user, system)
        except Exception as e:
            raise OracleUnavailableError(f"LLM call failed: {e}") from e

        if raw is None:
            raise OracleUnavailableError("LLM returned no usable JSON content")

        result = validate_match_reply(raw, snapshot.entries)
        logger.info(
            f"LLM match: bestMatchId={result.best_match_id}, "
            f"relevantMatchIds=[{', '.join(result.relevant_match_ids)}]"
        )
        return result
