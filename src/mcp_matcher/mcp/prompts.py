"""Static prompts offered by the server."""
from __future__ import annotations

from typing import Any

from mcp_matcher.catalog import CatalogSnapshot

from .resources import MIME_TYPE, descriptor_json, resource_uri

PROMPTS = {
    "mcp_selection_guide": {
        "description": "Get guidance on selecting the right MCP for your task",
    },
}


def list_prompts() -> list[dict[str, Any]]:
    return [{"name": name, **meta} for name, meta in PROMPTS.items()]


def _text(text: str) -> dict[str, Any]:
    return {"role": "user", "content": {"type": "text", "text": text}}


def get_prompt(name: str, snapshot: CatalogSnapshot) -> dict[str, Any]:
    """Build a prompt's messages with the catalog embedded as resources.

    Raises:
        ValueError: If the prompt name is unknown
    """
    if name not in PROMPTS:
        raise ValueError(f"Unknown prompt: {name}")

    embedded = [
        {
            "role": "user",
            "content": {
                "type": "resource",
                "resource": {
                    "uri": resource_uri(mcp_id),
                    "mimeType": MIME_TYPE,
                    "text": descriptor_json(mcp),
                },
            },
        }
        for mcp_id, mcp in snapshot.entries.items()
    ]

    return {
        "description": PROMPTS[name]["description"],
        "messages": [
            _text("I need guidance on selecting the right MCP for my task. Here are the available MCPs:"),
            *embedded,
            _text(
                "Please help me choose the most appropriate MCP based on my task requirements. "
                "For each MCP, explain what kinds of tasks it's suitable for."
            ),
        ],
    }
