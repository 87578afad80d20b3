"""Catalog entries exposed as MCP resources (mcp:///<id>)."""
from __future__ import annotations

import json
from typing import Any
from urllib.parse import urlparse

from mcp_matcher.catalog import CatalogSnapshot, Descriptor

URI_SCHEME = "mcp"
MIME_TYPE = "application/json"


def resource_uri(mcp_id: str) -> str:
    return f"{URI_SCHEME}:///{mcp_id}"


def parse_resource_uri(uri: str) -> str:
    """Extract the MCP id from a resource URI."""
    path = urlparse(uri).path
    return path[1:] if path.startswith("/") else path


def descriptor_json(mcp: Descriptor) -> str:
    return json.dumps(mcp.model_dump(mode="json"), indent=2)


def list_resources(snapshot: CatalogSnapshot) -> list[dict[str, Any]]:
    return [
        {
            "uri": resource_uri(mcp_id),
            "mimeType": MIME_TYPE,
            "name": mcp.name,
            "description": mcp.description,
        }
        for mcp_id, mcp in snapshot.entries.items()
    ]


def read_resource(uri: str, snapshot: CatalogSnapshot) -> dict[str, Any]:
    """Return the descriptor behind a resource URI.

    Raises:
        ValueError: If the URI does not name a catalog entry
    """
    mcp_id = parse_resource_uri(uri)
    mcp = snapshot.get(mcp_id)
    if mcp is None:
        raise ValueError(f"MCP {mcp_id} not found")

    return {
        "contents": [{
            "uri": uri,
            "mimeType": MIME_TYPE,
            "text": descriptor_json(mcp),
        }]
    }
