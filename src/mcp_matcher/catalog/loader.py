"""Catalog loading from a JSON file with fallback to built-in defaults.

The file is a JSON object mapping MCP ids to descriptors:

    {
      "weather": {
        "name": "Weather MCP",
        "description": "Provides weather information for locations",
        "functions": ["getWeather", "getForecast"]
      }
    }

External entries replace defaults with the same id; all other defaults are kept.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .defaults import default_catalog
from .models import Descriptor

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = "mcp.json"


def parse_catalog(data: object) -> dict[str, Descriptor]:
    """Validate decoded JSON as an id -> Descriptor mapping.

    Raises:
        ValueError: If the top level is not an object or an entry is invalid
    """
    if not isinstance(data, dict):
        raise ValueError(f"Catalog must be a JSON object, got {type(data).__name__}")

    entries: dict[str, Descriptor] = {}
    for mcp_id, raw in data.items():
        try:
            entries[mcp_id] = Descriptor.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Invalid descriptor for MCP '{mcp_id}': {e}") from e
    return entries


def merge_catalogs(
    base: dict[str, Descriptor],
    overlay: dict[str, Descriptor]
) -> dict[str, Descriptor]:
    """Overlay entries onto a base catalog, replacing whole descriptors per id."""
    merged = dict(base)
    merged.update(overlay)
    return merged


def load_catalog(path: str | Path = DEFAULT_CATALOG_PATH) -> tuple[dict[str, Descriptor], bool]:
    """Load MCPs from a JSON file on top of the built-in defaults.

    Args:
        path: Path to the catalog file

    Returns:
        Tuple of (catalog, success). On any failure the catalog is the
        built-in default set and success is False.
    """
    catalog_path = Path(path)
    logger.info(f"Attempting to load MCPs from: {catalog_path}")

    if not catalog_path.exists():
        defaults = default_catalog()
        logger.warning(f"MCP file not found at: {catalog_path}, using {len(defaults)} default MCPs")
        return defaults, False

    try:
        data = json.loads(catalog_path.read_text(encoding="utf-8"))
        external = parse_catalog(data)
    except (OSError, ValueError) as e:
        # json.JSONDecodeError and UnicodeDecodeError are ValueErrors
        defaults = default_catalog()
        logger.warning(f"Error loading MCPs from {catalog_path}: {e}")
        logger.warning(f"Using {len(defaults)} default MCPs due to error")
        return defaults, False

    merged = merge_catalogs(default_catalog(), external)

    logger.info(f"Successfully loaded MCPs from {catalog_path}")
    logger.info(f"MCPs from file: {len(external)}")
    logger.info(f"Total MCPs available: {len(merged)}")
    logger.debug(f"Available MCP IDs: {', '.join(merged)}")

    return merged, True
