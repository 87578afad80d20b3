"""MCP catalog: descriptor records, loading and the swappable snapshot store."""
from .models import Catalog, CatalogSnapshot, Descriptor, MatchResult
from .defaults import DEFAULT_MCPS, default_catalog
from .loader import DEFAULT_CATALOG_PATH, load_catalog, merge_catalogs, parse_catalog
from .store import CatalogStore, get_catalog_store, set_catalog_store

__all__ = [
    "Catalog",
    "CatalogSnapshot",
    "Descriptor",
    "MatchResult",
    "DEFAULT_MCPS",
    "default_catalog",
    "DEFAULT_CATALOG_PATH",
    "load_catalog",
    "merge_catalogs",
    "parse_catalog",
    "CatalogStore",
    "get_catalog_store",
    "set_catalog_store",
]
