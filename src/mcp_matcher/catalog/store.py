"""Process-wide catalog holder.

Each load publishes a new immutable CatalogSnapshot by replacing a single
reference. Readers take `store.current` once and keep using that snapshot
for the rest of their request, so a concurrent reload is never observed
half-applied.
"""
from __future__ import annotations

import logging
from pathlib import Path

from .defaults import default_catalog
from .loader import DEFAULT_CATALOG_PATH, load_catalog
from .models import CatalogSnapshot

logger = logging.getLogger(__name__)


class CatalogStore:
    """Holds the current catalog snapshot."""

    def __init__(self, snapshot: CatalogSnapshot | None = None):
        if snapshot is None:
            snapshot = CatalogSnapshot(generation=0, entries=default_catalog())
        self._current = snapshot

    @property
    def current(self) -> CatalogSnapshot:
        return self._current

    def reload(self, path: str | Path = DEFAULT_CATALOG_PATH) -> bool:
        """Load the catalog file and publish it as the next generation.

        Returns:
            True if the file was loaded, False if defaults were used
        """
        entries, loaded = load_catalog(path)
        snapshot = CatalogSnapshot(
            generation=self._current.generation + 1,
            entries=entries,
            source=str(path),
            loaded_from_file=loaded,
        )
        self._current = snapshot
        logger.info(
            f"Catalog generation {snapshot.generation} published "
            f"({len(snapshot)} MCPs, from_file={loaded})"
        )
        return loaded


_store: CatalogStore | None = None


def get_catalog_store() -> CatalogStore:
    """Get the process-wide catalog store."""
    global _store
    if _store is None:
        _store = CatalogStore()
    return _store


def set_catalog_store(store: CatalogStore) -> None:
    """Replace the process-wide catalog store."""
    global _store
    _store = store
