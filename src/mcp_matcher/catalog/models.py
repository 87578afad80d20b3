"""Catalog record types."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field


class Descriptor(BaseModel):
    """A named, described MCP with the functions it exposes."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., description="Display name")
    description: str = Field(..., description="What the MCP does")
    functions: tuple[str, ...] = Field(default_factory=tuple, description="Callable function names")

    def as_text(self) -> str:
        """Text used to embed this descriptor."""
        return f"{self.name}. {self.description}. {', '.join(self.functions)}"


Catalog = Mapping[str, Descriptor]


@dataclass(frozen=True)
class CatalogSnapshot:
    """One immutable generation of the catalog."""
    generation: int
    entries: Catalog
    source: str | None = None
    loaded_from_file: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __contains__(self, mcp_id: object) -> bool:
        return mcp_id in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, mcp_id: str) -> Descriptor | None:
        return self.entries.get(mcp_id)

    def ids(self) -> list[str]:
        return list(self.entries.keys())


@dataclass(frozen=True)
class MatchResult:
    """Best and relevant MCP ids for a task, validated against a catalog."""
    best_match_id: str | None = None
    relevant_match_ids: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> MatchResult:
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.best_match_id is None and not self.relevant_match_ids

    def to_dict(self) -> dict:
        return {
            "bestMatchId": self.best_match_id,
            "relevantMatchIds": list(self.relevant_match_ids),
        }
