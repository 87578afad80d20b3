"""Built-in catalog used when no external catalog is available."""
from __future__ import annotations

from .models import Descriptor

DEFAULT_MCPS: dict[str, Descriptor] = {
    "weather": Descriptor(
        name="Weather MCP",
        description="Provides weather information for locations",
        functions=("getWeather", "getForecast"),
    ),
    "todo": Descriptor(
        name="Todo MCP",
        description="Manages todo items and task lists",
        functions=("addTask", "listTasks", "completeTask"),
    ),
    "calendar": Descriptor(
        name="Calendar MCP",
        description="Manages calendar events and appointments",
        functions=("addEvent", "listEvents", "getAvailability"),
    ),
}


def default_catalog() -> dict[str, Descriptor]:
    """Return a fresh copy of the built-in catalog."""
    return dict(DEFAULT_MCPS)
