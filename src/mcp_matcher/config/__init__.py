"""Configuration management for MCP Matcher."""
from .settings import Settings, settings
from .server import (
    ServerConfig,
    LLMConfig,
    EmbeddingsConfig,
    MatchingConfig,
    LoggingConfig,
    load_server_config,
)

__all__ = [
    "Settings",
    "settings",
    "ServerConfig",
    "LLMConfig",
    "EmbeddingsConfig",
    "MatchingConfig",
    "LoggingConfig",
    "load_server_config",
]
