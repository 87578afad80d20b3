"""Server configuration loading and validation.

Loads YAML configuration for the MCP Matcher server, or builds it from the
environment when no file is given.
"""
from __future__ import annotations
import os
import yaml
from pathlib import Path
from typing import Literal
from pydantic import BaseModel, Field, field_validator, model_validator

from .settings import Settings, default_base_url, default_fallback


def _with_provider_base_url(data):
    """Fill an absent base_url from the provider."""
    if isinstance(data, dict) and not data.get("base_url"):
        data = {**data, "base_url": default_base_url(data.get("provider", "openai"))}
    return data


class LLMConfig(BaseModel):
    """Chat-completion oracle configuration."""
    provider: Literal["openai", "ollama"] = Field("openai", description="Chat provider")
    model: str = Field("gpt-4o-mini", description="Model name")
    base_url: str = Field("https://api.openai.com", description="Provider API URL")
    api_key: str = Field("", description="API key (OpenAI-compatible providers)")
    temperature: float = Field(0.2, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(1000, ge=1, description="Completion token limit")
    timeout: float = Field(60.0, gt=0, description="Request timeout (seconds)")

    @model_validator(mode="before")
    @classmethod
    def default_base_url_for_provider(cls, data):
        return _with_provider_base_url(data)


class EmbeddingsConfig(BaseModel):
    """Embedding oracle configuration."""
    provider: Literal["openai", "ollama"] = Field("openai", description="Embedding provider")
    model: str = Field("text-embedding-3-small", description="Model name")
    base_url: str = Field("https://api.openai.com", description="Provider API URL")
    api_key: str = Field("", description="API key (OpenAI-compatible providers)")
    batch_size: int = Field(32, ge=1, le=2048, description="Texts per request")
    timeout: float = Field(60.0, gt=0, description="Request timeout (seconds)")

    @model_validator(mode="before")
    @classmethod
    def default_base_url_for_provider(cls, data):
        return _with_provider_base_url(data)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate provider URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with 'http://' or 'https://'")
        return v


class MatchingConfig(BaseModel):
    """Strategy selection."""
    strategy: Literal["oracle", "similarity"] = Field("oracle", description="Primary strategy")
    fallback: Literal["oracle", "similarity", "none"] = Field(
        "similarity", description="Strategy used when the primary oracle is unavailable"
    )
    top_k: int = Field(5, ge=1, le=100, description="Relevant matches returned by similarity")

    @model_validator(mode="before")
    @classmethod
    def default_fallback_for_strategy(cls, data):
        """An unset fallback is the other strategy."""
        if isinstance(data, dict) and data.get("fallback") is None:
            data = {**data, "fallback": default_fallback(data.get("strategy", "oracle"))}
        return data

    def model_post_init(self, __context) -> None:
        """Reject a fallback identical to the primary strategy."""
        if self.fallback == self.strategy:
            raise ValueError("fallback must differ from strategy (use 'none' to disable)")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO", description="Log level")
    format: str = Field(
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="logging format string"
    )


class ServerConfig(BaseModel):
    """Complete server configuration."""
    catalog_path: str = Field("mcp.json", description="Path to the MCP catalog JSON file")
    llm: LLMConfig = Field(default_factory=LLMConfig)
    embeddings: EmbeddingsConfig = Field(default_factory=EmbeddingsConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> ServerConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated ServerConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If configuration is invalid
        """
        config_path = Path(path)

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)

        if not data:
            raise ValueError(f"Empty configuration file: {config_path}")

        try:
            return cls.model_validate(data)
        except Exception as e:
            raise ValueError(f"Invalid configuration in {config_path}: {e}") from e

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ServerConfig:
        """Build configuration from environment settings."""
        s = settings or Settings()
        return cls.model_validate({
            "catalog_path": s.catalog_path,
            "llm": {
                "provider": s.llm_provider,
                "model": s.llm_model,
                "base_url": s.llm_base_url,
                "api_key": s.openai_api_key,
                "temperature": s.llm_temperature,
                "timeout": s.llm_timeout,
            },
            "embeddings": {
                "provider": s.embeddings_provider,
                "model": s.embeddings_model,
                "base_url": s.embeddings_base_url,
                "api_key": s.embeddings_api_key,
            },
            "matching": {
                "strategy": s.match_strategy,
                "fallback": s.match_fallback,
                "top_k": s.match_top_k,
            },
            "logging": {"level": s.log_level},
        })

    def log_redacted(self) -> dict:
        """Get configuration dict with secrets redacted for logging.

        Returns:
            Dictionary with sensitive values redacted
        """
        config_dict = self.model_dump()

        for section in ("llm", "embeddings"):
            if config_dict[section].get("api_key"):
                config_dict[section]["api_key"] = "***"

        return config_dict


def load_server_config(config_path: str | Path | None = None) -> ServerConfig:
    """Load server configuration from file or environment.

    Args:
        config_path: Optional explicit path to config file

    Returns:
        Validated ServerConfig instance

    Raises:
        ValueError: If the configuration file is invalid
    """
    config_path = config_path or os.getenv("MCP_MATCHER_CONFIG")
    if not config_path:
        return ServerConfig.from_settings()

    config = ServerConfig.from_yaml(config_path)
    # The environment still picks the catalog file
    catalog_path = os.getenv("MCP_CATALOG_PATH")
    if catalog_path:
        config = config.model_copy(update={"catalog_path": catalog_path})
    return config
