"""Environment-backed settings for MCP Matcher.

Loads settings from environment variables using python-dotenv.
"""
from __future__ import annotations
import os
from typing import Literal
from dotenv import load_dotenv

# Load .env file
load_dotenv()

OPENAI_BASE_URL = "https://api.openai.com"
OLLAMA_BASE_URL = "http://localhost:11434"


def default_base_url(provider: str) -> str:
    return OLLAMA_BASE_URL if provider == "ollama" else OPENAI_BASE_URL


def default_fallback(strategy: str) -> str:
    """The other strategy, or "none" for an unknown one."""
    return {"oracle": "similarity", "similarity": "oracle"}.get(strategy, "none")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize settings from environment variables."""
        # Catalog
        self.catalog_path = os.getenv("MCP_CATALOG_PATH", "mcp.json")
        self.config_path = os.getenv("MCP_MATCHER_CONFIG", "")

        # Chat oracle
        self.llm_provider: Literal["openai", "ollama"] = os.getenv("LLM_PROVIDER", "openai")
        self.llm_model = os.getenv("LLM_MODEL", "gpt-4o-mini")
        self.llm_base_url = os.getenv("LLM_BASE_URL", default_base_url(self.llm_provider))
        self.llm_temperature = float(os.getenv("LLM_TEMPERATURE", "0.2"))
        self.llm_timeout = float(os.getenv("LLM_TIMEOUT", "60"))
        self.openai_api_key = os.getenv("OPENAI_API_KEY", "")

        # Embedding oracle
        self.embeddings_provider: Literal["openai", "ollama"] = os.getenv(
            "EMBEDDINGS_PROVIDER", "openai"
        )
        self.embeddings_model = os.getenv("EMBEDDINGS_MODEL", "text-embedding-3-small")
        self.embeddings_base_url = os.getenv(
            "EMBEDDINGS_BASE_URL", default_base_url(self.embeddings_provider)
        )
        self.embeddings_api_key = os.getenv("EMBEDDINGS_API_KEY", "") or self.openai_api_key

        # Matching
        self.match_strategy: Literal["oracle", "similarity"] = os.getenv("MATCH_STRATEGY", "oracle")
        self.match_fallback: Literal["oracle", "similarity", "none"] = os.getenv(
            "MATCH_FALLBACK", default_fallback(self.match_strategy)
        )
        self.match_top_k = int(os.getenv("MATCH_TOP_K", "5"))

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()


# Global settings instance
settings = Settings()
