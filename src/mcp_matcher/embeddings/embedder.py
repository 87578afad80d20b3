"""Embedding provider dispatch."""
from __future__ import annotations
import os

from ..config import EmbeddingsConfig
from .ollama import ollama_embed
from .openai_compat import openai_embed


async def embed_texts(texts: list[str], config: EmbeddingsConfig) -> list[list[float]]:
    """Embed texts with the configured provider.

    Raises:
        ValueError: If provider is invalid
        RuntimeError: If the provider request fails
    """
    if config.provider == "ollama":
        return await ollama_embed(
            texts,
            model=config.model,
            base_url=config.base_url,
            timeout=config.timeout
        )
    if config.provider == "openai":
        return await openai_embed(
            texts,
            model=config.model,
            base_url=config.base_url,
            api_key=config.api_key or os.getenv("OPENAI_API_KEY", ""),
            batch_size=config.batch_size,
            timeout=config.timeout
        )
    raise ValueError(f"Invalid provider: {config.provider}. Must be 'openai' or 'ollama'")
