from .embedder import embed_texts
from .ollama import ollama_embed
from .openai_compat import openai_embed

__all__ = ["embed_texts", "ollama_embed", "openai_embed"]
