"""OpenAI-compatible embeddings client.

Provides embedding generation via the /v1/embeddings endpoint (OpenAI, vLLM,
Azure OpenAI and other compatible servers).
"""
from __future__ import annotations
import httpx


async def openai_embed(
    texts: list[str],
    model: str,
    base_url: str,
    api_key: str,
    batch_size: int = 32,
    timeout: float = 60.0
) -> list[list[float]]:
    """Generate embeddings using an OpenAI-compatible API.

    Args:
        texts: List of texts to embed
        model: Model name
        base_url: Provider base URL
        api_key: API key for authentication
        batch_size: Maximum texts per request
        timeout: Request timeout in seconds

    Returns:
        List of embedding vectors, in input order

    Raises:
        RuntimeError: If an API request fails
    """
    if not texts:
        return []

    all_embeddings: list[list[float]] = []

    # Build headers - only add Authorization if api_key is provided
    headers = {}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"

    async with httpx.AsyncClient(timeout=timeout) as client:
        # Process in batches
        for i in range(0, len(texts), batch_size):
            batch = texts[i:i + batch_size]

            try:
                response = await client.post(
                    f"{base_url.rstrip('/')}/v1/embeddings",
                    headers=headers,
                    json={"model": model, "input": batch},
                )
                response.raise_for_status()
                data = response.json()

                # Items carry their input position
                items = sorted(data["data"], key=lambda item: item.get("index", 0))
                all_embeddings.extend(item["embedding"] for item in items)

            except httpx.HTTPError as e:
                raise RuntimeError(f"OpenAI embedding failed: {e}")

    return all_embeddings
