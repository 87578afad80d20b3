"""Chat-completion oracle client.

Supports OpenAI-compatible chat completions (OpenAI, Azure OpenAI, Together.ai,
Groq, vLLM, etc.) and Ollama's generate endpoint. JSON mode forces the model
to emit a single JSON object.

Usage:
    from mcp_matcher.llm import call_llm_json

    reply = await call_llm_json(prompt, system=system_prompt)
"""
from __future__ import annotations

import json
import logging
import os
import re
from typing import Any

import httpx

logger = logging.getLogger(__name__)

# Used when no config has been injected
DEFAULT_LLM_CONFIG: dict[str, Any] = {
    "provider": os.getenv("LLM_PROVIDER", "openai"),
    "model": os.getenv("LLM_MODEL", "gpt-4o-mini"),
    "base_url": os.getenv("LLM_BASE_URL", "https://api.openai.com"),
    "temperature": 0.2,
    "max_tokens": 1000,
    "timeout": 60.0,
}

# Global config cache (set by the server on startup)
_llm_config: dict[str, Any] | None = None


def set_llm_config(config: dict[str, Any]) -> None:
    """Set the global LLM configuration.

    Called by the server on startup to inject the loaded config.
    """
    global _llm_config
    _llm_config = config
    logger.info(f"LLM config set: {config.get('provider')}/{config.get('model')}")


def get_llm_config() -> dict[str, Any]:
    """Get the active LLM configuration."""
    return _llm_config or DEFAULT_LLM_CONFIG


async def call_llm(
    prompt: str,
    system: str | None = None,
    json_mode: bool = False,
    timeout: float | None = None,
    config_override: dict[str, Any] | None = None
) -> str | None:
    """Call the chat oracle.

    Args:
        prompt: User prompt
        system: Optional system prompt
        json_mode: Force the model to answer with a JSON object
        timeout: Request timeout in seconds (defaults to config)
        config_override: Optional config to use instead of the global one

    Returns:
        Generated text or None on error
    """
    config = config_override or get_llm_config()

    provider = config.get("provider", "openai")
    model = config.get("model")
    base_url = config.get("base_url", "https://api.openai.com")
    temperature = config.get("temperature", 0.2)
    max_tokens = config.get("max_tokens", 1000)
    timeout = timeout or config.get("timeout", 60.0)

    logger.debug(f"Calling {provider}/{model} (json_mode={json_mode})")

    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            if provider == "ollama":
                payload: dict[str, Any] = {
                    "model": model,
                    "prompt": prompt,
                    "stream": False,
                    "options": {
                        "temperature": temperature,
                        "num_predict": max_tokens
                    }
                }
                if system:
                    payload["system"] = system
                if json_mode:
                    payload["format"] = "json"
                response = await client.post(f"{base_url.rstrip('/')}/api/generate", json=payload)
                response.raise_for_status()
                return response.json().get("response", "")

            elif provider == "openai":
                api_key = config.get("api_key") or os.getenv("OPENAI_API_KEY", "")
                if not api_key:
                    logger.error("OpenAI API key not configured (set llm.api_key in config or OPENAI_API_KEY env var)")
                    return None
                messages = []
                if system:
                    messages.append({"role": "system", "content": system})
                messages.append({"role": "user", "content": prompt})
                payload = {
                    "model": model,
                    "messages": messages,
                    "max_tokens": max_tokens,
                    "temperature": temperature
                }
                if json_mode:
                    payload["response_format"] = {"type": "json_object"}
                response = await client.post(
                    f"{base_url.rstrip('/')}/v1/chat/completions",
                    headers={"Authorization": f"Bearer {api_key}"},
                    json=payload
                )
                response.raise_for_status()
                choices = response.json().get("choices", [])
                if choices:
                    return choices[0].get("message", {}).get("content", "")

            else:
                logger.error(f"Unknown LLM provider: {provider}")

    except Exception as e:
        logger.warning(f"LLM call failed ({provider}/{model}): {e}")

    return None


async def call_llm_json(
    prompt: str,
    system: str | None = None,
    timeout: float | None = None,
    config_override: dict[str, Any] | None = None
) -> dict[str, Any] | list | None:
    """Call the chat oracle in JSON mode and parse the reply.

    Returns:
        Parsed JSON or None on error
    """
    response = await call_llm(
        prompt,
        system=system,
        json_mode=True,
        timeout=timeout,
        config_override=config_override
    )
    if not response:
        return None

    logger.debug(f"LLM raw response: {response}")
    return parse_json_response(response)


def parse_json_response(text: str) -> dict[str, Any] | list | None:
    """Parse JSON from LLM response.

    Handles various LLM output formats:
    - Direct JSON
    - JSON in markdown code blocks
    - JSON with surrounding text

    Args:
        text: Raw LLM response

    Returns:
        Parsed JSON or None
    """
    text = text.strip()

    # Try direct parse
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Try extracting from code block
    match = re.search(r'```(?:json)?\s*([\s\S]*?)```', text)
    if match:
        try:
            return json.loads(match.group(1).strip())
        except json.JSONDecodeError:
            pass

    # Try finding JSON object or array
    for pattern in [r'\{[\s\S]*\}', r'\[[\s\S]*\]']:
        match = re.search(pattern, text)
        if match:
            try:
                return json.loads(match.group(0))
            except json.JSONDecodeError:
                pass

    return None
