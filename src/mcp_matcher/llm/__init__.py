"""Chat-completion oracle client.

Usage:
    from mcp_matcher.llm import call_llm, call_llm_json

    text = await call_llm("Summarize this: ...")
    reply = await call_llm_json("Answer as JSON: ...", system="You are ...")
"""
from .client import (
    set_llm_config,
    get_llm_config,
    call_llm,
    call_llm_json,
    parse_json_response,
)

__all__ = [
    "set_llm_config",
    "get_llm_config",
    "call_llm",
    "call_llm_json",
    "parse_json_response",
]
