"""MCP stdio server with JSON-RPC framing.

Implements Model Context Protocol (MCP) for matching tasks to MCPs.
Supports resources (catalog entries), the match_mcp tool, and prompts.
"""
import asyncio
import json
import logging
import signal
import sys
import traceback
from pathlib import Path
from typing import Any

from mcp_matcher.catalog import get_catalog_store
from mcp_matcher.config import ServerConfig, load_server_config
from mcp_matcher.llm import set_llm_config
from mcp_matcher.matching import build_matcher, set_matcher
from mcp_matcher.mcp.prompts import get_prompt, list_prompts
from mcp_matcher.mcp.resources import list_resources, read_resource
from mcp_matcher.mcp.schemas import TOOL_SCHEMAS
from mcp_matcher.mcp.tools import TOOL_REGISTRY

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-matcher"
SERVER_VERSION = "0.1.0"
PROTOCOL_VERSION = "2024-11-05"


# MCP Protocol Implementation


async def handle_initialize(params: dict[str, Any]) -> dict[str, Any]:
    """Handle MCP initialize request."""
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {
            "resources": {},
            "tools": {},
            "prompts": {}
        },
        "serverInfo": {
            "name": SERVER_NAME,
            "version": SERVER_VERSION
        }
    }


async def handle_ping(params: dict[str, Any]) -> dict[str, Any]:
    return {}


async def handle_initialized(params: dict[str, Any]) -> None:
    logger.info("Client initialized")


async def handle_resources_list(params: dict[str, Any]) -> dict[str, Any]:
    """List catalog entries as resources."""
    return {"resources": list_resources(get_catalog_store().current)}


async def handle_resources_read(params: dict[str, Any]) -> dict[str, Any]:
    """Read one catalog entry as JSON."""
    uri = params.get("uri")
    if not uri:
        raise ValueError("Resource URI is required")
    return read_resource(uri, get_catalog_store().current)


async def handle_tools_list(params: dict[str, Any]) -> dict[str, Any]:
    """List all available tools with their schemas."""
    tools = []

    for tool_name in TOOL_REGISTRY.keys():
        schema = TOOL_SCHEMAS.get(tool_name, {})
        tools.append({
            "name": tool_name,
            "description": schema.get("description", ""),
            "inputSchema": schema.get("inputSchema", {
                "type": "object",
                "properties": {},
                "required": []
            })
        })

    return {"tools": tools}


async def handle_tools_call(params: dict[str, Any]) -> dict[str, Any]:
    """Call a tool with given parameters."""
    tool_name = params.get("name")
    tool_params = params.get("arguments") or {}

    if tool_name not in TOOL_REGISTRY:
        raise ValueError(f"Unknown tool: {tool_name}")

    handler = TOOL_REGISTRY[tool_name]
    result = await handler(**tool_params)

    return {
        "content": [
            {
                "type": "text",
                "text": result if isinstance(result, str) else json.dumps(result, indent=2)
            }
        ]
    }


async def handle_prompts_list(params: dict[str, Any]) -> dict[str, Any]:
    return {"prompts": list_prompts()}


async def handle_prompts_get(params: dict[str, Any]) -> dict[str, Any]:
    return get_prompt(params.get("name", ""), get_catalog_store().current)


# JSON-RPC Handler


MCP_METHODS = {
    "initialize": handle_initialize,
    "notifications/initialized": handle_initialized,
    "ping": handle_ping,
    "resources/list": handle_resources_list,
    "resources/read": handle_resources_read,
    "tools/list": handle_tools_list,
    "tools/call": handle_tools_call,
    "prompts/list": handle_prompts_list,
    "prompts/get": handle_prompts_get,
}


def _error(req_id: Any, code: int, message: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if data:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": req_id, "error": error}


async def handle_request(request: dict[str, Any]) -> dict[str, Any] | None:
    """Handle a single JSON-RPC message.

    Returns:
        JSON-RPC response dictionary, or None for notifications
    """
    is_notification = "id" not in request
    req_id = request.get("id")
    method = request.get("method")
    params = request.get("params") or {}

    if is_notification:
        handler = MCP_METHODS.get(method)
        if handler is None:
            logger.debug(f"Ignoring notification: {method}")
            return None
        try:
            await handler(params)
        except Exception as e:
            logger.warning(f"Notification {method} failed: {e}")
        return None

    try:
        if method in MCP_METHODS:
            handler = MCP_METHODS[method]
            result = await handler(params)
            return {
                "jsonrpc": "2.0",
                "id": req_id,
                "result": result if result is not None else {}
            }

        # Unknown method
        return _error(
            req_id,
            -32601,
            f"Method not found: {method}",
            {"available_methods": list(MCP_METHODS.keys())}
        )

    except TypeError as e:
        # Parameter validation errors
        return _error(req_id, -32602, "Invalid params", {"error": str(e)})

    except ValueError as e:
        # Request-level errors (missing parameters, unknown tools/resources/prompts)
        return _error(req_id, -32000, str(e), {"error_type": "ValueError"})

    except Exception as e:
        # Unexpected errors
        logger.error(f"Internal error handling {method}: {e}", exc_info=True)
        return _error(
            req_id,
            -32603,
            "Internal error",
            {
                "error": str(e),
                "error_type": type(e).__name__,
                "traceback": traceback.format_exc()
            }
        )


def configure_logging(config: ServerConfig) -> None:
    """Send logs to stderr; stdout carries the protocol."""
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper()),
        format=config.logging.format,
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def startup(config: ServerConfig, catalog_path: str | Path | None = None) -> Path:
    """Load the catalog and install the matcher for this process.

    Returns:
        The catalog path in use
    """
    path = Path(catalog_path or config.catalog_path)
    logger.info(f"Server configuration: {config.log_redacted()}")

    if not get_catalog_store().reload(path):
        logger.warning("Failed to load external MCP configuration, using defaults")

    set_llm_config(config.llm.model_dump())
    set_matcher(build_matcher(config))
    return path


def install_reload_handler(catalog_path: Path) -> None:
    """Reload the catalog on SIGHUP, where the platform has it."""
    if not hasattr(signal, "SIGHUP"):
        return

    def reload_handler(signum, frame):
        logger.info(f"Received signal {signum}, reloading catalog from {catalog_path}")
        get_catalog_store().reload(catalog_path)

    signal.signal(signal.SIGHUP, reload_handler)


async def run_stdio_server() -> None:
    """Run MCP server over stdio with robust JSON-RPC framing.

    Reads JSON-RPC requests from stdin (one per line).
    Writes JSON-RPC responses to stdout (one per line).
    Logs to stderr.
    """
    logger.info("MCP Matcher server starting on stdio...")
    logger.info(f"Available tools: {', '.join(TOOL_REGISTRY.keys())}")

    try:
        while True:
            # Read request from stdin
            line = sys.stdin.readline()
            if not line:
                # EOF - client disconnected
                break

            line = line.strip()
            if not line:
                # Empty line - skip
                continue

            try:
                # Parse JSON-RPC request
                request = json.loads(line)

                # Handle request
                if isinstance(request, dict):
                    response = await handle_request(request)
                else:
                    response = _error(None, -32600, "Invalid Request")

                # Write response to stdout
                if response is not None:
                    sys.stdout.write(json.dumps(response) + "\n")
                    sys.stdout.flush()

            except json.JSONDecodeError as e:
                # Invalid JSON
                sys.stdout.write(json.dumps(_error(None, -32700, "Parse error", {"error": str(e)})) + "\n")
                sys.stdout.flush()

    except KeyboardInterrupt:
        logger.info("Server shutting down...")

    except Exception as e:
        logger.error(f"Fatal server error: {e}", exc_info=True)
        raise


def serve(config: ServerConfig, catalog_path: str | Path | None = None) -> None:
    """Configure, load the catalog and run the stdio loop."""
    configure_logging(config)
    path = startup(config, catalog_path)
    install_reload_handler(path)
    asyncio.run(run_stdio_server())


def main() -> None:
    """Entry point for MCP server."""
    try:
        config = load_server_config()
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    serve(config)


if __name__ == "__main__":
    main()
