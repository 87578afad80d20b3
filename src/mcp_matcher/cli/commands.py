from __future__ import annotations
import argparse
import asyncio
import sys
from dotenv import load_dotenv


def run() -> None:
    """Main CLI entry point."""
    # Load environment variables first
    load_dotenv()

    # Import after load_dotenv so settings see the .env values
    from mcp_matcher.config import load_server_config

    parser = argparse.ArgumentParser(
        prog="mcp-matcher",
        description="MCP Matcher - find the right MCP for a task"
    )
    parser.add_argument("--config", help="Path to YAML server config (default: MCP_MATCHER_CONFIG or environment)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    # Server
    serve = sub.add_parser("serve", help="Run the MCP server on stdio")
    serve.add_argument("--catalog", help="Path to MCP catalog JSON (default: mcp.json)")

    # One-shot match
    match = sub.add_parser("match", help="Match a task description against the catalog")
    match.add_argument("task", help="Task description")
    match.add_argument("--catalog", help="Path to MCP catalog JSON (default: mcp.json)")
    match.add_argument("--strategy", choices=["oracle", "similarity"],
                       help="Use only this strategy (no fallback)")

    # Catalog commands
    catalog = sub.add_parser("catalog", help="Catalog commands")
    catalogsub = catalog.add_subparsers(dest="catalogcmd", required=True)
    catalog_ls = catalogsub.add_parser("ls", help="List the loaded catalog")
    catalog_ls.add_argument("--catalog", help="Path to MCP catalog JSON (default: mcp.json)")

    args = parser.parse_args()

    try:
        config = load_server_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.cmd == "serve":
        from mcp_matcher.mcp.server import serve as serve_stdio
        serve_stdio(config, args.catalog)

    elif args.cmd == "match":
        asyncio.run(_match(config, args.task, args.catalog, args.strategy))

    elif args.cmd == "catalog" and args.catalogcmd == "ls":
        _catalog_ls(config, args.catalog)


async def _match(config, task: str, catalog_path: str | None, strategy: str | None) -> None:
    from mcp_matcher.catalog import CatalogStore
    from mcp_matcher.matching import TaskMatcher, build_matcher
    from mcp_matcher.matching.selector import build_strategy
    from mcp_matcher.mcp.server import configure_logging
    from mcp_matcher.reports import format_match_report

    configure_logging(config)

    task = task.strip()
    if not task:
        print("Task description is required", file=sys.stderr)
        sys.exit(2)

    store = CatalogStore()
    store.reload(catalog_path or config.catalog_path)
    snapshot = store.current

    if strategy:
        matcher = TaskMatcher([build_strategy(strategy, config)])
    else:
        matcher = build_matcher(config)

    result = await matcher.match(task, snapshot)
    print(format_match_report(result, snapshot.entries), end="")


def _catalog_ls(config, catalog_path: str | None) -> None:
    from mcp_matcher.catalog import load_catalog

    path = catalog_path or config.catalog_path
    entries, loaded = load_catalog(path)

    source = path if loaded else "built-in defaults"
    print(f"{len(entries)} MCPs (source: {source})\n")
    for mcp_id, mcp in entries.items():
        print(f"{mcp_id}")
        print(f"  Name: {mcp.name}")
        print(f"  Description: {mcp.description}")
        print(f"  Functions: {', '.join(mcp.functions)}")
