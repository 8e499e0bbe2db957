"""MCP server for the issueboard issue tracker.

Primary interface for agents. Direct SQLite, no daemon.
Exposes the issue repository operations as MCP tools.

Usage:
    issueboard-mcp                              # Auto-discover .issueboard/ from cwd
    issueboard-mcp --project /path/to/project   # Explicit project root
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from issueboard.core import DB_FILENAME, ISSUEBOARD_DIR_NAME, find_issueboard_root, read_config
from issueboard.db_store import SQLiteIssueStore
from issueboard.mcp_tools import issues as _issues_tools
from issueboard.repository import IssueRepository

server = Server("issueboard")
store: SQLiteIssueStore | None = None
_logger: logging.Logger | None = None

_TOOLS: list[Tool]
_HANDLERS: dict[str, Callable[..., Any]]
_TOOLS, _HANDLERS = _issues_tools.register()


def _get_repository() -> IssueRepository:
    if store is None:
        msg = "Database not initialized"
        raise RuntimeError(msg)
    return IssueRepository(store)


@server.list_tools()  # type: ignore[untyped-decorator,no-untyped-call]
async def list_tools() -> list[Tool]:
    return list(_TOOLS)


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    handler = _HANDLERS.get(name)
    if handler is None:
        msg = f"Unknown tool: {name}"
        raise ValueError(msg)
    t0 = time.monotonic()

    try:
        result: list[TextContent] = await handler(arguments)
    except Exception:
        if _logger:
            _logger.error("tool_error", extra={"op": name, "args_data": arguments}, exc_info=True)
        raise
    else:
        duration_ms = round((time.monotonic() - t0) * 1000, 1)
        if _logger:
            _logger.info("tool_call", extra={"op": name, "args_data": arguments, "duration_ms": duration_ms})
        return result


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


async def _run(project_path: Path | None) -> None:
    global store, _logger

    if project_path:
        issueboard_dir = project_path / ISSUEBOARD_DIR_NAME
        if not issueboard_dir.is_dir():
            print(f"Error: {issueboard_dir} not found. Run 'issueboard init' first.", file=sys.stderr)
            sys.exit(1)
    else:
        try:
            issueboard_dir = find_issueboard_root()
        except FileNotFoundError:
            print(f"Error: No {ISSUEBOARD_DIR_NAME}/ found. Run 'issueboard init' first.", file=sys.stderr)
            sys.exit(1)

    config = read_config(issueboard_dir)
    store = SQLiteIssueStore(issueboard_dir / DB_FILENAME, prefix=config.get("prefix", "issueboard"))
    store.initialize()

    from issueboard.logging import setup_logging

    _logger = setup_logging(issueboard_dir)
    _logger.info("mcp_server_start", extra={"op": "server", "args_data": {"project": str(issueboard_dir.parent)}})

    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        store.close()


def main() -> None:
    import asyncio

    parser = argparse.ArgumentParser(description="issueboard MCP server")
    parser.add_argument(
        "--project", type=Path, default=None, help="Project root (auto-discovers .issueboard/ if omitted)"
    )
    args = parser.parse_args()

    asyncio.run(_run(args.project))


if __name__ == "__main__":
    main()
