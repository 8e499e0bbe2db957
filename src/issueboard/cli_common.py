"""Shared CLI helpers.

Provides ``get_store()``, ``run()`` and the error/JSON output helpers so
that ``cli.py`` and the ``cli_commands/*.py`` modules can use them
without circular imports.
"""

from __future__ import annotations

import asyncio
import json as json_mod
import sys
from collections.abc import Coroutine
from typing import Any, NoReturn, TypeVar

import click

from issueboard.core import DB_FILENAME, ISSUEBOARD_DIR_NAME, find_issueboard_root, read_config
from issueboard.db_store import SQLiteIssueStore
from issueboard.logging import setup_logging

_T = TypeVar("_T")


def get_store() -> SQLiteIssueStore:
    """Discover .issueboard/ and return an initialized store."""
    try:
        issueboard_dir = find_issueboard_root()
    except FileNotFoundError:
        click.echo(f"No {ISSUEBOARD_DIR_NAME}/ found. Run 'issueboard init' first.", err=True)
        sys.exit(1)
    setup_logging(issueboard_dir)
    config = read_config(issueboard_dir)
    store = SQLiteIssueStore(issueboard_dir / DB_FILENAME, prefix=config.get("prefix", "issueboard"))
    store.initialize()
    return store


def run(coro: Coroutine[Any, Any, _T]) -> _T:
    """Drive a repository coroutine to completion from synchronous Click code."""
    return asyncio.run(coro)


def echo_json(data: Any) -> None:
    click.echo(json_mod.dumps(data, indent=2, default=str))


def fail(message: str, *, as_json: bool, **extra: Any) -> NoReturn:
    """Report an error in the requested output format and exit 1."""
    if as_json:
        click.echo(json_mod.dumps({"error": message, **extra}))
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(1)
