"""CLI for the issueboard issue tracker.

Convention-based: discovers .issueboard/ by walking up from cwd.

Usage:
    issueboard init                                  # Initialize .issueboard/ in cwd
    issueboard create "Login button broken" -p high  # Create issue (warns on duplicates)
    issueboard show <id>                             # Show issue details
    issueboard list --status=open --priority=high    # List issues, newest first
    issueboard status <id> in_progress               # Change status
    issueboard priority <id> low                     # Change priority
    issueboard update <id> --title="..."             # Patch several fields
    issueboard delete <id>                           # Delete issue
    issueboard similar "Login crash"                 # Check for duplicates
    issueboard dashboard                             # Serve the JSON dashboard API
"""

from __future__ import annotations

from pathlib import Path

import click

from issueboard import __version__
from issueboard.cli_commands import issues as _issues
from issueboard.cli_commands import server as _server
from issueboard.core import (
    DB_FILENAME,
    ISSUEBOARD_DIR_NAME,
    find_issueboard_root,
    read_config,
    write_config,
)
from issueboard.db_store import SQLiteIssueStore


def _configured_principal() -> tuple[str, str]:
    """Default user/email from the nearest project config, if any."""
    try:
        config = read_config(find_issueboard_root())
    except FileNotFoundError:
        return "", ""
    return config.get("user", ""), config.get("email", "")


@click.group()
@click.version_option(version=__version__, prog_name="issueboard")
@click.option("--user", envvar="ISSUEBOARD_USER", default=None, help="Creator identity (default: config, then 'cli')")
@click.option("--email", envvar="ISSUEBOARD_EMAIL", default=None, help="Creator display email (default: config)")
@click.pass_context
def cli(ctx: click.Context, user: str | None, email: str | None) -> None:
    """issueboard: issue tracker with lifecycle rules and duplicate detection."""
    ctx.ensure_object(dict)
    if user is None or email is None:
        config_user, config_email = _configured_principal()
        user = user if user is not None else (config_user or "cli")
        email = email if email is not None else config_email
    ctx.obj["user"] = user
    ctx.obj["email"] = email


@cli.command()
@click.option("--prefix", default=None, help="ID prefix for issues (default: directory name)")
def init(prefix: str | None) -> None:
    """Initialize .issueboard/ in the current directory."""
    cwd = Path.cwd()
    issueboard_dir = cwd / ISSUEBOARD_DIR_NAME

    if issueboard_dir.exists():
        click.echo(f"{ISSUEBOARD_DIR_NAME}/ already exists in {cwd}")
        # Still ensure the database is initialized
        config = read_config(issueboard_dir)
        with SQLiteIssueStore(issueboard_dir / DB_FILENAME, prefix=config.get("prefix", "issueboard")) as store:
            store.initialize()
        return

    prefix = prefix or cwd.name
    issueboard_dir.mkdir()
    write_config(issueboard_dir, {"prefix": prefix, "version": 1})

    with SQLiteIssueStore(issueboard_dir / DB_FILENAME, prefix=prefix) as store:
        store.initialize()

    click.echo(f"Initialized {ISSUEBOARD_DIR_NAME}/ in {cwd}")
    click.echo(f"  Prefix: {prefix}")
    click.echo(f"  Database: {issueboard_dir / DB_FILENAME}")
    click.echo('\nNext: issueboard create "First issue"')


_issues.register(cli)
_server.register(cli)


def main() -> None:
    """Entry point for the issueboard CLI."""
    cli()


if __name__ == "__main__":
    main()
