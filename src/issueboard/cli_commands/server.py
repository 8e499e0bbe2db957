"""CLI command for serving the dashboard API."""

from __future__ import annotations

import click


@click.command()
@click.option("--port", default=8377, show_default=True, type=int, help="Port to listen on")
@click.option("--no-browser", is_flag=True, help="Do not open a browser window")
def dashboard(port: int, no_browser: bool) -> None:
    """Serve the JSON dashboard API for the current project."""
    from issueboard.dashboard import main as dashboard_main

    try:
        dashboard_main(port=port, no_browser=no_browser)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}. Run 'issueboard init' first.", err=True)
        raise SystemExit(1) from e


def register(cli: click.Group) -> None:
    """Register server commands with the CLI group."""
    cli.add_command(dashboard)
