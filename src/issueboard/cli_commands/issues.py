"""CLI commands for issues: create, show, list, status, priority, update, delete, similar."""

from __future__ import annotations

import sys
from typing import Any, NoReturn

import click

from issueboard.cli_common import echo_json, fail, get_store, run
from issueboard.core import STATUS_LABELS, VALID_PRIORITIES, VALID_STATUSES, Issue, IssueFormData
from issueboard.errors import DecodeError, InvalidTransition, NotFound, StoreUnavailable
from issueboard.repository import IssueRepository
from issueboard.similarity import SIMILAR_DISPLAY_LIMIT
from issueboard.workflow import valid_transitions

_STATUS_CHOICE = click.Choice(VALID_STATUSES)
_PRIORITY_CHOICE = click.Choice(VALID_PRIORITIES)


def _issue_line(issue: Issue) -> str:
    return f"{issue.id} {issue.status:<12} {issue.priority:<7} {issue.title}"


def _print_similar(similar: list[Issue]) -> None:
    click.echo(f"Warning: {len(similar)} similar issue(s) already exist:", err=True)
    for issue in similar[:SIMILAR_DISPLAY_LIMIT]:
        click.echo(f"  {issue.id} {issue.title} ({issue.status})", err=True)
    if len(similar) > SIMILAR_DISPLAY_LIMIT:
        click.echo(f"  ... and {len(similar) - SIMILAR_DISPLAY_LIMIT} more", err=True)


def _fail_transition(exc: InvalidTransition, *, as_json: bool) -> NoReturn:
    targets = valid_transitions(exc.current)
    if as_json:
        fail(str(exc), as_json=True, code="invalid_transition", valid_transitions=targets)
    click.echo(f"Error: {exc}", err=True)
    click.echo(f"Valid transitions from {STATUS_LABELS[exc.current]}: {', '.join(targets)}", err=True)
    sys.exit(1)


@click.command()
@click.argument("title")
@click.option("--description", "-d", default="", help="Description")
@click.option("--priority", "-p", type=_PRIORITY_CHOICE, default="medium", show_default=True, help="Priority")
@click.option("--status", type=_STATUS_CHOICE, default="open", show_default=True, help="Initial status")
@click.option("--assigned-to", default="", help="Assignee name or contact")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def create(
    ctx: click.Context,
    title: str,
    description: str,
    priority: str,
    status: str,
    assigned_to: str,
    as_json: bool,
) -> None:
    """Create a new issue, warning about likely duplicates."""
    form = IssueFormData(
        title=title,
        description=description,
        priority=priority,  # type: ignore[arg-type]
        status=status,  # type: ignore[arg-type]
        assigned_to=assigned_to,
    )
    with get_store() as store:
        repo = IssueRepository(store)
        try:
            issue, similar = run(repo.create_with_similar(form, ctx.obj["user"], ctx.obj["email"]))
        except (ValueError, TypeError, StoreUnavailable) as e:
            fail(str(e), as_json=as_json)

    if as_json:
        echo_json(
            {
                "issue": issue.to_dict(),
                "similar": [s.to_dict() for s in similar[:SIMILAR_DISPLAY_LIMIT]],
            }
        )
        return
    if similar:
        _print_similar(similar)
    click.echo(f"Created {issue.id}: {issue.title}")


@click.command()
@click.argument("issue_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show(issue_id: str, as_json: bool) -> None:
    """Show issue details."""
    with get_store() as store:
        try:
            issue = run(IssueRepository(store).get(issue_id))
        except NotFound:
            fail(f"Not found: {issue_id}", as_json=as_json)
        except (DecodeError, StoreUnavailable) as e:
            fail(str(e), as_json=as_json)

    if as_json:
        echo_json(issue.to_dict())
        return

    click.echo(f"ID:         {issue.id}")
    click.echo(f"Title:      {issue.title}")
    click.echo(f"Status:     {STATUS_LABELS[issue.status]}")
    click.echo(f"Priority:   {issue.priority}")
    if issue.assigned_to:
        click.echo(f"Assigned:   {issue.assigned_to}")
    creator = issue.created_by_email or issue.created_by
    click.echo(f"Created:    {issue.created_at.isoformat()} by {creator}")
    if issue.description:
        click.echo(f"\n--- Description ---\n{issue.description}")


@click.command("list")
@click.option("--status", type=_STATUS_CHOICE, default=None, help="Filter by status")
@click.option("--priority", "-p", type=_PRIORITY_CHOICE, default=None, help="Filter by priority")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_issues(status: str | None, priority: str | None, as_json: bool) -> None:
    """List issues, newest first, with optional filters."""
    with get_store() as store:
        try:
            issues = run(IssueRepository(store).list(status=status, priority=priority))
        except (DecodeError, StoreUnavailable) as e:
            fail(str(e), as_json=as_json)

    if as_json:
        echo_json([i.to_dict() for i in issues])
        return

    for issue in issues:
        click.echo(_issue_line(issue))
    click.echo(f"\n{len(issues)} issues")


@click.command()
@click.argument("issue_id")
@click.argument("new_status", type=_STATUS_CHOICE)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def status(issue_id: str, new_status: str, as_json: bool) -> None:
    """Move an issue to a new status."""
    with get_store() as store:
        try:
            issue = run(IssueRepository(store).update_status(issue_id, new_status))
        except InvalidTransition as e:
            _fail_transition(e, as_json=as_json)
        except NotFound:
            fail(f"Not found: {issue_id}", as_json=as_json)
        except (ValueError, StoreUnavailable) as e:
            fail(str(e), as_json=as_json)

    if as_json:
        echo_json(issue.to_dict())
    else:
        click.echo(f"Status of {issue.id} updated to {STATUS_LABELS[issue.status]}")


@click.command()
@click.argument("issue_id")
@click.argument("new_priority", type=_PRIORITY_CHOICE)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def priority(issue_id: str, new_priority: str, as_json: bool) -> None:
    """Change an issue's priority."""
    with get_store() as store:
        try:
            issue = run(IssueRepository(store).update_priority(issue_id, new_priority))
        except NotFound:
            fail(f"Not found: {issue_id}", as_json=as_json)
        except (ValueError, StoreUnavailable) as e:
            fail(str(e), as_json=as_json)

    if as_json:
        echo_json(issue.to_dict())
    else:
        click.echo(f"Priority of {issue.id} updated to {issue.priority}")


@click.command()
@click.argument("issue_id")
@click.option("--title", default=None, help="New title")
@click.option("--description", "-d", default=None, help="New description")
@click.option("--priority", "-p", "new_priority", type=_PRIORITY_CHOICE, default=None, help="New priority")
@click.option("--status", "new_status", type=_STATUS_CHOICE, default=None, help="New status")
@click.option("--assigned-to", default=None, help="New assignee (empty string to clear)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def update(
    issue_id: str,
    title: str | None,
    description: str | None,
    new_priority: str | None,
    new_status: str | None,
    assigned_to: str | None,
    as_json: bool,
) -> None:
    """Update several fields of an issue at once."""
    changes: dict[str, Any] = {
        k: v
        for k, v in {
            "title": title,
            "description": description,
            "priority": new_priority,
            "status": new_status,
            "assigned_to": assigned_to,
        }.items()
        if v is not None
    }
    if not changes:
        fail("Nothing to update", as_json=as_json)

    with get_store() as store:
        try:
            issue = run(IssueRepository(store).update(issue_id, **changes))
        except InvalidTransition as e:
            _fail_transition(e, as_json=as_json)
        except NotFound:
            fail(f"Not found: {issue_id}", as_json=as_json)
        except (ValueError, TypeError, StoreUnavailable) as e:
            fail(str(e), as_json=as_json)

    if as_json:
        echo_json(issue.to_dict())
    else:
        click.echo(f"Updated {issue.id}: {', '.join(sorted(changes))}")


@click.command()
@click.argument("issue_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def delete(issue_id: str, yes: bool) -> None:
    """Delete an issue. This cannot be undone."""
    if not yes:
        click.confirm(f"Delete {issue_id}? This action cannot be undone.", abort=True)
    with get_store() as store:
        try:
            run(IssueRepository(store).delete(issue_id))
        except NotFound:
            fail(f"Not found: {issue_id}", as_json=False)
        except StoreUnavailable as e:
            fail(str(e), as_json=False)
    click.echo(f"Deleted {issue_id}")


@click.command()
@click.argument("title")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def similar(title: str, as_json: bool) -> None:
    """Check a prospective title against existing issues."""
    with get_store() as store:
        try:
            matches = run(IssueRepository(store).find_similar(title))
        except (DecodeError, StoreUnavailable) as e:
            fail(str(e), as_json=as_json)

    if as_json:
        echo_json([i.to_dict() for i in matches])
        return
    if not matches:
        click.echo("No similar issues found")
        return
    for issue in matches:
        click.echo(_issue_line(issue))
    click.echo(f"\n{len(matches)} similar issues")


def register(cli: click.Group) -> None:
    """Register issue commands with the CLI group."""
    cli.add_command(create)
    cli.add_command(show)
    cli.add_command(list_issues, "list")
    cli.add_command(status)
    cli.add_command(priority)
    cli.add_command(update)
    cli.add_command(delete)
    cli.add_command(similar)
