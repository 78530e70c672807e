"""CLI: transitions, check, role, whoami, demo."""

from __future__ import annotations

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ideaflow.auth.jwt import TokenExpiredError, TokenInvalidError, role_from_claims, verify_token
from ideaflow.auth.roles import capabilities, role_label
from ideaflow.config import Config
from ideaflow.core.evaluation import EvaluationService
from ideaflow.core.workflow import (
    allowed_next_statuses,
    display_label,
    is_comment_required,
    is_terminal,
    is_valid_transition,
    status_suggestions,
)
from ideaflow.errors import IdeaflowError
from ideaflow.events.bus import EventBus
from ideaflow.models.evaluation import StatusTransitionRequest
from ideaflow.models.idea import IdeaStatus
from ideaflow.storage.memory_store import MemoryStore

_STATUS_CHOICE = click.Choice([s.value for s in IdeaStatus])


def _yes_no(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"


@click.group()
@click.version_option(package_name="ideaflow")
@click.pass_context
def main(ctx: click.Context) -> None:
    """ideaflow: idea evaluation workflow."""
    config = Config.load()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


@main.command()
@click.argument("status", type=_STATUS_CHOICE)
def transitions(status: str) -> None:
    """Show where an idea in STATUS can move next."""
    console = Console()
    suggestions = status_suggestions(status)
    if is_terminal(status):
        console.print(f"{display_label(status)} is terminal: no further transitions.")
        return

    table = Table(title=f"From {display_label(status)}")
    table.add_column("Target")
    table.add_column("Action")
    table.add_column("Description")
    for suggestion in suggestions:
        table.add_row(
            display_label(suggestion.target_status),
            suggestion.short_label,
            suggestion.description,
        )
    console.print(table)
    console.print(
        "Allowed: " + ", ".join(s.value for s in allowed_next_statuses(status))
    )


@main.command()
@click.argument("current", type=_STATUS_CHOICE)
@click.argument("target", type=_STATUS_CHOICE)
@click.option("--comment", default=None, help="Justifying comment")
@click.pass_obj
def check(config: Config, current: str, target: str, comment: str | None) -> None:
    """Check whether CURRENT -> TARGET would be accepted."""
    policy = config.policy
    if not is_valid_transition(current, target):
        click.echo(
            f"Rejected: cannot transition from {display_label(current)} to {display_label(target)}",
            err=True,
        )
        sys.exit(1)

    if is_comment_required(target, policy) and not (comment and comment.strip()):
        click.echo(
            f"Rejected: a comment is required to move an idea to {display_label(target)}",
            err=True,
        )
        sys.exit(1)

    click.echo(f"OK: {display_label(current)} -> {display_label(target)} (policy: {policy.value})")


@main.command("role")
@click.argument("role")
def role_cmd(role: str) -> None:
    """Show the label and capabilities of ROLE."""
    _print_role(role)


@main.command()
@click.option("--token", required=True, help="JWT token carrying a role claim")
@click.pass_obj
def whoami(config: Config, token: str) -> None:
    """Show the role carried by a token."""
    secret = config.jwt_secret
    if not secret:
        click.echo(f"Error: {config.jwt_secret_env} is not set", err=True)
        sys.exit(1)

    try:
        payload = verify_token(token, secret)
    except (TokenExpiredError, TokenInvalidError) as e:
        click.echo(f"Authentication failed: {e}", err=True)
        sys.exit(1)

    _print_role(role_from_claims(payload), subject=payload.get("sub"))


def _print_role(value: str | None, subject: str | None = None) -> None:
    caps = capabilities(value)
    lines = []
    if subject:
        lines.append(f"Subject: {subject}")
    lines.extend(
        [
            f"Role: {value!r}",
            f"Label: {role_label(value)}",
            f"Can submit: {_yes_no(caps.can_submit)}",
            f"Can evaluate: {_yes_no(caps.can_evaluate)}",
        ]
    )
    Console().print(Panel("\n".join(lines), title="Role"))


@main.command()
@click.pass_obj
def demo(config: Config) -> None:
    """Walk a sample idea through review in memory."""

    async def _demo() -> None:
        store = MemoryStore()
        await store.initialize()
        service = EvaluationService(
            store,
            EventBus(),
            comment_policy=config.policy,
            comment_max_length=config.comment_max_length,
            title_max_length=config.title_max_length,
            category_max_length=config.category_max_length,
        )
        console = Console()
        try:
            idea = await service.submit(
                title="Shared team calendar",
                description="One calendar for all project milestones",
                category="process",
                submitted_by="alice@example.com",
                role="submitter",
            )
            console.print(f"Submitted [bold]{idea.title}[/bold] ({display_label(idea.status)})")
            console.print(f"Comment policy: {service.comment_policy.value}")

            steps = [
                StatusTransitionRequest(target_status=IdeaStatus.ACCEPTED),
                StatusTransitionRequest(target_status=IdeaStatus.UNDER_REVIEW),
                StatusTransitionRequest(target_status=IdeaStatus.REJECTED),
                StatusTransitionRequest(
                    target_status=IdeaStatus.REJECTED, comment="needs more detail"
                ),
            ]
            for request in steps:
                try:
                    idea = await service.update_status(
                        idea.id, request, evaluator="bob@example.com", role="evaluator/admin"
                    )
                    console.print(f"[green]✓[/green] now {display_label(idea.status)}")
                except IdeaflowError as e:
                    console.print(f"[red]✗[/red] {e}")

            table = Table(title="Evaluation History")
            table.add_column("Evaluator")
            table.add_column("Status")
            table.add_column("Comment")
            for evaluation in await service.evaluation_history(idea.id):
                snapshot = evaluation.status_snapshot
                table.add_row(
                    evaluation.evaluator,
                    display_label(snapshot) if snapshot else "-",
                    evaluation.comment or "-",
                )
            console.print(table)

            summary = idea.to_response(detail="full")
            console.print(
                Panel(
                    "\n".join(f"{key}: {value}" for key, value in summary.items() if key != "_v"),
                    title="Final Idea",
                )
            )
        finally:
            await store.close()

    asyncio.run(_demo())
