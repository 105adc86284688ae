"""CLI for SealRegistry.

Commands:
    init-db                  - Create database tables
    validate <file>          - Dry-run an observation against the registry
    submit <file>            - Commit an observation
    show-seal <id>           - Show a seal and its observation history
    pending                  - List observations awaiting approval
    approve <id>             - Approve a pending observation
    reset                    - Drop and recreate all tables
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from seal_registry.config import settings
from seal_registry.db import async_session_factory, engine, init_db
from seal_registry.models import Observation
from seal_registry.resolution import (
    AmbiguousMatches,
    ExactMatch,
    ObservationCommitter,
    ObservationRejected,
    SealMatch,
    SealResolver,
)
from seal_registry.schemas import ObservationPayload
from seal_registry.store.sql import SqlRegistryStore

app = typer.Typer(
    name="seal-registry",
    help="SealRegistry: seal sightings reconciled against a mark and tag registry",
    no_args_is_help=True,
)
console = Console()


def run_async(coro):
    """Run an async coroutine in sync context."""
    return asyncio.run(coro)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_payload(path: Path) -> ObservationPayload:
    """Read an observation payload from a JSON file, exiting on bad input."""
    try:
        return ObservationPayload.model_validate_json(path.read_text())
    except OSError as e:
        console.print(f"[red]Error:[/red] Cannot read {path}: {e}")
        raise typer.Exit(1) from None
    except ValidationError as e:
        console.print(f"[red]Invalid observation:[/red]\n{e}")
        raise typer.Exit(1) from None


def describe_observation(obs: Observation) -> list[str]:
    marks = ", ".join(m.number for m in obs.marks) or "-"
    tags = ", ".join(t.number for t in obs.tags) or "-"
    return [
        str(obs.observation_id),
        str(obs.observed_on),
        obs.sex.value if obs.sex else "-",
        marks,
        tags,
        obs.submitted_by or "-",
        "[green]yes[/green]" if obs.is_approved else "[yellow]no[/yellow]",
    ]


def observation_table(title: str, observations: list[Observation]) -> Table:
    table = Table(title=title)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Date")
    table.add_column("Sex")
    table.add_column("Marks")
    table.add_column("Tags")
    table.add_column("Submitted By")
    table.add_column("Approved")
    for obs in observations:
        table.add_row(*describe_observation(obs))
    return table


def print_seal_match(match: SealMatch) -> None:
    seal = match.seal
    panel_content = [
        f"[bold]Seal ID:[/bold] {seal.seal_id}",
        f"[bold]Sex:[/bold] {seal.sex.value if seal.sex else 'unknown'}",
        f"[bold]Procedure:[/bold] {seal.procedure or '-'}",
        f"[bold]Observations:[/bold] {len(match.observations)}",
    ]
    console.print(Panel("\n".join(panel_content), title="Seal"))
    console.print(observation_table("History", match.observations))


@app.command("init-db")
def init_db_command():
    """Create all tables."""
    run_async(init_db())
    console.print("[green]Database initialized.[/green]")


@app.command()
def validate(
    path: Annotated[Path, typer.Argument(help="JSON file with the observation")],
):
    """Resolve an observation against the registry without storing it."""
    payload = load_payload(path)

    async def _validate():
        await init_db()
        async with async_session_factory() as session:
            outcome = await SealResolver(SqlRegistryStore(session)).validate(payload)

            if isinstance(outcome, ExactMatch):
                console.print(
                    f"[green]Exact match[/green] on {outcome.identifier.kind.value} "
                    f"{outcome.identifier.value}"
                )
                print_seal_match(outcome.match)
            elif isinstance(outcome, AmbiguousMatches):
                console.print(
                    f"[yellow]{len(outcome.matches)} candidate seals[/yellow] for "
                    f"{outcome.identifier.kind.value} {outcome.identifier.value}"
                )
                for match in outcome.matches:
                    print_seal_match(match)
            else:
                console.print(f"[cyan]{outcome.message}[/cyan] Submitting will create a new seal.")

    try:
        run_async(_validate())
    except ObservationRejected as e:
        for message in e.messages:
            console.print(f"[red]Rejected:[/red] {message}")
        raise typer.Exit(1) from None


@app.command()
def submit(
    path: Annotated[Path, typer.Argument(help="JSON file with the observation")],
    submitter: Annotated[str, typer.Option("--submitter", "-s", help="Username recorded as submitter")],
):
    """Store an observation and link it to its seal."""
    payload = load_payload(path)

    async def _submit():
        await init_db()
        async with async_session_factory() as session:
            result = await ObservationCommitter(SqlRegistryStore(session)).submit(
                payload, submitter=submitter
            )
            verb = "created new seal" if result.seal_created else "linked to seal"
            console.print(
                f"[green]Stored observation {result.observation_id}[/green], {verb} {result.seal_id}"
            )
            print_seal_match(result.history)

    try:
        run_async(_submit())
    except ObservationRejected as e:
        for message in e.messages:
            console.print(f"[red]Rejected:[/red] {message}")
        raise typer.Exit(1) from None


@app.command("show-seal")
def show_seal(
    seal_id: Annotated[int, typer.Argument(help="Seal ID (its first observation ID)")],
):
    """Show a seal and its observation history."""
    async def _show():
        await init_db()
        async with async_session_factory() as session:
            store = SqlRegistryStore(session)
            seal = await store.get_seal(seal_id)
            if seal is None:
                console.print(f"[red]Error:[/red] Seal not found: {seal_id}")
                raise typer.Exit(1)
            observations = await store.lookup_seal_observation_history(seal.seal_id)
            print_seal_match(SealMatch(seal=seal, observations=observations))

    run_async(_show())


@app.command()
def pending(
    count: Annotated[int, typer.Option(help="Observations per page")] = settings.pending_page_size,
    page: Annotated[int, typer.Option(help="Page number, starting at 1")] = 1,
):
    """List observations awaiting approval."""
    async def _pending():
        await init_db()
        async with async_session_factory() as session:
            store = SqlRegistryStore(session)
            observations = await store.list_pending_observations(count, page)
            total = await store.count_pending_observations()

            if not observations:
                console.print("[yellow]No pending observations.[/yellow]")
                return

            console.print(observation_table("Pending Observations", observations))
            console.print(f"\n[dim]Showing {len(observations)} of {total} pending[/dim]")

    run_async(_pending())


@app.command()
def approve(
    observation_id: Annotated[int, typer.Argument(help="Observation ID")],
):
    """Approve a pending observation."""
    async def _approve():
        await init_db()
        async with async_session_factory() as session:
            store = SqlRegistryStore(session)
            async with store.transaction():
                approved = await store.approve_observation(observation_id)
            if not approved:
                console.print(f"[red]Error:[/red] Observation not found: {observation_id}")
                raise typer.Exit(1)
            console.print(f"[green]Approved observation {observation_id}.[/green]")

    run_async(_approve())


@app.command()
def reset(
    force: Annotated[bool, typer.Option("--force", "-f", help="Skip confirmation")] = False,
):
    """Reset the registry by dropping and recreating all tables.

    WARNING: This destroys all data!
    """
    if not force:
        confirm = typer.confirm(
            "This will DELETE ALL DATA. Are you sure?",
            default=False,
        )
        if not confirm:
            console.print("[yellow]Aborted.[/yellow]")
            raise typer.Exit(0)

    async def _reset():
        from seal_registry.models import Base

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        console.print("[green]Registry reset successfully.[/green]")

    run_async(_reset())


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
