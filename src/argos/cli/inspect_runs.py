"""CLI commands to inspect inferences and their counts."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from argos.db.engine import build_engine
from argos.db.init_db import ensure_db
from argos.services.count_aggregator import CountAggregator
from argos.services.errors import NotFoundError
from argos.services.inference_lifecycle import InferenceLifecycle

console = Console()


def _fmt(value) -> str:
    return "" if value is None else str(value)


def list_inferences_cmd(
    machine_id: Optional[str] = typer.Option(None, "--machine-id", help="Only this machine."),
    status: Optional[str] = typer.Option(None, "--status", help="running or completed."),
    limit: int = typer.Option(20, "--limit", min=1, max=500, help="Max rows."),
) -> None:
    """List inferences, most recently started first."""
    if status is not None and status not in ("running", "completed"):
        console.print(f"[red]✗[/red] Unknown status: {status}")
        raise typer.Exit(2)

    engine = build_engine()
    ensure_db(engine)
    rows = InferenceLifecycle(engine).list_inferences(machine_id=machine_id, status=status, limit=limit)

    table = Table(title="Inferences")
    table.add_column("id", style="cyan")
    table.add_column("machine", style="green")
    table.add_column("status", style="magenta")
    table.add_column("started_at")
    table.add_column("ended_at")
    table.add_column("species")

    for r in rows:
        table.add_row(r.id, r.machine_id, r.status, r.started_at, _fmt(r.ended_at), _fmt(r.species))

    console.print(table)


def results_cmd(
    inference_id: str = typer.Option(..., "--id", help="Inference ID"),
) -> None:
    """Show every count of one inference plus its summary."""
    engine = build_engine()
    ensure_db(engine)
    try:
        results = CountAggregator(engine).results_for_inference(inference_id)
    except NotFoundError as e:
        console.print(f"[red]✗[/red] {e.detail}: {inference_id}")
        raise typer.Exit(1)

    table = Table(title=f"Counts for inference={inference_id} ({results.inference.status})")
    table.add_column("counted_at", style="cyan")
    table.add_column("fish", style="green", justify="right")
    table.add_column("biomass_kg", style="green", justify="right")
    table.add_column("confidence", style="yellow", justify="right")

    for c in results.counts:
        table.add_row(c.counted_at, str(c.fish_count), f"{c.biomass_kg:.3f}", _fmt(c.confidence))

    console.print(table)
    s = results.summary
    console.print(
        f"[bold]total_count={s.total_count} total_biomass_kg={s.total_biomass_kg:.3f} "
        f"last_counted_at={_fmt(s.last_counted_at)}[/bold]"
    )
