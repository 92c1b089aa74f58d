from __future__ import annotations

import typer

from argos.cli.inspect_runs import list_inferences_cmd, results_cmd
from argos.db.engine import build_engine
from argos.db.init_db import ensure_db, init_db

app = typer.Typer(help="Argos CLI (database setup, inspection, serving).")

app.command("list-inferences")(list_inferences_cmd)
app.command("results")(results_cmd)


@app.command("init-db")
def init_db_cmd() -> None:
    """Create missing tables. Existing rows are kept."""
    engine = build_engine()
    ensure_db(engine)
    typer.echo("✅ Database initialized and reachable.")


@app.command("reset-db")
def reset_db_cmd(
    yes: bool = typer.Option(False, "--yes", help="Confirm dropping all data."),
) -> None:
    """Drop and recreate every table."""
    if not yes:
        typer.echo("Refusing to reset without --yes.")
        raise typer.Exit(1)
    engine = build_engine()
    init_db(engine)
    typer.echo("✅ Database reset.")


@app.command("serve")
def serve_cmd(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(8000, help="Bind port."),
    reload: bool = typer.Option(False, help="Auto-reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("argos.api.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
