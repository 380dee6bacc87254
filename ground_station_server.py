"""Mini README: Entry point CLI for the Dronebase ground-station service.

This script exposes a Typer CLI that allows operators to start the FastAPI
application with configurable host, port, and production flags, and to
generate or inspect mission plan files offline without running the server.
Settings are drawn from ``DRONEBASE_`` environment variables when available.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import uvicorn

from dronebase.configuration import get_settings
from dronebase.errors import CoordinateValidationError, PlanPersistenceError
from dronebase.ingestion import CoordinateIngestor, CoordinateLog
from dronebase.logging_utils import configure_root_logger
from dronebase.mission_planning import Coordinate, parse_plan

cli = typer.Typer(help="Run the Dronebase service and work with mission plan files.")


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # 0.0.0.0 is not a navigable address; point clients at localhost instead.
    client_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting Dronebase on {effective_host}:{effective_port}.\n"
        f"API available at http://{client_host}:{effective_port}{settings.api_prefix}"
    )
    uvicorn.run(
        "dronebase.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def encode(
    latitude: float = typer.Argument(..., help="Waypoint latitude in decimal degrees."),
    longitude: float = typer.Argument(..., help="Waypoint longitude in decimal degrees."),
    output_directory: Optional[Path] = typer.Option(
        None, help="Directory for the plan file (defaults to the configured mission directory)."
    ),
) -> None:
    """Write a single-waypoint mission plan without starting the server."""

    ingestor = CoordinateIngestor(
        mission_directory=output_directory, coordinate_log=CoordinateLog(1)
    )
    try:
        ingested = ingestor.ingest(Coordinate(latitude=latitude, longitude=longitude))
    except CoordinateValidationError as error:
        typer.echo(f"Invalid coordinate: {error}", err=True)
        raise typer.Exit(code=2) from error
    except PlanPersistenceError as error:
        typer.echo("Error saving the .plan file", err=True)
        raise typer.Exit(code=1) from error
    typer.echo(str(ingested.plan_path))


@cli.command()
def inspect(plan_file: Path = typer.Argument(..., exists=True, dir_okay=False)) -> None:
    """Print the home position and waypoint count of a plan file."""

    try:
        document = parse_plan(plan_file.read_text(encoding="utf-8"))
    except ValueError as error:
        typer.echo(f"{plan_file}: {error}", err=True)
        raise typer.Exit(code=1) from error
    mission = document["mission"]
    latitude, longitude, altitude = mission["plannedHomePosition"]
    typer.echo(f"home: {latitude}, {longitude} @ {altitude} m")
    typer.echo(f"waypoints: {len(mission.get('items', []))}")


if __name__ == "__main__":
    cli()
