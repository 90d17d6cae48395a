#!/usr/bin/env python3
"""CLI for seedlink-stations using Typer: one-off queries and the HTTP service."""

import asyncio
import json
import logging
from typing import Optional

import typer
from typing_extensions import Annotated

from . import __version__  # type: ignore
from .cache import ResultCache
from .errors import InvalidTargetError
from .orchestrator import QueryOrchestrator
from .targets import parse_target
from .types import (
    DEFAULT_LISTEN_HOST,
    DEFAULT_LISTEN_PORT,
    DEFAULT_PORT,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_TIMEOUT,
    QueryResult,
    ServiceConfig,
    Target,
)

app = typer.Typer(
    name="seedlink-stations",
    help="Discover the networks and stations exposed by SeedLink servers.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

# ============================================================================
# Shared options and helpers
# ============================================================================

PortOption = Annotated[
    int,
    typer.Option("--port", "-p", help="SeedLink port for targets given without one", envvar="SEEDLINK_STATIONS_PORT"),
]
TimeoutOption = Annotated[
    float,
    typer.Option("--timeout", "-t", help="Socket connect/read timeout in seconds", envvar="SEEDLINK_STATIONS_TIMEOUT"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Enable debug logging"),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Output as JSON"),
]


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbose flag."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if not verbose else "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def format_result(result: QueryResult) -> list[str]:
    """Render one result as text lines: a header followed by one line per station."""
    if result.error is not None:
        state = "connected" if result.connected else "unreachable"
        return [f"{result.target_id}: ERROR {result.error.value} ({state})"]
    lines = [f"{result.target_id}: {result.server_identifier or '?'} ({len(result.stations)} stations)"]
    for s in result.stations:
        lines.append(f"  {s.network:<2} {s.station:<5} {s.site}")
    return lines


def run_query(targets: list[Target], timeout: float) -> list[QueryResult]:
    """Resolve targets once with a fresh cache."""
    orchestrator = QueryOrchestrator(ResultCache(), timeout=timeout)
    return asyncio.run(orchestrator.run(targets))


# ============================================================================
# Commands
# ============================================================================

@app.command()
def query(
    targets: Annotated[list[str], typer.Argument(help="Servers to query as host[:port] (space-separated)")],
    port: PortOption = DEFAULT_PORT,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    verbose: VerboseOption = False,
    json_output: JsonOption = False,
) -> None:
    """
    Query one or more SeedLink servers for their station listing.

    Exits with 3 if any server could not be queried.
    """
    setup_logging(verbose)

    try:
        parsed = [parse_target(t, default_port=port) for t in targets]
        results = run_query(parsed, timeout)
    except InvalidTargetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    except Exception as e:
        typer.echo(f"Error: Unexpected error: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        raise typer.Exit(4)

    if json_output:
        typer.echo(json.dumps([r.to_payload() for r in results], indent=2))
    else:
        for result in results:
            for line in format_result(result):
                typer.echo(line)

    if any(r.error is not None for r in results):
        raise typer.Exit(3)


@app.command()
def serve(
    listen_host: Annotated[
        str,
        typer.Option("--listen-host", help="Address to bind the HTTP service to", envvar="SEEDLINK_STATIONS_LISTEN_HOST"),
    ] = DEFAULT_LISTEN_HOST,
    listen_port: Annotated[
        int,
        typer.Option("--listen-port", help="Port to bind the HTTP service to", envvar="SEEDLINK_STATIONS_LISTEN_PORT"),
    ] = DEFAULT_LISTEN_PORT,
    refresh_interval: Annotated[
        float,
        typer.Option(
            "--refresh-interval",
            "-r",
            help="Seconds a cached server result is reused before querying again",
            envvar="SEEDLINK_STATIONS_REFRESH_INTERVAL",
        ),
    ] = DEFAULT_REFRESH_INTERVAL,
    port: PortOption = DEFAULT_PORT,
    timeout: TimeoutOption = DEFAULT_TIMEOUT,
    verbose: VerboseOption = False,
) -> None:
    """
    Run the HTTP service: GET /?host=a,b:18001 returns station listings as JSON.

    Results are cached per host[:port] for --refresh-interval seconds.
    """
    setup_logging(verbose)
    logging.getLogger("seedlink_stations").setLevel(logging.DEBUG if verbose else logging.INFO)

    try:
        config = ServiceConfig(
            listen_host=listen_host,
            listen_port=listen_port,
            socket_timeout=timeout,
            refresh_interval=refresh_interval,
            default_port=port,
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)

    import uvicorn

    from .server import create_app

    cache = ResultCache(refresh_interval=config.refresh_interval)
    orchestrator = QueryOrchestrator(cache, timeout=config.socket_timeout)
    uvicorn.run(
        create_app(orchestrator, config),
        host=config.listen_host,
        port=config.listen_port,
        log_level="debug" if verbose else "info",
    )


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"seedlink-stations {__version__}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version and exit"),
    ] = None,
) -> None:
    """seedlink-stations - station discovery for SeedLink servers."""
    pass


if __name__ == "__main__":
    app()
