from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

import typer
from pydantic import TypeAdapter

from app.main import create_app
from app.server import ServerHandle
from cli.client import ApiClient, HarnessError
from cli.config import CLIConfig, load_config
from cli.harness import Measurement, MeasurementCase, build_battery, run_battery
from cli.render import render_measurements
from logging_config import configure_logging
from settings import get_settings

_REPORT_ADAPTER = TypeAdapter(List[Measurement])

app = typer.Typer(
    help="Serve synthetic time series in several encodings and compare their transfer sizes.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _build_server(host: Optional[str] = None, port: Optional[int] = None) -> ServerHandle:
    settings = get_settings()
    return ServerHandle(
        create_app(),
        host=host or settings.host,
        port=settings.port if port is None else port,
        log_level=settings.log_level,
    )


def _measure(base_url: str, cases: Sequence[MeasurementCase], config: CLIConfig) -> List[Measurement]:
    client = ApiClient(base_url, timeout=config.request_timeout)
    try:
        return run_battery(client, cases)
    except HarnessError as exc:
        typer.secho(f"Measurement aborted: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    finally:
        client.close()


def _report(measurements: Sequence[Measurement], output: Optional[Path]) -> None:
    typer.echo()
    render_measurements(measurements)
    if output is not None:
        output.write_bytes(_REPORT_ADAPTER.dump_json(list(measurements), indent=2))
        typer.echo(f"Report written to {output}")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level.upper() if log_level else None)


@app.command("serve")
def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Loopback address to bind."),
    port: Optional[int] = typer.Option(None, "--port", help="Port to bind; 0 picks a free one."),
) -> None:
    """Serve the encodings until interrupted."""
    handle = _build_server(host, port)
    typer.echo(f"Server is running on {handle.base_url}")
    handle.serve_forever()


@app.command("measure")
def measure_command(
    point_count: Optional[int] = typer.Option(
        None,
        "--point-count",
        "-n",
        min=0,
        help="Points per request (defaults to BENCH_POINT_COUNT env or 1000000).",
    ),
    decimal_places: Optional[int] = typer.Option(
        None,
        "--decimal-places",
        "-d",
        min=0,
        help="Decimal places for JSON, CSV, MessagePack and protobuf values.",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Measure an already running server instead of starting one.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each response.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        dir_okay=False,
        writable=True,
        help="Also write the measurements to this JSON file.",
    ),
    keep_serving: bool = typer.Option(
        False,
        "--keep-serving/--exit",
        help="Keep the started server running after the measurements.",
    ),
) -> None:
    """Request every encoding with and without gzip and report bytes received."""
    config = load_config(
        base_url=base_url,
        point_count=point_count,
        decimal_places=decimal_places,
        request_timeout=timeout,
    )
    cases = build_battery(config.point_count, config.decimal_places)

    if config.base_url:
        _report(_measure(config.base_url, cases, config), output)
        return

    handle = _build_server()
    try:
        handle.start()
    except RuntimeError as exc:
        typer.secho(f"Server failed to start: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(f"Server is running on {handle.base_url}")
    try:
        _report(_measure(handle.base_url, cases, config), output)
        if keep_serving:
            typer.echo("Still serving; press Ctrl+C to stop.")
            handle.wait()
    except KeyboardInterrupt:
        typer.echo()
    finally:
        handle.stop()
