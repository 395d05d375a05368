from __future__ import annotations

from typing import Sequence

import typer

from cli.harness import Measurement


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def render_measurements(measurements: Sequence[Measurement]) -> None:
    echo_heading("Transferred Bytes")
    if not measurements:
        typer.echo("No measurements recorded.")
        return
    width = max(len(measurement.label) for measurement in measurements) + 1
    for measurement in measurements:
        label = f"{measurement.label}:"
        typer.echo(f"{label:<{width}} {measurement.bytes_received}")
