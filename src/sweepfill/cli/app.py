"""CLI application entry point for sweepfill.

This module provides the main CLI interface using Typer.
"""

import json
import math
import os
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError

from sweepfill import __version__
from sweepfill.cli.output import (
    console,
    create_progress,
    print_cancellation_summary,
    print_contour_info,
    print_error,
    print_header,
    print_infill_summary,
    print_layer_table,
    print_processing_info,
    print_step,
    print_success,
)
from sweepfill.config import (
    InfillConfig,
    LoggingConfig,
    PrecisionConfig,
    ProcessingConfig,
    SweepConfig,
    SweepfillSettings,
)
from sweepfill.core import InfillGenerator, LayerProcessor, resolve_params
from sweepfill.domain import Contour, FillRule, InfillPattern, InfillResult
from sweepfill.exceptions import ProcessingCancelledError, SweepfillError
from sweepfill.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="sweepfill",
    help="Generate linear, triangular and hexagonal infill for polygon contours.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Sweepfill[/bold blue] v{__version__}")
        raise typer.Exit()


def parse_loop(text: str) -> list[tuple[float, float]]:
    """Parse a loop given as whitespace-separated ``x,y`` pairs.

    Args:
        text: Loop text, e.g. ``"0,0 10,0 10,10 0,10"``

    Returns:
        List of (x, y) world coordinates

    Raises:
        ValueError: If a pair is malformed
    """
    points = []
    for pair in text.split():
        parts = pair.split(",")
        if len(parts) != 2:
            raise ValueError(f"expected x,y but got {pair!r}")
        points.append((float(parts[0]), float(parts[1])))
    return points


@app.command()
def fill(
    loops: Annotated[
        list[str] | None,
        typer.Option(
            "--loop",
            "-l",
            help='Contour loop as "x,y x,y ..." in world units (repeat for holes)',
            show_default=False,
        ),
    ] = None,
    pattern: Annotated[
        str,
        typer.Option(
            "--pattern",
            "-p",
            help="Infill pattern (none|linear|triangle|hex)",
        ),
    ] = "linear",
    spacing: Annotated[
        float | None,
        typer.Option(
            "--spacing",
            "-s",
            help="Line spacing in world units (default: one world unit)",
        ),
    ] = None,
    angle: Annotated[
        float,
        typer.Option(
            "--angle",
            "-a",
            help="Base fill angle in degrees",
        ),
    ] = 0.0,
    parity: Annotated[
        int,
        typer.Option(
            "--parity",
            help="Rotate the fill by 90 degrees when 1",
            min=0,
            max=1,
        ),
    ] = 0,
    linewidth: Annotated[
        float,
        typer.Option(
            "--linewidth",
            "-w",
            help="Extrusion width trimmed from hexagon edges, in world units",
            min=0.0,
        ),
    ] = 0.0,
    precision: Annotated[
        float,
        typer.Option(
            "--precision",
            help="Lattice units per world unit",
        ),
    ] = 1000.0,
    fill_rule: Annotated[
        str,
        typer.Option(
            "--fill-rule",
            help="Interior rule for overlapping loops (nonzero|even_odd)",
        ),
    ] = "nonzero",
    layers: Annotated[
        int,
        typer.Option(
            "--layers",
            "-n",
            help="Number of layers to fill with alternating parity",
            min=1,
        ),
    ] = 1,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-j",
            help="Number of parallel workers for layers (default: auto)",
            min=1,
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print segments as JSON on stdout",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Fill a polygon contour with infill line segments.

    The first --loop is usually the outer boundary; further loops wound the
    opposite way cut holes.

    Example:
        sweepfill --loop "0,0 10,0 10,10 0,10" --pattern triangle --spacing 2
    """
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    if not loops:
        print_error(
            "No contour given",
            details='Provide at least one --loop "x,y x,y ...".',
        )
        raise typer.Exit(code=1)

    resolved_pattern = InfillPattern.parse(pattern)
    if resolved_pattern is InfillPattern.NONE and pattern.strip().lower() not in ("none", "0"):
        print_error(
            f"Invalid pattern: {pattern}",
            details="Valid values: none, linear, triangle, hex",
        )
        raise typer.Exit(code=1)

    try:
        rule = FillRule(fill_rule.lower())
    except ValueError:
        print_error(
            f"Invalid fill rule: {fill_rule}",
            details="Valid values: nonzero, even_odd",
        )
        raise typer.Exit(code=1)

    try:
        coordinates = [parse_loop(text) for text in loops]
    except ValueError as e:
        print_error(f"Invalid loop: {e}")
        raise typer.Exit(code=1)

    # JSON output owns stdout
    show = not (quiet or as_json)

    if show:
        print_header(__version__)

    try:
        params = resolve_params(
            {
                "angle": math.radians(angle),
                "spacing": spacing,
                "parity": parity,
                "linewidth": linewidth,
            }
        )
        settings = SweepfillSettings(
            precision=PrecisionConfig(p=precision),
            infill=InfillConfig(pattern=resolved_pattern, params=params),
            sweep=SweepConfig(fill_rule=rule),
            processing=ProcessingConfig(max_workers=workers),
            logging=LoggingConfig(
                log_file=log_file,
                log_level="DEBUG" if verbose else log_level,
            ),
        )
        context = settings.precision.create_context()
        contour = Contour.from_coordinates(context, coordinates)

        if show:
            print_step("Contour")
            print_contour_info(contour)

        if layers == 1:
            configure_logging(
                log_file=settings.logging.log_file,
                console_level=settings.logging.log_level,
                file_level=settings.logging.file_log_level,
                quiet=quiet,
            )
            generator = InfillGenerator(context, fill_rule=rule)
            result = generator.generate(contour, resolved_pattern, params)

            if as_json:
                console.print_json(json.dumps(_result_payload(result)))
            elif show:
                print_step(f"Infill ({resolved_pattern.name.lower()})")
                print_infill_summary(result)
            return

        _fill_layers(settings, contour, layers, workers, as_json, show)

    except ValidationError as e:
        print_error("Invalid settings", details=str(e))
        raise typer.Exit(code=1)
    except SweepfillError as e:
        print_error(str(e))
        raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except Exception as e:
        print_error(f"Unexpected error: {e}")
        raise typer.Exit(code=1)


def _fill_layers(
    settings: SweepfillSettings,
    contour: Contour,
    layers: int,
    workers: int | None,
    as_json: bool,
    show: bool,
) -> None:
    """Fill a stack of identical layers with the layer processor.

    Args:
        settings: Sweepfill settings
        contour: Contour repeated on every layer
        layers: Number of layers
        workers: Worker processes (None = auto)
        as_json: Print segments as JSON
        show: Print progress and summary
    """
    stack = [contour] * layers
    processor = LayerProcessor(settings)

    try:
        if show:
            actual_workers = workers if workers else os.cpu_count() or 1
            print_step("Processing")
            print_processing_info(actual_workers, is_auto=(workers is None))

            with create_progress() as progress:
                task_id = progress.add_task(f"Filling {layers} layers", total=layers)

                def update_progress(completed: int, *_: object) -> None:
                    progress.update(task_id, completed=completed)

                outcome = processor.process(
                    stack, max_workers=workers, progress_callback=update_progress
                )
        else:
            outcome = processor.process(stack, max_workers=workers)
    except ProcessingCancelledError as e:
        if show:
            print_cancellation_summary(processed=e.processed_count, cancelled=e.pending_count)
        raise typer.Exit(code=130) from None  # Standard Unix SIGINT exit code

    stats = outcome.stats

    if as_json:
        payload = {
            "layers": [
                {"layer": index, **_result_payload(result)}
                for index, result in sorted(outcome.results.items())
            ]
        }
        console.print_json(json.dumps(payload))
        return

    if show:
        print_layer_table(outcome.results, layers)
        print_success(
            total_time_s=stats.duration_seconds,
            processed=stats.processed_count,
            segments=stats.segments_generated,
            errors=stats.error_count,
            avg_time_ms=stats.avg_layer_time_ms,
            min_time_ms=stats.min_layer_time_ms,
            max_time_ms=stats.max_layer_time_ms,
        )

    if stats.error_count:
        raise typer.Exit(code=1)


def _result_payload(result: InfillResult) -> dict[str, Any]:
    """World-unit JSON payload for one infill result."""
    to_world = result.context.to_world
    return {
        "pattern": result.pattern.name.lower(),
        "segments": [
            {
                "pass": segment.pass_index,
                "start": [to_world(segment.start.x), to_world(segment.start.y)],
                "end": [to_world(segment.end.x), to_world(segment.end.y)],
            }
            for segment in result
        ],
    }


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
