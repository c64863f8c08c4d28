"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from sweepfill.domain import Contour, InfillResult

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for layer processing.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]Sweepfill[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_contour_info(contour: Contour) -> None:
    """Print contour summary in world units.

    Args:
        contour: Input contour
    """
    context = contour.context
    min_x, min_y, max_x, max_y = contour.bounding_box()
    area = contour.signed_area() / (context.p * context.p)
    holes = sum(1 for loop in contour.loops if loop.is_hole())
    console.print(
        f"  {len(contour.loops)} loops ({holes} holes) {SYM_DOT} "
        f"{contour.vertex_count} vertices {SYM_DOT} area {area:,.3f}"
    )
    console.print(
        f"  bounds ({context.to_world(min_x):g}, {context.to_world(min_y):g}) – "
        f"({context.to_world(max_x):g}, {context.to_world(max_y):g}) {SYM_DOT} p={context.p:g}"
    )


def print_infill_summary(result: InfillResult) -> None:
    """Print segment counts per pass for one infill result.

    Args:
        result: Generated infill
    """
    if result.is_empty():
        console.print("  [yellow]No infill generated[/yellow]")
        return

    passes = result.passes()
    console.print(
        f"  [green]{len(result)}[/green] segments {SYM_DOT} {len(passes)} passes "
        f"{SYM_DOT} length {result.total_length():,.3f}"
    )
    for pass_index, segments in passes.items():
        console.print(f"    pass {pass_index}: {len(segments)} segments")


def print_layer_table(results: dict[int, InfillResult], total_layers: int) -> None:
    """Print a per-layer results table.

    Args:
        results: Infill per layer index
        total_layers: Number of layers submitted
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Layer", justify="right")
    table.add_column("Segments", justify="right")
    table.add_column("Length", justify="right")

    for index in range(total_layers):
        result = results.get(index)
        if result is None:
            table.add_row(str(index), f"[red]{SYM_ERR}[/red]", "")
        else:
            table.add_row(str(index), str(len(result)), f"{result.total_length():,.3f}")

    console.print(table)


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_processing_info(workers: int, is_auto: bool = False) -> None:
    """Print processing configuration.

    Args:
        workers: Number of parallel workers
        is_auto: Whether the count was auto-detected
    """
    auto_suffix = " (auto)" if is_auto else ""
    console.print(f"  {workers} workers{auto_suffix} {SYM_DOT} Ctrl+C to cancel")


def print_success(
    total_time_s: float,
    processed: int,
    segments: int,
    errors: int,
    avg_time_ms: float | None = None,
    min_time_ms: float | None = None,
    max_time_ms: float | None = None,
) -> None:
    """Print success message with summary.

    Args:
        total_time_s: Total processing time in seconds
        processed: Number of layers processed
        segments: Total number of segments generated
        errors: Number of errors encountered
        avg_time_ms: Average processing time per layer in milliseconds
        min_time_ms: Minimum processing time per layer in milliseconds
        max_time_ms: Maximum processing time per layer in milliseconds
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {processed} layers {SYM_DOT} {segments} segments {SYM_DOT} "
        f"[{error_style}]{errors} errors[/{error_style}]"
    )

    if avg_time_ms is not None:
        timing_str = f"{avg_time_ms:.1f}ms avg"
        if min_time_ms is not None and max_time_ms is not None:
            timing_str += f" ({min_time_ms:.1f}–{max_time_ms:.1f}ms range)"
        console.print(f"  {timing_str}")


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")


def print_cancellation_summary(processed: int, cancelled: int) -> None:
    """Print cancellation summary.

    Args:
        processed: Number of layers completed before cancellation
        cancelled: Number of pending layers that were cancelled
    """
    console.print(f"\n{SYM_DOT} [bold]Cancelled[/bold]")
    console.print(f"  {processed} layers completed {SYM_DOT} {cancelled} layers cancelled")
