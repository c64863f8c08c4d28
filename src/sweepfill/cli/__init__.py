"""Command-line interface for sweepfill.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- Contours given inline as coordinate loops
- Progress bars for multi-layer processing
- JSON output of the generated segments
- Verbose/quiet output modes
"""

from sweepfill.cli.app import cli, main

__all__ = ["cli", "main"]
