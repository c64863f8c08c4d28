"""Utility functions for sweepfill.

This module provides utility functions including:

- Logging setup and configuration
- Processing statistics tracking
"""

from sweepfill.utils.logging import (
    ProcessingLogger,
    ProcessingStats,
    configure_logging,
)

__all__ = [
    "ProcessingLogger",
    "ProcessingStats",
    "configure_logging",
]
