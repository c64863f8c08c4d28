"""Configuration management for sweepfill.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- PrecisionConfig: Lattice scale settings
- InfillParams: Per-call infill parameters (angle, spacing, parity, linewidth)
- InfillConfig: Pattern selection and parameters
- SweepConfig: Sweep engine settings
- ProcessingConfig: Batch layer processing settings
- LoggingConfig: Logging settings
- SweepfillSettings: Main application settings
"""

from sweepfill.config.settings import (
    InfillConfig,
    InfillParams,
    LoggingConfig,
    PrecisionConfig,
    ProcessingConfig,
    SweepConfig,
    SweepfillSettings,
    get_default_settings,
)

__all__ = [
    "InfillConfig",
    "InfillParams",
    "LoggingConfig",
    "PrecisionConfig",
    "ProcessingConfig",
    "SweepConfig",
    "SweepfillSettings",
    "get_default_settings",
]
