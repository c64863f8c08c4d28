"""Configuration settings for Sweepfill."""

import math
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from sweepfill.domain import FillRule, InfillPattern, PrecisionContext


class PrecisionConfig(BaseModel):
    """Configuration for the lattice coordinate space."""

    model_config = ConfigDict(allow_inf_nan=False)

    p: float = Field(
        default=1000.0,
        gt=0.0,
        description="Lattice units per world unit",
    )
    epsilon: float = Field(
        default=1e-6,
        ge=0.0,
        description="Near-coincidence tolerance in world units",
    )

    def create_context(self) -> PrecisionContext:
        """Build the precision context described by this configuration."""
        return PrecisionContext(p=self.p, epsilon=self.epsilon)


class InfillParams(BaseModel):
    """Per-call infill parameters.

    Every field is optional; omitted values fall back to the defaults below,
    and an omitted spacing falls back to the precision context's default
    spacing.
    """

    model_config = ConfigDict(allow_inf_nan=False, extra="forbid")

    angle: float = Field(
        default=0.0,
        description="Base fill angle in radians",
    )
    spacing: float | None = Field(
        default=None,
        gt=0.0,
        description="Distance between parallel fill lines in world units (None = context default)",
    )
    parity: int = Field(
        default=0,
        ge=0,
        le=1,
        description="Nonzero rotates the base angle by 90 degrees",
    )
    linewidth: float = Field(
        default=0.0,
        ge=0.0,
        description="Extrusion width trimmed from hexagon cell edges, in world units",
    )

    def effective_angle(self) -> float:
        """Base angle with the parity rotation applied."""
        if self.parity:
            return self.angle + math.pi / 2
        return self.angle


class InfillConfig(BaseModel):
    """Configuration for infill generation."""

    pattern: InfillPattern = Field(
        default=InfillPattern.LINEAR,
        description="Infill pattern",
    )
    params: InfillParams = Field(default_factory=InfillParams)


class SweepConfig(BaseModel):
    """Configuration for the sweep engine."""

    fill_rule: FillRule = Field(
        default=FillRule.NONZERO,
        description="Interior rule for overlapping loops",
    )


class ProcessingConfig(BaseModel):
    """Configuration for batch layer processing."""

    max_workers: int | None = Field(
        default=None,
        description="Max worker processes (None = auto)",
    )
    alternate_parity: bool = Field(
        default=True,
        description="Flip parity on every other layer to alternate raster direction",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class SweepfillSettings(BaseModel):
    """Main application settings."""

    precision: PrecisionConfig = Field(default_factory=PrecisionConfig)
    infill: InfillConfig = Field(default_factory=InfillConfig)
    sweep: SweepConfig = Field(default_factory=SweepConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> SweepfillSettings:
    """Get default application settings."""
    return SweepfillSettings()
