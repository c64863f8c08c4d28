"""Logging utilities for Sweepfill."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

HANDLER_MARK = "_sweepfill_handler"


@dataclass
class ProcessingStats:
    """Statistics from a layer processing run."""

    processed_count: int = 0
    skipped_count: int = 0
    error_count: int = 0
    segments_generated: int = 0
    errors: list[tuple[int, str]] = field(default_factory=list)
    layer_timings_ms: list[float] = field(default_factory=list)
    was_cancelled: bool = False
    cancelled_count: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_layer_time_ms(self) -> float | None:
        """Average per-layer generation time, if any layer completed."""
        if not self.layer_timings_ms:
            return None
        return sum(self.layer_timings_ms) / len(self.layer_timings_ms)

    @property
    def min_layer_time_ms(self) -> float | None:
        """Fastest per-layer generation time."""
        return min(self.layer_timings_ms) if self.layer_timings_ms else None

    @property
    def max_layer_time_ms(self) -> float | None:
        """Slowest per-layer generation time."""
        return max(self.layer_timings_ms) if self.layer_timings_ms else None


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Replace handlers from an earlier call instead of stacking them
    for handler in list(root_logger.handlers):
        if getattr(handler, HANDLER_MARK, False):
            root_logger.removeHandler(handler)
            handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        setattr(file_handler, HANDLER_MARK, True)
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(
        logging.ERROR if quiet else getattr(logging, console_level.upper())
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(console_handler, HANDLER_MARK, True)
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("sweepfill")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level if log_file else console_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking layer processing progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_layer_start(self, layer_index: int) -> None:
        """Log start of layer processing."""
        self._logger.debug("Processing layer", layer=layer_index)

    def log_layer_complete(
        self,
        layer_index: int,
        segments: int,
        duration_ms: float,
    ) -> None:
        """Log successful layer processing."""
        self._logger.info(
            "Layer processed",
            layer=layer_index,
            segments=segments,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.segments_generated += segments

    def log_layer_skipped(self, layer_index: int, reason: str) -> None:
        """Log skipped layer."""
        self._logger.debug("Layer skipped", layer=layer_index, reason=reason)
        self._stats.skipped_count += 1

    def log_layer_error(
        self,
        layer_index: int,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log layer processing error."""
        self._logger.error(
            "Layer processing failed",
            layer=layer_index,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((layer_index, str(error)))

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
