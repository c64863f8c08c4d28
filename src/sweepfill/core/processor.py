"""Parallel processing orchestration for multi-layer infill generation.

This module generates infill for a stack of layer contours with parallel
processing of individual layers using ProcessPoolExecutor.

Key components:
- process_layer: Top-level picklable function for parallel execution
- LayerProcessor: Main orchestrator class for layer processing
"""

import time
import traceback
from collections.abc import Callable, Sequence
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any

from sweepfill.config import InfillParams, SweepfillSettings
from sweepfill.core.infill import InfillGenerator, resolve_params
from sweepfill.domain import Contour, FillRule, InfillPattern, InfillResult
from sweepfill.exceptions import ProcessingCancelledError
from sweepfill.utils import ProcessingLogger, ProcessingStats, configure_logging


def process_layer(
    layer_index: int,
    contour_dict: dict[str, Any],
    pattern_value: int,
    params_dict: dict[str, Any],
    fill_rule_value: str = FillRule.NONZERO.value,
) -> dict[str, Any]:
    """Generate infill for a single layer.

    Top-level function designed to be picklable for use with ProcessPoolExecutor.
    Deserializes the contour, generates infill, and returns the result.

    Args:
        layer_index: Position of the layer in the stack
        contour_dict: Serialized contour (from Contour.to_dict())
        pattern_value: Numeric InfillPattern value
        params_dict: Serialized infill parameters
        fill_rule_value: FillRule value

    Returns:
        Dictionary containing either:
        - Success: {"layer": int, "infill": result_dict, "segments": int, "duration_ms": float}
        - Error: {"layer": int, "error": str, "traceback": str, "duration_ms": float}
    """
    start_time = time.time()

    try:
        contour = Contour.from_dict(contour_dict)
        generator = InfillGenerator(fill_rule=FillRule(fill_rule_value))
        infill = generator.generate(contour, pattern_value, InfillParams(**params_dict))

        duration_ms = (time.time() - start_time) * 1000
        return {
            "layer": layer_index,
            "infill": infill.to_dict(),
            "segments": len(infill),
            "duration_ms": duration_ms,
        }

    except Exception as e:
        duration_ms = (time.time() - start_time) * 1000
        return {
            "layer": layer_index,
            "error": str(e),
            "traceback": traceback.format_exc(),
            "duration_ms": duration_ms,
        }


@dataclass
class ProcessingResult:
    """Outcome of a layer processing run.

    Attributes:
        results: Infill per layer index; skipped layers hold empty results
            and failed layers are absent
        stats: Counts, timings and error details
    """

    results: dict[int, InfillResult] = field(default_factory=dict)
    stats: ProcessingStats = field(default_factory=ProcessingStats)


class LayerProcessor:
    """Orchestrates parallel infill generation for a stack of layers.

    Manages the complete workflow:
    1. Give degenerate layers an empty result without a worker
    2. Assign per-layer parameters (alternating parity if configured)
    3. Generate infill for layers in worker processes
    4. Collect results and update statistics

    Example:
        settings = SweepfillSettings()
        processor = LayerProcessor(settings)
        outcome = processor.process(layers, InfillPattern.LINEAR, max_workers=4)
    """

    def __init__(self, config: SweepfillSettings) -> None:
        """Initialize layer processor with configuration.

        Args:
            config: Sweepfill settings containing infill and processing config
        """
        self.config = config
        self.logger = configure_logging(
            log_file=config.logging.log_file,
            console_level=config.logging.log_level,
            file_level=config.logging.file_log_level,
            quiet=False,
        )

    def layer_params(self, params: InfillParams, layer_index: int) -> InfillParams:
        """Parameters for one layer, flipping parity on odd layers if enabled."""
        if not self.config.processing.alternate_parity:
            return params
        return params.model_copy(update={"parity": (params.parity + layer_index) % 2})

    def process(
        self,
        layers: Sequence[Contour],
        pattern: InfillPattern | int | str | None = None,
        params: InfillParams | dict[str, Any] | None = None,
        max_workers: int | None = None,
        progress_callback: Callable[[int, int, int, bool], None] | None = None,
    ) -> ProcessingResult:
        """Generate infill for every layer.

        Args:
            layers: Layer contours, bottom to top
            pattern: Infill pattern (None = configured pattern)
            params: Infill parameters (None = configured parameters)
            max_workers: Maximum worker processes (None = configured value)
            progress_callback: Optional callback(completed, total, layer_index, success)
                for progress updates

        Returns:
            ProcessingResult with per-layer infill and statistics

        Raises:
            InvalidParametersError: If params fail validation
            ProcessingCancelledError: If processing is cancelled by user
        """
        processing_logger = ProcessingLogger(self.logger)
        stats = processing_logger.stats
        stats.start_time = time.time()

        resolved_pattern = (
            self.config.infill.pattern if pattern is None else InfillPattern.parse(pattern)
        )
        base_params = self.config.infill.params if params is None else resolve_params(params)

        if max_workers is None:
            max_workers = self.config.processing.max_workers

        self.logger.info(
            "Starting layer processing",
            layers=len(layers),
            pattern=resolved_pattern.name,
            max_workers=max_workers,
        )

        tasks: dict[int, dict[str, Any]] = {}
        outcome = ProcessingResult(stats=stats)
        for index, contour in enumerate(layers):
            if contour.is_degenerate():
                processing_logger.log_layer_skipped(index, "degenerate contour")
                outcome.results[index] = InfillResult.empty(contour.context, resolved_pattern)
                continue
            tasks[index] = contour.to_dict()

        if tasks:
            parallel_results = self._process_layers_parallel(
                tasks=tasks,
                pattern=resolved_pattern,
                params=base_params,
                max_workers=max_workers,
                processing_logger=processing_logger,
                progress_callback=progress_callback,
            )
            outcome.results.update(parallel_results)
        else:
            self.logger.info("No layers to process")

        stats.end_time = time.time()

        self.logger.info(
            "Processing complete",
            processed=stats.processed_count,
            skipped=stats.skipped_count,
            errors=stats.error_count,
            segments=stats.segments_generated,
            duration_seconds=round(stats.duration_seconds, 2),
        )

        return outcome

    def _process_layers_parallel(
        self,
        tasks: dict[int, dict[str, Any]],
        pattern: InfillPattern,
        params: InfillParams,
        max_workers: int | None,
        processing_logger: ProcessingLogger,
        progress_callback: Callable[[int, int, int, bool], None] | None = None,
    ) -> dict[int, InfillResult]:
        """Generate layers in parallel using ProcessPoolExecutor.

        Args:
            tasks: Serialized contours keyed by layer index
            pattern: Infill pattern
            params: Base infill parameters
            max_workers: Maximum worker processes
            processing_logger: Logger collecting statistics
            progress_callback: Optional callback(completed, total, layer_index, success)

        Returns:
            Dictionary mapping layer indices to infill results
        """
        results: dict[int, InfillResult] = {}
        stats = processing_logger.stats
        fill_rule = self.config.sweep.fill_rule.value

        self.logger.info(
            "Starting parallel processing",
            layer_count=len(tasks),
            max_workers=max_workers,
        )

        total = len(tasks)
        completed = 0
        pending_futures: dict = {}

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            for index, contour_dict in tasks.items():
                processing_logger.log_layer_start(index)
                future = executor.submit(
                    process_layer,
                    index,
                    contour_dict,
                    pattern.value,
                    self.layer_params(params, index).model_dump(),
                    fill_rule,
                )
                pending_futures[future] = index

            try:
                for future in as_completed(pending_futures):
                    layer_index = pending_futures.pop(future)
                    success = False

                    try:
                        result = future.result()

                        if "error" in result:
                            processing_logger.log_layer_error(
                                layer_index=layer_index,
                                error=Exception(result["error"]),
                                traceback=result.get("traceback"),
                            )
                        else:
                            success = True
                            results[layer_index] = InfillResult.from_dict(result["infill"])

                            duration_ms = result.get("duration_ms", 0.0)
                            processing_logger.log_layer_complete(
                                layer_index=layer_index,
                                segments=result["segments"],
                                duration_ms=duration_ms,
                            )
                            stats.layer_timings_ms.append(duration_ms)

                    except Exception as e:
                        processing_logger.log_layer_error(
                            layer_index=layer_index,
                            error=e,
                            traceback=traceback.format_exc(),
                        )

                    completed += 1
                    if progress_callback is not None:
                        progress_callback(completed, total, layer_index, success)

            except KeyboardInterrupt:
                self.logger.info("Cancellation requested by user")
                for f in pending_futures:
                    f.cancel()

                stats.was_cancelled = True
                stats.cancelled_count = len(pending_futures)

                executor.shutdown(wait=True, cancel_futures=True)
                raise ProcessingCancelledError(
                    processed_count=stats.processed_count,
                    pending_count=stats.cancelled_count,
                ) from None

        return results
