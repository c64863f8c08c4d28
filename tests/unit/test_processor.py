"""Tests for parallel processing orchestration."""

from unittest.mock import MagicMock, Mock, patch

import pytest

from sweepfill.config import InfillParams, SweepfillSettings
from sweepfill.core.processor import LayerProcessor, process_layer
from sweepfill.domain import Contour, InfillPattern, InfillResult, PrecisionContext
from sweepfill.exceptions import ProcessingCancelledError


@pytest.fixture
def square() -> Contour:
    """10x10 world-unit square."""
    return Contour.from_coordinates(
        PrecisionContext(), [[(0, 0), (10, 0), (10, 10), (0, 10)]]
    )


@pytest.fixture
def flat() -> Contour:
    """Contour with all vertices on one line."""
    return Contour.from_coordinates(PrecisionContext(), [[(0, 0), (5, 0), (10, 0)]])


@pytest.fixture
def settings() -> SweepfillSettings:
    """Create test sweepfill settings."""
    settings = SweepfillSettings()
    settings.infill.params = InfillParams(spacing=2.0)
    return settings


def make_executor(results: list[dict]) -> tuple[MagicMock, list[MagicMock]]:
    """Create a mock executor whose futures return the given results in order."""
    futures = []
    for result in results:
        future = MagicMock()
        future.result.return_value = result
        futures.append(future)

    executor = MagicMock()
    executor.submit.side_effect = futures
    executor.__enter__.return_value = executor
    executor.__exit__.return_value = None
    return executor, futures


class TestProcessLayer:
    """Tests for process_layer function."""

    def test_process_layer_success(self, square: Contour):
        """Test generating one layer from serialized input."""
        result = process_layer(
            3,
            square.to_dict(),
            InfillPattern.LINEAR.value,
            InfillParams(spacing=2.0).model_dump(),
        )

        assert "error" not in result
        assert result["layer"] == 3
        assert result["segments"] == 6
        assert result["duration_ms"] >= 0

        infill = InfillResult.from_dict(result["infill"])
        assert infill.pattern is InfillPattern.LINEAR
        assert len(infill) == 6

    def test_process_layer_handles_error(self):
        """Test that process_layer reports errors instead of raising."""
        result = process_layer(0, {"loops": []}, InfillPattern.LINEAR.value, {})

        assert result["layer"] == 0
        assert "error" in result
        assert "traceback" in result

    def test_process_layer_invalid_params(self, square: Contour):
        """Test that invalid parameters become an error result."""
        result = process_layer(1, square.to_dict(), InfillPattern.LINEAR.value, {"spacing": -1})
        assert "error" in result


class TestLayerProcessor:
    """Tests for LayerProcessor class."""

    def test_init(self, settings: SweepfillSettings):
        """Test LayerProcessor initialization."""
        with patch("sweepfill.core.processor.configure_logging") as mock_logging:
            mock_logging.return_value = Mock()
            processor = LayerProcessor(settings)

            assert processor.config == settings
            mock_logging.assert_called_once()

    @patch("sweepfill.core.processor.configure_logging")
    def test_layer_params_alternate_parity(self, mock_logging, settings: SweepfillSettings):
        """Test parity flips on odd layers when enabled."""
        mock_logging.return_value = Mock()
        processor = LayerProcessor(settings)
        params = InfillParams(parity=0)

        assert processor.layer_params(params, 0).parity == 0
        assert processor.layer_params(params, 1).parity == 1
        assert processor.layer_params(params, 2).parity == 0
        assert processor.layer_params(InfillParams(parity=1), 1).parity == 0

        settings.processing.alternate_parity = False
        assert processor.layer_params(params, 1).parity == 0

    @patch("sweepfill.core.processor.configure_logging")
    def test_process_skips_degenerate_layers(
        self, mock_logging, settings: SweepfillSettings, flat: Contour
    ):
        """Test that degenerate layers get empty results without a worker pool."""
        mock_logging.return_value = Mock()

        with patch("sweepfill.core.processor.ProcessPoolExecutor") as mock_executor_class:
            processor = LayerProcessor(settings)
            outcome = processor.process([flat, flat])

            mock_executor_class.assert_not_called()

        assert sorted(outcome.results) == [0, 1]
        for result in outcome.results.values():
            assert result.is_empty()
            assert result.pattern is InfillPattern.LINEAR
        assert outcome.stats.skipped_count == 2
        assert outcome.stats.processed_count == 0
        assert outcome.stats.duration_seconds >= 0

    @patch("sweepfill.core.processor.configure_logging")
    @patch("sweepfill.core.processor.ProcessPoolExecutor")
    def test_process_with_layers(
        self,
        mock_executor_class,
        mock_logging,
        settings: SweepfillSettings,
        square: Contour,
    ):
        """Test processing a stack of layers."""
        mock_logging.return_value = Mock()

        results = [
            process_layer(i, square.to_dict(), InfillPattern.LINEAR.value, {"spacing": 2.0})
            for i in range(2)
        ]
        mock_executor, futures = make_executor(results)
        mock_executor_class.return_value = mock_executor

        progress = Mock()
        with patch("sweepfill.core.processor.as_completed") as mock_as_completed:
            mock_as_completed.return_value = futures

            processor = LayerProcessor(settings)
            outcome = processor.process(
                [square, square], max_workers=1, progress_callback=progress
            )

        assert sorted(outcome.results) == [0, 1]
        assert outcome.stats.processed_count == 2
        assert outcome.stats.segments_generated == 12
        assert outcome.stats.error_count == 0
        assert len(outcome.stats.layer_timings_ms) == 2
        assert progress.call_count == 2
        progress.assert_called_with(2, 2, 1, True)
        mock_executor_class.assert_called_once_with(max_workers=1)

    @patch("sweepfill.core.processor.configure_logging")
    @patch("sweepfill.core.processor.ProcessPoolExecutor")
    def test_process_mixed_layers_keep_every_index(
        self,
        mock_executor_class,
        mock_logging,
        settings: SweepfillSettings,
        square: Contour,
        flat: Contour,
    ):
        """Test skipped layers sit beside generated ones in the results."""
        mock_logging.return_value = Mock()

        results = [
            process_layer(1, square.to_dict(), InfillPattern.LINEAR.value, {"spacing": 2.0})
        ]
        mock_executor, futures = make_executor(results)
        mock_executor_class.return_value = mock_executor

        with patch("sweepfill.core.processor.as_completed") as mock_as_completed:
            mock_as_completed.return_value = futures

            processor = LayerProcessor(settings)
            outcome = processor.process([flat, square, flat], max_workers=1)

        assert sorted(outcome.results) == [0, 1, 2]
        assert outcome.results[0].is_empty()
        assert outcome.results[2].is_empty()
        assert len(outcome.results[1]) == 6
        assert outcome.stats.skipped_count == 2
        assert mock_executor.submit.call_count == 1

    @patch("sweepfill.core.processor.configure_logging")
    @patch("sweepfill.core.processor.ProcessPoolExecutor")
    def test_process_submits_alternating_parity(
        self,
        mock_executor_class,
        mock_logging,
        settings: SweepfillSettings,
        square: Contour,
    ):
        """Test each submitted layer carries its own parity."""
        mock_logging.return_value = Mock()
        mock_executor, futures = make_executor(
            [{"layer": i, "error": "skip", "traceback": ""} for i in range(3)]
        )
        mock_executor_class.return_value = mock_executor

        with patch("sweepfill.core.processor.as_completed") as mock_as_completed:
            mock_as_completed.return_value = futures
            LayerProcessor(settings).process([square] * 3, InfillPattern.HEX)

        submitted = [c.args for c in mock_executor.submit.call_args_list]
        assert [args[1] for args in submitted] == [0, 1, 2]
        assert all(args[3] == InfillPattern.HEX.value for args in submitted)
        assert [args[4]["parity"] for args in submitted] == [0, 1, 0]
        assert all(args[4]["spacing"] == 2.0 for args in submitted)

    @patch("sweepfill.core.processor.configure_logging")
    @patch("sweepfill.core.processor.ProcessPoolExecutor")
    def test_process_handles_errors(
        self,
        mock_executor_class,
        mock_logging,
        settings: SweepfillSettings,
        square: Contour,
    ):
        """Test that processing errors are handled gracefully."""
        mock_logging.return_value = Mock()

        mock_executor, futures = make_executor(
            [{"layer": 0, "error": "Test error", "traceback": "Traceback...", "duration_ms": 1.0}]
        )
        mock_executor_class.return_value = mock_executor

        with patch("sweepfill.core.processor.as_completed") as mock_as_completed:
            mock_as_completed.return_value = futures

            processor = LayerProcessor(settings)
            outcome = processor.process([square], max_workers=1)

        assert outcome.results == {}
        assert outcome.stats.processed_count == 0
        assert outcome.stats.error_count == 1
        assert outcome.stats.errors == [(0, "Test error")]

    @patch("sweepfill.core.processor.configure_logging")
    @patch("sweepfill.core.processor.ProcessPoolExecutor")
    def test_process_future_exception(
        self,
        mock_executor_class,
        mock_logging,
        settings: SweepfillSettings,
        square: Contour,
    ):
        """Test that a crashed worker is recorded as a layer error."""
        mock_logging.return_value = Mock()

        mock_executor, futures = make_executor([{}])
        futures[0].result.side_effect = RuntimeError("worker died")
        mock_executor_class.return_value = mock_executor

        with patch("sweepfill.core.processor.as_completed") as mock_as_completed:
            mock_as_completed.return_value = futures
            outcome = LayerProcessor(settings).process([square])

        assert outcome.stats.error_count == 1
        assert outcome.stats.errors[0][1] == "worker died"

    @patch("sweepfill.core.processor.configure_logging")
    @patch("sweepfill.core.processor.ProcessPoolExecutor")
    def test_process_cancellation(
        self,
        mock_executor_class,
        mock_logging,
        settings: SweepfillSettings,
        square: Contour,
    ):
        """Test that KeyboardInterrupt cancels pending layers."""
        mock_logging.return_value = Mock()

        mock_executor, futures = make_executor([{}, {}])
        mock_executor_class.return_value = mock_executor

        with patch("sweepfill.core.processor.as_completed") as mock_as_completed:
            mock_as_completed.side_effect = KeyboardInterrupt

            with pytest.raises(ProcessingCancelledError) as exc_info:
                LayerProcessor(settings).process([square, square])

        assert exc_info.value.pending_count == 2
        assert exc_info.value.processed_count == 0
        for future in futures:
            future.cancel.assert_called_once()
        mock_executor.shutdown.assert_called_once_with(wait=True, cancel_futures=True)
