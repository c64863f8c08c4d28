"""Exception hierarchy for Sweepfill."""


class SweepfillError(Exception):
    """Base exception for all Sweepfill errors."""

    pass


class ConfigurationError(SweepfillError):
    """Structurally invalid input or settings."""

    pass


class PrecisionError(ConfigurationError):
    """Invalid precision context definition."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid precision context: {reason}")


class ContextMismatchError(ConfigurationError):
    """Contours or results from different precision contexts were mixed."""

    def __init__(self, expected: object, actual: object) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Precision context mismatch: expected {expected!r}, got {actual!r}"
        )


class InvalidParametersError(ConfigurationError):
    """Infill parameters failed validation."""

    def __init__(self, details: str) -> None:
        self.details = details
        super().__init__(f"Invalid infill parameters: {details}")


class GeometryError(SweepfillError):
    """Errors in geometric data or calculations."""

    pass


class ContourError(GeometryError):
    """Error with contour data or operations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class OperationError(SweepfillError):
    """Errors related to infill operations."""

    pass


class UnknownOperationError(OperationError):
    """No operation is registered for the requested pattern."""

    def __init__(self, pattern: object) -> None:
        self.pattern = pattern
        super().__init__(f"No infill operation registered for pattern {pattern!r}")


class ProcessingCancelledError(SweepfillError):
    """Processing was cancelled by user."""

    def __init__(self, processed_count: int, pending_count: int) -> None:
        self.processed_count = processed_count
        self.pending_count = pending_count
        super().__init__(
            f"Processing cancelled: {processed_count} completed, {pending_count} pending"
        )
