"""Error taxonomy and the uniform error-reporting contract.

Chart data is consumed by rendering code that should degrade gracefully rather
than crash, so store queries report validation failures through `report`:
strict stores raise, lenient stores log and return None.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class ChartDataError(Exception):
    """Base class for all chartdata errors."""


class UnknownColumnError(ChartDataError, LookupError):
    """Raised when a referenced column key is not declared."""

    def __init__(self, column: object) -> None:
        self.column = column
        super().__init__(f'column "{column}" not found.')


class IndexOutOfRangeError(ChartDataError, IndexError):
    """Raised when a frame, group or point index is outside valid bounds."""

    def __init__(self, index: object, message: str) -> None:
        self.index = index
        super().__init__(message)


class InvalidConfigurationError(ChartDataError, ValueError):
    """Raised when a construction-time contract is violated."""


class InvalidArgumentError(InvalidConfigurationError):
    """Raised when an operation receives an argument outside its contract."""


class DataQualityWarning(UserWarning):
    """Non-fatal diagnostic about questionable input data."""


def report(error: ChartDataError, *, strict: bool) -> None:
    """Surface a validation failure to the caller.

    Args:
        error: The error describing the failure.
        strict: Raise the error when True, otherwise log it.

    Returns:
        None, so lenient callers can `return report(...)` directly.

    Raises:
        ChartDataError: The given error, when `strict` is True.
    """

    if strict:
        raise error
    logger.warning("ChartData: %s", error)
    return None
