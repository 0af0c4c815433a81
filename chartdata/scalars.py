"""Scalar value domain for chart cells.

A chart cell holds a string, a number or None. Anything else is replaced with
None when rows enter a ChartData store.
"""

from __future__ import annotations

from typing import Any, TypeAlias

from .errors import InvalidArgumentError

Scalar: TypeAlias = str | int | float | None


def is_value_valid(value: Any) -> bool:
    """Return True when `value` can be stored in a chart cell.

    Booleans are rejected even though `bool` subclasses `int`.
    """

    if isinstance(value, bool):
        return False
    return value is None or isinstance(value, (str, int, float))


def is_value_continuous(value: Any) -> bool:
    """Return True when `value` has intrinsic numeric order."""

    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sanitize_value(value: Any) -> Scalar:
    """Return `value` when it is a valid scalar, otherwise None."""

    return value if is_value_valid(value) else None


def lerp(value_a: Scalar, value_b: Scalar, blend: float) -> Scalar:
    """Linearly interpolate between two scalars.

    Args:
        value_a: Value at blend 0.
        value_b: Value at blend 1.
        blend: Position between the two values, from 0 to 1 inclusive.

    Returns:
        `value_a` at blend 0 and `value_b` at blend 1. Otherwise None when either
        value is None, `value_a` when either value is not numeric, and the
        interpolated number when both are numeric.

    Raises:
        InvalidArgumentError: When `blend` is outside [0, 1].
    """

    if blend == 0:
        return value_a
    if blend == 1:
        return value_b
    if blend < 0 or blend > 1:
        raise InvalidArgumentError(f"blend must be from 0 to 1 inclusive, got {blend!r}.")
    if value_a is None or value_b is None:
        return None
    if not is_value_continuous(value_a) or not is_value_continuous(value_b):
        return value_a
    return value_a + (value_b - value_a) * blend
