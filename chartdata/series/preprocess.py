"""Preprocessing steps for Series pipelines.

A step is configured once and then applied to a series:
`normalize_to_percentage(key="value")(series)`. Steps are pure and return a new
series, recording what they did in `series.preprocess` so renderers can pick the
right interpretation. Steps compose left to right with `compose` or
`run_pipeline`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from functools import reduce
from typing import Any

from ..errors import InvalidConfigurationError
from ..scalars import is_value_continuous
from .base import Series, StackType

Step = Callable[[Series[Any]], Series[Any]]

ORIGINAL_VALUE_FIELD = "original_value"
PERCENT_VALUE_FIELD = "percent_value"


def _numeric_or_zero(point: Any, key: str) -> float:
    if not isinstance(point, Mapping):
        raise InvalidConfigurationError(f"Preprocessing steps require mapping points, got {type(point).__name__}.")
    value = point.get(key)
    return value if is_value_continuous(value) else 0


def normalize_to_percentage(*, key: str) -> Step:
    """Return a step that stacks `key` as cumulative shares of each slice total.

    For every point index, the values of `key` across all groups are summed
    (missing or non-numeric values count as 0). Each point's `key` becomes the
    running share up to and including its group, `percent_value` holds its own
    share and `original_value` keeps the value it had before. A slice whose
    total is 0 gets shares of 0.0.

    Args:
        key: Point field holding the value to normalize.

    Returns:
        A step marking the series as stacked (`StackType.points`) and normalized.
    """

    def step(series: Series[Any]) -> Series[Any]:
        def normalize(points: tuple[Any, ...], _index: int) -> list[dict[str, Any]]:
            values = [_numeric_or_zero(point, key) for point in points]
            total = sum(values)
            running = 0.0
            out: list[dict[str, Any]] = []
            for point, value in zip(points, values):
                running += value
                out.append(
                    {
                        **point,
                        ORIGINAL_VALUE_FIELD: point.get(key),
                        PERCENT_VALUE_FIELD: value / total if total else 0.0,
                        key: running / total if total else 0.0,
                    }
                )
            return out

        return series.map_points(normalize).with_preprocess(
            stacked=True,
            stack_type=StackType.points,
            normalize_to_percentage=True,
        )

    return step


def stack_points(*, key: str) -> Step:
    """Return a step that replaces `key` with its running total across groups.

    Missing or non-numeric values count as 0. The previous value is kept under
    `original_value`.
    """

    def step(series: Series[Any]) -> Series[Any]:
        def stack(points: tuple[Any, ...], _index: int) -> list[dict[str, Any]]:
            running = 0
            out: list[dict[str, Any]] = []
            for point in points:
                running += _numeric_or_zero(point, key)
                out.append({**point, ORIGINAL_VALUE_FIELD: point.get(key), key: running})
            return out

        return series.map_points(stack).with_preprocess(stacked=True, stack_type=StackType.points)

    return step


def compose(*steps: Step) -> Step:
    """Combine steps into one step that applies them left to right."""

    def step(series: Series[Any]) -> Series[Any]:
        return run_pipeline(series, steps)

    return step


def run_pipeline(series: Series[Any], steps: Iterable[Step]) -> Series[Any]:
    """Apply `steps` to `series` in order and return the final series."""

    return reduce(lambda current, next_step: next_step(current), steps, series)
