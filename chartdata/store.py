"""Immutable chart data store.

ChartData holds ordered rows of scalar cells plus ordered column metadata. It is
never mutated after construction: every transformation returns a new store, and
derived values (aggregates, unique values, frames) are memoized per instance.

Example:
    rows = [
        {"day": 1, "fruit": "apple", "amount": 3},
        {"day": 1, "fruit": "banana", "amount": 4},
        {"day": 2, "fruit": "apple", "amount": 2},
        {"day": 2, "fruit": "banana", "amount": 5},
    ]
    data = ChartData(rows, [{"key": "day"}, {"key": "fruit"}, {"key": "amount"}])
    data.max("amount")                                  # 5
    data.frame_at_index("day", 1).rows                  # rows where day == 2
    data.frame_at_index_interpolated("day", "fruit", 0.5)
"""

from __future__ import annotations

import logging
import math
import warnings
from collections.abc import Callable, Iterable, Mapping, Sequence
from statistics import median
from types import MappingProxyType
from typing import Any, TypeVar

from .columns import ChartColumn, ColumnDefinition, Row, build_columns
from .errors import (
    ChartDataError,
    DataQualityWarning,
    IndexOutOfRangeError,
    InvalidArgumentError,
    UnknownColumnError,
    report,
)
from .scalars import Scalar, is_value_continuous, is_value_valid, lerp, sanitize_value
from .settings import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

ColumnArg = str | Sequence[str]
Frame = tuple[Row, ...]
RowUpdater = Callable[[tuple[Row, ...]], Iterable[Mapping[str, Any]]]
RowMapper = Callable[[Row], Mapping[str, Any]]


def _numeric_values(values: Sequence[Scalar]) -> list[int | float] | None:
    """Return `values` when all are non-NaN numbers, else None (the NaN case)."""

    for value in values:
        if not is_value_continuous(value) or math.isnan(value):  # type: ignore[arg-type]
            return None
    return list(values)  # type: ignore[arg-type]


def _aggregate_min(values: Sequence[Scalar]) -> Scalar:
    numbers = _numeric_values(values)
    return min(numbers) if numbers else None


def _aggregate_max(values: Sequence[Scalar]) -> Scalar:
    numbers = _numeric_values(values)
    return max(numbers) if numbers else None


def _aggregate_sum(values: Sequence[Scalar]) -> Scalar:
    numbers = _numeric_values(values)
    if numbers is None:
        return None
    return sum(numbers)


def _aggregate_average(values: Sequence[Scalar]) -> Scalar:
    numbers = _numeric_values(values)
    if not numbers:
        return None
    return sum(numbers) / len(numbers)


def _aggregate_median(values: Sequence[Scalar]) -> Scalar:
    numbers = _numeric_values(values)
    return median(numbers) if numbers else None


_AGGREGATIONS: dict[str, Callable[[Sequence[Scalar]], Scalar]] = {
    "min": _aggregate_min,
    "max": _aggregate_max,
    "sum": _aggregate_sum,
    "average": _aggregate_average,
    "median": _aggregate_median,
}


def _sanitize_row(row: Mapping[str, Any]) -> Row:
    return MappingProxyType({key: sanitize_value(value) for key, value in row.items()})


class ChartData:
    """Immutable table of chart rows with column metadata.

    Args:
        rows: Row mappings. Cell values that are not strings, numbers or None
            are replaced with None.
        columns: Column definitions in display order. Each is a mapping with a
            `key` and optional `label` / `is_continuous`, or a ChartColumn. A
            mapping of key to ChartColumn (such as another store's `columns`)
            is also accepted.
        strict: Raise validation errors instead of logging them and returning
            None. Defaults to the `CHARTDATA_STRICT` setting.
    """

    __slots__ = ("_rows", "_columns", "_strict", "_memos")

    is_value_valid = staticmethod(is_value_valid)
    is_value_continuous = staticmethod(is_value_continuous)
    lerp = staticmethod(lerp)

    def __init__(
        self,
        rows: Iterable[Mapping[str, Any]] = (),
        columns: Iterable[ColumnDefinition] | Mapping[str, ChartColumn] = (),
        *,
        strict: bool | None = None,
    ) -> None:
        self._rows: tuple[Row, ...] = tuple(_sanitize_row(row) for row in rows)
        definitions = columns.values() if isinstance(columns, Mapping) else columns
        self._columns: Mapping[str, ChartColumn] = build_columns(definitions, self._rows)
        self._strict = get_settings().strict if strict is None else strict
        self._memos: dict[tuple[Any, ...], Any] = {}

    @property
    def rows(self) -> tuple[Row, ...]:
        """All rows, in order, as read-only mappings."""

        return self._rows

    @property
    def columns(self) -> Mapping[str, ChartColumn]:
        """Read-only mapping of column key to ChartColumn, in declaration order."""

        return self._columns

    @property
    def column_keys(self) -> tuple[str, ...]:
        return tuple(self._columns)

    @property
    def strict(self) -> bool:
        return self._strict

    def __len__(self) -> int:
        return len(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChartData):
            return NotImplemented
        return self._rows == other._rows and dict(self._columns) == dict(other._columns)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ChartData(rows={len(self._rows)}, columns={list(self._columns)!r})"

    # Validation

    def _column_error(self, column: str) -> UnknownColumnError | None:
        if column not in self._columns:
            return UnknownColumnError(column)
        return None

    def _column_list_error(self, columns: Sequence[str]) -> UnknownColumnError | None:
        for column in columns:
            error = self._column_error(column)
            if error is not None:
                return error
        return None

    def _index_error(self, index: Any, *, upper: int | None = None, integer: bool = True) -> IndexOutOfRangeError | None:
        if isinstance(index, bool) or not isinstance(index, (int, float)) or not math.isfinite(index):
            return IndexOutOfRangeError(index, f'index "{index}" must be a finite number.')
        if index < 0:
            return IndexOutOfRangeError(index, f'index "{index}" must not be smaller than 0.')
        if upper is not None and index > upper:
            return IndexOutOfRangeError(index, f'index "{index}" must not be larger than {upper}.')
        if integer and index != int(index):
            return IndexOutOfRangeError(index, f'index "{index}" must not be decimal.')
        return None

    def _report(self, error: ChartDataError) -> None:
        return report(error, strict=self._strict)

    # Memoization

    def _memoize(self, key: tuple[Any, ...], compute: Callable[[], T]) -> T:
        if key in self._memos:
            return self._memos[key]
        logger.debug("ChartData: computing %r", key)
        return self._memos.setdefault(key, compute())

    @staticmethod
    def _column_arg_list(columns: ColumnArg) -> tuple[str, ...]:
        if isinstance(columns, str):
            return (columns,)
        return tuple(dict.fromkeys(columns))

    def _values_for_columns(self, columns: Sequence[str]) -> list[Scalar]:
        values: list[Scalar] = []
        for row in self._rows:
            for column in columns:
                value = row.get(column)
                if value is not None:
                    values.append(value)
        return values

    def _aggregation(self, operation: str, columns: ColumnArg) -> Scalar:
        column_list = self._column_arg_list(columns)
        error = self._column_list_error(column_list)
        if error is not None:
            return self._report(error)
        signature = (operation, tuple(sorted(column_list)))
        return self._memoize(signature, lambda: _AGGREGATIONS[operation](self._values_for_columns(column_list)))

    # Transforms

    def update_rows(self, updater: RowUpdater) -> ChartData:
        """Return a new store whose rows are `updater(self.rows)`.

        Example:
            data.update_rows(lambda rows: [row for row in rows if row["amount"]])
        """

        return ChartData(updater(self._rows), self._columns, strict=self._strict)

    def map_rows(self, mapper: RowMapper) -> ChartData:
        """Return a new store built from `mapper(row)` for every row."""

        return ChartData((mapper(row) for row in self._rows), self._columns, strict=self._strict)

    # Queries

    def get_column_data(self, column: str) -> tuple[Scalar, ...] | None:
        """Return every value of `column`, in row order.

        Rows without the column contribute None so the result always has one
        entry per row.
        """

        error = self._column_error(column)
        if error is not None:
            return self._report(error)
        return self._memoize(
            ("get_column_data", column),
            lambda: tuple(row.get(column) for row in self._rows),
        )

    def get_unique_values(self, column: str) -> tuple[Scalar, ...] | None:
        """Return the distinct values of `column` in order of first appearance.

        Use `len(data.get_unique_values(column))` for the number of distinct values.
        """

        error = self._column_error(column)
        if error is not None:
            return self._report(error)
        return self._memoize(
            ("get_unique_values", column),
            lambda: tuple(dict.fromkeys(row.get(column) for row in self._rows)),
        )

    def make_frames(self, column: str) -> tuple[Frame, ...] | None:
        """Group rows into frames by the value of `column`.

        Frames are ordered by the first appearance of each value and keep row
        order within a frame. Rows are assumed to already be sorted by `column`;
        nothing is re-sorted here.
        """

        error = self._column_error(column)
        if error is not None:
            return self._report(error)

        def compute() -> tuple[Frame, ...]:
            frames: dict[Scalar, list[Row]] = {}
            for row in self._rows:
                frames.setdefault(row.get(column), []).append(row)
            return tuple(tuple(frame) for frame in frames.values())

        return self._memoize(("make_frames", column), compute)

    def frame_count(self, column: str) -> int | None:
        """Return the number of frames `make_frames(column)` produces."""

        frames = self.make_frames(column)
        return None if frames is None else len(frames)

    def frame_at_index(self, frame_column: str, index: int) -> ChartData | None:
        """Return a new store holding only the rows of one frame.

        Args:
            frame_column: Column to break into frames, often time-based.
            index: Frame ordinal, from 0 to the number of frames minus one.

        Returns:
            A ChartData with the frame's rows, or None when an argument is
            invalid and the store is lenient.
        """

        error = self._column_error(frame_column) or self._index_error(index)
        if error is not None:
            return self._report(error)

        frames = self.make_frames(frame_column)
        assert frames is not None
        error = self._index_error(index, upper=len(frames) - 1)
        if error is not None:
            return self._report(error)

        position = int(index)
        return self._memoize(
            ("frame_at_index", frame_column, position),
            lambda: ChartData(frames[position], self._columns, strict=self._strict),
        )

    def _frame_by_primary(self, frame_column: str, primary_column: str, position: int) -> dict[Scalar, list[Row]]:
        def compute() -> dict[Scalar, list[Row]]:
            frames = self.make_frames(frame_column)
            assert frames is not None
            grouped: dict[Scalar, list[Row]] = {}
            for row in frames[position]:
                grouped.setdefault(row.get(primary_column), []).append(row)
            return grouped

        return self._memoize(("frame_by_primary", frame_column, position, primary_column), compute)

    def _first_match(
        self,
        grouped: Mapping[Scalar, list[Row]],
        primary_value: Scalar,
        *,
        frame_column: str,
        primary_column: str,
    ) -> Row | None:
        matches = grouped.get(primary_value)
        if not matches:
            return None
        first = matches[0]
        if len(matches) > 1 and get_settings().duplicate_warnings:
            warnings.warn(
                DataQualityWarning(
                    f"ChartData: {len(matches)} data points found where {frame_column}={first.get(frame_column)!r} "
                    f"and {primary_column}={primary_value!r}, using first data point."
                ),
                stacklevel=3,
            )
        return first

    def frame_at_index_interpolated(self, frame_column: str, primary_column: str, index: float) -> ChartData | None:
        """Return a frame, interpolating continuous values for fractional indexes.

        Rows in frames `floor(index)` and `ceil(index)` are paired by their
        `primary_column` value. Continuous columns other than the primary column
        are linearly interpolated; every other column keeps the value from the
        earlier frame. Primary values missing from either frame are dropped.

        Results are not memoized because `index` is continuous, but the frames
        and per-frame groupings used to build them are.

        Args:
            frame_column: Column to break into frames, often time-based.
            primary_column: Column that uniquely identifies a data point across
                frames. Its values are treated as ordered but discrete.
            index: Frame position, from 0 to the number of frames minus one.

        Returns:
            A ChartData for the interpolated frame, or None when an argument is
            invalid and the store is lenient.
        """

        error = (
            self._column_error(frame_column)
            or self._column_error(primary_column)
            or self._index_error(index, integer=False)
        )
        if error is not None:
            return self._report(error)

        if frame_column == primary_column:
            return self._report(InvalidArgumentError("frame_column and primary_column cannot be the same."))

        if index == int(index):
            return self.frame_at_index(frame_column, int(index))

        frames = self.make_frames(frame_column)
        assert frames is not None
        error = self._index_error(index, upper=len(frames) - 1, integer=False)
        if error is not None:
            return self._report(error)

        index_a = math.floor(index)
        index_b = math.ceil(index)
        blend = index - index_a

        frame_a = self._frame_by_primary(frame_column, primary_column, index_a)
        frame_b = self._frame_by_primary(frame_column, primary_column, index_b)

        # every primary value in the whole data set, so gaps stay where points are missing
        primary_values = self.get_unique_values(primary_column) or ()

        interpolated: list[dict[str, Scalar]] = []
        for primary_value in primary_values:
            row_a = self._first_match(frame_a, primary_value, frame_column=frame_column, primary_column=primary_column)
            row_b = self._first_match(frame_b, primary_value, frame_column=frame_column, primary_column=primary_column)
            if row_a is None or row_b is None:
                continue

            interpolated.append(
                {
                    key: (
                        lerp(row_a.get(key), row_b.get(key), blend)
                        if column.is_continuous and key != primary_column
                        else row_a.get(key)
                    )
                    for key, column in self._columns.items()
                }
            )

        return ChartData(interpolated, self._columns, strict=self._strict)

    # Aggregations

    def min(self, columns: ColumnArg) -> Scalar:
        """Return the minimum non-null value across one or more columns, or None."""

        return self._aggregation("min", columns)

    def max(self, columns: ColumnArg) -> Scalar:
        """Return the maximum non-null value across one or more columns, or None."""

        return self._aggregation("max", columns)

    def sum(self, columns: ColumnArg) -> Scalar:
        """Return the sum of non-null values across one or more columns.

        An empty set of values sums to 0. Non-numeric values make the sum
        undefined, which is reported as None.
        """

        return self._aggregation("sum", columns)

    def average(self, columns: ColumnArg) -> Scalar:
        """Return the mean of non-null values across one or more columns, or None."""

        return self._aggregation("average", columns)

    def median(self, columns: ColumnArg) -> Scalar:
        """Return the median of non-null values across one or more columns, or None."""

        return self._aggregation("median", columns)
