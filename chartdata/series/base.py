"""Point Series model.

A Series is a two-dimensional, immutable structure: an ordered tuple of groups,
each an ordered tuple of points. Every group has the same length, and point
index `i` refers to the same logical x-position in every group.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any, Generic, TypeVar

from ..errors import IndexOutOfRangeError, InvalidConfigurationError

P = TypeVar("P")
Q = TypeVar("Q")

Group = tuple[P, ...]


class StackType(StrEnum):
    """How a stacked series was accumulated."""

    points = "points"


@dataclass(frozen=True, slots=True)
class Preprocess:
    """Record of the pipeline steps already applied to a series.

    Renderers read these flags to decide how to interpret point values.

    Args:
        stacked: Point values are cumulative across groups.
        stack_type: How the stacking was accumulated, when stacked.
        normalize_to_percentage: Point values are shares of the slice total.
    """

    stacked: bool = False
    stack_type: StackType | None = None
    normalize_to_percentage: bool = False


def _check_index(index: int, size: int, *, name: str) -> None:
    if isinstance(index, bool) or not isinstance(index, int) or index < 0 or index >= size:
        raise IndexOutOfRangeError(index, f'{name} "{index}" must be an integer from 0 to {size - 1}.')


class Series(Generic[P]):
    """Ordered groups of ordered points.

    Args:
        data: One sequence of points per group. All groups must have the same
            length.
        preprocess: Flags describing which preprocessing steps already ran.

    Raises:
        InvalidConfigurationError: When groups have different lengths.
    """

    __slots__ = ("_data", "_preprocess")

    def __init__(self, data: Iterable[Sequence[P]] = (), *, preprocess: Preprocess | None = None) -> None:
        groups = tuple(tuple(group) for group in data)
        lengths = {len(group) for group in groups}
        if len(lengths) > 1:
            raise InvalidConfigurationError(f"All groups in a series must have equal length, got {sorted(lengths)}.")
        self._data: tuple[Group[P], ...] = groups
        self._preprocess = preprocess or Preprocess()

    @staticmethod
    def of(data: Iterable[Sequence[P]]) -> Series[P]:
        return Series(data)

    @property
    def data(self) -> tuple[Group[P], ...]:
        return self._data

    @property
    def preprocess(self) -> Preprocess:
        return self._preprocess

    @property
    def group_count(self) -> int:
        return len(self._data)

    @property
    def point_count(self) -> int:
        return len(self._data[0]) if self._data else 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Series):
            return NotImplemented
        return self._data == other._data and self._preprocess == other._preprocess

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(groups={self.group_count}, points={self.point_count}, preprocess={self._preprocess!r})"

    def _derive(self, data: Iterable[Sequence[Any]], preprocess: Preprocess) -> Series[Any]:
        """Build a series from transformed groups; subclasses carry their metadata over."""

        return Series(data, preprocess=preprocess)

    def with_preprocess(self, **changes: Any) -> Series[P]:
        """Return a copy of this series with updated preprocess flags."""

        return self._derive(self._data, replace(self._preprocess, **changes))

    def get(self, group_index: int, point_index: int) -> P:
        """Return one point.

        Raises:
            IndexOutOfRangeError: When either index is outside the series.
        """

        _check_index(group_index, self.group_count, name="group_index")
        _check_index(point_index, self.point_count, name="point_index")
        return self._data[group_index][point_index]

    def get_group(self, group_index: int) -> Group[P]:
        _check_index(group_index, self.group_count, name="group_index")
        return self._data[group_index]

    def get_point(self, point_index: int) -> tuple[P, ...]:
        """Return the point at `point_index` from every group, in group order."""

        _check_index(point_index, self.point_count, name="point_index")
        return tuple(group[point_index] for group in self._data)

    def map_groups(self, mapper: Callable[[Group[P]], Sequence[Q]]) -> Series[Q]:
        """Replace each group with `mapper(group)`.

        Charts that rely on alignment need `mapper` to keep the group length.
        """

        return self._derive((mapper(group) for group in self._data), self._preprocess)

    def map_points(self, mapper: Callable[[tuple[P, ...], int], Sequence[Q]]) -> Series[Q]:
        """Transform the series one cross-group slice at a time.

        For each point index `i`, `mapper` receives the `i`-th point of every
        group (in group order) and `i`, and returns one replacement point per
        group. Replacement `g` becomes point `i` of group `g`.

        Raises:
            InvalidConfigurationError: When `mapper` returns the wrong number of
                points for a slice.
        """

        group_count = self.group_count
        columns: list[tuple[Q, ...]] = []
        for point_index in range(self.point_count):
            result = tuple(mapper(self.get_point(point_index), point_index))
            if len(result) != group_count:
                raise InvalidConfigurationError(
                    f"map_points mapper returned {len(result)} points at index {point_index}, expected {group_count}."
                )
            columns.append(result)

        groups = [tuple(column[group_index] for column in columns) for group_index in range(group_count)]
        return self._derive(groups, self._preprocess)
