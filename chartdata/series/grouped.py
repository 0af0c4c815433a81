"""Build aligned Series from flat, heterogeneous point records.

GroupedSeries partitions records by one or more group keys and aligns every
group to the full set of x-positions (`point_key` values) seen in the input.
Missing x-positions are filled with `default_point`, so every group ends up
with one point per x-position and stacking / index-based hit-testing work even
when the source data is sparse or out of order.

Example:
    data = [
        {"type": "foo", "x": 0, "value": 1},
        {"type": "foo", "x": 1, "value": 1},
        {"type": "bar", "x": 0, "value": 2},
    ]
    series = GroupedSeries(data, point_key="x", group_key="type", default_point={"value": 0})
    series.get_group(1)
    # ({"type": "bar", "x": 0, "value": 2}, {"type": "bar", "x": 1, "value": 0})
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from functools import cmp_to_key
from typing import Any

from ..errors import InvalidConfigurationError
from .base import Preprocess, Series

logger = logging.getLogger(__name__)

Point = dict[str, Any]
PointComparator = Callable[[Mapping[str, Any], Mapping[str, Any]], int]


def compare_by_key(point_key: str) -> PointComparator:
    """Return a three-way comparator ordering points by `point_key` ascending.

    Values that cannot be ordered against each other compare as equal, which
    keeps their input order under Python's stable sort.
    """

    def compare(a: Mapping[str, Any], b: Mapping[str, Any]) -> int:
        value_a = a.get(point_key)
        value_b = b.get(point_key)
        try:
            if value_a > value_b:
                return 1
            if value_a < value_b:
                return -1
        except TypeError:
            return 0
        return 0

    return compare


def _key_value(record: Mapping[str, Any], key: str) -> Any:
    value = record.get(key)
    try:
        hash(value)
    except TypeError as exc:
        raise InvalidConfigurationError(
            f"Value of {key!r} must be a scalar to group or align points, got {type(value).__name__}."
        ) from exc
    return value


class GroupedSeries(Series[Point]):
    """A Series built by grouping flat records.

    Args:
        data: Flat point records.
        point_key: Key whose value identifies the shared x-position of a point.
        group_key: Key, or ordered keys, whose values identify a record's group.
        default_point: Template for points synthesized at missing x-positions.
        point_sort: Three-way comparator used to sort each group. Defaults to
            ascending by `point_key`.

    Raises:
        InvalidConfigurationError: When `point_key` is also a group key, or a
            record holds an unhashable value (list, mapping) under a key.
    """

    __slots__ = ("_point_key", "_group_key", "_group_ids", "_raw_data")

    def __init__(
        self,
        data: Iterable[Mapping[str, Any]],
        *,
        point_key: str,
        group_key: str | Sequence[str],
        default_point: Mapping[str, Any] | None = None,
        point_sort: PointComparator | None = None,
    ) -> None:
        group_keys = (group_key,) if isinstance(group_key, str) else tuple(group_key)
        if point_key in group_keys:
            raise InvalidConfigurationError("point_key cannot be used as a group_key.")

        records = tuple(data)
        defaults = dict(default_point or {})
        sort_key = cmp_to_key(point_sort or compare_by_key(point_key))

        # canonical x-axis every group is aligned to
        positions: dict[Any, Any] = {}
        for record in records:
            value = _key_value(record, point_key)
            positions.setdefault(value, value)

        grouped: dict[tuple[Any, ...], list[Mapping[str, Any]]] = {}
        for record in records:
            identity = tuple(_key_value(record, key) for key in group_keys)
            grouped.setdefault(identity, []).append(record)

        groups: list[list[Point]] = []
        for members in grouped.values():
            base_values: dict[str, Any] = {}
            for key in group_keys:
                for record in members:
                    if key in record:
                        base_values[key] = record[key]
                        break

            aligned: dict[Any, Point] = {
                position: {**defaults, **base_values, point_key: value} for position, value in positions.items()
            }
            for record in members:
                aligned[record.get(point_key)] = {**defaults, **base_values, **record}

            groups.append(sorted(aligned.values(), key=sort_key))

        logger.debug(
            "GroupedSeries: %d records -> %d groups x %d points",
            len(records),
            len(groups),
            len(positions),
        )

        super().__init__(groups)
        self._point_key = point_key
        self._group_key = group_keys
        self._group_ids = tuple(grouped)
        self._raw_data = records

    def _derive(self, data: Iterable[Sequence[Any]], preprocess: Preprocess) -> GroupedSeries:
        # mapped groups keep their position, so group identities still apply
        derived = object.__new__(GroupedSeries)
        Series.__init__(derived, data, preprocess=preprocess)
        derived._point_key = self._point_key
        derived._group_key = self._group_key
        derived._group_ids = self._group_ids
        derived._raw_data = self._raw_data
        return derived

    @property
    def point_key(self) -> str:
        return self._point_key

    @property
    def group_key(self) -> tuple[str, ...]:
        return self._group_key

    @property
    def group_ids(self) -> tuple[tuple[Any, ...], ...]:
        """Group identities (tuples of group key values), in group order."""

        return self._group_ids

    @property
    def raw_data(self) -> tuple[Mapping[str, Any], ...]:
        return self._raw_data
