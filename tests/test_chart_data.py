"""Tests for ChartData construction, queries, aggregation and transforms."""

from __future__ import annotations

import pytest

from chartdata import ChartData

pytestmark = pytest.mark.unit


def test_invalid_cells_are_sanitized_to_null() -> None:
    """Non-scalar values become None but the key stays on the row."""

    data = ChartData([{"a": [1, 2], "b": True, "c": "ok"}], [{"key": "a"}, {"key": "b"}, {"key": "c"}])
    assert dict(data.rows[0]) == {"a": None, "b": None, "c": "ok"}


def test_rows_are_read_only_snapshots() -> None:
    """Mutating the input after construction does not change the store."""

    source = [{"a": 1}]
    data = ChartData(source, [{"key": "a"}])
    source[0]["a"] = 99
    source.append({"a": 2})

    assert len(data) == 1
    assert data.rows[0]["a"] == 1
    with pytest.raises(TypeError):
        data.rows[0]["a"] = 5  # type: ignore[index]


def test_get_column_data_preserves_row_order(supply_data: ChartData) -> None:
    assert supply_data.get_column_data("fruit") == ("apple", "apple", "orange", "peach", "pear")


def test_get_column_data_length_matches_rows_for_every_column() -> None:
    """Rows missing a column contribute None rather than being skipped."""

    data = ChartData([{"a": 1}, {"b": 2}, {}], [{"key": "a"}, {"key": "b"}, {"key": "c"}])
    for key in data.column_keys:
        assert len(data.get_column_data(key)) == len(data)
    assert data.get_column_data("a") == (1, None, None)


def test_get_unique_values_in_first_appearance_order() -> None:
    data = ChartData([{"k": "b"}, {"k": "a"}, {"k": "b"}, {"k": None}, {"k": "c"}], [{"key": "k"}])
    assert data.get_unique_values("k") == ("b", "a", None, "c")


def test_aggregates_over_single_column(supply_data: ChartData) -> None:
    assert supply_data.min("supply") == 13
    assert supply_data.max("supply") == 34
    assert supply_data.sum("supply") == 127
    assert supply_data.average("supply") == pytest.approx(25.4)
    assert supply_data.median("supply") == 26


def test_aggregates_over_union_of_columns(supply_data: ChartData) -> None:
    """Multiple columns are pooled into one set of values."""

    assert supply_data.min(["supply", "demand"]) == 13
    assert supply_data.max(["supply", "demand"]) == 99
    assert supply_data.sum(["supply", "demand"]) == 127 + 349
    assert supply_data.median(["supply", "demand"]) == pytest.approx((34 + 51) / 2)


def test_aggregates_ignore_nulls() -> None:
    data = ChartData([{"v": 1}, {"v": None}, {"v": 5}, {}], [{"key": "v"}])
    assert data.min("v") == 1
    assert data.average("v") == 3
    assert data.median("v") == 3


def test_aggregates_over_all_null_column() -> None:
    """sum is 0 for no values; the other aggregates have no answer."""

    data = ChartData([{"v": None}, {"v": None}], [{"key": "v"}])
    assert data.sum("v") == 0
    assert data.min("v") is None
    assert data.max("v") is None
    assert data.average("v") is None
    assert data.median("v") is None


def test_aggregates_over_text_are_null(supply_data: ChartData) -> None:
    """Text values make numeric aggregation undefined."""

    assert supply_data.min("fruit") is None
    assert supply_data.sum("fruit") is None
    assert supply_data.average(["fruit", "supply"]) is None


def test_nan_is_collapsed_to_null() -> None:
    data = ChartData([{"v": float("nan")}, {"v": 1}], [{"key": "v"}])
    assert data.max("v") is None
    assert data.sum("v") is None


def test_average_lies_between_min_and_max(supply_data: ChartData) -> None:
    for columns in ("supply", "demand", ["supply", "demand"]):
        low = supply_data.min(columns)
        high = supply_data.max(columns)
        assert low <= supply_data.average(columns) <= high


def test_aggregates_are_memoized_by_sorted_signature(supply_data: ChartData) -> None:
    """Column order does not change the memo key."""

    first = supply_data.get_unique_values("fruit")
    assert supply_data.get_unique_values("fruit") is first

    supply_data.max(["supply", "demand"])
    supply_data.max(["demand", "supply"])
    assert [key for key in supply_data._memos if key[0] == "max"] == [("max", ("demand", "supply"))]


def test_column_keys_with_commas_do_not_share_memo_entries() -> None:
    """A single key "a,b" is cached apart from the pair of keys "a" and "b"."""

    data = ChartData(
        [{"a": 1, "b": 100, "a,b": 50}],
        [{"key": "a"}, {"key": "b"}, {"key": "a,b"}],
        strict=True,
    )

    assert data.max(["a", "b"]) == 100
    assert data.max("a,b") == 50
    assert data.get_column_data("a,b") == (50,)


def test_update_rows_returns_new_store_with_same_columns(supply_data: ChartData) -> None:
    filtered = supply_data.update_rows(lambda rows: [row for row in rows if row["fruit"] == "apple"])

    assert filtered is not supply_data
    assert len(filtered) == 2
    assert len(supply_data) == 5
    assert filtered.columns == supply_data.columns
    assert filtered.max("supply") == 34


def test_map_rows_keeps_declared_continuity() -> None:
    """Mapped stores reuse column metadata instead of re-inferring it."""

    data = ChartData([{"v": 1}, {"v": 2}], [{"key": "v"}])
    mapped = data.map_rows(lambda row: {"v": f"#{row['v']}"})

    assert mapped.get_column_data("v") == ("#1", "#2")
    assert mapped.columns["v"].is_continuous is True
    assert data.get_column_data("v") == (1, 2)


def test_derived_stores_keep_strictness() -> None:
    data = ChartData([{"v": 1}], [{"key": "v"}], strict=False)
    assert data.map_rows(dict).strict is False
    assert data.update_rows(list).strict is False


def test_stores_compare_by_value() -> None:
    a = ChartData([{"v": 1}], [{"key": "v"}])
    b = ChartData([{"v": 1}], [{"key": "v"}])
    assert a == b
    assert a != ChartData([{"v": 2}], [{"key": "v"}])
