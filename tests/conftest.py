"""Pytest fixtures shared across chartdata tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from chartdata import ChartData
from chartdata.settings import reset_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from CHARTDATA_* variables in the host environment."""

    monkeypatch.delenv("CHARTDATA_STRICT", raising=False)
    monkeypatch.delenv("CHARTDATA_DUPLICATE_WARNINGS", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def fruit_rows() -> list[dict[str, object]]:
    """Return rows framed by `day` with one row per fruit per day."""

    return [
        {"day": 1, "fruit": "apple", "amount": 3},
        {"day": 1, "fruit": "banana", "amount": 4},
        {"day": 2, "fruit": "apple", "amount": 2},
        {"day": 2, "fruit": "banana", "amount": 5},
        {"day": 5, "fruit": "apple", "amount": 0},
        {"day": 5, "fruit": "banana", "amount": 4},
    ]


@pytest.fixture
def fruit_columns() -> list[dict[str, object]]:
    return [
        {"key": "day", "label": "Day"},
        {"key": "fruit", "label": "Fruit"},
        {"key": "amount", "label": "Amount"},
    ]


@pytest.fixture
def fruit_data(fruit_rows, fruit_columns) -> ChartData:
    return ChartData(fruit_rows, fruit_columns, strict=True)


@pytest.fixture
def supply_data() -> ChartData:
    """Return a small supply/demand store with mixed column types."""

    rows = [
        {"day": 1, "supply": 34, "demand": 99, "fruit": "apple"},
        {"day": 2, "supply": 32, "demand": 88, "fruit": "apple"},
        {"day": 3, "supply": 13, "demand": 55, "fruit": "orange"},
        {"day": 4, "supply": 22, "demand": 56, "fruit": "peach"},
        {"day": 5, "supply": 26, "demand": 51, "fruit": "pear"},
    ]
    columns = [
        {"key": "day", "label": "Day", "is_continuous": True},
        {"key": "supply", "label": "Supply (houses)", "is_continuous": True},
        {"key": "demand", "label": "Demand (houses)", "is_continuous": True},
        {"key": "fruit", "label": "Random fruit", "is_continuous": False},
    ]
    return ChartData(rows, columns, strict=True)


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests.
    - `integration`: tests touching external resources.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
