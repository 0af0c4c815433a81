"""Payload encoding/decoding for ChartData and Series.

Payloads are plain JSON/YAML-compatible dictionaries, used to persist chart
inputs or hand them across process boundaries.
"""

from __future__ import annotations

from typing import Any

from .errors import InvalidConfigurationError
from .series.base import Preprocess, Series, StackType
from .store import ChartData

CHART_DATA_VERSION = "chartdata_v1"
SERIES_VERSION = "series_v1"


def encode_chart_data(data: ChartData) -> dict[str, Any]:
    """Encode a ChartData store into a JSON-serializable dictionary.

    Column continuity is written explicitly so decoding does not re-infer it.
    """

    return {
        "version": CHART_DATA_VERSION,
        "columns": [
            {"key": column.key, "label": column.label, "is_continuous": column.is_continuous}
            for column in data.columns.values()
        ],
        "rows": [dict(row) for row in data.rows],
    }


def decode_chart_data(payload: dict[str, Any], *, strict: bool | None = None) -> ChartData:
    """Decode a ChartData store from a payload dictionary.

    Args:
        payload: Mapping with `columns` (list of column definitions) and `rows`
            (list of row mappings). `version` is optional.
        strict: Strictness of the decoded store; see ChartData.

    Returns:
        ChartData instance.

    Raises:
        InvalidConfigurationError: When `columns` or `rows` are missing or malformed.
    """

    if not isinstance(payload, dict):
        raise InvalidConfigurationError(f"Chart data payload must be a mapping, got {type(payload).__name__}.")
    columns = payload.get("columns")
    rows = payload.get("rows", [])
    if not isinstance(columns, list):
        raise InvalidConfigurationError("Chart data payload requires a `columns` list.")
    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        raise InvalidConfigurationError("Chart data payload `rows` must be a list of mappings.")
    return ChartData(rows, columns, strict=strict)


def encode_series(series: Series[Any]) -> dict[str, Any]:
    """Encode a Series, including its preprocess flags, into a dictionary."""

    preprocess = series.preprocess
    return {
        "version": SERIES_VERSION,
        "data": [list(group) for group in series.data],
        "preprocess": {
            "stacked": preprocess.stacked,
            "stack_type": str(preprocess.stack_type) if preprocess.stack_type is not None else None,
            "normalize_to_percentage": preprocess.normalize_to_percentage,
        },
    }


def decode_series(payload: dict[str, Any]) -> Series[Any]:
    """Decode a Series previously produced by `encode_series`.

    Raises:
        InvalidConfigurationError: When the payload or its `preprocess` is not a
            mapping, `data` is missing, or the stack type is unknown.
    """

    if not isinstance(payload, dict):
        raise InvalidConfigurationError(f"Series payload must be a mapping, got {type(payload).__name__}.")
    data = payload.get("data")
    if not isinstance(data, list) or not all(isinstance(group, list) for group in data):
        raise InvalidConfigurationError("Series payload requires `data` as a list of groups.")

    preprocess_raw = payload.get("preprocess") or {}
    if not isinstance(preprocess_raw, dict):
        raise InvalidConfigurationError("Series payload `preprocess` must be a mapping.")
    stack_type_raw = preprocess_raw.get("stack_type")
    try:
        stack_type = StackType(stack_type_raw) if stack_type_raw is not None else None
    except ValueError as exc:
        raise InvalidConfigurationError(f"Unknown stack_type: {stack_type_raw!r}.") from exc

    preprocess = Preprocess(
        stacked=bool(preprocess_raw.get("stacked")),
        stack_type=stack_type,
        normalize_to_percentage=bool(preprocess_raw.get("normalize_to_percentage")),
    )
    return Series(data, preprocess=preprocess)
