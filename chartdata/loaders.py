"""Load chart inputs from YAML documents.

A chart data document looks like:

    columns:
      - {key: day, label: Day}
      - {key: fruit, label: Fruit}
      - {key: amount, label: Amount, is_continuous: true}
    rows:
      - {day: 1, fruit: apple, amount: 3}
      - {day: 1, fruit: banana, amount: 4}

A grouped series document has `data`, `point_key`, `group_key` and an optional
`default_point`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .codec import decode_chart_data
from .errors import InvalidConfigurationError
from .series.grouped import GroupedSeries
from .store import ChartData

logger = logging.getLogger(__name__)


def _read_document(path: str | Path) -> dict[str, Any]:
    raw = Path(path).read_text(encoding="utf-8")
    payload = yaml.safe_load(raw)
    if payload is None:
        raise InvalidConfigurationError(f"{path}: document is empty.")
    if not isinstance(payload, dict):
        raise InvalidConfigurationError(f"{path}: top level must be a mapping, got {type(payload).__name__}.")
    return payload


def load_chart_data(path: str | Path, *, strict: bool | None = None) -> ChartData:
    """Load a ChartData store from a YAML file.

    Args:
        path: YAML document with `columns` and `rows`.
        strict: Strictness of the loaded store; see ChartData.

    Returns:
        ChartData instance.

    Raises:
        InvalidConfigurationError: When the document is empty or malformed.
    """

    data = decode_chart_data(_read_document(path), strict=strict)
    logger.info("Loaded chart data from %s (%d rows, %d columns)", path, len(data), len(data.columns))
    return data


def load_grouped_series(path: str | Path) -> GroupedSeries:
    """Load a GroupedSeries from a YAML file.

    Raises:
        InvalidConfigurationError: When required keys are missing.
    """

    payload = _read_document(path)
    data = payload.get("data")
    point_key = payload.get("point_key")
    group_key = payload.get("group_key")
    if not isinstance(data, list):
        raise InvalidConfigurationError(f"{path}: `data` must be a list of point records.")
    if not isinstance(point_key, str) or not point_key:
        raise InvalidConfigurationError(f"{path}: `point_key` is required.")
    if not group_key:
        raise InvalidConfigurationError(f"{path}: `group_key` is required.")

    return GroupedSeries(
        data,
        point_key=point_key,
        group_key=group_key,
        default_point=payload.get("default_point"),
    )
