"""Column metadata for ChartData stores.

Column continuity is classified once, when a store is constructed, and is read
from the resulting ChartColumn thereafter without re-inspecting rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, TypeAlias

from .errors import InvalidConfigurationError
from .scalars import Scalar, is_value_continuous

Row: TypeAlias = Mapping[str, Scalar]


@dataclass(frozen=True, slots=True)
class ChartColumn:
    """Static metadata describing one named field across all rows.

    Args:
        key: Unique column key used to read values from rows.
        label: Human-friendly label for axes and legends.
        is_continuous: Whether values have intrinsic numeric order, which makes
            the column eligible for interpolation and linear scales.
    """

    key: str
    label: str
    is_continuous: bool


ColumnDefinition: TypeAlias = Mapping[str, Any] | ChartColumn


def infer_is_continuous(key: str, rows: Iterable[Row]) -> bool:
    """Classify a column from the values present in `rows`.

    Args:
        key: Column key.
        rows: Sanitized rows.

    Returns:
        True when at least one non-null value exists and every non-null value is
        numeric. Absent and all-null columns are not continuous.
    """

    seen = False
    for row in rows:
        value = row.get(key)
        if value is None:
            continue
        if not is_value_continuous(value):
            return False
        seen = True
    return seen


def column_from_definition(definition: ColumnDefinition, rows: Sequence[Row]) -> ChartColumn:
    """Build a ChartColumn from a raw definition.

    Existing ChartColumn instances are reused as-is. Mappings need a `key`; the
    `label` defaults to the key and `is_continuous` (or `isContinuous`) is
    inferred from `rows` when not supplied.

    Raises:
        InvalidConfigurationError: When the definition has no usable key.
    """

    if isinstance(definition, ChartColumn):
        return definition
    if not isinstance(definition, Mapping):
        raise InvalidConfigurationError(f"Column definition must be a mapping, got {type(definition).__name__}.")

    key = definition.get("key")
    if not isinstance(key, str) or not key:
        raise InvalidConfigurationError(f"Column definition requires a non-empty string key: {dict(definition)!r}.")

    label = definition.get("label")
    explicit = definition.get("is_continuous", definition.get("isContinuous"))
    is_continuous = bool(explicit) if explicit is not None else infer_is_continuous(key, rows)
    return ChartColumn(key=key, label=str(label) if label is not None else key, is_continuous=is_continuous)


def build_columns(
    definitions: Iterable[ColumnDefinition],
    rows: Sequence[Row],
) -> Mapping[str, ChartColumn]:
    """Build the ordered, read-only column mapping for a store.

    Args:
        definitions: Column definitions in declaration order.
        rows: Sanitized rows used for continuity inference.

    Returns:
        A read-only mapping of column key to ChartColumn, in declaration order.

    Raises:
        InvalidConfigurationError: When a key is declared twice.
    """

    columns: dict[str, ChartColumn] = {}
    for definition in definitions:
        column = column_from_definition(definition, rows)
        if column.key in columns:
            raise InvalidConfigurationError(f"Duplicate column key: {column.key!r}")
        columns[column.key] = column
    return MappingProxyType(columns)
