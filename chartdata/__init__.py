"""Immutable chart data and grouped series for visualization.

This package contains deterministic, testable data preparation for charts: a
schema-aware row store with memoized aggregation and frame interpolation, and a
grouped point-series model with composable preprocessing steps. It does no
rendering and never mutates its inputs.
"""

from .codec import decode_chart_data, decode_series, encode_chart_data, encode_series
from .columns import ChartColumn
from .errors import (
    ChartDataError,
    DataQualityWarning,
    IndexOutOfRangeError,
    InvalidArgumentError,
    InvalidConfigurationError,
    UnknownColumnError,
)
from .loaders import load_chart_data, load_grouped_series
from .scalars import Scalar, is_value_continuous, is_value_valid, lerp
from .series import (
    GroupedSeries,
    Preprocess,
    Series,
    StackType,
    compose,
    normalize_to_percentage,
    run_pipeline,
    stack_points,
)
from .settings import ChartDataSettings, get_settings
from .store import ChartData

__all__ = [
    "ChartColumn",
    "ChartData",
    "ChartDataError",
    "ChartDataSettings",
    "DataQualityWarning",
    "GroupedSeries",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "InvalidConfigurationError",
    "Preprocess",
    "Scalar",
    "Series",
    "StackType",
    "UnknownColumnError",
    "compose",
    "decode_chart_data",
    "decode_series",
    "encode_chart_data",
    "encode_series",
    "get_settings",
    "is_value_continuous",
    "is_value_valid",
    "lerp",
    "load_chart_data",
    "load_grouped_series",
    "normalize_to_percentage",
    "run_pipeline",
    "stack_points",
]
