"""Grouped point series and their preprocessing pipeline."""

from .base import Preprocess, Series, StackType
from .grouped import GroupedSeries, compare_by_key
from .preprocess import compose, normalize_to_percentage, run_pipeline, stack_points

__all__ = [
    "GroupedSeries",
    "Preprocess",
    "Series",
    "StackType",
    "compare_by_key",
    "compose",
    "normalize_to_percentage",
    "run_pipeline",
    "stack_points",
]
