"""Filter rules: models, loading and evaluation."""

from testsift.filtering.evaluator import apply_filter, apply_filters
from testsift.filtering.loader import FilterEngine, parse_filters
from testsift.filtering.models import (
    FILTER_TYPES,
    ExcludeClassFilter,
    ExcludeTaggedClassFilter,
    FilterRule,
    IncludeClassFilter,
    IncludeTaggedClassFilter,
)

__all__ = [
    "FilterEngine",
    "parse_filters",
    "apply_filter",
    "apply_filters",
    "FILTER_TYPES",
    "FilterRule",
    "IncludeClassFilter",
    "ExcludeClassFilter",
    "IncludeTaggedClassFilter",
    "ExcludeTaggedClassFilter",
]
