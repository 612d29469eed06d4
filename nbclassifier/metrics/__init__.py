"""Metrics module for model evaluation."""

from .metrics import (
    AccuracyMetric,
    PrecisionMetric,
    CustomMetric,
    compute_all_metrics,
    create_standard_metrics,
    to_label_arrays,
)

__all__ = [
    "AccuracyMetric",
    "PrecisionMetric",
    "CustomMetric",
    "compute_all_metrics",
    "create_standard_metrics",
    "to_label_arrays",
]
