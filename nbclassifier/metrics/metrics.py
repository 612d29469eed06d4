"""Metric implementations for classification engine evaluation.

Provides accuracy and per-label precision over (predicted, actual)
label pairs.
"""

from dataclasses import dataclass
from typing import Callable

import numpy as np
from sklearn.metrics import accuracy_score, precision_score

from nbclassifier.domain.entities import ActualResult, PredictedResult, Query


@dataclass(frozen=True)
class AccuracyMetric:
    """Share of predictions equal to the actual label."""

    @property
    def name(self) -> str:
        return "accuracy"

    def compute(self, y_true: np.ndarray, y_pred: np.ndarray) -> float:
        if len(y_true) == 0:
            return 0.0
        return float(accuracy_score(y_true, y_pred))


@dataclass(frozen=True)
class PrecisionMetric:
    """Precision for a single label.

    Among predictions equal to `label`, the share whose actual label
    is `label` too. Returns 0.0 when `label` is never predicted.
    """

    label: float

    @property
    def name(self) -> str:
        return f"precision_{self.label:g}"

    def compute(self, y_true: np.ndarray, y_pred: np.ndarray) -> float:
        if not np.any(y_pred == self.label):
            return 0.0
        return float(
            precision_score(
                y_true == self.label,
                y_pred == self.label,
                zero_division=0.0,
            )
        )


@dataclass
class CustomMetric:
    """Custom metric wrapper for user-defined metric functions."""

    metric_name: str
    compute_fn: Callable[[np.ndarray, np.ndarray], float]

    @property
    def name(self) -> str:
        return self.metric_name

    def compute(self, y_true: np.ndarray, y_pred: np.ndarray) -> float:
        return float(self.compute_fn(y_true, y_pred))


def create_standard_metrics(labels: list[float] | None = None) -> list:
    """Create accuracy plus one precision metric per label."""
    metrics: list = [AccuracyMetric()]
    for label in labels or []:
        metrics.append(PrecisionMetric(label))
    return metrics


def to_label_arrays(
    results: list[tuple[Query, PredictedResult, ActualResult]],
) -> tuple[np.ndarray, np.ndarray]:
    """Split evaluation tuples into (y_true, y_pred) arrays."""
    y_true = np.array([actual.label for _, _, actual in results], dtype=np.float64)
    y_pred = np.array([predicted.label for _, predicted, _ in results], dtype=np.float64)
    return y_true, y_pred


def compute_all_metrics(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    metrics: list | None = None,
) -> dict[str, float]:
    """Compute all specified metrics.

    Args:
        y_true: Actual labels
        y_pred: Predicted labels
        metrics: List of metric instances. If None, uses accuracy only.

    Returns:
        Dictionary mapping metric names to computed values
    """
    if metrics is None:
        metrics = create_standard_metrics()

    return {metric.name: metric.compute(y_true, y_pred) for metric in metrics}
