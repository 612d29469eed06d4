import numpy as np
import pytest

from nbclassifier.domain.entities import ActualResult, PredictedResult, Query
from nbclassifier.metrics import (
    AccuracyMetric,
    CustomMetric,
    PrecisionMetric,
    compute_all_metrics,
    create_standard_metrics,
    to_label_arrays,
)


Y_TRUE = np.array([0.0, 1.0, 1.0, 2.0, 2.0])
Y_PRED = np.array([0.0, 1.0, 2.0, 2.0, 1.0])


def test_accuracy():
    assert AccuracyMetric().compute(Y_TRUE, Y_PRED) == pytest.approx(0.6)


def test_accuracy_of_nothing_is_zero():
    assert AccuracyMetric().compute(np.array([]), np.array([])) == 0.0


def test_precision_per_label():
    assert PrecisionMetric(0.0).compute(Y_TRUE, Y_PRED) == 1.0
    assert PrecisionMetric(1.0).compute(Y_TRUE, Y_PRED) == pytest.approx(0.5)
    assert PrecisionMetric(2.0).compute(Y_TRUE, Y_PRED) == pytest.approx(0.5)


def test_precision_of_unpredicted_label_is_zero():
    assert PrecisionMetric(3.0).compute(Y_TRUE, Y_PRED) == 0.0


def test_metric_names():
    assert AccuracyMetric().name == "accuracy"
    assert PrecisionMetric(1.0).name == "precision_1"


def test_compute_all_metrics():
    metrics = create_standard_metrics([0.0, 1.0])
    metrics.append(CustomMetric("errors", lambda t, p: np.sum(t != p)))

    results = compute_all_metrics(Y_TRUE, Y_PRED, metrics)

    assert results == {
        "accuracy": pytest.approx(0.6),
        "precision_0": 1.0,
        "precision_1": pytest.approx(0.5),
        "errors": 2.0,
    }


def test_to_label_arrays():
    results = [
        (Query(features=(1.0,)), PredictedResult(1.0), ActualResult(0.0)),
        (Query(features=(2.0,)), PredictedResult(2.0), ActualResult(2.0)),
    ]

    y_true, y_pred = to_label_arrays(results)

    np.testing.assert_array_equal(y_true, [0.0, 2.0])
    np.testing.assert_array_equal(y_pred, [1.0, 2.0])


def test_metrics_satisfy_protocol():
    from nbclassifier.domain.protocols import IMetric

    assert isinstance(AccuracyMetric(), IMetric)
    assert isinstance(PrecisionMetric(1.0), IMetric)
