"""Evaluation pipeline for the classification engine.

Runs k-fold evaluation for a list of engine variants and selects the
variant with the best primary metric score:
- Accuracy as the primary metric
- Per-label precision as secondary metrics
- Text report listing every candidate
"""

from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from nbclassifier.domain.entities import (
    EngineParams,
    EvaluationResult,
    MetricEvaluatorResult,
)
from nbclassifier.domain.protocols import IMetric
from nbclassifier.engine.engine import Engine, load_engine_factory
from nbclassifier.event_store.event_store import ParquetEventStore
from nbclassifier.metrics.metrics import (
    AccuracyMetric,
    PrecisionMetric,
    compute_all_metrics,
    to_label_arrays,
)
from nbclassifier.pipelines.config import (
    DEFAULT_ENGINE_FACTORY,
    get_default_config,
    load_config,
)


@dataclass
class EvaluationPipeline:
    """Pipeline for choosing engine parameters by cross-validation."""

    metric: IMetric = field(default_factory=AccuracyMetric)
    other_metrics: list[IMetric] = field(default_factory=list)
    engine_factory: str = DEFAULT_ENGINE_FACTORY

    _engine: Engine | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self._engine = load_engine_factory(self.engine_factory)()

    def evaluate(
        self,
        store: ParquetEventStore,
        engine_params: EngineParams,
    ) -> EvaluationResult:
        """Evaluate a single engine variant across all folds."""
        results = self._engine.evaluate(store, engine_params)
        y_true, y_pred = to_label_arrays(results)

        return EvaluationResult(
            engine_params=engine_params,
            score=self.metric.compute(y_true, y_pred),
            other_scores=compute_all_metrics(y_true, y_pred, self.other_metrics),
            n_samples=len(results),
        )

    def run(
        self,
        store: ParquetEventStore,
        engine_params_list: list[EngineParams],
    ) -> MetricEvaluatorResult:
        """Evaluate every variant and pick the best.

        Ties keep the earlier variant.

        Raises:
            ValueError: If engine_params_list is empty
        """
        if not engine_params_list:
            raise ValueError("engine_params_list must not be empty")

        results = []
        for idx, engine_params in enumerate(engine_params_list):
            result = self.evaluate(store, engine_params)
            logger.info(
                "Variant {}: {}={:.6f} over {} queries",
                idx, self.metric.name, result.score, result.n_samples,
            )
            results.append(result)

        best = results[0]
        for result in results[1:]:
            if result.score > best.score:
                best = result

        return MetricEvaluatorResult(
            metric_name=self.metric.name,
            best_score=best.score,
            best_engine_params=best.engine_params,
            results=results,
        )

    def generate_report(self, evaluator_result: MetricEvaluatorResult) -> str:
        """Generate a formatted evaluation report."""
        lines = [
            "=" * 70,
            "ENGINE EVALUATION REPORT",
            "=" * 70,
            evaluator_result.summary(),
            "=" * 70,
        ]
        return "\n".join(lines)


def run_evaluation(
    config_path: Path | str | None = None,
    event_store_dir: Path | None = None,
) -> MetricEvaluatorResult:
    """Convenience function to evaluate the configured parameter grid.

    Args:
        config_path: Path to the engine variant file
        event_store_dir: Event store location (overrides config if provided)

    Returns:
        MetricEvaluatorResult
    """
    config = load_config(config_path) if config_path is not None else get_default_config()

    pipeline = EvaluationPipeline(
        metric=AccuracyMetric(),
        other_metrics=[PrecisionMetric(label) for label in config.evaluation.precision_labels],
        engine_factory=config.engine_factory,
    )
    store = ParquetEventStore(event_store_dir or config.paths.event_store_dir)

    return pipeline.run(store, config.to_evaluation_params_list())
