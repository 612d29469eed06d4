"""Engine wiring for the DASE (Data source, Algorithm, Serving, Evaluator) stages.

An `Engine` names the concrete class of every stage. The runner methods
instantiate them from `EngineParams` and drive the fixed contract:
read training data, prepare it, train one model per algorithm, predict
from a query, and reconcile the predictions into one response.
"""

from dataclasses import dataclass
import importlib
from typing import Any, Callable

from loguru import logger

from nbclassifier.domain.entities import (
    ActualResult,
    EngineParams,
    PredictedResult,
    Query,
)
from nbclassifier.domain.protocols import IAlgorithm, IDataSource, IEventStore, IPreparator, IServing
from nbclassifier.engine.algorithm import NaiveBayesAlgorithm
from nbclassifier.engine.data_source import DataSource
from nbclassifier.engine.preparator import Preparator
from nbclassifier.engine.serving import Serving


@dataclass
class Engine:
    """Names the class used for each DASE stage."""

    data_source_class: Callable[..., IDataSource]
    preparator_class: Callable[[], IPreparator]
    algorithm_class_map: dict[str, Callable[..., IAlgorithm]]
    serving_class: Callable[[], IServing]

    def _make_algorithms(self, engine_params: EngineParams) -> list[tuple[str, IAlgorithm]]:
        if not engine_params.algorithm_params_list:
            raise ValueError("EngineParams must name at least one algorithm")

        algorithms = []
        for name, params in engine_params.algorithm_params_list:
            if name not in self.algorithm_class_map:
                raise ValueError(
                    f"Unknown algorithm '{name}'. "
                    f"Available: {sorted(self.algorithm_class_map)}"
                )
            algorithms.append((name, self.algorithm_class_map[name](params)))
        return algorithms

    def train(self, store: IEventStore, engine_params: EngineParams) -> list[Any]:
        """Read, prepare and train one model per algorithm."""
        data_source = self.data_source_class(engine_params.data_source_params)
        preparator = self.preparator_class()
        algorithms = self._make_algorithms(engine_params)

        training_data = data_source.read_training(store)
        prepared_data = preparator.prepare(training_data)

        models = []
        for name, algorithm in algorithms:
            logger.debug("Training algorithm '{}'", name)
            models.append(algorithm.train(prepared_data))
        return models

    def _check_models(self, models: list[Any], engine_params: EngineParams) -> list[tuple[str, IAlgorithm]]:
        algorithms = self._make_algorithms(engine_params)
        if len(models) != len(algorithms):
            raise ValueError(
                f"Got {len(models)} models for {len(algorithms)} algorithms"
            )
        return algorithms

    def predict(
        self,
        models: list[Any],
        engine_params: EngineParams,
        query: Query,
    ) -> PredictedResult:
        """Predict with every algorithm and serve one result."""
        algorithms = self._check_models(models, engine_params)

        predictions = [
            algorithm.predict(model, query)
            for (_, algorithm), model in zip(algorithms, models)
        ]
        return self.serving_class().serve(query, predictions)

    def batch_predict(
        self,
        models: list[Any],
        engine_params: EngineParams,
        queries: list[Query],
    ) -> list[PredictedResult]:
        """Predict a batch with each algorithm in one call, then serve per query."""
        algorithms = self._check_models(models, engine_params)
        return self._serve_batch(algorithms, models, queries)

    def _serve_batch(
        self,
        algorithms: list[tuple[str, IAlgorithm]],
        models: list[Any],
        queries: list[Query],
    ) -> list[PredictedResult]:
        serving = self.serving_class()
        per_algorithm = [
            algorithm.batch_predict(model, queries)
            for (_, algorithm), model in zip(algorithms, models)
        ]
        return [
            serving.serve(query, [predictions[i] for predictions in per_algorithm])
            for i, query in enumerate(queries)
        ]

    def evaluate(
        self,
        store: IEventStore,
        engine_params: EngineParams,
    ) -> list[tuple[Query, PredictedResult, ActualResult]]:
        """Train and predict on every evaluation fold.

        Returns:
            (query, predicted, actual) tuples across all folds
        """
        data_source = self.data_source_class(engine_params.data_source_params)
        preparator = self.preparator_class()
        algorithms = self._make_algorithms(engine_params)

        results = []
        for fold_idx, (training_data, qa_pairs) in enumerate(data_source.read_eval(store)):
            prepared_data = preparator.prepare(training_data)
            models = [algorithm.train(prepared_data) for _, algorithm in algorithms]

            queries = [query for query, _ in qa_pairs]
            served = self._serve_batch(algorithms, models, queries)
            results.extend(
                (query, predicted, actual)
                for (query, actual), predicted in zip(qa_pairs, served)
            )

            logger.debug("Evaluated fold {} with {} queries", fold_idx, len(qa_pairs))

        return results


def ClassificationEngine() -> Engine:
    """Engine factory for the naive Bayes classification engine."""
    return Engine(
        data_source_class=DataSource,
        preparator_class=Preparator,
        algorithm_class_map={"naive": NaiveBayesAlgorithm},
        serving_class=Serving,
    )


def load_engine_factory(path: str) -> Callable[[], Engine]:
    """Resolve a dotted `module.factory` path to an engine factory.

    Raises:
        ValueError: If the path cannot be resolved
    """
    module_name, _, attr = path.rpartition(".")
    if not module_name:
        raise ValueError(f"Engine factory must be a dotted path, got '{path}'")

    try:
        module = importlib.import_module(module_name)
        return getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise ValueError(f"Cannot load engine factory '{path}': {e}") from e
