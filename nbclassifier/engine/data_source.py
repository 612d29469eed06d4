"""Data source stage: reads labeled points from the event store."""

from dataclasses import dataclass

from loguru import logger

from nbclassifier.domain.entities import (
    ActualResult,
    DataSourceParams,
    LabeledPoint,
    PropertyMap,
    Query,
    TrainingData,
)
from nbclassifier.domain.protocols import IEventStore


ENTITY_TYPE = "user"
LABEL_PROPERTY = "plan"
FEATURE_PROPERTIES = ["attr0", "attr1", "attr2"]


@dataclass
class DataSource:
    """Builds training data from aggregated `user` entity properties.

    Only entities carrying the label and every feature property are used.
    """

    params: DataSourceParams

    def _read_labeled_points(self, store: IEventStore) -> list[LabeledPoint]:
        entities = store.aggregate_properties(
            self.params.app_name,
            ENTITY_TYPE,
            required=[LABEL_PROPERTY, *FEATURE_PROPERTIES],
        )
        return [
            self._to_labeled_point(entity_id, properties)
            for entity_id, properties in entities.items()
        ]

    @staticmethod
    def _to_labeled_point(entity_id: str, properties: PropertyMap) -> LabeledPoint:
        try:
            return LabeledPoint(
                label=properties.get_float(LABEL_PROPERTY),
                features=tuple(properties.get_float(name) for name in FEATURE_PROPERTIES),
            )
        except Exception as e:
            logger.error(
                "Failed to get properties {} of {}. Exception: {}.",
                dict(properties), entity_id, e,
            )
            raise

    def read_training(self, store: IEventStore) -> TrainingData:
        """Read all labeled points for training."""
        points = self._read_labeled_points(store)
        logger.info(
            "Read {} labeled points from app '{}'", len(points), self.params.app_name
        )
        return TrainingData(labeled_points=points)

    def read_eval(
        self, store: IEventStore
    ) -> list[tuple[TrainingData, list[tuple[Query, ActualResult]]]]:
        """Split labeled points into k folds for evaluation.

        Fold `i` trains on points whose index modulo k differs from `i`
        and tests on the rest.

        Raises:
            ValueError: If `eval_k` is unset or smaller than 2
        """
        k = self.params.eval_k
        if k is None:
            raise ValueError("DataSourceParams.eval_k must not be None")
        if k < 2:
            raise ValueError(f"DataSourceParams.eval_k must be at least 2, got {k}")

        points = self._read_labeled_points(store)

        folds = []
        for fold_idx in range(k):
            training = [p for i, p in enumerate(points) if i % k != fold_idx]
            testing = [
                (Query(features=p.features), ActualResult(label=p.label))
                for i, p in enumerate(points)
                if i % k == fold_idx
            ]
            folds.append((TrainingData(labeled_points=training), testing))

        return folds
