"""Domain layer: entities and protocols."""

from .entities import (
    Event,
    PropertyMap,
    Query,
    PredictedResult,
    ActualResult,
    LabeledPoint,
    TrainingData,
    PreparedData,
    DataSourceParams,
    AlgorithmParams,
    EngineParams,
    EvaluationResult,
    MetricEvaluatorResult,
    ModelMetadata,
)

from .protocols import (
    IEventStore,
    IModel,
    IDataSource,
    IPreparator,
    IAlgorithm,
    IServing,
    IMetric,
)

__all__ = [
    "Event",
    "PropertyMap",
    "Query",
    "PredictedResult",
    "ActualResult",
    "LabeledPoint",
    "TrainingData",
    "PreparedData",
    "DataSourceParams",
    "AlgorithmParams",
    "EngineParams",
    "EvaluationResult",
    "MetricEvaluatorResult",
    "ModelMetadata",
    "IEventStore",
    "IModel",
    "IDataSource",
    "IPreparator",
    "IAlgorithm",
    "IServing",
    "IMetric",
]
