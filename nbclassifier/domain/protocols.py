"""Protocol interfaces for the DASE engine components."""

from typing import Any, Iterable, Protocol, runtime_checkable
from pathlib import Path

import numpy as np

from .entities import (
    ActualResult,
    Event,
    PredictedResult,
    PreparedData,
    PropertyMap,
    Query,
    TrainingData,
)


@runtime_checkable
class IEventStore(Protocol):
    """Interface for event storage and per-entity property aggregation."""

    def insert(self, app_name: str, events: Iterable[Event]) -> int:
        """Append events for an app, returning how many were written."""
        ...

    def find(self, app_name: str, entity_type: str | None = None) -> list[Event]:
        """Return stored events in replay order."""
        ...

    def aggregate_properties(
        self,
        app_name: str,
        entity_type: str,
        required: list[str] | None = None,
    ) -> dict[str, PropertyMap]:
        """Replay `$set` / `$unset` / `$delete` events into property maps."""
        ...


@runtime_checkable
class IModel(Protocol):
    """Interface for trained classification models."""

    @property
    def model_name(self) -> str:
        """Return the model's identifier."""
        ...

    @property
    def is_fitted(self) -> bool:
        """Check if the model has been trained."""
        ...

    def fit(self, X: np.ndarray, y: np.ndarray) -> Any:
        """Train the model on provided data."""
        ...

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Generate label predictions for input features."""
        ...

    def save(self, path: Path) -> None:
        """Persist the model to disk."""
        ...

    def load(self, path: Path) -> None:
        """Load a model from disk."""
        ...


class IDataSource(Protocol):
    """Reads training and evaluation data from the event store."""

    def read_training(self, store: IEventStore) -> TrainingData:
        ...

    def read_eval(
        self, store: IEventStore
    ) -> list[tuple[TrainingData, list[tuple[Query, ActualResult]]]]:
        ...


class IPreparator(Protocol):
    """Turns training data into prepared data."""

    def prepare(self, training_data: TrainingData) -> PreparedData:
        ...


class IAlgorithm(Protocol):
    """Trains a model and predicts from it."""

    def train(self, data: PreparedData) -> IModel:
        ...

    def predict(self, model: IModel, query: Query) -> PredictedResult:
        ...

    def batch_predict(self, model: IModel, queries: list[Query]) -> list[PredictedResult]:
        ...


class IServing(Protocol):
    """Reconciles the predictions of every algorithm into one result."""

    def serve(self, query: Query, predicted_results: list[PredictedResult]) -> PredictedResult:
        ...


@runtime_checkable
class IMetric(Protocol):
    """Interface for evaluation metrics."""

    @property
    def name(self) -> str:
        """Return the metric's identifier."""
        ...

    def compute(self, y_true: np.ndarray, y_pred: np.ndarray) -> float:
        """Compute the metric value."""
        ...
