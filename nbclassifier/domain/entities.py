"""Domain entities for the naive Bayes classification engine."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterator, Mapping


@dataclass(frozen=True)
class Event:
    """A single event recorded against an entity."""
    event: str
    entity_type: str
    entity_id: str
    properties: dict[str, Any] = field(default_factory=dict)
    event_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class PropertyMap(Mapping[str, Any]):
    """Aggregated properties of one entity.

    Read-only view over the result of replaying `$set` / `$unset` events.
    """

    def __init__(
        self,
        fields: dict[str, Any],
        first_updated: datetime,
        last_updated: datetime,
    ) -> None:
        self._fields = dict(fields)
        self.first_updated = first_updated
        self.last_updated = last_updated

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"PropertyMap({self._fields!r})"

    def get_float(self, key: str) -> float:
        """Return a property as float.

        Raises:
            KeyError: If the property is missing
            ValueError: If the property is not numeric
        """
        value = self._fields[key]
        if isinstance(value, bool):
            raise ValueError(f"Property '{key}' is not numeric: {value!r}")
        return float(value)


@dataclass(frozen=True)
class Query:
    """Prediction request: ordered numeric feature values."""
    features: tuple[float, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "features", tuple(float(v) for v in self.features))


@dataclass(frozen=True)
class PredictedResult:
    """Predicted class label."""
    label: float


@dataclass(frozen=True)
class ActualResult:
    """Known class label used during evaluation."""
    label: float


@dataclass(frozen=True)
class LabeledPoint:
    """A (label, feature vector) training pair."""
    label: float
    features: tuple[float, ...]


@dataclass
class TrainingData:
    """Labeled points read by the data source."""
    labeled_points: list[LabeledPoint]

    def __len__(self) -> int:
        return len(self.labeled_points)

    def __repr__(self) -> str:
        head = self.labeled_points[:2]
        return f"TrainingData(n={len(self.labeled_points)}, head={head})"


@dataclass
class PreparedData:
    """Labeled points handed to the algorithms."""
    labeled_points: list[LabeledPoint]

    def __len__(self) -> int:
        return len(self.labeled_points)


@dataclass(frozen=True)
class DataSourceParams:
    """Static data source configuration."""
    app_name: str
    eval_k: int | None = None


@dataclass(frozen=True)
class AlgorithmParams:
    """Naive Bayes hyperparameters.

    `lambda_` is the additive smoothing constant.
    """
    lambda_: float = 1.0


@dataclass(frozen=True)
class EngineParams:
    """Parameters for every stage of one engine variant."""
    data_source_params: DataSourceParams
    algorithm_params_list: tuple[tuple[str, AlgorithmParams], ...] = (
        ("naive", AlgorithmParams()),
    )

    def with_algorithm_params(self, name: str, params: AlgorithmParams) -> "EngineParams":
        """Return a copy using a single algorithm with the given params."""
        return EngineParams(
            data_source_params=self.data_source_params,
            algorithm_params_list=((name, params),),
        )


@dataclass
class EvaluationResult:
    """Scores of one engine variant."""
    engine_params: EngineParams
    score: float
    other_scores: dict[str, float] = field(default_factory=dict)
    n_samples: int = 0


@dataclass
class MetricEvaluatorResult:
    """Outcome of evaluating a list of engine variants."""
    metric_name: str
    best_score: float
    best_engine_params: EngineParams
    results: list[EvaluationResult]
    evaluation_timestamp: datetime = field(default_factory=datetime.now)

    def summary(self) -> str:
        lines = [
            f"Metric: {self.metric_name}",
            f"Timestamp: {self.evaluation_timestamp}",
            "-" * 50,
        ]
        for idx, result in enumerate(self.results):
            params = ", ".join(
                f"{name}(lambda={p.lambda_})"
                for name, p in result.engine_params.algorithm_params_list
            )
            others = " ".join(f"{k}={v:.6f}" for k, v in result.other_scores.items())
            lines.append(f"[{idx}] {params}: {result.score:.6f} {others}".rstrip())
        lines.append("-" * 50)
        best = ", ".join(
            f"{name}(lambda={p.lambda_})"
            for name, p in self.best_engine_params.algorithm_params_list
        )
        lines.append(f"Best: {best} score={self.best_score:.6f}")
        return "\n".join(lines)


@dataclass
class ModelMetadata:
    """Metadata persisted next to a trained model."""
    engine_instance_id: str
    engine_variant: str
    trained_at: datetime
    algorithm_name: str
    lambda_: float
    classes: list[float]
    n_samples: int
    n_features: int
    extra: dict[str, Any] = field(default_factory=dict)
