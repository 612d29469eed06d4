"""Prediction pipeline for classification queries.

Loads the artifacts written by TrainingPipeline and answers queries
through the engine's predict/serve workflow.
"""

from dataclasses import dataclass, field
import json
from pathlib import Path
from typing import Any

from nbclassifier.domain.entities import (
    AlgorithmParams,
    DataSourceParams,
    EngineParams,
    PredictedResult,
    Query,
)
from nbclassifier.engine.engine import Engine, load_engine_factory
from nbclassifier.models.naive_bayes import NaiveBayesModel
from nbclassifier.pipelines.config import load_config


@dataclass
class PredictionPipeline:
    """Pipeline for answering classification queries."""

    model_dir: Path

    _engine: Engine | None = field(default=None, init=False)
    _engine_params: EngineParams | None = field(default=None, init=False)
    _models: list[NaiveBayesModel] = field(default_factory=list, init=False)
    _metadata: dict[str, Any] = field(default_factory=dict, init=False)
    _is_loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.model_dir = Path(self.model_dir)

    def load(self) -> "PredictionPipeline":
        """Load models and engine metadata from disk.

        Raises:
            FileNotFoundError: If no trained engine exists at model_dir
        """
        metadata_path = self.model_dir / "metadata.json"
        if not metadata_path.exists():
            raise FileNotFoundError(f"No trained engine found at {self.model_dir}")

        with open(metadata_path) as f:
            self._metadata = json.load(f)

        self._engine = load_engine_factory(self._metadata["engine_factory"])()

        algorithms = self._metadata["algorithms"]
        self._engine_params = EngineParams(
            data_source_params=DataSourceParams(
                app_name=self._metadata["data_source"]["app_name"],
                eval_k=self._metadata["data_source"].get("eval_k"),
            ),
            algorithm_params_list=tuple(
                (algo["name"], AlgorithmParams(lambda_=algo["lambda"]))
                for algo in algorithms
            ),
        )

        self._models = [
            NaiveBayesModel().load(self.model_dir / f"algorithm_{idx}")
            for idx in range(len(algorithms))
        ]

        self._is_loaded = True
        return self

    @property
    def is_loaded(self) -> bool:
        return self._is_loaded

    @property
    def engine_instance_id(self) -> str | None:
        return self._metadata.get("engine_instance_id")

    @property
    def model_name(self) -> str:
        if not self._models:
            return "unknown"
        return self._models[0].model_name

    def status(self) -> dict[str, Any]:
        """Describe the loaded engine instance."""
        if not self._is_loaded:
            raise RuntimeError("Pipeline must be loaded before reading status")
        return {
            "engine_instance_id": self._metadata.get("engine_instance_id"),
            "engine_variant": self._metadata.get("engine_variant"),
            "trained_at": self._metadata.get("trained_at"),
            "algorithms": [m.model_name for m in self._models],
        }

    def predict(self, query: Query) -> PredictedResult:
        """Answer a single query.

        Raises:
            RuntimeError: If pipeline not loaded
            ValueError: If the query has the wrong number of features
        """
        if not self._is_loaded:
            raise RuntimeError("Pipeline must be loaded before prediction")

        return self._engine.predict(self._models, self._engine_params, query)

    def predict_batch(self, queries: list[Query]) -> list[PredictedResult]:
        """Answer several queries in order."""
        if not self._is_loaded:
            raise RuntimeError("Pipeline must be loaded before prediction")

        return self._engine.batch_predict(self._models, self._engine_params, queries)


def create_prediction_pipeline(
    artifacts_dir: Path | None = None,
    config_path: Path | str | None = None,
) -> PredictionPipeline:
    """Create and load a prediction pipeline from training artifacts.

    Args:
        artifacts_dir: Directory containing `model/` (overrides config)
        config_path: Path to the engine variant file

    Returns:
        Loaded PredictionPipeline ready for queries
    """
    if artifacts_dir is not None:
        model_dir = Path(artifacts_dir) / "model"
    elif config_path is not None:
        model_dir = load_config(config_path).paths.model_dir
    else:
        raise ValueError("Either artifacts_dir or config_path must be provided")

    return PredictionPipeline(model_dir=model_dir).load()
