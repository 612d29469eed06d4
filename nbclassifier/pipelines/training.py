"""Training pipeline for the classification engine.

Orchestrates the complete training workflow:
1. Read labeled points from the event store
2. Prepare data
3. Train one model per configured algorithm
4. Artifact persistence
"""

from dataclasses import dataclass, field
from datetime import datetime
import json
from pathlib import Path
import uuid

from loguru import logger

from nbclassifier.domain.entities import EngineParams, ModelMetadata
from nbclassifier.engine.engine import Engine, load_engine_factory
from nbclassifier.event_store.event_store import ParquetEventStore
from nbclassifier.models.naive_bayes import NaiveBayesModel
from nbclassifier.pipelines.config import (
    DEFAULT_ENGINE_FACTORY,
    PipelineConfig,
    get_default_config,
    load_config,
)


@dataclass
class TrainingPipeline:
    """Pipeline for training classification models.

    Runs the engine's train workflow against an event store and
    saves one model directory per algorithm plus metadata.
    """

    output_dir: Path
    engine_params: EngineParams
    engine_factory: str = DEFAULT_ENGINE_FACTORY
    engine_variant: str = "default"

    _engine: Engine | None = field(default=None, init=False)
    _models: list[NaiveBayesModel] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        self.output_dir = Path(self.output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self._engine = load_engine_factory(self.engine_factory)()

    def run(self, store: ParquetEventStore) -> tuple[list[NaiveBayesModel], list[ModelMetadata]]:
        """Execute the training workflow.

        Args:
            store: Event store holding the app's entities

        Returns:
            Tuple of (trained models, metadata per model)
        """
        self._models = self._engine.train(store, self.engine_params)

        engine_instance_id = uuid.uuid4().hex
        trained_at = datetime.now()

        metadata = [
            ModelMetadata(
                engine_instance_id=engine_instance_id,
                engine_variant=self.engine_variant,
                trained_at=trained_at,
                algorithm_name=name,
                lambda_=params.lambda_,
                classes=model.classes,
                n_samples=model.n_samples,
                n_features=model.n_features,
                extra={"app_name": self.engine_params.data_source_params.app_name},
            )
            for (name, params), model in zip(
                self.engine_params.algorithm_params_list, self._models
            )
        ]

        self._save_artifacts(metadata)
        logger.info(
            "Engine instance {} trained, artifacts saved to {}",
            engine_instance_id, self.output_dir,
        )
        return self._models, metadata

    def _save_artifacts(self, metadata: list[ModelMetadata]) -> None:
        """Save all training artifacts to disk."""
        model_dir = self.output_dir / "model"
        model_dir.mkdir(parents=True, exist_ok=True)

        for idx, model in enumerate(self._models):
            model.save(model_dir / f"algorithm_{idx}")

        engine_data = {
            "engine_instance_id": metadata[0].engine_instance_id if metadata else None,
            "engine_variant": self.engine_variant,
            "engine_factory": self.engine_factory,
            "trained_at": metadata[0].trained_at.isoformat() if metadata else None,
            "data_source": {
                "app_name": self.engine_params.data_source_params.app_name,
                "eval_k": self.engine_params.data_source_params.eval_k,
            },
            "algorithms": [
                {
                    "name": m.algorithm_name,
                    "lambda": m.lambda_,
                    "classes": m.classes,
                    "n_samples": m.n_samples,
                    "n_features": m.n_features,
                }
                for m in metadata
            ],
        }

        with open(model_dir / "metadata.json", "w") as f:
            json.dump(engine_data, f, indent=2)

    def get_models(self) -> list[NaiveBayesModel]:
        """Return the trained models."""
        return list(self._models)


def run_training(
    config_path: Path | str | None = None,
    event_store_dir: Path | None = None,
    output_dir: Path | None = None,
) -> tuple[list[NaiveBayesModel], list[ModelMetadata]]:
    """Convenience function to run the complete training pipeline.

    Args:
        config_path: Path to the engine variant file
        event_store_dir: Event store location (overrides config if provided)
        output_dir: Path for saving outputs (overrides config if provided)

    Returns:
        Tuple of (trained models, metadata per model)
    """
    config = _resolve_config(config_path)

    store = ParquetEventStore(event_store_dir or config.paths.event_store_dir)
    pipeline = TrainingPipeline(
        output_dir=output_dir or config.paths.output_dir,
        engine_params=config.to_engine_params(),
        engine_factory=config.engine_factory,
        engine_variant=config.id,
    )
    return pipeline.run(store)


def _resolve_config(config_path: Path | str | None) -> PipelineConfig:
    if config_path is not None:
        return load_config(config_path)
    return get_default_config()
