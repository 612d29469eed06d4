"""Pipeline implementations for the classification engine."""

from .config import (
    PipelineConfig,
    PathsConfig,
    DataSourceConfig,
    DataSourceParamsConfig,
    AlgorithmConfig,
    AlgorithmParamsConfig,
    EvaluationConfig,
    load_config,
    get_default_config,
)
from .training import (
    TrainingPipeline,
    run_training,
)
from .prediction import (
    PredictionPipeline,
    create_prediction_pipeline,
)
from .evaluation import (
    EvaluationPipeline,
    run_evaluation,
)

__all__ = [
    # Config
    "PipelineConfig",
    "PathsConfig",
    "DataSourceConfig",
    "DataSourceParamsConfig",
    "AlgorithmConfig",
    "AlgorithmParamsConfig",
    "EvaluationConfig",
    "load_config",
    "get_default_config",
    # Training
    "TrainingPipeline",
    "run_training",
    # Prediction
    "PredictionPipeline",
    "create_prediction_pipeline",
    # Evaluation
    "EvaluationPipeline",
    "run_evaluation",
]
