"""Configuration loader for engine variants.

Loads an engine variant file (`engine.json` or YAML) into typed
configuration with sensible defaults and validation using Pydantic.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from nbclassifier.domain.entities import AlgorithmParams, DataSourceParams, EngineParams


DEFAULT_ENGINE_FACTORY = "nbclassifier.engine.ClassificationEngine"


class PathsConfig(BaseModel):
    """Configuration for file system paths."""

    model_config = {"frozen": True}

    data_file: Path = Field(default=Path("data/data.txt"))
    event_store_dir: Path = Field(default=Path("eventdata"))
    output_dir: Path = Field(default=Path("artifacts"))

    @property
    def model_dir(self) -> Path:
        return self.output_dir / "model"


class DataSourceParamsConfig(BaseModel):
    """Data source parameters."""

    model_config = {"frozen": True, "populate_by_name": True}

    app_name: str = Field(default="MyApp1", alias="appName", min_length=1)
    eval_k: int | None = Field(default=None, alias="evalK", ge=2)


class DataSourceConfig(BaseModel):
    """Data source section of an engine variant."""

    model_config = {"frozen": True}

    params: DataSourceParamsConfig = Field(default_factory=DataSourceParamsConfig)


class AlgorithmParamsConfig(BaseModel):
    """Naive Bayes parameters."""

    model_config = {"frozen": True, "populate_by_name": True}

    lambda_: float = Field(default=1.0, alias="lambda", gt=0)


class AlgorithmConfig(BaseModel):
    """One entry of the algorithms list."""

    model_config = {"frozen": True}

    name: str = Field(default="naive")
    params: AlgorithmParamsConfig = Field(default_factory=AlgorithmParamsConfig)


class EvaluationConfig(BaseModel):
    """Configuration for the parameter-grid evaluation."""

    model_config = {"frozen": True}

    eval_k: int = Field(default=5, ge=2)
    lambdas: list[float] = Field(default_factory=lambda: [10.0, 100.0, 1000.0], min_length=1)
    precision_labels: list[float] = Field(default_factory=lambda: [0.0, 1.0, 2.0])


class PipelineConfig(BaseModel):
    """Complete engine variant configuration."""

    model_config = {"frozen": True, "populate_by_name": True}

    id: str = Field(default="default")
    description: str = Field(default="Default settings")
    engine_factory: str = Field(default=DEFAULT_ENGINE_FACTORY, alias="engineFactory")
    datasource: DataSourceConfig = Field(default_factory=DataSourceConfig)
    algorithms: list[AlgorithmConfig] = Field(
        default_factory=lambda: [AlgorithmConfig()], min_length=1
    )
    paths: PathsConfig = Field(default_factory=PathsConfig)
    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)

    def with_base_path(self, base_path: Path) -> "PipelineConfig":
        """Return a new config with paths resolved against base_path."""
        def resolve(p: Path) -> Path:
            if not p.is_absolute():
                return base_path / p
            return p

        resolved_paths = PathsConfig(
            data_file=resolve(self.paths.data_file),
            event_store_dir=resolve(self.paths.event_store_dir),
            output_dir=resolve(self.paths.output_dir),
        )

        return self.model_copy(update={"paths": resolved_paths})

    def to_engine_params(self) -> EngineParams:
        """Convert to domain EngineParams."""
        ds = self.datasource.params
        return EngineParams(
            data_source_params=DataSourceParams(app_name=ds.app_name, eval_k=ds.eval_k),
            algorithm_params_list=tuple(
                (algo.name, AlgorithmParams(lambda_=algo.params.lambda_))
                for algo in self.algorithms
            ),
        )

    def to_evaluation_params_list(self) -> list[EngineParams]:
        """Build one EngineParams per candidate smoothing constant."""
        ds = self.datasource.params
        base = EngineParams(
            data_source_params=DataSourceParams(
                app_name=ds.app_name,
                eval_k=ds.eval_k or self.evaluation.eval_k,
            ),
        )
        algorithm_name = self.algorithms[0].name
        return [
            base.with_algorithm_params(algorithm_name, AlgorithmParams(lambda_=value))
            for value in self.evaluation.lambdas
        ]


def load_config(config_path: Path | str, base_path: Path | None = None) -> PipelineConfig:
    """Load an engine variant from a JSON or YAML file.

    Args:
        config_path: Path to the configuration file
        base_path: Optional base path for resolving relative paths.
                   Defaults to the parent directory of the config file.

    Returns:
        PipelineConfig with all settings loaded

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If parsing fails
        pydantic.ValidationError: If configuration validation fails
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    if base_path is None:
        base_path = config_path.parent

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    config = PipelineConfig.model_validate(data)
    return config.with_base_path(base_path)


def get_default_config(base_path: Path | None = None) -> PipelineConfig:
    """Get default configuration without loading from file.

    Args:
        base_path: Optional base path for resolving relative paths.

    Returns:
        PipelineConfig with all default values
    """
    config = PipelineConfig()
    if base_path:
        return config.with_base_path(base_path)
    return config
