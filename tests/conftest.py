# tests/conftest.py
from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

from nbclassifier.domain.entities import AlgorithmParams, DataSourceParams, EngineParams
from nbclassifier.event_store.event_store import ParquetEventStore, import_events
from nbclassifier.pipelines.prediction import PredictionPipeline, create_prediction_pipeline
from nbclassifier.pipelines.training import TrainingPipeline


APP_NAME = "TestApp"

# label,attr0 attr1 attr2 -- each class dominated by one attribute
SAMPLE_LINES = (
    [f"0,{5 + i % 3} {i % 2} 0" for i in range(10)]
    + [f"1,{i % 2} {5 + i % 3} 0" for i in range(10)]
    + [f"2,0 {i % 2} {5 + i % 3}" for i in range(10)]
)


@pytest.fixture(autouse=True)
def disable_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def log_messages() -> list[str]:
    """Collect formatted log records emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    path = tmp_path / "data.txt"
    path.write_text("\n".join(SAMPLE_LINES) + "\n")
    return path


@pytest.fixture
def event_store(tmp_path: Path) -> ParquetEventStore:
    return ParquetEventStore(tmp_path / "eventdata")


@pytest.fixture
def seeded_store(event_store: ParquetEventStore, data_file: Path) -> ParquetEventStore:
    import_events(event_store, APP_NAME, data_file)
    return event_store


@pytest.fixture
def engine_params() -> EngineParams:
    return EngineParams(
        data_source_params=DataSourceParams(app_name=APP_NAME, eval_k=5),
        algorithm_params_list=(("naive", AlgorithmParams(lambda_=1.0)),),
    )


@pytest.fixture
def artifacts_dir(tmp_path: Path, seeded_store: ParquetEventStore, engine_params: EngineParams) -> Path:
    output_dir = tmp_path / "artifacts"
    TrainingPipeline(output_dir=output_dir, engine_params=engine_params).run(seeded_store)
    return output_dir


@pytest.fixture
def prediction_pipeline(artifacts_dir: Path) -> PredictionPipeline:
    return create_prediction_pipeline(artifacts_dir=artifacts_dir)
