import json
from pathlib import Path

import pydantic
import pytest

from nbclassifier.pipelines.config import get_default_config, load_config


ENGINE_JSON = {
    "id": "variant-a",
    "description": "test variant",
    "engineFactory": "nbclassifier.engine.ClassificationEngine",
    "datasource": {"params": {"appName": "MyApp1", "evalK": 3}},
    "algorithms": [{"name": "naive", "params": {"lambda": 2.0}}],
    "paths": {"event_store_dir": "store", "output_dir": "/abs/artifacts"},
    "evaluation": {"eval_k": 4, "lambdas": [1.0, 5.0]},
}


def _write(tmp_path: Path, data: dict, name: str = "engine.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return path


def test_load_engine_json(tmp_path):
    config = load_config(_write(tmp_path, ENGINE_JSON))

    assert config.id == "variant-a"
    assert config.engine_factory == "nbclassifier.engine.ClassificationEngine"
    assert config.datasource.params.app_name == "MyApp1"
    assert config.datasource.params.eval_k == 3
    assert config.algorithms[0].params.lambda_ == 2.0


def test_relative_paths_resolve_against_config_dir(tmp_path):
    config = load_config(_write(tmp_path, ENGINE_JSON))

    assert config.paths.event_store_dir == tmp_path / "store"
    assert config.paths.output_dir == Path("/abs/artifacts")
    assert config.paths.model_dir == Path("/abs/artifacts/model")


def test_load_yaml(tmp_path):
    path = tmp_path / "engine.yml"
    path.write_text(
        "datasource:\n"
        "  params:\n"
        "    appName: YamlApp\n"
        "algorithms:\n"
        "  - name: naive\n"
        "    params:\n"
        "      lambda: 0.5\n"
    )

    config = load_config(path)

    assert config.datasource.params.app_name == "YamlApp"
    assert config.algorithms[0].params.lambda_ == 0.5


def test_to_engine_params(tmp_path):
    params = load_config(_write(tmp_path, ENGINE_JSON)).to_engine_params()

    assert params.data_source_params.app_name == "MyApp1"
    assert params.data_source_params.eval_k == 3
    assert params.algorithm_params_list[0][0] == "naive"
    assert params.algorithm_params_list[0][1].lambda_ == 2.0


def test_to_evaluation_params_list(tmp_path):
    params_list = load_config(_write(tmp_path, ENGINE_JSON)).to_evaluation_params_list()

    assert [p.algorithm_params_list[0][1].lambda_ for p in params_list] == [1.0, 5.0]
    assert all(p.data_source_params.eval_k == 3 for p in params_list)


def test_evaluation_eval_k_falls_back_without_data_source_eval_k(tmp_path):
    data = dict(ENGINE_JSON, datasource={"params": {"appName": "MyApp1"}})

    params_list = load_config(_write(tmp_path, data)).to_evaluation_params_list()

    assert all(p.data_source_params.eval_k == 4 for p in params_list)



def test_defaults():
    config = get_default_config()

    assert config.id == "default"
    assert config.datasource.params.app_name == "MyApp1"
    assert config.algorithms[0].name == "naive"
    assert config.evaluation.lambdas == [10.0, 100.0, 1000.0]
    assert config.evaluation.eval_k == 5


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.json")


@pytest.mark.parametrize("params", [{"lambda": 0}, {"lambda": -1.0}])
def test_rejects_non_positive_lambda(tmp_path, params):
    data = dict(ENGINE_JSON, algorithms=[{"name": "naive", "params": params}])

    with pytest.raises(pydantic.ValidationError):
        load_config(_write(tmp_path, data))


def test_rejects_small_eval_k(tmp_path):
    data = dict(ENGINE_JSON, datasource={"params": {"appName": "a", "evalK": 1}})

    with pytest.raises(pydantic.ValidationError):
        load_config(_write(tmp_path, data))
