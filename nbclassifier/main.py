"""Main entry point for the naive Bayes classification engine.

Provides CLI interface for importing data, training, evaluation,
prediction and deployment.

Usage:
    # Import sample data into the event store
    nbclassifier import --config engine.json --input data/data.txt

    # Training
    nbclassifier train --config engine.json

    # Parameter-grid evaluation
    nbclassifier evaluate --config engine.json

    # Prediction
    nbclassifier predict --config engine.json --features 2 0 0

    # Serve queries over HTTP
    nbclassifier deploy --config engine.json --port 8000
"""

import argparse
from pathlib import Path
import sys

import uvicorn
from loguru import logger

from nbclassifier.api.app import create_app
from nbclassifier.api.config import app_config
from nbclassifier.api.service import ClassificationService
from nbclassifier.domain.entities import Query
from nbclassifier.event_store.event_store import ParquetEventStore, import_events
from nbclassifier.logging_config import setup_logging
from nbclassifier.metrics.metrics import AccuracyMetric, PrecisionMetric
from nbclassifier.pipelines.config import load_config, get_default_config, PipelineConfig
from nbclassifier.pipelines.evaluation import EvaluationPipeline
from nbclassifier.pipelines.prediction import create_prediction_pipeline
from nbclassifier.pipelines.training import TrainingPipeline


def _load_pipeline_config(config_path: str | None) -> PipelineConfig:
    """Load engine variant from file or return defaults."""
    if config_path:
        return load_config(config_path)
    return get_default_config()


def _event_store(args: argparse.Namespace, config: PipelineConfig) -> ParquetEventStore:
    store_dir = Path(args.event_store_dir) if args.event_store_dir else config.paths.event_store_dir
    return ParquetEventStore(store_dir)


def _artifacts_dir(args: argparse.Namespace, config: PipelineConfig) -> Path:
    return Path(args.artifacts_dir) if args.artifacts_dir else config.paths.output_dir


def import_data(args: argparse.Namespace) -> None:
    """Import the sample data file into the event store."""
    config = _load_pipeline_config(args.config)

    input_path = Path(args.input) if args.input else config.paths.data_file
    app_name = args.app_name or config.datasource.params.app_name
    store = _event_store(args, config)

    count = import_events(store, app_name, input_path)
    print(f"{count} events are imported into app '{app_name}'.")


def train(args: argparse.Namespace) -> None:
    """Run the training pipeline."""
    config = _load_pipeline_config(args.config)
    store = _event_store(args, config)
    output_dir = _artifacts_dir(args, config)

    engine_params = config.to_engine_params()
    print(f"Reading app '{engine_params.data_source_params.app_name}'")
    for name, params in engine_params.algorithm_params_list:
        print(f"Algorithm: {name} lambda={params.lambda_}")

    pipeline = TrainingPipeline(
        output_dir=output_dir,
        engine_params=engine_params,
        engine_factory=config.engine_factory,
        engine_variant=config.id,
    )
    models, metadata = pipeline.run(store)

    print("\n" + "=" * 60)
    print("TRAINING COMPLETE")
    print("=" * 60)
    print(f"Engine instance: {metadata[0].engine_instance_id}")
    for model, meta in zip(models, metadata):
        print(f"{model.model_name}: {meta.n_samples} samples, classes={meta.classes}")
    print(f"\nArtifacts saved to: {output_dir}")


def evaluate(args: argparse.Namespace) -> None:
    """Evaluate the configured parameter grid and report the best variant."""
    config = _load_pipeline_config(args.config)
    store = _event_store(args, config)

    pipeline = EvaluationPipeline(
        metric=AccuracyMetric(),
        other_metrics=[PrecisionMetric(label) for label in config.evaluation.precision_labels],
        engine_factory=config.engine_factory,
    )
    result = pipeline.run(store, config.to_evaluation_params_list())
    print(pipeline.generate_report(result))


def predict(args: argparse.Namespace) -> None:
    """Answer a single query from trained artifacts."""
    config = _load_pipeline_config(args.config)
    artifacts_dir = _artifacts_dir(args, config)

    pipeline = create_prediction_pipeline(artifacts_dir=artifacts_dir)
    result = pipeline.predict(Query(features=tuple(args.features)))

    print("\n" + "=" * 60)
    print("PREDICTION RESULT")
    print("=" * 60)
    print(f"Features: {args.features}")
    print(f"Label: {result.label}")
    print(f"Model: {pipeline.model_name}")


def deploy(args: argparse.Namespace) -> None:
    """Serve queries over HTTP."""
    config = _load_pipeline_config(args.config)
    artifacts_dir = _artifacts_dir(args, config)

    pipeline = create_prediction_pipeline(artifacts_dir=artifacts_dir)
    app = create_app(ClassificationService(pipeline))

    host = args.host or app_config.host
    port = args.port or app_config.port
    logger.info("Deploying engine instance {} on {}:{}", pipeline.engine_instance_id, host, port)
    uvicorn.run(app, host=host, port=port)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Naive Bayes Classification Engine")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    parser.add_argument("--log-file", type=str, help="Optional log file")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Import subcommand
    import_parser = subparsers.add_parser("import", help="Import sample data into the event store")
    import_parser.add_argument("--config", type=str, help="Path to engine variant file")
    import_parser.add_argument("--input", type=str, help="Data file (overrides config)")
    import_parser.add_argument("--app-name", type=str, help="App name (overrides config)")
    import_parser.add_argument("--event-store-dir", type=str, help="Event store path (overrides config)")

    # Training subcommand
    train_parser = subparsers.add_parser("train", help="Train a new engine instance")
    train_parser.add_argument("--config", type=str, help="Path to engine variant file")
    train_parser.add_argument("--event-store-dir", type=str, help="Event store path (overrides config)")
    train_parser.add_argument("--artifacts-dir", type=str, help="Path to save artifacts (overrides config)")

    # Evaluation subcommand
    eval_parser = subparsers.add_parser("evaluate", help="Evaluate candidate parameters")
    eval_parser.add_argument("--config", type=str, help="Path to engine variant file")
    eval_parser.add_argument("--event-store-dir", type=str, help="Event store path (overrides config)")

    # Prediction subcommand
    predict_parser = subparsers.add_parser("predict", help="Make a prediction")
    predict_parser.add_argument("--config", type=str, help="Path to engine variant file")
    predict_parser.add_argument("--artifacts-dir", type=str, help="Path to artifacts (overrides config)")
    predict_parser.add_argument("--features", type=float, nargs="+", required=True, help="Feature values")

    # Deploy subcommand
    deploy_parser = subparsers.add_parser("deploy", help="Serve queries over HTTP")
    deploy_parser.add_argument("--config", type=str, help="Path to engine variant file")
    deploy_parser.add_argument("--artifacts-dir", type=str, help="Path to artifacts (overrides config)")
    deploy_parser.add_argument("--host", type=str, help="Bind address (overrides settings)")
    deploy_parser.add_argument("--port", type=int, help="Port (overrides settings)")

    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    commands = {
        "import": import_data,
        "train": train,
        "evaluate": evaluate,
        "predict": predict,
        "deploy": deploy,
    }
    if args.command not in commands:
        parser.print_help()
        return 1

    try:
        commands[args.command](args)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
