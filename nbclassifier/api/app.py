"""FastAPI application serving classification queries."""

from contextlib import asynccontextmanager
import time

from fastapi import FastAPI, HTTPException, Request
from loguru import logger

from nbclassifier.api.config import app_config
from nbclassifier.api.service import ClassificationService
from nbclassifier.pipelines.prediction import create_prediction_pipeline

from .dtos import EngineStatus, PredictedResultOutput, QueryInput


def _get_service(request: Request) -> ClassificationService:
    return request.app.state.service


def create_app(service: ClassificationService | None = None) -> FastAPI:
    """Build the query server.

    Without a service, the prediction pipeline is loaded from
    `app_config.artifacts_dir` at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "service", None) is None:
            pipeline = create_prediction_pipeline(app_config.artifacts_dir)
            app.state.service = ClassificationService(pipeline)
            logger.info("Loaded engine instance {}", pipeline.engine_instance_id)
        yield

    app = FastAPI(
        title="Naive Bayes Classification API",
        description="Query server for the naive Bayes classification engine",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.service = service

    @app.post("/queries.json", response_model=PredictedResultOutput)
    def query(body: QueryInput, request: Request) -> PredictedResultOutput:
        """Predict the label for one feature vector."""
        start_time = time.perf_counter()
        try:
            result = _get_service(request).predict_single(body)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        logger.debug(
            "Query {} -> {} in {:.2f}ms",
            body.features, result.label, (time.perf_counter() - start_time) * 1000,
        )
        return result

    @app.post("/batch/queries.json", response_model=list[PredictedResultOutput])
    def batch_query(body: list[QueryInput], request: Request) -> list[PredictedResultOutput]:
        """Predict labels for several feature vectors."""
        try:
            return _get_service(request).predict_batch(body)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    @app.get("/", response_model=EngineStatus)
    def status(request: Request) -> EngineStatus:
        """Describe the deployed engine instance."""
        return EngineStatus(status="alive", **_get_service(request).pipeline.status())

    @app.get("/health")
    def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
