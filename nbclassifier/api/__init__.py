"""API module for the classification query server."""

from .app import app, create_app
from .dtos import EngineStatus, PredictedResultOutput, QueryInput

__all__ = [
    "app",
    "create_app",
    "EngineStatus",
    "PredictedResultOutput",
    "QueryInput",
]
