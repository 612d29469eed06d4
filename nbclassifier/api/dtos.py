"""Data Transfer Objects for the query API."""

from pydantic import BaseModel, Field


class QueryInput(BaseModel):
    """Single query: ordered numeric feature values."""

    features: list[float] = Field(..., min_length=1, description="Feature values")


class PredictedResultOutput(BaseModel):
    """Predicted class label."""

    label: float


class EngineStatus(BaseModel):
    """Status of the deployed engine instance."""

    status: str
    engine_instance_id: str | None
    engine_variant: str | None
    trained_at: str | None
    algorithms: list[str]
