from nbclassifier.api.dtos import PredictedResultOutput, QueryInput
from nbclassifier.domain.entities import Query
from nbclassifier.pipelines.prediction import PredictionPipeline


class ClassificationService:
    """Service class that encapsulates the prediction pipeline."""

    def __init__(self, pipeline: PredictionPipeline) -> None:
        self._pipeline = pipeline

    @property
    def pipeline(self) -> PredictionPipeline:
        return self._pipeline

    def predict_single(self, input_data: QueryInput) -> PredictedResultOutput:
        """Answer a single query."""
        result = self._pipeline.predict(Query(features=tuple(input_data.features)))
        return PredictedResultOutput(label=result.label)

    def predict_batch(self, inputs: list[QueryInput]) -> list[PredictedResultOutput]:
        """Answer several queries in order."""
        queries = [Query(features=tuple(item.features)) for item in inputs]
        return [
            PredictedResultOutput(label=result.label)
            for result in self._pipeline.predict_batch(queries)
        ]
