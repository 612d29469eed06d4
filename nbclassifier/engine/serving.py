"""Serving stage."""

from nbclassifier.domain.entities import PredictedResult, Query


class Serving:
    """Returns the prediction of the first algorithm."""

    def serve(self, query: Query, predicted_results: list[PredictedResult]) -> PredictedResult:
        if not predicted_results:
            raise ValueError("No predictions to serve")
        return predicted_results[0]
