"""Data preparator stage."""

from nbclassifier.domain.entities import PreparedData, TrainingData


class Preparator:
    """Passes training data through unchanged."""

    def prepare(self, training_data: TrainingData) -> PreparedData:
        return PreparedData(labeled_points=list(training_data.labeled_points))
