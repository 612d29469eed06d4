"""Algorithm stage: naive Bayes training and prediction."""

from dataclasses import dataclass

import numpy as np
from loguru import logger

from nbclassifier.domain.entities import AlgorithmParams, PredictedResult, PreparedData, Query
from nbclassifier.models.naive_bayes import NaiveBayesModel


@dataclass
class NaiveBayesAlgorithm:
    """Trains a multinomial naive Bayes model on the prepared points."""

    params: AlgorithmParams

    def train(self, data: PreparedData) -> NaiveBayesModel:
        if len(data) == 0:
            raise ValueError(
                "PreparedData cannot be empty. Check that the app has "
                "user entities with plan, attr0, attr1 and attr2 set."
            )

        X = np.array([p.features for p in data.labeled_points], dtype=np.float64)
        y = np.array([p.label for p in data.labeled_points], dtype=np.float64)

        model = NaiveBayesModel(lambda_=self.params.lambda_).fit(X, y)
        logger.info(
            "Trained {} on {} samples, classes={}",
            model.model_name, model.n_samples, model.classes,
        )
        return model

    def predict(self, model: NaiveBayesModel, query: Query) -> PredictedResult:
        label = model.predict_single(np.array(query.features, dtype=np.float64))
        return PredictedResult(label=label)

    def batch_predict(
        self, model: NaiveBayesModel, queries: list[Query]
    ) -> list[PredictedResult]:
        if not queries:
            return []
        for query in queries:
            if len(query.features) != model.n_features:
                raise ValueError(
                    f"Expected {model.n_features} features, got {len(query.features)}"
                )
        X =np.array([q.features for q in queries], dtype=np.float64)
        return [PredictedResult(label=float(label)) for label in model.predict(X)]
