"""Multinomial naive Bayes model for the classification engine.

Wraps scikit-learn's MultinomialNB. The smoothing constant `lambda_`
maps to the additive (Laplace/Lidstone) `alpha` parameter.
"""

from dataclasses import dataclass, field
from pathlib import Path
import json
import pickle

import numpy as np
from sklearn.naive_bayes import MultinomialNB


@dataclass
class NaiveBayesModel:
    """Multinomial naive Bayes classifier.

    Features must be non-negative (counts or frequencies).
    """

    lambda_: float = 1.0

    _classifier: MultinomialNB | None = field(default=None, init=False)
    _n_features: int = field(default=0, init=False)
    _n_samples: int = field(default=0, init=False)
    _is_fitted: bool = field(default=False, init=False)

    @property
    def model_name(self) -> str:
        return f"NaiveBayes_lambda{self.lambda_:g}"

    @property
    def is_fitted(self) -> bool:
        return self._is_fitted

    @property
    def n_features(self) -> int:
        return self._n_features

    @property
    def n_samples(self) -> int:
        return self._n_samples

    @property
    def classes(self) -> list[float]:
        if not self._is_fitted:
            return []
        return [float(c) for c in self._classifier.classes_]

    def fit(self, X: np.ndarray, y: np.ndarray) -> "NaiveBayesModel":
        """Train the model.

        Args:
            X: Feature matrix (n_samples, n_features), non-negative
            y: Class labels (n_samples,)

        Returns:
            self for method chaining

        Raises:
            ValueError: If there are no samples, or features are negative
        """
        X = np.asarray(X, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)

        if X.ndim != 2 or X.shape[0] == 0:
            raise ValueError("Cannot train naive Bayes on empty data")
        if np.any(X < 0):
            raise ValueError("Naive Bayes requires non-negative feature values")

        self._classifier = MultinomialNB(alpha=self.lambda_, force_alpha=True)
        self._classifier.fit(X, y)

        self._n_features = X.shape[1]
        self._n_samples = X.shape[0]
        self._is_fitted = True
        return self

    def _check_input(self, X: np.ndarray) -> np.ndarray:
        if not self._is_fitted:
            raise RuntimeError("Model must be fitted before prediction")

        X = np.asarray(X, dtype=np.float64)
        if X.ndim == 1:
            X = X.reshape(1, -1)
        if X.shape[1] != self._n_features:
            raise ValueError(
                f"Expected {self._n_features} features, got {X.shape[1]}"
            )
        return X

    def predict(self, X: np.ndarray) -> np.ndarray:
        """Predict class labels for a feature matrix."""
        X = self._check_input(X)
        return self._classifier.predict(X).astype(np.float64)

    def predict_single(self, features: np.ndarray) -> float:
        """Predict the class label of one feature vector."""
        return float(self.predict(np.asarray(features).reshape(1, -1))[0])

    def save(self, path: Path) -> None:
        """Save the model to disk.

        Creates:
            - path/model.pkl: Pickled scikit-learn classifier
            - path/config.json: Smoothing constant and shape metadata
        """
        if not self._is_fitted:
            raise RuntimeError("Cannot save unfitted model")

        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)

        with open(path / "model.pkl", "wb") as f:
            pickle.dump(self._classifier, f)

        config_data = {
            "model_name": self.model_name,
            "lambda": self.lambda_,
            "n_features": self._n_features,
            "n_samples": self._n_samples,
            "classes": self.classes,
        }

        with open(path / "config.json", "w") as f:
            json.dump(config_data, f, indent=2)

    def load(self, path: Path) -> "NaiveBayesModel":
        """Load a saved model from disk."""
        path = Path(path)

        config_path = path / "config.json"
        if not config_path.exists():
            raise FileNotFoundError(f"Model not found at {path}")

        with open(config_path) as f:
            config_data = json.load(f)

        self.lambda_ = float(config_data["lambda"])
        self._n_features = int(config_data["n_features"])
        self._n_samples = int(config_data.get("n_samples", 0))

        with open(path / "model.pkl", "rb") as f:
            self._classifier = pickle.load(f)

        self._is_fitted = True
        return self
