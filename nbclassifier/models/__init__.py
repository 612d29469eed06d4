from .naive_bayes import NaiveBayesModel

__all__ = ["NaiveBayesModel"]
