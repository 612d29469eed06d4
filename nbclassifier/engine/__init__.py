"""DASE engine stages and wiring."""

from .algorithm import NaiveBayesAlgorithm
from .data_source import DataSource
from .engine import ClassificationEngine, Engine, load_engine_factory
from .preparator import Preparator
from .serving import Serving

__all__ = [
    "DataSource",
    "Preparator",
    "NaiveBayesAlgorithm",
    "Serving",
    "Engine",
    "ClassificationEngine",
    "load_engine_factory",
]
