"""Naive Bayes classification engine built on the DASE stage template."""

__version__ = "0.1.0"
