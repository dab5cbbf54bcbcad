"""Aggregation and scaling-optimization engine for Swiss public finance data."""

__version__ = "0.1.0"
