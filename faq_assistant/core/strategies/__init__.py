"""Similarity threshold strategies."""
from .thresholds import FixedThreshold, SensitiveContentThreshold, ThresholdStrategy

__all__ = [
    "FixedThreshold",
    "SensitiveContentThreshold",
    "ThresholdStrategy",
]
