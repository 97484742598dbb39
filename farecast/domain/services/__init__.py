"""
Domain Services Package

Pure statistical building blocks: series grouping, Holt-Winters fitting,
anomaly/rarity scoring, drop-probability models and package assembly.
They hold no I/O; use cases feed them data read from the repositories.
"""

from .anomaly_scorer import rarity, robust_std, score
from .drop_probability import PackageDropModel, RecordDropModel, days_until
from .exponential_smoothing import SimpleSmoothingConfig, simple_exponential_smoothing
from .holt_winters import HoltWintersConfig, HoltWintersFitter, fit_series
from .package_assembler import (
    PackageAssembler,
    PackagePolicy,
    StayPolicy,
    deduplicate_packages,
)
from .series_builder import PriceSeries, SeriesBatch, build_series

__all__ = [
    "HoltWintersConfig",
    "HoltWintersFitter",
    "PackageAssembler",
    "PackageDropModel",
    "PackagePolicy",
    "PriceSeries",
    "RecordDropModel",
    "SeriesBatch",
    "SimpleSmoothingConfig",
    "StayPolicy",
    "build_series",
    "days_until",
    "deduplicate_packages",
    "fit_series",
    "rarity",
    "robust_std",
    "score",
    "simple_exponential_smoothing",
]
