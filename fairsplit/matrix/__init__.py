"""
Matrix Module for the settlement engine
Road distances with provider integration and per-run caching
"""

from .providers import (
    DistanceProviderError, OSRMDistanceProvider,
    GoogleRoutesDistanceProvider, HaversineDistanceProvider, build_provider
)
from .distance_oracle import DistanceOracle, make_oracle

__all__ = [
    'DistanceProviderError',
    'OSRMDistanceProvider',
    'GoogleRoutesDistanceProvider',
    'HaversineDistanceProvider',
    'build_provider',
    'DistanceOracle',
    'make_oracle'
]
