"""
Settlement Utils Package
Configuration, logging and caching helpers
"""

from .cache import DistanceCache, pair_key, coalition_key
from .config import (
    SettlementConfig, CONFIG, setup_logging,
    validate_coordinates, calculate_haversine_distance,
    round_half_up, meters_to_km, format_currency, format_distance
)

__all__ = [
    'DistanceCache',
    'pair_key',
    'coalition_key',
    'SettlementConfig',
    'CONFIG',
    'setup_logging',
    'validate_coordinates',
    'calculate_haversine_distance',
    'round_half_up',
    'meters_to_km',
    'format_currency',
    'format_distance'
]
