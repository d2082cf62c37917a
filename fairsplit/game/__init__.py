"""
Cooperative transport-cost game: characteristic function, fuel efficiency, Shapley values
"""

from .characteristic import (
    PricingConfig, power_set, coalition_cost,
    build_characteristic_function, check_player_count
)
from .fuel import estimate_fuel_efficiency
from .shapley import shapley_values, shapley_values_by_permutation

__all__ = [
    'PricingConfig',
    'power_set',
    'coalition_cost',
    'build_characteristic_function',
    'check_player_count',
    'estimate_fuel_efficiency',
    'shapley_values',
    'shapley_values_by_permutation'
]
