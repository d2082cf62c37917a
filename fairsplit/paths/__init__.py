"""
Paths Module for the settlement engine
Round-trip distance estimation
"""

from .route_optimizer import optimal_route, nearest_neighbor_tour, route_points

__all__ = [
    'optimal_route',
    'nearest_neighbor_tour',
    'route_points'
]
