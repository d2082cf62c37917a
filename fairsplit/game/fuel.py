"""
Effective fuel efficiency back-solved from recorded gas spend
"""
import logging
from typing import List, Optional

from ..models import Location
from ..paths import optimal_route
from ..utils import CONFIG

logger = logging.getLogger(__name__)


def estimate_fuel_efficiency(departures: List[Location],
                             destination: Optional[Location],
                             gas_price_per_liter: float,
                             total_transport_cost: float,
                             total_highway_cost: float,
                             oracle,
                             default: float = None) -> float:
    """
    Blended km/L so that the grand coalition's gasoline cost matches what was paid.

    gas cost = (distance / efficiency) * price  =>  efficiency = distance * price / gas cost

    Args:
        departures: Departure locations of all car-capable members
        destination: Trip destination
        gas_price_per_liter: Price per liter
        total_transport_cost: Sum of transport payments
        total_highway_cost: Highway part of the transport payments
        oracle: DistanceOracle
        default: Fallback efficiency (CONFIG.DEFAULT_FUEL_EFFICIENCY)

    Returns:
        Effective fuel efficiency in km/L
    """
    default = default if default is not None else CONFIG.DEFAULT_FUEL_EFFICIENCY

    if destination is None or not departures:
        return default

    distance = optimal_route(departures, destination, oracle)
    gas_only_cost = total_transport_cost - total_highway_cost

    if distance > 0 and gas_only_cost > 0:
        efficiency = distance * gas_price_per_liter / gas_only_cost
        logger.info(f"Effective fuel efficiency {efficiency:.2f} km/L "
                    f"({distance:.1f} km, gas spend {gas_only_cost:.0f})")
        return efficiency

    logger.info(f"Using default fuel efficiency {default} km/L "
                f"(distance={distance:.1f} km, gas spend={gas_only_cost:.0f})")
    return default
