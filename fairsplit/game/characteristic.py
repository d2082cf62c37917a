"""
Characteristic function of the transport-cost game
v(S) = what coalition S would pay to reach the destination together
"""
import itertools
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from ..models import Location
from ..paths import optimal_route
from ..utils import CONFIG, coalition_key

logger = logging.getLogger(__name__)


@dataclass
class PricingConfig:
    """Prices used to turn a route distance into money"""
    gas_price_per_liter: float
    effective_fuel_efficiency: float   # km/L
    total_highway_cost: float = 0.0
    carshare_base_fee: float = CONFIG.CARSHARE_BASE_FEE
    carshare_rate_per_km: float = CONFIG.CARSHARE_RATE_PER_KM

    def gasoline_cost(self, distance_km: float) -> float:
        return (distance_km / self.effective_fuel_efficiency) * self.gas_price_per_liter

    def carshare_cost(self, distance_km: float) -> float:
        return self.carshare_base_fee + distance_km * self.carshare_rate_per_km


def power_set(players: Sequence[str]) -> Iterator[Tuple[str, ...]]:
    """Every subset of players, smallest first (2^n of them)"""
    for size in range(len(players) + 1):
        for coalition in itertools.combinations(players, size):
            yield coalition


def check_player_count(n_players: int, max_players: int = None) -> None:
    max_players = max_players or CONFIG.MAX_PLAYERS
    if n_players > max_players:
        raise ValueError(f"Too many players ({n_players}), coalition enumeration "
                         f"is limited to {max_players}")


def coalition_cost(coalition: Sequence[str],
                   n_players: int,
                   locations: Mapping[str, Optional[Location]],
                   owned_car_holders: Set[str],
                   destination: Optional[Location],
                   pricing: PricingConfig,
                   oracle) -> float:
    """Cost v(S) of a single coalition

    Args:
        coalition: Member ids in the coalition
        n_players: Size of the grand coalition
        locations: Resolved departure location per member (None = unknown)
        owned_car_holders: Members owning an OWNED vehicle
        destination: Trip destination
        pricing: Prices
        oracle: DistanceOracle

    Returns:
        Monetary cost of the coalition
    """
    if not coalition:
        return 0.0

    departures = [locations[m] for m in coalition if locations.get(m) is not None]
    if not departures or destination is None:
        return 0.0

    distance = optimal_route(departures, destination, oracle)

    # highway tolls are shared, prorated by coalition size
    highway_share = pricing.total_highway_cost * len(coalition) / n_players

    if any(m in owned_car_holders for m in coalition):
        return pricing.gasoline_cost(distance) + highway_share

    # nobody brings a car: rent a shared one
    return pricing.carshare_cost(distance) + highway_share


def build_characteristic_function(players: List[str],
                                  locations: Mapping[str, Optional[Location]],
                                  owned_car_holders: Set[str],
                                  destination: Optional[Location],
                                  pricing: PricingConfig,
                                  oracle,
                                  max_players: int = None) -> Dict[str, float]:
    """
    Cost of every coalition of car-capable members.

    Args:
        players: Car-capable member ids (the grand coalition N)
        locations: Resolved departure location per member
        owned_car_holders: Members owning an OWNED vehicle
        destination: Trip destination (None -> every coalition costs 0)
        pricing: PricingConfig
        oracle: DistanceOracle
        max_players: Enumeration limit (default CONFIG.MAX_PLAYERS)

    Returns:
        Mapping coalition_key(S) -> v(S) for all 2^n subsets

    Raises:
        ValueError: If there are more players than max_players
    """
    check_player_count(len(players), max_players)

    values: Dict[str, float] = {}
    n_players = len(players)

    for coalition in power_set(players):
        values[coalition_key(coalition)] = coalition_cost(
            coalition, n_players, locations, owned_car_holders,
            destination, pricing, oracle
        )

    logger.info(f"Characteristic function built: {len(values)} coalitions for {n_players} players, "
                f"v(N)={values[coalition_key(players)]:.1f}")
    return values
