"""
Settlement pipeline
Event snapshot -> distances -> characteristic function -> Shapley -> balances -> transfers
"""
import time
from typing import Dict, List, Optional

from ..game import (
    PricingConfig, build_characteristic_function, check_player_count,
    estimate_fuel_efficiency, shapley_values
)
from ..matrix import DistanceOracle, make_oracle
from ..models import Event, Location, SettlementResult, ShapleyValue
from ..paths import optimal_route, route_points
from ..utils import CONFIG, SettlementConfig, format_currency, format_distance, round_half_up, setup_logging
from .balances import aggregate_balances, aggregate_even_split
from .transfers import minimize_transfers

logger = setup_logging()


class ShapleyUnavailableError(Exception):
    """Transport cost cannot be allocated by Shapley value; callers fall back to an even split"""


class NoFeasibleDriverError(ShapleyUnavailableError):
    """Transport must be split but nobody in the event can bring a car"""


class MissingDestinationError(ShapleyUnavailableError):
    """Transport payments to split but the event has no destination"""


class MissingLocationError(ShapleyUnavailableError):
    """Transport payments to split but no car-capable member has a departure or home location"""


def _check_shapley_available(event: Event) -> None:
    if not event.transport_payments:
        return

    if event.destination is None:
        members = event.member_map()
        for payment in event.transport_payments:
            payer_id = event.resolve_member_id(payment.payer_id)
            if payer_id is not None and not members[payer_id].is_bike_only:
                raise MissingDestinationError(
                    "Event has transport payments but no destination; set one or settle with an even split")
        return

    if not any(m.is_owned_car_holder for m in event.members):
        raise NoFeasibleDriverError(
            "No member owns a car; register vehicle information or settle with an even split")


def calculate_settlement(event: Event,
                         provider=None,
                         config: SettlementConfig = None,
                         oracle: DistanceOracle = None) -> SettlementResult:
    """
    Settle an event, allocating transport cost by Shapley value.

    Args:
        event: Event snapshot
        provider: Road-distance provider (default from config)
        config: SettlementConfig (default CONFIG)
        oracle: Pre-built oracle; its cache is reset before use

    Returns:
        SettlementResult

    Raises:
        NoFeasibleDriverError: Destination and transport payments but no owned car
        MissingDestinationError: Car-capable transport payments but no destination
        MissingLocationError: Car transport payments but no player location
        ValueError: More car-capable members than config.MAX_PLAYERS
    """
    config = config or CONFIG
    start_time = time.time()

    # fresh cache for every computation
    if oracle is None:
        oracle = make_oracle(provider, config.MATRIX_MAX_WORKERS, config)
    else:
        oracle.reset()

    _check_shapley_available(event)

    # === PLAYERS ===
    bike_member_ids = {m.id for m in event.members if m.is_bike_only}
    players = [m.id for m in event.members if m.is_car_capable]
    check_player_count(len(players), config.MAX_PLAYERS)

    resolved = {m.id: m.resolve_location() for m in event.members}
    for r in resolved.values():
        logger.debug(f"Member {r.member_id} departs from {r.location.as_tuple() if r.location else None} "
                     f"({r.source or 'no location'})")
    locations: Dict[str, Optional[Location]] = {mid: r.location for mid, r in resolved.items()}
    owned_car_holders = {m.id for m in event.members if m.is_owned_car_holder}
    player_departures: List[Location] = [locations[p] for p in players if locations[p] is not None]

    # === TOTALS ===
    transport_cost = sum(p.amount for p in event.transport_payments)
    highway_cost = sum(p.amount for p in event.transport_payments if p.is_highway(config.HIGHWAY_KEYWORDS))
    total_amount = sum(p.amount for p in event.payments)

    # transport paid by bike-only members stays out of the game
    game_payments = [p for p in event.transport_payments
                     if event.resolve_member_id(p.payer_id) not in bike_member_ids]
    game_transport_cost = sum(p.amount for p in game_payments)
    game_highway_cost = sum(p.amount for p in game_payments if p.is_highway(config.HIGHWAY_KEYWORDS))

    logger.info(f"Settling event {event.id or ''}: {len(event.members)} members, {len(players)} players, "
                f"{len(bike_member_ids)} bike-only, transport={format_currency(transport_cost)}, "
                f"highway={format_currency(highway_cost)}")

    # === SHAPLEY ===
    effective_efficiency = config.DEFAULT_FUEL_EFFICIENCY
    shapley: Dict[str, float] = {}

    # no car transport spend means nothing to share
    if event.destination is not None and players and game_transport_cost > 0:
        if not player_departures:
            raise MissingLocationError(
                "Transport payments to split but no car-capable member has a departure or home location")

        oracle.prefetch(route_points(player_departures, event.destination))
        logger.info(f"Grand coalition round trip: "
                    f"{format_distance(optimal_route(player_departures, event.destination, oracle))}")

        effective_efficiency = estimate_fuel_efficiency(
            player_departures, event.destination, event.gas_price_per_liter,
            game_transport_cost, game_highway_cost, oracle, config.DEFAULT_FUEL_EFFICIENCY
        )

        pricing = PricingConfig(
            gas_price_per_liter=event.gas_price_per_liter,
            effective_fuel_efficiency=effective_efficiency,
            total_highway_cost=game_highway_cost,
            carshare_base_fee=config.CARSHARE_BASE_FEE,
            carshare_rate_per_km=config.CARSHARE_RATE_PER_KM
        )
        values = build_characteristic_function(
            players, locations, owned_car_holders, event.destination,
            pricing, oracle, config.MAX_PLAYERS
        )
        shapley = shapley_values(players, values)

    # === BALANCES & TRANSFERS ===
    balances = aggregate_balances(event, shapley, bike_member_ids)
    transfers = minimize_transfers(balances)

    members = event.member_map()
    shapley_rows = [
        ShapleyValue(member_id=mid, member_name=members[mid].display_name, value=round_half_up(value))
        for mid, value in shapley.items()
    ]

    if oracle.failures:
        logger.warning(f"{oracle.failures} distance lookups degraded to 0 km; result is approximate")

    logger.info(f"Settlement done in {time.time() - start_time:.2f}s: {len(transfers)} transfers, "
                f"distance stats={oracle.get_stats()}")

    return SettlementResult(
        balances=balances,
        transfers=transfers,
        shapley_values=shapley_rows,
        total_amount=total_amount,
        transport_cost=transport_cost,
        highway_cost=highway_cost,
        effective_fuel_efficiency=effective_efficiency,
        distance_failures=oracle.failures,
        method="shapley"
    )


def calculate_simple_settlement(event: Event) -> SettlementResult:
    """Even split of every payment among its beneficiaries, no Shapley allocation"""
    balances = aggregate_even_split(event)
    transfers = minimize_transfers(balances)

    return SettlementResult(
        balances=balances,
        transfers=transfers,
        shapley_values=[],
        total_amount=sum(p.amount for p in event.payments),
        transport_cost=sum(p.amount for p in event.transport_payments),
        highway_cost=sum(p.amount for p in event.transport_payments if p.is_highway()),
        effective_fuel_efficiency=None,
        distance_failures=0,
        method="even_split"
    )


def settle_event(event: Event, provider=None, config: SettlementConfig = None) -> SettlementResult:
    """Shapley settlement, falling back to an even split when it is unavailable"""
    try:
        return calculate_settlement(event, provider=provider, config=config)
    except ShapleyUnavailableError as e:
        logger.warning(f"Falling back to even split: {e}")
        return calculate_simple_settlement(event)
