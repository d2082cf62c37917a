"""
Round-trip route estimation
Nearest-neighbour heuristic over departure points and a single destination
"""
import logging
from typing import Dict, List

from ..models import Location

logger = logging.getLogger(__name__)


def route_points(departures: List[Location], destination: Location) -> List[Location]:
    """All points of a round trip: departures first, destination last"""
    return list(departures) + [destination]


def nearest_neighbor_tour(departures: List[Location], destination: Location, oracle) -> Dict:
    """
    Approximate shortest round trip visiting every departure and the destination.

    Starts at the first departure, repeatedly moves to the closest unvisited
    point (ties go to the lowest index), then returns to the first departure.
    Not guaranteed optimal.

    Args:
        departures: Departure locations, at least one
        destination: Trip destination
        oracle: DistanceOracle for pairwise distances

    Returns:
        {
            "order_idx": [...],      # visit order over route_points(), starts and ends at 0
            "legs_km": [...],        # distance of each hop
            "total_km": float
        }
    """
    if not departures:
        return {"order_idx": [], "legs_km": [], "total_km": 0.0}

    points = route_points(departures, destination)
    visited = {0}
    order = [0]
    legs: List[float] = []
    current = 0

    while len(visited) < len(points):
        nearest_idx = -1
        nearest_dist = float('inf')

        for i in range(len(points)):
            if i in visited:
                continue
            dist = oracle.distance(points[current], points[i])
            if dist < nearest_dist:
                nearest_dist = dist
                nearest_idx = i

        if nearest_idx == -1:
            break

        legs.append(nearest_dist)
        visited.add(nearest_idx)
        order.append(nearest_idx)
        current = nearest_idx

    # close the loop
    legs.append(oracle.distance(points[current], points[0]))
    order.append(0)

    return {"order_idx": order, "legs_km": legs, "total_km": sum(legs)}


def optimal_route(departures: List[Location], destination: Location, oracle) -> float:
    """
    Total round-trip distance (km) for a group leaving from ``departures``.

    A single departure is an out-and-back trip: 2 x distance(departure, destination).
    """
    if not departures:
        return 0.0

    if len(departures) == 1:
        return oracle.distance(departures[0], destination) * 2

    tour = nearest_neighbor_tour(departures, destination, oracle)
    logger.debug(f"Route over {len(departures)} departures: order={tour['order_idx']}, "
                 f"total={tour['total_km']:.1f} km")
    return tour['total_km']
