"""
Cache system for the settlement engine
Per-run distance cache keyed by unordered coordinate pairs
"""
import threading
from typing import Dict, Iterable, Optional, Tuple

Coord = Tuple[float, float]


def pair_key(a: Coord, b: Coord) -> str:
    """
    Directed cache key for a pair of (lat, lng) coordinates.

    Args:
        a: Origin (lat, lng)
        b: Destination (lat, lng)

    Returns:
        Key string "lat1,lng1-lat2,lng2"
    """
    return f"{a[0]},{a[1]}-{b[0]},{b[1]}"


def coalition_key(member_ids: Iterable[str]) -> str:
    """
    Memoization key of a coalition: sorted member ids joined by commas.
    The empty coalition maps to "".
    """
    return ",".join(sorted(member_ids))


class DistanceCache:
    """Symmetric in-memory cache of pairwise road distances (km)

    One instance lives for exactly one settlement computation. Lookups
    check both orderings of the pair, writes store a single ordering.
    """

    def __init__(self):
        self._distances: Dict[str, float] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, a: Coord, b: Coord) -> Optional[float]:
        """Cached distance for the pair in either direction, or None"""
        with self._lock:
            cached = self._distances.get(pair_key(a, b))
            if cached is None:
                cached = self._distances.get(pair_key(b, a))
            if cached is None:
                self.misses += 1
            else:
                self.hits += 1
            return cached

    def set(self, a: Coord, b: Coord, km: float) -> None:
        with self._lock:
            self._distances[pair_key(a, b)] = km

    def __contains__(self, pair: Tuple[Coord, Coord]) -> bool:
        a, b = pair
        with self._lock:
            return pair_key(a, b) in self._distances or pair_key(b, a) in self._distances

    def __len__(self) -> int:
        return len(self._distances)

    def clear(self) -> None:
        """Drop every entry and reset statistics"""
        with self._lock:
            self._distances.clear()
            self.hits = 0
            self.misses = 0

    def get_cache_stats(self) -> Dict[str, int]:
        """Get cache statistics

        Returns:
            Dictionary with entry, hit and miss counts
        """
        return {
            'entries': len(self._distances),
            'hits': self.hits,
            'misses': self.misses
        }
