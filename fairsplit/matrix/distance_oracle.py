"""
Distance Oracle
Cached, symmetric access to an external road-distance provider
"""
import concurrent.futures
import logging
import threading
from typing import List, Optional, Tuple

import numpy as np
import requests

from ..models import Location
from ..utils import CONFIG, DistanceCache
from .providers import DistanceProviderError, build_provider

logger = logging.getLogger(__name__)


class DistanceOracle:
    """Point-to-point distances for one settlement computation

    Provider failures degrade to 0 km. They are logged and counted in
    ``failures`` so the caller can flag the result as uncertain.
    """

    def __init__(self, provider, cache: DistanceCache = None, max_workers: int = None):
        """Initialize oracle

        Args:
            provider: Object exposing distance_km(origin, destination)
            cache: Per-run cache (a fresh one when omitted)
            max_workers: Concurrent provider calls during prefetch
        """
        self.provider = provider
        self.cache = cache if cache is not None else DistanceCache()
        self.max_workers = max_workers or CONFIG.MATRIX_MAX_WORKERS
        self.failures = 0
        self.provider_calls = 0
        self._lock = threading.Lock()

    def reset(self) -> None:
        """Forget every cached distance and failure count"""
        self.cache.clear()
        self.failures = 0
        self.provider_calls = 0

    def _count(self, attr: str) -> None:
        with self._lock:
            setattr(self, attr, getattr(self, attr) + 1)

    def _fetch(self, a: Location, b: Location) -> float:
        self._count('provider_calls')
        try:
            km = self.provider.distance_km(a, b)
        except (DistanceProviderError, requests.exceptions.RequestException) as e:
            logger.warning(f"Distance {a.as_tuple()} -> {b.as_tuple()} unavailable, using 0 km: {e}")
            self._count('failures')
            return 0.0

        if km is None:
            logger.warning(f"Distance {a.as_tuple()} -> {b.as_tuple()} unavailable, using 0 km")
            self._count('failures')
            return 0.0
        return float(km)

    def distance(self, a: Location, b: Location) -> float:
        """Road distance in km, symmetric

        Args:
            a: First location
            b: Second location

        Returns:
            Distance in km (0 when the provider failed)
        """
        if a == b:
            return 0.0

        cached = self.cache.get(a.as_tuple(), b.as_tuple())
        if cached is not None:
            return cached

        km = self._fetch(a, b)
        self.cache.set(a.as_tuple(), b.as_tuple(), km)
        return km

    def prefetch(self, locations: List[Location]) -> np.ndarray:
        """Populate the cache with every unordered pair of locations

        Provider calls run in a bounded thread pool so the coalition
        enumeration afterwards only hits the cache.

        Args:
            locations: Points to cover (duplicates are fine)

        Returns:
            Symmetric NxN distance matrix (km) in the order given
        """
        unique: List[Location] = list(dict.fromkeys(locations))
        pending: List[Tuple[Location, Location]] = []
        for i in range(len(unique)):
            for j in range(i + 1, len(unique)):
                pair = (unique[i].as_tuple(), unique[j].as_tuple())
                if pair not in self.cache:
                    pending.append((unique[i], unique[j]))

        if pending:
            logger.info(f"Prefetching {len(pending)} distances for {len(unique)} locations "
                        f"({self.max_workers} workers)")

            with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {executor.submit(self._fetch, a, b): (a, b) for a, b in pending}

                for future in concurrent.futures.as_completed(futures):
                    a, b = futures[future]
                    self.cache.set(a.as_tuple(), b.as_tuple(), future.result())

        return self.distance_matrix(locations)

    def distance_matrix(self, locations: List[Location]) -> np.ndarray:
        n = len(locations)
        matrix = np.zeros((n, n))

        for i in range(n):
            for j in range(i + 1, n):
                km = self.distance(locations[i], locations[j])
                matrix[i][j] = km
                matrix[j][i] = km

        return matrix

    def get_stats(self) -> dict:
        stats = self.cache.get_cache_stats()
        stats['provider_calls'] = self.provider_calls
        stats['failures'] = self.failures
        return stats


def make_oracle(provider=None, max_workers: Optional[int] = None, config=None) -> DistanceOracle:
    """Oracle with a brand-new cache, one per settlement computation"""
    if provider is None:
        provider = build_provider(config)
    return DistanceOracle(provider, DistanceCache(), max_workers)
