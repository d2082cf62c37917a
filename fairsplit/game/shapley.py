"""
Shapley values of a cooperative cost game
"""
import itertools
import logging
import math
from typing import Callable, Dict, FrozenSet, Mapping, Sequence, Union

from ..utils import coalition_key

logger = logging.getLogger(__name__)

ValueFunction = Union[Mapping[str, float], Callable[[FrozenSet[str]], float]]


def _as_callable(value_fn: ValueFunction) -> Callable[[FrozenSet[str]], float]:
    if callable(value_fn):
        return value_fn
    # missing coalitions count as 0
    return lambda coalition: value_fn.get(coalition_key(coalition), 0.0)


def shapley_values(players: Sequence[str], value_fn: ValueFunction) -> Dict[str, float]:
    """
    Exact Shapley value of every player.

    phi_i = sum over S subset of N\\{i} of |S|! (n-|S|-1)! / n! * (v(S u {i}) - v(S))

    Args:
        players: Player ids (the grand coalition)
        value_fn: Mapping coalition_key -> v(S), or callable on a frozenset

    Returns:
        Mapping player id -> Shapley value
    """
    players = list(players)
    n = len(players)
    if n == 0:
        return {}

    v = _as_callable(value_fn)
    n_factorial = math.factorial(n)
    weights = [math.factorial(s) * math.factorial(n - s - 1) / n_factorial for s in range(n)]

    result: Dict[str, float] = {}
    for player in players:
        others = [p for p in players if p != player]
        phi = 0.0
        for size in range(n):
            for subset in itertools.combinations(others, size):
                coalition = frozenset(subset)
                phi += weights[size] * (v(coalition | {player}) - v(coalition))
        result[player] = phi

    logger.debug(f"Shapley values: {result}")
    return result


def shapley_values_by_permutation(players: Sequence[str], value_fn: ValueFunction) -> Dict[str, float]:
    """Average marginal contribution over all n! join orders (small games only)"""
    players = list(players)
    if not players:
        return {}

    v = _as_callable(value_fn)
    totals = {p: 0.0 for p in players}
    n_orders = 0

    for order in itertools.permutations(players):
        n_orders += 1
        preceding: FrozenSet[str] = frozenset()
        for player in order:
            joined = preceding | {player}
            totals[player] += v(joined) - v(preceding)
            preceding = joined

    return {p: total / n_orders for p, total in totals.items()}
