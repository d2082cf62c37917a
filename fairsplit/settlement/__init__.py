"""
Settlement Module
Balances, transfers and the end-to-end settlement pipeline
"""

from .balances import aggregate_balances, aggregate_even_split
from .transfers import minimize_transfers, apply_transfers
from .engine import (
    ShapleyUnavailableError, NoFeasibleDriverError, MissingDestinationError, MissingLocationError,
    calculate_settlement,
    calculate_simple_settlement, settle_event
)

__all__ = [
    'aggregate_balances',
    'aggregate_even_split',
    'minimize_transfers',
    'apply_transfers',
    'ShapleyUnavailableError',
    'NoFeasibleDriverError',
    'MissingDestinationError',
    'MissingLocationError',
    'calculate_settlement',
    'calculate_simple_settlement',
    'settle_event'
]
