"""
fairsplit
Fair-cost settlement of shared event expenses with Shapley-value transport allocation
"""

# Module version
__version__ = "1.0.0"

# Main imports
from .models import (
    Location, Vehicle, VehicleType, Member, Payment, Event,
    MemberBalance, Transfer, ShapleyValue, SettlementResult, event_from_dict
)
from .matrix import DistanceOracle, DistanceProviderError, build_provider, make_oracle
from .settlement import (
    ShapleyUnavailableError, NoFeasibleDriverError, MissingDestinationError, MissingLocationError,
    calculate_settlement, calculate_simple_settlement, settle_event
)
from .export import (
    export_balances_csv,
    export_transfers_csv,
    export_result_json,
    export_summary_report
)
from .utils import CONFIG, SettlementConfig

# Alias
settle = settle_event

from typing import Dict, Optional


class SettlementSystem:
    """
    Settlement engine bound to one distance provider and configuration.
    """

    def __init__(self, provider=None, config: Optional[SettlementConfig] = None):
        """
        Args:
            provider: Road-distance provider (default: built from config)
            config: SettlementConfig (default: CONFIG)
        """
        self.config = config or CONFIG
        self.provider = provider or build_provider(self.config)

    def settle(self, snapshot: Dict, fallback: bool = True) -> SettlementResult:
        """
        Settle an event snapshot.

        Args:
            snapshot: Event snapshot as a dict (JSON body)
            fallback: Fall back to an even split when Shapley allocation is unavailable

        Returns:
            SettlementResult

        Raises:
            ValueError: Malformed snapshot or too many players
            ShapleyUnavailableError: Only when fallback is False
        """
        event = event_from_dict(snapshot)
        if fallback:
            return settle_event(event, provider=self.provider, config=self.config)
        return calculate_settlement(event, provider=self.provider, config=self.config)

    def get_system_status(self) -> Dict:
        """Configured provider and limits"""
        return {
            "version": __version__,
            "distance_provider": type(self.provider).__name__,
            "max_players": self.config.MAX_PLAYERS,
            "max_workers": self.config.MATRIX_MAX_WORKERS,
            "default_fuel_efficiency": self.config.DEFAULT_FUEL_EFFICIENCY
        }


__all__ = [
    '__version__',
    'Location',
    'Vehicle',
    'VehicleType',
    'Member',
    'Payment',
    'Event',
    'MemberBalance',
    'Transfer',
    'ShapleyValue',
    'SettlementResult',
    'event_from_dict',
    'DistanceOracle',
    'DistanceProviderError',
    'build_provider',
    'make_oracle',
    'ShapleyUnavailableError',
    'NoFeasibleDriverError',
    'MissingDestinationError',
    'MissingLocationError',
    'calculate_settlement',
    'calculate_simple_settlement',
    'settle_event',
    'settle',
    'export_balances_csv',
    'export_transfers_csv',
    'export_result_json',
    'export_summary_report',
    'CONFIG',
    'SettlementConfig',
    'SettlementSystem'
]
