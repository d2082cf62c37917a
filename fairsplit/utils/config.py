"""
Configuration and utility functions for the settlement engine
"""
import os
import math
import logging
from typing import Tuple
from dataclasses import dataclass, field


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


# Settlement Configuration
@dataclass
class SettlementConfig:
    """Settlement engine configuration"""

    # Distance provider: "osrm", "google" or "haversine"
    DISTANCE_PROVIDER: str = field(
        default_factory=lambda: os.getenv("FAIRSPLIT_DISTANCE_PROVIDER", "osrm"))

    # OSRM Configuration
    OSRM_SERVER: str = field(default_factory=lambda: os.getenv("OSRM_URL", "http://localhost:5000"))
    OSRM_PROFILE: str = "driving"
    OSRM_TIMEOUT: int = 30

    # Google Routes Configuration
    GOOGLE_MAPS_API_KEY: str = field(default_factory=lambda: os.getenv("GOOGLE_MAPS_API_KEY", ""))
    GOOGLE_TIMEOUT: int = 30

    # Haversine fallback: road distance ~ great circle * factor
    HAVERSINE_DETOUR_FACTOR: float = 1.0

    # Pairwise prefetch
    MATRIX_MAX_WORKERS: int = field(default_factory=lambda: _env_int("FAIRSPLIT_MAX_WORKERS", 4))

    # Coalition enumeration is 2^n, keep n small
    MAX_PLAYERS: int = 20

    # Pricing
    DEFAULT_FUEL_EFFICIENCY: float = field(
        default_factory=lambda: _env_float("FAIRSPLIT_DEFAULT_FUEL_EFFICIENCY", 10.0))  # km/L
    CARSHARE_BASE_FEE: float = 12000   # 36h pack
    CARSHARE_RATE_PER_KM: float = 16

    # Transport payments whose description contains one of these are highway tolls
    HIGHWAY_KEYWORDS: Tuple[str, ...] = ("高速", "highway", "toll")

    # Logging
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("FAIRSPLIT_LOG_LEVEL", "INFO"))

# Global configuration instance
CONFIG = SettlementConfig()

def setup_logging(level: str = None) -> logging.Logger:
    """Setup logging for the settlement engine

    Args:
        level: Logging level (defaults to CONFIG.LOG_LEVEL)

    Returns:
        Configured logger
    """
    level = level or CONFIG.LOG_LEVEL
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logger = logging.getLogger('fairsplit')
    return logger

def validate_coordinates(lat: float, lng: float) -> bool:
    """Validate a single coordinate pair

    Args:
        lat: Latitude
        lng: Longitude

    Returns:
        True if coordinates are valid
    """
    if lat is None or lng is None:
        return False
    if isinstance(lat, float) and math.isnan(lat):
        return False
    if isinstance(lng, float) and math.isnan(lng):
        return False
    return -90 <= lat <= 90 and -180 <= lng <= 180

def calculate_haversine_distance(lat1: float, lon1: float,
                                lat2: float, lon2: float) -> float:
    """Calculate haversine distance between two points

    Args:
        lat1, lon1: First point coordinates
        lat2, lon2: Second point coordinates

    Returns:
        Distance in meters
    """
    from math import radians, cos, sin, asin, sqrt

    # Convert to radians
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])

    # Haversine formula
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat/2)**2 + cos(lat1) * cos(lat2) * sin(dlon/2)**2
    c = 2 * asin(sqrt(a))

    # Earth radius in meters
    r = 6371000

    return c * r

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf (-0.5 -> 0, 2.5 -> 3)"""
    return int(math.floor(value + 0.5))

def meters_to_km(meters: float) -> float:
    """Meters to kilometers, one decimal"""
    return round_half_up(meters / 100) / 10

def format_currency(amount: float) -> str:
    """Format an amount of currency units, e.g. 12345 -> '¥12,345'"""
    return f"¥{round_half_up(amount):,}"

def format_distance(km: float) -> str:
    """Format distance in human-readable format

    Args:
        km: Distance in kilometers

    Returns:
        Formatted distance string
    """
    if km < 1:
        return f"{km * 1000:.0f}m"
    else:
        return f"{km:.1f}km"
