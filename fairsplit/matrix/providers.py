"""
Road-distance providers
Point-to-point driving distances (km) from OSRM, Google Routes or haversine
"""
import requests
from typing import Optional

from ..models import Location
from ..utils import CONFIG, SettlementConfig, setup_logging, calculate_haversine_distance, meters_to_km

logger = setup_logging()

GOOGLE_ROUTES_URL = "https://routes.googleapis.com/directions/v2:computeRoutes"


class DistanceProviderError(Exception):
    """A provider could not return a distance for a pair of points"""


class OSRMDistanceProvider:
    """OSRM /route client for point-to-point driving distances"""

    def __init__(self, server_url: str = None, profile: str = None, timeout: int = None):
        """Initialize OSRM provider

        Args:
            server_url: OSRM server URL
            profile: Routing profile (driving, walking, cycling)
            timeout: Request timeout in seconds
        """
        self.server_url = server_url or CONFIG.OSRM_SERVER
        self.profile = profile or CONFIG.OSRM_PROFILE
        self.timeout = timeout or CONFIG.OSRM_TIMEOUT

        # Ensure server URL format
        if not self.server_url.startswith('http'):
            self.server_url = f"http://{self.server_url}"

        self.base_url = self.server_url.rstrip('/')

    def distance_km(self, origin: Location, destination: Location) -> float:
        """Driving distance between two points

        Args:
            origin: Start location
            destination: End location

        Returns:
            Distance in km, one decimal

        Raises:
            DistanceProviderError: If OSRM fails or finds no route
        """
        # OSRM uses lon,lat format
        coordinates = f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinates}"
        params = {
            'overview': 'false',
            'steps': 'false'
        }

        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"OSRM route request failed: {e}")
            raise DistanceProviderError(f"Failed to get route from OSRM: {e}")

        if data.get('code') != 'Ok' or not data.get('routes'):
            raise DistanceProviderError(f"OSRM routing error: {data.get('message', data.get('code'))}")

        return meters_to_km(data['routes'][0]['distance'])


class GoogleRoutesDistanceProvider:
    """Google Routes API (computeRoutes) client"""

    def __init__(self, api_key: str = None, timeout: int = None):
        self.api_key = api_key if api_key is not None else CONFIG.GOOGLE_MAPS_API_KEY
        self.timeout = timeout or CONFIG.GOOGLE_TIMEOUT

    @staticmethod
    def _waypoint(location: Location) -> dict:
        return {
            'location': {
                'latLng': {
                    'latitude': location.lat,
                    'longitude': location.lng
                }
            }
        }

    def distance_km(self, origin: Location, destination: Location) -> float:
        if not self.api_key:
            raise DistanceProviderError("Google Maps API key is not configured")

        headers = {
            'Content-Type': 'application/json',
            'X-Goog-Api-Key': self.api_key,
            'X-Goog-FieldMask': 'routes.distanceMeters,routes.duration'
        }
        body = {
            'origin': self._waypoint(origin),
            'destination': self._waypoint(destination),
            'travelMode': 'DRIVE',
            'routingPreference': 'TRAFFIC_UNAWARE'
        }

        try:
            response = requests.post(GOOGLE_ROUTES_URL, json=body, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Routes API request failed: {e}")
            raise DistanceProviderError(f"Failed to get route from Google: {e}")

        if not response.ok:
            logger.error(f"Routes API error: {response.status_code} {response.text}")
            raise DistanceProviderError(f"Routes API error: {response.status_code}")

        try:
            routes = response.json().get('routes')
        except ValueError as e:
            raise DistanceProviderError(f"Invalid Routes API response: {e}")

        if not isinstance(routes, list) or len(routes) == 0:
            raise DistanceProviderError("No routes found")

        return meters_to_km(routes[0].get('distanceMeters') or 0)


class HaversineDistanceProvider:
    """Great-circle distance times a road detour factor; never fails"""

    def __init__(self, detour_factor: float = None):
        self.detour_factor = detour_factor or CONFIG.HAVERSINE_DETOUR_FACTOR

    def distance_km(self, origin: Location, destination: Location) -> float:
        meters = calculate_haversine_distance(origin.lat, origin.lng, destination.lat, destination.lng)
        return meters_to_km(meters * self.detour_factor)


def build_provider(config: Optional[SettlementConfig] = None):
    """Provider selected by config.DISTANCE_PROVIDER"""
    config = config or CONFIG
    name = config.DISTANCE_PROVIDER.lower()

    if name == 'osrm':
        return OSRMDistanceProvider(config.OSRM_SERVER, config.OSRM_PROFILE, config.OSRM_TIMEOUT)
    elif name == 'google':
        return GoogleRoutesDistanceProvider(config.GOOGLE_MAPS_API_KEY, config.GOOGLE_TIMEOUT)
    elif name == 'haversine':
        return HaversineDistanceProvider(config.HAVERSINE_DETOUR_FACTOR)

    raise ValueError(f"Unknown distance provider: {config.DISTANCE_PROVIDER}")
