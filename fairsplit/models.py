"""
Data model for the settlement engine
Event snapshots in, settlement results out. Dataclasses only.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .utils.config import CONFIG, validate_coordinates


class VehicleType(str, Enum):
    OWNED = "OWNED"
    RENTAL = "RENTAL"
    CARSHARE = "CARSHARE"
    BIKE = "BIKE"


@dataclass(frozen=True)
class Location:
    """Point on the map (WGS84)"""
    lat: float
    lng: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lng)

    def validate(self) -> "Location":
        if not validate_coordinates(self.lat, self.lng):
            raise ValueError(f"Invalid coordinates: lat={self.lat}, lng={self.lng}")
        return self


@dataclass(frozen=True)
class Vehicle:
    id: str
    type: VehicleType
    capacity: int = 0
    fuel_efficiency: Optional[float] = None  # km/L


@dataclass(frozen=True)
class ResolvedLocation:
    """Location a member departs from, with where it came from"""
    member_id: str
    location: Optional[Location]
    source: Optional[str]  # "departure", "home" or None


@dataclass
class Member:
    id: str
    user_id: str
    nickname: Optional[str] = None
    departure_location: Optional[Location] = None
    vehicles: List[Vehicle] = field(default_factory=list)
    home_location: Optional[Location] = None
    user_name: Optional[str] = None
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.nickname or self.user_name or self.email or self.id

    def resolve_location(self) -> ResolvedLocation:
        """Explicit departure location overrides the home location"""
        if self.departure_location is not None:
            return ResolvedLocation(self.id, self.departure_location, "departure")
        if self.home_location is not None:
            return ResolvedLocation(self.id, self.home_location, "home")
        return ResolvedLocation(self.id, None, None)

    @property
    def is_bike_only(self) -> bool:
        return bool(self.vehicles) and all(v.type == VehicleType.BIKE for v in self.vehicles)

    @property
    def is_car_capable(self) -> bool:
        return not self.is_bike_only

    @property
    def is_owned_car_holder(self) -> bool:
        return any(v.type == VehicleType.OWNED for v in self.vehicles)


@dataclass
class Payment:
    id: str
    amount: int
    payer_id: str
    is_transport: bool = False
    description: str = ""
    beneficiaries: Tuple[str, ...] = ()

    def is_highway(self, keywords: Tuple[str, ...] = None) -> bool:
        """Transport payment for highway tolls, recognised by its description"""
        if not self.is_transport:
            return False
        keywords = keywords if keywords is not None else CONFIG.HIGHWAY_KEYWORDS
        description = (self.description or "").lower()
        return any(k.lower() in description for k in keywords)


@dataclass
class Event:
    gas_price_per_liter: float
    destination: Optional[Location] = None
    members: List[Member] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    id: Optional[str] = None

    def member_map(self) -> Dict[str, Member]:
        return {m.id: m for m in self.members}

    def resolve_member_id(self, member_or_user_id: str) -> Optional[str]:
        """Payer ids may reference either a member id or the member's user id"""
        for member in self.members:
            if member.id == member_or_user_id:
                return member.id
        for member in self.members:
            if member.user_id == member_or_user_id:
                return member.id
        return None

    @property
    def transport_payments(self) -> List[Payment]:
        return [p for p in self.payments if p.is_transport]


@dataclass
class ShapleyValue:
    member_id: str
    member_name: str
    value: int


@dataclass
class MemberBalance:
    member_id: str
    member_name: str
    user_id: str
    paid: int
    owed: int
    balance: int


@dataclass
class Transfer:
    from_member_id: str
    from_name: str
    to_member_id: str
    to_name: str
    amount: int


@dataclass
class SettlementResult:
    balances: List[MemberBalance]
    transfers: List[Transfer]
    shapley_values: List[ShapleyValue]
    total_amount: int
    transport_cost: int
    highway_cost: int = 0
    effective_fuel_efficiency: Optional[float] = None
    distance_failures: int = 0
    method: str = "shapley"

    @property
    def degraded(self) -> bool:
        """True when some road distances fell back to 0 km"""
        return self.distance_failures > 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['degraded'] = self.degraded
        return data


# === SNAPSHOT PARSING ===

def _get(data: Dict, *keys, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def location_from_dict(data: Optional[Dict]) -> Optional[Location]:
    if not data:
        return None
    lng = _get(data, 'lng', 'lon', 'longitude')
    lat = _get(data, 'lat', 'latitude')
    if lat is None or lng is None:
        raise ValueError(f"Location without lat/lng: {data}")
    return Location(float(lat), float(lng)).validate()


def vehicle_from_dict(data: Dict) -> Vehicle:
    try:
        vehicle_type = VehicleType(str(data['type']).upper())
    except (KeyError, ValueError):
        raise ValueError(f"Invalid vehicle type in {data}")
    fuel = _get(data, 'fuelEfficiency', 'fuel_efficiency')
    return Vehicle(
        id=str(_get(data, 'id', default='')),
        type=vehicle_type,
        capacity=int(_get(data, 'capacity', default=0)),
        fuel_efficiency=float(fuel) if fuel is not None else None
    )


def member_from_dict(data: Dict) -> Member:
    user = data.get('user') or {}
    if 'id' not in data:
        raise ValueError(f"Member without id: {data}")
    return Member(
        id=str(data['id']),
        user_id=str(_get(data, 'userId', 'user_id', default=user.get('id', data['id']))),
        nickname=data.get('nickname'),
        departure_location=location_from_dict(_get(data, 'departureLocation', 'departure_location')),
        vehicles=[vehicle_from_dict(v) for v in data.get('vehicles') or []],
        home_location=location_from_dict(
            _get(data, 'homeLocation', 'home_location', default=_get(user, 'homeLocation', 'home_location'))),
        user_name=_get(data, 'userName', 'user_name', default=user.get('name')),
        email=_get(data, 'email', default=user.get('email'))
    )


def payment_from_dict(data: Dict) -> Payment:
    beneficiaries = []
    for b in data.get('beneficiaries') or []:
        beneficiaries.append(str(_get(b, 'memberId', 'member_id')) if isinstance(b, dict) else str(b))

    is_transport = _get(data, 'isTransport', 'is_transport')
    if is_transport is None:
        is_transport = str(data.get('category', '')).upper() == 'TRANSPORT'

    try:
        return Payment(
            id=str(_get(data, 'id', default='')),
            amount=int(data['amount']),
            payer_id=str(_get(data, 'payerId', 'payer_id')),
            is_transport=bool(is_transport),
            description=data.get('description') or "",
            beneficiaries=tuple(beneficiaries)
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid payment {data}: {e}")


def event_from_dict(data: Dict) -> Event:
    """Build an Event from a JSON snapshot (camelCase or snake_case keys)

    Raises:
        ValueError: If the snapshot is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event snapshot must be an object")

    gas_price = _get(data, 'gasPricePerLiter', 'gas_price_per_liter')
    if gas_price is None:
        raise ValueError("Event snapshot without gasPricePerLiter")

    return Event(
        id=data.get('id'),
        gas_price_per_liter=float(gas_price),
        destination=location_from_dict(data.get('destination')),
        members=[member_from_dict(m) for m in data.get('members') or []],
        payments=[payment_from_dict(p) for p in data.get('payments') or []]
    )
