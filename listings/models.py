"""
Purpose: Domain models for the Listings capability (trips + requests).
What it does:
- Defines core data structures:
- Trip (traveler journey with spare capacity: plane date or boat ETA window)
- DeliveryRequest (item needing delivery: route, deadline window, size, value)
- Traveler (trust attributes used by match scoring)
- Dimensions (cm, with the volume/linear helpers the rules need)

Defines enums/constants:
- TravelMethod = PLANE | BOAT
- PreferredMethod = PLANE | BOAT | ANY
- TripStatus / RequestStatus

Rule: No scoring, no pricing. Models only.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Optional, Union


class TravelMethod(str, Enum):
    PLANE = "plane"
    BOAT = "boat"


class PreferredMethod(str, Enum):
    PLANE = "plane"
    BOAT = "boat"
    ANY = "any"


class TripStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RequestStatus(str, Enum):
    OPEN = "open"
    MATCHED = "matched"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


DateLike = Union[date, datetime, str]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_date(value: Optional[DateLike]) -> Optional[date]:
    """
    Normalise an ISO string / datetime / date into a calendar date.
    Day arithmetic in the scoring rules works on whole days.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    if "T" in text or " " in text:
        return datetime.fromisoformat(text).date()
    return date.fromisoformat(text)


@dataclass(frozen=True)
class Dimensions:
    """
    Box dimensions in centimetres.
    """
    length: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def volume_cm3(self) -> float:
        return self.length * self.width * self.height

    @property
    def volume_m3(self) -> float:
        return self.volume_cm3 / 1_000_000

    @property
    def linear_cm(self) -> float:
        return self.length + self.width + self.height

    @property
    def max_side(self) -> float:
        return max(self.length, self.width, self.height)

    def fits_within(self, other: Dimensions) -> bool:
        # side by side, no rotation
        return (
            self.length <= other.length
            and self.width <= other.width
            and self.height <= other.height
        )

    @classmethod
    def parse(cls, value: Any) -> Optional[Dimensions]:
        """
        Accepts a Dimensions, a dict, a JSON string (how rows store it) or None.
        """
        if value is None or value == "":
            return None
        if isinstance(value, Dimensions):
            return value
        if isinstance(value, str):
            value = json.loads(value)
        if not isinstance(value, dict):
            raise ValueError(f"Cannot parse dimensions from {value!r}")
        return cls(
            length=float(value.get("length") or 0),
            width=float(value.get("width") or 0),
            height=float(value.get("height") or 0),
        )


@dataclass(frozen=True)
class Traveler:
    """
    Trust-relevant snapshot of the user who posted a trip.
    """
    id: str
    id_verified: bool = False
    verified_sailor: bool = False
    average_rating: Optional[float] = None  # 1-5
    completed_deliveries: int = 0
    subscribed: bool = False
    reliability_score: float = 0.0  # 0-100


@dataclass
class Trip:
    """
    A traveler's posted journey.
    Plane trips carry a single departure_date, boat trips an ETA window.
    """
    id: str
    user_id: str
    type: TravelMethod
    from_location: str
    to_location: str

    departure_date: Optional[date] = None
    eta_window_start: Optional[date] = None
    eta_window_end: Optional[date] = None

    # plane capacity
    spare_kg: Optional[float] = None
    spare_volume_liters: Optional[float] = None
    max_dimensions: Optional[Dimensions] = None

    # boat capacity
    max_tonnage: Optional[float] = None
    spare_cubic_meters: Optional[float] = None

    status: TripStatus = TripStatus.ACTIVE
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.type = TravelMethod(self.type)
        self.status = TripStatus(self.status)
        self.departure_date = to_date(self.departure_date)
        self.eta_window_start = to_date(self.eta_window_start)
        self.eta_window_end = to_date(self.eta_window_end)
        self.max_dimensions = Dimensions.parse(self.max_dimensions)


@dataclass
class DeliveryRequest:
    """
    A requester's posted item.
    deadline_earliest falls back to deadline_latest when not given.
    """
    id: str
    user_id: str
    from_location: str
    to_location: str
    deadline_latest: date
    weight_kg: float

    title: str = ""
    deadline_earliest: Optional[date] = None
    dimensions: Dimensions = field(default_factory=Dimensions)
    value_usd: float = 0.0
    max_reward: float = 0.0
    preferred_method: PreferredMethod = PreferredMethod.ANY
    category: Optional[str] = None
    restricted_items: bool = False
    # ISO2, None when unknown
    origin_country: Optional[str] = None
    destination_country: Optional[str] = None

    status: RequestStatus = RequestStatus.OPEN
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.preferred_method = PreferredMethod(self.preferred_method or PreferredMethod.ANY)
        self.status = RequestStatus(self.status)
        self.deadline_latest = to_date(self.deadline_latest)
        self.deadline_earliest = to_date(self.deadline_earliest) or self.deadline_latest
        self.dimensions = Dimensions.parse(self.dimensions) or Dimensions()
        self.origin_country = (self.origin_country or "").upper() or None
        self.destination_country = (self.destination_country or "").upper() or None
