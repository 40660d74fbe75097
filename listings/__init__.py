"""
Listings domain package.

Public API:
- Domain models: Trip, DeliveryRequest, Traveler, Dimensions
- Enums: TravelMethod, PreferredMethod, TripStatus, RequestStatus
"""
from .models import (
    DeliveryRequest,
    Dimensions,
    PreferredMethod,
    RequestStatus,
    Traveler,
    TravelMethod,
    Trip,
    TripStatus,
    to_date,
)

__all__ = [
    "Trip",
    "DeliveryRequest",
    "Traveler",
    "Dimensions",
    "TravelMethod",
    "PreferredMethod",
    "TripStatus",
    "RequestStatus",
    "to_date",
]
