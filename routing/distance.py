#Purpose: Great-circle distances for pricing and suggested rewards.
#Straight-line (haversine) km between two (lat, lon) points.
#Boat distance scales the straight line by a route multiplier because ships
#follow shipping lanes and coastlines, not the great circle.
#No HTTP here. Coordinates come from the geocoding client or stored rows.

import math
from typing import Optional, Tuple

#internal coordinate type :(lat,lon)
LatLon = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Unrounded great-circle distance in km."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def _valid(point: Optional[LatLon]) -> bool:
    if point is None or len(point) != 2:
        return False
    lat, lon = point
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        return False
    return not (math.isnan(lat) or math.isnan(lon))


def calculate_distance(a: Optional[LatLon], b: Optional[LatLon]) -> float:
    """
    Straight-line km rounded to 2 decimals. Missing or invalid input -> 0.
    """
    if not (_valid(a) and _valid(b)):
        return 0.0
    return round(haversine_km(a[0], a[1], b[0], b[1]), 2)


def boat_route_multiplier(straight_line_km: float) -> float:
    if straight_line_km > 10000:
        return 1.10  # trans-oceanic lanes are fairly direct
    if straight_line_km > 5000:
        return 1.20
    if straight_line_km > 2000:
        return 1.25  # coastal navigation
    if straight_line_km < 500:
        return 1.30
    return 1.15


def calculate_boat_shipping_distance(a: Optional[LatLon], b: Optional[LatLon]) -> float:
    straight = calculate_distance(a, b)
    if straight == 0:
        return 0.0
    return round(straight * boat_route_multiplier(straight), 2)
