#Marks routing as a package.
#Re-exports the public routing APIs (segments, saved-route matching, distances,
#Geoapify client) so other modules import from routing without knowing file names.
#No business logic.

from .distance import calculate_boat_shipping_distance, calculate_distance
from .geocoding_client import GeocodingClient, GeocodingError, Place
from .route_matching import SavedRoute, find_route_matches, new_route_notifications
from .segments import (
    RouteDestination,
    calculate_route_distance,
    find_matching_segments,
    generate_route_segments,
    validate_route_destinations,
)

__all__ = [
    "calculate_distance",
    "calculate_boat_shipping_distance",
    "GeocodingClient",
    "GeocodingError",
    "Place",
    "SavedRoute",
    "find_route_matches",
    "new_route_notifications",
    "RouteDestination",
    "generate_route_segments",
    "find_matching_segments",
    "calculate_route_distance",
    "validate_route_destinations",
]
