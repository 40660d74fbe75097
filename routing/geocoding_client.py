#Purpose: The Geoapify geocoding "adapter/client".
#Sole responsibility: talk to Geoapify via HTTP and return normalized places.
#Encapsulates Geoapify-specific details:
#URL construction (/geocode/search, /geocode/reverse)
#GeoJSON coordinate order (lon,lat) -> internal (lat,lon)
#timeouts and error handling
#It should not contain matching or pricing rules.


from dotenv import load_dotenv
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import requests

from routing.distance import LatLon, calculate_boat_shipping_distance, calculate_distance

# Read Geoapify settings from environment
# Example in .env:
# GEOAPIFY_API_KEY=your-key
# GEOAPIFY_BASE_URL=https://api.geoapify.com/v1
load_dotenv()
GEOAPIFY_API_KEY = os.getenv("GEOAPIFY_API_KEY")
GEOAPIFY_BASE_URL = os.getenv("GEOAPIFY_BASE_URL", "https://api.geoapify.com/v1")


class GeocodingError(Exception):
    """Custom exception for geocoding client errors."""
    pass


@dataclass(frozen=True)
class Place:
    name: str
    lat: float
    lon: float
    place_id: Optional[str] = None
    category: Optional[str] = None
    country_code: Optional[str] = None  # ISO2, upper-case

    @property
    def coordinates(self) -> LatLon:
        return (self.lat, self.lon)


class GeocodingClient:
    """
    Geoapify Adapter / Client

    Sole responsibility:
    - Talk to Geoapify via HTTP
    - Convert GeoJSON (lon, lat) -> internal (lat, lon)
    - Return Place objects
    """
    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, timeout: int = 5):
        self.api_key = api_key or GEOAPIFY_API_KEY
        self.base_url = (base_url or GEOAPIFY_BASE_URL).rstrip("/")
        self.timeout = timeout  # seconds to wait for Geoapify before giving up

        if not self.api_key:
            raise ValueError("Geoapify API key not set. Please set GEOAPIFY_API_KEY in the .env file.")

    #----------------
    # Internal helpers
    #----------------
    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = requests.get(
                url,
                params={**params, "apiKey": self.api_key, "lang": "en"},
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise GeocodingError(f"Geoapify request failed: {exc}") from exc

        if response.status_code != 200:
            raise GeocodingError(f"Geoapify error: HTTP {response.status_code}")

        return response.json()

    @staticmethod
    def _normalize_feature(feature: Dict[str, Any]) -> Optional[Place]:
        props = feature.get("properties") or {}
        coords = (feature.get("geometry") or {}).get("coordinates") or []

        lon = coords[0] if len(coords) > 1 else props.get("lon")
        lat = coords[1] if len(coords) > 1 else props.get("lat")
        if lat is None or lon is None:
            return None  # feature without a point

        country_code = props.get("country_code")
        return Place(
            name=props.get("name") or props.get("formatted") or "Unknown location",
            lat=float(lat),
            lon=float(lon),
            place_id=props.get("place_id"),
            category=props.get("category") or props.get("result_type"),
            country_code=country_code.upper() if country_code else None,
        )

    def _places(self, data: Dict[str, Any]) -> List[Place]:
        places = []
        for feature in data.get("features") or []:
            place = self._normalize_feature(feature)
            if place is not None:
                places.append(place)
        return places

    #----------------
    # Public methods
    #----------------
    def search(self, text: str, limit: int = 5) -> List[Place]:
        """
        calls /geocode/search and returns up to `limit` places.
        Queries shorter than 2 characters return [] without a request.
        """
        if not text or len(text.strip()) < 2:
            return []
        data = self._get("/geocode/search", {"text": text.strip(), "limit": limit})
        return self._places(data)[:limit]

    def forward_geocode(self, name: str) -> Optional[Place]:
        """Best match for a place name, or None."""
        places = self.search(name, limit=1)
        return places[0] if places else None

    def reverse_geocode(self, lat: float, lon: float) -> Optional[Place]:
        data = self._get("/geocode/reverse", {"lat": lat, "lon": lon})
        places = self._places(data)
        return places[0] if places else None

    def distance_km(self, origin: str, destination: str, boat: bool = False) -> Optional[float]:
        """
        Distance between two place names; None if either cannot be geocoded.
        """
        a = self.forward_geocode(origin)
        b = self.forward_geocode(destination)
        if a is None or b is None:
            return None
        if boat:
            return calculate_boat_shipping_distance(a.coordinates, b.coordinates)
        return calculate_distance(a.coordinates, b.coordinates)
