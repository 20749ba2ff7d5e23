# src/weather_dashboard/location.py
"""
Location Resolver.

Maps a free-text city name or raw coordinates to a canonical Location.

Strategy
--------
- A static table of major US cities answers most lookups without a request.
- Unknown names fall through to the gateway's city search, which returns the
  location embedded in a current-conditions response.
- GPS fixes are first checked against a coarse contiguous-US bounding box, then
  snapped to the nearest table city when one lies within
  `settings.app.location.max_nearest_degrees` (straight-line degrees, no
  geodesic correction).
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Dict, List, Optional

from .errors import NotFound, OutOfServiceArea
from .models import Location

if TYPE_CHECKING:
    from .gateway import WeatherGateway

log = logging.getLogger("location")

# (lat_min, lat_max, lon_min, lon_max) of the contiguous United States
US_BOUNDING_BOX = (24.0, 50.0, -125.0, -66.0)

DEFAULT_MAX_NEAREST_DEGREES = 1.5

KNOWN_CITIES: List[Location] = [
    Location(name=name, region=state, country="US", lat=lat, lon=lon)
    for name, state, lat, lon in (
        ("New York", "NY", 40.7128, -74.0060),
        ("Los Angeles", "CA", 34.0522, -118.2437),
        ("Chicago", "IL", 41.8781, -87.6298),
        ("Houston", "TX", 29.7604, -95.3698),
        ("Phoenix", "AZ", 33.4484, -112.0740),
        ("Philadelphia", "PA", 39.9526, -75.1652),
        ("San Antonio", "TX", 29.4241, -98.4936),
        ("San Diego", "CA", 32.7157, -117.1611),
        ("Dallas", "TX", 32.7767, -96.7970),
        ("San Jose", "CA", 37.3382, -121.8863),
        ("Austin", "TX", 30.2672, -97.7431),
        ("Jacksonville", "FL", 30.3322, -81.6557),
        ("San Francisco", "CA", 37.7749, -122.4194),
        ("Columbus", "OH", 39.9612, -82.9988),
        ("Indianapolis", "IN", 39.7684, -86.1581),
        ("Seattle", "WA", 47.6062, -122.3321),
        ("Denver", "CO", 39.7392, -104.9903),
        ("Washington", "DC", 38.9072, -77.0369),
        ("Boston", "MA", 42.3601, -71.0589),
        ("Nashville", "TN", 36.1627, -86.7816),
        ("Detroit", "MI", 42.3314, -83.0458),
        ("Oklahoma City", "OK", 35.4676, -97.5164),
        ("Portland", "OR", 45.5152, -122.6784),
        ("Las Vegas", "NV", 36.1699, -115.1398),
        ("Memphis", "TN", 35.1495, -90.0490),
        ("Atlanta", "GA", 33.7490, -84.3880),
        ("Miami", "FL", 25.7617, -80.1918),
        ("Minneapolis", "MN", 44.9778, -93.2650),
        ("New Orleans", "LA", 29.9511, -90.0715),
        ("Kansas City", "MO", 39.0997, -94.5786),
        ("Wichita", "KS", 37.6872, -97.3301),
        ("Salt Lake City", "UT", 40.7608, -111.8910),
    )
]


def _normalize_name(name: str) -> str:
    return " ".join(name.lower().replace(",", " ").split())


def is_us_bounding_box(lat: float, lon: float) -> bool:
    lat_min, lat_max, lon_min, lon_max = US_BOUNDING_BOX
    return lat_min <= lat <= lat_max and lon_min <= lon <= lon_max


def coords_location(lat: float, lon: float) -> Location:
    """Unnamed location for a raw coordinate pair."""
    return Location(name=f"{lat:.4f}, {lon:.4f}", lat=lat, lon=lon)


class LocationResolver:
    def __init__(
        self,
        gateway: Optional["WeatherGateway"] = None,
        cities: Optional[List[Location]] = None,
        max_nearest_degrees: float = DEFAULT_MAX_NEAREST_DEGREES,
    ) -> None:
        self.gateway = gateway
        self.cities = list(cities) if cities is not None else list(KNOWN_CITIES)
        self.max_nearest_degrees = max_nearest_degrees
        self._index: Dict[str, Location] = {}
        for city in self.cities:
            self._index.setdefault(_normalize_name(city.name), city)
            self._index.setdefault(_normalize_name(f"{city.name} {city.region}"), city)

    # ------------------------ table lookups ------------------------

    def match_city(self, city_name: str) -> Optional[Location]:
        """Exact (case-insensitive) table match on "Name" or "Name, ST"."""
        return self._index.get(_normalize_name(city_name))

    def search_cities(self, query: str, limit: int = 5) -> List[Location]:
        """Substring suggestions from the table; needs at least 2 characters."""
        q = (query or "").strip().lower()
        if len(q) < 2:
            return []
        hits = [c for c in self.cities if q in c.name.lower()]
        return hits[:limit]

    def nearest_known_city(self, lat: float, lon: float) -> Optional[Location]:
        best: Optional[Location] = None
        best_dist = math.inf
        for city in self.cities:
            dist = math.hypot(city.lat - lat, city.lon - lon)
            if dist < best_dist:
                best, best_dist = city, dist
        if best is None or best_dist > self.max_nearest_degrees:
            return None
        return best

    # ------------------------ resolution ------------------------

    def resolve_by_name(self, city_name: str) -> Location:
        query = (city_name or "").strip()
        if not query:
            raise NotFound(city_name or "")
        city = self.match_city(query)
        if city is not None:
            return city
        if self.gateway is None:
            raise NotFound(query)
        log.debug("No table match for %r; asking the provider", query)
        # NotFound carries the query; outages surface as NetworkFailure
        return self.gateway.fetch_current_by_city(query).location

    def resolve_by_coords(self, lat: float, lon: float) -> Location:
        if not is_us_bounding_box(lat, lon):
            raise OutOfServiceArea(lat, lon)
        return self.nearest_known_city(lat, lon) or coords_location(lat, lon)

    # convenience
    is_us_bounding_box = staticmethod(is_us_bounding_box)
