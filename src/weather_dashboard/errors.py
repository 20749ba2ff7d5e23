# src/weather_dashboard/errors.py
"""
Error taxonomy shared by the gateway, resolver and controller.

WeatherDashboardError
├── Unconfigured            no usable API key; no request was attempted
├── NetworkFailure          provider unreachable
│   ├── ProviderUnavailable non-success status other than "not found"
│   └── ParseFailure        payload did not match the provider schema
├── NotFound                query resolved to no location
├── PermissionDenied        geolocation refused by the user
├── GeolocationUnavailable  geolocation capability missing or failed
└── OutOfServiceArea        coordinates outside the supported bounding box
"""

from __future__ import annotations

from typing import Optional


class WeatherDashboardError(Exception):
    """Base class for every failure surfaced to the controller."""


class Unconfigured(WeatherDashboardError):
    def __init__(self, message: str = "Weather API key is not configured") -> None:
        super().__init__(message)


class NetworkFailure(WeatherDashboardError):
    def __init__(self, message: str, query: Optional[str] = None) -> None:
        super().__init__(message)
        self.query = query


class ProviderUnavailable(NetworkFailure):
    def __init__(self, query: str, status: int) -> None:
        super().__init__(f"Weather provider returned HTTP {status} for {query!r}", query)
        self.status = status


class ParseFailure(NetworkFailure):
    pass


class NotFound(WeatherDashboardError):
    def __init__(self, query: str, status: Optional[int] = None) -> None:
        super().__init__(f'No weather found for "{query}"')
        self.query = query
        self.status = status


class PermissionDenied(WeatherDashboardError):
    def __init__(self, message: str = "Location permission was denied") -> None:
        super().__init__(message)


class GeolocationUnavailable(WeatherDashboardError):
    def __init__(self, message: str = "Geolocation is not available") -> None:
        super().__init__(message)


class OutOfServiceArea(WeatherDashboardError):
    def __init__(self, lat: float, lon: float) -> None:
        super().__init__(
            f"Location ({lat:.4f}, {lon:.4f}) is outside the supported area "
            "(contiguous United States)"
        )
        self.lat = lat
        self.lon = lon
