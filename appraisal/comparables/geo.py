"""
Geographic helpers for comparable search.
"""

import math
from dataclasses import dataclass
from typing import Optional

# Mean Earth radius in kilometres
EARTH_RADIUS_KM = 6371.0

# Kilometres per degree of latitude
KM_PER_DEGREE = math.pi * EARTH_RADIUS_KM / 180


@dataclass(frozen=True)
class BoundingBox:
    """Lat/lng rectangle enclosing a search circle."""
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    def contains(self, lat: float, lng: float) -> bool:
        return (
            self.min_lat <= lat <= self.max_lat
            and self.min_lng <= lng <= self.max_lng
        )


def haversine_km(
    lat1: float, lon1: float,
    lat2: float, lon2: float,
) -> float:
    """
    Calculate great-circle distance between two points in kilometres.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in kilometres
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def bounding_box(lat: float, lng: float, radius_km: float) -> BoundingBox:
    """
    Rectangle that contains every point within ``radius_km`` of (lat, lng).

    Used as a cheap pre-filter before the exact haversine check.
    """
    lat_delta = radius_km / KM_PER_DEGREE
    cos_lat = math.cos(math.radians(lat))
    # Near the poles the longitude span covers everything
    if cos_lat < 1e-6:
        lng_delta = 180.0
    else:
        lng_delta = min(radius_km / (KM_PER_DEGREE * cos_lat), 180.0)

    return BoundingBox(
        min_lat=lat - lat_delta,
        max_lat=lat + lat_delta,
        min_lng=lng - lng_delta,
        max_lng=lng + lng_delta,
    )


# Coordinate boxes checked in order; the first match wins
_COUNTRY_BOXES = [
    ("SV", 13.0, 14.5, -90.5, -87.5),
    ("GT", 13.7, 17.8, -92.3, -88.2),
    ("HN", 12.9, 16.0, -89.4, -83.1),
    ("MX", 14.5, 32.7, -118.4, -86.7),
]


def country_from_coordinates(lat: float, lng: float) -> Optional[str]:
    """Rough country detection for portal selection. None if unknown."""
    for code, min_lat, max_lat, min_lng, max_lng in _COUNTRY_BOXES:
        if min_lat <= lat <= max_lat and min_lng <= lng <= max_lng:
            return code
    return None
