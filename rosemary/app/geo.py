"""Great-circle distance helpers.

The same formula and earth radius are used by static/js/rosemary.js so that
server-side radius filtering and client-side sorting agree.
"""

import math
from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

EARTH_RADIUS_KM = 6371.0

Coordinates = tuple[float, float]


class HasPosition(Protocol):
    """Anything with a name and a latitude/longitude pair."""

    name: str
    latitude: float
    longitude: float


T = TypeVar('T', bound=HasPosition)


def haversine_km(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    earth_radius_km: float = EARTH_RADIUS_KM,
) -> float:
    """Return the great-circle distance in kilometers between two points.

    Coordinates are in decimal degrees. Non-finite inputs yield NaN.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) * math.sin(d_lat / 2)
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2)
        * math.sin(d_lon / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return earth_radius_km * c


def distance_from(origin: Coordinates | None, point: HasPosition) -> float | None:
    """Distance from origin to point in km, or None when origin is unknown."""
    if origin is None:
        return None
    return haversine_km(origin[0], origin[1], point.latitude, point.longitude)


def within_radius(origin: Coordinates, point: HasPosition, radius_km: float) -> bool:
    """Return True if point lies within radius_km of origin (inclusive)."""
    return distance_from(origin, point) <= radius_km  # type: ignore[operator]


def filter_by_radius(
    points: Iterable[T], origin: Coordinates, radius_km: float
) -> list[T]:
    """Keep the points within radius_km of origin, preserving order."""
    return [p for p in points if within_radius(origin, p, radius_km)]


def sort_by_distance(points: Sequence[T], origin: Coordinates | None) -> list[T]:
    """Sort points nearest first.

    Points whose distance is unknown sort last and are ordered by name.
    """

    def key(point: T) -> tuple[bool, float, str]:
        distance = distance_from(origin, point)
        if distance is None or math.isnan(distance):
            return (True, 0.0, point.name)
        return (False, distance, point.name)

    return sorted(points, key=key)
