"""
Great-circle distance helpers for the nearby-dog search.
"""
import math

from ..config import EARTH_RADIUS_KM


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points using the Haversine formula.

    Args:
        lat1: Latitude of the first point in degrees
        lon1: Longitude of the first point in degrees
        lat2: Latitude of the second point in degrees
        lon2: Longitude of the second point in degrees

    Returns:
        float: Distance in kilometres on a sphere of radius EARTH_RADIUS_KM
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def is_within_radius(center_lat: float, center_lon: float,
                     lat: float, lon: float, radius_km: float) -> bool:
    """Inclusive radius check: a point exactly on the boundary is inside."""
    return haversine_km(center_lat, center_lon, lat, lon) <= radius_km
