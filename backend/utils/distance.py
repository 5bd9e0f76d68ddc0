"""
Distance calculation utilities with memoization for performance optimization.
"""
import math
from functools import lru_cache


@lru_cache(maxsize=10000)
def planar_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """
    Euclidean distance between two points treating lon/lat degrees as a flat plane.

    Only meaningful for small networks (a few km across); the path finders use
    it for both edge costs and the A* heuristic.

    Examples:
        >>> planar_distance(0.0, 0.0, 3.0, 4.0)
        5.0
    """
    return math.hypot(x2 - x1, y2 - y1)


@lru_cache(maxsize=10000)
def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth using the Haversine formula.

    Args:
        lat1: Latitude of the first point in decimal degrees (-90 to 90)
        lon1: Longitude of the first point in decimal degrees (-180 to 180)
        lat2: Latitude of the second point in decimal degrees (-90 to 90)
        lon2: Longitude of the second point in decimal degrees (-180 to 180)

    Returns:
        Distance between the two points in miles

    Examples:
        >>> # Distance between San Francisco and Los Angeles
        >>> haversine_distance(37.7749, -122.4194, 34.0522, -118.2437)
        347.4...

        >>> # Same point (should be 0)
        >>> haversine_distance(37.7749, -122.4194, 37.7749, -122.4194)
        0.0

    Note:
        - This function uses the Earth's mean radius (3958.8 miles)
        - Does NOT validate coordinates - caller is responsible for validation
    """
    # Earth's mean radius in miles
    R = 3958.8

    lat1_rad = math.radians(lat1)
    lon1_rad = math.radians(lon1)
    lat2_rad = math.radians(lat2)
    lon2_rad = math.radians(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return R * c
