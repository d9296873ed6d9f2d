"""
Great-circle distances for the distance factor
"""

import math

from .config.settings import GOTHENBURG_COORDS, EARTH_RADIUS_KM


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two WGS84 points"""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_to_gothenburg(latitude: float, longitude: float) -> float:
    return haversine_km(
        latitude,
        longitude,
        GOTHENBURG_COORDS["latitude"],
        GOTHENBURG_COORDS["longitude"],
    )
