"""Geospatial helper functions."""

from __future__ import annotations

import math

from shapely.geometry import Point, box

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def point_in_bounds(
    lat: float,
    lon: float,
    min_lat: float,
    max_lat: float,
    min_lon: float,
    max_lon: float,
    tolerance_deg: float = 0.0,
) -> bool:
    """Return True if the point lies within the bounds expanded by ``tolerance_deg``."""

    area = box(min_lon, min_lat, max_lon, max_lat)
    if tolerance_deg > 0:
        area = area.buffer(tolerance_deg, join_style=2)
    return area.covers(Point(lon, lat))
