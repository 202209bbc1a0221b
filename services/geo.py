from __future__ import annotations

import math
from typing import Any, Optional

from schemas import GeoPoint

EARTH_RADIUS_KM = 6371.0


def distance(point1: Any, point2: Any) -> Optional[float]:
    """
    Great-circle distance in km (Haversine).

    Accepts GeoPoint instances or {"lat": .., "lng": ..} mappings.
    Returns None when either point is missing or not finite.
    """
    a_pt = GeoPoint.parse(point1)
    b_pt = GeoPoint.parse(point2)
    if a_pt is None or b_pt is None:
        return None
    if a_pt == b_pt:
        return 0.0

    lat1 = math.radians(a_pt.lat)
    lat2 = math.radians(b_pt.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b_pt.lng - a_pt.lng)

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    # rounding can push a marginally outside [0, 1] for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def proximity(distance_km: Optional[float], decay_km: float) -> float:
    """exp(-d / decay): 1.0 at the same spot, strictly decreasing with distance."""
    if distance_km is None or not math.isfinite(distance_km):
        return 0.0
    return math.exp(-max(0.0, distance_km) / decay_km)
