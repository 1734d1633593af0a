import math
from dataclasses import dataclass


EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle (haversine) distance in kilometres, unrounded.

    Rounding for display is done by the caller.
    """
    if a == b:
        return 0.0

    # Sort the endpoints so (a, b) and (b, a) run the exact same float ops.
    p, q = sorted(((a.latitude, a.longitude), (b.latitude, b.longitude)))

    lat1, lon1 = math.radians(p[0]), math.radians(p[1])
    lat2, lon2 = math.radians(q[0]), math.radians(q[1])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    h = min(1.0, h)
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c
