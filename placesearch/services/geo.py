#  Place Search - Geo Math
#
#  Great-circle distance and forward geodesic projection on a spherical
#  Earth (radius 6371 km). Pure functions, no state.
#
#  Depends on: (none)
#  Used by:    services/scorer.py, services/mock_places.py

import math

EARTH_RADIUS_M = 6_371_000


def distance_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> int:
    """Haversine distance between two coordinates, rounded to the nearest meter."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (math.sin(d_phi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2)
    # Float error can push a past 1 for near-antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return int(round(EARTH_RADIUS_M * c))


def displace(lat: float, lng: float, distance_m: float, bearing_deg: float) -> tuple[float, float]:
    """Destination (lat, lng) after travelling distance_m along bearing_deg from origin.

    Bearing is clockwise from true north. Longitude is normalized to [-180, 180).
    """
    delta = distance_m / EARTH_RADIUS_M
    theta = math.radians(bearing_deg)
    phi1 = math.radians(lat)
    lambda1 = math.radians(lng)

    phi2 = math.asin(
        math.sin(phi1) * math.cos(delta)
        + math.cos(phi1) * math.sin(delta) * math.cos(theta)
    )
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )

    lng2 = (math.degrees(lambda2) + 540) % 360 - 180
    return math.degrees(phi2), lng2
