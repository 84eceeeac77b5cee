"""Geofence containment using the haversine great-circle distance."""

import math

from common.constants import EARTH_RADIUS_METERS
from geovault.exceptions import InvalidCoordinate
from geovault.types import Coordinate, Zone


def validate_coordinate(latitude, longitude) -> Coordinate:
    """
    Check a claimed latitude/longitude pair and build a Coordinate.

    Args:
        latitude: Latitude in decimal degrees, must lie in [-90, 90]
        longitude: Longitude in decimal degrees, must lie in [-180, 180]

    Returns:
        Validated Coordinate

    Raises:
        InvalidCoordinate: If either value is missing, not a real number,
            non-finite or out of range
    """
    if isinstance(latitude, bool) or isinstance(longitude, bool):
        raise InvalidCoordinate("Coordinates must be numbers")
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise InvalidCoordinate(f"Coordinates must be numbers, got ({latitude!r}, {longitude!r})")

    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidCoordinate("Coordinates must be finite")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(f"Latitude {lat} outside [-90, 90]")
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinate(f"Longitude {lon} outside [-180, 180]")

    return Coordinate(latitude=lat, longitude=lon)


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters between two points on a spherical Earth."""
    lat1 = math.radians(a.latitude)
    lon1 = math.radians(a.longitude)
    lat2 = math.radians(b.latitude)
    lon2 = math.radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # rounding can push h slightly above 1 for antipodal points
    h = min(1.0, h)
    return 2 * EARTH_RADIUS_METERS * math.asin(math.sqrt(h))


def contains(zone: Zone, point: Coordinate) -> bool:
    """
    Whether point lies inside the zone. The boundary is inclusive and no
    tolerance is added to the radius.
    """
    return haversine_distance(zone.center, point) <= zone.radius_meters


class GeoEvaluator:
    """
    Stateless facade over the module functions so the decider can take an
    evaluator as a collaborator.
    """

    def distance(self, zone: Zone, point: Coordinate) -> float:
        return haversine_distance(zone.center, point)

    def contains(self, zone: Zone, point: Coordinate) -> bool:
        return contains(zone, point)
