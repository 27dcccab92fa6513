"""Great-circle distance, geofencing and GeoJSON line decoding."""

from __future__ import annotations

import json
import logging
import math
from typing import Any, List, Mapping, Tuple

EARTH_RADIUS_METERS = 6371e3
GEOFENCE_RADIUS_METERS = 200


def distance_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance between two points in metres."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def _lat_lng(point: Any) -> Tuple[float, float]:
    if isinstance(point, Mapping):
        return point["lat"], point["lng"]
    return point.lat, point.lng


def is_within_geofence(
    current: Any, target: Any, radius_meters: float = GEOFENCE_RADIUS_METERS
) -> bool:
    """Return True when ``current`` is at most ``radius_meters`` from ``target``.

    Both points may be ``Coordinates`` instances or mappings with ``lat`` and
    ``lng`` keys.
    """

    lat1, lng1 = _lat_lng(current)
    lat2, lng2 = _lat_lng(target)
    return distance_meters(lat1, lng1, lat2, lng2) <= radius_meters


def decode_line_geometry(geometry: Any) -> List[Tuple[float, float]]:
    """Turn a GeoJSON LineString (dict or JSON text) into ``(lat, lng)`` pairs.

    GeoJSON stores positions as ``[lng, lat]``. Unparseable text and
    geometries that are not LineStrings decode to an empty list.
    """

    if not geometry:
        return []
    if isinstance(geometry, str):
        try:
            geometry = json.loads(geometry)
        except ValueError as exc:
            logging.debug("Ignoring malformed geometry: %s", exc)
            return []
    if not isinstance(geometry, Mapping) or geometry.get("type", "LineString") != "LineString":
        return []
    points: List[Tuple[float, float]] = []
    for position in geometry.get("coordinates") or []:
        if not isinstance(position, (list, tuple)) or len(position) < 2:
            logging.debug("Ignoring malformed position: %r", position)
            return []
        points.append((position[1], position[0]))
    return points
