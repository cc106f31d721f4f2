from __future__ import annotations

import logging
import math
from typing import Any

from slotwatch.models import Coordinate
from slotwatch.services.cache import TTLCache
from slotwatch.services.errors import GeocodeNotFound
from slotwatch.services.http import ClicSanteClient

logger = logging.getLogger(__name__)

# Postal code -> coordinate never changes while the process runs.
_geocode_cache: TTLCache[Coordinate] = TTLCache(ttl_s=None, max_size=64)


def _first_location(data: Any) -> Any:
    results = data.get("results") if isinstance(data, dict) else None
    if not results:
        return None
    first = results[0]
    if not isinstance(first, dict):
        return None
    return (first.get("geometry") or {}).get("location")


async def geocode(client: ClicSanteClient, postal_code: str) -> Coordinate:
    """Resolve a postal code to a coordinate. Raises GeocodeNotFound when the API has no match."""
    cached = _geocode_cache.get(postal_code)
    if cached is not None:
        return cached

    data = await client.get_json("geocode", {"address": postal_code})
    location = _first_location(data)
    if not isinstance(location, dict) or location.get("lat") is None or location.get("lng") is None:
        raise GeocodeNotFound(postal_code)

    try:
        coord = Coordinate(latitude=float(location["lat"]), longitude=float(location["lng"]))
    except (TypeError, ValueError) as e:
        raise GeocodeNotFound(postal_code) from e
    if not (math.isfinite(coord.latitude) and math.isfinite(coord.longitude)):
        raise GeocodeNotFound(postal_code)
    logger.debug("Geocoded %s to %s,%s", postal_code, coord.latitude, coord.longitude)
    _geocode_cache.set(postal_code, coord)
    return coord
