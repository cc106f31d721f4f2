from __future__ import annotations

import asyncio
import logging
from typing import List

from slotwatch.models import DateWindow, Place
from slotwatch.services.http import ClicSanteClient

logger = logging.getLogger(__name__)


async def fetch_availabilities(
    client: ClicSanteClient,
    place: Place,
    window: DateWindow,
    timezone: str,
) -> List[str]:
    """Open dates for one place inside the window; [] when the place has no service id."""
    if place.service_id is None:
        return []

    params = {
        "dateStart": window.date_start,
        "dateStop": window.date_stop,
        "service": place.service_id,
        "timezone": timezone,
        "places": place.id,
        "filter1": 1,
        "filter2": 0,
    }
    data = await client.get_json(f"establishments/{place.establishment}/schedules/public", params)
    availabilities = data.get("availabilities") if isinstance(data, dict) else None
    if not isinstance(availabilities, list):
        return []
    return [str(day) for day in availabilities]


async def _availabilities_or_empty(
    client: ClicSanteClient,
    place: Place,
    window: DateWindow,
    timezone: str,
) -> List[str]:
    try:
        return await fetch_availabilities(client, place, window, timezone)
    except Exception as e:
        logger.error(
            "Could not get availabilities for establishmentId=%s serviceId=%s placeId=%s. "
            "Ignoring this establishment... (%s)",
            place.establishment,
            place.service_id,
            place.id,
            e,
        )
        return []


async def fetch_all_availabilities(
    client: ClicSanteClient,
    places: List[Place],
    window: DateWindow,
    timezone: str,
) -> List[Place]:
    results = await asyncio.gather(
        *(_availabilities_or_empty(client, place, window, timezone) for place in places)
    )
    for place, availabilities in zip(places, results):
        place.availabilities = availabilities
    return places
