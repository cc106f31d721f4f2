from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError

from slotwatch.models import Coordinate, DateWindow, Place
from slotwatch.services.errors import ServiceLookupError
from slotwatch.services.http import ClicSanteClient

logger = logging.getLogger(__name__)


def _parse_page(data: Any) -> Tuple[List[dict], Dict[str, float]]:
    if not isinstance(data, dict):
        return [], {}
    records = data.get("places") or []
    distances = data.get("distanceByPlaces") or {}
    if not isinstance(records, list):
        records = []
    if not isinstance(distances, dict):
        distances = {}
    parsed: Dict[str, float] = {}
    for place_id, km in distances.items():
        if km is None:
            continue
        try:
            parsed[str(place_id)] = float(km)
        except (TypeError, ValueError):
            logger.warning("Ignoring distance %r for place %s", km, place_id)
    return records, parsed


def _km_param(km: float) -> Union[int, float]:
    # the API expects whole kilometres as "10", not "10.0"
    return int(km) if float(km).is_integer() else km


def _is_excluded(place: Place, fragment: str) -> bool:
    return bool(fragment) and fragment.lower() in place.name.lower()


async def fetch_page(
    client: ClicSanteClient,
    coord: Coordinate,
    window: DateWindow,
    max_distance_km: float,
    postal_code: str,
    page: int,
) -> Tuple[List[dict], Dict[str, float]]:
    params = {
        "dateStart": window.date_start,
        "dateStop": window.date_stop,
        "latitude": coord.latitude,
        "longitude": coord.longitude,
        "maxDistance": _km_param(max_distance_km),
        "postalCode": postal_code,
        "page": page,
        "serviceUnified": client.settings.unified_service,
    }
    return _parse_page(await client.get_json("availabilities", params))


async def search_places(
    client: ClicSanteClient,
    coord: Coordinate,
    window: DateWindow,
    max_distance_km: float,
    postal_code: str,
) -> List[Place]:
    """Walk the paginated search until an empty page and return the retained places.

    Pages are requested one at a time. A failed request looks exactly like an
    empty page and ends the walk as well.
    """
    settings = client.settings
    places: List[Place] = []
    seen: set[str] = set()
    distances: Dict[str, float] = {}

    page = 0
    while True:
        if page >= settings.max_pages:
            logger.warning("Stopped after %d pages of results near %s", page, postal_code)
            break

        records, page_distances = await fetch_page(client, coord, window, max_distance_km, postal_code, page)
        if not records:
            break

        for record in records:
            try:
                place = Place.model_validate(record)
            except ValidationError as e:
                logger.warning("Skipping malformed place on page %d: %s", page, e.errors()[:1])
                continue
            if place.id in seen or _is_excluded(place, settings.excluded_name_fragment):
                continue
            seen.add(place.id)
            places.append(place)

        distances.update(page_distances)
        page += 1

    for place in places:
        place.distance_km = distances.get(place.id)

    return places


async def get_service_id(client: ClicSanteClient, establishment: str) -> str:
    data = await client.get_json(f"establishments/{establishment}/services")
    if not isinstance(data, list) or not data or not isinstance(data[0], dict) or data[0].get("id") is None:
        raise ServiceLookupError(establishment)
    return str(data[0]["id"])


async def _service_id_or_none(client: ClicSanteClient, place: Place) -> Optional[str]:
    try:
        return await get_service_id(client, place.establishment)
    except Exception as e:
        logger.error("Could not get serviceId for establishmentId=%s: %s", place.establishment, e)
        return None


async def resolve_service_ids(client: ClicSanteClient, places: List[Place]) -> None:
    """Look up every place's service id concurrently; failures leave that place with None."""
    service_ids = await asyncio.gather(*(_service_id_or_none(client, place) for place in places))
    for place, service_id in zip(places, service_ids):
        place.service_id = service_id


async def build_catalog(
    client: ClicSanteClient,
    coord: Coordinate,
    window: DateWindow,
    max_distance_km: float,
    postal_code: str,
) -> List[Place]:
    logger.info("Populating locations near %s...", postal_code)
    places = await search_places(client, coord, window, max_distance_km, postal_code)
    await resolve_service_ids(client, places)
    resolved = sum(1 for p in places if p.service_id is not None)
    logger.info("Found %d locations near %s (%d with a service id)", len(places), postal_code, resolved)
    return places
