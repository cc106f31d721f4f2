from __future__ import annotations

import math
from datetime import date
from typing import Iterable, List, Optional

from slotwatch.models import Place


def _day(value: str) -> date:
    # the API sometimes sends full timestamps; only the calendar day matters
    return date.fromisoformat(value[:10])


def is_within_days(value: str, days: int, today: Optional[date] = None) -> bool:
    """True when ``value`` is at most ``days`` calendar days after today (past days included)."""
    today = today or date.today()
    try:
        day = _day(value)
    except ValueError:
        return False
    return (day - today).days <= days


def _distance_key(place: Place) -> float:
    return place.distance_km if place.distance_km is not None else math.inf


def select_places(
    places: Iterable[Place],
    tolerance: int,
    specific_date: Optional[str] = None,
    today: Optional[date] = None,
) -> List[Place]:
    with_slots = [p for p in places if p.availabilities]

    if specific_date:
        matching = [p for p in with_slots if specific_date in p.availabilities]
    else:
        matching = [p for p in with_slots if is_within_days(p.availabilities[0], tolerance, today)]

    return sorted(matching, key=_distance_key)
