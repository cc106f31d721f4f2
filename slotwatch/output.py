from __future__ import annotations

import logging
import sys
from typing import List, Protocol, TextIO, Tuple

from slotwatch.models import OutputStyle, Place

logger = logging.getLogger(__name__)

DEFAULT_BOOKING_BASE_URL = "https://clients3.clicsante.ca"


class Notifier(Protocol):
    def notify(self, message: str, sound: bool = True) -> None: ...


class ConsoleNotifier:
    """Alert on the terminal: a warning-level log record, plus the bell when sound is on."""

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        self.stream = stream

    def notify(self, message: str, sound: bool = True) -> None:
        logger.warning(message)
        if sound:
            self.stream.write("\a")
            self.stream.flush()


def booking_url(
    place: Place,
    postal_code: str,
    base_url: str = DEFAULT_BOOKING_BASE_URL,
    unified_service: int = 237,
) -> str:
    return (
        f"{base_url.rstrip('/')}/{place.establishment}/take-appt"
        f"?unifiedService={unified_service}&portalPlace={place.id}"
        f"&portalPostalCode={postal_code}&lang=fr"
    )


def notification_message(place: Place) -> str:
    return f"{place.name} has an availability on {place.first_availability}"


def _distance_text(place: Place) -> str:
    return "unknown" if place.distance_km is None else f"{place.distance_km:g}km"


def _fields(place: Place, url: str) -> List[Tuple[str, str]]:
    return [
        ("Name", place.name),
        ("Address", place.address),
        ("Distance", _distance_text(place)),
        ("Availabilities", ", ".join(place.availabilities)),
        ("Book", url),
    ]


def _render_plain(place: Place, url: str) -> str:
    return "\n".join(
        [
            place.name,
            place.address,
            f"Distance: {_distance_text(place)}",
            f"Availabilities: {', '.join(place.availabilities)}",
            url,
        ]
    )


def _render_box(place: Place, url: str, padding: int = 1) -> str:
    lines = _render_plain(place, url).split("\n")
    inner = max(len(line) for line in lines) + 2 * padding
    pad = " " * padding
    body = [f"║{pad}{line.ljust(inner - 2 * padding)}{pad}║" for line in lines]
    return "\n".join([f"╓{'─' * inner}╖", *body, f"╙{'─' * inner}╜"])


def _render_table(place: Place, url: str) -> str:
    rows = _fields(place, url)
    key_w = max(len(k) for k, _ in rows)
    val_w = max(len(v) for _, v in rows)
    rule = f"+{'-' * (key_w + 2)}+{'-' * (val_w + 2)}+"
    out = [rule]
    for key, value in rows:
        out.append(f"| {key.ljust(key_w)} | {value.ljust(val_w)} |")
    out.append(rule)
    return "\n".join(out)


def render_place(
    place: Place,
    postal_code: str,
    style: OutputStyle = "box",
    base_url: str = DEFAULT_BOOKING_BASE_URL,
    unified_service: int = 237,
) -> str:
    url = booking_url(place, postal_code, base_url, unified_service)
    if style == "plain":
        return _render_plain(place, url)
    if style == "table":
        return _render_table(place, url)
    if style == "box":
        return _render_box(place, url)
    raise ValueError(f"Unknown output style '{style}'. Supported: plain, box, table.")
