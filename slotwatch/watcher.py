from __future__ import annotations

import asyncio
import logging
import sys
from datetime import date
from typing import List, Optional, TextIO

from slotwatch.config import Settings, get_settings
from slotwatch.models import DateWindow, Place, QueryOptions
from slotwatch.output import ConsoleNotifier, Notifier, notification_message, render_place
from slotwatch.services.availability import fetch_all_availabilities
from slotwatch.services.cache import TTLCache
from slotwatch.services.catalog import build_catalog
from slotwatch.services.errors import GeocodeNotFound
from slotwatch.services.geocoding import geocode
from slotwatch.services.http import ClicSanteClient
from slotwatch.services.selection import select_places

logger = logging.getLogger(__name__)


class Watcher:
    """Runs the discovery pipeline once per poll interval, forever.

    The catalog (places near the postal code and their service ids) is kept in
    a TTL cache owned by the watcher. With the default ``catalog_ttl_s=0`` it is
    rebuilt on every pass; availabilities are always fetched fresh.
    """

    def __init__(
        self,
        client: ClicSanteClient,
        options: QueryOptions,
        settings: Optional[Settings] = None,
        notifier: Optional[Notifier] = None,
        out: TextIO = sys.stdout,
    ) -> None:
        self.client = client
        self.options = options
        self.settings = settings or get_settings()
        self.notifier = notifier or ConsoleNotifier()
        self.out = out
        self.catalog_cache: TTLCache[List[Place]] = TTLCache(ttl_s=self.settings.catalog_ttl_s, max_size=8)

    async def _catalog(self, window: DateWindow) -> List[Place]:
        key = (self.options.postal_code, self.options.distance)
        cached = self.catalog_cache.get(key)
        if cached is not None:
            logger.debug("Reusing catalog of %d locations", len(cached))
            return cached

        coord = await geocode(self.client, self.options.postal_code)
        places = await build_catalog(self.client, coord, window, self.options.distance, self.options.postal_code)
        self.catalog_cache.set(key, places)
        return places

    async def run_pass(self, today: Optional[date] = None) -> List[Place]:
        opts = self.options
        today = today or date.today()
        window = DateWindow.starting(today, self.settings.horizon_days)

        places = await self._catalog(window)

        logger.info(
            "Checking %d locations within %skm of %s for availabilities...",
            len(places),
            opts.distance,
            opts.postal_code,
        )
        await fetch_all_availabilities(self.client, places, window, self.settings.timezone)

        specific = opts.specific_date.isoformat() if opts.specific_date else None
        matches = select_places(places, opts.tolerance, specific, today)
        if not matches:
            logger.info("No availabilities matched this pass")
            return matches

        for place in matches:
            self.report(place)
        return matches

    def report(self, place: Place) -> None:
        self.notifier.notify(notification_message(place), sound=True)
        text = render_place(
            place,
            self.options.postal_code,
            self.options.output,
            base_url=str(self.settings.booking_base_url),
            unified_service=self.settings.unified_service,
        )
        self.out.write(text + "\n\n")
        self.out.flush()

    async def run_forever(self) -> None:
        while True:
            try:
                await self.run_pass()
            except GeocodeNotFound as e:
                logger.error("%s; skipping this pass", e)

            logger.info("Waiting %s minute(s) before checking again...", self.options.poll)
            await self.wait(self.options.poll * 60)

    async def wait(self, seconds: float) -> None:
        await asyncio.sleep(seconds)
