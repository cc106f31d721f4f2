from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Dict, List, Optional, Tuple

from slotwatch.config import Settings


class FakeClient:
    """Stands in for ClicSanteClient: routes paths to canned JSON, records every call.

    A route value can be a plain payload, a callable (sync or async) taking the
    params, or an exception instance to raise.
    """

    def __init__(self, routes: Dict[str, Any], settings: Optional[Settings] = None) -> None:
        self.routes = routes
        self.settings = settings or Settings(_env_file=None)
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        params = dict(params or {})
        self.calls.append((path, params))
        route = self.routes.get(path, {})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            result = route(params)
            if inspect.isawaitable(result):
                result = await result
            return result
        return route

    def paths(self) -> List[str]:
        return [path for path, _ in self.calls]


def pages(*page_payloads: Dict[str, Any]) -> Callable[[Dict[str, Any]], Dict[str, Any]]:
    """Serve the search endpoint page by page, then an empty page forever."""

    def serve(params: Dict[str, Any]) -> Dict[str, Any]:
        page = int(params["page"])
        if page < len(page_payloads):
            return page_payloads[page]
        return {"places": [], "distanceByPlaces": {}}

    return serve


def place_record(place_id: str, establishment: str, name: str, address: str = "1 rue Principale") -> Dict[str, Any]:
    return {"id": place_id, "establishment": establishment, "name_fr": name, "formatted_address": address}


def held_until_all_started(count: int, payload_for: Callable[[Dict[str, Any]], Any]):
    """Build async routes that only answer once ``count`` requests are in flight together.

    A sequential caller never gets past the first request, so callers should
    wrap the work in ``asyncio.wait_for``. Create the routes inside the running loop.
    """
    all_started = asyncio.Event()
    started: List[Dict[str, Any]] = []

    async def serve(params: Dict[str, Any]) -> Any:
        started.append(params)
        if len(started) >= count:
            all_started.set()
        await all_started.wait()
        return payload_for(params)

    return serve, started
