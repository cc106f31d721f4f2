from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any, Dict, Mapping, Optional

import aiohttp

from slotwatch.config import Settings, get_settings

logger = logging.getLogger(__name__)

Params = Mapping[str, Any]


def basic_auth_header(login: str, password: str) -> str:
    token = base64.b64encode(f"{login}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


class ClicSanteClient:
    """Thin JSON client for the Clic Santé public API.

    Every request carries the portal's public credential plus the role and
    product headers the API expects. Transport problems never escape
    ``get_json``: callers get ``{}`` back and treat missing fields as no data.
    """

    def __init__(self, session: aiohttp.ClientSession, settings: Optional[Settings] = None) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.base_url = str(self.settings.api_base_url).rstrip("/")
        self.headers: Dict[str, str] = {
            "Authorization": basic_auth_header(self.settings.auth_login, self.settings.auth_password),
            "x-trimoz-role": self.settings.role_header,
            "product": self.settings.product_header,
        }
        timeout_s = self.settings.http_timeout_s or None
        self.timeout = aiohttp.ClientTimeout(total=timeout_s)

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def get_json(self, path: str, params: Optional[Params] = None) -> Any:
        url = self.url_for(path)
        query = {k: str(v) for k, v in (params or {}).items()}
        try:
            async with self.session.get(url, params=query, headers=self.headers, timeout=self.timeout) as resp:
                resp.raise_for_status()
                data = await resp.json(content_type=None)
            # an empty body decodes to None
            return {} if data is None else data
        except aiohttp.ClientResponseError as e:
            logger.warning("GET %s failed with HTTP %s", url, e.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("GET %s failed: %s", url, e)
        except ValueError as e:
            logger.warning("GET %s returned a non-JSON body: %s", url, e)
        return {}
