"""
Client for the countriesnow geography API
"""
import asyncio
import httpx
import logging
from typing import Any, Dict, List, Optional

from config import settings
from models import Country
from services.normalizer import normalize

logger = logging.getLogger(__name__)


class GeographyRequestError(Exception):
    """A lookup that did not produce data, either timed out or failed outright"""

    TIMEOUT = "timeout"
    REQUEST = "request"

    def __init__(self, message: str, kind: str = REQUEST, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code

    @property
    def timed_out(self) -> bool:
        return self.kind == self.TIMEOUT


class GeographyClient:
    """
    Issues the three lookups the location picker needs:
    1. All countries
    2. Provinces/states of a country
    3. Cities of a province

    Every call is a single request with no retries. Failures surface as
    GeographyRequestError so callers can decide how to degrade.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.GEO_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.GEO_API_TIMEOUT
        self.transport = transport

    async def fetch_countries(self) -> List[Country]:
        data = await self._request("GET", "/countries/positions")

        countries = {}
        for item in data if isinstance(data, list) else []:
            if not isinstance(item, dict):
                continue
            name = str(item.get("name") or "").strip()
            if not name or normalize(name) in countries:
                continue
            countries[normalize(name)] = Country(
                name=name,
                iso_alpha2=item.get("iso2"),
                iso_alpha3=item.get("iso3")
            )

        return sorted(countries.values(), key=lambda country: country.name)

    async def fetch_provinces(self, country_name: str) -> List[str]:
        data = await self._request("POST", "/countries/states", {"country": country_name})

        states = data.get("states") if isinstance(data, dict) else None
        provinces = []
        for state in states or []:
            name = state.get("name") if isinstance(state, dict) else None
            if isinstance(name, str) and name.strip():
                provinces.append(name.strip())

        return sorted(provinces)

    async def fetch_cities(self, country_name: str, province_name: str) -> List[str]:
        data = await self._request(
            "POST",
            "/countries/state/cities",
            {"country": country_name, "state": province_name}
        )

        seen = set()
        cities = []
        for name in data if isinstance(data, list) else []:
            if not isinstance(name, str) or not name.strip():
                continue
            key = normalize(name)
            if key in seen:
                continue
            seen.add(key)
            cities.append(name.strip())

        return sorted(cities)

    async def _send(self, method: str, url: str, body: Optional[Dict[str, Any]]) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            return await client.request(method, url, json=body)

    async def _request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """
        Make ONE request and hand back the payload's `data` field
        """
        url = f"{self.base_url}{path}"

        try:
            # httpx limits each phase separately; wait_for caps the whole call
            response = await asyncio.wait_for(self._send(method, url, body), self.timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.warning(f"Geography API timed out: {method} {path}")
            raise GeographyRequestError(
                f"Request timed out after {self.timeout}s",
                kind=GeographyRequestError.TIMEOUT
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Geography API unreachable: {method} {path}: {e}")
            raise GeographyRequestError(f"Request failed: {e}") from e

        if not response.is_success:
            logger.warning(f"Geography API returned {response.status_code} for {method} {path}")
            raise GeographyRequestError(
                f"Request failed ({response.status_code})",
                status_code=response.status_code
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise GeographyRequestError(
                "Response was not valid JSON",
                status_code=response.status_code
            ) from e

        if isinstance(payload, dict) and payload.get("error"):
            message = payload.get("msg") or "Request error"
            logger.warning(f"Geography API error for {method} {path}: {message}")
            raise GeographyRequestError(message, status_code=response.status_code)

        return payload.get("data") if isinstance(payload, dict) else None
