"""
Location resolver session that coordinates all components
"""
import logging
from typing import Dict, List, Optional

from config import settings
from models import Country, LocationResult, SelectionState, Step
from services import selection
from services.fetch_coordinator import FetchCoordinator
from services.geo_client import GeographyClient
from services.geo_service import FallbackGeographyStore
from services.normalizer import COUNTRIES_KEY, filter_candidates, normalize, same_name
from services.result_cache import ResultCache

logger = logging.getLogger(__name__)


class LocationResolver:
    """
    One open-to-close run of the country -> province -> city picker.

    The cache and coordinator may be shared with other sessions; the
    selection state, hints and fallback lists belong to this session only.
    Fetch failures never raise out of this class: they end up in
    state.last_error instead.
    """

    def __init__(
        self,
        client: GeographyClient,
        fallback_store: Optional[FallbackGeographyStore] = None,
        cache: Optional[ResultCache] = None,
        coordinator: Optional[FetchCoordinator] = None,
        origin_city: Optional[str] = None,
        initial_country: Optional[str] = None,
        initial_province: Optional[str] = None
    ):
        self.client = client
        self.fallback_store = fallback_store if fallback_store is not None else FallbackGeographyStore()
        if coordinator is None:
            coordinator = FetchCoordinator(cache if cache is not None else ResultCache())
        self.coordinator = coordinator
        self.cache = coordinator.cache

        self.origin_city = origin_city
        self.initial_country = initial_country
        self.initial_province = initial_province

        self.state: SelectionState = selection.initial_state()
        self.result: Optional[LocationResult] = None
        self.is_open = False
        self.fallback_provinces: Dict[str, List[str]] = {}
        self._country_hint: Optional[str] = None
        self._province_hint: Optional[str] = None

    async def open(self) -> SelectionState:
        """Start a fresh session, load countries and follow any hints"""
        self.state = selection.initial_state()
        self.result = None
        self.is_open = True
        self.fallback_provinces = {}
        self._country_hint = self.initial_country
        self._province_hint = self.initial_province

        await self._load_current_step()
        await self._apply_hints()
        return self.state

    def close(self) -> None:
        """Dismiss the session; in-flight fetches still finish into the cache"""
        self.state = selection.initial_state()
        self.is_open = False
        self._country_hint = None
        self._province_hint = None

    async def select(self, choice: str) -> Optional[LocationResult]:
        """
        Choose an option of the current step by its label.
        Returns the final LocationResult once a city is chosen.
        """
        self._require_open()
        step = self.state.step

        label = next((option for option in self.options() if same_name(option, choice)), None)
        if label is None:
            raise ValueError(f"{choice!r} is not an option at the {step.value} step")

        if step == Step.COUNTRY:
            picked = next(country for country in self.countries() if country.name == label)
            self.state = selection.advance(self.state, picked)
        else:
            self.state = selection.advance(self.state, label)

        if self.state.step == Step.SELECTED:
            self.result = LocationResult(
                city=self.state.selected_city,
                country=self.state.selected_country.name,
                province=self.state.selected_province
            )
            self.is_open = False
            logger.info(f"Resolved {self.result.city}, {self.result.province}, {self.result.country}")
            return self.result

        await self._load_current_step(force=True)
        await self._apply_hints()
        return None

    async def back(self) -> SelectionState:
        self._require_open()
        self.state = selection.back(self.state)
        await self._load_current_step()
        return self.state

    def set_search(self, query: Optional[str]) -> SelectionState:
        self.state = selection.set_search(self.state, query)
        return self.state

    async def retry(self) -> SelectionState:
        """Re-attempt the current step's lookup after a failure"""
        self._require_open()
        await self._load_current_step(force=True)
        await self._apply_hints()
        return self.state

    @property
    def loading(self) -> bool:
        key = selection.required_key(self.state)
        return key is not None and self.coordinator.is_pending(key)

    def countries(self) -> List[Country]:
        return self.cache.get(COUNTRIES_KEY, [])

    def options(self) -> List[str]:
        """Labels for the current step, before search filtering"""
        step = self.state.step
        key = selection.required_key(self.state)

        if step == Step.COUNTRY:
            return [country.name for country in self.countries()]
        if step == Step.PROVINCE and key:
            if self.cache.has(key):
                return list(self.cache.get(key))
            return list(self.fallback_provinces.get(key, []))
        if step == Step.CITY and key:
            origin = normalize(self.origin_city)
            return [city for city in self.cache.get(key, []) if not origin or normalize(city) != origin]
        return []

    def visible_options(self) -> List[str]:
        return filter_candidates(self.options(), self.state.search_query)

    def _require_open(self) -> None:
        if not self.is_open:
            raise RuntimeError("Location session is not open")

    def _populate_for(self, state: SelectionState):
        if state.step == Step.COUNTRY:
            return self.client.fetch_countries
        country = state.selected_country.name
        if state.step == Step.PROVINCE:
            return lambda: self.client.fetch_provinces(country)
        province = state.selected_province
        return lambda: self.client.fetch_cities(country, province)

    async def _load_current_step(self, force: bool = False) -> None:
        """
        Make sure the current step's list is cached.
        Without force, a province list already served from fallback is kept
        as is instead of hitting the API again.
        """
        requested = self.state
        key = selection.required_key(requested)
        if key is None:
            return
        if not force and key in self.fallback_provinces:
            return

        try:
            await self.coordinator.ensure(key, self._populate_for(requested))
        except Exception as e:
            self._handle_failure(requested, key, e)
            return

        self.fallback_provinces.pop(key, None)
        if selection.required_key(self.state) == key and self.state.last_error:
            self.state = selection.set_error(self.state, None)

    def _handle_failure(self, requested: SelectionState, key: str, error: Exception) -> None:
        logger.warning(f"Lookup for {key} failed: {error}")

        if requested.step == Step.COUNTRY:
            message = settings.COUNTRIES_ERROR
        elif requested.step == Step.PROVINCE:
            fallback = self.fallback_store.get_provinces(requested.selected_country.name)
            if fallback:
                logger.warning(f"Serving {len(fallback)} fallback provinces for {requested.selected_country.name}")
                self.fallback_provinces[key] = fallback
                message = settings.FALLBACK_ADVISORY
            else:
                message = settings.PROVINCES_ERROR
        else:
            message = settings.CITIES_ERROR

        # The user may have moved on while this lookup was running
        if selection.required_key(self.state) == key:
            self.state = selection.set_error(self.state, message)

    async def _apply_hints(self) -> None:
        """Skip steps the caller already knows the answer to, once per session"""
        if self._country_hint and self.state.step == Step.COUNTRY and self.cache.has(COUNTRIES_KEY):
            hint, self._country_hint = self._country_hint, None
            country = next((c for c in self.countries() if same_name(c.name, hint)), None)
            if country:
                logger.info(f"Fast-forwarding to provinces of {country.name}")
                self.state = selection.advance(self.state, country)
                await self._load_current_step(force=True)

        if self._province_hint and self.state.step == Step.PROVINCE:
            provinces = self.options()
            if provinces:
                hint, self._province_hint = self._province_hint, None
                province = next((p for p in provinces if same_name(p, hint)), None)
                if province:
                    logger.info(f"Fast-forwarding to cities of {province}")
                    self.state = selection.advance(self.state, province)
                    await self._load_current_step(force=True)
