"""
In-memory stand-in for GeographyClient
"""
import asyncio

from models import Country
from services.geo_client import GeographyRequestError

SOUTH_AFRICA = Country(name="South Africa", iso_alpha2="ZA", iso_alpha3="ZAF")
NAMIBIA = Country(name="Namibia", iso_alpha2="NA", iso_alpha3="NAM")
KENYA = Country(name="Kenya", iso_alpha2="KE", iso_alpha3="KEN")


class FakeGeoClient:
    """Answers from dictionaries and records every call it gets"""

    def __init__(self, countries=None, provinces=None, cities=None, failing=()):
        self.countries = countries if countries is not None else [KENYA, NAMIBIA, SOUTH_AFRICA]
        self.provinces = provinces if provinces is not None else {
            "South Africa": ["Gauteng", "Western Cape"],
        }
        self.cities = cities if cities is not None else {
            ("South Africa", "Western Cape"): ["Cape Town", "George", "Paarl", "Stellenbosch"],
            ("South Africa", "Gauteng"): ["Johannesburg", "Pretoria"],
        }
        self.failing = set(failing)
        self.calls = []

    async def fetch_countries(self):
        self.calls.append(("countries",))
        await asyncio.sleep(0)
        if "countries" in self.failing:
            raise GeographyRequestError("Request failed (503)", status_code=503)
        return list(self.countries)

    async def fetch_provinces(self, country_name):
        self.calls.append(("provinces", country_name))
        await asyncio.sleep(0)
        if "provinces" in self.failing:
            raise GeographyRequestError("Request timed out after 10s", kind=GeographyRequestError.TIMEOUT)
        return list(self.provinces.get(country_name, []))

    async def fetch_cities(self, country_name, province_name):
        self.calls.append(("cities", country_name, province_name))
        await asyncio.sleep(0)
        if "cities" in self.failing:
            raise GeographyRequestError("Request failed (500)", status_code=500)
        return list(self.cities.get((country_name, province_name), []))

    def count(self, kind):
        return len([call for call in self.calls if call[0] == kind])
