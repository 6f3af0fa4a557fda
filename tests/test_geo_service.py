"""
Bundled fallback provinces.
"""

from models import FallbackRecord
from services.geo_service import FallbackGeographyStore


class TestFallbackGeographyStore:

    def setup_method(self):
        self.store = FallbackGeographyStore([
            FallbackRecord(country="Namibia", provinces=["Khomas", "Erongo"]),
        ])

    def test_lookup_ignores_case_and_whitespace(self):
        assert self.store.get_provinces("Namibia") == ["Khomas", "Erongo"]
        assert self.store.get_provinces(" NAMIBIA ") == ["Khomas", "Erongo"]

    def test_unknown_country_is_empty(self):
        assert self.store.get_provinces("Atlantis") == []
        assert self.store.get_provinces(None) == []

    def test_callers_get_a_copy(self):
        provinces = self.store.get_provinces("Namibia")
        provinces.append("Oshana")
        assert self.store.get_provinces("Namibia") == ["Khomas", "Erongo"]

    def test_bundled_table(self):
        store = FallbackGeographyStore()
        assert "Western Cape" in store.get_provinces("south africa")
        assert store.get_provinces("United Kingdom") == ["England", "Scotland", "Wales", "Northern Ireland"]
