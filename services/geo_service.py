"""
Bundled province data used when the geography API is unreachable
"""
import logging
from typing import Dict, Iterable, List, Optional
from models import FallbackRecord
from services.normalizer import normalize

logger = logging.getLogger(__name__)

# Provinces for the countries the app launched in
DEFAULT_FALLBACK_RECORDS = [
    FallbackRecord(
        country="South Africa",
        provinces=['Gauteng', 'Western Cape', 'KwaZulu-Natal', 'Eastern Cape', 'Free State',
                   'Limpopo', 'Mpumalanga', 'Northern Cape', 'North West'],
    ),
    FallbackRecord(
        country="United States",
        provinces=['California', 'Texas', 'Florida', 'New York', 'Pennsylvania',
                   'Illinois', 'Ohio', 'Georgia', 'North Carolina', 'Michigan'],
    ),
    FallbackRecord(
        country="United Kingdom",
        provinces=['England', 'Scotland', 'Wales', 'Northern Ireland'],
    ),
    FallbackRecord(
        country="Nigeria",
        provinces=['Lagos', 'Kano', 'Rivers', 'Oyo', 'Kaduna', 'Abuja'],
    ),
    FallbackRecord(
        country="Kenya",
        provinces=['Nairobi', 'Mombasa', 'Kisumu', 'Nakuru', 'Eldoret'],
    ),
]


class FallbackGeographyStore:
    """Static province table that always answers, possibly with nothing"""

    def __init__(self, records: Optional[Iterable[FallbackRecord]] = None):
        if records is None:
            records = DEFAULT_FALLBACK_RECORDS
        self.province_data: Dict[str, List[str]] = {}
        for record in records:
            self.province_data[normalize(record.country)] = list(record.provinces)

    def get_provinces(self, country_name: Optional[str]) -> List[str]:
        """
        Provinces for a country, matched case-insensitively.
        Returns a fresh list so callers can't alter the table.
        """
        provinces = self.province_data.get(normalize(country_name), [])
        if not provinces:
            logger.debug(f"No fallback provinces for {country_name!r}")
        return list(provinces)
