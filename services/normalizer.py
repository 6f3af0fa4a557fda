"""
Name normalization, cache keys and search filtering
"""
from typing import List, Optional

COUNTRIES_KEY = "countries"


def normalize(name: Optional[str]) -> str:
    """Trim and lower-case a name; None becomes an empty string"""
    if name is None:
        return ""
    return str(name).strip().lower()


def provinces_key(country_name: str) -> str:
    return f"provinces:{normalize(country_name)}"


def cities_key(country_name: str, province_name: str) -> str:
    return f"cities:{normalize(country_name)}::{normalize(province_name)}"


def same_name(left: Optional[str], right: Optional[str]) -> bool:
    return normalize(left) == normalize(right)


def filter_candidates(candidates: List[str], query: Optional[str]) -> List[str]:
    """
    Keep candidates whose label contains the query, ignoring case.
    A blank query keeps everything.
    """
    needle = normalize(query)
    if not needle:
        return list(candidates)
    return [label for label in candidates if needle in label.lower()]
