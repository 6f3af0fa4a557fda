# services/__init__.py
"""
Services package for the Location Resolver
"""

from .geo_client import GeographyClient, GeographyRequestError
from .location_resolver import LocationResolver

__all__ = ['GeographyClient', 'GeographyRequestError', 'LocationResolver']
