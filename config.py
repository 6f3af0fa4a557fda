"""
Configuration settings for the Location Resolver
"""
import os

class Settings:
    # Geography API
    GEO_API_BASE_URL: str = os.getenv("GEO_API_BASE_URL", "https://countriesnow.space/api/v0.1")
    GEO_API_TIMEOUT: float = float(os.getenv("GEO_API_TIMEOUT", "10"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Service
    SERVICE_NAME: str = "Location Resolver"
    SERVICE_VERSION: str = "1.0"

    # User-facing messages per step
    COUNTRIES_ERROR: str = "Unable to load countries right now."
    PROVINCES_ERROR: str = "Unable to load provinces right now."
    CITIES_ERROR: str = "Unable to load cities right now."
    FALLBACK_ADVISORY: str = "Unable to reach the full list right now. Showing a limited set for now."

# Create settings instance
settings = Settings()

def validate_config():
    """Check if configuration is valid"""
    if not settings.GEO_API_BASE_URL.startswith(("http://", "https://")):
        print(f"⚠️  WARNING: GEO_API_BASE_URL is not an http(s) URL: {settings.GEO_API_BASE_URL}")
        return False
    if settings.GEO_API_TIMEOUT <= 0:
        print("⚠️  WARNING: GEO_API_TIMEOUT must be positive")
        return False
    return True
