"""Forward geocoders chained by GeocodeResolver.

    1. OpenMeteoGeocoder : primary, fast and keyless, city-oriented.
    2. NominatimGeocoder : secondary, understands regions and US states.

Both reject candidates outside the requested country.
"""

from src.providers.geocoding.nominatim_provider import NominatimGeocoder
from src.providers.geocoding.open_meteo_provider import OpenMeteoGeocoder

__all__ = ["NominatimGeocoder", "OpenMeteoGeocoder"]
