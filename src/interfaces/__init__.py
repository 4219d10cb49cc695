"""Public interface definitions for every upstream the application calls.

Services depend only on these abstract base classes; the concrete adapters
live in ``src/providers/`` and are wired together in ``src/main.py``.

CONCRETE PROVIDER MAP:
    Interface               ->  Concrete implementations (in src/providers/)
    ---------------------------------------------------------------------
    IArtistProvider         ->  GroupieProvider, SpotifyProvider,
                                DeezerProvider, ITunesProvider
    IListenerCountProvider  ->  LastfmListenerProvider
    ISummaryProvider        ->  WikipediaSummaryProvider
    IGeocodingProvider      ->  OpenMeteoGeocoder, NominatimGeocoder
    ICacheProvider          ->  MemoryCacheProvider
"""

from src.interfaces.artist_provider import IArtistProvider
from src.interfaces.cache_provider import ICacheProvider
from src.interfaces.enrichment_provider import IListenerCountProvider, ISummaryProvider
from src.interfaces.geocoding_provider import IGeocodingProvider

__all__ = [
    "IArtistProvider",
    "ICacheProvider",
    "IGeocodingProvider",
    "IListenerCountProvider",
    "ISummaryProvider",
]
