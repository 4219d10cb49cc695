"""Best-effort enrichment providers for artist detail pages.

    - LastfmListenerProvider   : listener counts (requires LASTFM_API_KEY)
    - WikipediaSummaryProvider : English Wikipedia extract + page URL
"""

from src.providers.enrichment.lastfm_provider import LastfmListenerProvider
from src.providers.enrichment.wikipedia_provider import WikipediaSummaryProvider

__all__ = ["LastfmListenerProvider", "WikipediaSummaryProvider"]
