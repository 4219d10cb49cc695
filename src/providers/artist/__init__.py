"""Artist-catalog provider implementations.

Four concrete implementations of IArtistProvider, selected per request by
the ``source`` parameter:

    1. GroupieProvider   : the fixed Groupie Trackers dataset (default source).
       Two whole-dataset documents cached for 10 minutes with stale fallback.
    2. SpotifyProvider   : Spotify Web API, client-credentials OAuth through
       SpotifyTokenManager (requires SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET).
    3. DeezerProvider    : public Deezer API.  Release dates come from a
       bounded per-album detail fan-out.
    4. ITunesProvider    : iTunes Search API.  Artist pictures are borrowed
       from each artist's latest album artwork.

All four return the same ArtistRecord / TrackRecord / ReleaseRecord views.
"""

from src.providers.artist.deezer_provider import DeezerProvider
from src.providers.artist.groupie_provider import GroupieProvider
from src.providers.artist.itunes_provider import ITunesProvider
from src.providers.artist.spotify_auth import SpotifyTokenManager
from src.providers.artist.spotify_provider import SpotifyProvider

__all__ = [
    "DeezerProvider",
    "GroupieProvider",
    "ITunesProvider",
    "SpotifyProvider",
    "SpotifyTokenManager",
]
