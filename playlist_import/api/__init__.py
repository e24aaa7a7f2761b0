"""HTTP clients for source platforms and catalog backends."""

from .base_client import BaseAPIClient, APIError, RateLimitError, HTTPStatusError
from .spotify_client import SpotifyClient
from .apple_music_client import AppleMusicClient
from .youtube_client import YouTubeClient
from .catalog_client import CatalogClient, QOBUZ, TIDAL

__all__ = [
    'BaseAPIClient',
    'APIError',
    'RateLimitError',
    'HTTPStatusError',
    'SpotifyClient',
    'AppleMusicClient',
    'YouTubeClient',
    'CatalogClient',
    'QOBUZ',
    'TIDAL'
]
