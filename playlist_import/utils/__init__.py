"""Utility modules for the playlist importer."""

from .cache_manager import CacheManager
from .rate_limiter import RateLimiter
from .fallback import Attempt, FetchFailure, FetchResult, FallbackOutcome, first_success
from .url_parser import (
    Platform,
    AppleMusicPlaylistRef,
    detect_platform,
    parse_spotify_url,
    parse_apple_music_url,
    parse_youtube_music_url
)

__all__ = [
    'CacheManager',
    'RateLimiter',
    'Attempt',
    'FetchFailure',
    'FetchResult',
    'FallbackOutcome',
    'first_success',
    'Platform',
    'AppleMusicPlaylistRef',
    'detect_platform',
    'parse_spotify_url',
    'parse_apple_music_url',
    'parse_youtube_music_url'
]
