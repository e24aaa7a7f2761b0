"""
Share URL classification and playlist identifier extraction.
All functions are pure: no network access and no exceptions.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Platform(str, Enum):
    """Source platforms a playlist can be imported from."""
    SPOTIFY = "spotify"
    APPLE = "apple"
    YOUTUBE = "youtube"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return PLATFORM_DISPLAY_NAMES[self]


PLATFORM_DISPLAY_NAMES = {
    Platform.SPOTIFY: "Spotify",
    Platform.APPLE: "Apple Music",
    Platform.YOUTUBE: "YouTube Music",
    Platform.UNKNOWN: "Unknown"
}

# Checked in order; the first platform with a matching substring wins.
PLATFORM_DOMAINS = (
    (Platform.SPOTIFY, ("spotify.com", "spotify.link")),
    (Platform.APPLE, ("music.apple.com", "itunes.apple.com")),
    (Platform.YOUTUBE, ("music.youtube.com", "youtube.com/playlist")),
)

SPOTIFY_PLAYLIST_PATTERN = re.compile(r'playlist/([a-zA-Z0-9]+)')
APPLE_MUSIC_PLAYLIST_PATTERN = re.compile(
    r'music\.apple\.com/([a-z]{2})/playlist/[^/]+/(pl\.[a-zA-Z0-9]+)'
)
YOUTUBE_PLAYLIST_PATTERN = re.compile(r'[?&]list=([a-zA-Z0-9_-]+)')


@dataclass(frozen=True)
class AppleMusicPlaylistRef:
    """Apple Music playlist identifier together with its storefront."""
    storefront: str
    id: str


def detect_platform(url: str) -> Platform:
    """Detect the source platform of a share URL (case-insensitive)."""
    lower_url = url.lower()
    for platform, domains in PLATFORM_DOMAINS:
        if any(domain in lower_url for domain in domains):
            return platform
    return Platform.UNKNOWN


def parse_spotify_url(url: str) -> Optional[str]:
    """
    Extract the playlist ID from a Spotify URL.

    Handles https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M style links.
    """
    match = SPOTIFY_PLAYLIST_PATTERN.search(url)
    if match:
        return match.group(1)
    return None


def parse_apple_music_url(url: str) -> Optional[AppleMusicPlaylistRef]:
    """
    Extract storefront and playlist ID from an Apple Music URL.

    Format: https://music.apple.com/us/playlist/playlist-name/pl.abc123
    The storefront must be a two letter lowercase country code.
    """
    match = APPLE_MUSIC_PLAYLIST_PATTERN.search(url)
    if match:
        return AppleMusicPlaylistRef(storefront=match.group(1), id=match.group(2))
    return None


def parse_youtube_music_url(url: str) -> Optional[str]:
    """Extract the ``list`` parameter from a YouTube Music playlist URL."""
    match = YOUTUBE_PLAYLIST_PATTERN.search(url)
    if match:
        return match.group(1)
    return None
