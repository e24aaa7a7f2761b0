"""Import playlists from Spotify, Apple Music and YouTube Music into a local library."""

from playlist_import.services.playlist_importer import PlaylistImportService, import_playlist
from playlist_import.utils.url_parser import (
    Platform,
    detect_platform,
    parse_spotify_url,
    parse_apple_music_url,
    parse_youtube_music_url
)

__all__ = [
    'PlaylistImportService',
    'import_playlist',
    'Platform',
    'detect_platform',
    'parse_spotify_url',
    'parse_apple_music_url',
    'parse_youtube_music_url'
]
