"""Core services for importing playlists."""

from .track_matcher import TrackMatcher, HIGH_TRUST_CONFIDENCE, FALLBACK_CONFIDENCE
from .playlist_store import PlaylistStore, JsonPlaylistStore
from .playlist_importer import PlaylistImportService, import_playlist

__all__ = [
    'TrackMatcher',
    'HIGH_TRUST_CONFIDENCE',
    'FALLBACK_CONFIDENCE',
    'PlaylistStore',
    'JsonPlaylistStore',
    'PlaylistImportService',
    'import_playlist'
]
