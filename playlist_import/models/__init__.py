"""Data models for the playlist importer."""

from .track import ImportedTrack, CatalogTrack, CatalogSearchResult, MatchedTrack
from .playlist import PlaylistPayload, ImportSource, UserPlaylist
from .import_result import ImportStage, ImportProgress, ImportResult

__all__ = [
    'ImportedTrack',
    'CatalogTrack',
    'CatalogSearchResult',
    'MatchedTrack',
    'PlaylistPayload',
    'ImportSource',
    'UserPlaylist',
    'ImportStage',
    'ImportProgress',
    'ImportResult'
]
