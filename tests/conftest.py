"""
Pytest configuration and shared fixtures for the playlist importer tests.
"""

import pytest

from unittest.mock import AsyncMock, Mock

from playlist_import.models.track import CatalogSearchResult, CatalogTrack, ImportedTrack
from playlist_import.models.playlist import PlaylistPayload
from playlist_import.services.playlist_store import JsonPlaylistStore


def make_catalog_track(track_id: str = "cat_1", title: str = "Test Song",
                       artist: str = "Test Artist", cover_art: str = "https://img.example/1.jpg") -> CatalogTrack:
    return CatalogTrack(
        id=track_id,
        title=title,
        artist=artist,
        artist_id="artist_1",
        album="Test Album",
        album_id="album_1",
        duration=180,
        cover_art=cover_art
    )


def make_searcher(source: str, result=None, side_effect=None) -> Mock:
    """Catalog searcher double with a ``source`` tag and async ``search_tracks``."""
    searcher = Mock()
    searcher.source = source
    searcher.search_tracks = AsyncMock(return_value=result, side_effect=side_effect)
    return searcher


@pytest.fixture
def sample_imported_track():
    """Sample imported track for testing."""
    return ImportedTrack(title="Test Song", artist="Test Artist", album="Test Album", duration=180)


@pytest.fixture
def sample_payload():
    """Sample fetched playlist with three tracks."""
    return PlaylistPayload(
        name="Road Trip",
        tracks=[
            ImportedTrack(title="First Song", artist="Artist A", album="Album A", duration=200),
            ImportedTrack(title="Second Song", artist="Artist B", duration=210),
            ImportedTrack(title="Third Song", artist="Artist C"),
        ]
    )


@pytest.fixture
def sample_catalog_track():
    """Sample catalog search hit."""
    return make_catalog_track()


@pytest.fixture
def playlist_store(tmp_path):
    """JSON playlist store rooted in a temporary directory."""
    return JsonPlaylistStore(str(tmp_path / "playlists"))


@pytest.fixture
def mock_qobuz_client(sample_catalog_track):
    """High-trust catalog backend that always finds a track."""
    return make_searcher("qobuz", CatalogSearchResult(tracks=[sample_catalog_track]))


@pytest.fixture
def mock_tidal_client():
    """Fallback catalog backend that never finds anything."""
    return make_searcher("tidal", CatalogSearchResult(tracks=[]))
