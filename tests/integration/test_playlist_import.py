#!/usr/bin/env python3
"""
Integration tests for the import pipeline.
Fetchers and catalog backends are doubles; the JSON store is real.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, Mock, call
from conftest import make_catalog_track, make_searcher
from config.settings import Settings
from playlist_import.models.import_result import ImportStage
from playlist_import.models.playlist import PlaylistPayload
from playlist_import.models.track import CatalogSearchResult, ImportedTrack
from playlist_import.services.playlist_importer import (
    FETCH_FAILED_ERROR,
    NO_MATCHES_ERROR,
    UNSUPPORTED_URL_ERROR,
    PlaylistImportService,
    import_playlist
)
from playlist_import.services.track_matcher import TrackMatcher

SPOTIFY_URL = "https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M"
APPLE_URL = "https://music.apple.com/us/playlist/foo/pl.abc123"
YOUTUBE_URL = "https://music.youtube.com/playlist?list=PLxyz"


def make_fetcher(payload=None) -> Mock:
    fetcher = Mock()
    fetcher.fetch_playlist = AsyncMock(return_value=payload)
    return fetcher


class TestPlaylistImport:
    """Integration tests for PlaylistImportService."""

    def build_service(self, playlist_store, payload=None, high_trust=None, fallback=None, sleep=None):
        self.spotify = make_fetcher(payload)
        self.apple = make_fetcher(payload)
        self.youtube = make_fetcher(payload)
        self.sleep = sleep or AsyncMock()
        self.events = []
        matcher = TrackMatcher(
            high_trust=high_trust or make_searcher("qobuz", CatalogSearchResult(tracks=[make_catalog_track()])),
            fallback=fallback or make_searcher("tidal", CatalogSearchResult(tracks=[]))
        )
        return PlaylistImportService(
            spotify_client=self.spotify,
            apple_music_client=self.apple,
            youtube_client=self.youtube,
            track_matcher=matcher,
            playlist_store=playlist_store,
            match_delay=0.2,
            sleep=self.sleep
        )

    @pytest.mark.asyncio
    async def test_all_tracks_match_high_trust(self, playlist_store, sample_payload):
        """Test a fully matched playlist is saved with provenance."""
        service = self.build_service(playlist_store, sample_payload)

        result = await service.import_playlist(SPOTIFY_URL, self.events.append)

        assert result.success
        assert result.error is None
        assert result.total_tracks == 3
        assert result.matched_tracks == 3
        assert result.unmatched_tracks == []
        assert all(t.match_confidence == 90 for t in result.playlist.tracks)
        assert result.playlist.name == "Road Trip"
        assert result.playlist.import_source.platform == "spotify"
        assert result.playlist.import_source.original_id == "37i9dQZF1DXcBWIGoYBM5M"
        assert result.playlist.import_source.original_name == "Road Trip"
        self.spotify.fetch_playlist.assert_awaited_once_with("37i9dQZF1DXcBWIGoYBM5M")

        stored = await playlist_store.get_playlist(result.playlist.id)
        assert stored.track_count == 3
        assert stored.import_source.platform == "spotify"

    @pytest.mark.asyncio
    async def test_progress_events(self, playlist_store, sample_payload):
        """Test progress is reported once per track in order, then saving and done."""
        service = self.build_service(playlist_store, sample_payload)

        await service.import_playlist(SPOTIFY_URL, self.events.append)

        stages = [event.stage for event in self.events]
        assert stages == [
            ImportStage.FETCHING,
            ImportStage.MATCHING, ImportStage.MATCHING, ImportStage.MATCHING,
            ImportStage.SAVING,
            ImportStage.DONE,
        ]
        matching = [e for e in self.events if e.stage == ImportStage.MATCHING]
        assert [e.current for e in matching] == [1, 2, 3]
        assert all(e.total == 3 for e in matching)
        assert matching[0].message == "Matching: First Song"
        done = self.events[-1]
        assert (done.current, done.total) == (3, 3)
        assert ImportStage.ERROR not in stages

    @pytest.mark.asyncio
    async def test_delay_between_tracks_only(self, playlist_store, sample_payload):
        """Test the pause runs between matches but not after the last one."""
        service = self.build_service(playlist_store, sample_payload)

        await service.import_playlist(SPOTIFY_URL)

        assert self.sleep.await_args_list == [call(0.2), call(0.2)]

    @pytest.mark.asyncio
    async def test_matching_is_sequential(self, playlist_store, sample_payload):
        """Test each match finishes, including its pause, before the next starts."""
        log = []

        async def search(query):
            log.append(f"search:{query}")
            return CatalogSearchResult(tracks=[make_catalog_track()])

        async def sleep(seconds):
            log.append("sleep")

        high_trust = Mock()
        high_trust.source = "qobuz"
        high_trust.search_tracks = search
        service = self.build_service(playlist_store, sample_payload, high_trust=high_trust, sleep=sleep)

        await service.import_playlist(SPOTIFY_URL)

        assert log == [
            "search:First Song Artist A", "sleep",
            "search:Second Song Artist B", "sleep",
            "search:Third Song Artist C",
        ]

    @pytest.mark.asyncio
    async def test_partial_match_with_fallback(self, playlist_store, sample_payload):
        """Test fallback matches get confidence 85 and misses are kept in order."""
        async def qobuz_search(query):
            if query.startswith("First"):
                return CatalogSearchResult(tracks=[make_catalog_track("q1", cover_art=None)])
            return CatalogSearchResult(tracks=[])

        async def tidal_search(query):
            if query.startswith("Second"):
                return CatalogSearchResult(tracks=[make_catalog_track("t2")])
            raise ConnectionError("tidal down")

        qobuz, tidal = Mock(), Mock()
        qobuz.source, qobuz.search_tracks = "qobuz", qobuz_search
        tidal.source, tidal.search_tracks = "tidal", tidal_search
        service = self.build_service(playlist_store, sample_payload, high_trust=qobuz, fallback=tidal)

        result = await service.import_playlist(SPOTIFY_URL)

        assert result.success
        assert result.matched_tracks == 2
        assert [(t.id, t.source, t.match_confidence) for t in result.playlist.tracks] == [
            ("q1", "qobuz", 90),
            ("t2", "tidal", 85),
        ]
        assert [t.title for t in result.unmatched_tracks] == ["Third Song"]
        # First matched track has no cover art, so the playlist has none
        assert result.playlist.cover_art is None

    @pytest.mark.asyncio
    async def test_cover_art_from_first_match(self, playlist_store, sample_payload):
        service = self.build_service(playlist_store, sample_payload)

        result = await service.import_playlist(SPOTIFY_URL)

        assert result.playlist.cover_art == "https://img.example/1.jpg"

    @pytest.mark.asyncio
    async def test_no_tracks_matched(self, playlist_store, sample_payload):
        """Test zero matches fails without saving, reporting every track as unmatched."""
        service = self.build_service(
            playlist_store, sample_payload,
            high_trust=make_searcher("qobuz", CatalogSearchResult(tracks=[])),
            fallback=make_searcher("tidal", None)
        )

        result = await service.import_playlist(YOUTUBE_URL, self.events.append)

        assert not result.success
        assert result.error == NO_MATCHES_ERROR
        assert result.matched_tracks == 0
        assert result.total_tracks == 3
        assert result.unmatched_tracks == sample_payload.tracks
        assert await playlist_store.list_playlists() == []
        assert ImportStage.SAVING not in [e.stage for e in self.events]

    @pytest.mark.asyncio
    async def test_unsupported_url(self, playlist_store):
        """Test unknown URLs fail before any progress event."""
        service = self.build_service(playlist_store)

        result = await service.import_playlist("https://soundcloud.com/sets/x", self.events.append)

        assert not result.success
        assert result.error == UNSUPPORTED_URL_ERROR
        assert result.total_tracks == 0
        assert self.events == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url,error", [
        ("https://open.spotify.com/album/123", "Invalid Spotify playlist URL"),
        ("https://music.apple.com/usa/playlist/foo/pl.abc", "Invalid Apple Music playlist URL"),
        ("https://music.youtube.com/playlist", "Invalid YouTube Music playlist URL"),
    ])
    async def test_invalid_platform_url(self, playlist_store, url, error):
        service = self.build_service(playlist_store)

        result = await service.import_playlist(url, self.events.append)

        assert not result.success
        assert result.error == error
        assert [e.stage for e in self.events] == [ImportStage.FETCHING]
        self.spotify.fetch_playlist.assert_not_awaited()
        self.apple.fetch_playlist.assert_not_awaited()
        self.youtube.fetch_playlist.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, PlaylistPayload(name="Empty", tracks=[])])
    async def test_fetch_failed(self, playlist_store, payload):
        """Test a missing or empty fetch result gives the generic fetch error."""
        service = self.build_service(playlist_store, payload)

        result = await service.import_playlist(APPLE_URL)

        assert not result.success
        assert result.error == FETCH_FAILED_ERROR
        assert result.total_tracks == 0
        assert result.unmatched_tracks == []
        self.apple.fetch_playlist.assert_awaited_once_with("us", "pl.abc123")

    @pytest.mark.asyncio
    async def test_dispatch_to_youtube(self, playlist_store):
        payload = PlaylistPayload(name="Mixtape", tracks=[ImportedTrack(title="Video", artist="Channel")])
        service = self.build_service(playlist_store, payload)

        result = await service.import_playlist(YOUTUBE_URL)

        assert result.success
        assert result.playlist.import_source.platform == "youtube"
        assert result.playlist.import_source.original_id == "PLxyz"
        self.youtube.fetch_playlist.assert_awaited_once_with("PLxyz")
        self.sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, sample_payload):
        """Test storage errors are left to the caller."""
        store = Mock()
        store.create_playlist = AsyncMock(side_effect=OSError("disk full"))
        service = self.build_service(store, sample_payload)

        with pytest.raises(OSError):
            await service.import_playlist(SPOTIFY_URL)

    @pytest.mark.asyncio
    async def test_concurrent_imports_are_independent(self, playlist_store, sample_payload):
        service = self.build_service(playlist_store, sample_payload)

        first, second = await asyncio.gather(
            service.import_playlist(SPOTIFY_URL),
            service.import_playlist(SPOTIFY_URL)
        )

        assert first.matched_tracks == second.matched_tracks == 3
        assert first.playlist.id != second.playlist.id


class TestImportEntryPoint:
    """Tests for the settings driven import_playlist function."""

    @pytest.fixture
    def unconfigured_settings(self, monkeypatch):
        monkeypatch.delenv("QOBUZ_SEARCH_URL", raising=False)
        monkeypatch.delenv("TIDAL_SEARCH_URL", raising=False)
        return Settings()

    @pytest.mark.asyncio
    async def test_unsupported_url_without_catalog_configuration(self, unconfigured_settings):
        """Test an unknown URL is rejected before any client is built."""
        events = []

        result = await import_playlist("https://soundcloud.com/x", events.append, settings=unconfigured_settings)

        assert not result.success
        assert result.error == UNSUPPORTED_URL_ERROR
        assert events == []

    @pytest.mark.asyncio
    async def test_invalid_platform_url_without_catalog_configuration(self, unconfigured_settings):
        events = []

        result = await import_playlist(
            "https://open.spotify.com/album/123", events.append, settings=unconfigured_settings
        )

        assert result.error == "Invalid Spotify playlist URL"
        assert [e.stage for e in events] == [ImportStage.FETCHING]

    @pytest.mark.asyncio
    async def test_valid_url_requires_catalog_configuration(self, unconfigured_settings):
        with pytest.raises(ValueError, match="QOBUZ_SEARCH_URL"):
            await import_playlist(SPOTIFY_URL, settings=unconfigured_settings)
