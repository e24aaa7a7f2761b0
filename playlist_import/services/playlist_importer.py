"""
Playlist import service.
Drives classify -> fetch -> match -> save for one share URL and reports
progress along the way. Failures are returned inside ImportResult.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Tuple, Union

from config.settings import Settings
from playlist_import.api.apple_music_client import AppleMusicClient
from playlist_import.api.catalog_client import CatalogClient, QOBUZ, TIDAL
from playlist_import.api.spotify_client import SpotifyClient
from playlist_import.api.youtube_client import YouTubeClient
from playlist_import.models.import_result import ImportProgress, ImportResult, ImportStage
from playlist_import.models.playlist import ImportSource, PlaylistPayload
from playlist_import.models.track import ImportedTrack, MatchedTrack
from playlist_import.services.playlist_store import JsonPlaylistStore, PlaylistStore
from playlist_import.services.track_matcher import TrackMatcher
from playlist_import.utils.cache_manager import CacheManager
from playlist_import.utils.url_parser import (
    AppleMusicPlaylistRef,
    Platform,
    detect_platform,
    parse_apple_music_url,
    parse_spotify_url,
    parse_youtube_music_url
)

logger = logging.getLogger(__name__)

UNSUPPORTED_URL_ERROR = "Unsupported URL. Please use a Spotify, Apple Music, or YouTube Music playlist link."
FETCH_FAILED_ERROR = "Could not fetch playlist. Make sure it's a public playlist."
NO_MATCHES_ERROR = "Could not match any tracks. Try a different playlist."

INVALID_URL_ERRORS = {
    Platform.SPOTIFY: "Invalid Spotify playlist URL",
    Platform.APPLE: "Invalid Apple Music playlist URL",
    Platform.YOUTUBE: "Invalid YouTube Music playlist URL",
}

ProgressCallback = Callable[[ImportProgress], None]
FetchCall = Callable[[], Awaitable[Optional[PlaylistPayload]]]


def parse_playlist_ref(platform: Platform, url: str) -> Optional[Union[str, AppleMusicPlaylistRef]]:
    """Extract the platform's playlist reference from a URL, or None."""
    if platform == Platform.SPOTIFY:
        return parse_spotify_url(url)
    if platform == Platform.APPLE:
        return parse_apple_music_url(url)
    if platform == Platform.YOUTUBE:
        return parse_youtube_music_url(url)
    return None


def fetching_progress(platform: Platform) -> ImportProgress:
    return ImportProgress(stage=ImportStage.FETCHING, current=0, total=0,
                          message=f"Fetching playlist from {platform.value}...")


class PlaylistImportService:
    """Imports a playlist from a share URL into the local playlist store."""

    def __init__(
        self,
        spotify_client: SpotifyClient,
        apple_music_client: AppleMusicClient,
        youtube_client: YouTubeClient,
        track_matcher: TrackMatcher,
        playlist_store: PlaylistStore,
        match_delay: float = 0.2,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        cache_manager: Optional[CacheManager] = None
    ):
        """
        Initialize the import service.

        Args:
            spotify_client: Fetcher for Spotify playlists
            apple_music_client: Fetcher for Apple Music playlists
            youtube_client: Fetcher for YouTube Music playlists
            track_matcher: Resolves imported tracks against the catalog
            playlist_store: Persistence for the resulting playlist
            match_delay: Pause in seconds between two track matches
            sleep: Coroutine used for the pause (replaced in tests)
            cache_manager: Cache shared by the catalog clients, closed on exit
        """
        self.spotify_client = spotify_client
        self.apple_music_client = apple_music_client
        self.youtube_client = youtube_client
        self.track_matcher = track_matcher
        self.playlist_store = playlist_store
        self.match_delay = match_delay
        self.sleep = sleep
        self.cache_manager = cache_manager
        self._closeables = []

    @classmethod
    def from_settings(cls, settings: Settings) -> 'PlaylistImportService':
        """Build the service and its HTTP clients from application settings."""
        settings.validate()
        cache_manager = CacheManager(settings.REDIS_URL) if settings.REDIS_URL else None

        spotify_client = SpotifyClient(
            metadata_url=settings.spotifydown.base_url,
            scraper_url=settings.spotify_scraper.base_url,
            embed_url=settings.spotify_embed.base_url,
            rapidapi_key=settings.RAPIDAPI_KEY,
            rate_limit=settings.spotifydown.rate_limit_per_minute,
            timeout=settings.spotifydown.timeout
        )
        apple_music_client = AppleMusicClient(
            base_url=settings.apple_music.base_url,
            rate_limit=settings.apple_music.rate_limit_per_minute,
            timeout=settings.apple_music.timeout
        )
        youtube_client = YouTubeClient(
            instances=settings.INVIDIOUS_INSTANCES,
            rate_limit=settings.invidious.rate_limit_per_minute,
            timeout=settings.invidious.timeout
        )
        qobuz_client = CatalogClient(
            QOBUZ,
            settings.qobuz.base_url,
            rate_limit=settings.qobuz.rate_limit_per_minute,
            cache_manager=cache_manager,
            cache_ttl=settings.cache.search_ttl,
            timeout=settings.qobuz.timeout
        )
        tidal_client = CatalogClient(
            TIDAL,
            settings.tidal.base_url,
            rate_limit=settings.tidal.rate_limit_per_minute,
            cache_manager=cache_manager,
            cache_ttl=settings.cache.search_ttl,
            timeout=settings.tidal.timeout
        )

        service = cls(
            spotify_client=spotify_client,
            apple_music_client=apple_music_client,
            youtube_client=youtube_client,
            track_matcher=TrackMatcher(high_trust=qobuz_client, fallback=tidal_client),
            playlist_store=JsonPlaylistStore(settings.playlist_storage_dir),
            match_delay=settings.match_delay_seconds,
            cache_manager=cache_manager
        )
        service._closeables = [spotify_client, apple_music_client, youtube_client, qobuz_client, tidal_client]
        return service

    async def __aenter__(self):
        """Async context manager entry."""
        if self.cache_manager:
            await self.cache_manager.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        for client in self._closeables:
            await client.close()
        if self.cache_manager:
            await self.cache_manager.close()

    def _resolve_source(self, platform: Platform, url: str) -> Tuple[Optional[str], Optional[FetchCall], str]:
        """
        Parse the platform identifier and bind the matching fetcher.

        Returns:
            (original_id, fetch call, platform error); the first two are None
            when the URL does not carry a valid identifier
        """
        ref = parse_playlist_ref(platform, url)
        if not ref:
            return None, None, INVALID_URL_ERRORS[platform]

        if platform == Platform.SPOTIFY:
            return ref, lambda: self.spotify_client.fetch_playlist(ref), ""
        if platform == Platform.APPLE:
            return ref.id, lambda: self.apple_music_client.fetch_playlist(ref.storefront, ref.id), ""
        return ref, lambda: self.youtube_client.fetch_playlist(ref), ""

    async def import_playlist(self, url: str, on_progress: Optional[ProgressCallback] = None) -> ImportResult:
        """
        Import a playlist from a share URL.

        Args:
            url: Spotify, Apple Music or YouTube Music playlist link
            on_progress: Optional callback receiving ImportProgress events

        Returns:
            ImportResult; ``success`` is True only when at least one track
            matched and the playlist was saved
        """
        def report(stage: ImportStage, current: int, total: int, message: str):
            if on_progress:
                on_progress(ImportProgress(stage=stage, current=current, total=total, message=message))

        platform = detect_platform(url)
        if platform == Platform.UNKNOWN:
            return ImportResult.failure(UNSUPPORTED_URL_ERROR)

        if on_progress:
            on_progress(fetching_progress(platform))

        original_id, fetch, invalid_url_error = self._resolve_source(platform, url)
        if fetch is None:
            return ImportResult.failure(invalid_url_error)

        payload = await fetch()
        if not payload or not payload.tracks:
            return ImportResult.failure(FETCH_FAILED_ERROR)

        total = len(payload.tracks)
        logger.info(f"Fetched '{payload.name}' from {platform.value} with {total} tracks")

        matched, unmatched = await self._match_tracks(payload.tracks, report)

        if not matched:
            return ImportResult.failure(NO_MATCHES_ERROR, total_tracks=total, unmatched_tracks=unmatched)

        report(ImportStage.SAVING, 0, 0, "Saving playlist...")

        playlist = await self.playlist_store.create_playlist(payload.name)
        playlist.tracks = matched
        playlist.cover_art = matched[0].cover_art or None
        playlist.import_source = ImportSource(
            platform=platform.value,
            original_id=original_id,
            original_name=payload.name
        )
        await self.playlist_store.update_playlist(playlist)

        report(ImportStage.DONE, len(matched), total, "Import complete!")
        logger.info(f"Imported '{payload.name}': {len(matched)}/{total} tracks matched")

        return ImportResult(
            success=True,
            playlist=playlist,
            total_tracks=total,
            matched_tracks=len(matched),
            unmatched_tracks=unmatched
        )

    async def _match_tracks(self, tracks: List[ImportedTrack],
                            report: Callable[..., None]) -> Tuple[List[MatchedTrack], List[ImportedTrack]]:
        """Match tracks one at a time, pausing between consecutive matches."""
        matched: List[MatchedTrack] = []
        unmatched: List[ImportedTrack] = []
        total = len(tracks)

        for index, track in enumerate(tracks, start=1):
            report(ImportStage.MATCHING, index, total, f"Matching: {track.title}")

            result = await self.track_matcher.match_track(track)
            if result:
                matched.append(result)
            else:
                unmatched.append(track)

            if index < total:
                await self.sleep(self.match_delay)

        return matched, unmatched


async def import_playlist(url: str, on_progress: Optional[ProgressCallback] = None,
                          settings: Optional[Settings] = None) -> ImportResult:
    """
    Import a playlist using clients configured from settings.

    URLs that cannot be imported are rejected before any client is built,
    so they fail the same way whether or not the catalog is configured.

    Raises:
        ValueError: If the catalog backends are not configured
    """
    platform = detect_platform(url)
    if platform == Platform.UNKNOWN:
        return ImportResult.failure(UNSUPPORTED_URL_ERROR)
    if not parse_playlist_ref(platform, url):
        if on_progress:
            on_progress(fetching_progress(platform))
        return ImportResult.failure(INVALID_URL_ERRORS[platform])

    async with PlaylistImportService.from_settings(settings or Settings()) as service:
        return await service.import_playlist(url, on_progress)
