"""
Spotify playlist fetcher.
Works without authentication by trying public surfaces in order: the
SpotifyDown metadata API, the RapidAPI Spotify scraper and finally the
inline data of the public embed page.
"""

import json
import logging
import re
from typing import Dict, Any, List, Optional

from playlist_import.api.base_client import BaseAPIClient, HTTPStatusError, BROWSER_USER_AGENT
from playlist_import.models.track import ImportedTrack
from playlist_import.models.playlist import PlaylistPayload
from playlist_import.utils.fallback import Attempt, FetchResult, FallbackOutcome, first_success

logger = logging.getLogger(__name__)

DEFAULT_PLAYLIST_NAME = "Spotify Playlist"
EMBED_DATA_PATTERN = re.compile(r'<script[^>]*>Spotify\s*=\s*(\{.*?\});</script>', re.DOTALL)


def _keep_complete(tracks: List[ImportedTrack]) -> List[ImportedTrack]:
    """Drop tracks without a title or an artist."""
    return [track for track in tracks if track.title and track.artist]


class SpotifyClient(BaseAPIClient):
    """Fetches public Spotify playlists through an ordered fallback chain."""

    def __init__(
        self,
        metadata_url: str = "https://api.spotifydown.com",
        scraper_url: str = "https://spotify-scraper.p.rapidapi.com",
        embed_url: str = "https://open.spotify.com",
        rapidapi_key: str = "demo",
        rate_limit: int = 60,
        timeout: int = 30
    ):
        """
        Initialize Spotify client.

        Args:
            metadata_url: Base URL of the SpotifyDown metadata API
            scraper_url: Base URL of the RapidAPI Spotify scraper
            embed_url: Host serving the public embed pages
            rapidapi_key: RapidAPI key for the scraper
        """
        super().__init__(rate_limit=rate_limit, timeout=timeout)
        self.metadata_url = metadata_url.rstrip("/")
        self.scraper_url = scraper_url.rstrip("/")
        self.embed_url = embed_url.rstrip("/")
        self.rapidapi_key = rapidapi_key
        self.last_outcome: Optional[FallbackOutcome[PlaylistPayload]] = None

    def _attempts(self, playlist_id: str) -> List[Attempt[PlaylistPayload]]:
        return [
            Attempt("spotifydown", lambda: self._fetch_from_metadata_api(playlist_id)),
            Attempt("rapidapi-scraper", lambda: self._fetch_from_scraper(playlist_id)),
            Attempt("embed-page", lambda: self._fetch_from_embed_page(playlist_id)),
        ]

    async def fetch_playlist(self, playlist_id: str) -> Optional[PlaylistPayload]:
        """
        Fetch a playlist's name and tracks.

        Args:
            playlist_id: Spotify playlist ID

        Returns:
            PlaylistPayload from the first strategy yielding tracks, or None
        """
        logger.info(f"Fetching Spotify playlist: {playlist_id}")
        self.last_outcome = await first_success(self._attempts(playlist_id), label="spotify")
        if self.last_outcome.value is None:
            logger.error(f"All Spotify methods failed for playlist: {playlist_id}")
        return self.last_outcome.value

    async def _fetch_from_metadata_api(self, playlist_id: str) -> FetchResult[PlaylistPayload]:
        """Strategy 1: SpotifyDown metadata endpoint with a ready track list."""
        try:
            data = await self._get_json(
                f"{self.metadata_url}/metadata/playlist/{playlist_id}",
                headers={
                    "Origin": "https://spotifydown.com",
                    "Referer": "https://spotifydown.com/",
                }
            )
        except HTTPStatusError as e:
            return FetchResult.fail("spotifydown", "request rejected", e.status)

        if not isinstance(data, dict) or not data.get("success") or not data.get("trackList"):
            return FetchResult.fail("spotifydown", "no track list in response")

        tracks = _keep_complete([self._normalize_metadata_track(t) for t in data["trackList"]])
        if not tracks:
            return FetchResult.fail("spotifydown", "no usable tracks")

        return FetchResult.success(PlaylistPayload(
            name=data.get("title") or DEFAULT_PLAYLIST_NAME,
            tracks=tracks
        ))

    async def _fetch_from_scraper(self, playlist_id: str) -> FetchResult[PlaylistPayload]:
        """Strategy 2: RapidAPI scraper returning playlist items."""
        try:
            data = await self._get_json(
                f"{self.scraper_url}/v1/playlist/tracks",
                params={"playlistId": playlist_id},
                headers={
                    "X-RapidAPI-Key": self.rapidapi_key,
                    "X-RapidAPI-Host": "spotify-scraper.p.rapidapi.com",
                }
            )
        except HTTPStatusError as e:
            return FetchResult.fail("rapidapi-scraper", "request rejected", e.status)

        items = (data.get("tracks") or {}).get("items") if isinstance(data, dict) else None
        if not items:
            return FetchResult.fail("rapidapi-scraper", "no track items in response")

        tracks = _keep_complete([self._normalize_scraper_item(item) for item in items])
        if not tracks:
            return FetchResult.fail("rapidapi-scraper", "no usable tracks")

        return FetchResult.success(PlaylistPayload(
            name=data.get("name") or DEFAULT_PLAYLIST_NAME,
            tracks=tracks
        ))

    async def _fetch_from_embed_page(self, playlist_id: str) -> FetchResult[PlaylistPayload]:
        """Strategy 3: parse the inline data of the public embed page."""
        try:
            html = await self._get_text(
                f"{self.embed_url}/embed/playlist/{playlist_id}",
                headers={"User-Agent": BROWSER_USER_AGENT}
            )
        except HTTPStatusError as e:
            return FetchResult.fail("embed-page", "request rejected", e.status)

        return self.parse_embed_html(html)

    @classmethod
    def parse_embed_html(cls, html: str) -> FetchResult[PlaylistPayload]:
        """Extract playlist data embedded in the page's inline script."""
        match = EMBED_DATA_PATTERN.search(html)
        if not match:
            return FetchResult.fail("embed-page", "no inline playlist data")

        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError:
            return FetchResult.fail("embed-page", "inline playlist data is not valid JSON")

        playlist = data.get("playlist") or {}
        if not playlist.get("tracks"):
            return FetchResult.fail("embed-page", "inline data has no tracks")

        tracks = _keep_complete([cls._normalize_embed_track(t) for t in playlist["tracks"]])
        if not tracks:
            return FetchResult.fail("embed-page", "no usable tracks")

        return FetchResult.success(PlaylistPayload(
            name=playlist.get("name") or DEFAULT_PLAYLIST_NAME,
            tracks=tracks
        ))

    @staticmethod
    def _normalize_metadata_track(data: Dict[str, Any]) -> ImportedTrack:
        return ImportedTrack(
            title=data.get("title") or data.get("name") or "",
            artist=data.get("artists") or data.get("artist") or "",
            album=data.get("album") or "",
            duration=data.get("durationSec") or data.get("duration") or 0
        )

    @staticmethod
    def _normalize_scraper_item(item: Dict[str, Any]) -> ImportedTrack:
        track = item.get("track") or item
        artists = track.get("artists") or []
        return ImportedTrack(
            title=track.get("name") or "",
            artist=artists[0].get("name", "") if artists else "",
            album=(track.get("album") or {}).get("name") or "",
            duration=(track.get("duration_ms") or 0) // 1000
        )

    @staticmethod
    def _normalize_embed_track(data: Dict[str, Any]) -> ImportedTrack:
        artists = data.get("artists") or []
        return ImportedTrack(
            title=data.get("name") or "",
            artist=artists[0].get("name", "") if artists else "",
            album=(data.get("album") or {}).get("name") or "",
            duration=(data.get("duration_ms") or 0) // 1000
        )
