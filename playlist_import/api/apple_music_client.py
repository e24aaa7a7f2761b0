"""
Apple Music playlist fetcher.
Single request against the public catalog API used by the web player;
there is no fallback when it fails.
"""

import logging
from typing import Dict, Any, Optional

from playlist_import.api.base_client import BaseAPIClient, BROWSER_USER_AGENT
from playlist_import.models.track import ImportedTrack
from playlist_import.models.playlist import PlaylistPayload

logger = logging.getLogger(__name__)

DEFAULT_PLAYLIST_NAME = "Apple Music Playlist"


class AppleMusicClient(BaseAPIClient):
    """Fetches public Apple Music playlists."""

    def __init__(self, base_url: str = "https://music.apple.com/api/v1",
                 rate_limit: int = 100, timeout: int = 30):
        super().__init__(base_url=base_url, rate_limit=rate_limit, timeout=timeout)

    async def fetch_playlist(self, storefront: str, playlist_id: str) -> Optional[PlaylistPayload]:
        """
        Fetch a playlist's name and tracks.

        Args:
            storefront: Two letter storefront code (e.g. ``us``)
            playlist_id: Apple Music playlist ID (``pl.`` prefixed)

        Returns:
            PlaylistPayload, or None on any failure
        """
        logger.info(f"Fetching Apple Music playlist: {playlist_id}")

        try:
            data = await self._get_json(
                f"catalog/{storefront}/playlists/{playlist_id}",
                headers={
                    "User-Agent": BROWSER_USER_AGENT,
                    "Origin": "https://music.apple.com",
                }
            )
            playlists = data.get("data") if isinstance(data, dict) else None
            if not playlists:
                return None
            return self._normalize_playlist(playlists[0])
        except Exception as e:
            logger.error(f"Apple Music fetch error: {e}")
            return None

    @staticmethod
    def _normalize_playlist(playlist: Dict[str, Any]) -> PlaylistPayload:
        """Map a catalog playlist resource; track fields are taken as-is."""
        attributes = playlist.get("attributes") or {}
        items = ((playlist.get("relationships") or {}).get("tracks") or {}).get("data") or []

        tracks = []
        for item in items:
            track_attributes = item.get("attributes") or {}
            duration_ms = track_attributes.get("durationInMillis")
            tracks.append(ImportedTrack(
                title=track_attributes.get("name"),
                artist=track_attributes.get("artistName"),
                album=track_attributes.get("albumName"),
                duration=duration_ms // 1000 if duration_ms else None
            ))

        return PlaylistPayload(
            name=attributes.get("name") or DEFAULT_PLAYLIST_NAME,
            tracks=tracks
        )
