"""
YouTube Music playlist fetcher.
Reads playlists through the Invidious API, trying each configured instance
in order until one returns tracks.
"""

import logging
from typing import Dict, Any, List, Optional, Sequence

from playlist_import.api.base_client import BaseAPIClient, HTTPStatusError, BROWSER_USER_AGENT
from playlist_import.models.track import ImportedTrack
from playlist_import.models.playlist import PlaylistPayload
from playlist_import.utils.fallback import Attempt, FetchResult, FallbackOutcome, first_success

logger = logging.getLogger(__name__)

DEFAULT_PLAYLIST_NAME = "YouTube Music Playlist"
DEFAULT_INVIDIOUS_INSTANCES = (
    "https://invidious.io.lol",
    "https://inv.nadeko.net",
    "https://invidious.nerdvpn.de",
)


class YouTubeClient(BaseAPIClient):
    """Fetches YouTube Music playlists from a federation of Invidious instances."""

    def __init__(self, instances: Optional[Sequence[str]] = None,
                 rate_limit: int = 60, timeout: int = 30):
        """
        Initialize YouTube client.

        Args:
            instances: Ordered Invidious base URLs to try
        """
        super().__init__(rate_limit=rate_limit, timeout=timeout)
        chosen = DEFAULT_INVIDIOUS_INSTANCES if instances is None else instances
        self.instances: List[str] = [instance.rstrip("/") for instance in chosen]
        self.last_outcome: Optional[FallbackOutcome[PlaylistPayload]] = None

    def _attempts(self, playlist_id: str) -> List[Attempt[PlaylistPayload]]:
        # Bind the instance as a default so each closure keeps its own URL.
        return [
            Attempt(instance, lambda instance=instance: self._fetch_from_instance(instance, playlist_id))
            for instance in self.instances
        ]

    async def fetch_playlist(self, playlist_id: str) -> Optional[PlaylistPayload]:
        """
        Fetch a playlist's name and tracks.

        Args:
            playlist_id: YouTube playlist ID (``list`` parameter)

        Returns:
            PlaylistPayload from the first instance returning tracks, or None
        """
        logger.info(f"Fetching YouTube Music playlist: {playlist_id}")
        self.last_outcome = await first_success(self._attempts(playlist_id), label="invidious")
        if self.last_outcome.value is None:
            logger.error("All Invidious instances failed")
        return self.last_outcome.value

    async def _fetch_from_instance(self, instance: str, playlist_id: str) -> FetchResult[PlaylistPayload]:
        try:
            data = await self._get_json(
                f"{instance}/api/v1/playlists/{playlist_id}",
                headers={"User-Agent": BROWSER_USER_AGENT}
            )
        except HTTPStatusError as e:
            return FetchResult.fail(instance, "request rejected", e.status)

        if not isinstance(data, dict):
            return FetchResult.fail(instance, "unexpected response body")

        payload = self._normalize_playlist(data)
        if not payload.tracks:
            return FetchResult.fail(instance, "playlist has no videos")
        return FetchResult.success(payload)

    @staticmethod
    def _normalize_playlist(data: Dict[str, Any]) -> PlaylistPayload:
        """Map an Invidious playlist; videos are kept without field filtering."""
        return PlaylistPayload(
            name=data.get("title") or DEFAULT_PLAYLIST_NAME,
            tracks=[
                ImportedTrack(
                    title=video.get("title"),
                    artist=video.get("author") or video.get("authorId") or "Unknown Artist",
                    duration=video.get("lengthSeconds")
                )
                for video in data.get("videos") or []
            ]
        )
