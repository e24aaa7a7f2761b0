"""
Catalog search client for the high-fidelity backends tracks are resolved against.
"""

import logging
from typing import Optional

from playlist_import.api.base_client import BaseAPIClient
from playlist_import.models.track import CatalogTrack, CatalogSearchResult
from playlist_import.utils.cache_manager import CacheManager

logger = logging.getLogger(__name__)

QOBUZ = "qobuz"
TIDAL = "tidal"


class CatalogClient(BaseAPIClient):
    """Search client for one catalog backend (e.g. qobuz or tidal)."""

    def __init__(self, source: str, base_url: str, rate_limit: int = 120,
                 cache_manager: Optional[CacheManager] = None,
                 cache_ttl: int = 86400, timeout: int = 30):
        """
        Initialize catalog client.

        Args:
            source: Backend tag recorded on matched tracks
            base_url: Base URL of the backend's search API
            cache_manager: Optional cache for search responses
            cache_ttl: Cache lifetime of a search response in seconds
        """
        super().__init__(base_url=base_url, rate_limit=rate_limit,
                         cache_manager=cache_manager, timeout=timeout)
        self.source = source
        self.cache_ttl = cache_ttl

    async def search_tracks(self, query: str, limit: int = 10) -> Optional[CatalogSearchResult]:
        """
        Search the catalog for tracks.

        Args:
            query: Free text query (title and artist)
            limit: Maximum number of results

        Returns:
            CatalogSearchResult, or None when the response carries no track list

        Raises:
            APIError: When the backend rejects the request
        """
        cache_key = self.cache_manager.get_cache_key(f"{self.source}_search", query, limit) if self.cache_manager else None

        data = await self._cached_get_json(
            cache_key,
            "search",
            ttl=self.cache_ttl,
            params={"q": query, "type": "tracks", "limit": limit}
        )

        if not isinstance(data, dict) or data.get("tracks") is None:
            return None

        items = data["tracks"]
        # Some backends page results as {"tracks": {"items": [...]}}
        if isinstance(items, dict):
            items = items.get("items") or []

        tracks = [CatalogTrack.from_api_data(item) for item in items if item.get("id") is not None]
        logger.debug(f"{self.source} returned {len(tracks)} tracks for query: {query}")
        return CatalogSearchResult(tracks=tracks)
