"""
Track matching against the catalog backends.
Backends are queried in a fixed priority order and the first non-empty
answer wins; the confidence score is fixed per backend.
"""

import logging
from typing import Optional, Protocol

from playlist_import.models.track import CatalogSearchResult, ImportedTrack, MatchedTrack

logger = logging.getLogger(__name__)

HIGH_TRUST_CONFIDENCE = 90
FALLBACK_CONFIDENCE = 85


class CatalogSearcher(Protocol):
    """Anything that can search a catalog backend."""
    source: str

    async def search_tracks(self, query: str) -> Optional[CatalogSearchResult]:
        ...


class TrackMatcher:
    """Resolves imported tracks to playable catalog tracks."""

    def __init__(self, high_trust: CatalogSearcher, fallback: CatalogSearcher,
                 high_trust_confidence: int = HIGH_TRUST_CONFIDENCE,
                 fallback_confidence: int = FALLBACK_CONFIDENCE):
        self.backends = [
            (high_trust, high_trust_confidence),
            (fallback, fallback_confidence),
        ]

    async def match_track(self, track: ImportedTrack) -> Optional[MatchedTrack]:
        """
        Match one imported track.

        Args:
            track: Track as described by the source platform

        Returns:
            MatchedTrack built from the first result of the first backend
            answering with results, or None when no backend has a result
        """
        query = track.search_query

        for backend, confidence in self.backends:
            try:
                results = await backend.search_tracks(query)
            except Exception as e:
                logger.warning(f"{backend.source} search failed for '{query}': {e}")
                continue

            if results and results.tracks:
                logger.debug(f"Matched '{track.display_name}' on {backend.source}")
                return MatchedTrack.from_catalog_track(
                    results.tracks[0], track, source=backend.source, confidence=confidence
                )

        logger.info(f"No catalog match for '{track.display_name}'")
        return None
