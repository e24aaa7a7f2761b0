"""
Track data models for playlist import.
Covers the platform-native descriptor, the catalog search hit and the
matched catalog track that ends up in a stored playlist.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
from datetime import datetime, timezone


def _now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass
class ImportedTrack:
    """Track as described by the source platform."""
    title: str                          # Track title
    artist: str                         # Artist name
    album: Optional[str] = None         # Album name
    duration: Optional[int] = None      # Duration in seconds

    @property
    def search_query(self) -> str:
        """Query string used against the catalog backends."""
        return f"{self.title} {self.artist}"

    @property
    def display_name(self) -> str:
        return f"{self.title} - {self.artist}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "artist": self.artist,
            "album": self.album,
            "duration": self.duration
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImportedTrack':
        return cls(
            title=data["title"],
            artist=data["artist"],
            album=data.get("album"),
            duration=data.get("duration")
        )


@dataclass
class CatalogTrack:
    """Single search hit returned by a catalog backend."""
    id: str
    title: str
    artist: str
    artist_id: Optional[str] = None
    album: Optional[str] = None
    album_id: Optional[str] = None
    duration: Optional[int] = None
    cover_art: Optional[str] = None

    @classmethod
    def from_api_data(cls, data: Dict[str, Any]) -> 'CatalogTrack':
        """Create CatalogTrack from a search response item (camelCase or snake_case)."""
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            artist=data.get("artist", ""),
            artist_id=data.get("artistId", data.get("artist_id")),
            album=data.get("album"),
            album_id=data.get("albumId", data.get("album_id")),
            duration=data.get("duration"),
            cover_art=data.get("coverArt", data.get("cover_art"))
        )


@dataclass
class CatalogSearchResult:
    """Search response of a catalog backend."""
    tracks: List[CatalogTrack] = field(default_factory=list)


@dataclass
class MatchedTrack:
    """Catalog track enriched with the provenance of the imported track."""
    id: str
    source: str                          # Catalog backend tag (qobuz, tidal)
    title: str
    artist: str
    original_title: str                  # Title on the source platform
    original_artist: str                 # Artist on the source platform
    match_confidence: int                # Fixed per catalog backend
    artist_id: Optional[str] = None
    album: Optional[str] = None
    album_id: Optional[str] = None
    duration: Optional[int] = None
    cover_art: Optional[str] = None
    added_at: int = field(default_factory=_now_ms)  # Epoch milliseconds

    @classmethod
    def from_catalog_track(cls, catalog_track: CatalogTrack, imported: ImportedTrack,
                           source: str, confidence: int) -> 'MatchedTrack':
        """Build a matched track from a catalog hit and the track it resolves."""
        return cls(
            id=catalog_track.id,
            source=source,
            title=catalog_track.title,
            artist=catalog_track.artist,
            artist_id=catalog_track.artist_id,
            album=catalog_track.album,
            album_id=catalog_track.album_id,
            duration=catalog_track.duration,
            cover_art=catalog_track.cover_art,
            original_title=imported.title,
            original_artist=imported.artist,
            match_confidence=confidence
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase storage representation."""
        return {
            "id": self.id,
            "source": self.source,
            "title": self.title,
            "artist": self.artist,
            "artistId": self.artist_id,
            "album": self.album,
            "albumId": self.album_id,
            "duration": self.duration,
            "coverArt": self.cover_art,
            "addedAt": self.added_at,
            "originalTitle": self.original_title,
            "originalArtist": self.original_artist,
            "matchConfidence": self.match_confidence
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MatchedTrack':
        return cls(
            id=data["id"],
            source=data["source"],
            title=data["title"],
            artist=data["artist"],
            artist_id=data.get("artistId"),
            album=data.get("album"),
            album_id=data.get("albumId"),
            duration=data.get("duration"),
            cover_art=data.get("coverArt"),
            added_at=data.get("addedAt", 0),
            original_title=data.get("originalTitle", ""),
            original_artist=data.get("originalArtist", ""),
            match_confidence=data.get("matchConfidence", 0)
        )
