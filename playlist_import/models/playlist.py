"""
Playlist data models: the fetched source payload and the locally stored playlist.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
from datetime import datetime, timezone

from .track import ImportedTrack, MatchedTrack


@dataclass
class PlaylistPayload:
    """Normalized playlist as returned by a Provider Fetcher."""
    name: str
    tracks: List[ImportedTrack] = field(default_factory=list)

    @property
    def track_count(self) -> int:
        return len(self.tracks)


@dataclass
class ImportSource:
    """Provenance of an imported playlist."""
    platform: str          # spotify, apple, youtube
    original_id: str       # Platform-native playlist identifier
    original_name: str     # Playlist name on the source platform

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platform": self.platform,
            "originalId": self.original_id,
            "originalName": self.original_name
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImportSource':
        return cls(
            platform=data["platform"],
            original_id=data["originalId"],
            original_name=data["originalName"]
        )


@dataclass
class UserPlaylist:
    """Represents a locally stored playlist of playable catalog tracks."""
    id: str
    name: str
    tracks: List[MatchedTrack] = None
    cover_art: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    import_source: Optional[ImportSource] = None

    def __post_init__(self):
        """Initialize default values after creation."""
        if self.tracks is None:
            self.tracks = []
        if self.created_at is None:
            self.created_at = datetime.now(timezone.utc)
        if self.updated_at is None:
            self.updated_at = self.created_at

    @property
    def track_count(self) -> int:
        """Get number of tracks in playlist."""
        return len(self.tracks)

    @property
    def total_duration_seconds(self) -> int:
        """Get total duration in seconds, ignoring tracks without a duration."""
        return sum(track.duration or 0 for track in self.tracks)

    @property
    def total_duration_formatted(self) -> str:
        """Get formatted total duration string (HH:MM:SS)."""
        total_seconds = self.total_duration_seconds
        hours = total_seconds // 3600
        minutes = (total_seconds % 3600) // 60
        seconds = total_seconds % 60

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        else:
            return f"{minutes}:{seconds:02d}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert playlist to its stored representation."""
        return {
            "id": self.id,
            "name": self.name,
            "tracks": [track.to_dict() for track in self.tracks],
            "coverArt": self.cover_art,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "importSource": self.import_source.to_dict() if self.import_source else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UserPlaylist':
        """Create UserPlaylist from its stored representation."""
        created_at = None
        if data.get("createdAt"):
            created_at = datetime.fromisoformat(data["createdAt"])

        updated_at = None
        if data.get("updatedAt"):
            updated_at = datetime.fromisoformat(data["updatedAt"])

        import_source = None
        if data.get("importSource"):
            import_source = ImportSource.from_dict(data["importSource"])

        return cls(
            id=data["id"],
            name=data["name"],
            tracks=[MatchedTrack.from_dict(t) for t in data.get("tracks", [])],
            cover_art=data.get("coverArt"),
            created_at=created_at,
            updated_at=updated_at,
            import_source=import_source
        )
