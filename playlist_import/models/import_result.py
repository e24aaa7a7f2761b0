"""
Import outcome and progress models.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, List

from .track import ImportedTrack
from .playlist import UserPlaylist


class ImportStage(str, Enum):
    """Stages reported while an import runs."""
    FETCHING = "fetching"
    MATCHING = "matching"
    SAVING = "saving"
    DONE = "done"
    # Kept for callers that switch on it; imports report failures through ImportResult.
    ERROR = "error"


@dataclass
class ImportProgress:
    """Progress event passed to the import callback."""
    stage: ImportStage
    current: int
    total: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage.value,
            "current": self.current,
            "total": self.total,
            "message": self.message
        }


@dataclass
class ImportResult:
    """Terminal summary of one import."""
    success: bool
    total_tracks: int = 0
    matched_tracks: int = 0
    unmatched_tracks: List[ImportedTrack] = field(default_factory=list)
    playlist: Optional[UserPlaylist] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str, total_tracks: int = 0,
                unmatched_tracks: Optional[List[ImportedTrack]] = None) -> 'ImportResult':
        """Build a failed result carrying a user-facing error message."""
        return cls(
            success=False,
            total_tracks=total_tracks,
            matched_tracks=0,
            unmatched_tracks=list(unmatched_tracks or []),
            error=error
        )

    @property
    def match_rate(self) -> float:
        """Percentage of source tracks that resolved to a catalog track."""
        if not self.total_tracks:
            return 0.0
        return (self.matched_tracks / self.total_tracks) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "playlist": self.playlist.to_dict() if self.playlist else None,
            "totalTracks": self.total_tracks,
            "matchedTracks": self.matched_tracks,
            "unmatchedTracks": [track.to_dict() for track in self.unmatched_tracks],
            "error": self.error
        }
