"""
Local playlist storage.
Playlists are kept as one JSON document per playlist in a directory.
"""

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Protocol

from playlist_import.models.playlist import UserPlaylist

logger = logging.getLogger(__name__)


class PlaylistStore(Protocol):
    """Persistence operations the importer relies on."""

    async def create_playlist(self, name: str) -> UserPlaylist:
        ...

    async def update_playlist(self, playlist: UserPlaylist) -> None:
        ...


class JsonPlaylistStore:
    """Stores playlists as ``<id>.json`` files."""

    def __init__(self, directory: str = "output/playlists"):
        self.directory = directory

    def _path(self, playlist_id: str) -> str:
        return os.path.join(self.directory, f"{playlist_id}.json")

    def _write(self, playlist: UserPlaylist):
        os.makedirs(self.directory, exist_ok=True)
        with open(self._path(playlist.id), 'w', encoding='utf-8') as f:
            json.dump(playlist.to_dict(), f, indent=2)

    async def create_playlist(self, name: str) -> UserPlaylist:
        """Create and persist an empty playlist with a fresh identity."""
        playlist = UserPlaylist(id=uuid.uuid4().hex, name=name)
        self._write(playlist)
        logger.info(f"Created playlist '{name}' ({playlist.id})")
        return playlist

    async def update_playlist(self, playlist: UserPlaylist) -> None:
        """Replace the stored state of a playlist."""
        playlist.updated_at = datetime.now(timezone.utc)
        self._write(playlist)
        logger.info(f"Saved playlist '{playlist.name}' with {playlist.track_count} tracks")

    async def get_playlist(self, playlist_id: str) -> Optional[UserPlaylist]:
        path = self._path(playlist_id)
        if not os.path.exists(path):
            return None
        with open(path, 'r', encoding='utf-8') as f:
            return UserPlaylist.from_dict(json.load(f))

    async def list_playlists(self) -> List[UserPlaylist]:
        """All stored playlists, newest first."""
        if not os.path.isdir(self.directory):
            return []

        playlists = []
        for filename in os.listdir(self.directory):
            if not filename.endswith(".json"):
                continue
            playlist = await self.get_playlist(filename[:-len(".json")])
            if playlist:
                playlists.append(playlist)

        playlists.sort(key=lambda p: p.created_at, reverse=True)
        return playlists
