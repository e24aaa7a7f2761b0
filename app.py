"""
FastAPI web application for the Playlist Importer
Provides REST API endpoints for URL detection and playlist import.
"""

from pydantic import BaseModel
from config.settings import Settings
from fastapi import FastAPI, HTTPException
from typing import Optional
from fastapi.middleware.cors import CORSMiddleware

from playlist_import.services.playlist_importer import import_playlist as run_import
from playlist_import.utils.url_parser import (
    Platform,
    detect_platform,
    parse_apple_music_url,
    parse_spotify_url,
    parse_youtube_music_url
)

app = FastAPI(
    title="Playlist Importer API",
    description="Import Spotify, Apple Music and YouTube Music playlists as playable hi-fi playlists",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize settings
settings = Settings()


class UrlRequest(BaseModel):
    url: str


class DetectResponse(BaseModel):
    platform: str
    playlist_id: Optional[str] = None
    storefront: Optional[str] = None


@app.get("/")
async def root():
    return {"message": "Playlist Importer API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    return {"status": "healthy", "services": ["playlist_importer"]}


@app.get("/platforms")
async def get_supported_platforms():
    """Get list of platforms playlists can be imported from."""
    return {
        "platforms": [
            {"id": platform.value, "name": platform.display_name}
            for platform in Platform if platform != Platform.UNKNOWN
        ]
    }


@app.post("/detect", response_model=DetectResponse)
async def detect(request: UrlRequest):
    """Classify a share URL without fetching anything."""
    platform = detect_platform(request.url)

    if platform == Platform.SPOTIFY:
        return DetectResponse(platform=platform.value, playlist_id=parse_spotify_url(request.url))
    if platform == Platform.APPLE:
        ref = parse_apple_music_url(request.url)
        return DetectResponse(
            platform=platform.value,
            playlist_id=ref.id if ref else None,
            storefront=ref.storefront if ref else None
        )
    if platform == Platform.YOUTUBE:
        return DetectResponse(platform=platform.value, playlist_id=parse_youtube_music_url(request.url))
    return DetectResponse(platform=platform.value)


@app.post("/import")
async def import_playlist(request: UrlRequest):
    """Import a playlist; failures are reported in the result body."""
    try:
        result = await run_import(request.url, settings=settings)
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
