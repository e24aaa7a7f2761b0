"""
Application settings and configuration management.
Handles environment variables, upstream API configurations and import defaults.
"""

import os
from typing import List, Optional
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

DEFAULT_INVIDIOUS_INSTANCES = "https://invidious.io.lol,https://inv.nadeko.net,https://invidious.nerdvpn.de"


@dataclass
class APIConfig:
    """Configuration for an upstream HTTP service."""
    base_url: Optional[str]
    timeout: int = 30
    rate_limit_per_minute: int = 100


@dataclass
class CacheConfig:
    """Configuration for the catalog search cache."""
    redis_url: Optional[str] = None
    search_ttl: int = 86400  # 24 hours


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Main application settings."""

    def __init__(self):
        # Spotify public surfaces, tried in this order. One client serves all
        # three, so the spotifydown rate limit and timeout apply to each.
        self.spotifydown = APIConfig(
            base_url=os.getenv("SPOTIFYDOWN_URL", "https://api.spotifydown.com"),
            rate_limit_per_minute=60
        )
        self.spotify_scraper = APIConfig(
            base_url=os.getenv("SPOTIFY_SCRAPER_URL", "https://spotify-scraper.p.rapidapi.com")
        )
        self.spotify_embed = APIConfig(
            base_url=os.getenv("SPOTIFY_EMBED_URL", "https://open.spotify.com")
        )
        self.RAPIDAPI_KEY = os.getenv("RAPIDAPI_KEY", "demo")

        # Apple Music public catalog API
        self.apple_music = APIConfig(
            base_url=os.getenv("APPLE_MUSIC_URL", "https://music.apple.com/api/v1"),
            rate_limit_per_minute=100
        )

        # YouTube Music through Invidious instances, tried in this order
        self.invidious = APIConfig(base_url=None, rate_limit_per_minute=60)
        self.INVIDIOUS_INSTANCES = _split_list(
            os.getenv("INVIDIOUS_INSTANCES", DEFAULT_INVIDIOUS_INSTANCES)
        )

        # Catalog backends tracks are matched against (qobuz first, then tidal)
        self.qobuz = APIConfig(
            base_url=os.getenv("QOBUZ_SEARCH_URL"),
            rate_limit_per_minute=120
        )
        self.tidal = APIConfig(
            base_url=os.getenv("TIDAL_SEARCH_URL"),
            rate_limit_per_minute=120
        )

        # Cache Configuration
        self.REDIS_URL = os.getenv("REDIS_URL")
        self.cache = CacheConfig(redis_url=self.REDIS_URL)

        # Import Settings
        self.match_delay_seconds = float(os.getenv("IMPORT_MATCH_DELAY", "0.2"))
        self.playlist_storage_dir = os.getenv("PLAYLIST_STORAGE_DIR", "output/playlists")

        # Logging Configuration
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def validate(self) -> bool:
        """Validate that required configuration is present."""
        required_vars = []

        if not self.qobuz.base_url:
            required_vars.append("QOBUZ_SEARCH_URL")
        if not self.tidal.base_url:
            required_vars.append("TIDAL_SEARCH_URL")

        if required_vars:
            raise ValueError(f"Missing required environment variables: {', '.join(required_vars)}")

        return True

    def get_provider_config(self, provider: str) -> APIConfig:
        """Get configuration for a specific upstream service."""
        provider_configs = {
            "spotifydown": self.spotifydown,
            "spotify_scraper": self.spotify_scraper,
            "spotify_embed": self.spotify_embed,
            "apple_music": self.apple_music,
            "invidious": self.invidious,
            "qobuz": self.qobuz,
            "tidal": self.tidal
        }

        if provider not in provider_configs:
            raise ValueError(f"Unknown provider: {provider}")

        return provider_configs[provider]
