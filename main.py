#!/usr/bin/env python3
"""
Playlist Importer
Main CLI entry point for importing Spotify, Apple Music and YouTube Music
playlists into the local library of playable catalog tracks.
"""

import sys
import json
import asyncio
import argparse
import logging
import subprocess

from config.settings import Settings
from playlist_import.models.import_result import ImportProgress, ImportResult, ImportStage
from playlist_import.services.playlist_importer import import_playlist
from playlist_import.services.playlist_store import JsonPlaylistStore
from playlist_import.utils.url_parser import (
    Platform,
    detect_platform,
    parse_apple_music_url,
    parse_spotify_url,
    parse_youtube_music_url
)


def run_tests():
    """Run the test suite."""
    print("🧪 Running Playlist Importer Test Suite...")
    print("=" * 60)

    try:
        import pytest
    except ImportError:
        print("❌ pytest not found. Installing...")
        subprocess.check_call([sys.executable, "-m", "pip", "install", "pytest", "pytest-asyncio"])
        import pytest

    exit_code = pytest.main(["-v", "--tb=short", "tests/"])

    if exit_code == 0:
        print("\n✅ All tests passed!")
    else:
        print(f"\n❌ Some tests failed (exit code: {exit_code})")

    return exit_code


def print_progress(progress: ImportProgress):
    """Render one progress event on a single line."""
    if progress.stage == ImportStage.MATCHING:
        print(f"  [{progress.current}/{progress.total}] {progress.message}")
    else:
        print(f"🔄 {progress.message}")


def display_import_summary(result: ImportResult):
    """Display a summary of an import."""
    print("\n" + "=" * 60)
    if not result.success:
        print(f"❌ Import failed: {result.error}")
    else:
        playlist = result.playlist
        print(f"🎵 Playlist Imported: {playlist.name}")
        print("=" * 60)
        print(f"Playlist ID: {playlist.id}")
        print(f"Source: {playlist.import_source.platform.title()} ({playlist.import_source.original_id})")
        print(f"Duration: {playlist.total_duration_formatted}")

    print(f"Matched: {result.matched_tracks}/{result.total_tracks} ({result.match_rate:.0f}%)")

    if result.unmatched_tracks:
        print(f"\nUnmatched tracks:")
        print("-" * 60)
        for i, track in enumerate(result.unmatched_tracks[:10], 1):
            print(f"{i:2d}. {track.title} - {track.artist}")
        if len(result.unmatched_tracks) > 10:
            print(f"    ... and {len(result.unmatched_tracks) - 10} more tracks")

    print("-" * 60)


async def import_from_url(args):
    """Import a playlist from a share URL."""
    settings = Settings()

    try:
        result = await import_playlist(args.url, on_progress=print_progress, settings=settings)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        display_import_summary(result)

    return 0 if result.success else 1


def detect_url(args):
    """Show which platform and identifier a URL resolves to."""
    platform = detect_platform(args.url)
    print(f"Platform: {platform.display_name}")

    if platform == Platform.SPOTIFY:
        identifier = parse_spotify_url(args.url)
    elif platform == Platform.APPLE:
        ref = parse_apple_music_url(args.url)
        identifier = f"{ref.id} (storefront: {ref.storefront})" if ref else None
    elif platform == Platform.YOUTUBE:
        identifier = parse_youtube_music_url(args.url)
    else:
        return 1

    print(f"Playlist ID: {identifier or 'not found'}")
    return 0 if identifier else 1


async def list_playlists(args):
    """List locally stored playlists."""
    settings = Settings()
    store = JsonPlaylistStore(settings.playlist_storage_dir)
    playlists = await store.list_playlists()

    if not playlists:
        print("No playlists stored yet.")
        return 0

    for playlist in playlists:
        source = playlist.import_source.platform if playlist.import_source else "local"
        print(f"{playlist.id}  {playlist.name} ({playlist.track_count} tracks, {source})")
    return 0


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description='Import playlists into the local hi-fi library')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    import_parser = subparsers.add_parser('import', help='Import a playlist from a share URL')
    import_parser.add_argument('url', type=str, help='Spotify, Apple Music or YouTube Music playlist URL')
    import_parser.add_argument('--json', action='store_true', help='Print the result as JSON')

    detect_parser = subparsers.add_parser('detect', help='Detect the platform of a playlist URL')
    detect_parser.add_argument('url', type=str, help='Playlist URL')

    subparsers.add_parser('list', help='List stored playlists')
    subparsers.add_parser('test', help='Run the test suite')

    args = parser.parse_args()

    settings = Settings()
    logging.basicConfig(level=settings.log_level, format=settings.log_format)

    if args.command == 'import':
        sys.exit(asyncio.run(import_from_url(args)))
    elif args.command == 'detect':
        sys.exit(detect_url(args))
    elif args.command == 'list':
        sys.exit(asyncio.run(list_playlists(args)))
    elif args.command == 'test':
        sys.exit(run_tests())
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
