"""Configuration package for the playlist importer."""
