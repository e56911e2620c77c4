"""Utility helpers for tracklist-renamer."""
