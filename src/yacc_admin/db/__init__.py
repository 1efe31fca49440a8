"""Database helpers for plugin settings storage."""
