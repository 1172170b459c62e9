"""Core domain logic: lessons, progress and media playback."""
