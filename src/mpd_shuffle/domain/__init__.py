"""Domain layer: library, playback and shuffle logic."""
