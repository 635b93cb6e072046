"""Tick-based simulation core for a top-down battle game: world, entities and event queue."""

__version__ = "0.1.0"

__all__ = [
    "geometry",
    "objects",
    "unit",
    "player",
    "obstacles",
    "particles",
    "game_core",
    "bullets",
    "special_bullets",
]