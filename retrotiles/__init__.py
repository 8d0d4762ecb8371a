"""Retro 2D graphics building blocks: asset loaders, indexed bitmaps, palettes, blitters, animations and actors."""

__version__ = "0.1.0"