"""Pixel format conversion, palette matching, dithering and bitplane packing for Atari-style bitmaps, with sample-rate and playback-buffer helpers."""

__version__ = "0.1.0"

__all__ = [
    "bitmap",
    "palette",
    "dither",
    "planar",
    "pixels",
    "convert",
    "sound",
]