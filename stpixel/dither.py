"""Floyd-Steinberg error diffusion onto a 16-colour hardware palette."""

from __future__ import annotations

from collections.abc import Sequence

from stpixel.bitmap import Bitmap
from stpixel.palette import decode_ste_color

RGB = tuple[int, int, int]

# (dx, dy, weight) of the error shares, in sixteenths
_DIFFUSION = ((1, 0, 7), (-1, 1, 3), (0, 1, 5), (1, 1, 1))


def _squared_distance(a: Sequence[int], b: Sequence[int]) -> int:
    return sum((y - x) * (y - x) for x, y in zip(a, b))


def nearest_palette_color(rgb: Sequence[int], palette: Sequence[int]) -> tuple[int, RGB]:
    """Return the index and decoded colour of the nearest palette entry."""
    if not palette:
        raise ValueError("palette is empty")
    best_index = 0
    best_color = decode_ste_color(palette[0])
    best_distance = _squared_distance(rgb, best_color)
    for index, word in enumerate(palette[1:], start=1):
        color = decode_ste_color(word)
        distance = _squared_distance(rgb, color)
        if distance < best_distance:
            best_index, best_color, best_distance = index, color, distance
    return best_index, best_color


def _clamp(value: int) -> int:
    return max(0, min(255, value))


def floyd_steinberg_4bit(bitmap: Bitmap, palette: Sequence[int], colors: int) -> bytes:
    """Dither a 32-bit ARGB bitmap in place and return one palette index per pixel.

    Every pixel of ``bitmap`` is replaced by its opaque palette colour; the
    first ``colors`` entries of ``palette`` are considered.
    """
    if bitmap.bpp != 32:
        raise ValueError(f"expected a 32 bpp bitmap, got {bitmap.bpp} bpp")
    if not 1 <= colors <= len(palette):
        raise ValueError(f"colors must be between 1 and {len(palette)}, not {colors}")
    usable = list(palette[:colors])
    width = bitmap.stride()
    height = bitmap.height
    data = bitmap.data

    rows = [
        [
            list(data[offset + 1:offset + 4])
            for offset in range(row * width * 4, (row + 1) * width * 4, 4)
        ]
        for row in range(height)
    ]

    cache: dict[tuple[int, ...], tuple[int, RGB]] = {}
    indices = bytearray()
    for y, row in enumerate(rows):
        for x, pixel in enumerate(row):
            key = tuple(pixel)
            if key not in cache:
                cache[key] = nearest_palette_color(key, usable)
            index, nearest = cache[key]
            indices.append(index & 0xFF)
            error = [int((old - new) / 16) for old, new in zip(pixel, nearest)]
            for dx, dy, weight in _DIFFUSION:
                nx, ny = x + dx, y + dy
                if 0 <= nx < width and 0 <= ny < height:
                    target = rows[ny][nx]
                    target[:] = [_clamp(c + e * weight) for c, e in zip(target, error)]
            pixel[:] = nearest

    for y, row in enumerate(rows):
        for x, (r, g, b) in enumerate(row):
            offset = (y * width + x) * 4
            data[offset:offset + 4] = bytes((0xFF, r, g, b))
    return bytes(indices)