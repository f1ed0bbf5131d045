"""Conversions between chunky pixels and interleaved bit-plane layouts."""

from __future__ import annotations

from collections.abc import Sequence

from stpixel.bitmap import Bitmap

_GROUP = 16  # pixels covered by one word of each plane


def _require_bpp(bitmap: Bitmap, bpp: int) -> None:
    if bitmap.bpp != bpp:
        raise ValueError(f"expected a {bpp} bpp bitmap, got {bitmap.bpp} bpp")


def _to_planes(chunky: bytes, planes: int) -> bytearray:
    """Pack chunky pixel values into interleaved plane words, 16 pixels per group."""
    out = bytearray()
    for start in range(0, len(chunky), _GROUP):
        group = chunky[start:start + _GROUP]
        for plane in range(planes):
            word = 0
            for pixel in group:
                word = (word << 1) | ((pixel >> plane) & 0x01)
            out += word.to_bytes(2, "big")
    return out


def chunky_to_planar_8(bitmap: Bitmap) -> Bitmap:
    """Convert an 8 bpp chunky bitmap to eight interleaved bit planes."""
    _require_bpp(bitmap, 8)
    chunky = bytes(bitmap.data[:bitmap.pixel_count()])
    return Bitmap(bitmap.width, bitmap.height, 8, _to_planes(chunky, 8))


def chunky8_to_planar4(bitmap: Bitmap) -> Bitmap:
    """Convert an 8 bpp chunky bitmap to four interleaved bit planes.

    Only the low four bits of every pixel value are kept.
    """
    _require_bpp(bitmap, 8)
    chunky = bytes(bitmap.data[:bitmap.pixel_count()])
    return Bitmap(bitmap.width, bitmap.height, 4, _to_planes(chunky, 4))


def _decode_planar_color(word: int) -> tuple[int, int, int]:
    r = (((word >> 8) & 0x07) << 5) | (((word >> 8) & 0x07) << 2) | ((word >> 9) & 0x03)
    g = (((word >> 4) & 0x07) << 5) | (((word >> 4) & 0x07) << 2) | ((word >> 5) & 0x03)
    b = ((word & 0x07) << 5) | ((word & 0x07) << 2) | (word & 0x03)
    return r & 0xFF, g & 0xFF, b & 0xFF


def planar4_to_argb(bitmap: Bitmap, palette: Sequence[int]) -> Bitmap:
    """Expand a four-plane bitmap to 32 bpp ARGB through a 16-entry palette."""
    _require_bpp(bitmap, 4)
    if len(palette) < 16:
        raise ValueError(f"palette needs 16 entries, got {len(palette)}")
    colors = [bytes((0xFF, *_decode_planar_color(word))) for word in palette[:16]]

    planar = bytes(bitmap.data[:bitmap.pixel_count() // 2])
    out = bytearray()
    for start in range(0, len(planar), 8):
        words = [
            int.from_bytes(planar[start + 2 * plane:start + 2 * plane + 2], "big")
            for plane in range(4)
        ]
        for bit in range(_GROUP - 1, -1, -1):
            index = 0
            for plane, word in enumerate(words):
                index |= ((word >> bit) & 0x01) << plane
            out += colors[index]
    return Bitmap(bitmap.width, bitmap.height, 32, out)