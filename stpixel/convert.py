"""Whole-buffer pixel format conversions and colour tinting."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from stpixel.bitmap import Bitmap
from stpixel.pixels import (
    OPAQUE,
    argb_to_gray,
    argb_to_rgb565,
    blend_pixel,
    gray_to_mono,
    indexed_to_argb,
)


def _require_bpp(bitmap: Bitmap, bpp: int) -> None:
    if bitmap.bpp != bpp:
        raise ValueError(f"expected a {bpp} bpp bitmap, got {bitmap.bpp} bpp")


def _chunks(data: bytes | bytearray, size: int, count: int) -> Iterator[bytes]:
    view = memoryview(data)
    for start in range(0, count * size, size):
        yield bytes(view[start:start + size])


def _words(bitmap: Bitmap) -> Iterator[int]:
    for chunk in _chunks(bitmap.data, 2, bitmap.pixel_count()):
        yield int.from_bytes(chunk, "big")


def _expand_rgb565(word: int) -> tuple[int, int, int]:
    r = ((word & 0xF800) >> 8) | ((word & 0xE000) >> 13)
    g = ((word & 0x07E0) >> 3) | ((word & 0x0600) >> 9)
    b = ((word & 0x001F) << 3) | ((word & 0x001C) >> 2)
    return r & 0xFF, g & 0xFF, b & 0xFF


def _tint_color(color: int) -> int:
    if (color >> 24) & 0xFF == 0:
        raise ValueError("tint colour must not be fully transparent")
    return color & 0xFFFFFFFF


def rgba_to_argb(data: bytes, width: int, height: int) -> bytes:
    """Move the alpha byte of every RGBA pixel to the front."""
    count = width * height
    if width < 0 or height < 0:
        raise ValueError(f"dimensions must not be negative: {width}x{height}")
    if len(data) < count * 4:
        raise ValueError(f"data holds {len(data)} bytes, {count * 4} are needed")
    out = bytearray()
    for pixel in _chunks(data, 4, count):
        out += pixel[3:4] + pixel[:3]
    return bytes(out)


def convert_rgb565_to_argb(bitmap: Bitmap) -> Bitmap:
    """Expand a 16 bpp RGB565 bitmap to opaque 32 bpp ARGB."""
    _require_bpp(bitmap, 16)
    out = bytearray()
    for word in _words(bitmap):
        out += bytes((OPAQUE, *_expand_rgb565(word)))
    return Bitmap(bitmap.width, bitmap.height, 32, out)


def convert_rgb565_to_rgb888(bitmap: Bitmap) -> Bitmap:
    """Expand a 16 bpp RGB565 bitmap to packed 24 bpp RGB."""
    _require_bpp(bitmap, 16)
    out = bytearray()
    for word in _words(bitmap):
        out += bytes(_expand_rgb565(word))
    return Bitmap(bitmap.width, bitmap.height, 24, out)


def convert_argb_to_rgb565(bitmap: Bitmap) -> Bitmap:
    """Pack a 32 bpp ARGB bitmap into 16 bpp RGB565 words."""
    _require_bpp(bitmap, 32)
    out = bytearray()
    for pixel in _chunks(bitmap.data, 4, bitmap.pixel_count()):
        out += argb_to_rgb565(pixel).to_bytes(2, "big")
    return Bitmap(bitmap.width, bitmap.height, 16, out)


def convert_argb_to_rgb888(bitmap: Bitmap) -> Bitmap:
    """Drop the alpha channel of a 32 bpp ARGB bitmap."""
    _require_bpp(bitmap, 32)
    out = bytearray()
    for pixel in _chunks(bitmap.data, 4, bitmap.pixel_count()):
        out += pixel[1:]
    return Bitmap(bitmap.width, bitmap.height, 24, out)


def convert_rgb888_to_argb(bitmap: Bitmap) -> Bitmap:
    """Add an opaque alpha channel to a 24 bpp RGB bitmap."""
    _require_bpp(bitmap, 24)
    out = bytearray()
    for pixel in _chunks(bitmap.data, 3, bitmap.pixel_count()):
        out.append(OPAQUE)
        out += pixel
    return Bitmap(bitmap.width, bitmap.height, 32, out)


def convert_argb_to_gray(bitmap: Bitmap) -> Bitmap:
    """Replace every ARGB pixel by an opaque grey of its luminance."""
    _require_bpp(bitmap, 32)
    out = bytearray()
    for pixel in _chunks(bitmap.data, 4, bitmap.pixel_count()):
        out += argb_to_gray(pixel).to_bytes(4, "big")
    return Bitmap(bitmap.width, bitmap.height, 32, out)


def convert_gray_to_mono(bitmap: Bitmap) -> Bitmap:
    """Turn a 24 bpp bitmap into 1 bpp: pure black pixels set, all others clear."""
    _require_bpp(bitmap, 24)
    pixels = list(_chunks(bitmap.data, 3, bitmap.pixel_count()))
    out = bytearray()
    for start in range(0, len(pixels), 8):
        byte = 0
        for pixel in pixels[start:start + 8]:
            byte = (byte << 1) | (gray_to_mono(*pixel) & 0x01)
        out.append(byte)
    return Bitmap(bitmap.width, bitmap.height, 1, out)


def convert_mono_to_argb(bitmap: Bitmap) -> Bitmap:
    """Expand a 1 bpp bitmap to 32 bpp: set bits black, clear bits white."""
    _require_bpp(bitmap, 1)
    black = (0xFF000000).to_bytes(4, "big")
    white = (0xFFFFFFFF).to_bytes(4, "big")
    out = bytearray()
    for byte in bitmap.data[:bitmap.pixel_count() // 8]:
        for bit in range(7, -1, -1):
            out += black if (byte >> bit) & 0x01 else white
    return Bitmap(bitmap.width, bitmap.height, 32, out)


def convert_indexed_to_argb(
    bitmap: Bitmap,
    palette: Sequence[int],
    vdi_palette: Sequence[Sequence[int]] | None = None,
) -> Bitmap:
    """Expand an 8 bpp chunky indexed bitmap to opaque 32 bpp ARGB."""
    _require_bpp(bitmap, 8)
    cache: dict[int, bytes] = {}
    out = bytearray()
    for index in bitmap.data[:bitmap.pixel_count()]:
        if index not in cache:
            cache[index] = indexed_to_argb(index, palette, vdi_palette).to_bytes(4, "big")
        out += cache[index]
    return Bitmap(bitmap.width, bitmap.height, 32, out)


def tint_argb(bitmap: Bitmap, color: int) -> Bitmap:
    """Blend a premultiplied ARGB colour over every pixel of a 32 bpp bitmap."""
    _require_bpp(bitmap, 32)
    color = _tint_color(color)
    out = bytearray()
    for pixel in _chunks(bitmap.data, 4, bitmap.pixel_count()):
        out += blend_pixel(int.from_bytes(pixel, "big"), color).to_bytes(4, "big")
    return Bitmap(bitmap.width, bitmap.height, 32, out)


def _r8(value: int) -> int:
    return (value * 527 + 23) >> 6


def _g8(value: int) -> int:
    return (value * 259 + 33) >> 6


def tint_rgb565(bitmap: Bitmap, color: int) -> Bitmap:
    """Blend a premultiplied ARGB colour over every pixel of a 16 bpp bitmap."""
    _require_bpp(bitmap, 16)
    color = _tint_color(color)
    out = bytearray()
    for word in _words(bitmap):
        r = _r8((word >> 11) & 0x1F) & 0xFF
        g = _g8((word >> 5) & 0x3F) & 0xFF
        b = _r8(word & 0x1F) & 0xFF
        background = (OPAQUE << 24) | (r << 16) | (g << 8) | b
        blended = blend_pixel(background, color).to_bytes(4, "big")
        out += argb_to_rgb565(blended).to_bytes(2, "big")
    return Bitmap(bitmap.width, bitmap.height, 16, out)


def tint_rgb888(bitmap: Bitmap, color: int) -> Bitmap:
    """Blend a premultiplied ARGB colour over every pixel of a 24 bpp bitmap."""
    _require_bpp(bitmap, 24)
    color = _tint_color(color)
    out = bytearray()
    for pixel in _chunks(bitmap.data, 3, bitmap.pixel_count()):
        background = (OPAQUE << 24) | int.from_bytes(pixel, "big")
        out += blend_pixel(background, color).to_bytes(4, "big")[1:]
    return Bitmap(bitmap.width, bitmap.height, 24, out)