"""Single-pixel colour conversions."""

from __future__ import annotations

from collections.abc import Sequence

from stpixel.palette import decode_ste_color

OPAQUE = 0xFF


def reverse_bits(value: int) -> int:
    """Reverse the order of the eight bits of a byte."""
    value &= 0xFF
    result = 0
    for _ in range(8):
        result = (result << 1) | (value & 0x01)
        value >>= 1
    return result


def _div_255(value: int) -> int:
    return value // 255


def _blend(back: int, front: int, alpha: int) -> int:
    return _div_255(front * alpha + back * (255 - alpha))


def _argb(a: int, r: int, g: int, b: int) -> int:
    return ((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def blend_pixel(background: int, foreground: int) -> int:
    """Composite a premultiplied ARGB foreground over a background, opaque result."""
    alpha = (foreground >> 24) & 0xFF
    if alpha == 0xFF:
        return foreground
    if alpha == 0:
        return background
    channels = []
    for shift in (16, 8, 0):
        front = ((0xFF * ((foreground >> shift) & 0xFF)) // alpha) & 0xFF
        back = (background >> shift) & 0xFF
        channels.append(_blend(back, front, alpha))
    return _argb(OPAQUE, *channels)


def argb_to_rgb565(pixel: Sequence[int]) -> int:
    """Pack an (a, r, g, b) pixel into a 16-bit RGB565 value."""
    _, r, g, b = pixel
    return (((r >> 3) & 0x1F) << 11) | (((g >> 2) & 0x3F) << 5) | ((b >> 3) & 0x1F)


def argb_to_gray(pixel: Sequence[int]) -> int:
    """Return an opaque ARGB grey of the luminance of an (a, r, g, b) pixel."""
    _, r, g, b = pixel
    gray = int(0.3 * r + 0.59 * g + 0.11 * b) & 0xFF
    return _argb(OPAQUE, gray, gray, gray)


def rgb_to_332(r: int, g: int, b: int, reverse: bool = False) -> int:
    """Quantise a colour to 3-3-2 bits; with ``reverse`` the byte is bit-reversed."""
    r3 = _div_255((r << 3) - r)
    g3 = _div_255((g << 3) - g)
    b2 = _div_255((b << 1) + b)
    color = ((r3 << 5) | (g3 << 2) | b2) & 0xFF
    return reverse_bits(color) if reverse else color


def indexed_to_argb(
    index: int,
    palette: Sequence[int],
    vdi_palette: Sequence[Sequence[int]] | None = None,
) -> int:
    """Return the opaque ARGB colour of a palette index.

    The first 16 indices use hardware palette words; higher indices use
    VDI colour triples with channels in the range 0..1000.
    """
    if not 0 <= index <= 0xFF:
        raise ValueError(f"index out of range: {index}")
    if index < 16:
        if index >= len(palette):
            raise ValueError(f"palette has no entry {index}")
        return _argb(OPAQUE, *decode_ste_color(palette[index]))
    if vdi_palette is None or index >= len(vdi_palette):
        raise ValueError(f"VDI palette has no entry {index}")
    r, g, b = (channel * 255 // 1000 for channel in vdi_palette[index][:3])
    return _argb(OPAQUE, r, g, b)


def gray_to_mono(r: int, g: int, b: int) -> int:
    """Return 1 (ink) for pure black, 0 for anything else."""
    return 0 if r + g + b > 0 else 1