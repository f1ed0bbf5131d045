"""Hardware palette decoding and nearest-colour search."""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence

from stpixel.bitmap import stride_for

_MASK32 = 0xFFFFFFFF

RGB = tuple[int, int, int]
LAB = Sequence[float]


def decode_ste_color(word: int) -> RGB:
    """Decode an STe/Falcon 12-bit palette word (low bit rotated to the top)."""
    r = (((word >> 7) & 0x0E) | ((word >> 11) & 0x01)) << 4
    g = (((word >> 3) & 0x0E) | ((word >> 7) & 0x01)) << 4
    b = (((word & 0x07) << 1) | ((word >> 3) & 0x01)) << 4
    return r, g, b


def decode_st_color(word: int) -> RGB:
    """Decode a plain ST palette word, four bits per channel scaled by 32."""
    return (
        ((word >> 8) & 0x0F) << 5,
        ((word >> 4) & 0x0F) << 5,
        (word & 0x0F) << 5,
    )


def _decoder(computer_type: int):
    return decode_st_color if computer_type == 0 else decode_ste_color


def usqrt4(value: int) -> int:
    """Approximate integer square root by a few Newton steps."""
    value &= _MASK32
    if value < 2:
        return value
    steps = 6 if value < 20000 else 4
    a = 1255
    for _ in range(steps):
        a = (a + value // a) >> 1
    return a


def distance_rgb(first: Sequence[int], second: Sequence[int]) -> int:
    """Weighted colour distance computed in 32-bit unsigned arithmetic."""
    r = (first[0] - second[0]) & _MASK32
    g = (first[1] - second[1]) & _MASK32
    b = (first[2] - second[2]) & _MASK32
    drp2 = (r * r) & _MASK32
    dgp2 = (g * g) & _MASK32
    dbp2 = (b * b) & _MASK32
    t = (first[0] + second[0]) >> 1
    total = (
        (drp2 << 1) + (dgp2 << 2) + 3 * dbp2 + t * ((drp2 - dbp2) & _MASK32)
    ) & _MASK32
    return usqrt4(total >> 8)


def closest_index(rgb: Sequence[int], palette: Sequence[int], computer_type: int) -> int:
    """Return the index of the palette word whose colour is nearest to ``rgb``."""
    decode = _decoder(computer_type)
    best_distance = 0xFFFF
    best_index = 0
    for index, word in enumerate(palette):
        distance = distance_rgb(rgb, decode(word))
        if distance < best_distance:
            best_distance = distance & 0xFFFF
            best_index = index
    return best_index


def _pixels(data: bytes, count: int, components: int) -> Iterator[bytes]:
    view = memoryview(data)
    for start in range(0, count * components, components):
        yield bytes(view[start:start + components])


def rgb_to_indexed(
    data: bytes,
    width: int,
    height: int,
    palette: Sequence[int],
    components: int = 3,
    computer_type: int = 1,
) -> bytes:
    """Map packed RGB (3 components) or ARGB (4 components) pixels to palette indices."""
    if components not in (3, 4):
        raise ValueError(f"components must be 3 or 4, not {components}")
    count = stride_for(width) * height
    if len(data) < count * components:
        raise ValueError(
            f"data holds {len(data)} bytes, {count * components} are needed"
        )
    cache: dict[bytes, int] = {}
    result = bytearray()
    for pixel in _pixels(data, count, components):
        rgb = pixel[1:] if components == 4 else pixel
        if rgb not in cache:
            cache[rgb] = closest_index(rgb, palette, computer_type) & 0xFF
        result.append(cache[rgb])
    return bytes(result)


def delta_e(lab_a: LAB, lab_b: LAB) -> float:
    """CIE94 colour difference, chroma weights taken from ``lab_a``."""
    delta_l = lab_a[0] - lab_b[0]
    delta_a = lab_a[1] - lab_b[1]
    delta_b = lab_a[2] - lab_b[2]
    c1 = math.sqrt(lab_a[1] * lab_a[1] + lab_a[2] * lab_a[2])
    c2 = math.sqrt(lab_b[1] * lab_b[1] + lab_b[2] * lab_b[2])
    delta_c = c1 - c2
    delta_h = delta_a * delta_a + delta_b * delta_b - delta_c * delta_c
    delta_h = 0.0 if delta_h < 0 else math.sqrt(delta_h)
    sc = 1.0 + 0.045 * c1
    sh = 1.0 + 0.015 * c1
    total = delta_l ** 2 + (delta_c / sc) ** 2 + (delta_h / sh) ** 2
    return 0.0 if total < 0 else math.sqrt(total)


def closest_lab_index(lab: LAB, palette_lab: Sequence[LAB]) -> int:
    """Return the index of the palette entry with the smallest delta E to ``lab``."""
    best_index = 0
    best_distance = math.inf
    for index, entry in enumerate(palette_lab):
        distance = delta_e(entry, lab)
        if distance < best_distance:
            best_distance = distance
            best_index = index
    return best_index