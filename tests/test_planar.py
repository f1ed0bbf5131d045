import pytest

from stpixel.bitmap import Bitmap, buffer_size
from stpixel.planar import chunky8_to_planar4, chunky_to_planar_8, planar4_to_argb

DISTINCT_PALETTE = [((i & 7) << 8) | ((i >> 3) << 4) for i in range(16)]


def chunky(values, width=16, height=1):
    data = bytearray(buffer_size(width, height, 8))
    data[:len(values)] = bytes(values)
    return Bitmap(width, height, 8, data)


def test_planar8_single_full_pixel_sets_top_bit_of_every_plane():
    result = chunky_to_planar_8(chunky([0xFF]))
    assert bytes(result.data) == bytes([0x80, 0x00] * 8)


def test_planar8_last_pixel_low_bit_goes_to_plane_zero():
    values = [0] * 15 + [1]
    result = chunky_to_planar_8(chunky(values))
    assert result.data[1] == 1
    assert sum(result.data) == 1


def test_planar8_zero_image_stays_zero():
    result = chunky_to_planar_8(chunky([], width=20, height=3))
    assert bytes(result.data) == bytes(buffer_size(20, 3, 8))
    assert (result.width, result.height, result.bpp) == (20, 3, 8)


def test_planar4_matches_first_four_planes_of_planar8():
    values = [(i * 7) % 16 for i in range(32)]
    source = chunky(values, width=32)
    p8 = chunky_to_planar_8(source)
    p4 = chunky8_to_planar4(source)
    assert len(p4.data) == buffer_size(32, 1, 4)
    for group in range(2):
        assert p4.data[group * 8:group * 8 + 8] == p8.data[group * 16:group * 16 + 8]


def test_planar4_ignores_high_bits():
    low = chunky8_to_planar4(chunky([i for i in range(16)]))
    high = chunky8_to_planar4(chunky([i | 0xF0 for i in range(16)]))
    assert low.data == high.data


def test_planar4_to_argb_white_and_black():
    source = chunky8_to_planar4(chunky([0] * 16))
    white = planar4_to_argb(source, [0x777] * 16)
    black = planar4_to_argb(source, [0x000] * 16)
    assert bytes(white.data) == b"\xff\xff\xff\xff" * 16
    assert bytes(black.data) == b"\xff\x00\x00\x00" * 16


def uniform_color(value):
    result = planar4_to_argb(chunky8_to_planar4(chunky([value] * 16)), DISTINCT_PALETTE)
    return bytes(result.data[:4])


def test_planar4_round_trip_maps_each_pixel_to_its_palette_colour():
    expected = [uniform_color(v) for v in range(16)]
    assert len(set(expected)) == 16
    values = list(range(16)) + list(range(15, -1, -1))
    source = chunky(values, width=16, height=2)
    result = planar4_to_argb(chunky8_to_planar4(source), DISTINCT_PALETTE)
    assert result.bpp == 32
    assert len(result.data) == buffer_size(16, 2, 32)
    for i, value in enumerate(values):
        assert bytes(result.data[i * 4:i * 4 + 4]) == expected[value]


def test_wrong_depth_is_rejected():
    with pytest.raises(ValueError):
        chunky_to_planar_8(Bitmap(16, 1, 32))
    with pytest.raises(ValueError):
        chunky8_to_planar4(Bitmap(16, 1, 4))
    with pytest.raises(ValueError):
        planar4_to_argb(Bitmap(16, 1, 8), DISTINCT_PALETTE)


def test_short_palette_is_rejected():
    with pytest.raises(ValueError):
        planar4_to_argb(Bitmap(16, 1, 4), [0] * 8)