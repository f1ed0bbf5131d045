# stpixel

Pure-Python tools for working with Atari ST/STE/Falcon-style bitmaps and
for the arithmetic behind Falcon-style DMA sound playback.

The package converts between pixel formats: 32-bit ARGB, 24-bit RGB888,
16-bit RGB565, 8-bit indexed, 1-bit monochrome and interleaved 4/8-plane
layouts. It matches colours against 12-bit ST/STE palette words, dithers
true-colour images down to a small palette, and packs chunky pixels into
bitplanes. Every row is padded to a multiple of 16 pixels, as in the
hardware's screen memory. There are no dependencies beyond the standard
library.

## Installation

```
pip install stpixel
```

To run the tests:

```
pip install "stpixel[test]"
pytest
```

## Modules

- `stpixel.bitmap`: the `Bitmap` dataclass (`width`, `height`, `bpp`,
  `data`) with `stride()` and `pixel_count()`, and the row rules
  `stride_for(width)` and `buffer_size(width, height, bpp)`. Supported
  depths are 1, 4, 8, 16, 24 and 32 bits per pixel; a `Bitmap` created
  without data gets a zero-filled buffer, and too short a buffer raises
  `ValueError`.
- `stpixel.palette`: palette word decoding (`decode_st_color`,
  `decode_ste_color`), the weighted integer RGB distance (`distance_rgb`,
  built on the approximate square root `usqrt4`), nearest-colour search
  (`closest_index`, and `rgb_to_indexed` for whole RGB or ARGB buffers),
  and CIE94 matching on Lab values (`delta_e`, `closest_lab_index`).
- `stpixel.dither`: `nearest_palette_color`, and `floyd_steinberg_4bit`,
  which dithers a 32 bpp bitmap in place onto the palette colours and
  returns one palette index per pixel.
- `stpixel.pixels`: single-pixel conversions: `blend_pixel`,
  `argb_to_rgb565`, `argb_to_gray`, `rgb_to_332`, `indexed_to_argb`,
  `gray_to_mono`, `reverse_bits`.
- `stpixel.convert`: whole-bitmap conversions (`rgba_to_argb`,
  `convert_rgb565_to_argb`, `convert_rgb565_to_rgb888`,
  `convert_argb_to_rgb565`, `convert_argb_to_rgb888`,
  `convert_rgb888_to_argb`, `convert_argb_to_gray`, `convert_gray_to_mono`,
  `convert_mono_to_argb`, `convert_indexed_to_argb`) and blending one
  premultiplied ARGB colour over a whole bitmap (`tint_argb`,
  `tint_rgb565`, `tint_rgb888`). Each returns a new `Bitmap`.
- `stpixel.planar`: chunky to planar packing (`chunky_to_planar_8`,
  `chunky8_to_planar4`) and expansion of a four-plane bitmap to ARGB
  through a 16-entry palette (`planar4_to_argb`).
- `stpixel.sound`: clock and prescaler choice (`select_clock`,
  `compute_prescale`, `effective_samplerate`, `ClockSource`),
  `SoundSettings` with `preset()` and `buffer_size()`, the playback
  `DoubleBuffer` with `swap()` and `fill()`, circular buffer chains
  (`build_ring`, `RingSlot`), and `float_to_pcm16` / `pcm16_to_float`.

## Example

Dither a true-colour image onto a 16-colour palette, pack it into
bitplanes and expand it again:

```python
from stpixel.bitmap import Bitmap
from stpixel.dither import floyd_steinberg_4bit
from stpixel.planar import chunky8_to_planar4, planar4_to_argb

palette = [0x0FFF, 0x0F00, 0x00F0, 0x0000] + [0x0000] * 12

# A 16x1 all-red ARGB image.
image = Bitmap(16, 1, 32, bytes([0xFF, 0xFF, 0x00, 0x00]) * 16)

indices = floyd_steinberg_4bit(image, palette, 16)   # one index per pixel
planar = chunky8_to_planar4(Bitmap(16, 1, 8, indices))
back = planar4_to_argb(planar, palette)              # 32 bpp Bitmap
```

Choosing a playback rate:

```python
from stpixel.sound import SoundSettings

settings = SoundSettings(original_samplerate=44100)
settings.preset(computer_type=0)
print(settings.prescale, settings.effective_samplerate, settings.buffer_size())
# 1 49165 196660
```

## What it does not do

- It does not read or write image or sound files; it works on bytes and
  `Bitmap` buffers that the caller supplies.
- It does not convert RGB to Lab; `closest_lab_index` and `delta_e` take
  Lab values that are already computed.
- It does not display anything or play sound. `stpixel.sound` computes the
  settings and manages the buffers only.
- It has no command-line tool.