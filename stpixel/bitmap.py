"""In-memory raster buffers with word-aligned rows."""

from __future__ import annotations

from dataclasses import dataclass, field

ROW_ALIGNMENT = 16
SUPPORTED_BPP = (1, 4, 8, 16, 24, 32)


def stride_for(width: int) -> int:
    """Return the row length in pixels, rounded up to a multiple of 16."""
    if width < 0:
        raise ValueError(f"width must not be negative: {width}")
    return (width + ROW_ALIGNMENT - 1) // ROW_ALIGNMENT * ROW_ALIGNMENT


def buffer_size(width: int, height: int, bpp: int) -> int:
    """Return the number of bytes a buffer of the given geometry occupies."""
    if bpp not in SUPPORTED_BPP:
        raise ValueError(f"unsupported bits per pixel: {bpp}")
    if height < 0:
        raise ValueError(f"height must not be negative: {height}")
    return stride_for(width) * height * bpp // 8


@dataclass
class Bitmap:
    """A pixel buffer of a given width, height and depth.

    Rows are padded to a multiple of 16 pixels. When no data is given a
    zero-filled buffer of the right size is allocated.
    """

    width: int
    height: int
    bpp: int
    data: bytearray = field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"bitmap dimensions must be positive: {self.width}x{self.height}"
            )
        required = buffer_size(self.width, self.height, self.bpp)
        if self.data is None:
            self.data = bytearray(required)
            return
        self.data = bytearray(self.data)
        if len(self.data) < required:
            raise ValueError(
                f"buffer holds {len(self.data)} bytes, {required} are needed"
            )

    def stride(self) -> int:
        """Row length in pixels, padding included."""
        return stride_for(self.width)

    def pixel_count(self) -> int:
        """Number of pixels in the buffer, padding included."""
        return self.stride() * self.height