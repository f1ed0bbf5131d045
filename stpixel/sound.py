"""Sample-rate selection, playback double buffering and PCM sample conversion."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import IntEnum

INTERNAL_CLOCK_HZ = 25_175_000
CLOCK_44K_HZ = 22_579_200
CLOCK_48K_HZ = 24_576_000

MILAN = 0x04
FALCON_CLONE = 0x06

_PCM_SCALE = 32768.0
_PCM_MIN = -32768
_PCM_MAX = 32767


class ClockSource(IntEnum):
    """Clock that drives the sound DMA."""

    INTERNAL = 0
    EXTERNAL_44K = 1
    EXTERNAL_48K = 2


# prescale -> rate for each clock; prescales absent from a clock's map
# always run from the internal clock
_RATES: dict[int, dict[ClockSource, int]] = {
    1: {
        ClockSource.INTERNAL: 49165,
        ClockSource.EXTERNAL_44K: 44100,
        ClockSource.EXTERNAL_48K: 48000,
    },
    2: {ClockSource.INTERNAL: 32779},
    3: {
        ClockSource.INTERNAL: 24594,
        ClockSource.EXTERNAL_44K: 22050,
        ClockSource.EXTERNAL_48K: 24000,
    },
    4: {ClockSource.INTERNAL: 19667},
    5: {ClockSource.INTERNAL: 16389},
    6: {
        ClockSource.INTERNAL: 12273,
        ClockSource.EXTERNAL_44K: 11025,
        ClockSource.EXTERNAL_48K: 12000,
    },
    7: {ClockSource.INTERNAL: 9833},
    8: {ClockSource.INTERNAL: 8194},
}


def select_clock(
    computer_type: int,
    wanted_samplerate: int,
    gpio_bit: int,
    milanblaster_present: bool = False,
) -> tuple[int, ClockSource]:
    """Pick the clock frequency and source for a machine and a wanted rate.

    ``gpio_bit`` is the low bit of the GPIO port, which tells which external
    crystal is fitted (1 for 48 kHz, 0 for 44.1 kHz).
    """
    gpio_bit &= 0x01
    if computer_type == MILAN and milanblaster_present:
        if gpio_bit == 1:
            return CLOCK_48K_HZ, ClockSource.EXTERNAL_48K
        return CLOCK_44K_HZ, ClockSource.EXTERNAL_44K
    if computer_type == FALCON_CLONE:
        if wanted_samplerate % 11025 == 0:
            return CLOCK_44K_HZ, ClockSource.EXTERNAL_44K
        if wanted_samplerate % 12000 == 0 and gpio_bit:
            return CLOCK_48K_HZ, ClockSource.EXTERNAL_48K
    return INTERNAL_CLOCK_HZ, ClockSource.INTERNAL


def compute_prescale(clock_value: int, wanted_samplerate: int) -> int:
    """Return the DMA prescaler that brings ``clock_value`` close to the wanted rate."""
    if wanted_samplerate <= 0:
        raise ValueError(f"sample rate must be positive, not {wanted_samplerate}")
    return (clock_value >> 8) // wanted_samplerate - 1


def effective_samplerate(prescale: int, clock_source: ClockSource) -> tuple[int, ClockSource]:
    """Return the rate actually played for a prescaler and the clock it runs from."""
    rates = _RATES.get(prescale)
    if rates is None:
        raise ValueError(f"cannot determine a sample rate for prescale {prescale}")
    source = ClockSource(clock_source)
    if source not in rates:
        source = ClockSource.INTERNAL
    return rates[source], source


@dataclass
class SoundSettings:
    """Playback parameters derived from a stream's original format."""

    original_samplerate: int
    original_channels: int = 2
    wanted_samplerate: int = 0
    effective_channels: int = 2
    effective_bytes_per_sample: int = 2
    effective_samplerate: int = 0
    prescale: int = 0
    clock_source: ClockSource = ClockSource.INTERNAL

    def preset(
        self,
        computer_type: int,
        gpio_bit: int = 0,
        milanblaster_present: bool = False,
    ) -> SoundSettings:
        """Choose clock, prescaler and effective rate; returns ``self``.

        When no rate was asked for, the original rate is aimed at and the
        wanted rate becomes the effective one.
        """
        managed = self.wanted_samplerate == 0
        wanted = self.original_samplerate if managed else self.wanted_samplerate
        clock_value, source = select_clock(
            computer_type, wanted, gpio_bit, milanblaster_present
        )
        prescale = compute_prescale(clock_value, wanted)
        rate, source = effective_samplerate(prescale, source)
        self.prescale = prescale
        self.clock_source = source
        self.effective_samplerate = rate
        self.wanted_samplerate = rate if managed else wanted
        return self

    def buffer_size(self) -> int:
        """Bytes needed for one second of playback at the effective format."""
        return (
            self.effective_samplerate
            * self.effective_channels
            * self.effective_bytes_per_sample
        )


@dataclass
class DoubleBuffer:
    """Two equal buffers: one being played, one being filled."""

    size: int
    physical: bytearray = field(init=False, repr=False)
    logical: bytearray = field(init=False, repr=False)
    surplus: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.size <= 0:
            raise ValueError(f"buffer size must be positive, not {self.size}")
        self.physical = bytearray(self.size)
        self.logical = bytearray(self.size)
        self.surplus = bytearray()

    def swap(self) -> None:
        """Make the logical buffer the one being played, and vice versa."""
        self.physical, self.logical = self.logical, self.physical

    def fill(self, feed: Callable[[bytearray], object]) -> bytearray:
        """Let ``feed`` write the logical buffer, then swap; return the new physical buffer."""
        feed(self.logical)
        if len(self.logical) != self.size:
            raise ValueError("feed must not change the buffer length")
        self.swap()
        return self.physical


@dataclass(eq=False)
class RingSlot:
    """One buffer of a circular chain of playback buffers."""

    buffer: bytearray = field(repr=False)
    index: int = 0
    count: int = 0
    available: bool = True
    bytes_to_consume: int = 0
    next: RingSlot | None = field(default=None, repr=False)
    previous: RingSlot | None = field(default=None, repr=False)


def build_ring(count: int, size: int) -> RingSlot:
    """Build ``count`` zeroed slots of ``size`` bytes linked in a circle; return the first."""
    if count <= 0:
        raise ValueError(f"a ring needs at least one slot, not {count}")
    if size < 0:
        raise ValueError(f"slot size must not be negative: {size}")
    slots = [RingSlot(bytearray(size), index, count) for index in range(count)]
    for position, slot in enumerate(slots):
        slot.next = slots[(position + 1) % count]
        slot.previous = slots[position - 1]
    return slots[0]


def float_to_pcm16(samples: Iterable[float]) -> list[int]:
    """Convert float samples in -1..1 to clipped signed 16-bit integers."""
    return [
        max(_PCM_MIN, min(_PCM_MAX, int(_PCM_SCALE * sample))) for sample in samples
    ]


def pcm16_to_float(samples: Iterable[int]) -> list[float]:
    """Convert signed 16-bit integers to floats in -1..1."""
    return [sample / _PCM_SCALE for sample in samples]