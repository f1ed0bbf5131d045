import pytest

from stpixel.sound import (
    CLOCK_44K_HZ,
    CLOCK_48K_HZ,
    INTERNAL_CLOCK_HZ,
    ClockSource,
    DoubleBuffer,
    SoundSettings,
    build_ring,
    compute_prescale,
    effective_samplerate,
    float_to_pcm16,
    pcm16_to_float,
    select_clock,
)


def test_select_clock_default_is_internal():
    assert select_clock(0x03, 44100, 1) == (INTERNAL_CLOCK_HZ, ClockSource.INTERNAL)


def test_select_clock_milan_without_blaster_is_internal():
    assert select_clock(0x04, 44100, 1, False) == (INTERNAL_CLOCK_HZ, ClockSource.INTERNAL)


@pytest.mark.parametrize(
    "bit, expected",
    [(1, (CLOCK_48K_HZ, ClockSource.EXTERNAL_48K)), (0, (CLOCK_44K_HZ, ClockSource.EXTERNAL_44K))],
)
def test_select_clock_milanblaster(bit, expected):
    assert select_clock(0x04, 44100, bit, True) == expected


def test_select_clock_type6_multiples():
    assert select_clock(0x06, 22050, 0) == (CLOCK_44K_HZ, ClockSource.EXTERNAL_44K)
    assert select_clock(0x06, 48000, 1) == (CLOCK_48K_HZ, ClockSource.EXTERNAL_48K)
    assert select_clock(0x06, 48000, 0) == (INTERNAL_CLOCK_HZ, ClockSource.INTERNAL)
    assert select_clock(0x06, 32000, 1) == (INTERNAL_CLOCK_HZ, ClockSource.INTERNAL)


def test_compute_prescale_rejects_zero_rate():
    with pytest.raises(ValueError):
        compute_prescale(INTERNAL_CLOCK_HZ, 0)


@pytest.mark.parametrize(
    "prescale, source, rate",
    [
        (1, ClockSource.EXTERNAL_44K, 44100),
        (1, ClockSource.EXTERNAL_48K, 48000),
        (1, ClockSource.INTERNAL, 49165),
        (3, ClockSource.EXTERNAL_44K, 22050),
        (3, ClockSource.INTERNAL, 24594),
        (6, ClockSource.EXTERNAL_48K, 12000),
        (6, ClockSource.INTERNAL, 12273),
        (8, ClockSource.INTERNAL, 8194),
    ],
)
def test_effective_samplerate_table(prescale, source, rate):
    assert effective_samplerate(prescale, source) == (rate, source)


def test_effective_samplerate_forces_internal_for_odd_prescales():
    assert effective_samplerate(2, ClockSource.EXTERNAL_44K) == (32779, ClockSource.INTERNAL)
    assert effective_samplerate(7, ClockSource.EXTERNAL_48K) == (9833, ClockSource.INTERNAL)


@pytest.mark.parametrize("prescale", [0, 9, -1])
def test_effective_samplerate_unknown_prescale(prescale):
    with pytest.raises(ValueError):
        effective_samplerate(prescale, ClockSource.INTERNAL)


def test_preset_internal_rate_is_stable():
    settings = SoundSettings(original_samplerate=49165).preset(0x03)
    assert settings.effective_samplerate == 49165
    assert settings.clock_source == ClockSource.INTERNAL
    again = SoundSettings(original_samplerate=settings.effective_samplerate).preset(0x03)
    assert again.prescale == settings.prescale


def test_preset_keeps_explicit_wanted_rate():
    settings = SoundSettings(original_samplerate=44100, wanted_samplerate=49165)
    settings.preset(0x03)
    assert settings.wanted_samplerate == 49165
    assert settings.effective_samplerate == 49165


def test_preset_unreachable_rate_raises():
    settings = SoundSettings(original_samplerate=1000)
    with pytest.raises(ValueError):
        settings.preset(0x03)
    assert settings.wanted_samplerate == 0


def test_buffer_size_is_one_second():
    settings = SoundSettings(original_samplerate=48000).preset(0x04, 1, True)
    assert settings.buffer_size() == 48000 * 2 * 2


def test_double_buffer_swap_and_fill():
    buffers = DoubleBuffer(4)
    first_logical = buffers.logical

    def feed(target):
        target[:] = b"\x01\x02\x03\x04"

    played = buffers.fill(feed)
    assert played is first_logical
    assert bytes(buffers.physical) == b"\x01\x02\x03\x04"
    assert bytes(buffers.logical) == bytes(4)
    buffers.swap()
    assert buffers.logical is first_logical


def test_double_buffer_feed_must_keep_length():
    buffers = DoubleBuffer(4)
    with pytest.raises(ValueError):
        buffers.fill(lambda target: target.extend(b"\x00"))


def test_double_buffer_rejects_zero_size():
    with pytest.raises(ValueError):
        DoubleBuffer(0)


def test_build_ring_is_circular():
    first = build_ring(3, 8)
    slot = first
    seen = []
    for _ in range(3):
        seen.append(slot.index)
        assert slot.count == 3
        assert slot.available
        assert bytes(slot.buffer) == bytes(8)
        assert slot.next.previous is slot
        slot = slot.next
    assert slot is first
    assert seen == [0, 1, 2]
    assert first.previous.index == 2


def test_build_ring_single_slot_points_to_itself():
    only = build_ring(1, 2)
    assert only.next is only
    assert only.previous is only


def test_build_ring_rejects_empty():
    with pytest.raises(ValueError):
        build_ring(0, 8)


def test_float_to_pcm16_clips():
    assert float_to_pcm16([1.0, -1.0, 2.0, -2.0, 0.0]) == [32767, -32768, 32767, -32768, 0]


def test_pcm16_to_float_range():
    values = pcm16_to_float([-32768, 0, 32767])
    assert values[0] == -1.0
    assert values[1] == 0.0
    assert 0.99 < values[2] < 1.0


def test_pcm_round_trip():
    samples = list(range(-32768, 32768, 257)) + [32767]
    assert float_to_pcm16(pcm16_to_float(samples)) == samples