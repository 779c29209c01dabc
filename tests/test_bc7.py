import pytest

from texdecode.bc7 import decode_bc7_block
from texdecode.color import color


class _BitWriter:
    def __init__(self):
        self.value = 0
        self.pos = 0

    def put(self, value, bits):
        self.value |= (value & ((1 << bits) - 1)) << self.pos
        self.pos += bits
        return self

    def block(self):
        assert self.pos <= 128
        return self.value.to_bytes(16, "little")


def _mode6(channel_value, pbit, indices):
    w = _BitWriter().put(1 << 6, 7)
    for _ in range(4):
        w.put(channel_value, 7).put(channel_value, 7)
    w.put(pbit, 1).put(pbit, 1)
    for i, index in enumerate(indices):
        w.put(index, 3 if i == 0 else 4)
    return w.block()


def _mode6_gradient(indices):
    w = _BitWriter().put(1 << 6, 7)
    for _ in range(4):
        w.put(0, 7).put(0x7F, 7)
    w.put(0, 1).put(1, 1)
    for i, index in enumerate(indices):
        w.put(index, 3 if i == 0 else 4)
    return w.block()


def _mode5(rotation, r0, a0):
    w = _BitWriter().put(1 << 5, 6).put(rotation, 2)
    w.put(r0, 7).put(r0, 7)
    w.put(0, 7).put(0, 7)
    w.put(0, 7).put(0, 7)
    w.put(a0, 8).put(a0, 8)
    w.put(0, 31).put(0, 31)
    return w.block()


def test_reserved_mode_gives_transparent_black():
    assert decode_bc7_block(bytes(16)) == [0] * 16


def test_mode6_full_white():
    pixels = decode_bc7_block(_mode6(0x7F, 1, [0] * 16))
    assert pixels == [color(255, 255, 255, 255)] * 16


def test_mode6_all_zero_endpoints():
    pixels = decode_bc7_block(_mode6(0, 0, [0] * 16))
    assert pixels == [color(0, 0, 0, 0)] * 16


def test_mode6_index_extremes_select_endpoints():
    indices = [0] + [15] * 15
    pixels = decode_bc7_block(_mode6_gradient(indices))
    assert pixels[0] == color(0, 0, 0, 0)
    assert pixels[1:] == [color(255, 255, 255, 255)] * 15


def test_mode6_gradient_is_monotonic():
    indices = [min(i, 7) if i == 0 else i for i in range(16)]
    pixels = decode_bc7_block(_mode6_gradient(indices))
    reds = [(p >> 16) & 0xFF for p in pixels[1:]]
    assert reds == sorted(reds)
    assert all(p & 0xFF == (p >> 16) & 0xFF for p in pixels)


def test_mode5_without_rotation():
    pixels = decode_bc7_block(_mode5(0, 0x7F, 0))
    assert pixels == [color(255, 0, 0, 0)] * 16


def test_mode5_rotation_swaps_alpha_and_red():
    pixels = decode_bc7_block(_mode5(1, 0x7F, 0))
    assert pixels == [color(0, 0, 0, 255)] * 16


def test_uniform_block_gives_identical_pixels():
    pixels = decode_bc7_block(_mode6(0x40, 1, [0] * 16))
    assert len(pixels) == 16
    assert len(set(pixels)) == 1


def test_short_block_raises():
    with pytest.raises(ValueError):
        decode_bc7_block(bytes(8))