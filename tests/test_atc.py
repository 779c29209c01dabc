import struct

import pytest

from texdecode.atc import (
    decode_atc_rgb4,
    decode_atc_rgb4_block,
    decode_atc_rgba8,
    decode_atc_rgba8_block,
)
from texdecode.color import color


def test_rgb4_first_endpoint_white():
    block = bytes([0xFF, 0x7F, 0x00, 0x00]) + bytes(4)
    assert decode_atc_rgb4_block(block) == [color(255, 255, 255, 255)] * 16


def test_rgb4_channel_order():
    block = bytes([0x1F, 0x00, 0x00, 0x00]) + bytes(4)
    assert decode_atc_rgb4_block(block) == [color(0, 0, 255, 255)] * 16


def test_rgb4_last_endpoint():
    block = bytes([0x00, 0x00, 0xFF, 0xFF]) + bytes([0xFF] * 4)
    assert decode_atc_rgb4_block(block) == [color(255, 255, 255, 255)] * 16


def test_rgb4_alternate_mode_black():
    block = bytes([0xFF, 0xFF, 0xFF, 0xFF]) + bytes(4)
    assert decode_atc_rgb4_block(block) == [color(0, 0, 0, 255)] * 16


def test_rgba8_alpha_applied():
    colour = bytes([0xFF, 0x7F, 0x00, 0x00]) + bytes(4)
    opaque = decode_atc_rgba8_block(bytes([255, 0]) + bytes(6) + colour)
    assert opaque == decode_atc_rgb4_block(colour)
    clear = decode_atc_rgba8_block(bytes([0, 255]) + bytes(6) + colour)
    assert [p >> 24 for p in clear] == [0] * 16


def test_decode_atc_rgb4_image():
    block = bytes([0xFF, 0x7F, 0x00, 0x00]) + bytes(4)
    raw = decode_atc_rgb4(block * 2, 5, 4)
    assert len(raw) == 5 * 4 * 4
    assert set(struct.unpack("<20I", raw)) == {color(255, 255, 255, 255)}


def test_decode_atc_rgba8_image():
    block = bytes([255, 0]) + bytes(6) + bytes([0xFF, 0x7F, 0x00, 0x00]) + bytes(4)
    raw = decode_atc_rgba8(block, 4, 4)
    assert len(raw) == 64
    assert set(struct.unpack("<16I", raw)) == {color(255, 255, 255, 255)}


def test_decode_atc_not_enough_data():
    with pytest.raises(ValueError):
        decode_atc_rgb4(bytes(8), 8, 8)
    with pytest.raises(ValueError):
        decode_atc_rgba8(bytes(8), 4, 4)