from texdecode.bc import (
    decode_bc1_block,
    decode_bc1a_block,
    decode_bc2_alpha,
    decode_bc2_block,
    decode_bc3_alpha,
    decode_bc3_block,
    decode_bc4_block,
    decode_bc5_block,
)
from texdecode.color import color

WHITE_BLACK = bytes([0xFF, 0xFF, 0x00, 0x00])
BLACK_WHITE = bytes([0x00, 0x00, 0xFF, 0xFF])
ALL_INDEX_1_3BIT = bytes([0x49, 0x92, 0x24, 0x49, 0x92, 0x24])


def test_bc1_endpoints():
    assert decode_bc1_block(WHITE_BLACK + bytes(4)) == [color(255, 255, 255, 255)] * 16
    assert decode_bc1_block(WHITE_BLACK + bytes([0x55] * 4)) == [color(0, 0, 0, 255)] * 16


def test_bc1_interpolation():
    pixels = decode_bc1_block(WHITE_BLACK + bytes([0xAA] * 4))
    assert pixels == [color(170, 170, 170, 255)] * 16


def test_bc1_transparent_index():
    block = BLACK_WHITE + bytes([0xFF] * 4)
    assert decode_bc1_block(block) == [color(0, 0, 0, 255)] * 16
    assert decode_bc1a_block(block) == [color(0, 0, 0, 0)] * 16


def test_bc2_alpha_nibbles():
    pixels = decode_bc2_alpha(bytes([0x0F] * 8), [0] * 16, 3)
    assert [p >> 24 for p in pixels] == [255, 0] * 8


def test_bc2_block_opaque():
    block = bytes([0xFF] * 8) + WHITE_BLACK + bytes(4)
    assert decode_bc2_block(block) == [color(255, 255, 255, 255)] * 16


def test_bc3_alpha_endpoints():
    first = decode_bc3_alpha(bytes([255, 0]) + bytes(6), [0] * 16, 3)
    assert [p >> 24 for p in first] == [255] * 16
    second = decode_bc3_alpha(bytes([255, 0]) + ALL_INDEX_1_3BIT, [0] * 16, 3)
    assert [p >> 24 for p in second] == [0] * 16


def test_bc3_alpha_fixed_values():
    pixels = decode_bc3_alpha(bytes([0, 0]) + bytes([0xFF] * 6), [0] * 16, 3)
    assert [p >> 24 for p in pixels] == [255] * 16


def test_bc3_alpha_keeps_other_channels():
    original = [color(1, 2, 3, 4)] * 16
    pixels = decode_bc3_alpha(bytes([255, 0]) + bytes(6), original, 3)
    assert [p & 0xFFFFFF for p in pixels] == [p & 0xFFFFFF for p in original]


def test_bc3_block():
    block = bytes([255, 0]) + ALL_INDEX_1_3BIT + WHITE_BLACK + bytes(4)
    assert decode_bc3_block(block) == [color(255, 255, 255, 0)] * 16


def test_bc4_red_only():
    assert decode_bc4_block(bytes([200, 0]) + bytes(6)) == [color(200, 0, 0, 0)] * 16


def test_bc5_red_and_green():
    block = bytes([200, 0]) + bytes(6) + bytes([100, 0]) + bytes(6)
    assert decode_bc5_block(block) == [color(200, 100, 0, 0)] * 16