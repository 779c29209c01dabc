import pytest

from texdecode.astc import (
    apply_color,
    decode_astc,
    decode_astc_4_4,
    decode_astc_6_5,
    decode_astc_12_12,
    decode_astc_block,
    decode_weights,
    select_color,
    select_color_hdr,
    select_partition,
)
from texdecode.astc_endpoints import decode_endpoints
from texdecode.astc_params import BlockData, decode_block_params
from texdecode.color import color

MAGENTA = color(255, 0, 255, 255)


def void_extent_ldr(r, g, b, a):
    header = bytes([0xFC, 0xFD]) + b"\xff" * 6
    return header + b"".join(bytes([0x00, c]) for c in (r, g, b, a))


def void_extent_hdr(halves):
    header = bytes([0xFC, 0xFF]) + b"\xff" * 6
    return header + b"".join(h.to_bytes(2, "little") for h in halves)


def ldr_luminance_block(v0_high, v1_high, weights_set):
    """Single-partition luminance block, 4x2 one-bit weight grid, 8-bit endpoints."""
    buf = bytearray(16)
    buf[0] = 0x01
    buf[3] = 0x01 if v0_high else 0x00
    buf[4] = 0x01 if v1_high else 0x00
    buf[15] = 0xFF if weights_set else 0x00
    return bytes(buf)


@pytest.mark.parametrize("value", [0, 1, 0x55, 0x80, 0xFE, 255])
@pytest.mark.parametrize("weight", [0, 17, 32, 64])
def test_select_color_equal_endpoints(value, weight):
    assert select_color(value, value, weight) == value


def test_select_color_extremes():
    assert select_color(0, 255, 0) == 0
    assert select_color(0, 255, 64) == 255


def test_select_color_is_monotonic():
    values = [select_color(0, 255, w) for w in range(65)]
    assert values == sorted(values)


def test_select_color_hdr_fixed_points():
    assert select_color_hdr(0, 0, 32) == 0
    assert select_color_hdr(0x780, 0x780, 10) == 255
    assert select_color_hdr(0xFFF, 0xFFF, 32) == 255


def test_void_extent_ldr_fills_block():
    block = void_extent_ldr(0x12, 0x34, 0x56, 0x78)
    pixels = decode_astc_block(block, 4, 4)
    assert pixels == [color(0x12, 0x34, 0x56, 0x78)] * 16


def test_void_extent_hdr_converts_halves():
    block = void_extent_hdr([0x3C00, 0x0000, 0x4000, 0x3C00])
    pixels = decode_astc_block(block, 5, 4)
    assert pixels == [color(255, 0, 255, 255)] * 20


def test_reserved_blocks_are_magenta():
    assert decode_astc_block(bytes(16), 4, 4) == [MAGENTA] * 16
    reserved = bytes([0xC4, 0x01]) + bytes(14)
    assert decode_astc_block(reserved, 6, 6) == [MAGENTA] * 36


def test_equal_endpoints_give_flat_grey():
    block = ldr_luminance_block(True, True, False)
    assert decode_astc_block(block, 4, 4) == [color(0x80, 0x80, 0x80, 255)] * 16


def test_zero_weights_select_first_endpoint():
    block = ldr_luminance_block(False, True, False)
    assert decode_astc_block(block, 4, 4) == [color(0, 0, 0, 255)] * 16


def test_full_weights_select_second_endpoint():
    block = ldr_luminance_block(False, True, True)
    assert decode_astc_block(block, 4, 4) == [color(0x80, 0x80, 0x80, 255)] * 16


def test_decode_weights_full_weights_infill():
    block = ldr_luminance_block(False, True, True)
    data = decode_block_params(block, 4, 4)
    weights = decode_weights(block, data)
    assert [w[0] for w in weights[:16]] == [64] * 16


def test_apply_color_matches_block_decoder():
    block = ldr_luminance_block(True, False, True)
    data = decode_block_params(block, 4, 4)
    decode_endpoints(block, data)
    decode_weights(block, data)
    assert apply_color(data) == decode_astc_block(block, 4, 4)


def test_decode_weights_reserved_range_raises():
    data = BlockData(bw=4, bh=4, width=2, height=2, weight_range=0, weight_num=4)
    with pytest.raises(ValueError):
        decode_weights(bytes(16), data)


@pytest.mark.parametrize("part_num", [2, 3, 4])
@pytest.mark.parametrize("size", [(4, 4), (8, 8)])
def test_select_partition_range_and_determinism(part_num, size):
    bw, bh = size
    buf = bytes(range(16))
    first = BlockData(bw=bw, bh=bh, part_num=part_num)
    second = BlockData(bw=bw, bh=bh, part_num=part_num)
    a = select_partition(buf, first)[: bw * bh]
    b = select_partition(buf, second)[: bw * bh]
    assert a == b
    assert set(a) <= set(range(part_num))


def test_decode_astc_clips_partial_blocks():
    r, g, b, a = 0x10, 0x20, 0x30, 0x40
    data = void_extent_ldr(r, g, b, a) * 4
    image = decode_astc(data, 6, 5, 4, 4)
    assert image == bytes([b, g, r, a]) * 30


def test_sized_decoders_agree_with_generic():
    data = void_extent_ldr(1, 2, 3, 4) * 4
    assert decode_astc_4_4(data, 8, 8) == decode_astc(data, 8, 8, 4, 4)
    assert decode_astc_6_5(data, 12, 10) == decode_astc(data, 12, 10, 6, 5)
    single = void_extent_ldr(9, 8, 7, 6)
    assert decode_astc_12_12(single, 12, 12) == bytes([7, 8, 9, 6]) * 144


def test_decode_astc_not_enough_data():
    with pytest.raises(ValueError):
        decode_astc(bytes(15), 4, 4, 4, 4)


def test_decode_astc_block_too_big():
    with pytest.raises(ValueError):
        decode_astc(void_extent_ldr(0, 0, 0, 0), 4, 4, 13, 12)
    with pytest.raises(ValueError):
        decode_astc_block(void_extent_ldr(0, 0, 0, 0), 13, 12)