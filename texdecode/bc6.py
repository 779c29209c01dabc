"""Block decoder for BC6H (BPTC float) textures, tone-mapped to 8-bit BGRA pixels."""

import math
from typing import NamedTuple

from .bits import BitReader
from .bptc_tables import BPTC_A2, BPTC_FACTORS, BPTC_P2
from .color import color, half_to_float


class _ModeInfo(NamedTuple):
    transformed: bool
    partition_bits: int
    endpoint_bits: int
    delta_bits: tuple


# Modes missing from this table are reserved and decode to transparent black.
_MODE_INFO = {
    0: _ModeInfo(True, 5, 10, (5, 5, 5)),
    1: _ModeInfo(True, 5, 7, (6, 6, 6)),
    2: _ModeInfo(True, 5, 11, (5, 4, 4)),
    3: _ModeInfo(False, 0, 10, (10, 10, 10)),
    6: _ModeInfo(True, 5, 11, (4, 5, 4)),
    7: _ModeInfo(True, 0, 11, (9, 9, 9)),
    10: _ModeInfo(True, 5, 11, (4, 4, 5)),
    11: _ModeInfo(True, 0, 12, (8, 8, 8)),
    14: _ModeInfo(True, 5, 9, (5, 5, 5)),
    15: _ModeInfo(True, 0, 16, (4, 4, 4)),
    18: _ModeInfo(True, 5, 8, (6, 5, 5)),
    22: _ModeInfo(True, 5, 8, (5, 6, 5)),
    26: _ModeInfo(True, 5, 8, (5, 5, 6)),
    30: _ModeInfo(False, 5, 6, (6, 6, 6)),
}

# Endpoint bit layouts, in stream order. "r1:5" reads five bits into the low
# bits of red endpoint 1; "b3@2" reads one bit into bit 2 of blue endpoint 3.
_LAYOUT_SPECS = {
    0: "g2@4 b2@4 b3@4 r0:10 g0:10 b0:10 r1:5 g3@4 g2:4 g1:5 b3@0 g3:4 b1:5 "
       "b3@1 b2:4 r2:5 b3@2 r3:5 b3@3",
    1: "g2@5 g3@4 g3@5 r0:7 b3@0 b3@1 b2@4 g0:7 b2@5 b3@2 g2@4 b0:7 b3@3 b3@5 "
       "b3@4 r1:6 g2:4 g1:6 g3:4 b1:6 b2:4 r2:6 r3:6",
    2: "r0:10 g0:10 b0:10 r1:5 r0@10 g2:4 g1:4 g0@10 b3@0 g3:4 b1:4 b0@10 b3@1 "
       "b2:4 r2:5 b3@2 r3:5 b3@3",
    3: "r0:10 g0:10 b0:10 r1:10 g1:10 b1:10",
    6: "r0:10 g0:10 b0:10 r1:4 r0@10 g3@4 g2:4 g1:5 g0@10 g3:4 b1:4 b0@10 b3@1 "
       "b2:4 r2:4 b3@0 b3@2 r3:4 g2@4 b3@3",
    7: "r0:10 g0:10 b0:10 r1:9 r0@10 g1:9 g0@10 b1:9 b0@10",
    10: "r0:10 g0:10 b0:10 r1:4 r0@10 b2@4 g2:4 g1:4 g0@10 b3@0 g3:4 b1:5 b0@10 "
        "b2:4 r2:4 b3@1 b3@2 r3:4 b3@4 b3@3",
    11: "r0:10 g0:10 b0:10 r1:8 r0@11 r0@10 g1:8 g0@11 g0@10 b1:8 b0@11 b0@10",
    14: "r0:9 b2@4 g0:9 g2@4 b0:9 b3@4 r1:5 g3@4 g2:4 g1:5 b3@0 g3:4 b1:5 b3@1 "
        "b2:4 r2:5 b3@2 r3:5 b3@3",
    15: "r0:10 g0:10 b0:10 r1:4 r0@15 r0@14 r0@13 r0@12 r0@11 r0@10 g1:4 g0@15 "
        "g0@14 g0@13 g0@12 g0@11 g0@10 b1:4 b0@15 b0@14 b0@13 b0@12 b0@11 b0@10",
    18: "r0:8 g3@4 b2@4 g0:8 b3@2 g2@4 b0:8 b3@3 b3@4 r1:6 g2:4 g1:5 b3@0 g3:4 "
        "b1:5 b3@1 b2:4 r2:6 r3:6",
    22: "r0:8 b3@0 b2@4 g0:8 g2@5 g2@4 b0:8 g3@5 b3@4 r1:5 g3@4 g2:4 g1:6 g3:4 "
        "b1:5 b3@1 b2:4 r2:5 b3@2 r3:5 b3@3",
    26: "r0:8 b3@1 b2@4 g0:8 b2@5 g2@4 b0:8 b3@5 b3@4 r1:5 g3@4 g2:4 g1:5 b3@0 "
        "g3:4 b1:6 b2:4 r2:5 b3@2 r3:5 b3@3",
    30: "r0:6 g3@4 b3@0 b3@1 b2@4 g0:6 g2@5 b2@5 b3@2 g2@4 b0:6 g3@5 b3@3 b3@5 "
        "b3@4 r1:6 g2:4 g1:6 g3:4 b1:6 b2:4 r2:6 r3:6",
}

_CHANNELS = {"r": 0, "g": 1, "b": 2}


def _parse_layout(spec):
    fields = []
    for token in spec.split():
        if ":" in token:
            target, count = token.split(":")
            bits, shift = int(count), 0
        else:
            target, position = token.split("@")
            bits, shift = 1, int(position)
        fields.append((_CHANNELS[target[0]], int(target[1]), bits, shift))
    return tuple(fields)


_LAYOUTS = {mode: _parse_layout(spec) for mode, spec in _LAYOUT_SPECS.items()}


def _sign_extend(value, num_bits):
    mask = 1 << (num_bits - 1)
    return ((value ^ mask) - mask) & 0xFFFF


def _unquantize(value, signed, endpoint_bits):
    max_value = 1 << (endpoint_bits - 1)
    if signed:
        if endpoint_bits >= 16:
            return value
        negative = value & 0x8000
        value &= 0x7FFF
        if value == 0:
            unq = 0
        elif value >= max_value - 1:
            unq = 0x7FFF
        else:
            unq = (((value << 15) + 0x4000) >> (endpoint_bits - 1)) & 0xFFFF
        return (0x10000 - unq) & 0xFFFF if negative else unq
    if endpoint_bits >= 15 or value == 0:
        return value
    if value == max_value:
        return 0xFFFF
    return (((value << 15) + 0x4000) >> (endpoint_bits - 1)) & 0xFFFF


def _finish_unquantize(value, signed):
    if signed:
        return (((value & 0x7FFF) * 31) >> 5) & 0xFFFF | (value & 0x8000)
    return ((value * 31) >> 6) & 0xFFFF


def _half_to_u8(h):
    scaled = half_to_float(h) * 255.0
    if math.isnan(scaled):
        return 0
    return int(min(max(scaled, 0.0), 255.0))


def decode_bc6_block(data, signed):
    """Decode a 16-byte BC6H block into 16 opaque pixels."""
    if len(data) < 16:
        raise ValueError("a BC6H block needs 16 bytes")
    reader = BitReader(data, 0)
    mode = reader.read(2)
    if mode & 2:
        mode |= reader.read(3) << 2

    info = _MODE_INFO.get(mode)
    if info is None:
        return [0] * 16

    endpoints = [[0] * 4 for _ in range(3)]
    for channel, index, bits, shift in _LAYOUTS[mode]:
        endpoints[channel][index] |= reader.read(bits) << shift

    endpoint_bits = info.endpoint_bits
    used = 4 if info.partition_bits else 2
    for channel_index, channel in enumerate(endpoints):
        if signed:
            channel[0] = _sign_extend(channel[0], endpoint_bits)
        for i in range(1, used):
            if signed or info.transformed:
                channel[i] = _sign_extend(channel[i], info.delta_bits[channel_index])
            if info.transformed:
                channel[i] = (channel[i] + channel[0]) & ((1 << endpoint_bits) - 1)
                if signed:
                    channel[i] = _sign_extend(channel[i], endpoint_bits)
        channel[:used] = [_unquantize(v, signed, endpoint_bits) for v in channel[:used]]

    partition = reader.read(5) if info.partition_bits else 0
    index_bits = 3 if info.partition_bits else 4
    factors = BPTC_FACTORS[index_bits - 2]

    pixels = []
    for idx in range(16):
        subset = 0
        anchor = 0
        if info.partition_bits:
            subset = (BPTC_P2[partition] >> idx) & 1
            anchor = BPTC_A2[partition] if subset else 0
        weight = factors[reader.read(index_bits - (idx == anchor))]
        r, g, b = (
            _half_to_u8(
                _finish_unquantize(
                    ((channel[2 * subset] * (64 - weight)
                      + channel[2 * subset + 1] * weight + 32) >> 6) & 0xFFFF,
                    signed,
                )
            )
            for channel in endpoints
        )
        pixels.append(color(r, g, b, 255))
    return pixels


def decode_bc6_block_signed(data):
    """Decode a 16-byte signed-float BC6H block."""
    return decode_bc6_block(data, True)


def decode_bc6_block_unsigned(data):
    """Decode a 16-byte unsigned-float BC6H block."""
    return decode_bc6_block(data, False)