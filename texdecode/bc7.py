"""Block decoder for BC7 (BPTC unorm) textures."""

from typing import NamedTuple

from .bits import BitReader
from .bptc_tables import BPTC_A2, BPTC_A3, BPTC_FACTORS, BPTC_P2, BPTC_P3
from .color import color


class _ModeInfo(NamedTuple):
    num_subsets: int
    partition_bits: int
    rotation_bits: int
    index_selection_bits: int
    color_bits: int
    alpha_bits: int
    endpoint_pbits: int
    shared_pbits: int
    index_bits: tuple


_MODES = (
    _ModeInfo(3, 4, 0, 0, 4, 0, 1, 0, (3, 0)),
    _ModeInfo(2, 6, 0, 0, 6, 0, 0, 1, (3, 0)),
    _ModeInfo(3, 6, 0, 0, 5, 0, 0, 0, (2, 0)),
    _ModeInfo(2, 6, 0, 0, 7, 0, 1, 0, (2, 0)),
    _ModeInfo(1, 0, 2, 1, 5, 6, 0, 0, (2, 3)),
    _ModeInfo(1, 0, 2, 0, 7, 8, 0, 0, (2, 2)),
    _ModeInfo(1, 0, 0, 0, 7, 7, 1, 0, (4, 0)),
    _ModeInfo(2, 6, 0, 0, 5, 5, 1, 0, (2, 0)),
)


def _expand_quantized(value, bits):
    shifted = (value << (8 - bits)) & 0xFF
    return shifted | (shifted >> bits)


def _subset_and_anchor(info, partition, idx):
    if info.num_subsets == 2:
        subset = (BPTC_P2[partition] >> idx) & 1
        return subset, (BPTC_A2[partition] if subset else 0)
    if info.num_subsets == 3:
        subset = (BPTC_P3[partition] >> (2 * idx)) & 3
        return subset, (BPTC_A3[subset - 1][partition] if subset else 0)
    return 0, 0


def decode_bc7_block(data):
    """Decode a 16-byte BC7 block into 16 pixels."""
    if len(data) < 16:
        raise ValueError("a BC7 block needs 16 bytes")
    reader = BitReader(data, 0)
    mode = 0
    while mode < 8 and reader.read(1) == 0:
        mode += 1
    if mode == 8:
        return [0] * 16

    info = _MODES[mode]
    pbits = info.endpoint_pbits or info.shared_pbits
    partition = reader.read(info.partition_bits)
    rotation = reader.read(info.rotation_bits)
    selection = reader.read(info.index_selection_bits)
    count = info.num_subsets * 2

    def read_channel(bits):
        return [(reader.read(bits) << pbits) & 0xFF for _ in range(count)]

    endpoints = [read_channel(info.color_bits) for _ in range(3)]
    if info.alpha_bits:
        endpoints.append(read_channel(info.alpha_bits))
    else:
        endpoints.append([0xFF] * count)

    if pbits:
        for subset in range(info.num_subsets):
            pa = reader.read(pbits)
            pb = pa if info.shared_pbits else reader.read(pbits)
            for channel in endpoints:
                channel[2 * subset] |= pa
                channel[2 * subset + 1] |= pb

    color_total = info.color_bits + pbits
    for channel in endpoints[:3]:
        channel[:] = [_expand_quantized(v, color_total) for v in channel]
    if info.alpha_bits:
        alpha_total = info.alpha_bits + pbits
        endpoints[3][:] = [_expand_quantized(v, alpha_total) for v in endpoints[3]]

    has_second = info.index_bits[1] != 0
    factors = (
        BPTC_FACTORS[info.index_bits[0] - 2],
        BPTC_FACTORS[(info.index_bits[1] if has_second else info.index_bits[0]) - 2],
    )
    offsets = [0, info.num_subsets * (16 * info.index_bits[0] - 1)]

    pixels = []
    for idx in range(16):
        subset, anchor_idx = _subset_and_anchor(info, partition, idx)
        anchor = 1 if idx == anchor_idx else 0
        widths = (
            info.index_bits[0] - anchor,
            info.index_bits[1] - anchor if has_second else 0,
        )
        first = reader.peek(offsets[0], widths[0])
        indices = (first, reader.peek(offsets[1], widths[1]) if has_second else first)
        offsets[0] += widths[0]
        offsets[1] += widths[1]

        fc = factors[selection][indices[selection]]
        fa = factors[1 - selection][indices[1 - selection]]

        base = 2 * subset
        r, g, b = (
            (ch[base] * (64 - fc) + ch[base + 1] * fc + 32) >> 6
            for ch in endpoints[:3]
        )
        alpha = endpoints[3]
        a = (alpha[base] * (64 - fa) + alpha[base + 1] * fa + 32) >> 6

        if rotation == 1:
            a, r = r, a
        elif rotation == 2:
            a, g = g, a
        elif rotation == 3:
            a, b = b, a
        pixels.append(color(r, g, b, a))
    return pixels