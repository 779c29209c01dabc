"""ASTC weight decoding, partition selection, colour application and image decoding."""

import math

from .astc_endpoints import decode_endpoints
from .astc_params import (
    MAX_BLOCK_PIXELS,
    WEIGHT_PREC_TABLE_A,
    WEIGHT_PREC_TABLE_B,
    decode_block_params,
    decode_intseq,
)
from .color import color, decode_blocks, half_to_float

_MASK32 = 0xFFFFFFFF

# Colour endpoint modes whose colour (and alpha) channels are HDR.
_HDR_COLOR_MODES = frozenset({2, 3, 7, 11, 14, 15})
_HDR_ALPHA_MODES = frozenset({2, 3, 7, 11, 15})

_ERROR_COLOR = color(255, 0, 255, 255)


def _trunc_div(numerator, denominator):
    quotient = abs(numerator) // denominator
    return quotient if numerator >= 0 else -quotient


def select_color(v0, v1, weight):
    """Interpolate two 8-bit LDR endpoint values with a 0..64 weight."""
    mixed = (((v0 << 8) | v0) * (64 - weight) + ((v1 << 8) | v1) * weight + 32) >> 6
    return _trunc_div(mixed * 255 + 32768, 65536) & 0xFF


def select_color_hdr(v0, v1, weight):
    """Interpolate two 12-bit HDR endpoint values and tone-map the result to 8 bits."""
    c = (((v0 << 4) * (64 - weight) + (v1 << 4) * weight + 32) >> 6) & 0xFFFF
    m = c & 0x7FF
    if m < 512:
        m *= 3
    elif m < 1536:
        m = 4 * m - 512
    else:
        m = 5 * m - 2048
    f = half_to_float(((c >> 1) & 0x7C00) | (m >> 3))
    if math.isfinite(f):
        return min(max(math.floor(f * 255.0), 0), 255)
    return 255


def _half_to_u8(raw):
    f = half_to_float(int.from_bytes(raw, "little"))
    if math.isnan(f):
        return 0
    if math.isinf(f):
        return 255 if f > 0 else 0
    return min(max(math.floor(f * 255.0), 0), 255)


def _bump(value):
    return value + 1 if value > 32 else value


def _unquantize_weights(seq, a, b):
    if a == 0:
        if b == 1:
            raw = [63 if s.bits else 0 for s in seq]
        elif b == 2:
            raw = [(s.bits << 4) | (s.bits << 2) | s.bits for s in seq]
        elif b == 3:
            raw = [(s.bits << 3) | s.bits for s in seq]
        elif b == 4:
            raw = [(s.bits << 2) | (s.bits >> 2) for s in seq]
        elif b == 5:
            raw = [(s.bits << 1) | (s.bits >> 4) for s in seq]
        else:
            raise ValueError("Unsupported ASTC format")
        return [_bump(w) for w in raw]

    if b == 0:
        scale = 32 if a == 3 else 16
        return [s.nonbits * scale for s in seq]

    if a == 3 and b == 1:
        raw = [s.nonbits * 50 for s in seq]
    elif a == 3 and b == 2:
        raw = [s.nonbits * 23 + (0b1000101 if s.bits & 2 else 0) for s in seq]
    elif a == 3 and b == 3:
        raw = [
            s.nonbits * 11 + (((s.bits << 4) | (s.bits >> 1)) & 0b1100011) for s in seq
        ]
    elif a == 5 and b == 1:
        raw = [s.nonbits * 28 for s in seq]
    elif a == 5 and b == 2:
        raw = [s.nonbits * 13 + (0b1000010 if s.bits & 2 else 0) for s in seq]
    else:
        raise ValueError("Unsupported ASTC format")

    values = []
    for s, w in zip(seq, raw):
        mirror = (s.bits & 1) * 0x7F
        values.append(_bump((mirror & 0x20) | ((w ^ mirror) >> 2)))
    return values


def decode_weights(buf, data):
    """Decode the weight grid and infill it to per-pixel weights in ``data.weights``."""
    a = WEIGHT_PREC_TABLE_A[data.weight_range]
    b = WEIGHT_PREC_TABLE_B[data.weight_range]
    seq = decode_intseq(buf, 128, a, b, data.weight_num, True)
    values = _unquantize_weights(seq, a, b)

    planes = 2 if data.dual_plane else 1
    needed = max(128, (data.width * data.height + data.width + 2) * planes)
    wv = values + [0] * (needed - len(values))

    ds = (1024 + data.bw // 2) // (data.bw - 1)
    dt = (1024 + data.bh // 2) // (data.bh - 1)

    i = 0
    for t in range(data.bh):
        for s in range(data.bw):
            gs = (ds * s * (data.width - 1) + 32) >> 6
            gt = (dt * t * (data.height - 1) + 32) >> 6
            fs = gs & 0xF
            ft = gt & 0xF
            v = (gs >> 4) + (gt >> 4) * data.width
            w11 = (fs * ft + 8) >> 4
            w10 = ft - w11
            w01 = fs - w11
            w00 = 16 - fs - ft + w11
            for p in range(planes):
                p00 = wv[v * planes + p]
                p01 = wv[(v + 1) * planes + p]
                p10 = wv[(v + data.width) * planes + p]
                p11 = wv[(v + data.width + 1) * planes + p]
                data.weights[i][p] = (p00 * w00 + p01 * w01 + p10 * w10 + p11 * w11 + 8) >> 4
            i += 1
    return data.weights


def _partition_hash(seed):
    rnum = seed & _MASK32
    rnum ^= rnum >> 15
    rnum = (rnum - (rnum << 17)) & _MASK32
    rnum = (rnum + (rnum << 7)) & _MASK32
    rnum = (rnum + (rnum << 4)) & _MASK32
    rnum ^= rnum >> 5
    rnum = (rnum + (rnum << 16)) & _MASK32
    rnum ^= rnum >> 7
    rnum ^= rnum >> 3
    rnum ^= (rnum << 6) & _MASK32
    rnum ^= rnum >> 17
    return rnum


def select_partition(buf, data):
    """Assign each pixel of the block to a partition, stored in ``data.partition``."""
    small_block = data.bw * data.bh < 31
    seed = ((int.from_bytes(buf[0:4], "little") >> 13) & 0x3FF) | ((data.part_num - 1) << 10)
    rnum = _partition_hash(seed)

    seeds = [((rnum >> (i * 4)) & 0xF) ** 2 for i in range(8)]
    shifts = (4 if seed & 2 else 5, 6 if data.part_num == 3 else 5)
    if seed & 1:
        seeds = [value >> shifts[i % 2] for i, value in enumerate(seeds)]
    else:
        seeds = [value >> shifts[1 - i % 2] for i, value in enumerate(seeds)]

    scale = 2 if small_block else 1
    i = 0
    for t in range(data.bh):
        for s in range(data.bw):
            x = s * scale
            y = t * scale
            a = (seeds[0] * x + seeds[1] * y + (rnum >> 14)) & 0x3F
            b = (seeds[2] * x + seeds[3] * y + (rnum >> 10)) & 0x3F
            c = 0 if data.part_num < 3 else (seeds[4] * x + seeds[5] * y + (rnum >> 6)) & 0x3F
            d = 0 if data.part_num < 4 else (seeds[6] * x + seeds[7] * y + (rnum >> 2)) & 0x3F
            if a >= b and a >= c and a >= d:
                data.partition[i] = 0
            elif b >= c and b >= d:
                data.partition[i] = 1
            elif c >= d:
                data.partition[i] = 2
            else:
                data.partition[i] = 3
            i += 1
    return data.partition


def apply_color(data):
    """Combine endpoints, weights and partitions into the block's pixels."""
    planes = [0, 0, 0, 0]
    if data.dual_plane:
        planes[data.plane_selector] = 1
    pixels = []
    for i in range(data.bw * data.bh):
        part = data.partition[i] if data.part_num > 1 else 0
        cem = data.cem[part]
        ep = data.endpoints[part]
        weights = data.weights[i]
        pick_color = select_color_hdr if cem in _HDR_COLOR_MODES else select_color
        pick_alpha = select_color_hdr if cem in _HDR_ALPHA_MODES else select_color
        r = pick_color(ep[0], ep[4], weights[planes[0]])
        g = pick_color(ep[1], ep[5], weights[planes[1]])
        b = pick_color(ep[2], ep[6], weights[planes[2]])
        a = pick_alpha(ep[3], ep[7], weights[planes[3]])
        pixels.append(color(r, g, b, a))
    return pixels


def _check_block_size(block_width, block_height):
    if block_width * block_height > MAX_BLOCK_PIXELS:
        raise ValueError("Block size is too big!")
    if block_width < 2 or block_height < 2:
        raise ValueError("Block size is too small!")


def decode_astc_block(buf, block_width, block_height):
    """Decode one 16-byte ASTC block into ``block_width * block_height`` pixels."""
    _check_block_size(block_width, block_height)
    if len(buf) < 16:
        raise ValueError("an ASTC block needs 16 bytes")
    count = block_width * block_height
    if buf[0] == 0xFC and buf[1] & 1:
        if buf[1] & 2:
            value = color(
                _half_to_u8(buf[8:10]),
                _half_to_u8(buf[10:12]),
                _half_to_u8(buf[12:14]),
                _half_to_u8(buf[14:16]),
            )
        else:
            value = color(buf[9], buf[11], buf[13], buf[15])
        return [value] * count
    if ((buf[0] & 0xC3) == 0xC0 and buf[1] & 1) or (buf[0] & 0xF) == 0:
        return [_ERROR_COLOR] * count

    data = decode_block_params(buf, block_width, block_height)
    decode_endpoints(buf, data)
    decode_weights(buf, data)
    if data.part_num > 1:
        select_partition(buf, data)
    return apply_color(data)


def decode_astc(data, width, height, block_width, block_height):
    """Decode an ASTC image with the given block footprint into BGRA bytes."""
    _check_block_size(block_width, block_height)
    return decode_blocks(
        data,
        width,
        height,
        block_width,
        block_height,
        16,
        lambda block: decode_astc_block(block, block_width, block_height),
    )


def decode_astc_4_4(data, width, height):
    """Decode a 4x4-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 4, 4)


def decode_astc_5_4(data, width, height):
    """Decode a 5x4-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 5, 4)


def decode_astc_5_5(data, width, height):
    """Decode a 5x5-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 5, 5)


def decode_astc_6_5(data, width, height):
    """Decode a 6x5-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 6, 5)


def decode_astc_6_6(data, width, height):
    """Decode a 6x6-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 6, 6)


def decode_astc_8_5(data, width, height):
    """Decode an 8x5-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 8, 5)


def decode_astc_8_6(data, width, height):
    """Decode an 8x6-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 8, 6)


def decode_astc_8_8(data, width, height):
    """Decode an 8x8-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 8, 8)


def decode_astc_10_5(data, width, height):
    """Decode a 10x5-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 10, 5)


def decode_astc_10_6(data, width, height):
    """Decode a 10x6-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 10, 6)


def decode_astc_10_8(data, width, height):
    """Decode a 10x8-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 10, 8)


def decode_astc_10_10(data, width, height):
    """Decode a 10x10-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 10, 10)


def decode_astc_12_10(data, width, height):
    """Decode a 12x10-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 12, 10)


def decode_astc_12_12(data, width, height):
    """Decode a 12x12-block ASTC image into BGRA bytes."""
    return decode_astc(data, width, height, 12, 12)