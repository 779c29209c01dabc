"""ASTC block-mode parsing and bounded integer sequence decoding."""

from dataclasses import dataclass, field
from typing import NamedTuple

from .bits import getbits, getbits64

# Weight quantisation: (trit/quint kind, extra plain bits) by weight range.
WEIGHT_PREC_TABLE_A = (0, 0, 0, 3, 0, 5, 3, 0, 0, 0, 5, 3, 0, 5, 3, 0)
WEIGHT_PREC_TABLE_B = (0, 0, 1, 0, 2, 0, 1, 3, 0, 0, 1, 2, 4, 2, 3, 5)

# Colour endpoint quantisation levels, from finest to coarsest.
CEM_TABLE_A = (0, 3, 5, 0, 3, 5, 0, 3, 5, 0, 3, 5, 0, 3, 5, 0, 3, 0, 0)
CEM_TABLE_B = (8, 6, 5, 7, 5, 4, 6, 4, 3, 5, 3, 2, 4, 2, 1, 3, 1, 2, 1)

MAX_BLOCK_PIXELS = 144


class IntSeqData(NamedTuple):
    """One decoded element: its plain low bits and its trit or quint."""

    bits: int
    nonbits: int


@dataclass
class BlockData:
    """Everything decoded from one ASTC block."""

    bw: int = 0
    bh: int = 0
    width: int = 0
    height: int = 0
    part_num: int = 0
    dual_plane: bool = False
    plane_selector: int = 0
    weight_range: int = 0
    weight_num: int = 0
    cem: list = field(default_factory=lambda: [0] * 4)
    cem_range: int = 0
    endpoint_value_num: int = 0
    endpoints: list = field(default_factory=lambda: [[0] * 8 for _ in range(4)])
    weights: list = field(default_factory=lambda: [[0, 0] for _ in range(MAX_BLOCK_PIXELS)])
    partition: list = field(default_factory=lambda: [0] * MAX_BLOCK_PIXELS)


def _reverse_bits(value, bits):
    if bits <= 0:
        return 0
    return int(format(value & ((1 << bits) - 1), f"0{bits}b")[::-1], 2)


def _bit(value, n):
    return (value >> n) & 1


def _unpack_trits(t):
    if (t >> 2) & 7 == 7:
        c = (((t >> 5) & 7) << 2) | (t & 3)
        t4 = t3 = 2
    else:
        c = t & 0x1F
        if (t >> 5) & 3 == 3:
            t4, t3 = 2, _bit(t, 7)
        else:
            t4, t3 = _bit(t, 7), (t >> 5) & 3
    if c & 3 == 3:
        t2, t1 = 2, _bit(c, 4)
        t0 = (_bit(c, 3) << 1) | (_bit(c, 2) & (_bit(c, 3) ^ 1))
    elif (c >> 2) & 3 == 3:
        t2, t1, t0 = 2, 2, c & 3
    else:
        t2, t1 = _bit(c, 4), (c >> 2) & 3
        t0 = (_bit(c, 1) << 1) | (_bit(c, 0) & (_bit(c, 1) ^ 1))
    return (t0, t1, t2, t3, t4)


def _unpack_quints(q):
    if (q >> 1) & 3 == 3 and (q >> 5) & 3 == 0:
        low = _bit(q, 0)
        q2 = (low << 2) | ((_bit(q, 4) & (low ^ 1)) << 1) | (_bit(q, 3) & (low ^ 1))
        return (4, 4, q2)
    if (q >> 1) & 3 == 3:
        q2 = 4
        c = (((q >> 3) & 3) << 3) | (((~q >> 5) & 3) << 1) | (q & 1)
    else:
        q2 = (q >> 5) & 3
        c = q & 0x1F
    if c & 7 == 5:
        return ((c >> 3) & 3, 4, q2)
    return (c & 7, (c >> 3) & 3, q2)


_TRITS = tuple(_unpack_trits(x) for x in range(256))
_QUINTS = tuple(_unpack_quints(x) for x in range(128))
_TRIT_STARTS = (0, 2, 4, 5, 7)
_QUINT_STARTS = (0, 3, 5)


def _trit_index(d, b):
    return (
        ((d >> b) & 3)
        | ((d >> (b * 2)) & 0xC)
        | ((d >> (b * 3)) & 0x10)
        | ((d >> (b * 4)) & 0x60)
        | ((d >> (b * 5)) & 0x80)
    )


def _quint_index(d, b):
    return ((d >> b) & 7) | ((d >> (b * 2)) & 0x18) | ((d >> (b * 3)) & 0x60)


def _decode_packed(buf, offset, b, count, reverse, group, extra, starts, index_of, table):
    mask = (1 << b) - 1
    block_count = -(-count // group)
    last_count = (count + group - 1) % group + 1
    block_size = extra + group * b
    last_size = -(-(block_size * last_count) // group)
    out = []
    p = offset
    for i in range(block_count):
        size = block_size if i < block_count - 1 else last_size
        if reverse:
            d = _reverse_bits(getbits64(buf, p - size, size), size)
            p -= block_size
        else:
            d = getbits64(buf, p, size)
            p += block_size
        values = table[index_of(d, b)]
        out.extend(
            IntSeqData((d >> (start + b * j)) & mask, value)
            for j, (start, value) in enumerate(zip(starts, values))
        )
    return out[:count]


def decode_intseq(buf, offset, a, b, count, reverse):
    """Decode ``count`` values of ``b`` plain bits, packed with trits (a=3) or quints (a=5).

    With ``reverse`` the sequence is read backwards from bit ``offset``.
    """
    if count == 0:
        return []
    if a == 3:
        return _decode_packed(buf, offset, b, count, reverse, 5, 8,
                              _TRIT_STARTS, _trit_index, _TRITS)
    if a == 5:
        return _decode_packed(buf, offset, b, count, reverse, 3, 7,
                              _QUINT_STARTS, _quint_index, _QUINTS)
    out = []
    if reverse:
        p = offset - b
        for _ in range(count):
            raw = getbits(buf, p, b)
            out.append(IntSeqData(_reverse_bits(raw & 0xFF, b) if b <= 8 else 0, 0))
            p -= b
    else:
        p = offset
        for _ in range(count):
            out.append(IntSeqData(getbits(buf, p, b), 0))
            p += b
    return out


def _sequence_bits(count, a, b):
    if a == 3:
        return count * b + (count * 8 + 4) // 5
    if a == 5:
        return count * b + (count * 7 + 2) // 3
    return count * b


def _grid_size(b0, b1, mode16):
    if b0 & 3:
        kind = b0 & 0xC
        if kind == 0:
            return ((mode16 >> 7) & 3) + 4, ((b0 >> 5) & 3) + 2
        if kind == 4:
            return ((mode16 >> 7) & 3) + 8, ((b0 >> 5) & 3) + 2
        if kind == 8:
            return ((b0 >> 5) & 3) + 2, ((mode16 >> 7) & 3) + 8
        if b1 & 1:
            return ((b0 >> 7) & 1) + 2, ((b0 >> 5) & 3) + 2
        return ((b0 >> 5) & 3) + 2, ((b0 >> 7) & 1) + 6
    kind = mode16 & 0x180
    if kind == 0:
        return 12, ((b0 >> 5) & 3) + 2
    if kind == 0x80:
        return ((b0 >> 5) & 3) + 2, 12
    if kind == 0x100:
        return ((b0 >> 5) & 3) + 6, ((b1 >> 1) & 3) + 6
    return (10, 6) if b0 & 0x20 else (6, 10)


def decode_block_params(buf, block_width, block_height):
    """Parse the block mode, partitioning and colour endpoint modes of a 16-byte block."""
    if len(buf) < 16:
        raise ValueError("an ASTC block needs 16 bytes")
    b0, b1, b2, b3 = buf[0], buf[1], buf[2], buf[3]
    mode16 = b0 | (b1 << 8)
    data = BlockData(bw=block_width, bh=block_height)

    data.dual_plane = bool(b1 & 4)
    weight_range = ((b0 >> 4) & 1) | ((b1 << 2) & 8)
    if b0 & 3:
        weight_range |= (b0 << 1) & 6
    else:
        weight_range |= (b0 >> 1) & 6
        if mode16 & 0x180 == 0x100:
            data.dual_plane = False
            weight_range &= 7
    data.weight_range = weight_range
    data.width, data.height = _grid_size(b0, b1, mode16)

    data.part_num = ((b1 >> 3) & 3) + 1
    data.weight_num = data.width * data.height * (2 if data.dual_plane else 1)
    weight_bits = _sequence_bits(
        data.weight_num,
        WEIGHT_PREC_TABLE_A[weight_range],
        WEIGHT_PREC_TABLE_B[weight_range],
    )

    cem_base = 0
    if data.part_num == 1:
        data.cem[0] = ((b1 | (b2 << 8)) >> 5) & 0xF
        config_bits = 17
    else:
        cem_base = ((b2 | (b3 << 8)) >> 7) & 3
        if cem_base == 0:
            shared = (b3 >> 1) & 0xF
            for i in range(data.part_num):
                data.cem[i] = shared
            config_bits = 29
        else:
            for i in range(data.part_num):
                data.cem[i] = (((b3 >> (i + 1)) & 1) + cem_base - 1) << 2
            if data.part_num == 2:
                data.cem[0] |= (b3 >> 3) & 3
                data.cem[1] |= getbits(buf, 126 - weight_bits, 2)
            elif data.part_num == 3:
                data.cem[0] |= (b3 >> 4) & 1
                data.cem[0] |= getbits(buf, 122 - weight_bits, 2) & 2
                data.cem[1] |= getbits(buf, 124 - weight_bits, 2)
                data.cem[2] |= getbits(buf, 126 - weight_bits, 2)
            else:
                for i in range(4):
                    data.cem[i] |= getbits(buf, 120 + i * 2 - weight_bits, 2)
            config_bits = 25 + data.part_num * 3

    if data.dual_plane:
        config_bits += 2
        selector_at = (
            130 - weight_bits - data.part_num * 3 if cem_base else 126 - weight_bits
        )
        data.plane_selector = getbits(buf, selector_at, 2)

    remain_bits = 128 - config_bits - weight_bits
    if remain_bits < 0:
        raise ValueError("ASTC block mode needs more than 128 bits")

    data.endpoint_value_num = sum(
        ((cem >> 1) & 6) + 2 for cem in data.cem[:data.part_num]
    )
    for i, (a, b) in enumerate(zip(CEM_TABLE_A, CEM_TABLE_B)):
        if _sequence_bits(data.endpoint_value_num, a, b) <= remain_bits:
            data.cem_range = i
            break
    return data