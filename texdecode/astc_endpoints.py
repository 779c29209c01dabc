"""ASTC colour endpoint unquantisation and decoding for every endpoint mode."""

from .astc_params import CEM_TABLE_A, CEM_TABLE_B, decode_intseq

_TRIT_SCALE = (0, 204, 93, 44, 22, 11, 5)
_QUINT_SCALE = (0, 113, 54, 26, 13, 6)
_MAX_VALUES = 32
_HDR_ONE = 0x780


def _clamp(value, high):
    return min(max(value, 0), high)


def _plain(r1, g1, b1, a1, r2, g2, b2, a2):
    return [r1, g1, b1, a1, r2, g2, b2, a2]


def _clamped(r1, g1, b1, a1, r2, g2, b2, a2, high=255):
    return [_clamp(x, high) for x in (r1, g1, b1, a1, r2, g2, b2, a2)]


def _blue(r1, g1, b1, a1, r2, g2, b2, a2):
    return [(r1 + b1) >> 1, (g1 + b1) >> 1, b1, a1, (r2 + b2) >> 1, (g2 + b2) >> 1, b2, a2]


def _blue_clamped(r1, g1, b1, a1, r2, g2, b2, a2):
    return [_clamp(x, 255) for x in _blue(r1, g1, b1, a1, r2, g2, b2, a2)]


def _hdr_clamped(r1, g1, b1, a1, r2, g2, b2, a2):
    return _clamped(r1, g1, b1, a1, r2, g2, b2, a2, high=0xFFF)


def _bit_transfer_signed(v, a, b):
    v[b] = (v[b] >> 1) | (v[a] & 0x80)
    v[a] = (v[a] >> 1) & 0x3F
    if v[a] & 0x20:
        v[a] -= 0x40


def decode_endpoints_hdr7(v):
    """Decode HDR RGB base+scale endpoints (mode 7) from four values."""
    modeval = ((v[2] >> 4) & 0x8) | ((v[1] >> 5) & 0x4) | (v[0] >> 6)
    if modeval & 0xC != 0xC:
        major, mode = modeval >> 2, modeval & 3
    elif modeval != 0xF:
        major, mode = modeval & 3, 4
    else:
        major, mode = 0, 5

    c = [v[0] & 0x3F, v[1] & 0x1F, v[2] & 0x1F, v[3] & 0x1F]
    if mode == 0:
        c[3] |= v[3] & 0x60
        c[0] |= (v[3] >> 1) & 0x40
        c[0] |= (v[2] << 1) & 0x80
        c[0] |= (v[1] << 3) & 0x300
        c[0] |= (v[2] << 5) & 0x400
        shift = 1
    elif mode == 1:
        c[1] |= v[1] & 0x20
        c[2] |= v[2] & 0x20
        c[0] |= (v[3] >> 1) & 0x40
        c[0] |= (v[2] << 1) & 0x80
        c[0] |= (v[1] << 2) & 0x100
        c[0] |= (v[3] << 4) & 0x600
        shift = 1
    elif mode == 2:
        c[3] |= v[3] & 0xE0
        c[0] |= (v[2] << 1) & 0xC0
        c[0] |= (v[1] << 3) & 0x300
        shift = 2
    elif mode == 3:
        c[1] |= v[1] & 0x20
        c[2] |= v[2] & 0x20
        c[3] |= v[3] & 0x60
        c[0] |= (v[3] >> 1) & 0x40
        c[0] |= (v[2] << 1) & 0x80
        c[0] |= (v[1] << 2) & 0x100
        shift = 3
    elif mode == 4:
        c[1] |= v[1] & 0x60
        c[2] |= v[2] & 0x60
        c[3] |= v[3] & 0x20
        c[0] |= (v[3] >> 1) & 0x40
        c[0] |= (v[3] << 1) & 0x80
        shift = 4
    else:
        c[1] |= v[1] & 0x60
        c[2] |= v[2] & 0x60
        c[3] |= v[3] & 0x60
        c[0] |= (v[3] >> 1) & 0x40
        shift = 5
    c = [x << shift for x in c]

    if mode != 5:
        c[1] = c[0] - c[1]
        c[2] = c[0] - c[2]

    if major == 1:
        r, g, b = c[1], c[0], c[2]
    elif major == 2:
        r, g, b = c[2], c[1], c[0]
    else:
        r, g, b = c[0], c[1], c[2]
    s = c[3]
    return _hdr_clamped(r - s, g - s, b - s, _HDR_ONE, r, g, b, _HDR_ONE)


def _signed_low(value, bits):
    low = value & ((1 << bits) - 1)
    if low & (1 << (bits - 1)):
        low |= 0xFFFF & ~((1 << bits) - 1)
    return low


def decode_endpoints_hdr11(v, alpha1, alpha2):
    """Decode HDR RGB direct endpoints (mode 11) from six values with given alphas."""
    major = (v[4] >> 7) | ((v[5] >> 6) & 2)
    if major == 3:
        return _plain(
            v[0] << 4, v[2] << 4, (v[4] << 5) & 0xFE0, alpha1,
            v[1] << 4, v[3] << 4, (v[5] << 5) & 0xFE0, alpha2,
        )

    mode = (v[1] >> 7) | ((v[2] >> 6) & 2) | ((v[3] >> 5) & 4)
    va = v[0] | ((v[1] << 2) & 0x100)
    vb0 = v[2] & 0x3F
    vb1 = v[3] & 0x3F
    vc = v[1] & 0x3F

    if mode in (0, 2):
        dbits = 7
    elif mode in (1, 3, 5, 7):
        dbits = 6
    else:
        dbits = 5
    vd0 = _signed_low(v[4], dbits)
    vd1 = _signed_low(v[5], dbits)

    if mode == 0:
        vb0 |= v[2] & 0x40
        vb1 |= v[3] & 0x40
    elif mode == 1:
        vb0 |= v[2] & 0x40
        vb1 |= v[3] & 0x40
        vb0 |= (v[4] << 1) & 0x80
        vb1 |= (v[5] << 1) & 0x80
    elif mode == 2:
        va |= (v[2] << 3) & 0x200
        vc |= v[3] & 0x40
    elif mode == 3:
        va |= (v[4] << 3) & 0x200
        vc |= v[5] & 0x40
        vb0 |= v[2] & 0x40
        vb1 |= v[3] & 0x40
    elif mode == 4:
        va |= (v[4] << 4) & 0x200
        va |= (v[5] << 5) & 0x400
        vb0 |= v[2] & 0x40
        vb1 |= v[3] & 0x40
        vb0 |= (v[4] << 1) & 0x80
        vb1 |= (v[5] << 1) & 0x80
    elif mode == 5:
        va |= (v[2] << 3) & 0x200
        va |= (v[3] << 4) & 0x400
        vc |= v[5] & 0x40
        vc |= (v[4] << 1) & 0x80
    elif mode == 6:
        va |= (v[4] << 4) & 0x200
        va |= (v[5] << 5) & 0x400
        va |= (v[4] << 5) & 0x800
        vc |= v[5] & 0x40
        vb0 |= v[2] & 0x40
        vb1 |= v[3] & 0x40
    else:
        va |= (v[2] << 3) & 0x200
        va |= (v[3] << 4) & 0x400
        va |= (v[4] << 5) & 0x800
        vc |= v[5] & 0x40

    shamt = (mode >> 1) ^ 3
    va <<= shamt
    vb0 <<= shamt
    vb1 <<= shamt
    vc <<= shamt
    vd0 <<= shamt
    vd1 <<= shamt

    if major == 1:
        return _hdr_clamped(
            va - vb0 - vc - vd0, va - vc, va - vb1 - vc - vd1, alpha1,
            va - vb0, va, va - vb1, alpha2,
        )
    if major == 2:
        return _hdr_clamped(
            va - vb1 - vc - vd1, va - vb0 - vc - vd0, va - vc, alpha1,
            va - vb1, va - vb0, va, alpha2,
        )
    return _hdr_clamped(
        va - vc, va - vb0 - vc - vd0, va - vb1 - vc - vd1, alpha1,
        va, va - vb0, va - vb1, alpha2,
    )


def _unquantize(seq, a, b):
    if a == 3:
        scale = _TRIT_SCALE[b]
    elif a == 5:
        scale = _QUINT_SCALE[b]
    else:
        return [_unquantize_plain(item.bits, b) for item in seq]

    values = []
    for item in seq:
        mirror = (item.bits & 1) * 0x1FF
        x = item.bits >> 1
        if a == 3:
            spread = {
                1: 0,
                2: 0b100010110 * x,
                3: (x << 7) | (x << 2) | x,
                4: (x << 6) | x,
                5: (x << 5) | (x >> 2),
                6: (x << 4) | (x >> 4),
            }.get(b, 0)
        else:
            spread = {
                1: 0,
                2: 0b100001100 * x,
                3: (x << 7) | (x << 1) | (x >> 1),
                4: (x << 6) | (x >> 1),
                5: (x << 5) | (x >> 3),
            }.get(b, 0)
        values.append((mirror & 0x80) | (((item.nonbits * scale + spread) ^ mirror) >> 2))
    return values


def _unquantize_plain(x, b):
    if b == 1:
        return x * 0xFF
    if b == 2:
        return x * 0x55
    if b == 3:
        return (x << 5) | (x << 2) | (x >> 1)
    if b == 4:
        return (x << 4) | x
    if b == 5:
        return (x << 3) | (x >> 2)
    if b == 6:
        return (x << 2) | (x >> 4)
    if b == 7:
        return (x << 1) | (x >> 6)
    if b == 8:
        return x
    return 0


def _decode_pair(cem, v):
    if cem == 0:
        return _plain(v[0], v[0], v[0], 255, v[1], v[1], v[1], 255)
    if cem == 1:
        l0 = (v[0] >> 2) | (v[1] & 0xC0)
        l1 = _clamp(l0 + (v[1] & 0x3F), 255)
        return _plain(l0, l0, l0, 255, l1, l1, l1, 255)
    if cem == 2:
        if v[0] <= v[1]:
            y0, y1 = v[0] << 4, v[1] << 4
        else:
            y0, y1 = (v[1] << 4) + 8, (v[0] << 4) - 8
        return _plain(y0, y0, y0, _HDR_ONE, y1, y1, y1, _HDR_ONE)
    if cem == 3:
        if v[0] & 0x80:
            y0 = ((v[1] & 0xE0) << 4) | ((v[0] & 0x7F) << 2)
            d = (v[1] & 0x1F) << 2
        else:
            y0 = ((v[1] & 0xF0) << 4) | ((v[0] & 0x7F) << 1)
            d = (v[1] & 0x0F) << 1
        y1 = _clamp(y0 + d, 0xFFF)
        return _plain(y0, y0, y0, _HDR_ONE, y1, y1, y1, _HDR_ONE)
    if cem == 4:
        return _plain(v[0], v[0], v[0], v[2], v[1], v[1], v[1], v[3])
    if cem == 5:
        _bit_transfer_signed(v, 1, 0)
        _bit_transfer_signed(v, 3, 2)
        v[1] += v[0]
        return _clamped(v[0], v[0], v[0], v[2], v[1], v[1], v[1], v[2] + v[3])
    if cem == 6:
        return _plain(
            (v[0] * v[3]) >> 8, (v[1] * v[3]) >> 8, (v[2] * v[3]) >> 8, 255,
            v[0], v[1], v[2], 255,
        )
    if cem == 7:
        return decode_endpoints_hdr7(v)
    if cem == 8:
        if v[0] + v[2] + v[4] <= v[1] + v[3] + v[5]:
            return _plain(v[0], v[2], v[4], 255, v[1], v[3], v[5], 255)
        return _blue(v[1], v[3], v[5], 255, v[0], v[2], v[4], 255)
    if cem == 9:
        for hi, lo in ((1, 0), (3, 2), (5, 4)):
            _bit_transfer_signed(v, hi, lo)
        if v[1] + v[3] + v[5] >= 0:
            return _clamped(
                v[0], v[2], v[4], 255, v[0] + v[1], v[2] + v[3], v[4] + v[5], 255
            )
        return _blue_clamped(
            v[0] + v[1], v[2] + v[3], v[4] + v[5], 255, v[0], v[2], v[4], 255
        )
    if cem == 10:
        return _plain(
            (v[0] * v[3]) >> 8, (v[1] * v[3]) >> 8, (v[2] * v[3]) >> 8, v[4],
            v[0], v[1], v[2], v[5],
        )
    if cem == 11:
        return decode_endpoints_hdr11(v, _HDR_ONE, _HDR_ONE)
    if cem == 12:
        if v[0] + v[2] + v[4] <= v[1] + v[3] + v[5]:
            return _plain(v[0], v[2], v[4], v[6], v[1], v[3], v[5], v[7])
        return _blue(v[1], v[3], v[5], v[7], v[0], v[2], v[4], v[6])
    if cem == 13:
        for hi, lo in ((1, 0), (3, 2), (5, 4), (7, 6)):
            _bit_transfer_signed(v, hi, lo)
        if v[1] + v[3] + v[5] >= 0:
            return _clamped(
                v[0], v[2], v[4], v[6],
                v[0] + v[1], v[2] + v[3], v[4] + v[5], v[6] + v[7],
            )
        return _blue_clamped(
            v[0] + v[1], v[2] + v[3], v[4] + v[5], v[6] + v[7],
            v[0], v[2], v[4], v[6],
        )
    if cem == 14:
        return decode_endpoints_hdr11(v, v[6], v[7])
    if cem == 15:
        mode = ((v[6] >> 7) & 1) | ((v[7] >> 6) & 2)
        v[6] &= 0x7F
        v[7] &= 0x7F
        if mode == 3:
            return decode_endpoints_hdr11(v, v[6] << 5, v[7] << 5)
        v[6] |= (v[7] << (mode + 1)) & 0x780
        v[7] = ((v[7] & (0x3F >> mode)) ^ (0x20 >> mode)) - (0x20 >> mode)
        v[6] <<= 4 - mode
        v[7] <<= 4 - mode
        return decode_endpoints_hdr11(v, v[6], _clamp(v[6] + v[7], 0xFFF))
    raise ValueError("Unsupported ASTC format")


def decode_endpoints(buf, data):
    """Decode the colour endpoints of every partition into ``data.endpoints``.

    Returns the list of per-partition endpoints (r1, g1, b1, a1, r2, g2, b2, a2).
    """
    a = CEM_TABLE_A[data.cem_range]
    b = CEM_TABLE_B[data.cem_range]
    seq = decode_intseq(
        buf,
        17 if data.part_num == 1 else 29,
        a,
        b,
        data.endpoint_value_num,
        False,
    )
    values = _unquantize(seq, a, b)
    values += [0] * (_MAX_VALUES - len(values))

    pos = 0
    for part in range(data.part_num):
        cem = data.cem[part]
        if not 0 <= cem <= 15:
            raise ValueError("Unsupported ASTC format")
        count = (cem // 4 + 1) * 2
        chunk = values[pos:pos + count]
        chunk += [0] * (count - len(chunk))
        data.endpoints[part] = _decode_pair(cem, chunk)
        pos += count
    return data.endpoints