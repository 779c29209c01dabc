"""Block decoders for BC1 to BC5 (DXT1, DXT3, DXT5, RGTC1, RGTC2)."""

from .color import color, rgb565_le


def _decode_bc1(data, use_alpha):
    q0 = int.from_bytes(data[0:2], "little")
    q1 = int.from_bytes(data[2:4], "little")
    r0, g0, b0 = rgb565_le(q0)
    r1, g1, b1 = rgb565_le(q1)
    palette = [color(r0, g0, b0, 255), color(r1, g1, b1, 255)]
    if q0 > q1:
        palette.append(color((r0 * 2 + r1) // 3, (g0 * 2 + g1) // 3, (b0 * 2 + b1) // 3, 255))
        palette.append(color((r0 + r1 * 2) // 3, (g0 + g1 * 2) // 3, (b0 + b1 * 2) // 3, 255))
    else:
        palette.append(color((r0 + r1) // 2, (g0 + g1) // 2, (b0 + b1) // 2, 255))
        palette.append(color(0, 0, 0, 0 if use_alpha else 255))
    indices = int.from_bytes(data[4:8], "little")
    return [palette[(indices >> (2 * i)) & 3] for i in range(16)]


def decode_bc1_block(data):
    """Decode an 8-byte BC1 block into 16 opaque pixels."""
    return _decode_bc1(data, False)


def decode_bc1a_block(data):
    """Decode an 8-byte BC1 block with 1-bit alpha into 16 pixels."""
    return _decode_bc1(data, True)


def _channel_mask(channel):
    shift = channel * 8
    return shift, 0xFFFFFFFF ^ (0xFF << shift)


def decode_bc2_alpha(data, pixels, channel):
    """Return ``pixels`` with ``channel`` of the first 16 set from 4-bit explicit alpha."""
    shift, keep = _channel_mask(channel)
    result = list(pixels)
    for i in range(16):
        value = (data[i >> 1] >> ((i & 1) << 2)) & 0xF
        result[i] = (result[i] & keep) | ((value * 0x11) << shift)
    return result


def decode_bc2_block(data):
    """Decode a 16-byte BC2 block."""
    return decode_bc2_alpha(data, decode_bc1_block(data[8:]), 3)


def decode_bc3_alpha(data, pixels, channel):
    """Return ``pixels`` with ``channel`` set from an interpolated 8-byte alpha block."""
    a0, a1 = data[0], data[1]
    if a0 > a1:
        palette = [a0, a1] + [((7 - k) * a0 + k * a1) // 7 for k in range(1, 7)]
    else:
        palette = [a0, a1] + [((5 - k) * a0 + k * a1) // 5 for k in range(1, 5)] + [0, 255]
    indices = int.from_bytes(data[:8], "little") >> 16
    shift, keep = _channel_mask(channel)
    return [
        (pixel & keep) | (palette[(indices >> (3 * i)) & 7] << shift)
        for i, pixel in enumerate(pixels)
    ]


def decode_bc3_block(data):
    """Decode a 16-byte BC3 block."""
    return decode_bc3_alpha(data, decode_bc1_block(data[8:]), 3)


def decode_bc4_block(data):
    """Decode an 8-byte BC4 block into the red channel."""
    return decode_bc3_alpha(data, [0] * 16, 2)


def decode_bc5_block(data):
    """Decode a 16-byte BC5 block into the red and green channels."""
    pixels = decode_bc3_alpha(data, [0] * 16, 2)
    return decode_bc3_alpha(data[8:], pixels, 1)