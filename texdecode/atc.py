"""Decoders for the ATC RGB and ATC RGBA (explicit interpolated alpha) formats."""

from .bc import decode_bc3_alpha
from .color import color, decode_blocks


def _expand_quantized(value, bits):
    value = (value << (8 - bits)) & 0xFF
    return value | (value >> bits)


def _unpack(c, green_bits):
    return (
        _expand_quantized(c & 0x1F, 5),
        _expand_quantized((c >> 5) & ((1 << green_bits) - 1), green_bits),
        _expand_quantized((c >> (5 + green_bits)) & 0x1F, 5),
    )


def decode_atc_rgb4_block(data):
    """Decode an 8-byte ATC RGB block into 16 opaque pixels."""
    c0 = int.from_bytes(data[0:2], "little")
    c1 = int.from_bytes(data[2:4], "little")
    last = _unpack(c1, 6)
    if c0 & 0x8000 == 0:
        first = _unpack(c0, 5)
        palette = [
            first,
            tuple((5 * a + 3 * b) // 8 for a, b in zip(first, last)),
            tuple((5 * b + 3 * a) // 8 for a, b in zip(first, last)),
            last,
        ]
    else:
        third = _unpack(c0, 5)
        palette = [
            (0, 0, 0),
            tuple((((a - b) & 0xFFFF) // 4) & 0xFF for a, b in zip(third, last)),
            third,
            last,
        ]
    indices = int.from_bytes(data[4:8], "little")
    pixels = []
    for i in range(16):
        entry = palette[(indices >> (2 * i)) & 3]
        pixels.append(color(entry[2], entry[1], entry[0], 255))
    return pixels


def decode_atc_rgba8_block(data):
    """Decode a 16-byte ATC RGBA block (alpha block followed by a colour block)."""
    return decode_bc3_alpha(data, decode_atc_rgb4_block(data[8:]), 3)


def decode_atc_rgb4(data, width, height):
    """Decode an ATC RGB image into BGRA bytes."""
    return decode_blocks(data, width, height, 4, 4, 8, decode_atc_rgb4_block)


def decode_atc_rgba8(data, width, height):
    """Decode an ATC RGBA image into BGRA bytes."""
    return decode_blocks(data, width, height, 4, 4, 16, decode_atc_rgba8_block)