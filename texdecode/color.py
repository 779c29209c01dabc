"""Pixel packing helpers and the generic block-to-image driver."""

import struct


def color(r, g, b, a):
    """Pack channels into a 32-bit pixel stored in memory as B, G, R, A."""
    return b | (g << 8) | (r << 16) | (a << 24)


def rgb565_le(d):
    """Expand a little-endian RGB565 value to an 8-bit ``(r, g, b)`` triple."""
    r = ((d >> 8) & 0xF8) | ((d >> 13) & 0xFF)
    g = ((d >> 3) & 0xFC) | ((d >> 9) & 3)
    b = ((d << 3) & 0xFF) | ((d >> 2) & 7)
    return r, g, b


def half_to_float(h):
    """Convert an IEEE half-precision bit pattern to a float."""
    return struct.unpack("<e", (h & 0xFFFF).to_bytes(2, "little"))[0]


def copy_block_buffer(bx, by, w, h, bw, bh, buffer, image):
    """Copy a decoded block into ``image``, clipping it at the image edges."""
    x = bw * bx
    copy_width = min(bw, w - x)
    y0 = by * bh
    copy_height = min(bh, h - y0)
    for row in range(copy_height):
        start = (y0 + row) * w + x
        src = row * bw
        image[start:start + copy_width] = buffer[src:src + copy_width]


def pixels_to_bytes(pixels):
    """Serialise 32-bit pixels as little-endian bytes (B, G, R, A order)."""
    return struct.pack(f"<{len(pixels)}I", *pixels)


def decode_blocks(data, width, height, block_width, block_height, block_size, decode_block):
    """Decode an image made of fixed-size blocks into BGRA bytes."""
    data = bytes(data)
    blocks_x = -(-width // block_width)
    blocks_y = -(-height // block_height)
    if len(data) < blocks_x * blocks_y * block_size:
        raise ValueError("Not enough data to decode image!")
    image = [0] * (width * height)
    offset = 0
    for by in range(blocks_y):
        for bx in range(blocks_x):
            pixels = decode_block(data[offset:offset + block_size])
            copy_block_buffer(bx, by, width, height, block_width, block_height, pixels, image)
            offset += block_size
    return pixels_to_bytes(image)