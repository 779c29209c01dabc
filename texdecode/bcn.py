"""Whole-image decoders for the BC1 to BC7 block formats."""

from .bc import (
    decode_bc1_block,
    decode_bc1a_block,
    decode_bc2_block,
    decode_bc3_block,
    decode_bc4_block,
    decode_bc5_block,
)
from .bc6 import decode_bc6_block_signed, decode_bc6_block_unsigned
from .bc7 import decode_bc7_block
from .color import decode_blocks


def decode_bc1(data, width, height):
    """Decode a BC1 image into BGRA bytes."""
    return decode_blocks(data, width, height, 4, 4, 8, decode_bc1_block)


def decode_bc1a(data, width, height):
    """Decode a BC1 image with 1-bit alpha into BGRA bytes."""
    return decode_blocks(data, width, height, 4, 4, 8, decode_bc1a_block)


def decode_bc2(data, width, height):
    """Decode a BC2 image into BGRA bytes."""
    return decode_blocks(data, width, height, 4, 4, 16, decode_bc2_block)


def decode_bc3(data, width, height):
    """Decode a BC3 image into BGRA bytes."""
    return decode_blocks(data, width, height, 4, 4, 16, decode_bc3_block)


def decode_bc4(data, width, height):
    """Decode a BC4 image into BGRA bytes (red channel only)."""
    return decode_blocks(data, width, height, 4, 4, 8, decode_bc4_block)


def decode_bc5(data, width, height):
    """Decode a BC5 image into BGRA bytes (red and green channels)."""
    return decode_blocks(data, width, height, 4, 4, 16, decode_bc5_block)


def decode_bc6_signed(data, width, height):
    """Decode a signed-float BC6H image into BGRA bytes."""
    return decode_blocks(data, width, height, 4, 4, 16, decode_bc6_block_signed)


def decode_bc6_unsigned(data, width, height):
    """Decode an unsigned-float BC6H image into BGRA bytes."""
    return decode_blocks(data, width, height, 4, 4, 16, decode_bc6_block_unsigned)


def decode_bc6(data, width, height, signed):
    """Decode a BC6H image, signed or unsigned, into BGRA bytes."""
    if signed:
        return decode_bc6_signed(data, width, height)
    return decode_bc6_unsigned(data, width, height)


def decode_bc7(data, width, height):
    """Decode a BC7 image into BGRA bytes."""
    return decode_blocks(data, width, height, 4, 4, 16, decode_bc7_block)