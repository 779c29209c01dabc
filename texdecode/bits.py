"""Little-endian bit extraction helpers used by the block decoders."""

_MASK64 = (1 << 64) - 1


def _span(buf, bit_offset, num_bits, max_bytes):
    start = bit_offset // 8
    end = (bit_offset + num_bits + 7) // 8
    if end > len(buf) or end - start > max_bytes:
        raise ValueError(
            f"cannot read {num_bits} bits at bit offset {bit_offset} "
            f"from a buffer of {len(buf)} bytes"
        )
    return int.from_bytes(buf[start:end], "little")


def getbits(buf, bit_offset, num_bits):
    """Read ``num_bits`` bits (at most 32 bits of span) starting at ``bit_offset``."""
    if bit_offset < 0 or num_bits < 0:
        raise ValueError("bit offset and bit count must not be negative")
    raw = _span(buf, bit_offset, num_bits, 4)
    return (raw >> (bit_offset % 8)) & ((1 << num_bits) - 1)


def _word(buf, index):
    chunk = buf[index * 8:index * 8 + 8]
    if len(chunk) < 8:
        raise ValueError("a 16-byte block is required")
    return int.from_bytes(chunk, "little")


def getbits64(buf, bit, length):
    """Read up to 64 bits from a 16-byte block; ``bit`` may be negative."""
    if not 0 <= length <= 64:
        raise ValueError("length must be between 0 and 64")
    if length == 0:
        return 0
    mask = (1 << length) - 1
    if bit >= 64:
        return (_word(buf, 1) >> (bit - 64)) & mask
    if bit <= 0:
        return ((_word(buf, 0) << -bit) & _MASK64) & mask
    low = _word(buf, 0)
    if bit + length <= 64:
        return (low >> bit) & mask
    return (low >> bit) | (((_word(buf, 1) << (64 - bit)) & _MASK64) & mask)


class BitReader:
    """Sequential little-endian bit reader over a byte buffer."""

    def __init__(self, data, bit_pos=0):
        self.data = data
        self.bit_pos = bit_pos

    def read(self, num_bits):
        """Return the next ``num_bits`` bits and advance past them."""
        value = self.peek(0, num_bits)
        self.bit_pos += num_bits
        return value

    def peek(self, offset, num_bits):
        """Return ``num_bits`` bits located ``offset`` bits ahead, without advancing."""
        return getbits(self.data, self.bit_pos + offset, num_bits) & 0xFFFF