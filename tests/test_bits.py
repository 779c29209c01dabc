import pytest

from texdecode.bits import BitReader, getbits, getbits64

FIELDS = [(3, 5), (7, 100), (12, 3000), (1, 1), (9, 300)]


def _pack(fields, size=16):
    value = 0
    pos = 0
    for width, field in fields:
        value |= field << pos
        pos += width
    return value.to_bytes(size, "little")


def test_getbits_reads_packed_fields():
    buf = _pack(FIELDS)
    offset = 0
    for width, field in FIELDS:
        assert getbits(buf, offset, width) == field
        offset += width


def test_getbits_single_byte():
    assert getbits(bytes([0b10110100]), 2, 3) == 0b101


def test_getbits_out_of_range():
    with pytest.raises(ValueError):
        getbits(bytes(2), 10, 8)


def test_getbits64_halves():
    low = 0x0123456789ABCDEF
    high = 0xFEDCBA9876543210
    buf = low.to_bytes(8, "little") + high.to_bytes(8, "little")
    assert getbits64(buf, 0, 64) == low
    assert getbits64(buf, 64, 64) == high
    assert getbits64(buf, 64, 8) == high & 0xFF


def test_getbits64_across_words():
    buf = _pack([(60, 0), (12, 0xABC)])
    assert getbits64(buf, 60, 12) == 0xABC


def test_getbits64_zero_length():
    assert getbits64(bytes([0xFF] * 16), 5, 0) == 0


def test_getbits64_negative_offset():
    buf = _pack([(2, 0b11)])
    assert getbits64(buf, -3, 5) == 0b11000


def test_getbits64_rejects_long_length():
    with pytest.raises(ValueError):
        getbits64(bytes(16), 0, 65)


def test_bitreader_read_and_peek():
    reader = BitReader(_pack(FIELDS), 0)
    assert reader.peek(0, 3) == 5
    assert reader.peek(0, 3) == 5
    assert reader.read(3) == 5
    assert reader.peek(7, 12) == 3000
    assert reader.read(7) == 100
    assert reader.read(12) == 3000
    assert reader.read(1) == 1
    assert reader.read(9) == 300
    assert reader.bit_pos == 32