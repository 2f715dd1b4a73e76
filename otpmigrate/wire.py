from __future__ import annotations

from otpmigrate.errors import TruncatedInput, UnsupportedWireType

WIRE_VARINT = 0
WIRE_FIXED64 = 1
WIRE_LENGTH_DELIMITED = 2
WIRE_FIXED32 = 5


def encode_varint(n: int) -> bytes:
    if n < 0:
        raise ValueError("varint: negative not supported")
    out = bytearray()
    while True:
        b = n & 0x7F
        n >>= 7
        if n:
            out.append(b | 0x80)
        else:
            out.append(b)
            return bytes(out)


def read_varint(buf: bytes, i: int) -> tuple[int, int]:
    shift = 0
    value = 0
    while True:
        if i >= len(buf):
            raise TruncatedInput("Truncated varint")
        b = buf[i]
        i += 1
        value |= (b & 0x7F) << shift
        if (b & 0x80) == 0:
            return value, i
        shift += 7


def read_tag(buf: bytes, i: int) -> tuple[int, int, int]:
    key, i = read_varint(buf, i)
    return key >> 3, key & 0x7, i


def read_length_delimited(buf: bytes, i: int) -> tuple[bytes, int]:
    length, i = read_varint(buf, i)
    if i + length > len(buf):
        raise TruncatedInput("Truncated length-delimited field")
    return buf[i : i + length], i + length


def _advance(buf: bytes, i: int, width: int, what: str) -> int:
    i += width
    if i > len(buf):
        raise TruncatedInput(f"Truncated {what}")
    return i


def skip_field(buf: bytes, i: int, wire_type: int) -> int:
    """Move past one field value of the given wire type without interpreting it."""
    if wire_type == WIRE_VARINT:
        _, i = read_varint(buf, i)
        return i
    if wire_type == WIRE_FIXED64:
        return _advance(buf, i, 8, "fixed64")
    if wire_type == WIRE_LENGTH_DELIMITED:
        _, i = read_length_delimited(buf, i)
        return i
    if wire_type == WIRE_FIXED32:
        return _advance(buf, i, 4, "fixed32")
    raise UnsupportedWireType(wire_type)
