from __future__ import annotations

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"


def b32encode(data: bytes) -> str:
    """RFC 4648 Base32, upper-case, padded with '=' to a multiple of 8 characters."""
    out = []
    value = 0
    bits = 0
    for byte in data:
        value = ((value << 8) | byte) & 0xFFF
        bits += 8
        while bits >= 5:
            bits -= 5
            out.append(ALPHABET[(value >> bits) & 0x1F])
    if bits:
        out.append(ALPHABET[(value << (5 - bits)) & 0x1F])
    text = "".join(out)
    return text + "=" * (-len(text) % 8)
