"""Decoding of URL-safe, unpadded base64 security keys."""

from __future__ import annotations

_ALPHABET = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"
_DECODE = {symbol: index for index, symbol in enumerate(_ALPHABET)}


class CorruptInputError(ValueError):
    """The input holds a byte that is not valid base64 at ``offset``."""

    def __init__(self, offset: int) -> None:
        super().__init__(f"illegal base64 data at input byte {offset}")
        self.offset = offset


def decode_key(src: bytes | bytearray | str) -> bytes:
    """Decode URL-safe base64 without padding, raising CorruptInputError on bad input."""
    if isinstance(src, str):
        src = src.encode("utf-8")
    src = bytes(src)

    out = bytearray()
    for start in range(0, len(src), 4):
        chunk = src[start : start + 4]
        value = 0
        for position, symbol in enumerate(chunk, start):
            digit = _DECODE.get(symbol)
            if digit is None:
                raise CorruptInputError(position)
            value = (value << 6) | digit
        if len(chunk) < 2:
            raise CorruptInputError(start)
        value <<= 6 * (4 - len(chunk))
        out += value.to_bytes(3, "big")[: len(chunk) - 1]
    return bytes(out)