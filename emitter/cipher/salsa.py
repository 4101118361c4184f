"""XSalsa20 cipher for security keys, with the Salsa20 primitives it needs."""

from __future__ import annotations

import base64
import struct

from emitter.cipher.keycodec import decode_key
from emitter.security.key import Key

_MASK = 0xFFFFFFFF
_SIGMA = struct.unpack("<4I", b"expand 32-byte k")
_COLUMNS = ((0, 4, 8, 12), (5, 9, 13, 1), (10, 14, 2, 6), (15, 3, 7, 11))
_ROWS = ((0, 1, 2, 3), (5, 6, 7, 4), (10, 11, 8, 9), (15, 12, 13, 14))
_INVALID_KEY = "cipher: the key provided is not valid"


def _rotl(value: int, shift: int) -> int:
    value &= _MASK
    return ((value << shift) | (value >> (32 - shift))) & _MASK


def _rounds(state: list[int]) -> list[int]:
    x = list(state)
    for _ in range(10):
        for group in (_COLUMNS, _ROWS):
            for a, b, c, d in group:
                x[b] ^= _rotl(x[a] + x[d], 7)
                x[c] ^= _rotl(x[b] + x[a], 9)
                x[d] ^= _rotl(x[c] + x[b], 13)
                x[a] ^= _rotl(x[d] + x[c], 18)
    return x


def _state(key: bytes, middle: bytes) -> list[int]:
    k = struct.unpack("<8I", key)
    m = struct.unpack("<4I", middle)
    return [
        _SIGMA[0], k[0], k[1], k[2],
        k[3], _SIGMA[1], m[0], m[1],
        m[2], m[3], _SIGMA[2], k[4],
        k[5], k[6], k[7], _SIGMA[3],
    ]


def hsalsa20(key: bytes, nonce: bytes) -> bytes:
    """Derive a 32-byte sub-key from a 32-byte key and a 16-byte nonce."""
    key, nonce = bytes(key), bytes(nonce)
    if len(key) != 32 or len(nonce) != 16:
        raise ValueError("hsalsa20: key must be 32 bytes and nonce 16 bytes")
    x = _rounds(_state(key, nonce))
    return struct.pack("<8I", *(x[i] for i in (0, 5, 10, 15, 6, 7, 8, 9)))


def xor_key_stream(data: bytes, counter: bytes, key: bytes) -> bytes:
    """XOR ``data`` with the Salsa20 stream for a 16-byte nonce+counter and a 32-byte key."""
    data, counter, key = bytes(data), bytes(counter), bytes(key)
    if len(key) != 32 or len(counter) != 16:
        raise ValueError("salsa20: key must be 32 bytes and counter 16 bytes")

    nonce = counter[:8]
    block_number = int.from_bytes(counter[8:], "little")
    out = bytearray()
    for start in range(0, len(data), 64):
        middle = nonce + block_number.to_bytes(8, "little")
        initial = _state(key, middle)
        mixed = _rounds(initial)
        stream = struct.pack("<16I", *((a + b) & _MASK for a, b in zip(mixed, initial)))
        chunk = data[start : start + 64]
        out += bytes(c ^ s for c, s in zip(chunk, stream))
        block_number = (block_number + 1) & 0xFFFFFFFFFFFFFFFF
    return bytes(out)


def _encode(buffer: bytes) -> str:
    return base64.urlsafe_b64encode(buffer).rstrip(b"=").decode("ascii")


def _decode_encrypted(buffer: bytes | bytearray | str) -> bytes:
    if isinstance(buffer, str):
        buffer = buffer.encode("utf-8")
    if len(buffer) != 32:
        raise ValueError(_INVALID_KEY)
    return decode_key(buffer)


def _pad_key(key: bytes) -> bytes:
    return bytes(key)[:24].ljust(24, b"\0")


class Salsa:
    """Encrypts and decrypts security keys with XSalsa20."""

    def __init__(self, key: bytes = bytes(32), nonce: bytes = bytes(24)) -> None:
        if key is None or nonce is None or len(key) != 32 or len(nonce) != 24:
            raise ValueError("salsa: invalid cryptographic key")
        self._key = bytes(key)
        self._nonce = bytes(nonce)

    def _box(self, data: bytes) -> bytes:
        sub_key = hsalsa20(self._key, self._nonce[:16])
        counter = self._nonce[16:] + bytes(8)
        return xor_key_stream(data, counter, sub_key)

    def encrypt_key(self, key: bytes) -> str:
        """Encrypt a key and return it as URL-safe base64."""
        return _encode(self._box(_pad_key(key)))

    def decrypt_key(self, buffer: bytes | bytearray | str) -> Key:
        """Decrypt a 32-character base64 key."""
        return Key(self._box(_decode_encrypted(buffer)))