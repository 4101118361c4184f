"""Murmur3 32-bit hashing used for channel and key targets."""

from __future__ import annotations

import struct

_MASK = 0xFFFFFFFF
_C1 = 0xCC9E2D51
_C2 = 0x1B873593
_SEED = 37


def _rotl(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (32 - shift))) & _MASK


def _scramble(k: int) -> int:
    k = (k * _C1) & _MASK
    k = _rotl(k, 15)
    return (k * _C2) & _MASK


def hash_of(data: bytes | bytearray | memoryview) -> int:
    """Return the byte-swapped murmur3 32-bit hash of ``data`` (seed 37)."""
    data = bytes(data)
    length = len(data)
    body = length - (length & 3)

    h = _SEED
    for (k,) in struct.iter_unpack("<I", data[:body]):
        h ^= _scramble(k)
        h = _rotl(h, 13)
        h = (h * 5 + 0xE6546B64) & _MASK

    tail = data[body:]
    if tail:
        h ^= _scramble(int.from_bytes(tail, "little"))

    h ^= length & _MASK
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK
    h ^= h >> 16

    return int.from_bytes(h.to_bytes(4, "little"), "big")


def hash_of_string(value: str) -> int:
    """Return the hash of the UTF-8 encoding of ``value``."""
    return hash_of(value.encode("utf-8"))