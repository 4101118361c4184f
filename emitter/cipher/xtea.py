"""XTEA cipher for security keys."""

from __future__ import annotations

import struct

from emitter.cipher.keycodec import decode_key
from emitter.cipher.salsa import _decode_encrypted, _encode
from emitter.security.key import Key

_ROUNDS = 32
_DELTA = 0x9E3779B9
_SUM = 0xC6EF3720  # delta * rounds
_MASK = 0xFFFFFFFF


def _mix(value: int) -> int:
    return ((((value << 4) & _MASK) ^ (value >> 5)) + value) & _MASK


class Xtea:
    """Encrypts and decrypts security keys with XTEA and a salt mask."""

    def __init__(self, value: str) -> None:
        data = decode_key(value)
        if len(value) != 22 or len(data) != 16:
            raise ValueError("xtea: invalid cryptographic key")
        self._key = struct.unpack(">4I", data)

    def _encrypt(self, data: bytes) -> bytes:
        if len(data) != 24:
            raise ValueError("The security key should be 24-bytes long")
        key = self._key
        out = bytearray()
        for y, z in struct.iter_unpack(">2I", data):
            total = 0
            for _ in range(_ROUNDS):
                y = (y + (_mix(z) ^ ((total + key[total & 3]) & _MASK))) & _MASK
                total = (total + _DELTA) & _MASK
                z = (z + (_mix(y) ^ ((total + key[(total >> 11) & 3]) & _MASK))) & _MASK
            out += struct.pack(">2I", y, z)
        return bytes(out)

    def _decrypt(self, data: bytes) -> bytes:
        key = self._key
        out = bytearray()
        for y, z in struct.iter_unpack(">2I", data[:24]):
            total = _SUM
            for _ in range(_ROUNDS):
                z = (z - (_mix(y) ^ ((total + key[(total >> 11) & 3]) & _MASK))) & _MASK
                total = (total - _DELTA) & _MASK
                y = (y - (_mix(z) ^ ((total + key[total & 3]) & _MASK))) & _MASK
            out += struct.pack(">2I", y, z)
        return bytes(out)

    @staticmethod
    def _mask_salt(data: bytes) -> bytes:
        salt = data[:2]
        return salt + bytes(b ^ salt[i % 2] for i, b in enumerate(data[2:24]))

    def encrypt_key(self, key: bytes) -> str:
        """Encrypt a 24-byte key and return it as URL-safe base64."""
        key = bytes(key)
        if len(key) < 24:
            raise ValueError("The security key should be 24-bytes long")
        return _encode(self._encrypt(self._mask_salt(key[:24])))

    def decrypt_key(self, buffer: bytes | bytearray | str) -> Key:
        """Decrypt a 32-character base64 key."""
        data = _decode_encrypted(buffer)
        return Key(self._mask_salt(self._decrypt(data)))