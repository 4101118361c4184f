"""Salsa20 cipher whose nonce is shuffled with the key salt."""

from __future__ import annotations

from emitter.cipher.salsa import _decode_encrypted, _encode, _pad_key, hsalsa20, xor_key_stream
from emitter.security.key import Key


class Shuffle:
    """Encrypts and decrypts security keys, leaving the salt in clear."""

    def __init__(self, key: bytes = bytes(32), nonce: bytes = bytes(16)) -> None:
        if key is None or nonce is None or len(key) != 32 or len(nonce) != 16:
            raise ValueError("shuffled: invalid cryptographic key")
        self._key = bytes(key)
        self._nonce = bytes(nonce)

    def _crypt(self, data: bytes) -> bytes:
        salt, body = data[:2], data[2:]
        nonce = bytes(b ^ salt[i % 2] for i, b in enumerate(self._nonce))
        sub_key = hsalsa20(self._key, nonce)
        return salt + xor_key_stream(body, nonce, sub_key)

    def encrypt_key(self, key: bytes) -> str:
        """Encrypt a key and return it as URL-safe base64."""
        return _encode(self._crypt(_pad_key(key)))

    def decrypt_key(self, buffer: bytes | bytearray | str) -> Key:
        """Decrypt a 32-character base64 key."""
        return Key(self._crypt(_decode_encrypted(buffer)))