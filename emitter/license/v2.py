"""Version 2 licenses: packed, compressed fields with an XSalsa20 cipher."""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from emitter.cipher.salsa import Salsa
from emitter.license.encoding import _pack_license, _unpack_license
from emitter.license.v1 import _new_master_key, _random_uint32
from emitter.security.key import Key

_KINDS = (bytes, bytes, int, int, int)
_MASK32 = 0xFFFFFFFF


@dataclass
class V2:
    """A license holding an XSalsa20 key and nonce, contract and master index."""

    encryption_key: bytes = b""
    encryption_salt: bytes = b""
    user: int = 0
    sign: int = 0
    index: int = 0

    @staticmethod
    def generate() -> V2:
        """Create a new license with random keys."""
        return V2(
            encryption_key=secrets.token_bytes(32),
            encryption_salt=secrets.token_bytes(24),
            user=_random_uint32(),
            sign=_random_uint32(),
            index=1,
        )

    @staticmethod
    def parse(data: str) -> V2:
        """Parse the base64 body of a v2 license."""
        key, salt, user, sign, index = _unpack_license(data, _KINDS)
        return V2(key, salt, user & _MASK32, sign & _MASK32, index & _MASK32)

    def new_master_key(self, id: int) -> Key:
        """Create a master key with the given id for this license."""
        return _new_master_key(id, self.user, self.sign)

    def cipher(self) -> Salsa:
        """Return the cipher for keys of this license."""
        return Salsa(self.encryption_key, self.encryption_salt)

    def __str__(self) -> str:
        fields = (
            self.encryption_key,
            self.encryption_salt,
            self.user & _MASK32,
            self.sign & _MASK32,
            self.index & _MASK32,
        )
        return _pack_license(fields, 2)

    def contract(self) -> int:
        """Return the contract id."""
        return self.user

    def signature(self) -> int:
        """Return the contract signature."""
        return self.sign

    def master(self) -> int:
        """Return the index of the master key."""
        return self.index