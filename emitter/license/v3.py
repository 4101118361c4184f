"""Version 3 licenses: packed, compressed fields with a salt-shuffled cipher."""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from emitter.cipher.shuffle import Shuffle
from emitter.license.encoding import _pack_license, _unpack_license
from emitter.license.v1 import _new_master_key, _random_uint32
from emitter.security.key import Key

_KINDS = (bytes, bytes, int, int, int)
_MASK32 = 0xFFFFFFFF


@dataclass
class V3:
    """A license holding a Salsa20 key and nonce, contract and master index."""

    encryption_key: bytes = b""
    encryption_salt: bytes = b""
    user: int = 0
    sign: int = 0
    index: int = 0

    @staticmethod
    def generate() -> V3:
        """Create a new license with random keys."""
        return V3(
            encryption_key=secrets.token_bytes(32),
            encryption_salt=secrets.token_bytes(16),
            user=_random_uint32(),
            sign=_random_uint32(),
            index=1,
        )

    @staticmethod
    def parse(data: str) -> V3:
        """Parse the base64 body of a v3 license."""
        key, salt, user, sign, index = _unpack_license(data, _KINDS)
        return V3(key, salt, user & _MASK32, sign & _MASK32, index & _MASK32)

    def new_master_key(self, id: int) -> Key:
        """Create a master key with the given id for this license."""
        return _new_master_key(id, self.user, self.sign)

    def cipher(self) -> Shuffle:
        """Return the cipher for keys of this license."""
        return Shuffle(self.encryption_key, self.encryption_salt)

    def __str__(self) -> str:
        fields = (
            self.encryption_key,
            self.encryption_salt,
            self.user & _MASK32,
            self.sign & _MASK32,
            self.index & _MASK32,
        )
        return _pack_license(fields, 3)

    def contract(self) -> int:
        """Return the contract id."""
        return self.user

    def signature(self) -> int:
        """Return the contract signature."""
        return self.sign

    def master(self) -> int:
        """Return the index of the master key."""
        return self.index