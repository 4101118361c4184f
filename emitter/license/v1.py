"""Version 1 licenses: a fixed 32-byte layout with an XTEA cipher."""

from __future__ import annotations

import enum
import math
import secrets
import struct
from dataclasses import dataclass
from datetime import datetime, timezone

from emitter.cipher.keycodec import decode_key
from emitter.cipher.xtea import Xtea
from emitter.license.encoding import _b64encode
from emitter.security.key import Key, Permission

_TIME_OFFSET = 1262304000  # 2010-01-01 00:00:00 UTC
_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)
_MAX_SALT = 32767
_MASK32 = 0xFFFFFFFF
_LAYOUT = struct.Struct(">16s4I")


class LicenseType(enum.IntEnum):
    """The kind of deployment a license is for."""

    UNKNOWN = 0
    CLOUD = 1
    ON_PREMISE = 2


def _random_uint32() -> int:
    return secrets.randbits(32)


def _new_master_key(master_id: int, contract: int, signature: int) -> Key:
    key = Key(bytes(24))
    key.salt = secrets.randbelow(_MAX_SALT)
    key.master = master_id
    key.contract = contract
    key.signature = signature
    key.permissions = Permission.MASTER
    return key


@dataclass
class V1:
    """A legacy license holding an XTEA key, contract and expiry."""

    encryption_key: str = ""
    user: int = 0
    sign: int = 0
    expires: datetime = _EPOCH
    license_type: int = LicenseType.UNKNOWN

    @staticmethod
    def generate() -> V1:
        """Create a new license with random keys."""
        return V1(
            encryption_key=_b64encode(secrets.token_bytes(16)),
            user=_random_uint32(),
            sign=_random_uint32(),
            expires=_EPOCH,
            license_type=LicenseType.ON_PREMISE,
        )

    @staticmethod
    def parse(data: str) -> V1:
        """Parse the base64 body of a v1 license."""
        raw = decode_key(data)
        if len(raw) < _LAYOUT.size:
            raise ValueError("license: the license data is too short")
        key, user, sign, expiry, kind = _LAYOUT.unpack(raw[: _LAYOUT.size])
        if expiry > 0:
            expiry += _TIME_OFFSET
        return V1(
            encryption_key=_b64encode(key),
            user=user,
            sign=sign,
            expires=datetime.fromtimestamp(expiry, tz=timezone.utc),
            license_type=kind,
        )

    def new_master_key(self, id: int) -> Key:
        """Create a master key with the given id for this license."""
        return _new_master_key(id, self.user, self.sign)

    def cipher(self) -> Xtea:
        """Return the cipher for keys of this license."""
        return Xtea(self.encryption_key)

    def __str__(self) -> str:
        try:
            key = decode_key(self.encryption_key)
        except ValueError:
            return ""
        expiry = math.floor(self.expires.timestamp())
        if expiry > 0:
            expiry -= _TIME_OFFSET
        packed = _LAYOUT.pack(
            key[:16],
            self.user & _MASK32,
            self.sign & _MASK32,
            expiry & _MASK32,
            int(self.license_type) & _MASK32,
        )
        return _b64encode(packed) + ":1"

    def contract(self) -> int:
        """Return the contract id."""
        return self.user

    def signature(self) -> int:
        """Return the contract signature."""
        return self.sign

    def master(self) -> int:
        """Return the index of the master key."""
        return 1