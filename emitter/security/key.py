"""Security keys: a 24-byte structure holding contract, permissions and target."""

from __future__ import annotations

import enum
import math
from datetime import datetime, timezone

from emitter.security.channel import Channel
from emitter.security.hashing import hash_of_string

_TIME_OFFSET = 1262304000  # 2010-01-01 00:00:00 UTC
_TIME_ZERO = datetime.fromtimestamp(0, tz=timezone.utc)
_ANY_TARGET = 1325880984  # hash of "", i.e. a key targeting "#/"
_MAX_PARTS = 23


class Permission(enum.IntFlag):
    """Access flags of a security key."""

    NONE = 0
    MASTER = 1 << 0
    READ = 1 << 1
    WRITE = 1 << 2
    STORE = 1 << 3
    LOAD = 1 << 4
    PRESENCE = 1 << 5
    EXTEND = 1 << 6
    EXECUTE = 1 << 7
    READ_WRITE = READ | WRITE
    STORE_LOAD = STORE | LOAD
    ALL = 0xFF & ~MASTER


class TargetInvalidError(ValueError):
    """The target channel does not end with a separator."""

    def __init__(self) -> None:
        super().__init__(
            "channel should end with `/` for strict types or `/#/` for multi level wildcard"
        )


class TargetTooLongError(ValueError):
    """The target channel has too many parts."""

    def __init__(self) -> None:
        super().__init__("channel can not have more than 23 parts")


class Key(bytearray):
    """A security key backed by its raw bytes."""

    def _get(self, start: int, end: int) -> int:
        return int.from_bytes(self[start:end], "big")

    def _set(self, start: int, end: int, value: int) -> None:
        size = end - start
        self[start:end] = (value & ((1 << (8 * size)) - 1)).to_bytes(size, "big")

    def is_empty(self) -> bool:
        """Return whether the key holds no bytes."""
        return len(self) == 0

    @property
    def salt(self) -> int:
        """The random salt of the key."""
        return self._get(0, 2)

    @salt.setter
    def salt(self, value: int) -> None:
        self._set(0, 2, value)

    @property
    def master(self) -> int:
        """The master key id."""
        return self._get(2, 4)

    @master.setter
    def master(self, value: int) -> None:
        self._set(2, 4, value)

    @property
    def contract(self) -> int:
        """The contract id."""
        return self._get(4, 8)

    @contract.setter
    def contract(self, value: int) -> None:
        self._set(4, 8, value)

    @property
    def signature(self) -> int:
        """The signature of the contract."""
        return self._get(8, 12)

    @signature.setter
    def signature(self, value: int) -> None:
        self._set(8, 12, value)

    @property
    def permissions(self) -> Permission:
        """The permission flags."""
        return Permission(self[15])

    @permissions.setter
    def permissions(self, value: int) -> None:
        self[15] = int(value) & 0xFF

    @property
    def expires(self) -> datetime:
        """The expiry date in UTC; the epoch means the key never expires."""
        expire = self._get(20, 24)
        if expire > 0:
            expire += _TIME_OFFSET
        return datetime.fromtimestamp(expire, tz=timezone.utc)

    @expires.setter
    def expires(self, value: datetime) -> None:
        expire = math.floor(value.timestamp())
        if expire > 0:
            expire -= _TIME_OFFSET
        self._set(20, 24, expire)

    def validate_channel(self, channel: Channel) -> bool:
        """Check whether the key's target permits the given channel."""
        topic = channel.channel
        if not topic:
            return False

        target = self._get(16, 20)
        target_path = self._get(12, 15)

        # Keys with no depth information only match the first segment.
        if target_path == 0:
            return target == _ANY_TARGET or target == channel.target()

        if topic.endswith(b"/"):
            topic = topic[:-1]
        parts = topic.decode("utf-8", errors="replace").split("/")
        if parts[-1] == "#":
            parts.pop()

        max_depth = next(
            (_MAX_PARTS - i for i in range(_MAX_PARTS) if (target_path >> i) & 1),
            0,
        )
        if max_depth == 0:
            max_depth = len(parts)

        exact = (target_path >> 23) & 1 == 1
        if len(parts) < max_depth or (exact and len(parts) != max_depth):
            return False

        for idx, part in enumerate(parts):
            if idx < _MAX_PARTS and (target_path >> (22 - idx)) & 1:
                if part == "+":
                    return False
            else:
                parts[idx] = "+"

        return hash_of_string("/".join(parts[:max_depth])) == target

    def set_target(self, channel: str) -> None:
        """Set the target channel, raising if it is malformed or too long."""
        if not channel.endswith("/"):
            raise TargetInvalidError()

        parts = channel.rstrip("/").split("/")
        bit_path = 1 << 23
        if parts[-1] == "#":
            parts.pop()
            bit_path = 0

        if len(parts) > _MAX_PARTS:
            raise TargetTooLongError()

        for idx, part in enumerate(parts):
            if part not in ("+", "#"):
                bit_path |= 1 << (22 - idx)

        self._set(12, 15, bit_path)
        self._set(16, 20, hash_of_string("/".join(parts)))

    def is_expired(self) -> bool:
        """Return whether the key has an expiry date in the past."""
        expiry = self.expires
        if expiry == _TIME_ZERO:
            return False
        return expiry < datetime.now(timezone.utc)

    def is_master(self) -> bool:
        """Return whether the key is a master key."""
        return self.permissions == Permission.MASTER

    def has_permission(self, flag: int) -> bool:
        """Return whether every bit of ``flag`` is granted."""
        return (self[15] & int(flag)) == int(flag)

    def set_permission(self, flag: int, value: bool) -> None:
        """Grant or revoke the bits of ``flag``."""
        if value:
            self[15] |= int(flag) & 0xFF
        else:
            self[15] &= ~int(flag) & 0xFF