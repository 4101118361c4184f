"""Process-wide unique identifiers."""

from __future__ import annotations

import base64
import hashlib
import itertools
import threading
from datetime import datetime, timezone

_EPOCH_2015 = datetime(2015, 1, 1, tzinfo=timezone.utc)


class ID(int):
    """A 64-bit unsigned identifier."""

    def unique(self, prefix: int, salt: str) -> str:
        """Derive a unique base32 string from the id, a prefix and a salt."""
        buffer = (prefix & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "big") + (
            int(self) & 0xFFFFFFFFFFFFFFFF
        ).to_bytes(8, "big")
        derived = hashlib.pbkdf2_hmac("sha1", buffer, salt.encode("utf-8"), 4096, 16)
        return base64.b32encode(derived).decode("ascii").strip("=")

    def __str__(self) -> str:
        value = int(self) & 0xFFFFFFFFFFFFFFFF
        out = bytearray()
        while value >= 0x80:
            out.append((value & 0x7F) | 0x80)
            value >>= 7
        out.append(value)
        return out.hex().upper()


class IdGenerator:
    """Thread-safe generator of increasing ids."""

    def __init__(self, start: int | None = None):
        if start is None:
            start = int((datetime.now(timezone.utc) - _EPOCH_2015).total_seconds())
        self._counter = itertools.count(start + 1)
        self._lock = threading.Lock()

    def next(self) -> ID:
        """Return the next id."""
        with self._lock:
            return ID(next(self._counter) & 0xFFFFFFFFFFFFFFFF)


_generator = IdGenerator()


def new_id() -> ID:
    """Generate a new process-wide unique id."""
    return _generator.next()