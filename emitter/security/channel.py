"""Parsing of channel strings of the form ``key/a/b/c/?opt=value``."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from emitter.security.hashing import hash_of

MIN_TIME = 1514764800  # 2018
MAX_TIME = 3029529600  # 2066

_SEPARATOR = ord("/")
_QUESTION = ord("?")
_WILDCARDS = frozenset(b"#+*")
_OPTION = re.compile(rb"([A-Za-z0-9]+)=([A-Za-z0-9]+)")
_INT64_MAX = 2**63 - 1
_ZERO_TIME = datetime.fromtimestamp(0, tz=timezone.utc)


class ChannelType(enum.IntEnum):
    """The kind of a parsed channel."""

    INVALID = 0
    STATIC = 1
    WILDCARD = 2


@dataclass(frozen=True)
class ChannelOption:
    """A key/value option attached to a channel."""

    key: str
    value: str


@dataclass
class Channel:
    """A parsed channel with its key, path, hashed query and options."""

    key: bytes = b""
    channel: bytes = b""
    query: list[int] = field(default_factory=list)
    options: list[ChannelOption] = field(default_factory=list)
    channel_type: ChannelType = ChannelType.INVALID

    def target(self) -> int:
        """Return the hash of the first channel segment."""
        return self.query[0]

    def ttl(self) -> int | None:
        """Return the 'ttl' option, or None if absent or not a number."""
        return self._option("ttl")

    def last(self) -> int | None:
        """Return the 'last' option, or None if absent or not a number."""
        return self._option("last")

    def exclude(self) -> bool:
        """Return whether the 'me=0' option was set."""
        return self._option("me") == 0

    def window(self) -> tuple[datetime, datetime]:
        """Return the validated 'from' and 'until' options as UTC datetimes."""
        return _to_time(self._option("from") or 0), _to_time(self._option("until") or 0)

    def safe_string(self) -> str:
        """Return the channel and its options, without the key."""
        text = self.channel.decode("utf-8", errors="replace")
        if not self.options:
            return text
        return text + "?" + "&".join(f"{o.key}={o.value}" for o in self.options)

    def __str__(self) -> str:
        return self.key.decode("utf-8", errors="replace") + "/" + self.safe_string()

    def _option(self, name: str) -> int | None:
        for option in self.options:
            if option.key == name:
                value = option.value
                if not (value.isascii() and value.isdigit()):
                    return None
                number = int(value)
                return number if number <= _INT64_MAX else None
        return None


def _to_time(seconds: int) -> datetime:
    if seconds < MIN_TIME or seconds > MAX_TIME:
        return _ZERO_TIME
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def _parse_path(text: bytes, result: Channel) -> int:
    """Parse the channel path, filling ``result``; return bytes consumed."""
    length = len(text)
    offset = 0
    chan_chars = 0
    wildcards = 0
    wildcard_seen = False

    for i, symbol in enumerate(text):
        if symbol == _SEPARATOR:
            if chan_chars == 0 and wildcards == 0:
                return i
            result.query.append(hash_of(text[offset:i]))
            kind = ChannelType.WILDCARD if wildcard_seen else ChannelType.STATIC
            if i + 1 == length:
                result.channel = text[: i + 1]
                result.channel_type = kind
                return i + 1
            if text[i + 1] == _QUESTION:
                result.channel = text[: i + 1]
                result.channel_type = kind
                return i + 2
            offset = i + 1
            chan_chars = 0
            wildcards = 0
        elif symbol in _WILDCARDS:
            if chan_chars or wildcards:
                return i
            wildcards += 1
            wildcard_seen = True
        elif 45 <= symbol <= 58 or 65 <= symbol <= 122 or symbol == 36:
            if wildcards:
                return i
            chan_chars += 1
        else:
            return i
    return length


def _parse_options(text: bytes) -> list[ChannelOption] | None:
    """Parse a URL-query style option string, or return None if invalid."""
    parts = text.split(b"&")
    if len(parts) > 1 and parts[-1] == b"":
        parts.pop()

    options = []
    for part in parts:
        match = _OPTION.fullmatch(part)
        if match is None:
            return None
        options.append(ChannelOption(match.group(1).decode("ascii"), match.group(2).decode("ascii")))
    return options


def parse_channel(text: bytes | bytearray | str) -> Channel:
    """Parse ``key/channel/?options``; an unparsable input gives an INVALID channel."""
    if isinstance(text, str):
        text = text.encode("utf-8")
    text = bytes(text)
    result = Channel()

    separator = text.find(b"/")
    if separator <= 0:
        return result
    result.key = text[:separator]
    offset = separator + 1

    offset += _parse_path(text[offset:], result)
    if result.channel_type == ChannelType.INVALID:
        return result

    if offset < len(text):
        options = _parse_options(text[offset:])
        if options is None:
            result.channel_type = ChannelType.INVALID
            return result
        result.options = options

    return result


def make_channel(key: str, channel_with_options: str) -> Channel:
    """Parse a channel from a key and a channel string with options."""
    return parse_channel(f"{key}/{channel_with_options}")