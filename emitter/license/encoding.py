"""Binary field packing and snappy block compression used by license strings."""

from __future__ import annotations

import base64
from collections.abc import Iterable, Sequence

from emitter.cipher.keycodec import decode_key

_MAX_BLOCK = 65536
_MIN_COMPRESSIBLE = 17
_TAG_LITERAL = 0
_TAG_COPY1 = 1
_TAG_COPY2 = 2
_TAG_COPY4 = 3


def _uvarint(value: int) -> bytes:
    if value < 0:
        raise ValueError("varint: negative values cannot be encoded")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _read_uvarint(data: bytes, pos: int) -> tuple[int, int]:
    value = 0
    shift = 0
    for index in range(pos, min(len(data), pos + 10)):
        byte = data[index]
        value |= (byte & 0x7F) << shift
        if byte < 0x80:
            return value, index + 1
        shift += 7
    raise ValueError("varint: value is truncated or overflows")


def _emit_literal(out: bytearray, literal: bytes) -> None:
    n = len(literal) - 1
    if n < 60:
        out.append((n << 2) | _TAG_LITERAL)
    else:
        size = (n.bit_length() + 7) // 8
        out.append(((59 + size) << 2) | _TAG_LITERAL)
        out += n.to_bytes(size, "little")
    out += literal


def _emit_copy2(out: bytearray, offset: int, length: int) -> None:
    out.append(((length - 1) << 2) | _TAG_COPY2)
    out += offset.to_bytes(2, "little")


def _emit_copy(out: bytearray, offset: int, length: int) -> None:
    while length >= 68:
        _emit_copy2(out, offset, 64)
        length -= 64
    if length > 64:
        _emit_copy2(out, offset, 60)
        length -= 60
    if length >= 12 or offset >= 2048:
        _emit_copy2(out, offset, length)
    else:
        out.append(((offset >> 8) << 5) | ((length - 4) << 2) | _TAG_COPY1)
        out.append(offset & 0xFF)


def _compress_block(out: bytearray, block: bytes) -> None:
    if len(block) < _MIN_COMPRESSIBLE:
        if block:
            _emit_literal(out, block)
        return

    table: dict[bytes, int] = {}
    literal_start = 0
    position = 0
    last = len(block) - 4
    while position <= last:
        window = block[position : position + 4]
        candidate = table.get(window)
        table[window] = position
        if candidate is None:
            position += 1
            continue

        length = 4
        while (
            position + length < len(block)
            and block[candidate + length] == block[position + length]
        ):
            length += 1

        if literal_start < position:
            _emit_literal(out, block[literal_start:position])
        _emit_copy(out, position - candidate, length)
        position += length
        literal_start = position

    if literal_start < len(block):
        _emit_literal(out, block[literal_start:])


def snappy_encode(data: bytes | bytearray) -> bytes:
    """Compress ``data`` into the snappy block format."""
    data = bytes(data)
    out = bytearray(_uvarint(len(data)))
    for start in range(0, len(data), _MAX_BLOCK):
        _compress_block(out, data[start : start + _MAX_BLOCK])
    return bytes(out)


def snappy_decode(data: bytes | bytearray) -> bytes:
    """Decompress a snappy block, raising ValueError on corrupt input."""
    data = bytes(data)
    try:
        expected, pos = _read_uvarint(data, 0)
    except ValueError as err:
        raise ValueError("snappy: corrupt input") from err

    out = bytearray()
    while pos < len(data):
        tag = data[pos]
        kind = tag & 3
        if kind == _TAG_LITERAL:
            n = tag >> 2
            pos += 1
            if n >= 60:
                extra = n - 59
                if pos + extra > len(data):
                    raise ValueError("snappy: corrupt input")
                n = int.from_bytes(data[pos : pos + extra], "little")
                pos += extra
            n += 1
            if pos + n > len(data):
                raise ValueError("snappy: corrupt input")
            out += data[pos : pos + n]
            pos += n
        else:
            if kind == _TAG_COPY1:
                if pos + 2 > len(data):
                    raise ValueError("snappy: corrupt input")
                length = 4 + ((tag >> 2) & 7)
                offset = ((tag >> 5) << 8) | data[pos + 1]
                pos += 2
            elif kind == _TAG_COPY2:
                if pos + 3 > len(data):
                    raise ValueError("snappy: corrupt input")
                length = 1 + (tag >> 2)
                offset = int.from_bytes(data[pos + 1 : pos + 3], "little")
                pos += 3
            else:
                if pos + 5 > len(data):
                    raise ValueError("snappy: corrupt input")
                length = 1 + (tag >> 2)
                offset = int.from_bytes(data[pos + 1 : pos + 5], "little")
                pos += 5

            if offset == 0 or offset > len(out):
                raise ValueError("snappy: corrupt input")
            start = len(out) - offset
            if offset >= length:
                out += out[start : start + length]
            else:
                pattern = bytes(out[start:])
                out += (pattern * (length // offset + 1))[:length]

        if len(out) > expected:
            raise ValueError("snappy: corrupt input")

    if len(out) != expected:
        raise ValueError("snappy: corrupt input")
    return bytes(out)


def marshal_fields(fields: Iterable[bytes | bytearray | int]) -> bytes:
    """Pack byte strings (length-prefixed) and unsigned integers as varints."""
    out = bytearray()
    for value in fields:
        if isinstance(value, (bytes, bytearray)):
            out += _uvarint(len(value))
            out += value
        elif isinstance(value, int):
            out += _uvarint(int(value))
        else:
            raise TypeError(f"binary: unsupported field type {type(value).__name__}")
    return bytes(out)


def unmarshal_fields(data: bytes | bytearray, kinds: Sequence[type]) -> list[bytes | int]:
    """Unpack fields of the given kinds (``bytes`` or ``int``) from ``data``."""
    data = bytes(data)
    pos = 0
    values: list[bytes | int] = []
    for kind in kinds:
        value, pos = _read_uvarint(data, pos)
        if kind is bytes:
            end = pos + value
            if end > len(data):
                raise ValueError("binary: field is truncated")
            values.append(data[pos:end])
            pos = end
        elif kind is int:
            values.append(value)
        else:
            raise TypeError(f"binary: unsupported field kind {kind!r}")
    return values


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _pack_license(fields: Iterable[bytes | int], version: int) -> str:
    return _b64encode(snappy_encode(marshal_fields(fields))) + f":{version}"


def _unpack_license(text: str, kinds: Sequence[type]) -> list[bytes | int]:
    return unmarshal_fields(snappy_decode(decode_key(text)), kinds)