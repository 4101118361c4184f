# emitter

The security layer of an emitter publish/subscribe broker, in pure Python with no
third-party dependencies.

## What is in it

- `emitter.security.hashing`: the seeded 32-bit murmur hash used for channel parts
  (`hash_of`, `hash_of_string`).
- `emitter.security.channel`: parsing of `key/channel/parts/?option=value` topics into a
  `Channel` with its `ChannelType`, the hashes of its parts (`query`) and its
  `ChannelOption`s (`parse_channel`, `make_channel`). A channel that cannot be parsed
  comes back with `channel_type == ChannelType.INVALID` rather than raising.
- `emitter.security.ident`: unique identifiers (`new_id`, `ID`, `IdGenerator`).
  `ID.unique(prefix, salt)` derives a base32 string with PBKDF2-SHA1; `str(id)` is the
  upper-case hex of its varint encoding.
- `emitter.security.key`: the 24-byte access `Key` (a `bytearray`), with the properties
  `salt`, `master`, `contract`, `signature`, `permissions` and `expires`, the
  `Permission` flags, `set_target` / `validate_channel` for channel targets, and
  `is_expired`, `is_master`, `has_permission`, `set_permission`. `set_target` raises
  `TargetInvalidError` or `TargetTooLongError`.
- `emitter.cipher`: ciphers that turn keys into 32-character URL-safe strings and back
  (`xtea.Xtea`, `salsa.Salsa`, `shuffle.Shuffle`), the Salsa20 primitives they use
  (`salsa.hsalsa20`, `salsa.xor_key_stream`) and the shared decoder
  (`keycodec.decode_key`, raising `CorruptInputError`).
- `emitter.license`: version 1, 2 and 3 licences (`v1.V1`, `v2.V2`, `v3.V3`), each with
  `generate`, `parse`, `cipher`, `new_master_key`, `contract`, `signature`, `master` and
  `str()`; `license.parse` reads any version and `license.new_license` makes a fresh
  version 3 licence with its encrypted master key. `encoding` holds the field packing and
  snappy block compression the licence strings use.
- `emitter.keyban.requests`: the JSON `Request` and `Response` of the key-ban service.

## Installing

```
pip install .
```

## Examples

Parse a channel:

```python
from emitter.security.channel import parse_channel

channel = parse_channel(b"emitter/a/b/?ttl=42&last=5")
channel.ttl()    # 42
channel.last()   # 5
str(channel)     # "emitter/a/b/?ttl=42&last=5"
```

Options that are absent or not numbers give `None`.

Make a key, restrict it to a target and check a channel against it:

```python
from emitter.security.key import Key, Permission
from emitter.security.channel import parse_channel

key = Key(bytes(24))
key.set_target("a/+/c/")
key.set_permission(Permission.READ, True)
key.validate_channel(parse_channel(b"emitter/a/b/c/"))   # True
key.has_permission(Permission.READ)                       # True
```

Create a licence and its master key, then read the licence back:

```python
from emitter.license.license import new_license, parse

licence_text, master = new_license()
licence = parse(licence_text)
master_key = licence.cipher().decrypt_key(master)
master_key.is_master()    # True
```

Invalid licences raise `LicenseError`; key strings a cipher cannot read raise
`ValueError` (a `CorruptInputError` when the base64 itself is broken).

Key-ban messages:

```python
from emitter.keyban.requests import Request, Response

request = Request.from_json('{"secret": "secret", "target": "token", "banned": true}')
response = Response(status=200, banned=request.banned)
response.for_request(1)
response.to_json()   # '{"req":1,"status":200,"banned":true}'
```

## What it does not do

This package holds the security building blocks only. It has no broker: no MQTT or
WebSocket server, no message routing or storage, no cluster membership, and no key-ban
service that acts on a `Request` — only the message types themselves. It has no command
to run.

## Running the tests

```
pip install .[test]
pytest
```