from datetime import datetime, timezone

import pytest

from emitter.cipher.keycodec import CorruptInputError
from emitter.cipher.salsa import Salsa, hsalsa20, xor_key_stream
from emitter.security.key import Key, Permission


def _sample_key() -> Key:
    key = Key(24)
    key.salt = 999
    key.master = 2
    key.contract = 123
    key.signature = 777
    key.permissions = Permission.READ_WRITE
    key.set_target("a/b/c/")
    key.expires = datetime.fromtimestamp(1497683272, tz=timezone.utc)
    return key


def test_salsa_encrypt_and_decrypt():
    cipher = Salsa()
    key = _sample_key()

    encoded = cipher.encrypt_key(key)
    assert encoded == "uYkm3UsuorRk0tBqliO18gs5xXmXioMF"

    decoded = cipher.decrypt_key(encoded.encode("ascii"))
    assert decoded == key
    assert decoded.contract == 123


def test_salsa_decrypt_accepts_str():
    cipher = Salsa()
    assert cipher.decrypt_key("uYkm3UsuorRk0tBqliO18gs5xXmXioMF") == _sample_key()


def test_salsa_decrypt_empty_is_error():
    with pytest.raises(ValueError):
        Salsa().decrypt_key(b"")


def test_salsa_decrypt_bad_symbol_is_error():
    with pytest.raises(CorruptInputError):
        Salsa().decrypt_key(b"aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa*")


def test_new_salsa_explicit_zero_key_matches_default():
    cipher = Salsa(bytes(32), bytes(24))
    assert cipher.encrypt_key(_sample_key()) == "uYkm3UsuorRk0tBqliO18gs5xXmXioMF"


@pytest.mark.parametrize("key,nonce", [(None, None), (b"", b""), (bytes(32), bytes(16))])
def test_new_salsa_invalid(key, nonce):
    with pytest.raises(ValueError):
        Salsa(key, nonce)


def test_xor_key_stream_round_trip():
    key = bytes(range(32))
    counter = bytes(range(16))
    data = bytes(range(150))
    encrypted = xor_key_stream(data, counter, key)
    assert len(encrypted) == len(data)
    assert encrypted != data
    assert xor_key_stream(encrypted, counter, key) == data


def test_xor_key_stream_is_prefix_consistent():
    key = bytes(32)
    counter = bytes(16)
    long = xor_key_stream(bytes(130), counter, key)
    short = xor_key_stream(bytes(10), counter, key)
    assert long[:10] == short


def test_hsalsa20_depends_on_nonce():
    first = hsalsa20(bytes(32), bytes(16))
    second = hsalsa20(bytes(32), b"\x01" + bytes(15))
    assert len(first) == 32
    assert first != second
    assert hsalsa20(bytes(32), bytes(16)) == first


def test_hsalsa20_invalid_lengths():
    with pytest.raises(ValueError):
        hsalsa20(bytes(31), bytes(16))
    with pytest.raises(ValueError):
        xor_key_stream(b"x", bytes(8), bytes(32))