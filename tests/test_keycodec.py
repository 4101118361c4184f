import base64

import pytest

from emitter.cipher.keycodec import CorruptInputError, decode_key

SAMPLE = "0TJnt4yZPL73zt35h1UTIFsYBLetyD_g"


def _stdlib(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def test_decode_single_symbol_is_an_error():
    with pytest.raises(CorruptInputError) as info:
        decode_key(b"#")
    assert info.value.offset == 0
    assert str(info.value) == "illegal base64 data at input byte 0"


@pytest.mark.parametrize("second", range(255))
def test_decode_two_bytes_with_invalid_first(second):
    with pytest.raises(CorruptInputError) as info:
        decode_key(bytes([0, second]))
    assert info.value.offset == 0


def test_decode_matches_standard_library():
    decoded = decode_key(SAMPLE.encode("ascii"))
    assert decoded == _stdlib(SAMPLE)
    assert len(decoded) == 24


def test_decode_from_bytearray_and_str():
    expected = _stdlib(SAMPLE)
    assert decode_key(bytearray(SAMPLE, "ascii")) == expected
    assert decode_key(SAMPLE) == expected


@pytest.mark.parametrize("text", ["", "QQ", "QUI", "QUJD", "QUJDRA", "aGVsbG8_-w"])
def test_decode_partial_chunks(text):
    assert decode_key(text) == _stdlib(text)


def test_decode_reports_position_of_bad_symbol():
    with pytest.raises(CorruptInputError) as info:
        decode_key("aaaa*")
    assert info.value.offset == 4


def test_decode_trailing_lone_symbol():
    with pytest.raises(CorruptInputError) as info:
        decode_key("aaaaa")
    assert info.value.offset == 4


def test_corrupt_input_is_value_error():
    with pytest.raises(ValueError):
        decode_key("aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa*")