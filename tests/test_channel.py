import pytest

from emitter.security.channel import (
    Channel,
    ChannelOption,
    ChannelType,
    make_channel,
    parse_channel,
)

PARSE_CASES = [
    ("emitter", "a/", [], ChannelType.STATIC),
    ("emitter", "a/b/c/", [], ChannelType.STATIC),
    ("emitter", "test-channel/", [], ChannelType.STATIC),
    ("emitter", "test-channel/+/and-more/", [], ChannelType.WILDCARD),
    ("emitter", "a/-/x/", [], ChannelType.STATIC),
    ("emitter", "a/b/c/d/", [], ChannelType.STATIC),
    ("emitter", "a/b/c/+/", [], ChannelType.WILDCARD),
    ("emitter", "a/+/c/+/", [], ChannelType.WILDCARD),
    ("emitter", "b/+/", [], ChannelType.WILDCARD),
    ("0TJnt4yZPL73zt35h1UTIFsYBLetyD_g", "emitter/", ["test=true", "something=7"], ChannelType.STATIC),
    ("emitter", "a/b/c/d/", ["test=true", "something=7"], ChannelType.STATIC),
    ("emitter", "a/b/c/d/", ["req=13", "something=7"], ChannelType.STATIC),
    ("", "", [], ChannelType.INVALID),
    ("emitter", "a/@/x/", [], ChannelType.INVALID),
    ("emitter", "a", [], ChannelType.INVALID),
    ("emitter", "a/b/c", [], ChannelType.INVALID),
    ("emitter", "a//b/", [], ChannelType.INVALID),
    ("emitter", "a//////b/c", [], ChannelType.INVALID),
    ("emitter", "*", [], ChannelType.INVALID),
    ("emitter", "+", [], ChannelType.INVALID),
    ("emitter", "a/+", [], ChannelType.INVALID),
    ("emitter", "b/+", [], ChannelType.INVALID),
    ("emitter", "b/*+/", [], ChannelType.INVALID),
    ("emitter", "b/+a/", [], ChannelType.INVALID),
    ("emitter", "", [], ChannelType.INVALID),
    ("emitter", "/", [], ChannelType.INVALID),
    ("emitter", "//", [], ChannelType.INVALID),
    ("emitter", "a//", [], ChannelType.INVALID),
    ("emitter", "a/b/c/d/", ["test=true", "something=7", "more=_"], ChannelType.INVALID),
    ("emitter", "a/b/c/d/", ["test==true"], ChannelType.INVALID),
    ("emitter", "a/b/c/d/", ["te_st==true"], ChannelType.INVALID),
    ("emitter", "a/", ["=true"], ChannelType.INVALID),
    ("emitter", "a/", ["test="], ChannelType.INVALID),
]


@pytest.mark.parametrize("key, ch, opts, expected", PARSE_CASES)
def test_parse_channel(key, ch, opts, expected):
    text = key + "/" + ch
    if opts:
        text += "?" + "&".join(opts)

    out = parse_channel(text.encode())
    assert out.channel_type == expected, text
    if expected == ChannelType.INVALID:
        return

    if not ch.endswith("/"):
        ch += "/"
    assert out.key == key.encode()
    assert out.channel == ch.encode()
    found = {o.key: o.value for o in out.options}
    for opt in opts:
        name, value = opt.split("=")
        assert found[name] == value


@pytest.mark.parametrize(
    "text, expected",
    [
        ("emitter/a/?me=0", True),
        ("emitter/a/?me=12000000", False),
        ("emitter/a/?me=1200a", False),
        ("emitter/a/?me=-1", False),
        ("emitter/a/", False),
    ],
)
def test_exclude(text, expected):
    assert parse_channel(text.encode()).exclude() is expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("emitter/a/?ttl=42&abc=9", 42),
        ("emitter/a/?ttl=1200", 1200),
        ("emitter/a/?ttl=1200a", None),
        ("emitter/a/", None),
    ],
)
def test_ttl(text, expected):
    assert parse_channel(text.encode()).ttl() == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("emitter/a/?last=42&abc=9", 42),
        ("emitter/a/?last=1200", 1200),
        ("emitter/a/?last=1200a", None),
        ("emitter/a/", None),
    ],
)
def test_last(text, expected):
    assert parse_channel(text.encode()).last() == expected


@pytest.mark.parametrize(
    "text, t0, t1",
    [
        ("emitter/a/?from=42&abc=9", 0, 0),
        ("emitter/a/?from=1200", 0, 0),
        ("emitter/a/?from=1200&until=2550", 0, 0),
        ("emitter/a/?from=1200a", 0, 0),
        ("emitter/a/", 0, 0),
        ("emitter/a/?from=1514764800&until=1514764900", 1514764800, 1514764900),
        ("emitter/a/?from=1514764800", 1514764800, 0),
        ("emitter/a/?until=1514764900", 0, 1514764900),
        ("emitter/a/?from=1514764800&until=3029529610", 1514764800, 0),
        ("emitter/a/?from=1514764900&until=1514764800", 1514764900, 1514764800),
    ],
)
def test_window(text, t0, t1):
    start, end = parse_channel(text.encode()).window()
    assert int(start.timestamp()) == t0
    assert int(end.timestamp()) == t1


@pytest.mark.parametrize(
    "text, target",
    [
        ("emitter/a/?ttl=42&abc=9", 0xC103EAB3),
        ("emitter/$share/a/b/c/", 1480642916),
    ],
)
def test_target(text, target):
    assert parse_channel(text.encode()).target() == target


def test_query_holds_one_hash_per_segment():
    assert len(parse_channel("emitter/a/b/c/").query) == 3


def test_make_channel():
    channel = make_channel("key1", "emitter/a/")
    assert channel.key == b"key1"
    assert channel.channel == b"emitter/a/"


@pytest.mark.parametrize(
    "text",
    [
        "emitter/a/?last=42&abc=9",
        "emitter/a/?last=1200",
        "emitter/a/?last=1200a",
        "emitter/a/",
    ],
)
def test_string_round_trip(text):
    assert str(parse_channel(text.encode())) == text


def test_safe_string_omits_key():
    channel = parse_channel(b"secretkey/a/b/?ttl=5")
    assert channel.safe_string() == "a/b/?ttl=5"


def test_options_are_parsed_in_order():
    channel = parse_channel(b"k/a/?x=1&y=2")
    assert channel.options == [ChannelOption("x", "1"), ChannelOption("y", "2")]


def test_default_channel_is_invalid():
    assert Channel().channel_type == ChannelType.INVALID