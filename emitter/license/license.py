"""Creation and parsing of licenses of every version."""

from __future__ import annotations

from collections.abc import Callable

from emitter.license.v1 import V1
from emitter.license.v2 import V2
from emitter.license.v3 import V3

_NO_LICENSE = (
    "No license was found, please provide a valid license key through the "
    "configuration file, an EMITTER_LICENSE environment variable or a valid "
    "vault key 'secrets/emitter/license'"
)

_PARSERS: dict[str, Callable[[str], V1 | V2 | V3]] = {
    ":1": V1.parse,
    ":2": V2.parse,
    ":3": V3.parse,
}


class LicenseError(ValueError):
    """The license is missing or cannot be parsed."""


def new_license() -> tuple[str, str]:
    """Generate a license of the latest version and its encrypted master key."""
    current = V3.generate()
    secret_key = current.new_master_key(1)
    master = current.cipher().encrypt_key(secret_key)
    return str(current), master


def parse(data: str) -> V1 | V2 | V3:
    """Parse a license of any version; unsuffixed data is read as version 1."""
    if len(data) < 5:
        raise LicenseError(_NO_LICENSE)

    parser = _PARSERS.get(data[-2:])
    if parser is None:
        parser, body = V1.parse, data
    else:
        body = data[:-2]

    try:
        return parser(body)
    except ValueError as err:
        raise LicenseError(str(err)) from err