"""Request and response messages of the key ban service."""

from __future__ import annotations

import json
from dataclasses import dataclass

_FIELDS = {"secret": str, "target": str, "banned": bool}


@dataclass
class Request:
    """A request to ban or unban a key."""

    secret: str = ""
    target: str = ""
    banned: bool = False

    @classmethod
    def from_json(cls, payload: bytes | str) -> Request:
        """Decode a request from JSON, raising ValueError if it is malformed."""
        document = json.loads(payload)
        if document is None:
            return cls()
        if not isinstance(document, dict):
            raise ValueError("keyban: request must be a JSON object")

        values = {}
        for name, value in document.items():
            field_name = name.lower()
            kind = _FIELDS.get(field_name)
            if kind is None or value is None:
                continue
            if not isinstance(value, kind):
                raise ValueError(f"keyban: field {name!r} has the wrong type")
            values[field_name] = value
        return cls(**values)


@dataclass
class Response:
    """The reply to a key ban request."""

    request: int = 0
    status: int = 0
    banned: bool = False

    def for_request(self, id: int) -> None:
        """Set the id of the request this response answers."""
        self.request = id & 0xFFFF

    def to_json(self) -> str:
        """Encode the response as compact JSON, omitting an unset request id."""
        document: dict[str, int | bool] = {}
        if self.request:
            document["req"] = self.request
        document["status"] = self.status
        document["banned"] = self.banned
        return json.dumps(document, separators=(",", ":"))