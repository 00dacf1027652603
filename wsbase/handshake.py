"""The Sec-WebSocket-Key and Sec-WebSocket-Accept handshake values."""

from __future__ import annotations

import base64
import binascii
import hashlib
import secrets
from dataclasses import dataclass

from wsbase.errors import ProtocolError

PROTOCOL = "Sec-WebSocket-Protocol"
ACCEPT = "Sec-WebSocket-Accept"
EXTENSIONS = "Sec-WebSocket-Extensions"
KEY = "Sec-WebSocket-Key"

MAGIC_GUID = "258EAFA5-E914-47DA-95CA-C5AB0DC85B11"

_KEY_LENGTH = 16
_ACCEPT_LENGTH = 20


def _decode(text: str) -> bytes:
    return base64.b64decode(text.encode("ascii"), validate=True)


@dataclass(frozen=True)
class WebSocketKey:
    """The 16 random bytes a client sends in the Sec-WebSocket-Key header."""

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != _KEY_LENGTH:
            raise ValueError("Sec-WebSocket-Key must be 16 bytes")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def generate(cls) -> WebSocketKey:
        """Generate a new random key."""
        return cls(secrets.token_bytes(_KEY_LENGTH))

    @classmethod
    def parse(cls, key: str) -> WebSocketKey:
        """Parse the base64 text of a Sec-WebSocket-Key header."""
        try:
            raw = _decode(key)
        except (binascii.Error, UnicodeEncodeError, ValueError) as exc:
            raise ProtocolError("Invalid Sec-WebSocket-Accept") from exc
        if len(raw) != _KEY_LENGTH:
            raise ProtocolError("Sec-WebSocket-Key must be 16 bytes")
        return cls(raw)

    def serialize(self) -> str:
        """Return the base64 encoding of the key."""
        return base64.b64encode(self.value).decode("ascii")

    def __repr__(self) -> str:
        return f"WebSocketKey({self.serialize()})"


@dataclass(frozen=True)
class WebSocketAccept:
    """The 20-byte digest a server sends in the Sec-WebSocket-Accept header."""

    value: bytes

    def __post_init__(self) -> None:
        if len(self.value) != _ACCEPT_LENGTH:
            raise ValueError("Sec-WebSocket-Accept must be 20 bytes")
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_key(cls, key: WebSocketKey) -> WebSocketAccept:
        """Compute the accept value answering ``key``."""
        digest = hashlib.sha1((key.serialize() + MAGIC_GUID).encode("ascii")).digest()
        return cls(digest)

    @classmethod
    def parse(cls, accept: str) -> WebSocketAccept:
        """Parse the base64 text of a Sec-WebSocket-Accept header."""
        try:
            raw = _decode(accept)
        except (binascii.Error, UnicodeEncodeError, ValueError) as exc:
            raise ProtocolError("Invalid Sec-WebSocket-Accept ") from exc
        if len(raw) != _ACCEPT_LENGTH:
            raise ProtocolError("Sec-WebSocket-Accept must be 20 bytes")
        return cls(raw)

    def serialize(self) -> str:
        """Return the base64 encoding of the accept value."""
        return base64.b64encode(self.value).decode("ascii")

    def __repr__(self) -> str:
        return f"WebSocketAccept({self.serialize()})"