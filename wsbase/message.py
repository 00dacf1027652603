"""WebSocket messages: a payload-carrying message and an owned, typed message."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Union

from wsbase.errors import NoDataAvailable, ProtocolError, Utf8Error, from_os_error
from wsbase.frame import Frameable, Opcode, Reserved

_NO_RESERVED: Reserved = (False, False, False)


def bytes_to_string(data: bytes) -> str:
    """Decode UTF-8 ``data``, raising ``Utf8Error`` if it is not valid."""
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise Utf8Error(exc) from exc


def _write(writer: BinaryIO, data: bytes) -> None:
    try:
        writer.write(data)
    except OSError as exc:
        raise from_os_error(exc) from exc


def _lossy(data: bytes) -> str:
    return bytes(data).decode("utf-8", errors="replace")


class MessageType(enum.IntEnum):
    """The kinds of message."""

    TEXT = 1
    BINARY = 2
    CLOSE = 8
    PING = 9
    PONG = 10


@dataclass(frozen=True)
class CloseData:
    """Status code and reason carried by a close message."""

    status_code: int
    reason: str

    def to_bytes(self) -> bytes:
        """Encode as a big-endian status code followed by the UTF-8 reason."""
        return struct.pack("!H", self.status_code) + self.reason.encode("utf-8")


@dataclass
class Message(Frameable):
    """A message sent as a single frame, with an optional close status code."""

    opcode: MessageType
    cd_status_code: int | None
    payload: bytes

    @classmethod
    def text(cls, data: str) -> Message:
        return cls(MessageType.TEXT, None, data.encode("utf-8"))

    @classmethod
    def binary(cls, data: bytes) -> Message:
        return cls(MessageType.BINARY, None, bytes(data))

    @classmethod
    def close(cls) -> Message:
        return cls(MessageType.CLOSE, None, b"")

    @classmethod
    def close_because(cls, code: int, reason: str) -> Message:
        return cls(MessageType.CLOSE, code, reason.encode("utf-8"))

    @classmethod
    def ping(cls, data: bytes) -> Message:
        return cls(MessageType.PING, None, bytes(data))

    @classmethod
    def pong(cls, data: bytes) -> Message:
        return cls(MessageType.PONG, None, bytes(data))

    def into_pong(self) -> None:
        """Turn a ping into a pong in place, keeping the data."""
        if self.opcode != MessageType.PING:
            raise ValueError("only a ping message can become a pong")
        self.opcode = MessageType.PONG

    def is_last(self) -> bool:
        return True

    def opcode_value(self) -> int:
        return int(self.opcode)

    def reserved_bits(self) -> Reserved:
        return _NO_RESERVED

    def size(self) -> int:
        return len(self.payload) + (2 if self.cd_status_code is not None else 0)

    def write_payload(self, writer: BinaryIO) -> None:
        if self.cd_status_code is not None:
            _write(writer, struct.pack("!H", self.cd_status_code))
        _write(writer, self.payload)

    def take_payload(self) -> bytes:
        if self.cd_status_code is not None:
            return struct.pack("!H", self.cd_status_code) + bytes(self.payload)
        return bytes(self.payload)

    def serialize(self, writer: BinaryIO, masked: bool) -> None:
        """Write this message as one frame."""
        self.write_to(writer, masked)

    def message_size(self, masked: bool) -> int:
        """Number of bytes ``serialize`` will write."""
        return self.frame_size(masked)

    @classmethod
    def from_dataframes(cls, frames: Iterable[Frameable]) -> Message:
        """Assemble a message from the frames that make it up."""
        frames = list(frames)
        if not frames:
            raise ProtocolError("No dataframes provided")
        opcode = Opcode.from_nibble(frames[0].opcode_value())

        parts = []
        for index, frame in enumerate(frames):
            if index > 0 and frame.opcode_value() != Opcode.CONTINUATION:
                raise ProtocolError("Unexpected non-continuation data frame")
            if tuple(frame.reserved_bits()) != _NO_RESERVED:
                raise ProtocolError("Unsupported reserved bits received")
            parts.append(frame.take_payload())
        data = b"".join(parts)

        if opcode == Opcode.TEXT:
            bytes_to_string(data)
            return cls(MessageType.TEXT, None, data)
        if opcode == Opcode.BINARY:
            return cls.binary(data)
        if opcode == Opcode.CLOSE:
            if not data:
                return cls.close()
            if len(data) < 2:
                raise NoDataAvailable("failed to fill whole buffer")
            (status_code,) = struct.unpack("!H", data[:2])
            return cls.close_because(status_code, bytes_to_string(data[2:]))
        if opcode == Opcode.PING:
            return cls.ping(data)
        if opcode == Opcode.PONG:
            return cls.pong(data)
        raise ProtocolError("Unsupported opcode received")

    @classmethod
    def from_owned(cls, message: OwnedMessage) -> Message:
        """Build a message from an owned message."""
        return message.to_message()


OwnedPayload = Union[str, bytes, CloseData, None]


@dataclass(frozen=True)
class OwnedMessage(Frameable):
    """A typed message: text as ``str``, binary/ping/pong as ``bytes``, close as ``CloseData``."""

    kind: MessageType
    payload: OwnedPayload

    @classmethod
    def text(cls, text: str) -> OwnedMessage:
        return cls(MessageType.TEXT, text)

    @classmethod
    def binary(cls, data: bytes) -> OwnedMessage:
        return cls(MessageType.BINARY, bytes(data))

    @classmethod
    def close(cls, close_data: CloseData | None = None) -> OwnedMessage:
        return cls(MessageType.CLOSE, close_data)

    @classmethod
    def ping(cls, data: bytes) -> OwnedMessage:
        return cls(MessageType.PING, bytes(data))

    @classmethod
    def pong(cls, data: bytes) -> OwnedMessage:
        return cls(MessageType.PONG, bytes(data))

    def is_close(self) -> bool:
        return self.kind == MessageType.CLOSE

    def is_control(self) -> bool:
        return self.kind in (MessageType.CLOSE, MessageType.PING, MessageType.PONG)

    def is_data(self) -> bool:
        return not self.is_control()

    def is_ping(self) -> bool:
        return self.kind == MessageType.PING

    def is_pong(self) -> bool:
        return self.kind == MessageType.PONG

    @classmethod
    def from_message(cls, message: Message) -> OwnedMessage:
        """Convert a message, replacing invalid UTF-8 in text and reasons."""
        if message.opcode == MessageType.TEXT:
            return cls.text(_lossy(message.payload))
        if message.opcode == MessageType.CLOSE:
            if message.cd_status_code is None:
                return cls.close()
            return cls.close(CloseData(message.cd_status_code, _lossy(message.payload)))
        return cls(message.opcode, bytes(message.payload))

    def to_message(self) -> Message:
        """Convert into a ``Message``."""
        if self.kind == MessageType.TEXT:
            return Message.text(self.payload)
        if self.kind == MessageType.CLOSE:
            if self.payload is None:
                return Message.close()
            return Message.close_because(self.payload.status_code, self.payload.reason)
        return Message(self.kind, None, bytes(self.payload))

    def is_last(self) -> bool:
        return True

    def opcode_value(self) -> int:
        return int(self.kind)

    def reserved_bits(self) -> Reserved:
        return _NO_RESERVED

    def take_payload(self) -> bytes:
        if self.kind == MessageType.TEXT:
            return self.payload.encode("utf-8")
        if self.kind == MessageType.CLOSE:
            return b"" if self.payload is None else self.payload.to_bytes()
        return bytes(self.payload)

    def size(self) -> int:
        return len(self.take_payload())

    def write_payload(self, writer: BinaryIO) -> None:
        if self.kind == MessageType.CLOSE and self.payload is not None:
            _write(writer, struct.pack("!H", self.payload.status_code))
            _write(writer, self.payload.reason.encode("utf-8"))
        elif self.kind != MessageType.CLOSE:
            _write(writer, self.take_payload())

    def serialize(self, writer: BinaryIO, masked: bool) -> None:
        """Write this message as one frame."""
        self.write_to(writer, masked)

    def message_size(self, masked: bool) -> int:
        """Number of bytes ``serialize`` will write."""
        return self.frame_size(masked)

    @classmethod
    def from_dataframes(cls, frames: Iterable[Frameable]) -> OwnedMessage:
        """Assemble an owned message from the frames that make it up."""
        return cls.from_message(Message.from_dataframes(frames))