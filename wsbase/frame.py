"""Data frames: the shared frame interface and the owned default frame."""

from __future__ import annotations

import enum
import io
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import BinaryIO

from wsbase.errors import DataFrameError, NoDataAvailable, WebSocketIOError, from_os_error
from wsbase.frameheader import DataFrameFlags, DataFrameHeader, read_header, write_header
from wsbase.mask import Masker, gen_mask, mask_data

Reserved = tuple[bool, bool, bool]
_NO_RESERVED: Reserved = (False, False, False)


class Opcode(enum.IntEnum):
    """A data frame opcode."""

    CONTINUATION = 0
    TEXT = 1
    BINARY = 2
    NON_CONTROL1 = 3
    NON_CONTROL2 = 4
    NON_CONTROL3 = 5
    NON_CONTROL4 = 6
    NON_CONTROL5 = 7
    CLOSE = 8
    PING = 9
    PONG = 10
    CONTROL1 = 11
    CONTROL2 = 12
    CONTROL3 = 13
    CONTROL4 = 14
    CONTROL5 = 15

    @classmethod
    def from_nibble(cls, op: int) -> Opcode | None:
        """Return the opcode for ``op``, or None if it is out of range."""
        try:
            return cls(op)
        except ValueError:
            return None


class Frameable(ABC):
    """Anything that can be sent as a single data frame."""

    @abstractmethod
    def is_last(self) -> bool:
        """Whether this frame ends its message."""

    @abstractmethod
    def opcode_value(self) -> int:
        """The numeric opcode of this frame."""

    @abstractmethod
    def reserved_bits(self) -> Reserved:
        """The three reserved bits."""

    @abstractmethod
    def size(self) -> int:
        """Length of the payload in bytes."""

    @abstractmethod
    def write_payload(self, writer: BinaryIO) -> None:
        """Write the payload to ``writer``."""

    @abstractmethod
    def take_payload(self) -> bytes:
        """Return the payload as bytes."""

    def frame_size(self, masked: bool) -> int:
        """Size of the whole frame, header and payload, in bytes."""
        size = self.size()
        if size <= 125:
            length_bytes = 1
        elif size <= 65535:
            length_bytes = 3
        else:
            length_bytes = 9
        return 1 + length_bytes + (4 if masked else 0) + size

    def write_to(self, writer: BinaryIO, mask: bool) -> None:
        """Write the frame to ``writer``, masking it with a random key if ``mask``."""
        flags = DataFrameFlags(0)
        if self.is_last():
            flags |= DataFrameFlags.FIN
        for bit, flag in zip(
            self.reserved_bits(),
            (DataFrameFlags.RSV1, DataFrameFlags.RSV2, DataFrameFlags.RSV3),
        ):
            if bit:
                flags |= flag

        masking_key = gen_mask() if mask else None
        header = DataFrameHeader(
            flags=flags, opcode=self.opcode_value(), mask=masking_key, length=self.size()
        )

        buffer = io.BytesIO()
        write_header(buffer, header)
        if masking_key is not None:
            self.write_payload(Masker(masking_key, buffer))
        else:
            self.write_payload(buffer)

        try:
            writer.write(buffer.getvalue())
        except OSError as exc:
            raise from_os_error(exc) from exc


def _read_payload(reader: BinaryIO, length: int) -> bytes:
    chunks = []
    remaining = length
    while remaining:
        try:
            chunk = reader.read(min(remaining, 1 << 20))
        except (OSError, EOFError) as exc:
            raise from_os_error(exc) from exc
        if not chunk:
            raise NoDataAvailable("incomplete payload")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


@dataclass
class DataFrame(Frameable):
    """A data frame that owns its unmasked payload."""

    finished: bool
    opcode: Opcode
    data: bytes
    reserved: Reserved = field(default=_NO_RESERVED)

    @classmethod
    def read_dataframe_body(
        cls, header: DataFrameHeader, body: bytes, should_be_masked: bool
    ) -> DataFrame:
        """Combine a header and its payload into a frame, unmasking as needed."""
        finished = bool(header.flags & DataFrameFlags.FIN)
        reserved = (
            bool(header.flags & DataFrameFlags.RSV1),
            bool(header.flags & DataFrameFlags.RSV2),
            bool(header.flags & DataFrameFlags.RSV3),
        )
        opcode = Opcode(header.opcode)

        if header.mask is not None:
            if not should_be_masked:
                raise DataFrameError("Expected unmasked data frame")
            data = mask_data(header.mask, body)
        else:
            if should_be_masked:
                raise DataFrameError("Expected masked data frame")
            data = bytes(body)

        return cls(finished=finished, opcode=opcode, data=data, reserved=reserved)

    @classmethod
    def read_dataframe(cls, reader: BinaryIO, should_be_masked: bool) -> DataFrame:
        """Read a frame from ``reader``."""
        header = read_header(reader)
        body = _read_payload(reader, header.length)
        return cls.read_dataframe_body(header, body, should_be_masked)

    @classmethod
    def read_dataframe_with_limit(
        cls, reader: BinaryIO, should_be_masked: bool, limit: int
    ) -> DataFrame:
        """Read a frame, failing if its declared length exceeds ``limit``."""
        header = read_header(reader)
        if header.length > limit:
            raise WebSocketIOError(OSError("exceeded DataFrame length limit"))
        body = _read_payload(reader, header.length)
        return cls.read_dataframe_body(header, body, should_be_masked)

    def is_last(self) -> bool:
        return self.finished

    def opcode_value(self) -> int:
        return int(self.opcode)

    def reserved_bits(self) -> Reserved:
        return self.reserved

    def size(self) -> int:
        return len(self.data)

    def write_payload(self, writer: BinaryIO) -> None:
        try:
            writer.write(self.data)
        except OSError as exc:
            raise from_os_error(exc) from exc

    def take_payload(self) -> bytes:
        return bytes(self.data)