"""Reading and writing of data frame headers."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import BinaryIO

from wsbase.errors import DataFrameError, NoDataAvailable, ProtocolError, from_os_error


class DataFrameFlags(enum.IntFlag):
    """Flag bits of the first header byte."""

    FIN = 0x80
    RSV1 = 0x40
    RSV2 = 0x20
    RSV3 = 0x10


@dataclass(frozen=True)
class DataFrameHeader:
    """A data frame header."""

    flags: DataFrameFlags
    opcode: int
    mask: bytes | None
    length: int

    def __post_init__(self) -> None:
        if self.mask is not None:
            if len(self.mask) != 4:
                raise ValueError("masking key must be 4 bytes")
            object.__setattr__(self, "mask", bytes(self.mask))


def _read_exact(reader: BinaryIO, count: int) -> bytes:
    chunks = []
    remaining = count
    while remaining:
        try:
            chunk = reader.read(remaining)
        except (OSError, EOFError) as exc:
            raise from_os_error(exc) from exc
        if not chunk:
            raise NoDataAvailable("failed to fill whole buffer")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def write_header(writer: BinaryIO, header: DataFrameHeader) -> None:
    """Write ``header`` to ``writer``."""
    if header.opcode > 0xF:
        raise DataFrameError("Invalid data frame opcode")
    if header.opcode >= 8 and header.length >= 126:
        raise DataFrameError("Control frame length too long")

    mask_bit = 0x80 if header.mask is not None else 0x00
    if header.length <= 125:
        out = struct.pack("!BB", int(header.flags) | header.opcode, mask_bit | header.length)
    elif header.length <= 65535:
        out = struct.pack("!BBH", int(header.flags) | header.opcode, mask_bit | 126, header.length)
    else:
        out = struct.pack("!BBQ", int(header.flags) | header.opcode, mask_bit | 127, header.length)
    if header.mask is not None:
        out += header.mask

    try:
        writer.write(out)
    except OSError as exc:
        raise from_os_error(exc) from exc


def read_header(reader: BinaryIO) -> DataFrameHeader:
    """Read a data frame header from ``reader``."""
    byte0, byte1 = _read_exact(reader, 2)

    flags = DataFrameFlags(byte0 & 0xF0)
    opcode = byte0 & 0x0F

    length = byte1 & 0x7F
    if length == 126:
        (length,) = struct.unpack("!H", _read_exact(reader, 2))
        if length <= 125:
            raise DataFrameError("Invalid data frame length")
    elif length == 127:
        (length,) = struct.unpack("!Q", _read_exact(reader, 8))
        if length <= 65535:
            raise DataFrameError("Invalid data frame length")

    if opcode >= 8:
        if length >= 126:
            raise DataFrameError("Control frame length too long")
        if not flags & DataFrameFlags.FIN:
            raise ProtocolError("Illegal fragmented control frame")

    mask = _read_exact(reader, 4) if byte1 & 0x80 else None
    return DataFrameHeader(flags=flags, opcode=opcode, mask=mask, length=length)