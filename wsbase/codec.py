"""Incremental encoding and decoding of data frames and messages over byte buffers."""

from __future__ import annotations

import enum
import io

from wsbase.errors import NoDataAvailable, ProtocolError
from wsbase.frame import DataFrame, Frameable
from wsbase.frameheader import read_header
from wsbase.message import OwnedMessage

DEFAULT_MAX_DATAFRAME_SIZE = 1024 * 1024 * 100
DEFAULT_MAX_MESSAGE_SIZE = 1024 * 1024 * 200
MAX_DATAFRAMES_IN_ONE_MESSAGE = 1024 * 1024
PER_DATAFRAME_OVERHEAD = 64
_U32_MAX = 2**32 - 1


class Context(enum.Enum):
    """Role of a codec; a server expects masked input and sends unmasked output."""

    SERVER = "server"
    CLIENT = "client"


def _encode_into(item, buffer: bytearray, masked: bool, serialize: bool) -> None:
    out = io.BytesIO()
    if serialize:
        item.serialize(out, masked)
    else:
        item.write_to(out, masked)
    buffer.extend(out.getvalue())


class DataFrameCodec:
    """Decodes data frames from, and encodes frames into, a ``bytearray``."""

    def __init__(self, context: Context, max_dataframe_size: int = DEFAULT_MAX_DATAFRAME_SIZE) -> None:
        self.is_server = context == Context.SERVER
        self.max_dataframe_size = min(max_dataframe_size, _U32_MAX)

    def decode(self, buffer: bytearray) -> DataFrame | None:
        """Take one complete frame off the front of ``buffer``, or return None if incomplete."""
        reader = io.BytesIO(bytes(buffer))
        try:
            header = read_header(reader)
        except NoDataAvailable:
            return None
        header_size = reader.tell()

        if header.length > self.max_dataframe_size:
            raise ProtocolError("Exceeded maximum incoming DataFrame size")
        if header.length + header_size > len(buffer):
            return None

        del buffer[:header_size]
        body = bytes(buffer[: header.length])
        del buffer[: header.length]
        return DataFrame.read_dataframe_body(header, body, self.is_server)

    def encode(self, item: Frameable, buffer: bytearray) -> None:
        """Append ``item`` as a frame to ``buffer``."""
        _encode_into(item, buffer, not self.is_server, serialize=False)


class MessageCodec:
    """Decodes ``OwnedMessage`` values from, and encodes messages into, a ``bytearray``."""

    def __init__(
        self,
        context: Context,
        max_dataframe_size: int = DEFAULT_MAX_DATAFRAME_SIZE,
        max_message_size: int = DEFAULT_MAX_MESSAGE_SIZE,
    ) -> None:
        self._frames: list[DataFrame] = []
        self._dataframe_codec = DataFrameCodec(context, max_dataframe_size)
        self.max_message_size = min(max_message_size, _U32_MAX)

    @property
    def is_server(self) -> bool:
        return self._dataframe_codec.is_server

    def decode(self, buffer: bytearray) -> OwnedMessage | None:
        """Return the next complete message from ``buffer``, or None if more data is needed."""
        current_length = sum(len(frame.data) for frame in self._frames)
        while (frame := self._dataframe_codec.decode(buffer)) is not None:
            is_first = not self._frames
            op = int(frame.opcode)

            if op == 0 and is_first:
                raise ProtocolError("Unexpected continuation data frame opcode")
            if op >= 8:
                return OwnedMessage.from_dataframes([frame])
            if 1 <= op <= 7 and not is_first:
                raise ProtocolError("Unexpected data frame opcode")
            current_length += len(frame.data) + PER_DATAFRAME_OVERHEAD
            self._frames.append(frame)

            if frame.finished:
                frames, self._frames = self._frames, []
                return OwnedMessage.from_dataframes(frames)
            if len(self._frames) >= MAX_DATAFRAMES_IN_ONE_MESSAGE:
                raise ProtocolError("Exceeded count of data frames in one WebSocket message")
            if current_length > self.max_message_size:
                raise ProtocolError("Exceeded maximum WebSocket message size")
        return None

    def encode(self, item, buffer: bytearray) -> None:
        """Append ``item``, any message with ``serialize``, to ``buffer``."""
        _encode_into(item, buffer, not self.is_server, serialize=True)