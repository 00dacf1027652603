"""Stream pairing and the sender/receiver interfaces for frames and messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterator

from wsbase.frame import Frameable
from wsbase.message import OwnedMessage


class ReadWritePair:
    """Combine a reader and a writer into one stream.

    Reads go to the reader and writes go to the writer, so the two directions
    of a connection may use different media.
    """

    def __init__(self, reader: BinaryIO, writer: BinaryIO) -> None:
        self.reader = reader
        self.writer = writer

    def read(self, size: int = -1) -> bytes:
        return self.reader.read(size)

    def write(self, data: bytes) -> int:
        return self.writer.write(data)

    def flush(self) -> None:
        self.writer.flush()

    def split(self) -> tuple[BinaryIO, BinaryIO]:
        """Return the reading and writing halves."""
        return self.reader, self.writer


class Sender(ABC):
    """Sends data frames and messages to a writer."""

    @abstractmethod
    def is_masked(self) -> bool:
        """Whether frames sent by this sender are masked."""

    def send_dataframe(self, writer: BinaryIO, dataframe: Frameable) -> None:
        """Send a single data frame."""
        dataframe.write_to(writer, self.is_masked())

    def send_message(self, writer: BinaryIO, message) -> None:
        """Send a single message."""
        message.serialize(writer, self.is_masked())


class Receiver(ABC):
    """Receives data frames and messages from a reader.

    ``message_class`` is the message type that ``recv_message`` assembles; it
    must provide a ``from_dataframes`` class method.
    """

    message_class = OwnedMessage

    @abstractmethod
    def recv_dataframe(self, reader: BinaryIO) -> Frameable:
        """Read a single data frame."""

    @abstractmethod
    def recv_message_dataframes(self, reader: BinaryIO) -> list[Frameable]:
        """Read the data frames that make up one message."""

    def incoming_dataframes(self, reader: BinaryIO) -> Iterator[Frameable]:
        """Yield incoming data frames until reading one fails."""
        while True:
            yield self.recv_dataframe(reader)

    def recv_message(self, reader: BinaryIO):
        """Read a single message."""
        return self.message_class.from_dataframes(self.recv_message_dataframes(reader))

    def incoming_messages(self, reader: BinaryIO) -> Iterator:
        """Yield incoming messages until reading one fails."""
        while True:
            yield self.recv_message(reader)