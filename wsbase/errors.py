"""Error types raised while reading, writing and interpreting WebSocket data."""

from __future__ import annotations


class WebSocketError(Exception):
    """Base class for every WebSocket error."""

    summary = "WebSocket error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"WebSocketError: {self.summary}"


class ProtocolError(WebSocketError):
    """The peer violated the WebSocket protocol."""

    summary = "WebSocket protocol error"


class DataFrameError(WebSocketError):
    """A data frame is malformed or cannot be encoded."""

    summary = "WebSocket data frame error"


class NoDataAvailable(WebSocketError):
    """The input ended before a complete item could be read."""

    summary = "No data available"


class WebSocketIOError(WebSocketError):
    """An input/output failure of the underlying stream."""

    summary = "I/O failure"

    def __init__(self, error: BaseException) -> None:
        super().__init__(str(error))
        self.error = error
        self.__cause__ = error


class Utf8Error(WebSocketError):
    """Text data was not valid UTF-8."""

    summary = "UTF-8 failure"

    def __init__(self, error: UnicodeDecodeError) -> None:
        super().__init__(str(error))
        self.error = error
        self.__cause__ = error


def from_os_error(err: BaseException) -> WebSocketError:
    """Convert a stream error into a WebSocket error.

    An unexpected end of input becomes ``NoDataAvailable``; anything else is
    wrapped in ``WebSocketIOError``.
    """
    if isinstance(err, EOFError):
        return NoDataAvailable(str(err) or None)
    return WebSocketIOError(err)