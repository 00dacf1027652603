"""WebSocket framing, messages, handshake values, streams and codecs."""

__version__ = "0.1.0"
__all__ = ["codec", "errors", "frame", "frameheader", "handshake", "mask", "message", "stream"]