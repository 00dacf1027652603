import pytest

from wsbase.errors import ProtocolError
from wsbase.handshake import WebSocketAccept, WebSocketKey

RFC_KEY = "dGhlIHNhbXBsZSBub25jZQ=="
RFC_ACCEPT = "s3pPLMBiTxaQ9kYGzzhZRbK+xOo="


def test_generated_key_is_sixteen_bytes():
    key = WebSocketKey.generate()
    assert len(key.value) == 16


def test_generated_keys_differ():
    serialized = {WebSocketKey.generate().serialize() for _ in range(8)}
    assert len(serialized) == 8
    assert all(len(item) == 24 for item in serialized)


def test_key_round_trip():
    key = WebSocketKey.generate()
    assert WebSocketKey.parse(key.serialize()) == key


def test_key_parse_rejects_bad_base64():
    with pytest.raises(ProtocolError):
        WebSocketKey.parse("not base64 at all!")


def test_key_parse_rejects_wrong_length():
    short = WebSocketAccept.from_key(WebSocketKey(bytes(16))).serialize()
    with pytest.raises(ProtocolError):
        WebSocketKey.parse(short)


def test_key_constructor_rejects_wrong_length():
    with pytest.raises(ValueError):
        WebSocketKey(b"abc")


def test_key_repr_shows_base64():
    key = WebSocketKey(bytes(16))
    assert repr(key) == f"WebSocketKey({key.serialize()})"


def test_accept_matches_rfc_example():
    key = WebSocketKey.parse(RFC_KEY)
    accept = WebSocketAccept.from_key(key)
    assert accept.serialize() == RFC_ACCEPT


def test_accept_round_trip():
    accept = WebSocketAccept.from_key(WebSocketKey.generate())
    assert WebSocketAccept.parse(accept.serialize()) == accept
    assert len(accept.value) == 20


def test_accept_is_deterministic():
    first = WebSocketAccept.from_key(WebSocketKey.parse(RFC_KEY)).serialize()
    second = WebSocketAccept.from_key(WebSocketKey.parse(RFC_KEY)).serialize()
    assert first == RFC_ACCEPT
    assert second == RFC_ACCEPT


def test_accept_parse_rejects_wrong_length():
    with pytest.raises(ProtocolError):
        WebSocketAccept.parse(WebSocketKey.generate().serialize())


def test_accept_parse_rejects_bad_base64():
    with pytest.raises(ProtocolError):
        WebSocketAccept.parse("@@@@")