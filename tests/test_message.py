import io

import pytest

from wsbase.errors import NoDataAvailable, ProtocolError, Utf8Error
from wsbase.frame import DataFrame, Opcode
from wsbase.message import (
    CloseData,
    Message,
    MessageType,
    OwnedMessage,
    bytes_to_string,
)

OWNED_MESSAGES = [
    OwnedMessage.text("nilbog"),
    OwnedMessage.binary(bytes([1, 2, 3, 4])),
    OwnedMessage.binary(bytes([42]) * 256),
    OwnedMessage.binary(bytes([42]) * 65535),
    OwnedMessage.binary(bytes([42]) * 65555),
    OwnedMessage.ping(b"beep"),
    OwnedMessage.pong(b"boop"),
    OwnedMessage.close(None),
    OwnedMessage.close(CloseData(64, "because")),
]

COW_MESSAGES = [
    Message.binary(bytes([1, 2, 3, 4])),
    Message.binary(bytes([42]) * 256),
    Message.binary(bytes([42]) * 65535),
    Message.binary(bytes([42]) * 65555),
    Message.text("nilbog"),
    Message.ping(b"beep"),
    Message.pong(b"boop"),
    Message.close(),
    Message.close_because(64, "because"),
]


@pytest.mark.parametrize("masked", [True, False])
@pytest.mark.parametrize("message", OWNED_MESSAGES + COW_MESSAGES)
def test_message_predicts_size(message, masked):
    buf = io.BytesIO()
    message.serialize(buf, masked)
    wire = buf.getvalue()
    assert len(wire) == message.message_size(masked)
    frame = DataFrame.read_dataframe(io.BytesIO(wire), masked)
    assert frame.size() == message.size()


@pytest.mark.parametrize("masked", [True, False])
@pytest.mark.parametrize("message", OWNED_MESSAGES)
def test_owned_round_trip_through_frame(message, masked):
    buf = io.BytesIO()
    message.serialize(buf, masked)
    buf.seek(0)
    frame = DataFrame.read_dataframe(buf, masked)
    assert OwnedMessage.from_dataframes([frame]) == message


@pytest.mark.parametrize("message", COW_MESSAGES)
def test_message_round_trip_through_frame(message):
    buf = io.BytesIO()
    message.serialize(buf, False)
    buf.seek(0)
    frame = DataFrame.read_dataframe(buf, False)
    assert Message.from_dataframes([frame]) == message


def test_text_wire_bytes():
    buf = io.BytesIO()
    Message.text("Hi").serialize(buf, False)
    assert buf.getvalue() == b"\x81\x02Hi"


def test_close_because_wire_bytes():
    buf = io.BytesIO()
    Message.close_because(1000, "bye").serialize(buf, False)
    assert buf.getvalue() == b"\x88\x05\x03\xe8bye"


def test_fragmented_text_is_joined():
    frames = [
        DataFrame(False, Opcode.TEXT, b"Hel"),
        DataFrame(True, Opcode.CONTINUATION, b"lo"),
    ]
    assert OwnedMessage.from_dataframes(frames) == OwnedMessage.text("Hello")


def test_from_dataframes_rejects_empty():
    with pytest.raises(ProtocolError):
        Message.from_dataframes([])


def test_from_dataframes_rejects_non_continuation():
    frames = [DataFrame(False, Opcode.TEXT, b"a"), DataFrame(True, Opcode.TEXT, b"b")]
    with pytest.raises(ProtocolError):
        Message.from_dataframes(frames)


def test_from_dataframes_rejects_reserved_bits():
    frame = DataFrame(True, Opcode.BINARY, b"a", reserved=(True, False, False))
    with pytest.raises(ProtocolError):
        Message.from_dataframes([frame])


def test_from_dataframes_rejects_invalid_utf8():
    with pytest.raises(Utf8Error):
        Message.from_dataframes([DataFrame(True, Opcode.TEXT, b"\xff\xfe")])


def test_from_dataframes_rejects_unsupported_opcode():
    with pytest.raises(ProtocolError):
        Message.from_dataframes([DataFrame(True, Opcode.NON_CONTROL1, b"")])


def test_close_with_truncated_code():
    with pytest.raises(NoDataAvailable):
        Message.from_dataframes([DataFrame(True, Opcode.CLOSE, b"\x03")])


def test_close_with_invalid_reason():
    with pytest.raises(Utf8Error):
        Message.from_dataframes([DataFrame(True, Opcode.CLOSE, b"\x03\xe8\xff")])


def test_empty_close_has_no_data():
    message = OwnedMessage.from_dataframes([DataFrame(True, Opcode.CLOSE, b"")])
    assert message == OwnedMessage.close()


def test_into_pong_converts_ping():
    message = Message.ping(b"data")
    message.into_pong()
    assert message == Message.pong(b"data")


def test_into_pong_rejects_other_messages():
    message = Message.text("x")
    with pytest.raises(ValueError):
        message.into_pong()
    assert message.opcode == MessageType.TEXT


def test_owned_predicates():
    assert OwnedMessage.close(None).is_close()
    assert OwnedMessage.ping(b"").is_control()
    assert OwnedMessage.pong(b"").is_control()
    assert OwnedMessage.close(None).is_control()
    assert OwnedMessage.text("1337").is_data()
    assert OwnedMessage.binary(b"").is_data()
    assert OwnedMessage.ping(b"ping").is_ping()
    assert OwnedMessage.pong(b"pong").is_pong()
    assert not OwnedMessage.text("x").is_control()


@pytest.mark.parametrize("message", OWNED_MESSAGES)
def test_owned_to_message_and_back(message):
    assert OwnedMessage.from_message(message.to_message()) == message
    assert Message.from_owned(message) == message.to_message()


def test_from_message_replaces_invalid_text():
    message = Message(MessageType.TEXT, None, b"a\xff")
    assert OwnedMessage.from_message(message) == OwnedMessage.text("a\ufffd")


def test_close_data_to_bytes_and_take_payload_agree():
    data = CloseData(64, "because")
    assert OwnedMessage.close(data).take_payload() == data.to_bytes()
    assert Message.close_because(64, "because").take_payload() == data.to_bytes()
    assert data.to_bytes()[2:] == b"because"


def test_bytes_to_string():
    assert bytes_to_string("héllo".encode("utf-8")) == "héllo"
    with pytest.raises(Utf8Error):
        bytes_to_string(b"\xc3")


def test_message_opcode_values():
    assert Message.close().opcode_value() == int(Opcode.CLOSE)
    assert OwnedMessage.pong(b"").opcode_value() == int(Opcode.PONG)
    assert OwnedMessage.text("a").size() == 1