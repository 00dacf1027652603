# wsbase

The protocol layer of WebSocket (RFC 6455) in plain Python. It covers frame
headers, payload masking, data frames, messages, the `Sec-WebSocket-Key` /
`Sec-WebSocket-Accept` handshake values, and incremental codecs that turn bytes
into messages and messages back into bytes. It works with any file-like reader
or writer, and with any `bytearray` you fill yourself. It has no dependencies
outside the standard library.

## Installation

```
pip install wsbase
```

## Messages

```python
import io
from wsbase.message import CloseData, Message, OwnedMessage

out = io.BytesIO()
Message.text("hello").serialize(out, masked=False)
out.getvalue()            # b"\x81\x05hello"

Message.close_because(1000, "bye").message_size(masked=True)   # 11
```

`Message` holds a `MessageType`, an optional close status code and the raw
payload bytes. It has the constructors `text`, `binary`, `close`,
`close_because`, `ping` and `pong`. `into_pong()` turns a ping into a pong in
place, and raises `ValueError` for any other kind of message.

`OwnedMessage` is the typed form of a message, and it is what the decoders
return. Text is held as `str`. Binary, ping and pong are held as `bytes`. Close
is held as an optional `CloseData(status_code, reason)`. The methods
`is_close()`, `is_control()`, `is_data()`, `is_ping()` and `is_pong()` tell
the kinds apart. The two forms convert into each other with
`OwnedMessage.from_message`, `OwnedMessage.to_message` and
`Message.from_owned`. When a message becomes an `OwnedMessage`, any invalid
UTF-8 in its text or close reason is replaced.

`Message.from_dataframes` and `OwnedMessage.from_dataframes` put a message
together from its frames. They reject a message with no frames, a later frame
that is not a continuation, and reserved bits that are set. Text that is not
valid UTF-8 is rejected too.

## Data frames

```python
import io
from wsbase.frame import DataFrame, Opcode

frame = DataFrame.read_dataframe(io.BytesIO(b"\x81\x02hi"), should_be_masked=False)
frame.opcode              # Opcode.TEXT
frame.data                # b"hi"
```

`DataFrame.read_dataframe_with_limit` raises `WebSocketIOError` for any frame
whose declared length is over the limit. Every message and frame class
implements the `Frameable` interface, which provides `frame_size(masked)` and
`write_to(writer, mask)`. With `mask` set, `write_to` masks the payload with a
random key.

The header helpers `DataFrameHeader`, `DataFrameFlags`, `read_header` and
`write_header` live in `wsbase.frameheader`. The masking helpers `mask_data`,
`gen_mask` and `Masker` live in `wsbase.mask`.

## Codecs

```python
from wsbase.codec import Context, MessageCodec
from wsbase.message import Message

client = MessageCodec(Context.CLIENT)
server = MessageCodec(Context.SERVER)

buffer = bytearray()
client.encode(Message.text("hi"), buffer)   # masked, as a client must send
server.decode(buffer)                        # OwnedMessage(kind=MessageType.TEXT, payload='hi')
```

`decode` takes complete frames off the front of the buffer. It returns `None`
until a whole message is there, and it reassembles fragmented messages.
Control frames are returned as soon as they arrive. A server codec expects
masked frames and writes unmasked ones. A client codec does the opposite.
`DataFrameCodec` works the same way, one `DataFrame` at a time.

By default the codecs limit a frame to 100 MiB and a message to 200 MiB. Each
fragment of a message also counts 64 bytes of overhead toward the message
limit. You can pass other limits to the constructors as `max_dataframe_size`
and `max_message_size`.

## Streams, senders and receivers

`wsbase.stream.ReadWritePair(reader, writer)` joins two objects into one
stream. Reads go to the reader and writes go to the writer, and `split()`
gives the two halves back.

`Sender` and `Receiver` are abstract base classes. A `Sender` subclass defines
`is_masked()`, and it then gets `send_dataframe` and `send_message`. A
`Receiver` subclass defines `recv_dataframe` and `recv_message_dataframes`,
and it then gets `recv_message`, `incoming_dataframes` and
`incoming_messages`. `recv_message` builds its result with
`OwnedMessage.from_dataframes` by default. Set `message_class` on the subclass
to use a different class.

## Handshake

```python
from wsbase.handshake import WebSocketAccept, WebSocketKey

key = WebSocketKey.parse("dGhlIHNhbXBsZSBub25jZQ==")
WebSocketAccept.from_key(key).serialize()    # "s3pPLMBiTxaQ9kYGzzhZRbK+xOo="

WebSocketKey.generate()                      # a new random key
```

The module also defines the header names `KEY`, `ACCEPT`, `PROTOCOL` and
`EXTENSIONS`.

## Errors

Every failure while reading, writing or interpreting WebSocket data raises a
subclass of `wsbase.errors.WebSocketError`:

- `ProtocolError`
- `DataFrameError`
- `NoDataAvailable`, when the input ended too soon
- `WebSocketIOError`
- `Utf8Error`

`from_os_error` converts a stream error into one of these.

## What it does not do

This package has no HTTP layer. It does not parse or answer an HTTP upgrade
request, and it has no server that listens for connections. It has no client
that opens a connection and no event loop. It computes the handshake key
values, but the upgrade request and response are up to you. The frame and
message layer works over the streams or buffers you give it.

## Running the tests

```
pip install -e ".[test]"
pytest
```