# tests/test_ws_client.py
import json

import aiohttp
import pytest
from aiohttp import WSMsgType

from exchange.enums import Interval
from exchange.errors import ABNORMAL_CLOSURE, ChannelClosed, SerializationError, TransportError
from infra.channels import AggTrade, Kline, Ticker, UserData
from infra.ws_client import StreamState, WebSocketStream


def frame(kind, data=None, extra=None):
    return aiohttp.WSMessage(kind, data, extra)


class FakeWebSocket:
    """In-memory stand-in for aiohttp.ClientWebSocketResponse."""

    def __init__(self, frames=()):
        self.frames = list(frames)
        self.sent = []
        self.pongs = []
        self.pings = []
        self.close_calls = []
        self.closed = False

    async def receive(self):
        # an exhausted queue behaves like a socket dropped without a close frame
        if self.frames:
            return self.frames.pop(0)
        return frame(WSMsgType.CLOSED)

    async def send_str(self, data):
        if self.closed:
            raise ConnectionResetError("socket closed")
        self.sent.append(data)

    async def pong(self, message=b""):
        self.pongs.append(message)

    async def ping(self, message=b""):
        self.pings.append(message)

    async def close(self, *, code=1000, message=b""):
        self.closed = True
        self.close_calls.append((code, message))
        return True


class FakeSession:
    def __init__(self, ws):
        self.ws = ws
        self.calls = []
        self.closed = False

    async def ws_connect(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.ws

    async def close(self):
        self.closed = True


async def open_stream(*frames):
    ws = FakeWebSocket(frames)
    stream = WebSocketStream(ws, name="test")
    await stream.start()
    return stream, ws


@pytest.mark.asyncio
async def test_start_sets_combined_property_with_id_zero():
    stream, ws = await open_stream()
    assert stream.state is StreamState.OPEN
    assert ws.sent == ['{"method":"SET_PROPERTY","params":["combined",true],"id":0}']
    assert stream.next_id == 1


@pytest.mark.asyncio
async def test_start_twice_is_refused():
    stream, _ = await open_stream()
    with pytest.raises(TransportError):
        await stream.start()


@pytest.mark.asyncio
async def test_subscribe_and_unsubscribe_envelopes_use_increasing_ids():
    stream, ws = await open_stream()
    await stream.subscribe([AggTrade("BNBUSDT"), Kline("BNBUSDT", Interval.ONE_MINUTE)])
    await stream.unsubscribe([AggTrade("BNBUSDT")])

    assert [json.loads(m) for m in ws.sent[1:]] == [
        {"method": "SUBSCRIBE", "params": ["bnbusdt@aggTrade", "bnbusdt@kline_1m"], "id": 1},
        {"method": "UNSUBSCRIBE", "params": ["bnbusdt@aggTrade"], "id": 2},
    ]
    assert stream.next_id == 3


@pytest.mark.asyncio
async def test_text_and_binary_frames_are_surfaced():
    stream, _ = await open_stream(
        frame(WSMsgType.TEXT, '{"stream":"bnbusdt@ticker","data":{}}'),
        frame(WSMsgType.BINARY, b'{"result":null,"id":1}'),
    )
    assert await stream.text() == '{"stream":"bnbusdt@ticker","data":{}}'
    assert await stream.json() == {"result": None, "id": 1}


@pytest.mark.asyncio
async def test_ping_is_answered_with_matching_pong_and_reported():
    stream, ws = await open_stream(
        frame(WSMsgType.PING, b"P"),
        frame(WSMsgType.TEXT, "next"),
    )
    assert await stream.text() == '{"ping":"P"}'
    assert ws.pongs == [b"P"]
    assert await stream.text() == "next"
    assert ws.pongs == [b"P"]


@pytest.mark.asyncio
async def test_pong_is_reciprocated_with_ping():
    stream, ws = await open_stream(frame(WSMsgType.PONG, b"1700000000000"))
    assert await stream.json() == {"pong": "1700000000000"}
    assert ws.pings == [b"1700000000000"]


@pytest.mark.asyncio
async def test_close_frame_with_reason_raises_channel_closed():
    stream, ws = await open_stream(frame(WSMsgType.CLOSE, 1006, "abnormal"))
    with pytest.raises(ChannelClosed) as ei:
        await stream.text()
    assert ei.value.code == 1006
    assert ei.value.reason == "abnormal"
    assert stream.state is StreamState.CLOSED
    assert ws.closed
    assert await stream.text() is None


@pytest.mark.asyncio
async def test_close_frame_without_payload_raises_default_error():
    stream, _ = await open_stream(frame(WSMsgType.CLOSE, 0, ""))
    with pytest.raises(ChannelClosed) as ei:
        await stream.text()
    assert ei.value.code == ABNORMAL_CLOSURE
    assert ei.value.reason == "Close message with no frame received"


@pytest.mark.asyncio
async def test_dropped_connection_is_transport_error():
    stream, ws = await open_stream(frame(WSMsgType.TEXT, '{"data":1}'))
    assert await stream.text() == '{"data":1}'
    with pytest.raises(TransportError):
        await stream.text()
    assert stream.state is StreamState.CLOSED
    assert ws.closed


@pytest.mark.asyncio
async def test_dropped_connection_fails_iteration():
    stream, _ = await open_stream(
        frame(WSMsgType.TEXT, "a"),
        frame(WSMsgType.TEXT, "b"),
    )
    received = []
    with pytest.raises(TransportError):
        async for text in stream:
            received.append(text)
    assert received == ["a", "b"]


@pytest.mark.asyncio
async def test_reads_after_close_return_none_and_stop_iteration():
    stream, _ = await open_stream(
        frame(WSMsgType.TEXT, "a"),
        frame(WSMsgType.TEXT, "b"),
    )
    async for text in stream:
        assert text == "a"
        break
    await stream.close()
    assert [text async for text in stream] == []
    assert await stream.text() is None
    assert await stream.json() is None


@pytest.mark.asyncio
async def test_eof_while_closing_ends_gracefully():
    stream, _ = await open_stream()
    stream.state = StreamState.CLOSING
    assert await stream.text() is None
    assert stream.closed


@pytest.mark.asyncio
async def test_malformed_json_is_serialization_error():
    stream, _ = await open_stream(frame(WSMsgType.TEXT, "not json"))
    with pytest.raises(SerializationError):
        await stream.json()


@pytest.mark.asyncio
async def test_undecodable_binary_is_serialization_error():
    stream, _ = await open_stream(frame(WSMsgType.BINARY, b"\xff\xfe"))
    with pytest.raises(SerializationError):
        await stream.text()


@pytest.mark.asyncio
async def test_transport_error_frame_terminates_stream():
    stream, _ = await open_stream(frame(WSMsgType.ERROR, ConnectionResetError("reset")))
    with pytest.raises(TransportError):
        await stream.text()
    assert stream.state is StreamState.CLOSED


@pytest.mark.asyncio
async def test_close_sends_close_frame_and_blocks_further_control():
    stream, ws = await open_stream()
    await stream.close()
    assert stream.state is StreamState.CLOSED
    assert ws.close_calls == [(1000, b"")]
    with pytest.raises(TransportError):
        await stream.subscribe([Ticker("BNBUSDT")])
    # closing again is a no-op
    await stream.close()
    assert ws.close_calls == [(1000, b"")]


@pytest.mark.asyncio
async def test_context_manager_closes_on_exit():
    ws = FakeWebSocket()
    async with WebSocketStream(ws) as stream:
        await stream.start()
    assert stream.closed and ws.closed


@pytest.mark.asyncio
async def test_connect_opens_topic_url_without_auto_control_handling():
    ws = FakeWebSocket()
    session = FakeSession(ws)
    stream = await WebSocketStream.connect(Ticker("BNBUSDT"), "wss://stream.binance.us:9443/", session=session)

    url, kwargs = session.calls[0]
    assert url == "wss://stream.binance.us:9443/ws/bnbusdt@ticker"
    assert kwargs == {"autoping": False, "autoclose": False}
    assert stream.state is StreamState.OPEN
    assert json.loads(ws.sent[0])["method"] == "SET_PROPERTY"

    await stream.close()
    # a borrowed session is left open
    assert not session.closed


@pytest.mark.asyncio
async def test_connect_user_data_stream_by_listen_key():
    session = FakeSession(FakeWebSocket())
    await WebSocketStream.connect(UserData("listen-key-1"), session=session)
    assert session.calls[0][0] == "wss://stream.binance.us:9443/ws/listen-key-1"


@pytest.mark.asyncio
async def test_failed_handshake_is_transport_error():
    class RefusingSession(FakeSession):
        async def ws_connect(self, url, **kwargs):
            raise aiohttp.ClientConnectionError("refused")

    with pytest.raises(TransportError):
        await WebSocketStream.connect(Ticker("BNBUSDT"), session=RefusingSession(None))
