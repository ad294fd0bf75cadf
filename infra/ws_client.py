# infra/ws_client.py
from __future__ import annotations

import asyncio
import contextlib
import json
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional

import aiohttp
from aiohttp import WSMsgType

from exchange.errors import ChannelClosed, SerializationError, TransportError
from exchange.services.endpoints import BINANCE_US_WSS_URL
from infra.channels import Channel, render
from utils.logger import logger

JSON_SEPARATORS = (",", ":")


class StreamState(Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


def _json_dumps_compact(obj: Any) -> str:
    return json.dumps(obj, separators=JSON_SEPARATORS, ensure_ascii=False)


def _utf8(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    try:
        return bytes(payload).decode("utf-8")
    except UnicodeDecodeError as e:
        raise SerializationError(f"frame payload is not valid utf-8: {e}") from e


class WebSocketStream:
    """
    Control protocol over one exchange websocket.

    CONNECTING -> OPEN once the combined-stream property is set, OPEN ->
    CLOSING -> CLOSED on `close()`, straight to CLOSED when the peer closes or
    the transport fails. Reads return None only after `close()`; a peer close
    or a dropped connection raises. Reads surface text events: data frames verbatim, pings
    and pongs answered in kind and reported as `{"ping": ...}` / `{"pong": ...}`.
    There is no reconnect; a failed stream stays failed.

    Usage:
        async with await WebSocketStream.connect(Ticker("BNBUSDT")) as stream:
            await stream.subscribe([AggTrade("BNBUSDT")])
            async for text in stream:
                ...
    """

    def __init__(self,
                 ws: aiohttp.ClientWebSocketResponse,
                 *,
                 session: Optional[aiohttp.ClientSession] = None,
                 name: str = "",
                 ) -> None:
        self._ws = ws
        # only set when the stream created (and therefore owns) the session
        self._session = session
        self._id = 0
        self.name = name
        self.state = StreamState.CONNECTING
        self._handlers: Dict[WSMsgType, Callable[[aiohttp.WSMessage], Awaitable[Optional[str]]]] = {
            WSMsgType.TEXT: self._on_text,
            WSMsgType.BINARY: self._on_binary,
            WSMsgType.PING: self._on_ping,
            WSMsgType.PONG: self._on_pong,
            WSMsgType.CLOSE: self._on_close,
            WSMsgType.CLOSING: self._on_eof,
            WSMsgType.CLOSED: self._on_eof,
            WSMsgType.ERROR: self._on_error,
        }

    @classmethod
    async def connect(cls,
                      channel: Channel,
                      url: str = BINANCE_US_WSS_URL,
                      *,
                      session: Optional[aiohttp.ClientSession] = None,
                      ) -> "WebSocketStream":
        """Open `<url>/ws/<topic>` and complete the protocol handshake."""
        target = url.rstrip("/") + "/ws/" + render(channel)
        owned = session is None
        if session is None:
            session = aiohttp.ClientSession()

        logger.info(f"WS connect: connecting to {target}")
        try:
            ws = await session.ws_connect(target, autoping=False, autoclose=False)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            if owned:
                await session.close()
            raise TransportError(f"websocket handshake failed for {target}: {e}") from e

        stream = cls(ws, session=session if owned else None, name=render(channel))
        try:
            await stream.start()
        except BaseException:
            with contextlib.suppress(Exception):
                await stream._release()
            raise
        return stream

    # ---- protocol ---------------------------------------------------------------
    @property
    def next_id(self) -> int:
        return self._id

    @property
    def closed(self) -> bool:
        return self.state is StreamState.CLOSED

    async def start(self) -> None:
        if self.state is not StreamState.CONNECTING:
            raise TransportError(f"stream {self.name} already started (state={self.state.value})")
        await self._send_control("SET_PROPERTY", ["combined", True])
        self.state = StreamState.OPEN
        logger.info(f"WS {self.name} open")

    async def subscribe(self, channels: Iterable[Channel]) -> None:
        self._require_open()
        await self._send_control("SUBSCRIBE", [render(c) for c in channels])

    def _require_open(self) -> None:
        if self.state is not StreamState.OPEN:
            raise TransportError(f"stream {self.name} is {self.state.value}")

    async def unsubscribe(self, channels: Iterable[Channel]) -> None:
        self._require_open()
        await self._send_control("UNSUBSCRIBE", [render(c) for c in channels])

    async def _send_control(self, method: str, params: list) -> None:
        if self.state is StreamState.CLOSING or self.state is StreamState.CLOSED:
            raise TransportError(f"stream {self.name} is {self.state.value}")
        message = {"method": method, "params": params, "id": self._id}
        try:
            text = _json_dumps_compact(message)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"cannot encode control message {method}: {e}") from e
        await self._write(self._ws.send_str, text)
        logger.debug(f"WS {self.name} {method} id={self._id} params={params}")
        self._id += 1

    async def _write(self, op: Callable[..., Awaitable[Any]], *args: Any) -> None:
        try:
            await op(*args)
        except (aiohttp.ClientError, ConnectionError) as e:
            self.state = StreamState.CLOSED
            raise TransportError(f"websocket write failed on {self.name}: {e}") from e

    # ---- reads ------------------------------------------------------------------
    async def text(self) -> Optional[str]:
        """Next event as text, None once the stream has ended without error."""
        if self.state is StreamState.CLOSED:
            return None
        try:
            msg = await self._ws.receive()
        except (aiohttp.ClientError, ConnectionError, asyncio.TimeoutError) as e:
            self.state = StreamState.CLOSED
            raise TransportError(f"websocket read failed on {self.name}: {e}") from e

        handler = self._handlers.get(msg.type)
        if handler is None:
            self.state = StreamState.CLOSED
            raise TransportError(f"unexpected websocket message type {msg.type!r}")
        return await handler(msg)

    async def json(self) -> Any:
        text = await self.text()
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise SerializationError(f"invalid json frame: {text[:256]}") from e

    def __aiter__(self) -> "WebSocketStream":
        return self

    async def __anext__(self) -> str:
        text = await self.text()
        if text is None:
            raise StopAsyncIteration
        return text

    # ---- frame handlers ---------------------------------------------------------
    async def _on_text(self, msg: aiohttp.WSMessage) -> str:
        return msg.data

    async def _on_binary(self, msg: aiohttp.WSMessage) -> str:
        return _utf8(msg.data)

    async def _on_ping(self, msg: aiohttp.WSMessage) -> str:
        payload = msg.data or b""
        await self._write(self._ws.pong, payload)
        return _json_dumps_compact({"ping": _utf8(payload)})

    async def _on_pong(self, msg: aiohttp.WSMessage) -> str:
        payload = msg.data or b""
        await self._write(self._ws.ping, payload)
        return _json_dumps_compact({"pong": _utf8(payload)})

    async def _on_close(self, msg: aiohttp.WSMessage) -> Optional[str]:
        self.state = StreamState.CLOSED
        with contextlib.suppress(Exception):
            await self._release()
        # a close frame without payload carries code 0
        if msg.data:
            logger.warning(f"WS {self.name} closed by peer: code={msg.data} reason={msg.extra}")
            raise ChannelClosed(msg.data, msg.extra)
        logger.warning(f"WS {self.name} closed by peer without close frame payload")
        raise ChannelClosed.no_frame()

    async def _on_eof(self, msg: aiohttp.WSMessage) -> Optional[str]:
        # only a caller-initiated close ends the stream gracefully
        closing = self.state is StreamState.CLOSING
        self.state = StreamState.CLOSED
        with contextlib.suppress(Exception):
            await self._release()
        if closing:
            logger.info(f"WS {self.name} ended")
            return None
        logger.warning(f"WS {self.name} connection lost without close frame")
        raise TransportError(f"websocket connection lost on {self.name} without close frame")

    async def _on_error(self, msg: aiohttp.WSMessage) -> Optional[str]:
        self.state = StreamState.CLOSED
        with contextlib.suppress(Exception):
            await self._release()
        exc = msg.data if isinstance(msg.data, BaseException) else None
        raise TransportError(f"websocket error on {self.name}: {msg.data}") from exc

    # ---- shutdown ---------------------------------------------------------------
    async def close(self, code: int = 1000, message: bytes = b"") -> None:
        """Send a close frame if the socket is still writable, then release it."""
        if self.state is StreamState.CLOSED:
            await self._release()
            return
        self.state = StreamState.CLOSING
        try:
            if not self._ws.closed:
                await self._ws.close(code=code, message=message)
        except (aiohttp.ClientError, ConnectionError) as e:
            raise TransportError(f"websocket close failed on {self.name}: {e}") from e
        finally:
            self.state = StreamState.CLOSED
            await self._release()
            logger.info(f"WS {self.name} close: websocket closed")

    async def _release(self) -> None:
        try:
            if not self._ws.closed:
                await self._ws.close()
        finally:
            if self._session is not None and not self._session.closed:
                await self._session.close()
            self._session = None

    async def __aenter__(self) -> "WebSocketStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
