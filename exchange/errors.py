# exchange/errors.py
from typing import Optional


class BinanceError(Exception):
    """Base client error."""
    def __init__(self, msg: str = ""):
        super().__init__(msg)
        self.msg = msg

    def __str__(self):
        return self.msg or self.__class__.__name__


class TransportError(BinanceError):
    """Connection, TLS or socket failure."""


class SerializationError(BinanceError):
    """Outbound body could not be encoded or an inbound payload could not be decoded."""


class SigningError(BinanceError, KeyError):
    """Secret key cannot be used as HMAC key material."""


class RequestBuildError(BinanceError):
    """Request cannot be assembled (unsupported verb, mutation without credentials)."""


class RequestRejected(BinanceError):
    """4xx response. Carries the status code, reason phrase and raw body."""

    def __init__(self, code: int, reason: str, message: str):
        super().__init__(message)
        self.code = code
        self.reason = reason
        self.message = message

    def __str__(self):
        return self.message or f"HTTP {self.code} {self.reason}"

    def __repr__(self):
        return f"RequestRejected(code={self.code}, reason={self.reason!r})"


ABNORMAL_CLOSURE = 1006


class ChannelClosed(BinanceError):
    """Close frame received on a stream."""

    def __init__(self, code: int, reason: Optional[str] = ""):
        self.code = int(code)
        self.reason = reason or ""
        super().__init__(f"websocket closed: code={self.code} reason={self.reason}")

    @classmethod
    def no_frame(cls) -> "ChannelClosed":
        return cls(ABNORMAL_CLOSURE, "Close message with no frame received")
