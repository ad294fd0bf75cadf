# infra/channels.py
"""
Exchange streams. Every channel renders to one topic string, which is both
the subscription token and the `stream` field of combined-stream frames, so
a channel compares equal to its topic:

    if AggTrade("BNBUSDT") == frame["stream"]: ...
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from exchange.enums import Interval, Level, Speed


@dataclass(frozen=True, eq=False)
class Channel:

    @property
    def topic(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.topic

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Channel):
            return self.topic == other.topic
        if isinstance(other, str):
            return self.topic == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.topic)


def render(channel: Channel) -> str:
    return channel.topic


@dataclass(frozen=True, eq=False)
class AggTrade(Channel):
    symbol: str

    @property
    def topic(self) -> str:
        return f"{self.symbol.lower()}@aggTrade"


@dataclass(frozen=True, eq=False)
class Trade(Channel):
    symbol: str

    @property
    def topic(self) -> str:
        return f"{self.symbol.lower()}@trade"


@dataclass(frozen=True, eq=False)
class Kline(Channel):
    symbol: str
    interval: Interval

    @property
    def topic(self) -> str:
        return f"{self.symbol.lower()}@kline_{Interval(self.interval).value}"


@dataclass(frozen=True, eq=False)
class MiniTicker(Channel):
    symbol: str

    @property
    def topic(self) -> str:
        return f"{self.symbol.lower()}@miniTicker"


@dataclass(frozen=True, eq=False)
class AllMiniTickers(Channel):

    @property
    def topic(self) -> str:
        return "!miniTicker@arr"


@dataclass(frozen=True, eq=False)
class Ticker(Channel):
    symbol: str

    @property
    def topic(self) -> str:
        return f"{self.symbol.lower()}@ticker"


@dataclass(frozen=True, eq=False)
class AllTickers(Channel):

    @property
    def topic(self) -> str:
        return "!ticker@arr"


@dataclass(frozen=True, eq=False)
class BookTicker(Channel):
    symbol: str

    @property
    def topic(self) -> str:
        return f"{self.symbol.lower()}@bookTicker"


@dataclass(frozen=True, eq=False)
class AllBookTickers(Channel):

    @property
    def topic(self) -> str:
        return "!bookTicker"


@dataclass(frozen=True, eq=False)
class PartialDepth(Channel):
    symbol: str
    level: Level
    speed: Speed

    @property
    def topic(self) -> str:
        return f"{self.symbol.lower()}@depth{Level(self.level).value}@{Speed(self.speed).value}"


@dataclass(frozen=True, eq=False)
class Depth(Channel):
    symbol: str
    speed: Speed

    @property
    def topic(self) -> str:
        return f"{self.symbol.lower()}@depth@{Speed(self.speed).value}"


@dataclass(frozen=True, eq=False)
class UserData(Channel):
    """Private account stream, addressed by listen key instead of symbol."""
    listen_key: str

    @property
    def topic(self) -> str:
        return self.listen_key
