# infra/__init__.py
from __future__ import annotations

from exchange.errors import BinanceError
from infra.channels import (
    AggTrade,
    AllBookTickers,
    AllMiniTickers,
    AllTickers,
    BookTicker,
    Channel,
    Depth,
    Kline,
    MiniTicker,
    PartialDepth,
    Ticker,
    Trade,
    UserData,
    render,
)
from infra.http_client import HttpClient, ParamBuilder, PreparedRequest, Response, classify
from infra.ws_client import StreamState, WebSocketStream

__all__ = [
    "HttpClient", "ParamBuilder", "PreparedRequest", "Response", "classify", "http_healthcheck",
    "WebSocketStream", "StreamState",
    "Channel", "render", "AggTrade", "Trade", "Kline", "MiniTicker", "AllMiniTickers", "Ticker",
    "AllTickers", "BookTicker", "AllBookTickers", "PartialDepth", "Depth", "UserData",
]


# ========== health probe (startup / readiness) ==========
async def http_healthcheck(http: HttpClient, path: str = "/api/v3/ping") -> bool:
    try:
        resp = await http.request("GET", path)
        return resp.ok
    except BinanceError:
        return False
