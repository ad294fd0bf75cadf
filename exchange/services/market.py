# exchange/services/market.py
from __future__ import annotations

from typing import Optional

import aiohttp

from exchange.capabilities import (
    AggTradesParams,
    AveragePriceParams,
    HistoricalTradesParams,
    KlinesParams,
    OrderBookParams,
    OrderBookTickerParams,
    TickerPriceParams,
    TradesParams,
    TwentyfourHourTickerPriceParams,
)
from exchange.enums import Interval
from exchange.models import Credentials
from exchange.services.base import BaseClient
from exchange.services.endpoints import BINANCE_US_URL


class MarketDataClient(BaseClient):
    """
    Market data. Sends the API key header (needed by historical trades) but
    never signs.

    Usage:
        async with MarketDataClient.connect("<api-key>") as client:
            book = await client.get_order_book("BNBUSDT").with_limit(5).json()
    """
    auth = "key"

    @classmethod
    def connect(cls,
                api_key: Optional[str] = None,
                url: str = BINANCE_US_URL,
                *,
                session: Optional[aiohttp.ClientSession] = None,
                ) -> "MarketDataClient":
        return cls._connect(url, Credentials(api_key=api_key), session)

    def get_order_book(self, symbol: str) -> OrderBookParams:
        """Order book; `with_limit` default 100, max 5000."""
        return self._request(OrderBookParams, "GET", self.endpoints.depth, symbol=symbol)

    def get_trades(self, symbol: str) -> TradesParams:
        """Recent trades (up to last 500)."""
        return self._request(TradesParams, "GET", self.endpoints.trades, symbol=symbol)

    def get_historical_trades(self, symbol: str) -> HistoricalTradesParams:
        return self._request(HistoricalTradesParams, "GET", self.endpoints.historical_trades, symbol=symbol)

    def get_aggregate_trades(self, symbol: str) -> AggTradesParams:
        """
        Compressed trades: fills at the same time, from the same order, at the
        same price are aggregated.
        """
        return self._request(AggTradesParams, "GET", self.endpoints.agg_trades, symbol=symbol)

    def get_candlestick_bars(self, symbol: str, interval: Interval) -> KlinesParams:
        return self._request(KlinesParams, "GET", self.endpoints.klines, symbol=symbol, interval=Interval(interval))

    def get_average_price(self, symbol: str) -> AveragePriceParams:
        return self._request(AveragePriceParams, "GET", self.endpoints.avg_price, symbol=symbol)

    def get_24hr_ticker_price(self) -> TwentyfourHourTickerPriceParams:
        """24h rolling stats; all symbols unless `with_symbol` is set."""
        return self._request(TwentyfourHourTickerPriceParams, "GET", self.endpoints.ticker_24hr)

    def get_price_ticker(self) -> TickerPriceParams:
        return self._request(TickerPriceParams, "GET", self.endpoints.ticker_price)

    def get_order_book_ticker(self) -> OrderBookTickerParams:
        return self._request(OrderBookTickerParams, "GET", self.endpoints.ticker_book)
