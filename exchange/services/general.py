# exchange/services/general.py
from __future__ import annotations

from typing import Optional

import aiohttp

from exchange.capabilities import ExchangeInfoParams, PingParams, TimeParams
from exchange.services.base import BaseClient
from exchange.services.endpoints import BINANCE_US_URL


class GeneralClient(BaseClient):
    """Connectivity, server time and exchange rules. No credentials."""
    auth = "none"

    @classmethod
    def connect(cls, url: str = BINANCE_US_URL, *, session: Optional[aiohttp.ClientSession] = None) -> "GeneralClient":
        return cls._connect(url, None, session)

    def ping(self) -> PingParams:
        return self._request(PingParams, "GET", self.endpoints.ping)

    def get_server_time(self) -> TimeParams:
        return self._request(TimeParams, "GET", self.endpoints.time)

    def get_exchange_info(self) -> ExchangeInfoParams:
        return self._request(ExchangeInfoParams, "GET", self.endpoints.exchange_info)
