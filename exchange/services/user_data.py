# exchange/services/user_data.py
from __future__ import annotations

from typing import Optional

import aiohttp

from exchange.capabilities import CloseStreamParams, KeepAliveStreamParams, StartStreamParams
from exchange.models import Credentials
from exchange.services.base import BaseClient
from exchange.services.endpoints import BINANCE_US_URL


class UserDataClient(BaseClient):
    """Listen-key lifecycle for the private user data stream. API key only."""
    auth = "key"

    @classmethod
    def connect(cls, api_key: str, url: str = BINANCE_US_URL, *,
                session: Optional[aiohttp.ClientSession] = None) -> "UserDataClient":
        return cls._connect(url, Credentials(api_key=api_key), session)

    def start_stream(self) -> StartStreamParams:
        return self._request(StartStreamParams, "POST", self.endpoints.user_data_stream)

    def keep_alive(self, listen_key: str) -> KeepAliveStreamParams:
        return self._request(KeepAliveStreamParams, "PUT", self.endpoints.user_data_stream, listen_key=listen_key)

    def close_stream(self, listen_key: str) -> CloseStreamParams:
        return self._request(CloseStreamParams, "DELETE", self.endpoints.user_data_stream, listen_key=listen_key)
