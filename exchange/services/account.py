# exchange/services/account.py
from __future__ import annotations

from typing import Optional

import aiohttp

from exchange.capabilities import (
    AccountParams,
    AccountTradesParams,
    AllOcoParams,
    AllOrdersParams,
    CancelOcoParams,
    CancelOrderParams,
    LimitOrderParams,
    MarketOrderParams,
    OcoParams,
    OcoStatusParams,
    OpenOcoParams,
    OpenOrderParams,
    OrderStatusParams,
)
from exchange.enums import OrderType, Side, TimeInForce
from exchange.models import Credentials, Number, OrderRef, split_order_ref
from exchange.services.base import BaseClient
from exchange.services.endpoints import BINANCE_US_URL
from exchange.services.general import GeneralClient
from exchange.services.market import MarketDataClient


class AccountClient(BaseClient):
    """
    Orders, OCO order lists, balances and fills. Every request is signed.

    Order references are either the exchange's integer id or the client id
    string the order was placed with.
    """
    auth = "signed"

    @classmethod
    def connect(cls,
                api_key: str,
                secret_key: str,
                url: str = BINANCE_US_URL,
                *,
                session: Optional[aiohttp.ClientSession] = None,
                ) -> "AccountClient":
        return cls._connect(url, Credentials(api_key=api_key, secret_key=secret_key), session)

    def _order_path(self, execute: bool) -> str:
        return self.endpoints.order if execute else self.endpoints.order_test

    def place_limit_order(self, symbol: str, side: Side, price: Number, quantity: Number,
                          execute: bool = True) -> LimitOrderParams:
        """
        Limit order, GTC unless changed. `execute=False` only validates it
        against the test endpoint.
        """
        return self._request(
            LimitOrderParams, "POST", self._order_path(execute),
            symbol=symbol,
            side=Side(side),
            order_type=OrderType.LIMIT,
            price=price,
            quantity=quantity,
            time_in_force=TimeInForce.GTC,
        )

    def place_market_order(self, symbol: str, side: Side, quantity: Number,
                           execute: bool = True) -> MarketOrderParams:
        return self._request(
            MarketOrderParams, "POST", self._order_path(execute),
            symbol=symbol,
            side=Side(side),
            order_type=OrderType.MARKET,
            quantity=quantity,
        )

    def get_order(self, symbol: str, ref: OrderRef) -> OrderStatusParams:
        order_id, client_id = split_order_ref(ref)
        return self._request(
            OrderStatusParams, "GET", self.endpoints.order,
            symbol=symbol, order_id=order_id, orig_client_order_id=client_id,
        )

    def cancel_order(self, symbol: str, ref: OrderRef) -> CancelOrderParams:
        order_id, client_id = split_order_ref(ref)
        return self._request(
            CancelOrderParams, "DELETE", self.endpoints.order,
            symbol=symbol, order_id=order_id, orig_client_order_id=client_id,
        )

    def get_open_orders(self) -> OpenOrderParams:
        return self._request(OpenOrderParams, "GET", self.endpoints.open_orders)

    def get_all_orders(self, symbol: str) -> AllOrdersParams:
        return self._request(AllOrdersParams, "GET", self.endpoints.all_orders, symbol=symbol)

    def place_oco_order(self, symbol: str, side: Side, price: Number, stop_price: Number,
                        quantity: Number) -> OcoParams:
        """One-cancels-the-other: a limit leg at `price` and a stop leg triggered at `stop_price`."""
        return self._request(
            OcoParams, "POST", self.endpoints.order_oco,
            symbol=symbol,
            side=Side(side),
            price=price,
            stop_price=stop_price,
            quantity=quantity,
        )

    def cancel_oco(self, symbol: str, ref: OrderRef) -> CancelOcoParams:
        list_id, client_id = split_order_ref(ref)
        return self._request(
            CancelOcoParams, "DELETE", self.endpoints.order_list,
            symbol=symbol, order_list_id=list_id, list_client_order_id=client_id,
        )

    def get_oco(self, ref: OrderRef) -> OcoStatusParams:
        list_id, client_id = split_order_ref(ref)
        return self._request(
            OcoStatusParams, "GET", self.endpoints.order_list,
            order_list_id=list_id, orig_client_order_id=client_id,
        )

    def get_all_oco_orders(self) -> AllOcoParams:
        return self._request(AllOcoParams, "GET", self.endpoints.all_order_list)

    def get_open_oco_orders(self) -> OpenOcoParams:
        return self._request(OpenOcoParams, "GET", self.endpoints.open_order_list)

    def get_account(self) -> AccountParams:
        return self._request(AccountParams, "GET", self.endpoints.account)

    def get_account_trades(self, symbol: str) -> AccountTradesParams:
        return self._request(AccountTradesParams, "GET", self.endpoints.my_trades, symbol=symbol)

    def market_client(self) -> MarketDataClient:
        return self._sibling(MarketDataClient)

    def general_client(self) -> GeneralClient:
        return self._sibling(GeneralClient)
