# exchange/capabilities.py
"""
Capability mixins and request kinds.

Each capability contributes the setter(s) for one optional field. A request
kind is a `ParamBuilder` plus the capabilities its endpoint accepts, so a
setter the endpoint does not take is simply not an attribute of the kind:
type checkers flag the call and attribute lookup fails at runtime.

Some setters couple fields, e.g. an iceberg quantity forces GTC and the
stop-loss/take-profit setters switch the order type together with the stop
price.
"""
from __future__ import annotations

from datetime import datetime
from typing import FrozenSet, Type, TypeVar, Union

from exchange.enums import OrderRespType, OrderType
from exchange import enums
from exchange.models import Number, Parameters
from infra.http_client import ParamBuilder
from utils.time import to_ms

Timestamp = Union[datetime, int]
B = TypeVar("B", bound="Capability")


class Capability:
    """Marker base; subclasses only ever reach `self.params`."""
    params: Parameters


def capabilities_of(kind: Type) -> FrozenSet[Type[Capability]]:
    return frozenset(
        c for c in kind.__mro__
        if isinstance(c, type) and issubclass(c, Capability)
        and c is not Capability and not issubclass(c, ParamBuilder)
    )


# ---- capabilities ---------------------------------------------------------------

class Symbol(Capability):
    def with_symbol(self: B, symbol: str) -> B:
        self.params.symbol = symbol
        return self


class Limit(Capability):
    def with_limit(self: B, limit: int) -> B:
        self.params.limit = limit
        return self


class FromId(Capability):
    def with_from_id(self: B, from_id: int) -> B:
        self.params.from_id = from_id
        return self


class StartTime(Capability):
    def with_start_time(self: B, start: Timestamp) -> B:
        self.params.start_time = to_ms(start)
        return self


class EndTime(Capability):
    def with_end_time(self: B, end: Timestamp) -> B:
        self.params.end_time = to_ms(end)
        return self


class RecvWindow(Capability):
    def with_recv_window(self: B, recv_window: int) -> B:
        self.params.recv_window = recv_window
        return self


class OrderId(Capability):
    def with_order_id(self: B, order_id: int) -> B:
        self.params.order_id = order_id
        return self


class NewClientOrderId(Capability):
    def with_new_client_order_id(self: B, client_order_id: str) -> B:
        self.params.new_client_order_id = client_order_id
        return self


class NewOrderRespType(Capability):
    def with_new_order_resp_type(self: B, resp_type: OrderRespType) -> B:
        self.params.new_order_resp_type = OrderRespType(resp_type)
        return self


class TimeInForce(Capability):
    def with_time_in_force(self: B, time_in_force: enums.TimeInForce) -> B:
        self.params.time_in_force = enums.TimeInForce(time_in_force)
        return self


class IcebergQty(Capability):
    def with_iceberg_qty(self: B, qty: Number) -> B:
        self.params.iceberg_qty = qty
        self.params.time_in_force = enums.TimeInForce.GTC
        return self


class StopLossLimit(Capability):
    def with_stop_loss(self: B, stop_price: Number) -> B:
        self.params.order_type = OrderType.STOP_LOSS_LIMIT
        self.params.stop_price = stop_price
        return self


class TakeProfitLimit(Capability):
    def with_take_profit(self: B, stop_price: Number) -> B:
        self.params.order_type = OrderType.TAKE_PROFIT_LIMIT
        self.params.stop_price = stop_price
        return self


class LimitMaker(Capability):
    def with_limit_maker(self: B) -> B:
        # LIMIT_MAKER orders take no timeInForce
        self.params.order_type = OrderType.LIMIT_MAKER
        self.params.time_in_force = None
        return self


class StopLoss(Capability):
    def with_stop_loss(self: B, stop_price: Number) -> B:
        self.params.order_type = OrderType.STOP_LOSS
        self.params.stop_price = stop_price
        return self


class TakeProfit(Capability):
    def with_take_profit(self: B, stop_price: Number) -> B:
        self.params.order_type = OrderType.TAKE_PROFIT
        self.params.stop_price = stop_price
        return self


class ListClientOrderId(Capability):
    def with_list_client_order_id(self: B, client_order_id: str) -> B:
        self.params.list_client_order_id = client_order_id
        return self


class LimitClientOrderId(Capability):
    def with_limit_client_order_id(self: B, client_order_id: str) -> B:
        self.params.limit_client_order_id = client_order_id
        return self


class StopClientOrderId(Capability):
    def with_stop_client_order_id(self: B, client_order_id: str) -> B:
        self.params.stop_client_order_id = client_order_id
        return self


class LimitIcebergQty(Capability):
    def with_limit_iceberg_qty(self: B, qty: Number) -> B:
        self.params.limit_iceberg_qty = qty
        return self


class StopIcebergQty(Capability):
    def with_stop_iceberg_qty(self: B, qty: Number) -> B:
        self.params.stop_iceberg_qty = qty
        self.params.stop_limit_time_in_force = enums.TimeInForce.GTC
        return self


class StopLimitPrice(Capability):
    def with_stop_limit_price(self: B, price: Number) -> B:
        # a stop-limit leg needs a time in force
        self.params.stop_limit_price = price
        if self.params.stop_limit_time_in_force is None:
            self.params.stop_limit_time_in_force = enums.TimeInForce.GTC
        return self


class StopLimitTimeInForce(Capability):
    def with_stop_limit_time_in_force(self: B, time_in_force: enums.TimeInForce) -> B:
        self.params.stop_limit_time_in_force = enums.TimeInForce(time_in_force)
        return self


class Asset(Capability):
    def with_asset(self: B, asset: str) -> B:
        self.params.asset = asset
        return self


class Status(Capability):
    def with_status(self: B, status: Union[bool, int]) -> B:
        self.params.status = status
        return self


class AddressTag(Capability):
    def with_address_tag(self: B, tag: str) -> B:
        self.params.address_tag = tag
        return self


class Name(Capability):
    def with_name(self: B, name: str) -> B:
        self.params.name = name
        return self


class Email(Capability):
    def with_email(self: B, email: str) -> B:
        self.params.email = email
        return self


class Page(Capability):
    def with_page(self: B, page: int) -> B:
        self.params.page = page
        return self


# ---- general --------------------------------------------------------------------

class PingParams(ParamBuilder):
    pass


class TimeParams(ParamBuilder):
    pass


class ExchangeInfoParams(ParamBuilder):
    pass


# ---- market data ----------------------------------------------------------------

class OrderBookParams(Limit, ParamBuilder):
    pass


class TradesParams(Limit, ParamBuilder):
    pass


class HistoricalTradesParams(FromId, Limit, ParamBuilder):
    pass


class AggTradesParams(FromId, StartTime, EndTime, Limit, ParamBuilder):
    pass


class KlinesParams(StartTime, EndTime, Limit, ParamBuilder):
    pass


class AveragePriceParams(ParamBuilder):
    pass


class TwentyfourHourTickerPriceParams(Symbol, ParamBuilder):
    pass


class TickerPriceParams(Symbol, ParamBuilder):
    pass


class OrderBookTickerParams(Symbol, ParamBuilder):
    pass


# ---- account --------------------------------------------------------------------

class LimitOrderParams(TimeInForce, IcebergQty, StopLossLimit, TakeProfitLimit, LimitMaker,
                       NewClientOrderId, NewOrderRespType, RecvWindow, ParamBuilder):
    pass


class MarketOrderParams(StopLoss, TakeProfit, NewClientOrderId, NewOrderRespType, RecvWindow, ParamBuilder):
    pass


class OrderStatusParams(RecvWindow, ParamBuilder):
    pass


class CancelOrderParams(NewClientOrderId, RecvWindow, ParamBuilder):
    pass


class OpenOrderParams(Symbol, RecvWindow, ParamBuilder):
    pass


class AllOrdersParams(OrderId, StartTime, EndTime, Limit, RecvWindow, ParamBuilder):
    pass


class OcoParams(ListClientOrderId, LimitClientOrderId, LimitIcebergQty, StopClientOrderId, StopLimitPrice,
                StopIcebergQty, StopLimitTimeInForce, NewOrderRespType, RecvWindow, ParamBuilder):
    pass


class CancelOcoParams(NewClientOrderId, RecvWindow, ParamBuilder):
    pass


class OcoStatusParams(RecvWindow, ParamBuilder):
    pass


class AllOcoParams(FromId, StartTime, EndTime, Limit, RecvWindow, ParamBuilder):
    pass


class OpenOcoParams(RecvWindow, ParamBuilder):
    pass


class AccountParams(RecvWindow, ParamBuilder):
    pass


class AccountTradesParams(StartTime, EndTime, FromId, Limit, RecvWindow, ParamBuilder):
    pass


# ---- user data stream -----------------------------------------------------------

class StartStreamParams(ParamBuilder):
    pass


class KeepAliveStreamParams(ParamBuilder):
    pass


class CloseStreamParams(ParamBuilder):
    pass


# ---- withdrawals & sub accounts -------------------------------------------------

class WithdrawParams(AddressTag, Name, RecvWindow, ParamBuilder):
    pass


class DepositHistoryParams(Asset, Status, StartTime, EndTime, RecvWindow, ParamBuilder):
    pass


class WithdrawHistoryParams(Asset, Status, StartTime, EndTime, RecvWindow, ParamBuilder):
    pass


class DepositAddressParams(Status, RecvWindow, ParamBuilder):
    pass


class AccountStatusParams(RecvWindow, ParamBuilder):
    pass


class SystemStatusParams(ParamBuilder):
    pass


class ApiStatusParams(RecvWindow, ParamBuilder):
    pass


class DustlogParams(RecvWindow, ParamBuilder):
    pass


class TradeFeeParams(Symbol, RecvWindow, ParamBuilder):
    pass


class AssetDetailParams(RecvWindow, ParamBuilder):
    pass


class SubAccountParams(Email, Status, Page, Limit, RecvWindow, ParamBuilder):
    pass


class TransferHistoryParams(StartTime, EndTime, Page, Limit, RecvWindow, ParamBuilder):
    pass


class SubAccountTransferParams(RecvWindow, ParamBuilder):
    pass


class SubAccountAssetsParams(Symbol, RecvWindow, ParamBuilder):
    pass


class DustTransferParams(RecvWindow, ParamBuilder):
    pass


class AssetDividendParams(Asset, StartTime, EndTime, RecvWindow, ParamBuilder):
    pass
