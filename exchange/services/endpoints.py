# exchange/services/endpoints.py
from dataclasses import dataclass

BINANCE_US_URL = "https://api.binance.us"
BINANCE_US_WSS_URL = "wss://stream.binance.us:9443"


@dataclass(frozen=True)
class Endpoints:
    rest_base: str = BINANCE_US_URL
    ws_base: str = BINANCE_US_WSS_URL

    # general
    ping: str = "/api/v3/ping"
    time: str = "/api/v3/time"
    exchange_info: str = "/api/v3/exchangeInfo"
    # market data
    depth: str = "/api/v3/depth"
    trades: str = "/api/v3/trades"
    historical_trades: str = "/api/v3/historicalTrades"
    agg_trades: str = "/api/v3/aggTrades"
    klines: str = "/api/v3/klines"
    avg_price: str = "/api/v3/avgPrice"
    ticker_24hr: str = "/api/v3/ticker/24hr"
    ticker_price: str = "/api/v3/ticker/price"
    ticker_book: str = "/api/v3/ticker/bookTicker"
    # account
    order: str = "/api/v3/order"
    order_test: str = "/api/v3/order/test"
    open_orders: str = "/api/v3/openOrders"
    all_orders: str = "/api/v3/allOrders"
    order_oco: str = "/api/v3/order/oco"
    order_list: str = "/api/v3/orderList"
    all_order_list: str = "/api/v3/allOrderList"
    open_order_list: str = "/api/v3/openOrderList"
    account: str = "/api/v3/account"
    my_trades: str = "/api/v3/myTrades"
    # user data stream
    user_data_stream: str = "/api/v3/userDataStream"
    # withdrawals & sub accounts
    withdraw: str = "/wapi/v3/withdraw.html"
    deposit_history: str = "/wapi/v3/depositHistory.html"
    withdraw_history: str = "/wapi/v3/withdrawHistory.html"
    deposit_address: str = "/wapi/v3/depositAddress.html"
    account_status: str = "/wapi/v3/accountStatus.html"
    system_status: str = "/wapi/v3/systemStatus.html"
    api_trading_status: str = "/wapi/v3/apiTradingStatus.html"
    dustlog: str = "/wapi/v3/userAssetDribbletLog.html"
    trade_fee: str = "/wapi/v3/tradeFee.html"
    asset_detail: str = "/wapi/v3/assetDetail.html"
    sub_account_list: str = "/wapi/v3/sub-account/list.html"
    sub_account_transfer_history: str = "/wapi/v3/sub-account/transfer/history.html"
    sub_account_transfer: str = "/wapi/v3/sub-account/transfer.html"
    sub_account_assets: str = "/wapi/v3/sub-account/assets.html"
    dust_transfer: str = "/sapi/v1/asset/dust"
    asset_dividend: str = "/sapi/v1/asset/assetDividend"


DEFAULT_ENDPOINTS = Endpoints()


def make_endpoints_from_cfg(cfg: dict) -> Endpoints:
    try:
        binance_cfg = cfg["binance"]
        rest_base = str(binance_cfg["rest_base"]).rstrip("/")
        ws_base = str(binance_cfg["ws_base"]).rstrip("/")
    except KeyError as e:
        raise ValueError(f"Invalid cfg missing key: {e}") from e

    return Endpoints(
        rest_base=rest_base,
        ws_base=ws_base,
    )
