# examples/run_market_data.py
import asyncio

from exchange.enums import Interval, Side
from exchange.services.account import AccountClient
from exchange.services.market import MarketDataClient
from infra import http_healthcheck
from utils import logger, setup_logger, load_cfg


async def main():
    setup_logger("INFO")
    cfg = load_cfg()

    async with MarketDataClient.from_cfg(cfg) as market:
        if not await http_healthcheck(market.http):
            logger.error("exchange unreachable")
            return
        book = await market.get_order_book("BNBUSDT").with_limit(5).json()
        logger.info(f"top bid {book['bids'][0]} top ask {book['asks'][0]}")

        bars = await market.get_candlestick_bars("BNBUSDT", Interval.ONE_HOUR).with_limit(3).json()
        for bar in bars:
            logger.info(f"open={bar[1]} close={bar[4]}")

    if not cfg["binance"].get("secret_key"):
        return

    async with AccountClient.from_cfg(cfg) as account:
        # validated against the test endpoint only, nothing is placed
        resp = await account.place_limit_order("BNBUSDT", Side.BUY, 30.5, 1.0, execute=False) \
            .with_recv_window(5000).response()
        logger.info(f"test order -> {resp.status} {resp.text()}")


if __name__ == "__main__":
    asyncio.run(main())
