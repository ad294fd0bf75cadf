# examples/run_stream.py
import asyncio

from exchange.enums import Level, Speed
from exchange.errors import ChannelClosed
from infra import AggTrade, PartialDepth, Ticker, WebSocketStream
from utils import logger, setup_logger, load_cfg


async def main(max_events: int = 20):
    setup_logger("INFO")
    cfg = load_cfg()
    url = cfg["binance"]["ws_base"]

    async with await WebSocketStream.connect(Ticker("BNBUSDT"), url) as stream:
        await stream.subscribe([AggTrade("BNBUSDT"), PartialDepth("BNBUSDT", Level.FIVE, Speed.HUNDRED_MILLIS)])
        seen = 0
        try:
            async for text in stream:
                logger.info(text[:200])
                seen += 1
                if seen >= max_events:
                    break
        except ChannelClosed as e:
            logger.warning(f"stream closed by server: {e}")


if __name__ == "__main__":
    asyncio.run(main())
