# tests/test_channels.py
import pytest

from exchange.enums import Interval, Level, Speed
from infra.channels import (
    AggTrade,
    AllBookTickers,
    AllMiniTickers,
    AllTickers,
    BookTicker,
    Depth,
    Kline,
    MiniTicker,
    PartialDepth,
    Ticker,
    Trade,
    UserData,
    render,
)


@pytest.mark.parametrize("channel, topic", [
    (AggTrade("BNBUSDT"), "bnbusdt@aggTrade"),
    (Trade("BNBUSDT"), "bnbusdt@trade"),
    (Kline("BNBUSDT", Interval.ONE_MINUTE), "bnbusdt@kline_1m"),
    (Kline("BTCUSDT", Interval.ONE_MONTH), "btcusdt@kline_1M"),
    (MiniTicker("BNBUSDT"), "bnbusdt@miniTicker"),
    (AllMiniTickers(), "!miniTicker@arr"),
    (Ticker("BNBUSDT"), "bnbusdt@ticker"),
    (AllTickers(), "!ticker@arr"),
    (BookTicker("BNBUSDT"), "bnbusdt@bookTicker"),
    (AllBookTickers(), "!bookTicker"),
    (PartialDepth("ETHUSDT", Level.FIVE, Speed.HUNDRED_MILLIS), "ethusdt@depth5@100ms"),
    (PartialDepth("ETHUSDT", Level.TWENTY, Speed.THOUSAND_MILLIS), "ethusdt@depth20@1000ms"),
    (Depth("ETHUSDT", Speed.THOUSAND_MILLIS), "ethusdt@depth@1000ms"),
    (UserData("pqia91ma19a5s61cv6a81va65sdf19v8a65a1a5s61cv6a81va65sdf19v8a65a1"),
     "pqia91ma19a5s61cv6a81va65sdf19v8a65a1a5s61cv6a81va65sdf19v8a65a1"),
])
def test_render(channel, topic):
    assert render(channel) == topic
    assert str(channel) == topic


def test_channel_compares_with_topic_string():
    frame = {"stream": "bnbusdt@aggTrade", "data": {}}
    assert AggTrade("BNBUSDT") == frame["stream"]
    assert AggTrade("bnbusdt") == AggTrade("BNBUSDT")
    assert AggTrade("BNBUSDT") != Trade("BNBUSDT")
    assert AggTrade("BNBUSDT") != 42


def test_channels_are_hashable_by_topic():
    seen = {Ticker("BNBUSDT"), Ticker("bnbusdt"), AllTickers()}
    assert len(seen) == 2


def test_enum_values_are_accepted_as_plain_strings():
    assert render(Kline("BNBUSDT", "5m")) == "bnbusdt@kline_5m"
    with pytest.raises(ValueError):
        render(Kline("BNBUSDT", "7m"))
