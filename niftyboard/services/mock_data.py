# niftyboard/services/mock_data.py
"""
Synthetic market data, the last step of every fallback chain.

Every generator seeds its own `random.Random` from the symbol, so a symbol
always gets the same numbers and a page refresh does not make prices jump.
"""

import math
import random
from datetime import date, timedelta
from typing import List, Optional

import pandas as pd

from niftyboard.models.stock_models import HistoricalDataPoint, StockData, Timeframe
from niftyboard.services.parser import format_symbol_as_name, strip_exchange
from niftyboard.services.symbols import NIFTY50_CONSTITUENTS, nifty50_name

HISTORY_DAYS = {
    Timeframe.daily: 90,
    Timeframe.weekly: 365,
    Timeframe.monthly: 730,
}

_PERIOD_FREQ = {
    Timeframe.weekly: "W",
    Timeframe.monthly: "M",
}


def dummy_stock_details(symbol: str) -> StockData:
    """
    Stable quote derived from the character codes of the symbol.
    """
    pure = strip_exchange(symbol)
    seed = sum(ord(ch) for ch in pure) / 1000

    price = 1000 + seed * 2000
    change = seed * 20 if seed > 0.5 else -(seed * 20)

    return StockData(
        symbol=symbol,
        name=nifty50_name(pure) or pure,
        price=price,
        change=change,
        change_percent=(change / price) * 100,
        high=price + seed * 50,
        low=price - seed * 50,
        volume=math.floor(500000 + seed * 5000000),
        previous_close=price - change,
        market_cap=math.floor(500 + seed * 10000),
    )


def random_quote(symbol: str, name: Optional[str] = None) -> StockData:
    rng = random.Random(f"quote:{symbol}")
    price = round(1000 + rng.random() * 2000, 2)
    change = round(rng.random() * 40 - 20, 2)
    previous_close = round(price - change, 2)

    return StockData(
        symbol=symbol,
        name=name or format_symbol_as_name(symbol),
        price=price,
        change=change,
        change_percent=round(change / previous_close * 100, 2),
        high=round(max(price, previous_close) + rng.random() * 50, 2),
        low=round(min(price, previous_close) - rng.random() * 50, 2),
        volume=math.floor(500000 + rng.random() * 5000000),
        previous_close=previous_close,
        market_cap=round(1000 + rng.random() * 10000, 2),
    )


def dummy_nifty50_data() -> List[StockData]:
    stocks = []
    for info in NIFTY50_CONSTITUENTS:
        rng = random.Random(f"nifty50:{info['symbol']}")
        price = 1000 + rng.random() * 2000
        change = rng.random() * 20 if rng.random() > 0.5 else -rng.random() * 20
        stocks.append(StockData(
            symbol=f"NSE:{info['symbol']}",
            name=info["name"],
            price=round(price, 2),
            change=round(change, 2),
            change_percent=round(change / price * 100, 2),
            high=round(price + rng.random() * 50, 2),
            low=round(price - rng.random() * 50, 2),
            volume=math.floor(500000 + rng.random() * 5000000),
            previous_close=round(price - change, 2),
            market_cap=math.floor(500 + rng.random() * 10000),
        ))
    return stocks


def dummy_historical_data(symbol: str, days: int = 90, end: Optional[date] = None) -> List[HistoricalDataPoint]:
    """Random walk with a slight upward bias, one bar per calendar day ending at `end`."""
    rng = random.Random(f"history:{strip_exchange(symbol)}")
    end = end or date.today()
    current = 1000 + rng.random() * 2000

    data = []
    for i in range(days, -1, -1):
        current += current * ((rng.random() - 0.48) * 2) / 100
        open_ = current - rng.random() * 10
        close = current
        data.append(HistoricalDataPoint(
            date=(end - timedelta(days=i)).isoformat(),
            open=round(open_, 2),
            high=round(max(open_, close) + rng.random() * 20, 2),
            low=round(min(open_, close) - rng.random() * 20, 2),
            close=round(close, 2),
            volume=math.floor(100000 + rng.random() * 1000000),
        ))
    return data


def wave_historical_data(symbol: str, days: int = 100, end: Optional[date] = None) -> List[HistoricalDataPoint]:
    """Sinusoidal trend around a per-symbol base price."""
    rng = random.Random(f"wave:{symbol}")
    end = end or date.today()
    padded = symbol.ljust(2)
    base_price = (ord(padded[0]) + ord(padded[1])) % 1000 + 500

    data = []
    for i in range(days, -1, -1):
        close = base_price + math.sin(i / 10) * 50 + (rng.random() * 20 - 10)
        open_ = close - (rng.random() * 20 - 10)
        data.append(HistoricalDataPoint(
            date=(end - timedelta(days=i)).isoformat(),
            open=round(open_, 2),
            high=round(max(open_, close) + rng.random() * 10, 2),
            low=round(min(open_, close) - rng.random() * 10, 2),
            close=round(close, 2),
            volume=math.floor(100000 + rng.random() * 1000000),
        ))
    return data


def resample_candles(candles: List[HistoricalDataPoint], timeframe: Timeframe) -> List[HistoricalDataPoint]:
    """
    Aggregate daily bars into weekly or monthly ones. Each bar is dated with
    the first trading day that falls into its period.
    """
    if timeframe == Timeframe.daily or not candles:
        return list(candles)

    df = pd.DataFrame([c.model_dump() for c in candles])
    df["date"] = pd.to_datetime(df["date"])
    df = df.sort_values("date")

    periods = df["date"].dt.to_period(_PERIOD_FREQ[timeframe])
    grouped = df.groupby(periods, sort=True).agg(
        date=("date", "first"),
        open=("open", "first"),
        high=("high", "max"),
        low=("low", "min"),
        close=("close", "last"),
        volume=("volume", "sum"),
    )

    return [
        HistoricalDataPoint(
            date=row.date.strftime("%Y-%m-%d"),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=int(row.volume),
        )
        for row in grouped.itertuples(index=False)
    ]


def synthetic_history(symbol: str, timeframe: Timeframe = Timeframe.daily) -> List[HistoricalDataPoint]:
    daily = dummy_historical_data(symbol, days=HISTORY_DAYS[timeframe])
    return resample_candles(daily, timeframe)
