import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import pandas as pd
import yfinance as yf

from niftyboard import config
from niftyboard.models.stock_models import HistoricalDataPoint, StockData, Timeframe
from niftyboard.services import mock_data
from niftyboard.services.http_client import HttpClient, ProviderError, http_client
from niftyboard.services.parser import or_default, parse_float, parse_int, strip_exchange, yahoo_symbol
from niftyboard.services.symbols import NIFTY50_CONSTITUENTS, NIFTY50_INDEX, nifty50_name

logger = logging.getLogger(__name__)

CRORE = 10_000_000

YAHOO_INTERVALS = {
    Timeframe.daily: "1d",
    Timeframe.weekly: "1wk",
    Timeframe.monthly: "1mo",
}


class IndianStockProvider:
    """NSE / MoneyControl / Yahoo Finance quotes for Indian equities, with synthetic fallbacks."""

    NSE_HOME = "https://www.nseindia.com"
    NSE_INDEX_URL = "https://www.nseindia.com/api/equity-stockIndices"
    MONEYCONTROL_URL = "https://priceapi.moneycontrol.com/pricefeed/nse/equitycash/{symbol}"
    YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"

    HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
        ),
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "en-US,en;q=0.9",
        "Referer": "https://www.nseindia.com/",
    }

    def __init__(self, http: Optional[HttpClient] = None, moneycontrol_limit: Optional[int] = None):
        self.name = "Indian Stock Provider"
        self.http = http or http_client
        self.moneycontrol_limit = moneycontrol_limit or config.MONEYCONTROL_FETCH_LIMIT

    # ---------------- NSE INDEX ----------------
    def _map_nse_row(self, item: Dict[str, Any]) -> StockData:
        sym = item["symbol"]
        meta = item.get("meta") or {}
        return StockData(
            symbol=f"NSE:{sym}",
            name=meta.get("companyName") or sym,
            price=parse_float(item.get("lastPrice"), 0.0),
            change=parse_float(item.get("change"), 0.0),
            change_percent=parse_float(item.get("pChange"), 0.0),
            high=parse_float(item.get("dayHigh"), 0.0),
            low=parse_float(item.get("dayLow"), 0.0),
            volume=parse_int(item.get("totalTradedVolume"), 0),
            previous_close=parse_float(item.get("previousClose"), 0.0),
            market_cap=parse_float(item.get("marketCap"), 0.0) / CRORE,
        )

    async def _fetch_from_nse(self, index: str = NIFTY50_INDEX) -> List[StockData]:
        try:
            await self.http.warm_up(self.NSE_HOME, headers=self.HEADERS)
        except ProviderError as e:
            # The API call below may still succeed with an existing cookie jar
            logger.debug("[IndianProvider] NSE warm-up failed: %s", e)

        payload = await self.http.get_json(self.NSE_INDEX_URL, params={"index": index}, headers=self.HEADERS)
        rows = payload.get("data") if isinstance(payload, dict) else None
        if not rows:
            raise ProviderError("Invalid response from NSE API")

        # The first row summarises the index itself and has no company metadata
        stocks = [
            self._map_nse_row(item)
            for item in rows
            if item.get("symbol") and item.get("symbol") != index and item.get("meta")
        ]
        if not stocks:
            raise ProviderError("NSE API returned no constituents")
        return stocks

    # ---------------- MONEYCONTROL ----------------
    async def _fetch_moneycontrol_quote(self, pure_symbol: str) -> Dict[str, Any]:
        payload = await self.http.get_json(self.MONEYCONTROL_URL.format(symbol=pure_symbol), headers=self.HEADERS)
        data = payload.get("data") if isinstance(payload, dict) else None
        if not data:
            raise ProviderError(f"Invalid response from MoneyControl API for {pure_symbol}")
        return data

    async def _fetch_list_from_moneycontrol(self) -> List[StockData]:
        constituents = NIFTY50_CONSTITUENTS[:self.moneycontrol_limit]
        results = await asyncio.gather(
            *(self._fetch_moneycontrol_quote(info["symbol"]) for info in constituents),
            return_exceptions=True,
        )

        stocks = []
        for info, data in zip(constituents, results):
            if isinstance(data, Exception):
                logger.warning("[IndianProvider] MoneyControl failed for %s: %s", info["symbol"], data)
                continue
            stocks.append(StockData(
                symbol=f"NSE:{info['symbol']}",
                name=info["name"],
                price=parse_float(data.get("pricecurrent"), 0.0),
                change=parse_float(data.get("pricechange"), 0.0),
                change_percent=parse_float(data.get("pricepercentchange"), 0.0),
                high=parse_float(data.get("HIGH"), 0.0),
                low=parse_float(data.get("LOW"), 0.0),
                volume=parse_int(data.get("VOLUME"), 0),
                previous_close=parse_float(data.get("priceprevclose"), 0.0),
                market_cap=0.0,
            ))
        return stocks

    async def fetch_nse_stocks(self) -> List[StockData]:
        """Nifty 50 constituents: NSE → MoneyControl → synthetic."""
        try:
            stocks = await self._fetch_from_nse()
            logger.info("[IndianProvider] NSE returned %d stocks", len(stocks))
            return stocks
        except ProviderError as e:
            logger.warning("[IndianProvider] NSE API error, trying MoneyControl: %s", e)

        stocks = await self._fetch_list_from_moneycontrol()
        if stocks:
            logger.info("[IndianProvider] MoneyControl returned %d stocks", len(stocks))
            return stocks

        logger.warning("[IndianProvider] All list sources failed, using synthetic Nifty 50 data")
        return mock_data.dummy_nifty50_data()

    # ---------------- STOCK DETAILS ----------------
    async def _details_from_moneycontrol(self, symbol: str) -> StockData:
        pure = strip_exchange(symbol)
        data = await self._fetch_moneycontrol_quote(pure)

        price = parse_float(data.get("pricecurrent"), 0.0)
        change = parse_float(data.get("pricechange"), 0.0)
        return StockData(
            symbol=symbol,
            name=nifty50_name(pure) or pure,
            price=price,
            change=change,
            change_percent=parse_float(data.get("pricepercentchange"), 0.0),
            high=or_default(parse_float(data.get("HIGH")), price * 1.05),
            low=or_default(parse_float(data.get("LOW")), price * 0.95),
            volume=parse_int(data.get("VOLUME")) or 1000000,
            previous_close=or_default(parse_float(data.get("priceprevclose")), price - change),
            market_cap=parse_float(data.get("MARKET_CAP"), 0.0) / CRORE,
        )

    def _fetch_yf_info(self, ticker: str) -> Dict[str, Any]:
        return yf.Ticker(ticker).info or {}

    async def _details_from_yahoo(self, symbol: str) -> StockData:
        pure = strip_exchange(symbol)
        loop = asyncio.get_running_loop()
        try:
            info = await loop.run_in_executor(None, self._fetch_yf_info, yahoo_symbol(symbol))
        except Exception as e:
            # yfinance surfaces HTTP, JSON and rate-limit failures with its own exception types
            raise ProviderError(f"Yahoo Finance error for {symbol}: {e}") from e

        price = parse_float(info.get("regularMarketPrice")) or parse_float(info.get("currentPrice"))
        if not price:
            raise ProviderError(f"Yahoo Finance has no quote for {symbol}")

        previous_close = parse_float(info.get("regularMarketPreviousClose")) or parse_float(info.get("previousClose"))
        change = parse_float(info.get("regularMarketChange"))
        if change is None:
            change = price - previous_close if previous_close else 0.0
        change_percent = parse_float(info.get("regularMarketChangePercent"))
        if change_percent is None:
            change_percent = change / previous_close * 100 if previous_close else 0.0
        market_cap = parse_float(info.get("marketCap"))

        return StockData(
            symbol=symbol,
            name=info.get("longName") or info.get("shortName") or pure,
            price=price,
            change=change,
            change_percent=change_percent,
            high=or_default(parse_float(info.get("regularMarketDayHigh") or info.get("dayHigh")), price * 1.05),
            low=or_default(parse_float(info.get("regularMarketDayLow") or info.get("dayLow")), price * 0.95),
            volume=parse_int(info.get("regularMarketVolume") or info.get("volume")) or 1000000,
            previous_close=previous_close or price - change,
            market_cap=market_cap / CRORE if market_cap else 5000.0,
        )

    async def fetch_stock_details(self, symbol: str) -> StockData:
        """Single quote: MoneyControl → Yahoo Finance → synthetic."""
        try:
            return await self._details_from_moneycontrol(symbol)
        except ProviderError as e:
            logger.warning("[IndianProvider] MoneyControl error for %s, trying Yahoo Finance: %s", symbol, e)

        try:
            return await self._details_from_yahoo(symbol)
        except ProviderError as e:
            logger.warning("[IndianProvider] Yahoo Finance error for %s, using synthetic quote: %s", symbol, e)

        return mock_data.dummy_stock_details(symbol)

    # ---------------- HISTORICAL DATA ----------------
    async def _history_from_yahoo_chart(self, symbol: str, timeframe: Timeframe) -> List[HistoricalDataPoint]:
        end = int(time.time())
        start = end - 86400 * mock_data.HISTORY_DAYS[timeframe]
        payload = await self.http.get_json(
            self.YAHOO_CHART_URL.format(symbol=yahoo_symbol(symbol)),
            params={
                "period1": start,
                "period2": end,
                "interval": YAHOO_INTERVALS[timeframe],
                "includePrePost": "false",
            },
            headers={"User-Agent": self.HEADERS["User-Agent"]},
        )

        try:
            result = payload["chart"]["result"][0]
            timestamps = result["timestamp"]
            quotes = result["indicators"]["quote"][0]
            columns = zip(timestamps, quotes["open"], quotes["high"], quotes["low"], quotes["close"])
            volumes = quotes.get("volume") or []
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Invalid response from Yahoo Finance API for {symbol}") from e

        history = []
        for i, (ts, open_, high, low, close) in enumerate(columns):
            if not (open_ and high and low and close):
                continue
            volume = volumes[i] if i < len(volumes) else None
            history.append(HistoricalDataPoint(
                date=pd.Timestamp(ts, unit="s").strftime("%Y-%m-%d"),
                open=open_,
                high=high,
                low=low,
                close=close,
                volume=int(volume or 0),
            ))
        if not history:
            raise ProviderError(f"Yahoo Finance returned no complete bars for {symbol}")
        return history

    def _fetch_yf_history(self, ticker: str, timeframe: Timeframe) -> pd.DataFrame:
        return yf.Ticker(ticker).history(
            period=f"{mock_data.HISTORY_DAYS[timeframe]}d",
            interval=YAHOO_INTERVALS[timeframe],
        )

    def _history_from_frame(self, df: pd.DataFrame) -> List[HistoricalDataPoint]:
        if df is None or df.empty:
            return []
        df = df.dropna(subset=["Open", "High", "Low", "Close"])
        return [
            HistoricalDataPoint(
                date=idx.strftime("%Y-%m-%d"),
                open=float(row["Open"]),
                high=float(row["High"]),
                low=float(row["Low"]),
                close=float(row["Close"]),
                volume=int(row["Volume"]) if pd.notna(row.get("Volume")) else 0,
            )
            for idx, row in df.iterrows()
        ]

    async def _history_from_yfinance(self, symbol: str, timeframe: Timeframe) -> List[HistoricalDataPoint]:
        loop = asyncio.get_running_loop()
        try:
            df = await loop.run_in_executor(None, self._fetch_yf_history, yahoo_symbol(symbol), timeframe)
        except Exception as e:
            raise ProviderError(f"yfinance history error for {symbol}: {e}") from e

        history = self._history_from_frame(df)
        if not history:
            raise ProviderError(f"yfinance returned no history for {symbol}")
        return history

    async def fetch_historical_data(
        self, symbol: str, timeframe: Timeframe = Timeframe.daily
    ) -> List[HistoricalDataPoint]:
        """Candles: Yahoo chart API → yfinance → synthetic."""
        try:
            return await self._history_from_yahoo_chart(symbol, timeframe)
        except ProviderError as e:
            logger.warning("[IndianProvider] Yahoo chart error for %s, trying yfinance: %s", symbol, e)

        try:
            return await self._history_from_yfinance(symbol, timeframe)
        except ProviderError as e:
            logger.warning("[IndianProvider] yfinance error for %s, using synthetic history: %s", symbol, e)

        return mock_data.synthetic_history(symbol, timeframe)


indian_provider = IndianStockProvider()
