"""Finnhub provider: quotes and candles for any Finnhub-listed symbol.

Single-symbol calls do not fall back: failures surface as `ProviderError`
so callers can tell real data from synthetic data. Only the exchange listing
degrades to synthetic quotes.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from niftyboard import config
from niftyboard.models.stock_models import HistoricalDataPoint, StockData, Timeframe
from niftyboard.services import mock_data
from niftyboard.services.http_client import HttpClient, ProviderError, http_client
from niftyboard.services.parser import format_symbol_as_name, or_default
from niftyboard.services.symbols import default_indian_symbols

logger = logging.getLogger(__name__)

ONE_YEAR_SECONDS = 31536000

RESOLUTIONS = {
    Timeframe.daily: "D",
    Timeframe.weekly: "W",
    Timeframe.monthly: "M",
}

SUPPORTED_EXCHANGES = ("NSE", "BSE")


class FinnhubProvider:
    """Real-time quotes, candles and exchange listings from Finnhub."""

    def __init__(
        self,
        http: Optional[HttpClient] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        symbol_limit: Optional[int] = None,
        max_concurrency: Optional[int] = None,
    ):
        self.name = "Finnhub Provider"
        self.http = http or http_client
        self.api_key = api_key if api_key is not None else config.FINNHUB_API_KEY
        self.base_url = base_url or config.FINNHUB_BASE_URL
        self.symbol_limit = symbol_limit or config.FINNHUB_SYMBOL_LIMIT
        self.max_concurrency = max_concurrency or config.FINNHUB_MAX_CONCURRENCY

    async def _get(self, path: str, context: str, **params) -> Any:
        params["token"] = self.api_key
        try:
            return await self.http.get_json(f"{self.base_url}{path}", params=params)
        except ProviderError as e:
            logger.error("[FinnhubProvider] %s: %s", context, e)
            raise ProviderError(f"{context}: {e}", status=e.status) from e

    # ---------------- QUOTE ----------------
    async def fetch_real_time_stock_data(self, symbol: str) -> StockData:
        context = f"Error fetching real-time data for {symbol}"
        quote = await self._get("/quote", context, symbol=symbol)

        # Profile lookups fail for many Indian symbols; the quote is still usable
        profile: Dict[str, Any] = {}
        try:
            profile = await self.http.get_json(
                f"{self.base_url}/stock/profile2", params={"symbol": symbol, "token": self.api_key}
            ) or {}
        except ProviderError:
            logger.warning("[FinnhubProvider] Could not fetch profile for %s, using default name", symbol)

        current = quote.get("c") if isinstance(quote, dict) else None
        if not isinstance(current, (int, float)) or isinstance(current, bool):
            raise ProviderError(f"{context}: Invalid quote data received for {symbol}")

        price = current or 0
        return StockData(
            symbol=symbol,
            name=profile.get("name") or format_symbol_as_name(symbol),
            price=price,
            change=quote.get("d") or 0,
            change_percent=quote.get("dp") or 0,
            high=or_default(quote.get("h"), price * 1.05),
            low=or_default(quote.get("l"), price * 0.95),
            volume=int(quote.get("v") or 0),
            previous_close=or_default(quote.get("pc"), price),
            market_cap=profile.get("marketCapitalization") or 0,
        )

    # ---------------- CANDLES ----------------
    async def fetch_historical_candles(
        self,
        symbol: str,
        timeframe: Timeframe = Timeframe.daily,
        from_ts: Optional[int] = None,
        to_ts: Optional[int] = None,
    ) -> List[HistoricalDataPoint]:
        to_ts = to_ts if to_ts is not None else int(time.time())
        from_ts = from_ts if from_ts is not None else to_ts - ONE_YEAR_SECONDS
        context = f"Error fetching historical data for {symbol}"

        candles = await self._get(
            "/stock/candle", context,
            symbol=symbol, resolution=RESOLUTIONS[timeframe], **{"from": from_ts, "to": to_ts},
        )
        if not isinstance(candles, dict) or candles.get("s") != "ok" or not candles.get("t"):
            raise ProviderError(f"{context}: No historical data found")

        return [
            HistoricalDataPoint(
                date=datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d"),
                open=candles["o"][i],
                high=candles["h"][i],
                low=candles["l"][i],
                close=candles["c"][i],
                volume=int(candles["v"][i] or 0),
            )
            for i, ts in enumerate(candles["t"])
        ]

    # ---------------- EXCHANGE LISTING ----------------
    async def _list_symbols(self, exchange: str) -> List[str]:
        try:
            listing = await self.http.get_json(
                f"{self.base_url}/stock/symbol", params={"exchange": exchange, "token": self.api_key}
            )
        except ProviderError as e:
            logger.warning("[FinnhubProvider] Error fetching symbols for %s, using default symbols: %s", exchange, e)
            return default_indian_symbols(exchange)

        symbols = []
        for item in listing if isinstance(listing, list) else []:
            sym = item if isinstance(item, str) else (item.get("symbol") if isinstance(item, dict) else None)
            if sym:
                symbols.append(sym)
        return symbols or default_indian_symbols(exchange)

    async def fetch_indian_stocks(self, exchange: str) -> List[StockData]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch_one(sym: str) -> Optional[StockData]:
            async with semaphore:
                try:
                    return await self.fetch_real_time_stock_data(sym)
                except ProviderError as e:
                    logger.warning("[FinnhubProvider] Error fetching data for %s: %s", sym, e)
                    return None

        try:
            symbols = (await self._list_symbols(exchange))[:self.symbol_limit]
            stocks = await asyncio.gather(*(fetch_one(sym) for sym in symbols))
            found = [s for s in stocks if s is not None]
        except Exception as e:
            logger.error("[FinnhubProvider] Error fetching %s stocks: %s", exchange, e)
            found = []

        if found:
            return found

        logger.warning("[FinnhubProvider] No %s quotes available, using synthetic data", exchange)
        return [mock_data.random_quote(sym) for sym in default_indian_symbols(exchange)]


finnhub_provider = FinnhubProvider()
