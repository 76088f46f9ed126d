from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from niftyboard.models.stock_models import HistoricalDataPoint, StockData, Timeframe
from niftyboard.providers.finnhub_provider import SUPPORTED_EXCHANGES, FinnhubProvider, finnhub_provider
from niftyboard.services.http_client import ProviderError
from niftyboard.utils.cache import SimpleCache, get_cache

router = APIRouter()


def get_finnhub_provider() -> FinnhubProvider:
    return finnhub_provider


@router.get("/quote/{symbol}", response_model=StockData)
async def quote(
    symbol: str,
    refresh: bool = False,
    provider: FinnhubProvider = Depends(get_finnhub_provider),
    store: SimpleCache = Depends(get_cache),
):
    key = f"finnhub:quote:{symbol}"
    if refresh:
        store.invalidate(key)
    stock = store.get(key)
    if stock is None:
        try:
            stock = await provider.fetch_real_time_stock_data(symbol)
        except ProviderError as e:
            raise HTTPException(status_code=502, detail=str(e))
        store.set(key, stock)
    return stock


@router.get("/candles/{symbol}", response_model=List[HistoricalDataPoint])
async def candles(
    symbol: str,
    timeframe: Timeframe = Timeframe.daily,
    from_ts: Optional[int] = Query(None, alias="from", description="UNIX seconds, defaults to one year ago"),
    to_ts: Optional[int] = Query(None, alias="to", description="UNIX seconds, defaults to now"),
    refresh: bool = False,
    provider: FinnhubProvider = Depends(get_finnhub_provider),
    store: SimpleCache = Depends(get_cache),
):
    if from_ts is not None and to_ts is not None and from_ts >= to_ts:
        raise HTTPException(status_code=400, detail="'from' must be earlier than 'to'.")

    key = f"finnhub:candles:{symbol}:{timeframe.value}:{from_ts}:{to_ts}"
    if refresh:
        store.invalidate(key)
    history = store.get(key)
    if history is None:
        try:
            history = await provider.fetch_historical_candles(symbol, timeframe, from_ts, to_ts)
        except ProviderError as e:
            raise HTTPException(status_code=502, detail=str(e))
        store.set(key, history)
    return history


@router.get("/exchange/{exchange}", response_model=List[StockData])
async def exchange_stocks(
    exchange: str,
    refresh: bool = False,
    provider: FinnhubProvider = Depends(get_finnhub_provider),
    store: SimpleCache = Depends(get_cache),
):
    exchange = exchange.upper()
    if exchange not in SUPPORTED_EXCHANGES:
        raise HTTPException(status_code=400, detail=f"Exchange must be one of {', '.join(SUPPORTED_EXCHANGES)}.")

    key = f"finnhub:exchange:{exchange}"
    if refresh:
        store.invalidate(key)
    stocks = store.get(key)
    if stocks is None:
        stocks = await provider.fetch_indian_stocks(exchange)
        store.set(key, stocks)
    return stocks
