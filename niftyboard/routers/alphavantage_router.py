from typing import List

from fastapi import APIRouter, Depends, Query

from niftyboard.models.stock_models import HistoricalDataPoint, StockData, Timeframe
from niftyboard.providers.alphavantage_provider import AlphaVantageProvider, alphavantage_provider
from niftyboard.utils.cache import SimpleCache, get_cache

router = APIRouter()


def get_alphavantage_provider() -> AlphaVantageProvider:
    return alphavantage_provider


@router.get("/nifty50", response_model=List[StockData])
async def nifty50(provider: AlphaVantageProvider = Depends(get_alphavantage_provider)):
    return await provider.fetch_nifty50_stocks()


@router.get("/nifty100", response_model=List[StockData])
async def nifty100(provider: AlphaVantageProvider = Depends(get_alphavantage_provider)):
    return await provider.fetch_nifty100_stocks()


@router.get("/quote/{symbol}", response_model=StockData)
async def quote(
    symbol: str,
    refresh: bool = False,
    provider: AlphaVantageProvider = Depends(get_alphavantage_provider),
    store: SimpleCache = Depends(get_cache),
):
    key = f"alphavantage:quote:{symbol}"
    if refresh:
        store.invalidate(key)
    stock = store.get(key)
    if stock is None:
        stock = await provider.fetch_stock_details(symbol)
        store.set(key, stock)
    return stock


@router.get("/history/{symbol}", response_model=List[HistoricalDataPoint])
async def history(
    symbol: str,
    timeframe: Timeframe = Timeframe.daily,
    outputsize: str = Query("compact", pattern="^(compact|full)$"),
    refresh: bool = False,
    provider: AlphaVantageProvider = Depends(get_alphavantage_provider),
    store: SimpleCache = Depends(get_cache),
):
    key = f"alphavantage:history:{symbol}:{timeframe.value}:{outputsize}"
    if refresh:
        store.invalidate(key)
    series = store.get(key)
    if series is None:
        series = await provider.fetch_historical_data(symbol, timeframe, outputsize)
        store.set(key, series)
    return series
