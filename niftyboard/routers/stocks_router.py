import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from niftyboard import config
from niftyboard.models.stock_models import (
    ChartPayload,
    HistoricalDataPoint,
    SortDirection,
    SortField,
    StockData,
    StockDetail,
    StockListPage,
    Timeframe,
)
from niftyboard.providers.indian_provider import IndianStockProvider, indian_provider
from niftyboard.services.presentation import (
    build_chart,
    build_stock_detail,
    build_stock_list,
    sort_by_market_cap,
)
from niftyboard.utils.cache import SimpleCache, get_cache

logger = logging.getLogger(__name__)

router = APIRouter()


def get_indian_provider() -> IndianStockProvider:
    return indian_provider


class ListParams:
    """Search, sort and paging query parameters shared by the list endpoints."""

    def __init__(
        self,
        search: str = Query("", description="Case-insensitive match on name or symbol"),
        sort: Optional[SortField] = Query(None, description="Defaults to the view's natural order"),
        direction: Optional[SortDirection] = Query(None),
        page: int = Query(1, ge=1),
        page_size: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
        refresh: bool = Query(False, description="Bypass the response cache"),
    ):
        self.search = search
        self.sort = sort
        self.direction = direction
        self.page = page
        self.page_size = page_size
        self.refresh = refresh


async def _nse_stocks(provider: IndianStockProvider, store: SimpleCache, refresh: bool) -> List[StockData]:
    key = "indian:nse:nifty50"
    if refresh:
        store.invalidate(key)
    stocks = store.get(key)
    if stocks is None:
        stocks = await provider.fetch_nse_stocks()
        if not stocks:
            logger.error("[StocksRouter] Provider returned an empty Nifty 50 list")
            raise HTTPException(status_code=503, detail="No stocks data available.")
        store.set(key, stocks)
    return stocks


@router.get("/nifty50", response_model=StockListPage)
async def nifty50(
    params: ListParams = Depends(),
    provider: IndianStockProvider = Depends(get_indian_provider),
    store: SimpleCache = Depends(get_cache),
):
    stocks = await _nse_stocks(provider, store, params.refresh)
    return build_stock_list(
        stocks,
        params.search,
        params.sort or SortField.name,
        params.direction or SortDirection.asc,
        params.page,
        params.page_size,
    )


@router.get("/nifty100", response_model=StockListPage)
async def nifty100(
    params: ListParams = Depends(),
    provider: IndianStockProvider = Depends(get_indian_provider),
    store: SimpleCache = Depends(get_cache),
):
    """
    Broad-market view, largest companies first unless the client asks for
    another order.
    """
    stocks = sort_by_market_cap(await _nse_stocks(provider, store, params.refresh))
    if params.sort is None:
        sort, direction = SortField.market_cap, params.direction or SortDirection.desc
    else:
        sort, direction = params.sort, params.direction or SortDirection.asc
    return build_stock_list(stocks, params.search, sort, direction, params.page, params.page_size)


@router.get("/{symbol}", response_model=StockDetail)
async def stock_detail(
    symbol: str,
    refresh: bool = False,
    provider: IndianStockProvider = Depends(get_indian_provider),
    store: SimpleCache = Depends(get_cache),
):
    symbol = symbol.strip()
    if not symbol:
        raise HTTPException(status_code=400, detail="Symbol cannot be empty.")

    key = f"indian:detail:{symbol}"
    if refresh:
        store.invalidate(key)
    detail = store.get(key)
    if detail is None:
        stock = await provider.fetch_stock_details(symbol)
        detail = build_stock_detail(stock)
        store.set(key, detail)
    return detail


async def _history(
    provider: IndianStockProvider, store: SimpleCache, symbol: str, timeframe: Timeframe, refresh: bool
) -> List[HistoricalDataPoint]:
    key = f"indian:history:{symbol}:{timeframe.value}"
    if refresh:
        store.invalidate(key)
    history = store.get(key)
    if history is None:
        history = await provider.fetch_historical_data(symbol, timeframe)
        store.set(key, history)
    return history


@router.get("/{symbol}/history", response_model=List[HistoricalDataPoint])
async def stock_history(
    symbol: str,
    timeframe: Timeframe = Timeframe.daily,
    refresh: bool = False,
    provider: IndianStockProvider = Depends(get_indian_provider),
    store: SimpleCache = Depends(get_cache),
):
    return await _history(provider, store, symbol, timeframe, refresh)


@router.get("/{symbol}/chart", response_model=ChartPayload)
async def stock_chart(
    symbol: str,
    timeframe: Timeframe = Timeframe.daily,
    refresh: bool = False,
    provider: IndianStockProvider = Depends(get_indian_provider),
    store: SimpleCache = Depends(get_cache),
):
    history = await _history(provider, store, symbol, timeframe, refresh)
    if not history:
        raise HTTPException(status_code=404, detail=f"No historical data available for {symbol}.")

    cached_detail = store.get(f"indian:detail:{symbol}")
    title = cached_detail.stock.name if cached_detail and cached_detail.stock.name else symbol
    return build_chart(history, title, timeframe)
