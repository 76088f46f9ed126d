# niftyboard/services/presentation.py
"""
Shapes provider output for API clients: search, sort and page stock lists,
build the detail header and the candlestick/volume chart series.
"""

import math
from datetime import datetime, timezone
from typing import List, Optional

from niftyboard.models.stock_models import (
    CandlePoint,
    ChartPayload,
    HistoricalDataPoint,
    SortDirection,
    SortField,
    StockData,
    StockDetail,
    StockListPage,
    Timeframe,
    VolumePoint,
)

UP_VOLUME_COLOR = "rgba(34, 197, 94, 0.3)"
DOWN_VOLUME_COLOR = "rgba(239, 68, 68, 0.3)"


def _finite(value: Optional[float]) -> bool:
    return value is not None and not math.isnan(value) and not math.isinf(value)


def sanitize_stock(stock: StockData) -> StockData:
    """Replace NaN/inf numbers so clients never have to render them."""
    price = stock.price if _finite(stock.price) else 0.0
    return stock.model_copy(update={
        "price": price,
        "change": stock.change if _finite(stock.change) else 0.0,
        "change_percent": stock.change_percent if _finite(stock.change_percent) else 0.0,
        "high": stock.high if _finite(stock.high) else price,
        "low": stock.low if _finite(stock.low) else price,
        "previous_close": stock.previous_close if _finite(stock.previous_close) else price,
        "market_cap": stock.market_cap if _finite(stock.market_cap) else None,
    })


def _sort_key(field: SortField):
    if field == SortField.name:
        return lambda s: (s.name or s.symbol).lower()
    if field == SortField.price:
        return lambda s: s.price
    if field == SortField.change:
        return lambda s: s.change_percent
    if field == SortField.volume:
        return lambda s: s.volume
    return lambda s: s.market_cap or 0.0


def filter_and_sort(
    stocks: List[StockData],
    search: str = "",
    sort: SortField = SortField.name,
    direction: SortDirection = SortDirection.asc,
) -> List[StockData]:
    term = (search or "").strip().lower()
    filtered = [s for s in stocks if term in f"{s.name or ''} {s.symbol}".lower()]
    return sorted(filtered, key=_sort_key(sort), reverse=direction == SortDirection.desc)


def sort_by_market_cap(stocks: List[StockData]) -> List[StockData]:
    # Stable: equal (or missing) caps keep upstream order
    return sorted(stocks, key=lambda s: s.market_cap or 0.0, reverse=True)


def paginate(
    stocks: List[StockData],
    page: int,
    page_size: int,
    sort: SortField = SortField.name,
    direction: SortDirection = SortDirection.asc,
    search: str = "",
) -> StockListPage:
    total = len(stocks)
    pages = max(1, math.ceil(total / page_size))
    start = (page - 1) * page_size
    return StockListPage(
        items=stocks[start:start + page_size],
        total=total,
        page=page,
        page_size=page_size,
        pages=pages,
        sort=sort,
        direction=direction,
        search=search or "",
    )


def build_stock_list(
    stocks: List[StockData],
    search: str = "",
    sort: SortField = SortField.name,
    direction: SortDirection = SortDirection.asc,
    page: int = 1,
    page_size: int = 20,
) -> StockListPage:
    cleaned = [sanitize_stock(s) for s in stocks]
    ordered = filter_and_sort(cleaned, search, sort, direction)
    return paginate(ordered, page, page_size, sort=sort, direction=direction, search=search)


def format_market_cap(crores: Optional[float]) -> str:
    value = crores or 0.0
    if value >= 1000:
        return f"₹{value / 1000:.2f} Lakh Cr"
    return f"₹{value:.2f} Cr"


def build_stock_detail(stock: StockData, last_updated: Optional[datetime] = None) -> StockDetail:
    stock = sanitize_stock(stock)
    return StockDetail(
        stock=stock,
        is_positive=stock.change >= 0,
        market_cap_display=format_market_cap(stock.market_cap),
        last_updated=last_updated or datetime.now(timezone.utc),
    )


def _epoch_seconds(day: str) -> int:
    return int(datetime.strptime(day, "%Y-%m-%d").replace(tzinfo=timezone.utc).timestamp())


def build_chart(candles: List[HistoricalDataPoint], title: str, timeframe: Timeframe) -> ChartPayload:
    """
    Candlestick and volume histogram series keyed by UTC epoch seconds.
    Volume bars are green when the bar closed at or above its open.
    """
    ordered = sorted(candles, key=lambda c: c.date)
    return ChartPayload(
        title=title,
        timeframe=timeframe,
        label=f"{timeframe.value.capitalize()} Chart",
        candles=[
            CandlePoint(time=_epoch_seconds(c.date), open=c.open, high=c.high, low=c.low, close=c.close)
            for c in ordered
        ],
        volumes=[
            VolumePoint(
                time=_epoch_seconds(c.date),
                value=c.volume,
                color=UP_VOLUME_COLOR if c.close >= c.open else DOWN_VOLUME_COLOR,
            )
            for c in ordered
        ],
    )
