from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class Timeframe(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class SortField(str, Enum):
    name = "name"
    price = "price"
    change = "change"
    volume = "volume"
    market_cap = "market_cap"


class SortDirection(str, Enum):
    asc = "asc"
    desc = "desc"


class StockData(BaseModel):
    symbol: str
    name: Optional[str] = None
    price: float
    change: float
    change_percent: float
    high: float
    low: float
    volume: int
    previous_close: float
    market_cap: Optional[float] = None


class HistoricalDataPoint(BaseModel):
    date: str
    open: float
    high: float
    low: float
    close: float
    volume: int


class StockListPage(BaseModel):
    items: List[StockData]
    total: int
    page: int
    page_size: int
    pages: int
    sort: SortField
    direction: SortDirection
    search: str = ""


class StockDetail(BaseModel):
    stock: StockData
    is_positive: bool
    market_cap_display: str
    last_updated: datetime


class CandlePoint(BaseModel):
    time: int
    open: float
    high: float
    low: float
    close: float


class VolumePoint(BaseModel):
    time: int
    value: int
    color: str


class ChartPayload(BaseModel):
    title: str
    timeframe: Timeframe
    label: str
    candles: List[CandlePoint]
    volumes: List[VolumePoint]
