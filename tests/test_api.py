import pytest
from fastapi.testclient import TestClient

from niftyboard.main import app
from niftyboard.models.stock_models import HistoricalDataPoint, StockData, Timeframe
from niftyboard.routers.alphavantage_router import get_alphavantage_provider
from niftyboard.routers.finnhub_router import get_finnhub_provider
from niftyboard.routers.stocks_router import get_indian_provider
from niftyboard.services.http_client import ProviderError
from niftyboard.utils.cache import get_cache


def make_stock(symbol, name, price, change_percent, market_cap):
    return StockData(
        symbol=symbol, name=name, price=price, change=price * change_percent / 100,
        change_percent=change_percent, high=price + 5, low=price - 5, volume=1000,
        previous_close=price, market_cap=market_cap,
    )


STOCKS = [
    make_stock("NSE:HDFCBANK", "HDFC Bank Ltd.", 1678.9, 0.95, 12700.0),
    make_stock("NSE:TCS", "Tata Consultancy Services Ltd.", 3547.8, -0.35, 12987.0),
    make_stock("NSE:ICICIBANK", "ICICI Bank Ltd.", 987.45, 1.01, 7654.0),
    make_stock("NSE:ITC", "ITC Ltd.", 430.1, 0.2, None),
]

HISTORY = [
    HistoricalDataPoint(date="2024-01-01", open=10, high=12, low=9, close=11, volume=100),
    HistoricalDataPoint(date="2024-01-02", open=11, high=12, low=8, close=9, volume=200),
]


class StubIndianProvider:
    def __init__(self, stocks=STOCKS):
        self.stocks = stocks
        self.list_calls = 0
        self.history_calls = []

    async def fetch_nse_stocks(self):
        self.list_calls += 1
        return list(self.stocks)

    async def fetch_stock_details(self, symbol):
        return make_stock(symbol, "Tata Consultancy Services Ltd.", 3547.8, -0.35, 12987.45)

    async def fetch_historical_data(self, symbol, timeframe=Timeframe.daily):
        self.history_calls.append((symbol, timeframe))
        return HISTORY


class StubFinnhubProvider:
    async def fetch_real_time_stock_data(self, symbol):
        if symbol == "BAD":
            raise ProviderError("Error fetching real-time data for BAD: Error 401: Invalid API key", status=401)
        return make_stock(symbol, "Apple Inc", 190.0, 0.5, 2900000.0)

    async def fetch_historical_candles(self, symbol, timeframe=Timeframe.daily, from_ts=None, to_ts=None):
        raise ProviderError(f"Error fetching historical data for {symbol}: No historical data found")

    async def fetch_indian_stocks(self, exchange):
        return [make_stock(f"{exchange}:TCS", "TCS", 3500.0, 0.1, None)]


@pytest.fixture
def indian():
    return StubIndianProvider()


@pytest.fixture
def client(indian, store):
    app.dependency_overrides[get_indian_provider] = lambda: indian
    app.dependency_overrides[get_finnhub_provider] = lambda: StubFinnhubProvider()
    app.dependency_overrides[get_cache] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    assert client.get("/health").json() == {"status": "healthy"}


def test_nifty50_search_and_sort(client):
    resp = client.get("/stocks/nifty50", params={"search": "bank", "sort": "price", "direction": "desc"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert [s["symbol"] for s in body["items"]] == ["NSE:HDFCBANK", "NSE:ICICIBANK"]
    assert body["sort"] == "price"


def test_nifty50_defaults_to_name_order_and_paginates(client):
    body = client.get("/stocks/nifty50", params={"page": 2, "page_size": 3}).json()

    assert body["pages"] == 2
    assert [s["symbol"] for s in body["items"]] == ["NSE:TCS"]
    assert body["direction"] == "asc"


def test_invalid_list_params_are_rejected(client):
    assert client.get("/stocks/nifty50", params={"sort": "pe"}).status_code == 422
    assert client.get("/stocks/nifty50", params={"page": 0}).status_code == 422


def test_nifty100_orders_by_market_cap(client):
    body = client.get("/stocks/nifty100").json()

    assert [s["symbol"] for s in body["items"]] == ["NSE:TCS", "NSE:HDFCBANK", "NSE:ICICIBANK", "NSE:ITC"]
    assert body["sort"] == "market_cap"
    assert body["direction"] == "desc"


def test_list_is_cached_until_refresh(client, indian):
    client.get("/stocks/nifty50")
    client.get("/stocks/nifty100")
    assert indian.list_calls == 1

    client.get("/stocks/nifty50", params={"refresh": "true"})
    assert indian.list_calls == 2


def test_empty_list_is_service_unavailable(client, indian):
    indian.stocks = []
    assert client.get("/stocks/nifty50").status_code == 503


def test_stock_detail(client):
    body = client.get("/stocks/NSE:TCS").json()

    assert body["stock"]["symbol"] == "NSE:TCS"
    assert body["is_positive"] is False
    assert body["market_cap_display"] == "₹12.99 Lakh Cr"
    assert "last_updated" in body


def test_history_passes_timeframe(client, indian):
    resp = client.get("/stocks/NSE:TCS/history", params={"timeframe": "monthly"})

    assert resp.status_code == 200
    assert len(resp.json()) == 2
    assert indian.history_calls == [("NSE:TCS", Timeframe.monthly)]


def test_chart_uses_detail_name_when_known(client):
    bare = client.get("/stocks/NSE:TCS/chart").json()
    assert bare["title"] == "NSE:TCS"
    assert bare["label"] == "Daily Chart"
    assert [v["color"] for v in bare["volumes"]] == ["rgba(34, 197, 94, 0.3)", "rgba(239, 68, 68, 0.3)"]

    client.get("/stocks/NSE:TCS")
    titled = client.get("/stocks/NSE:TCS/chart").json()
    assert titled["title"] == "Tata Consultancy Services Ltd."


def test_finnhub_quote_and_errors(client):
    assert client.get("/finnhub/quote/AAPL").json()["name"] == "Apple Inc"

    resp = client.get("/finnhub/quote/BAD")
    assert resp.status_code == 502
    assert "Invalid API key" in resp.json()["detail"]


def test_finnhub_candles_errors(client):
    assert client.get("/finnhub/candles/AAPL").status_code == 502
    assert client.get("/finnhub/candles/AAPL", params={"from": 200, "to": 100}).status_code == 400


def test_finnhub_exchange(client):
    assert client.get("/finnhub/exchange/nyse").status_code == 400
    body = client.get("/finnhub/exchange/bse").json()
    assert body[0]["symbol"] == "BSE:TCS"


def test_alphavantage_lists(client):
    assert len(client.get("/alphavantage/nifty50").json()) == 10
    assert len(client.get("/alphavantage/nifty100").json()) == 15


def test_alphavantage_quote_uses_override(client):
    class StubAlphaVantage:
        async def fetch_stock_details(self, symbol):
            return make_stock(symbol, "IBM", 182.1, 0.66, None)

    app.dependency_overrides[get_alphavantage_provider] = lambda: StubAlphaVantage()

    body = client.get("/alphavantage/quote/IBM").json()

    assert body["symbol"] == "IBM"
    assert body["market_cap"] is None


class CountingHistoryProvider:
    def __init__(self):
        self.calls = []

    async def fetch_historical_candles(self, symbol, timeframe=Timeframe.daily, from_ts=None, to_ts=None):
        self.calls.append((symbol, timeframe, from_ts, to_ts))
        return HISTORY

    async def fetch_historical_data(self, symbol, timeframe=Timeframe.daily, outputsize="compact"):
        self.calls.append((symbol, timeframe, outputsize))
        return HISTORY


def test_finnhub_candles_are_cached_per_window(client):
    provider = CountingHistoryProvider()
    app.dependency_overrides[get_finnhub_provider] = lambda: provider
    window = {"from": 100, "to": 200}

    assert len(client.get("/finnhub/candles/AAPL", params=window).json()) == 2
    client.get("/finnhub/candles/AAPL", params=window)
    assert len(provider.calls) == 1

    client.get("/finnhub/candles/AAPL", params={"from": 100, "to": 300})
    client.get("/finnhub/candles/AAPL", params={**window, "timeframe": "weekly"})
    client.get("/finnhub/candles/AAPL", params={**window, "refresh": "true"})
    assert provider.calls[1:] == [
        ("AAPL", Timeframe.daily, 100, 300),
        ("AAPL", Timeframe.weekly, 100, 200),
        ("AAPL", Timeframe.daily, 100, 200),
    ]


def test_alphavantage_history_is_cached_per_outputsize(client):
    provider = CountingHistoryProvider()
    app.dependency_overrides[get_alphavantage_provider] = lambda: provider

    client.get("/alphavantage/history/IBM")
    client.get("/alphavantage/history/IBM")
    assert provider.calls == [("IBM", Timeframe.daily, "compact")]

    client.get("/alphavantage/history/IBM", params={"outputsize": "full"})
    client.get("/alphavantage/history/IBM", params={"refresh": "true"})
    assert provider.calls[1:] == [("IBM", Timeframe.daily, "full"), ("IBM", Timeframe.daily, "compact")]
    assert client.get("/alphavantage/history/IBM", params={"outputsize": "all"}).status_code == 422
