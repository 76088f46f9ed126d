import logging
from typing import Dict, List, Optional

from niftyboard import config
from niftyboard.models.stock_models import HistoricalDataPoint, StockData, Timeframe
from niftyboard.services import mock_data
from niftyboard.services.http_client import HttpClient, ProviderError, http_client
from niftyboard.services.parser import parse_float, parse_int, strip_exchange

logger = logging.getLogger(__name__)

SERIES = {
    Timeframe.daily: ("TIME_SERIES_DAILY", "Time Series (Daily)"),
    Timeframe.weekly: ("TIME_SERIES_WEEKLY", "Weekly Time Series"),
    Timeframe.monthly: ("TIME_SERIES_MONTHLY", "Monthly Time Series"),
}


def _stock(symbol, name, price, change, change_percent, high, low, volume, previous_close, market_cap) -> StockData:
    return StockData(
        symbol=symbol, name=name, price=price, change=change, change_percent=change_percent,
        high=high, low=low, volume=volume, previous_close=previous_close, market_cap=market_cap,
    )


NIFTY50_SAMPLE: List[StockData] = [
    _stock("RELIANCE.BSE", "Reliance Industries", 2897.45, 23.56, 0.82, 2910.50, 2865.30, 3245678, 2873.89, 18534.67),
    _stock("TCS.BSE", "Tata Consultancy Services", 3547.80, -12.35, -0.35, 3560.20, 3521.45, 1876543, 3560.15, 12987.45),
    _stock("HDFCBANK.BSE", "HDFC Bank", 1678.90, 15.78, 0.95, 1685.60, 1663.20, 2987654, 1663.12, 9876.23),
    _stock("INFY.BSE", "Infosys", 1456.78, -5.67, -0.39, 1470.25, 1450.30, 1765432, 1462.45, 6543.21),
    _stock("HINDUNILVR.BSE", "Hindustan Unilever", 2345.67, 18.45, 0.79, 2360.75, 2330.90, 1234567, 2327.22, 5432.10),
    _stock("ICICIBANK.BSE", "ICICI Bank", 987.45, 9.87, 1.01, 995.60, 975.30, 3456789, 977.58, 7654.32),
    _stock("BHARTIARTL.BSE", "Bharti Airtel", 876.54, -3.21, -0.37, 880.90, 870.25, 2345678, 879.75, 4567.89),
    _stock("KOTAKBANK.BSE", "Kotak Mahindra Bank", 1765.43, 12.34, 0.70, 1780.20, 1754.50, 1456789, 1753.09, 4321.09),
    _stock("SBIN.BSE", "State Bank of India", 654.32, 7.89, 1.22, 660.75, 645.60, 4567890, 646.43, 6789.01),
    _stock("BAJFINANCE.BSE", "Bajaj Finance", 7654.32, -34.56, -0.45, 7700.90, 7630.25, 987654, 7688.88, 5678.90),
]

NIFTY100_SAMPLE: List[StockData] = NIFTY50_SAMPLE + [
    _stock("ASIANPAINT.BSE", "Asian Paints", 3214.56, 24.67, 0.77, 3230.45, 3195.60, 876543, 3189.89, 3456.78),
    _stock("AXISBANK.BSE", "Axis Bank", 943.21, -7.65, -0.80, 955.40, 940.30, 2654321, 950.86, 4567.89),
    _stock("BAJAJFINSV.BSE", "Bajaj Finserv", 1543.76, 12.43, 0.81, 1555.60, 1530.20, 765432, 1531.33, 3214.56),
    _stock("HCLTECH.BSE", "HCL Technologies", 1176.54, 5.43, 0.46, 1180.90, 1165.30, 987654, 1171.11, 3654.32),
    _stock("TITAN.BSE", "Titan Company", 2765.43, -15.67, -0.56, 2790.45, 2745.60, 654321, 2781.10, 2987.65),
]


class AlphaVantageProvider:
    """Alpha Vantage quotes and time series; curated sample lists for index views."""

    def __init__(self, http: Optional[HttpClient] = None, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.name = "Alpha Vantage Provider"
        self.http = http or http_client
        self.api_key = api_key or config.ALPHAVANTAGE_API_KEY
        self.base_url = base_url or config.ALPHAVANTAGE_BASE_URL

    async def fetch_nifty50_stocks(self) -> List[StockData]:
        return [s.model_copy() for s in NIFTY50_SAMPLE]

    async def fetch_nifty100_stocks(self) -> List[StockData]:
        return [s.model_copy() for s in NIFTY100_SAMPLE]

    def _sample_or_synthetic(self, symbol: str) -> StockData:
        for stock in NIFTY100_SAMPLE:
            if stock.symbol == symbol:
                return stock.model_copy()
        return mock_data.random_quote(symbol, name=strip_exchange(symbol).split(".")[0])

    async def fetch_stock_details(self, symbol: str) -> StockData:
        try:
            payload = await self.http.get_json(
                self.base_url,
                params={"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self.api_key},
            )
            quote: Dict[str, str] = (payload or {}).get("Global Quote") or {}
            price = parse_float(quote.get("05. price"))
            if price is None:
                # Rate-limited responses come back as 200 with a "Note" or "Information" key
                raise ProviderError(f"No stock data found for {symbol}")

            return StockData(
                symbol=quote.get("01. symbol") or symbol,
                price=price,
                change=parse_float(quote.get("09. change"), 0.0),
                change_percent=parse_float(quote.get("10. change percent"), 0.0),
                high=parse_float(quote.get("03. high"), price),
                low=parse_float(quote.get("04. low"), price),
                volume=parse_int(quote.get("06. volume"), 0),
                previous_close=parse_float(quote.get("08. previous close"), price),
            )
        except ProviderError as e:
            logger.warning("[AlphaVantageProvider] Error fetching stock details for %s: %s", symbol, e)
            return self._sample_or_synthetic(symbol)

    async def fetch_historical_data(
        self,
        symbol: str,
        timeframe: Timeframe = Timeframe.daily,
        outputsize: str = "compact",
    ) -> List[HistoricalDataPoint]:
        function, series_key = SERIES[timeframe]
        try:
            payload = await self.http.get_json(
                self.base_url,
                params={"function": function, "symbol": symbol, "outputsize": outputsize, "apikey": self.api_key},
            )
            series = (payload or {}).get(series_key)
            if not series:
                raise ProviderError(f"No historical data found for {symbol}")

            history = [
                HistoricalDataPoint(
                    date=day,
                    open=parse_float(values.get("1. open"), 0.0),
                    high=parse_float(values.get("2. high"), 0.0),
                    low=parse_float(values.get("3. low"), 0.0),
                    close=parse_float(values.get("4. close"), 0.0),
                    volume=parse_int(values.get("5. volume"), 0),
                )
                for day, values in series.items()
            ]
            return sorted(history, key=lambda point: point.date)
        except ProviderError as e:
            logger.warning("[AlphaVantageProvider] Error fetching historical data for %s: %s", symbol, e)
            return mock_data.wave_historical_data(symbol)


alphavantage_provider = AlphaVantageProvider()
