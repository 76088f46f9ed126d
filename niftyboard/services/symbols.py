"""
Static symbol tables for Indian equities.
"""

from typing import Dict, List, Optional

NIFTY50_INDEX = "NIFTY 50"

NIFTY50_CONSTITUENTS: List[Dict[str, str]] = [
    {"symbol": "RELIANCE", "name": "Reliance Industries Ltd."},
    {"symbol": "TCS", "name": "Tata Consultancy Services Ltd."},
    {"symbol": "HDFCBANK", "name": "HDFC Bank Ltd."},
    {"symbol": "INFY", "name": "Infosys Ltd."},
    {"symbol": "HINDUNILVR", "name": "Hindustan Unilever Ltd."},
    {"symbol": "ICICIBANK", "name": "ICICI Bank Ltd."},
    {"symbol": "SBIN", "name": "State Bank of India"},
    {"symbol": "HDFC", "name": "Housing Development Finance Corporation Ltd."},
    {"symbol": "BHARTIARTL", "name": "Bharti Airtel Ltd."},
    {"symbol": "KOTAKBANK", "name": "Kotak Mahindra Bank Ltd."},
    {"symbol": "ITC", "name": "ITC Ltd."},
    {"symbol": "BAJFINANCE", "name": "Bajaj Finance Ltd."},
    {"symbol": "HCLTECH", "name": "HCL Technologies Ltd."},
    {"symbol": "AXISBANK", "name": "Axis Bank Ltd."},
    {"symbol": "WIPRO", "name": "Wipro Ltd."},
    {"symbol": "ASIANPAINT", "name": "Asian Paints Ltd."},
    {"symbol": "MARUTI", "name": "Maruti Suzuki India Ltd."},
    {"symbol": "LT", "name": "Larsen & Toubro Ltd."},
    {"symbol": "ULTRACEMCO", "name": "UltraTech Cement Ltd."},
    {"symbol": "TITAN", "name": "Titan Company Ltd."},
    {"symbol": "BAJAJFINSV", "name": "Bajaj Finserv Ltd."},
    {"symbol": "SUNPHARMA", "name": "Sun Pharmaceutical Industries Ltd."},
    {"symbol": "ADANIPORTS", "name": "Adani Ports and Special Economic Zone Ltd."},
    {"symbol": "TATAMOTORS", "name": "Tata Motors Ltd."},
    {"symbol": "NESTLEIND", "name": "Nestle India Ltd."},
    {"symbol": "TECHM", "name": "Tech Mahindra Ltd."},
    {"symbol": "JSWSTEEL", "name": "JSW Steel Ltd."},
    {"symbol": "TATASTEEL", "name": "Tata Steel Ltd."},
    {"symbol": "NTPC", "name": "NTPC Ltd."},
    {"symbol": "POWERGRID", "name": "Power Grid Corporation of India Ltd."},
    {"symbol": "M&M", "name": "Mahindra & Mahindra Ltd."},
    {"symbol": "BAJAJ-AUTO", "name": "Bajaj Auto Ltd."},
    {"symbol": "ONGC", "name": "Oil & Natural Gas Corporation Ltd."},
    {"symbol": "GRASIM", "name": "Grasim Industries Ltd."},
    {"symbol": "INDUSINDBK", "name": "IndusInd Bank Ltd."},
    {"symbol": "BPCL", "name": "Bharat Petroleum Corporation Ltd."},
    {"symbol": "HDFCLIFE", "name": "HDFC Life Insurance Company Ltd."},
    {"symbol": "CIPLA", "name": "Cipla Ltd."},
    {"symbol": "DIVISLAB", "name": "Divi's Laboratories Ltd."},
    {"symbol": "DRREDDY", "name": "Dr. Reddy's Laboratories Ltd."},
    {"symbol": "COALINDIA", "name": "Coal India Ltd."},
    {"symbol": "EICHERMOT", "name": "Eicher Motors Ltd."},
    {"symbol": "HEROMOTOCO", "name": "Hero MotoCorp Ltd."},
    {"symbol": "IOC", "name": "Indian Oil Corporation Ltd."},
    {"symbol": "SBILIFE", "name": "SBI Life Insurance Company Ltd."},
    {"symbol": "BRITANNIA", "name": "Britannia Industries Ltd."},
    {"symbol": "UPL", "name": "UPL Ltd."},
    {"symbol": "HINDALCO", "name": "Hindalco Industries Ltd."},
    {"symbol": "SHREECEM", "name": "Shree Cement Ltd."},
    {"symbol": "ADANIENT", "name": "Adani Enterprises Ltd."},
]

# Large caps queried when an exchange symbol listing is unavailable
DEFAULT_INDIAN_SYMBOLS = [
    "RELIANCE", "TCS", "HDFCBANK", "INFY", "ICICIBANK",
    "SBIN", "HINDUNILVR", "BAJFINANCE", "BHARTIARTL", "KOTAKBANK",
    "ASIANPAINT", "AXISBANK", "HDFC", "ITC", "TITAN",
    "HCLTECH", "MARUTI", "ULTRACEMCO", "BAJAJFINSV", "WIPRO",
]

_NAME_BY_SYMBOL = {item["symbol"]: item["name"] for item in NIFTY50_CONSTITUENTS}


def nifty50_name(symbol: str) -> Optional[str]:
    return _NAME_BY_SYMBOL.get(symbol)


def default_indian_symbols(exchange: str) -> List[str]:
    return [f"{exchange}:{sym}" for sym in DEFAULT_INDIAN_SYMBOLS]
