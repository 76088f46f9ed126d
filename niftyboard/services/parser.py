# niftyboard/services/parser.py

import math
import re
from typing import Any, Optional

_NUMBER_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def strip_exchange(symbol: str) -> str:
    """
    Drop an exchange prefix such as "NSE:" or "BSE:" from a symbol.
    """
    return symbol.split(":", 1)[1] if ":" in symbol else symbol


def yahoo_symbol(symbol: str) -> str:
    """NSE listings on Yahoo Finance carry the ".NS" suffix."""
    return f"{strip_exchange(symbol)}.NS"


def format_symbol_as_name(symbol: str) -> str:
    """
    Turn a raw symbol into something readable:
    "NSE:TATA.STEEL" -> "Tata Steel".
    """
    name = strip_exchange(symbol).replace(".", " ")
    return " ".join(word[:1].upper() + word[1:].lower() for word in name.split(" "))


def parse_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    """
    Lenient float parsing for upstream payloads.

    Accepts numbers and numeric strings with thousands separators or a trailing
    "%" ("1,234.50", "0.82%"). Returns `default` for None, empty, unparsable,
    NaN or infinite values.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        match = _NUMBER_PREFIX.match(str(value).strip().replace(",", ""))
        if not match:
            return default
        result = float(match.group(0))
    if math.isnan(result) or math.isinf(result):
        return default
    return result


def parse_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    parsed = parse_float(value)
    if parsed is None:
        return default
    return int(parsed)


def or_default(value: Optional[float], default: float) -> float:
    """Falsy-or-missing fallback: zero counts as missing, as upstream APIs use 0 for 'no data'."""
    return value if value else default
