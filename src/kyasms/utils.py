from __future__ import annotations
import math
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

from dateutil import parser as dateutil_parser
import dateparser

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

Recipients = Union[str, Iterable[str]]


def join_recipients(to: Recipients) -> str:
    """'229...' stays as-is, ['229...', '229...'] becomes '229...,229...'."""
    if isinstance(to, str):
        return to
    return ",".join(str(x) for x in to)


def clamp(value: int, maximum: int) -> int:
    return min(int(value), maximum)


def format_date(value: Union[str, date, None]) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return value.strftime(DATE_FORMAT)


def format_datetime(value: Union[str, datetime, None]) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return value.strftime(DATETIME_FORMAT)


def parse_schedule_date(text: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Accepts strings like:
    - "2025-09-01 09:00:00"
    - "tomorrow 9am"
    - "in 2 hours"
    - "1 Sep 2025 18:30"
    Returns a naive datetime (the provider applies the campaign timezone).
    """
    if not text:
        return None
    text = text.strip()
    settings = {"PREFER_DATES_FROM": "future"}
    if now is not None:
        settings["RELATIVE_BASE"] = now
    dt = dateparser.parse(text, settings=settings)
    if dt:
        return dt.replace(tzinfo=None)
    try:
        return dateutil_parser.parse(text).replace(tzinfo=None)
    except (ValueError, OverflowError):
        return None


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def top_or_data(raw: Any, key: str) -> Any:
    """
    raw[key], or raw["data"][key] when the top-level value is missing or
    empty. None when neither is set.
    """
    if not isinstance(raw, dict):
        return None
    value = raw.get(key)
    if value is None or value == "":
        data = raw.get("data")
        value = data.get(key) if isinstance(data, dict) else None
    return value


def to_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def to_number(value: Any, default: float = 0) -> float:
    """Finite number or `default`; inf and NaN (valid in Python's json) count as missing."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return number if math.isfinite(number) else default
