"""
records/dates.py
Lenient date parsing shared by the ingestion boundary and the period filters.
Never raises: anything that cannot be read as a date comes back as None.
"""
from datetime import date, datetime, timedelta
from typing import Any, Optional

_EXCEL_EPOCH = datetime(1899, 12, 30)

_FORMATS = (
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%d-%b-%Y",
    "%b %d, %Y",
)


def parse_date(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, (int, float)):
        # Spreadsheet serial day number
        if value != value or not 1 <= value < 2_958_466:
            return None
        return _EXCEL_EPOCH + timedelta(days=float(value))
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        return parsed.replace(tzinfo=None)
    except ValueError:
        pass
    for fmt in _FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
