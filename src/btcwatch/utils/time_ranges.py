"""Chart time range utilities."""

from datetime import datetime

from dateutil.relativedelta import relativedelta

# Selector label -> lookback window. Windows are wider than the labels.
TIME_RANGES = {
    "1 D": relativedelta(days=7),
    "1 WK": relativedelta(days=28),
    "1 MO": relativedelta(months=6),
    "3 MO": relativedelta(months=18),
    "1 YR": relativedelta(years=6),
}

DEFAULT_TIME_RANGE = "1 MO"


def get_range_start(time_range: str, now: datetime) -> datetime:
    """Get the earliest moment shown for a chart time range.

    Args:
        time_range: One of the TIME_RANGES keys; unknown values fall back to
            the default range
        now: Reference time (end of the range)

    Returns:
        Start of the range
    """
    delta = TIME_RANGES.get(time_range.strip().upper(), TIME_RANGES[DEFAULT_TIME_RANGE])
    return now - delta
